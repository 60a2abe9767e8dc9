"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

import dataclasses
from argparse import Namespace
from dataclasses import dataclass, field
from functools import reduce
from pathlib import Path
from typing import Callable, Dict, List, Optional, Type, TypeVar


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the formatting pipeline (state bus pattern).

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, pattern, tabSize, useTabs, check
        - env_check: envOK
        - sources_collect: sourceFiles
        - sources_format: formatResults
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory searched for templates
        outputdir: Directory receiving formatted templates
        verbosity: Logging verbosity level (1-3)
        pattern: Glob selecting templates, relative to inputdir
        tabSize: Width of one indent unit
        useTabs: Indent with tabs instead of spaces
        check: Only report templates that would change, write nothing
        envOK: Environment validation passed
        sourceFiles: Templates found under inputdir
        formatResults: Per-template outcome, keyed by path relative to inputdir
            ("unchanged", "formatted", or "error: <message>")
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    pattern: str = field(default="**/*.tpl")
    tabSize: int = field(default=4)
    useTabs: bool = field(default=False)
    check: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    sourceFiles: List[Path] = field(default_factory=list)
    formatResults: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Options that are not ProgramState fields are ignored.

        Args:
            options: Parsed CLI arguments (pattern, tabSize, etc.)
            inputdir: Directory containing templates
            outputdir: Directory for formatted output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered_options = {k: v for k, v in vars(options).items() if k in valid_fields}
        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}
        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            sources_collect,
            sources_format,
            results_report
        )

    This is equivalent to:
        results_report(sources_format(sources_collect(env_check(initial_state))))
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
