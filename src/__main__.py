#!/usr/bin/env python3
"""
smartyfmt - Directive-aware formatter for Smarty templates

Formats every template matching a glob under inputdir and writes the
result to the same relative path under outputdir.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Usage:
    smartyfmt inputdir/ outputdir/ [--pattern '**/*.tpl'] [--tabSize 4] [--useTabs]

Examples:
    # Format all templates with two-space indentation
    smartyfmt templates/ formatted/ --tabSize 2

    # Only report which templates are not formatted (exit 1 if any)
    smartyfmt templates/ /tmp/out --check

    # Verbose output
    smartyfmt templates/ formatted/ -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import Formatter, __version__, LOG, state_connectToLogger, template_connectToLogger
from .models import FormattingOptions, ProgramState, pipeline


DISPLAY_TITLE = """
  smartyfmt
  Directive-aware Smarty template formatter
"""

RESULT_UNCHANGED = "unchanged"
RESULT_FORMATTED = "formatted"

# Define CLI arguments
parser = ArgumentParser(
    description="smartyfmt - Directive-aware formatter for Smarty templates",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--pattern",
    default=appsettings.default_pattern,
    type=str,
    help="Glob selecting the templates to format (relative to inputdir)",
)

parser.add_argument("--tabSize", default=4, type=int, help="Width of one indent unit")

parser.add_argument(
    "--useTabs", default=False, action="store_true", help="Indent with tabs instead of spaces"
)

parser.add_argument(
    "--check",
    default=False,
    action="store_true",
    help="Report templates that would change without writing anything; exit 1 if any",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate the environment.

    Verifies that inputdir exists and the indent width is usable, then
    creates the output directory unless running in check mode.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with envOK set

    Exits:
        1 if inputdir is missing or tabSize is not positive
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    if not state.inputdir or not state.inputdir.is_dir():
        print(f"Error: Input directory not found: {state.inputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    if state.tabSize < 1:
        print(f"Error: --tabSize must be positive, got {state.tabSize}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    if not state.check:
        state.outputdir.mkdir(parents=True, exist_ok=True)
        LOG(f"Output directory: {state.outputdir}", level=2)

    state.envOK = True
    return state


def sources_collect(inputstate: ProgramState) -> ProgramState:
    """
    Find the templates to format.

    Args:
        inputstate: Program state with inputdir and pattern

    Returns:
        ProgramState with sourceFiles set (sorted, files only)
    """

    state = inputstate.copy()

    LOG(f"Collecting templates matching {state.pattern}...", level=1)
    state.sourceFiles = sorted(path for path in state.inputdir.glob(state.pattern) if path.is_file())
    LOG(f"Found {len(state.sourceFiles)} templates", level=2)
    return state


def sources_format(inputstate: ProgramState) -> ProgramState:
    """
    Format every collected template.

    A template that cannot be read or written is recorded as an error and
    the run continues with the next one.

    Args:
        inputstate: Program state with sourceFiles

    Returns:
        ProgramState with formatResults set
    """

    state = inputstate.copy()

    formatter = Formatter()
    options = FormattingOptions(tabSize=state.tabSize, insertSpaces=not state.useTabs)
    results = {}

    for source_file in state.sourceFiles:
        relative = source_file.relative_to(state.inputdir)
        with template_connectToLogger(str(relative)):
            try:
                source = source_file.read_text(encoding="utf-8")
                formatted = formatter.format(source, options)
                results[str(relative)] = RESULT_UNCHANGED if formatted == source else RESULT_FORMATTED
                LOG(results[str(relative)], level=2)

                if not state.check:
                    target = state.outputdir / relative
                    target.parent.mkdir(parents=True, exist_ok=True)
                    target.write_text(formatted, encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                print(f"Error formatting {relative}: {e}", file=sys.stderr)
                results[str(relative)] = f"error: {e}"

    state.formatResults = results
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display a summary of the run.

    Args:
        inputstate: Program state with formatResults populated

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if any template failed, or in check mode if any would change
    """
    state: ProgramState = inputstate.copy()
    results = state.formatResults

    errors = [name for name, result in results.items() if result.startswith("error")]
    changed = [name for name, result in results.items() if result == RESULT_FORMATTED]

    if state.check:
        for name in changed:
            print(f"would reformat {name}")
    LOG(f"{len(results)} templates: {len(changed)} changed, {len(errors)} errors", level=1)

    if errors or (state.check and changed):
        sys.exit(1)
    return state


@chris_plugin(
    parser=parser,
    title="smartyfmt - Smarty template formatter",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - format the Smarty templates under inputdir.

    Orchestrates the pipeline:
        1. env_check: Validate paths and options
        2. sources_collect: Find templates matching --pattern
        3. sources_format: Format each template
        4. results_report: Summarize, set the exit status

    Args:
        options: CLI arguments from argparse
        inputdir: Directory containing templates
        outputdir: Directory where formatted templates are written

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    state_connectToLogger(state)

    pipeline(state, env_check, sources_collect, sources_format, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
