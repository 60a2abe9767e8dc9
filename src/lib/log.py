"""
Centralized logging using Loguru with context-aware verbosity.

LOG() respects the verbosity of the ProgramState connected to the current
context, so the formatting passes can log without having state passed in.
Outside a CLI run no state is connected and LOG() stays silent, which keeps
the library quiet when it is embedded.

Every record also carries the template being formatted (or '-'), bound by
template_connectToLogger() around the work on one file.

Usage:
    from smartyfmt.lib.log import LOG, state_connectToLogger, template_connectToLogger

    state_connectToLogger(state)
    with template_connectToLogger("pages/index.tpl"):
        LOG("Tokenized 40 directives", level=2)
"""

import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, Optional

from loguru import logger

_program_state: ContextVar[Optional[Any]] = ContextVar("program_state", default=None)
_template_name: ContextVar[str] = ContextVar("template_name", default="-")

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<magenta>{extra[template]: <24}</magenta> │ "
    "<cyan>{module}:{line}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.configure(extra={"template": "-"})
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a ProgramState to the logging context.

    Args:
        state: ProgramState instance with verbosity attribute
    """
    _program_state.set(state)


@contextmanager
def template_connectToLogger(name: str) -> Iterator[None]:
    """Tag every record logged inside the block with a template name"""
    token = _template_name.set(name)
    try:
        yield
    finally:
        _template_name.reset(token)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru metadata

    Library passes log at 2 (per-template summaries) and 3 (recoveries from
    malformed input, one record per occurrence).
    """
    state = _program_state.get()

    if state and getattr(state, "verbosity", 0) >= level:
        logger.bind(template=_template_name.get()).opt(depth=1).debug(message, **kwargs)
