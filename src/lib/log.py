"""
Centralized logging using Loguru with context-aware verbosity.

The conversion engine calls LOG() freely; messages only reach stderr when
a ProgramState (or anything with a ``verbosity`` attribute) has been
connected to the current context and its verbosity is high enough. Used as
a library, with nothing connected, the engine stays silent.

Usage:
    from mdtransform.lib.log import LOG, state_connectToLogger

    state_connectToLogger(state)        # e.g. at the start of the CLI
    LOG("Imported 12 blocks", level=2)  # shown with -v and above
"""

import sys
from contextvars import ContextVar
from typing import Any, Optional

from loguru import logger

# Context variable holding whatever drives verbosity (normally a ProgramState)
_program_state: ContextVar[Optional[Any]] = ContextVar("program_state", default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{module: <12}</cyan>:"
    "<cyan>{function: <22}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Make ``state.verbosity`` govern LOG() calls in the current context.

    Args:
        state: ProgramState instance (any object with a verbosity attribute),
               or None to silence logging again
    """
    _program_state.set(state)


def verbosity_get() -> int:
    """Verbosity of the connected state, 0 when nothing is connected"""
    state = _program_state.get()
    return getattr(state, "verbosity", 0) if state is not None else 0


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if the connected state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru arguments

    Verbosity levels:
        1 = Progress of the CLI pipeline
        2 = Per-conversion summaries, shortcuts fired
        3 = Per-match tracing inside the matchers
    """
    if verbosity_get() >= level:
        logger.opt(depth=1).debug(message, **kwargs)
