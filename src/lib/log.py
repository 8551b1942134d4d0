"""
Centralized logging using Loguru with context-aware verbosity.

LOG() respects the verbosity of whatever ProgramState is attached to the
current context, so the segmenter, dispatcher and reconstructor can log
without having state passed through their signatures.

Verbosity levels used across the pipeline:
    1 = file-level progress (default)
    2 = per-block outcomes (formatted, skipped, failed)
    3 = segmentation trace (every block opened and closed)

Usage:
    from mdprettify.lib.log import LOG, state_connectToLogger

    state_connectToLogger(state)
    LOG("Formatting README.md", level=1)
    LOG("Block 3 failed: SyntaxError", level=2)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

# Context variable to hold current ProgramState
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()  # Remove default handler
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a ProgramState (or anything with a ``verbosity`` attribute)
    to the logging context.

    Args:
        state: Object carrying an integer ``verbosity``
    """
    _program_state.set(state)


def verbosity_current() -> int:
    """Verbosity of the connected state, 0 when nothing is connected"""
    state = _program_state.get()
    return getattr(state, 'verbosity', 0) if state is not None else 0


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru formatting arguments
    """
    if verbosity_current() >= level:
        logger.opt(depth=1).debug(message, **kwargs)


def LOG_error(message: str, **kwargs: Any) -> None:
    """Log an error regardless of verbosity"""
    logger.opt(depth=1).error(message, **kwargs)
