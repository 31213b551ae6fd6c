"""
Centralized logging using Loguru with context-aware verbosity.

This module provides a LOG() function that respects the current
SynthesisState's verbosity level without requiring explicit state passing.

packsynth is a library: importing it never touches the host's loguru
handlers, and its records stay disabled until the host opts in with
logging_enable() (or logger.enable("packsynth") for its own sinks).

Usage:
    from packsynth.lib.log import LOG, logging_enable, state_connectToLogger

    # Once, in the host application:
    logging_enable()

    # At start of a synthesis:
    state_connectToLogger(state)

    # Anywhere in that context:
    LOG("This message appears if verbosity >= 1", level=1)
    LOG("Debug details appear if verbosity >= 2", level=2)
    LOG("Verbose trace appears if verbosity >= 3", level=3)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

LOGGER_NAME = 'packsynth'

# Context variable to hold current SynthesisState
_synthesis_state: ContextVar[Optional[Any]] = ContextVar('synthesis_state', default=None)

# packsynth-specific format for the opt-in console sink
logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)


def logging_enable(sink: Any = sys.stderr, level: str = "DEBUG") -> int:
    """
    Turn on packsynth log output.

    Args:
        sink: Any loguru sink (stream, path, callable)
        level: Minimum loguru level for the sink

    Returns:
        loguru handler id, for logging_disable()
    """
    logger.enable(LOGGER_NAME)
    return logger.add(sink, format=logger_format, level=level, filter=LOGGER_NAME)


def logging_disable(handler_id: Optional[int] = None) -> None:
    """Silence packsynth again, removing the sink logging_enable() added"""
    logger.disable(LOGGER_NAME)
    if handler_id is not None:
        logger.remove(handler_id)


def state_connectToLogger(state: Any) -> None:
    """
    Connect a SynthesisState to the logging context.

    Call this at the start of a synthesis to make the state's verbosity
    setting available to LOG() calls throughout that context.

    Args:
        state: SynthesisState instance with verbosity attribute
    """
    _synthesis_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru metadata

    Verbosity levels:
        0 = Silent
        1 = Normal output (default)
        2 = Verbose (which tools and config files were picked)
        3 = Debug (swallowed failures, merged payloads)
    """
    state = _synthesis_state.get()

    if state and hasattr(state, 'verbosity') and state.verbosity >= level:
        logger.opt(depth=1).debug(message, **kwargs)
