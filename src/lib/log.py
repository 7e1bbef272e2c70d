"""
Centralized logging using Loguru with context-aware verbosity.

This module provides a LOG() function that respects the current ProgramState's
verbosity level without requiring explicit state passing, and the Diagnostics
sink that the directive engine reports recoverable conditions to.

Usage:
    from lib.log import LOG, state_connectToLogger, Diagnostics

    # At start of pipeline function:
    state_connectToLogger(state)

    # Anywhere in that context:
    LOG("This message appears if verbosity >= 1", level=1)
    LOG("Debug details appear if verbosity >= 2", level=2)

    # Inside the engine:
    diagnostics = Diagnostics()
    diagnostics.warn(DiagnosticKind.UNCLOSED_FILTER_TAG, "Unclosed tag")
    diagnostics.records  # -> [Diagnostic(...)]
"""

from loguru import logger
from typing import Any, List, Optional
from contextvars import ContextVar
import sys

from ..models.diagnostics import Diagnostic, DiagnosticKind

# Context variable to hold current ProgramState
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

# Configure loguru with content-factory-specific format
logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <7}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()  # Remove default handler
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a ProgramState to the logging context.

    Call this at the start of each pipeline function to make the state's
    verbosity setting available to LOG() calls throughout that context.

    Args:
        state: ProgramState instance with verbosity attribute
    """
    _program_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru metadata

    Verbosity levels:
        1 = Normal output (default)
        2 = Verbose (-v)
        3 = Debug (-vv or higher)
    """
    state = _program_state.get()

    if state and hasattr(state, 'verbosity') and state.verbosity >= level:
        logger.debug(message, **kwargs)


class Diagnostics:
    """
    Sink for conditions the engine recovers from

    Every reported condition is kept in ``records`` so callers and tests can
    inspect what happened without capturing process output. When ``echo`` is
    set the condition is also forwarded to loguru, bound with its kind.
    Informational messages go through ``info`` and are only emitted when
    ``verbose`` is set.
    """

    def __init__(self, echo: bool = True, verbose: bool = False) -> None:
        self.echo = echo
        self.verbose = verbose
        self.records: List[Diagnostic] = []

    def warn(self, kind: DiagnosticKind, message: str, path: Optional[str] = None) -> None:
        """Record a recoverable condition at warning level"""
        self.records.append(Diagnostic(kind=kind, message=message, path=path))
        if self.echo:
            logger.bind(kind=kind.value).warning(message)

    def error(self, kind: DiagnosticKind, message: str, path: Optional[str] = None) -> None:
        """Record a failure at error level (always emitted when echoing)"""
        self.records.append(Diagnostic(kind=kind, message=message, path=path))
        if self.echo:
            logger.bind(kind=kind.value).error(message)

    def info(self, message: str) -> None:
        """Progress message, shown only in verbose mode"""
        if self.echo and self.verbose:
            logger.info(message)

    def of_kind(self, kind: DiagnosticKind) -> List[Diagnostic]:
        """Records of a single kind, in report order"""
        return [record for record in self.records if record.kind == kind]

    def clear(self) -> None:
        self.records.clear()
