"""Error channel shared by the front-end layer.

``KnownError`` is the single reportable error kind: its message has already
been written for the user, so callers display it and stop. Anything else that
escapes this package is unexpected and must propagate with its traceback.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from rich.console import Console

logger = logging.getLogger("localize_ts.errors")


class KnownError(Exception):
    """An error whose message is already explained and ready for display.

    Raised for configuration problems (unreadable or malformed tsconfig,
    invalid resolved options) and for internal consistency checks that fail.
    Never wrap it or attach more diagnosis.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ErrorKind(Enum):
    """Variant tag for ``ErrorReport``."""

    KNOWN = "known"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class ErrorReport:
    """Tagged result of classifying a failure.

    Attributes:
        kind: ``KNOWN`` for ``KnownError``, ``UNEXPECTED`` otherwise.
        message: Pre-rendered message for display.
        exception: The original exception, traceback intact.
    """

    kind: ErrorKind
    message: str
    exception: BaseException

    @property
    def is_known(self) -> bool:
        return self.kind is ErrorKind.KNOWN


def classify_error(exc: BaseException) -> ErrorReport:
    """Split a failure into the known and unexpected variants."""
    if isinstance(exc, KnownError):
        return ErrorReport(ErrorKind.KNOWN, exc.message, exc)
    return ErrorReport(ErrorKind.UNEXPECTED, f"{type(exc).__name__}: {exc}", exc)


def report_error(exc: BaseException, console: Optional[Console] = None) -> str:
    """Display a known error on stderr, re-raise anything else unchanged.

    Args:
        exc: The failure caught at the generator's top level.
        console: Rich console to print to (defaults to stderr).

    Returns:
        str: The message that was displayed.

    Raises:
        BaseException: ``exc`` itself when it is not a ``KnownError``.
    """
    report = classify_error(exc)
    if not report.is_known:
        raise exc
    logger.debug("Reporting known error: %s", report.message)
    console = console or Console(stderr=True)
    console.print(report.message, markup=False, highlight=False, soft_wrap=True)
    return report.message


__all__ = ["KnownError", "ErrorKind", "ErrorReport", "classify_error", "report_error"]
