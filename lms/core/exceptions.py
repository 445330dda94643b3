"""
Exception hierarchy for the data-access layer.

Every error carries an ``ErrorKind`` so persistence results can report a
structured failure instead of a bare message.
"""

from typing import Iterable, List

from lms.core.constants import ErrorKind


class LibraryDataError(Exception):
    """Base class for all errors raised by this package."""

    kind: ErrorKind = ErrorKind.STATEMENT


class GatewayError(LibraryDataError):
    """Raised by the connection gateway."""


class ConnectionFailedError(GatewayError):
    """The backing store could not be reached, or the connection was lost."""

    kind = ErrorKind.CONNECTION


class TargetMismatchError(GatewayError):
    """A gateway bound to one target was asked to run against another."""

    kind = ErrorKind.CONNECTION

    def __init__(self, bound: str, requested: str):
        super().__init__(
            f"Gateway is connected to {bound}; refusing to switch to {requested}. "
            "Close the gateway first or use a separate Gateway instance."
        )
        self.bound = bound
        self.requested = requested


class StatementFailedError(GatewayError):
    """A statement was rejected by the store or could not be bound."""

    kind = ErrorKind.STATEMENT


class TimestampParseError(LibraryDataError, ValueError):
    """Timestamp text does not match the requested pattern."""

    kind = ErrorKind.PARSE


class RecordValidationError(LibraryDataError, ValueError):
    """
    A record failed its optional validation step.

    Attributes:
        problems: One human-readable line per failed check
    """

    kind = ErrorKind.VALIDATION

    def __init__(self, record_type: str, problems: Iterable[str]):
        self.problems: List[str] = list(problems)
        super().__init__(f"Invalid {record_type}: " + "; ".join(self.problems))


class PersistenceFailed(LibraryDataError):
    """Raised by ``PersistResult.unwrap()`` for a failed result."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
