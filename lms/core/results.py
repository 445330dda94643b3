"""
Outcome of a persistence call.

``PersistResult`` is either a success holding the affected-row count or a
failure holding a structured error. The two never share a channel: a caller
checks ``ok`` (or calls ``unwrap()``) instead of sniffing a string.
"""

from dataclasses import dataclass
from typing import Optional

from lms.core.constants import ErrorKind
from lms.core.exceptions import LibraryDataError, PersistenceFailed


@dataclass(frozen=True)
class PersistError:
    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


@dataclass(frozen=True)
class PersistResult:
    """
    Success (``rows_affected``) or failure (``error``), never both.

    Example:
        result = author.add_to_database()
        if result.ok:
            print(f"{result.rows_affected} row(s) written")
        else:
            print(f"Failed ({result.error.kind}): {result.error.message}")
    """

    rows_affected: Optional[int] = None
    error: Optional[PersistError] = None

    def __post_init__(self):
        if (self.rows_affected is None) == (self.error is None):
            raise ValueError("PersistResult needs exactly one of rows_affected or error")

    @classmethod
    def success(cls, rows_affected: int) -> "PersistResult":
        return cls(rows_affected=rows_affected)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "PersistResult":
        return cls(error=PersistError(kind=kind, message=message))

    @classmethod
    def from_exception(cls, exc: LibraryDataError) -> "PersistResult":
        return cls.failure(exc.kind, str(exc))

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> int:
        """
        Return the affected-row count.

        Raises:
            PersistenceFailed: If this result is a failure
        """
        if self.error is not None:
            raise PersistenceFailed(self.error.kind, self.error.message)
        return self.rows_affected

    def __bool__(self) -> bool:
        return self.ok

    def __str__(self) -> str:
        if self.error is not None:
            return str(self.error)
        return str(self.rows_affected)
