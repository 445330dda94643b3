"""Constants, errors, results and timestamp helpers shared by every layer."""

from lms.core.constants import (
    UNASSIGNED_ID,
    EngineTarget,
    ErrorKind,
    TimestampPattern,
)
from lms.core.exceptions import (
    LibraryDataError,
    GatewayError,
    ConnectionFailedError,
    TargetMismatchError,
    StatementFailedError,
    TimestampParseError,
    RecordValidationError,
    PersistenceFailed,
)
from lms.core.results import PersistError, PersistResult

__all__ = [
    "UNASSIGNED_ID",
    "EngineTarget",
    "ErrorKind",
    "TimestampPattern",
    "LibraryDataError",
    "GatewayError",
    "ConnectionFailedError",
    "TargetMismatchError",
    "StatementFailedError",
    "TimestampParseError",
    "RecordValidationError",
    "PersistenceFailed",
    "PersistError",
    "PersistResult",
]
