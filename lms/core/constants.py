"""
Application-wide constants.

Centralize magic strings and configuration values here.
"""

from enum import Enum
from typing import Optional


# ========================================
# Identity
# ========================================

UNASSIGNED_ID = -1
"""Placeholder identity for records the store has not saved yet."""

DEFAULT_DATABASE_NAME = "Library_Management_System"


# ========================================
# Engine Targets
# ========================================

class EngineTarget(str, Enum):
    """
    Relational engines the gateway can be pointed at.

    Usage:
        target = EngineTarget("mysql")
        target.driver        # "mysql+pymysql"
        target.default_port  # 3306
    """

    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    MSSQL = "mssql"
    SQLITE = "sqlite"
    """Local file database, used for development and the test suite."""

    @property
    def driver(self) -> str:
        """SQLAlchemy ``dialect+driver`` name for this engine."""
        return _DRIVERS[self]

    @property
    def default_port(self) -> Optional[int]:
        return _DEFAULT_PORTS.get(self)


_DRIVERS = {
    EngineTarget.POSTGRESQL: "postgresql+psycopg2",
    EngineTarget.MYSQL: "mysql+pymysql",
    EngineTarget.MSSQL: "mssql+pyodbc",
    EngineTarget.SQLITE: "sqlite",
}

_DEFAULT_PORTS = {
    EngineTarget.POSTGRESQL: 5432,
    EngineTarget.MYSQL: 3306,
    EngineTarget.MSSQL: 1433,
}


# ========================================
# Error Kinds
# ========================================

class ErrorKind(str, Enum):
    """Categories of failure reported by the data-access layer."""

    CONNECTION = "connection"
    """Store unreachable, credentials rejected, or connection lost."""

    STATEMENT = "statement"
    """Malformed SQL, parameter mismatch, or constraint violation."""

    PARSE = "parse"
    """Timestamp text does not match the expected pattern."""

    VALIDATION = "validation"
    """Record fields fail the optional pre-persistence checks."""


# ========================================
# Timestamp Patterns
# ========================================

class TimestampPattern(str, Enum):
    """
    Display/parse patterns for offset-aware timestamps.

    Examples (for 2024-01-31 10:00:00 at UTC+01:00):
        MACHINE_LONG_OFFSET   "2024-01-31 10:00:00 GMT+01:00"
        MACHINE_SHORT_OFFSET  "2024-01-31 10:00:00 +01:00"
        HUMAN_LONG            "Wednesday, Jan 31, 2024 10:00:00 GMT+01:00"

    A zero offset renders as "GMT" in the long forms and "Z" in the short one.
    """

    MACHINE_LONG_OFFSET = "machine_long_offset"
    MACHINE_SHORT_OFFSET = "machine_short_offset"
    HUMAN_LONG = "human_long"


DISPLAY_PATTERN = TimestampPattern.HUMAN_LONG
"""Pattern used when rendering records for humans."""

NULL_DISPLAY = "NULL"
