"""Database package."""

from lms.database.gateway import (
    Gateway,
    InsertOutcome,
    get_gateway,
    reset_gateway,
)
from lms.database.schema import build_metadata, create_all_tables, drop_all_tables

__all__ = [
    "Gateway",
    "InsertOutcome",
    "get_gateway",
    "reset_gateway",
    "build_metadata",
    "create_all_tables",
    "drop_all_tables",
]
