"""
Table definitions for bootstrapping an empty database.

Entities never go through these objects: they write SQL text against the
gateway. The definitions only exist so development and test databases can
be created with the column names that SQL text expects.
"""

from typing import Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)
from sqlalchemy.engine import Engine


def build_metadata(schema: Optional[str] = None) -> MetaData:
    """Describe the four library tables, optionally inside ``schema``."""
    metadata = MetaData(schema=schema)
    prefix = f"{schema}." if schema else ""

    Table(
        "author",
        metadata,
        Column("author_id", Integer, primary_key=True, autoincrement=True),
        Column("first_name", String(100), nullable=False),
        Column("last_name", String(100), nullable=False),
        Column("date_added", DateTime(timezone=True)),
    )

    Table(
        "user",
        metadata,
        Column("user_id", Integer, primary_key=True, autoincrement=True),
        Column("first_name", String(100), nullable=False),
        Column("last_name", String(100), nullable=False),
        Column("date_added", DateTime(timezone=True)),
        Column("booking_record", Boolean, nullable=False, default=True),
    )

    Table(
        "book",
        metadata,
        Column("book_id", Integer, primary_key=True, autoincrement=True),
        Column("title", String(255), nullable=False),
        Column("description", Text),
        Column("number_of_pages", Integer),
        Column("date_added", DateTime(timezone=True)),
        Column("genre", String(100)),
        Column("author_id", Integer, ForeignKey(f"{prefix}author.author_id")),
    )

    Table(
        "borrow",
        metadata,
        Column("borrowing_id", Integer, primary_key=True, autoincrement=True),
        Column("book_id", Integer, ForeignKey(f"{prefix}book.book_id"), nullable=False),
        Column("user_id", Integer, ForeignKey(f"{prefix}user.user_id"), nullable=False),
        Column("borrowing_date", DateTime(timezone=True)),
        Column("expected_return_date", DateTime(timezone=True)),
        Column("actual_return_date", DateTime(timezone=True), nullable=True),
    )

    return metadata


def create_all_tables(engine: Engine, schema: Optional[str] = None) -> None:
    """Create all tables that do not exist yet."""
    build_metadata(schema).create_all(bind=engine)


def drop_all_tables(engine: Engine, schema: Optional[str] = None) -> None:
    """Drop all tables in the database."""
    build_metadata(schema).drop_all(bind=engine)
