"""
Connection Gateway
==================

Owns one lazily-opened database connection and runs parameterized SQL text
through it.

SQL is written with positional ``?`` placeholders and parameters are bound
in order, whatever the engine's native parameter style is:

    with Gateway() as gateway:
        rows = gateway.execute_query(
            "SELECT first_name FROM author WHERE author_id = ?", 7
        )
        count = gateway.execute_update(
            "UPDATE author SET last_name = ? WHERE author_id = ?", "Austen", 7
        )

Every statement runs in its own auto-committed unit of work and is released
before the call returns. A gateway is bound to a single target URL for as
long as its connection is open.
"""

import logging
import os
import re
from datetime import datetime
from itertools import count
from typing import Any, Dict, NamedTuple, Optional, Sequence, Tuple, Union

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import URL, Connection, Engine, Row, make_url
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from lms.config import Settings, get_settings
from lms.core.exceptions import (
    ConnectionFailedError,
    StatementFailedError,
    TargetMismatchError,
)

logger = logging.getLogger(__name__)

Target = Union[str, URL, None]

# A quoted string literal, or a bare positional placeholder
_PLACEHOLDER_RE = re.compile(r"'(?:[^']|'')*'|\?")


class InsertOutcome(NamedTuple):
    rows_affected: int
    generated_id: Optional[int]


def to_named_parameters(sql: str, params: Sequence[Any]) -> Tuple[str, Dict[str, Any]]:
    """
    Rewrite ``?`` placeholders as ``:p1, :p2, ...`` bind names.

    Question marks inside quoted string literals are left alone.

    Raises:
        StatementFailedError: If the placeholder and parameter counts differ
    """
    numbering = count(1)
    names = []

    def _replace(match):
        if match.group(0) != "?":
            return match.group(0)
        name = f"p{next(numbering)}"
        names.append(name)
        return f":{name}"

    rewritten = _PLACEHOLDER_RE.sub(_replace, sql)
    if len(names) != len(params):
        raise StatementFailedError(
            f"Statement expects {len(names)} parameter(s), got {len(params)}"
        )
    return rewritten, dict(zip(names, params))


class Gateway:
    """
    Single-connection gateway to the configured store.

    Not safe for concurrent use: callers that share a gateway across threads
    must serialize access themselves.

    Attributes:
        settings: Settings the default target and engine options come from
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._engine: Optional[Engine] = None
        self._engine_url: Optional[URL] = None
        self._connection: Optional[Connection] = None
        self._url: Optional[URL] = None

    # ========================================
    # Lifecycle
    # ========================================

    def _resolve(self, target: Target) -> URL:
        if target is None:
            return self.settings.connection_url()
        return make_url(target)

    def _build_engine(self, url: URL) -> Engine:
        if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
            db_dir = os.path.dirname(url.database)
            if db_dir and not os.path.exists(db_dir):
                os.makedirs(db_dir, exist_ok=True)

        engine = create_engine(url, echo=self.settings.app_debug)

        if url.get_backend_name() == "sqlite":
            @event.listens_for(engine, "connect")
            def set_sqlite_pragma(dbapi_conn, connection_record):
                cursor = dbapi_conn.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

        return engine

    @property
    def engine(self) -> Engine:
        """
        Engine for the bound target (or the configured one if unbound).

        Creating the engine neither opens a connection nor binds the
        gateway to a target.
        """
        if self._engine is None:
            self._engine_url = self._url or self._resolve(None)
            self._engine = self._build_engine(self._engine_url)
        return self._engine

    @property
    def url(self) -> Optional[URL]:
        """Bound target; ``None`` until a connection succeeds."""
        return self._url

    @property
    def is_connected(self) -> bool:
        return self._connection is not None and not self._connection.closed

    def _discard_engine(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._engine_url = None

    def connect(self, target: Target = None) -> Connection:
        """
        Open the connection if none is open, and return it.

        Only a successful connection binds the gateway to ``target``.

        Args:
            target: URL to connect to (default: the configured one)

        Returns:
            The open connection (reused when already connected)

        Raises:
            TargetMismatchError: If bound to a different target
            ConnectionFailedError: If the store is unreachable or rejects
                the credentials
        """
        url = self._resolve(target)

        if self._url is not None and url != self._url:
            raise TargetMismatchError(
                self._url.render_as_string(hide_password=True),
                url.render_as_string(hide_password=True),
            )

        if self.is_connected:
            return self._connection

        safe_url = url.render_as_string(hide_password=True)
        try:
            if self._engine is not None and self._engine_url != url:
                self._discard_engine()
            if self._engine is None:
                self._engine = self._build_engine(url)
                self._engine_url = url
            self._connection = self._engine.connect()
        except (SQLAlchemyError, OSError) as err:
            self._connection = None
            self._discard_engine()
            logger.warning("Could not connect to %s: %s", safe_url, err)
            raise ConnectionFailedError(f"Could not connect to {safe_url}: {err}") from err

        self._url = url
        logger.info("Connected to %s", safe_url)
        return self._connection

    def close(self) -> None:
        """
        Release the connection and engine.

        Errors raised while releasing are logged, never propagated. Calling
        ``close()`` on a closed gateway does nothing.
        """
        try:
            if self._connection is not None:
                self._connection.close()
            if self._engine is not None:
                self._engine.dispose()
        except SQLAlchemyError:
            logger.exception("Error while closing the database connection")
        finally:
            if self._url is not None:
                logger.info("Closed connection to %s", self._url.render_as_string(hide_password=True))
            self._connection = None
            self._engine = None
            self._engine_url = None
            self._url = None

    def __enter__(self) -> "Gateway":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ========================================
    # Statements
    # ========================================

    def _run(self, sql: str, params: Sequence[Any], target: Target, fetch: bool):
        connection = self.connect(target)
        if self._url.get_backend_name() == "sqlite":
            # SQLite has no datetime type; store ISO text that reads back losslessly
            params = [p.isoformat() if isinstance(p, datetime) else p for p in params]
        statement, bound = to_named_parameters(sql, params)
        logger.debug("Executing %s with %d parameter(s)", sql, len(bound))

        try:
            with connection.begin():
                result = connection.execute(text(statement), bound)
                try:
                    if fetch:
                        return result.all()
                    return InsertOutcome(result.rowcount, self._generated_id(result))
                finally:
                    result.close()
        except DBAPIError as err:
            if err.connection_invalidated:
                logger.warning("Connection lost while executing statement: %s", err)
                self.close()
                raise ConnectionFailedError(f"Connection lost: {err.orig or err}") from err
            logger.warning("Statement failed: %s", err)
            raise StatementFailedError(str(err.orig or err)) from err
        except SQLAlchemyError as err:
            logger.warning("Statement failed: %s", err)
            raise StatementFailedError(str(err)) from err

    def _generated_id(self, result) -> Optional[int]:
        if not self.engine.dialect.postfetch_lastrowid:
            return None
        try:
            rowid = result.lastrowid
        except (AttributeError, SQLAlchemyError):
            return None
        return int(rowid) if rowid else None

    def execute_query(self, sql: str, *params: Any, target: Target = None) -> Sequence[Row]:
        """
        Run a SELECT and return every row.

        The rows are fully buffered, so the returned sequence can be indexed
        and walked in either direction after the statement is released.

        Raises:
            StatementFailedError: Malformed SQL, bad parameters, or a store error
            ConnectionFailedError: Store unreachable or connection lost
        """
        return self._run(sql, params, target, fetch=True)

    def execute_update(self, sql: str, *params: Any, target: Target = None) -> int:
        """
        Run an INSERT, UPDATE or DELETE and return the affected-row count.

        Raises:
            StatementFailedError: Malformed SQL, bad parameters, or a store error
            ConnectionFailedError: Store unreachable or connection lost
        """
        return self._run(sql, params, target, fetch=False).rows_affected

    def execute_insert(self, sql: str, *params: Any, target: Target = None) -> InsertOutcome:
        """
        Run an INSERT and return the affected-row count with the generated key.

        ``generated_id`` is ``None`` when the driver does not report the key
        of the inserted row (PostgreSQL, for one).
        """
        return self._run(sql, params, target, fetch=False)

    # ========================================
    # Identifiers
    # ========================================

    def qualified(self, table: str) -> str:
        """
        Quote ``table`` for the bound dialect and prefix the configured schema.

        Example:
            gateway.qualified("user")   # '"user"' on PostgreSQL
        """
        preparer = self.engine.dialect.identifier_preparer
        name = preparer.quote(table)
        if self.settings.db_schema:
            return f"{preparer.quote_schema(self.settings.db_schema)}.{name}"
        return name


_default_gateway: Optional[Gateway] = None


def get_gateway() -> Gateway:
    """Process-wide gateway built from the global settings."""
    global _default_gateway
    if _default_gateway is None:
        _default_gateway = Gateway()
    return _default_gateway


def reset_gateway() -> None:
    """Close and forget the process-wide gateway."""
    global _default_gateway
    if _default_gateway is not None:
        _default_gateway.close()
        _default_gateway = None
