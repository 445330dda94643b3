"""
Base Record
===========

Common plumbing for the entity records: gateway lookup, converting gateway
errors into ``PersistResult`` failures, and reading rows back.
"""

import logging
from typing import Any, ClassVar, List, Mapping, Optional, Tuple, Type, TypeVar

from lms.core.constants import DISPLAY_PATTERN, NULL_DISPLAY, UNASSIGNED_ID
from lms.core.datetimes import display
from lms.core.exceptions import GatewayError, RecordValidationError
from lms.core.results import PersistResult
from lms.database.gateway import Gateway, get_gateway

logger = logging.getLogger(__name__)

R = TypeVar("R", bound="Record")


class Record:
    """
    Base class for one persisted row.

    Subclasses declare their table, identity column and selected columns,
    and implement ``from_row``, ``_problems`` and ``_fields``.
    """

    table: ClassVar[str]
    id_column: ClassVar[str]
    columns: ClassVar[Tuple[str, ...]]

    def __init__(self, record_id: int = UNASSIGNED_ID):
        self._id = record_id

    # ========================================
    # Identity
    # ========================================

    @property
    def is_persisted(self) -> bool:
        return self._id != UNASSIGNED_ID

    def _assign_id(self, generated_id: Optional[int]) -> None:
        if generated_id is not None and self._id == UNASSIGNED_ID:
            self._id = generated_id

    # ========================================
    # Persistence helpers
    # ========================================

    @staticmethod
    def _gateway(gateway: Optional[Gateway]) -> Gateway:
        return gateway if gateway is not None else get_gateway()

    def _update(self, gateway: Gateway, sql: str, *params: Any) -> PersistResult:
        try:
            return PersistResult.success(gateway.execute_update(sql, *params))
        except GatewayError as err:
            logger.warning("%s %s: update failed: %s", type(self).__name__, self._id, err)
            return PersistResult.from_exception(err)

    def _insert(self, gateway: Gateway, sql: str, *params: Any) -> PersistResult:
        try:
            outcome = gateway.execute_insert(sql, *params)
        except GatewayError as err:
            logger.warning("%s: insert failed: %s", type(self).__name__, err)
            return PersistResult.from_exception(err)
        self._assign_id(outcome.generated_id)
        return PersistResult.success(outcome.rows_affected)

    def delete(self, gateway: Optional[Gateway] = None) -> PersistResult:
        """
        Delete this record's row.

        A record whose row does not exist (or that was never saved) yields a
        successful result with 0 rows affected.
        """
        gateway = self._gateway(gateway)
        sql = f"DELETE FROM {gateway.qualified(self.table)} WHERE {self.id_column} = ?"
        return self._update(gateway, sql, self._id)

    # ========================================
    # Reading back
    # ========================================

    @classmethod
    def from_row(cls: Type[R], row: Mapping[str, Any]) -> R:
        raise NotImplementedError

    @classmethod
    def _select(cls, gateway: Gateway) -> str:
        return f"SELECT {', '.join(cls.columns)} FROM {gateway.qualified(cls.table)}"

    @classmethod
    def get(cls: Type[R], record_id: int, gateway: Optional[Gateway] = None) -> Optional[R]:
        """
        Load one record by identity.

        Returns:
            The record, or None if no row has that identity

        Raises:
            GatewayError: If the query cannot be run
        """
        gateway = cls._gateway(gateway)
        rows = gateway.execute_query(f"{cls._select(gateway)} WHERE {cls.id_column} = ?", record_id)
        return cls.from_row(rows[0]._mapping) if rows else None

    @classmethod
    def list_all(cls: Type[R], gateway: Optional[Gateway] = None) -> List[R]:
        """Load every record, ordered by identity."""
        gateway = cls._gateway(gateway)
        rows = gateway.execute_query(f"{cls._select(gateway)} ORDER BY {cls.id_column}")
        return [cls.from_row(row._mapping) for row in rows]

    # ========================================
    # Validation (optional)
    # ========================================

    def _problems(self) -> List[str]:
        return []

    def validate(self) -> None:
        """
        Check field constraints before persisting.

        Persistence methods never call this; callers opt in.

        Raises:
            RecordValidationError: Listing every failed check
        """
        problems = self._problems()
        if problems:
            raise RecordValidationError(type(self).__name__, problems)

    # ========================================
    # String Representation
    # ========================================

    def _fields(self) -> List[Tuple[str, str]]:
        raise NotImplementedError

    @staticmethod
    def _display_time(value) -> str:
        return display(value, DISPLAY_PATTERN, NULL_DISPLAY)

    def __str__(self) -> str:
        """
        Human-readable rendering of every field.

        Example output:
            Author{author_id = 1, first_name = 'Jane', last_name = 'Austen', date_added = NULL}
        """
        body = ", ".join(f"{name} = {value}" for name, value in self._fields())
        return f"{type(self).__name__}{{{body}}}"
