"""User record: a library member who borrows books."""

from datetime import datetime
from typing import Any, List, Mapping, Optional, Tuple

from lms.core.constants import UNASSIGNED_ID
from lms.core.datetimes import coerce_timestamp, now
from lms.core.results import PersistResult
from lms.database.gateway import Gateway
from lms.models.base import Record


class User(Record):
    """
    Attributes:
        user_id: Store-assigned identity (-1 until saved)
        first_name: Given name
        last_name: Family name
        date_added: When the user was saved (None until saved)
        booking_record: True while the borrowing record is clean
    """

    table = "user"
    id_column = "user_id"
    columns = ("user_id", "first_name", "last_name", "date_added", "booking_record")

    def __init__(
        self,
        user_id: int,
        first_name: str,
        last_name: str,
        date_added: Optional[datetime] = None,
        booking_record: bool = True,
    ):
        super().__init__(user_id)
        self.first_name = first_name
        self.last_name = last_name
        self._date_added = date_added
        self.booking_record = booking_record

    @classmethod
    def new(cls, first_name: str, last_name: str) -> "User":
        """Stage a new user with a clean borrowing record."""
        return cls(UNASSIGNED_ID, first_name, last_name)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "User":
        return cls(
            row["user_id"],
            row["first_name"],
            row["last_name"],
            coerce_timestamp(row["date_added"]),
            bool(row["booking_record"]),
        )

    @property
    def user_id(self) -> int:
        return self._id

    @property
    def date_added(self) -> Optional[datetime]:
        return self._date_added

    def add_to_database(self, gateway: Optional[Gateway] = None) -> PersistResult:
        gateway = self._gateway(gateway)
        sql = (
            f"INSERT INTO {gateway.qualified(self.table)} "
            "(first_name, last_name, date_added, booking_record) VALUES (?, ?, ?, ?)"
        )

        previous, self._date_added = self._date_added, now()
        result = self._insert(
            gateway, sql, self.first_name, self.last_name, self._date_added, self.booking_record
        )
        if not result.ok:
            self._date_added = previous
        return result

    def save_changes(self, gateway: Optional[Gateway] = None) -> PersistResult:
        gateway = self._gateway(gateway)
        sql = (
            f"UPDATE {gateway.qualified(self.table)} SET "
            "first_name = ?, "
            "last_name = ?, "
            "booking_record = ? "
            "WHERE user_id = ?"
        )
        return self._update(
            gateway, sql, self.first_name, self.last_name, self.booking_record, self._id
        )

    def _problems(self) -> List[str]:
        problems = []
        if not (self.first_name or "").strip():
            problems.append("first_name is empty")
        if not (self.last_name or "").strip():
            problems.append("last_name is empty")
        return problems

    def _fields(self) -> List[Tuple[str, str]]:
        return [
            ("user_id", str(self._id)),
            ("first_name", f"'{self.first_name}'"),
            ("last_name", f"'{self.last_name}'"),
            ("date_added", self._display_time(self._date_added)),
            ("booking_record", "Clean" if self.booking_record else "Not Clean"),
        ]

    def __repr__(self) -> str:
        record = "clean" if self.booking_record else "not clean"
        return f"<User(id={self._id}, name='{self.first_name} {self.last_name}', {record})>"
