"""
Author record.

An Author is a person books are attributed to. ``author_id`` and
``date_added`` are assigned when the author is first saved.
"""

from datetime import datetime
from typing import Any, List, Mapping, Optional, Tuple

from lms.core.constants import UNASSIGNED_ID
from lms.core.datetimes import coerce_timestamp, now
from lms.core.results import PersistResult
from lms.database.gateway import Gateway
from lms.models.base import Record


class Author(Record):
    """
    Attributes:
        author_id: Store-assigned identity (-1 until saved)
        first_name: Given name
        last_name: Family name
        date_added: When the author was saved (None until saved)

    Example:
        author = Author.new("Jane", "Austen")
        result = author.add_to_database()
        if result.ok:
            print(author)
    """

    table = "author"
    id_column = "author_id"
    columns = ("author_id", "first_name", "last_name", "date_added")

    def __init__(
        self,
        author_id: int,
        first_name: str,
        last_name: str,
        date_added: Optional[datetime] = None,
    ):
        super().__init__(author_id)
        self.first_name = first_name
        self.last_name = last_name
        self._date_added = date_added

    @classmethod
    def new(cls, first_name: str, last_name: str) -> "Author":
        """Stage a new author for insertion."""
        return cls(UNASSIGNED_ID, first_name, last_name)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Author":
        return cls(
            row["author_id"],
            row["first_name"],
            row["last_name"],
            coerce_timestamp(row["date_added"]),
        )

    @property
    def author_id(self) -> int:
        return self._id

    @property
    def date_added(self) -> Optional[datetime]:
        return self._date_added

    def add_to_database(self, gateway: Optional[Gateway] = None) -> PersistResult:
        """Insert this author, stamping ``date_added`` with the current time."""
        gateway = self._gateway(gateway)
        sql = (
            f"INSERT INTO {gateway.qualified(self.table)} (first_name, last_name, date_added) "
            "VALUES (?, ?, ?)"
        )

        previous, self._date_added = self._date_added, now()
        result = self._insert(gateway, sql, self.first_name, self.last_name, self._date_added)
        if not result.ok:
            self._date_added = previous
        return result

    def save_changes(self, gateway: Optional[Gateway] = None) -> PersistResult:
        """Write the names back to the author's row."""
        gateway = self._gateway(gateway)
        sql = (
            f"UPDATE {gateway.qualified(self.table)} SET "
            "first_name = ?, "
            "last_name = ? "
            "WHERE author_id = ?"
        )
        return self._update(gateway, sql, self.first_name, self.last_name, self._id)

    def _problems(self) -> List[str]:
        problems = []
        if not (self.first_name or "").strip():
            problems.append("first_name is empty")
        if not (self.last_name or "").strip():
            problems.append("last_name is empty")
        return problems

    def _fields(self) -> List[Tuple[str, str]]:
        return [
            ("author_id", str(self._id)),
            ("first_name", f"'{self.first_name}'"),
            ("last_name", f"'{self.last_name}'"),
            ("date_added", self._display_time(self._date_added)),
        ]

    def __repr__(self) -> str:
        return f"<Author(id={self._id}, name='{self.first_name} {self.last_name}')>"
