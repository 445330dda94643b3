"""
Borrow record.

A Borrow embodies one user borrowing one book. ``borrowing_date`` is set
when the borrow is saved; ``actual_return_date`` stays NULL until
``return_book()`` is called.
"""

from datetime import datetime
from typing import Any, List, Mapping, Optional, Tuple

from lms.core.constants import UNASSIGNED_ID
from lms.core.datetimes import coerce_timestamp, now
from lms.core.results import PersistResult
from lms.database.gateway import Gateway
from lms.models.base import Record


class Borrow(Record):
    """
    Attributes:
        borrowing_id: Store-assigned identity (-1 until saved)
        book_id: Identity of the borrowed Book
        user_id: Identity of the borrowing User
        borrowing_date: When the borrow was saved (None until saved)
        expected_return_date: When the book is due back
        actual_return_date: When the book came back (None while out)

    Example:
        borrow = Borrow.new(book.book_id, user.user_id, due)
        borrow.add_to_database()
        ...
        borrow.return_book()
    """

    table = "borrow"
    id_column = "borrowing_id"
    columns = (
        "borrowing_id",
        "book_id",
        "user_id",
        "borrowing_date",
        "expected_return_date",
        "actual_return_date",
    )

    def __init__(
        self,
        borrowing_id: int,
        book_id: int,
        user_id: int,
        borrowing_date: Optional[datetime],
        expected_return_date: Optional[datetime],
        actual_return_date: Optional[datetime] = None,
    ):
        super().__init__(borrowing_id)
        self.book_id = book_id
        self.user_id = user_id
        # Naive values are taken as local time
        self._borrowing_date = coerce_timestamp(borrowing_date)
        self.expected_return_date = expected_return_date
        self._actual_return_date = coerce_timestamp(actual_return_date)

    @classmethod
    def new(cls, book_id: int, user_id: int, expected_return_date: datetime) -> "Borrow":
        """Stage a new borrow; it is dated when saved."""
        return cls(UNASSIGNED_ID, book_id, user_id, None, expected_return_date)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Borrow":
        return cls(
            row["borrowing_id"],
            row["book_id"],
            row["user_id"],
            coerce_timestamp(row["borrowing_date"]),
            coerce_timestamp(row["expected_return_date"]),
            coerce_timestamp(row["actual_return_date"]),
        )

    @property
    def borrowing_id(self) -> int:
        return self._id

    @property
    def borrowing_date(self) -> Optional[datetime]:
        return self._borrowing_date

    @property
    def expected_return_date(self) -> Optional[datetime]:
        return self._expected_return_date

    @expected_return_date.setter
    def expected_return_date(self, value: Optional[datetime]) -> None:
        self._expected_return_date = coerce_timestamp(value)

    @property
    def actual_return_date(self) -> Optional[datetime]:
        return self._actual_return_date

    @property
    def is_returned(self) -> bool:
        return self._actual_return_date is not None

    def is_overdue(self, at: Optional[datetime] = None) -> bool:
        """True if the book is still out after its expected return date."""
        if self.is_returned or self.expected_return_date is None:
            return False
        return (at or now()) > self.expected_return_date

    # ========================================
    # Persistence
    # ========================================

    def add_to_database(self, gateway: Optional[Gateway] = None) -> PersistResult:
        gateway = self._gateway(gateway)
        sql = (
            f"INSERT INTO {gateway.qualified(self.table)} (book_id, user_id, borrowing_date, "
            "expected_return_date) VALUES (?, ?, ?, ?)"
        )

        previous, self._borrowing_date = self._borrowing_date, now()
        result = self._insert(
            gateway,
            sql,
            self.book_id,
            self.user_id,
            self._borrowing_date,
            self.expected_return_date,
        )
        if not result.ok:
            self._borrowing_date = previous
        return result

    def return_book(self, gateway: Optional[Gateway] = None) -> PersistResult:
        """
        Mark the book as returned now.

        Calling this again overwrites the return date with the newer time.
        """
        gateway = self._gateway(gateway)
        sql = f"UPDATE {gateway.qualified(self.table)} SET actual_return_date = ? WHERE borrowing_id = ?"

        previous, self._actual_return_date = self._actual_return_date, now()
        result = self._update(gateway, sql, self._actual_return_date, self._id)
        if not result.ok:
            self._actual_return_date = previous
        return result

    def save_changes(self, gateway: Optional[Gateway] = None) -> PersistResult:
        gateway = self._gateway(gateway)
        sql = (
            f"UPDATE {gateway.qualified(self.table)} SET "
            "book_id = ?, "
            "user_id = ?, "
            "expected_return_date = ? "
            "WHERE borrowing_id = ?"
        )
        return self._update(
            gateway, sql, self.book_id, self.user_id, self.expected_return_date, self._id
        )

    @classmethod
    def list_outstanding(cls, gateway: Optional[Gateway] = None) -> List["Borrow"]:
        """
        Load every borrow whose book has not come back yet, soonest due first.

        Sorted after loading: SQLite stores timestamps as text, and text order
        is not chronological across different UTC offsets.
        """
        gateway = cls._gateway(gateway)
        rows = gateway.execute_query(f"{cls._select(gateway)} WHERE actual_return_date IS NULL")
        borrows = [cls.from_row(row._mapping) for row in rows]
        return sorted(borrows, key=lambda b: (b.expected_return_date is None, b.expected_return_date))

    # ========================================
    # Validation / display
    # ========================================

    def _problems(self) -> List[str]:
        problems = []
        if self.book_id is None or self.book_id < 0:
            problems.append("book_id does not reference a saved book")
        if self.user_id is None or self.user_id < 0:
            problems.append("user_id does not reference a saved user")
        if self.expected_return_date is None:
            problems.append("expected_return_date is not set")
        elif self._borrowing_date is not None and self.expected_return_date < self._borrowing_date:
            problems.append("expected_return_date is before borrowing_date")
        if (
            self._actual_return_date is not None
            and self._borrowing_date is not None
            and self._actual_return_date < self._borrowing_date
        ):
            problems.append("actual_return_date is before borrowing_date")
        return problems

    def _fields(self) -> List[Tuple[str, str]]:
        return [
            ("borrowing_id", str(self._id)),
            ("book_id", str(self.book_id)),
            ("user_id", str(self.user_id)),
            ("borrowing_date", self._display_time(self._borrowing_date)),
            ("expected_return_date", self._display_time(self.expected_return_date)),
            ("actual_return_date", self._display_time(self._actual_return_date)),
        ]

    def __repr__(self) -> str:
        state = "returned" if self.is_returned else "out"
        return f"<Borrow(id={self._id}, book_id={self.book_id}, user_id={self.user_id}, {state})>"
