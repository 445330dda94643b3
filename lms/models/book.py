"""Book record."""

from datetime import datetime
from typing import Any, List, Mapping, Optional, Tuple

from lms.core.constants import UNASSIGNED_ID
from lms.core.datetimes import coerce_timestamp, now
from lms.core.results import PersistResult
from lms.database.gateway import Gateway
from lms.models.base import Record


class Book(Record):
    """
    Attributes:
        book_id: Store-assigned identity (-1 until saved)
        title: Title of the book
        description: Free-text description
        number_of_pages: Page count
        date_added: When the book was saved (None until saved)
        genre: Genre label
        author_id: Identity of the book's Author (not checked here)
    """

    table = "book"
    id_column = "book_id"
    columns = (
        "book_id",
        "title",
        "description",
        "number_of_pages",
        "date_added",
        "genre",
        "author_id",
    )

    def __init__(
        self,
        book_id: int,
        title: str,
        description: Optional[str],
        number_of_pages: int,
        date_added: Optional[datetime],
        genre: Optional[str],
        author_id: int,
    ):
        super().__init__(book_id)
        self.title = title
        self.description = description
        self.number_of_pages = number_of_pages
        self._date_added = date_added
        self.genre = genre
        self.author_id = author_id

    @classmethod
    def new(
        cls,
        title: str,
        description: Optional[str],
        number_of_pages: int,
        genre: Optional[str],
        author_id: int,
    ) -> "Book":
        """Stage a new book for insertion."""
        return cls(UNASSIGNED_ID, title, description, number_of_pages, None, genre, author_id)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Book":
        return cls(
            row["book_id"],
            row["title"],
            row["description"],
            row["number_of_pages"],
            coerce_timestamp(row["date_added"]),
            row["genre"],
            row["author_id"],
        )

    @property
    def book_id(self) -> int:
        return self._id

    @property
    def date_added(self) -> Optional[datetime]:
        return self._date_added

    def add_to_database(self, gateway: Optional[Gateway] = None) -> PersistResult:
        gateway = self._gateway(gateway)
        sql = (
            f"INSERT INTO {gateway.qualified(self.table)} (title, description, number_of_pages, "
            "date_added, genre, author_id) VALUES (?, ?, ?, ?, ?, ?)"
        )

        previous, self._date_added = self._date_added, now()
        result = self._insert(
            gateway,
            sql,
            self.title,
            self.description,
            self.number_of_pages,
            self._date_added,
            self.genre,
            self.author_id,
        )
        if not result.ok:
            self._date_added = previous
        return result

    def save_changes(self, gateway: Optional[Gateway] = None) -> PersistResult:
        gateway = self._gateway(gateway)
        sql = (
            f"UPDATE {gateway.qualified(self.table)} SET "
            "title = ?, "
            "description = ?, "
            "number_of_pages = ?, "
            "genre = ?, "
            "author_id = ? "
            "WHERE book_id = ?"
        )
        return self._update(
            gateway,
            sql,
            self.title,
            self.description,
            self.number_of_pages,
            self.genre,
            self.author_id,
            self._id,
        )

    def _problems(self) -> List[str]:
        problems = []
        if not (self.title or "").strip():
            problems.append("title is empty")
        if self.number_of_pages is None or self.number_of_pages < 0:
            problems.append(f"number_of_pages must be >= 0, got {self.number_of_pages}")
        if self.author_id is None or self.author_id < 0:
            problems.append("author_id does not reference a saved author")
        return problems

    def _fields(self) -> List[Tuple[str, str]]:
        return [
            ("book_id", str(self._id)),
            ("title", f"'{self.title}'"),
            ("description", f"'{self.description}'"),
            ("number_of_pages", str(self.number_of_pages)),
            ("date_added", self._display_time(self._date_added)),
            ("genre", f"'{self.genre}'"),
            ("author_id", str(self.author_id)),
        ]

    def __repr__(self) -> str:
        return f"<Book(id={self._id}, title='{self.title}', author_id={self.author_id})>"
