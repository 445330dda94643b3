"""
Entity records.

Plain data holders that persist themselves through the gateway with SQL text.
"""

from lms.models.base import Record
from lms.models.author import Author
from lms.models.book import Book
from lms.models.borrow import Borrow
from lms.models.user import User

__all__ = [
    "Record",
    "Author",
    "Book",
    "Borrow",
    "User",
]
