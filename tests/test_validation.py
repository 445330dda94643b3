from datetime import timedelta

import pytest

from lms.core.constants import ErrorKind
from lms.core.datetimes import now
from lms.core.exceptions import RecordValidationError
from lms.models import Author, Book, Borrow, User


def test_valid_records_pass():
    Author.new("Jane", "Austen").validate()
    User.new("Ada", "Lovelace").validate()
    Book.new("Emma", None, 474, "Romance", 1).validate()
    Borrow.new(1, 1, now() + timedelta(days=14)).validate()


def test_author_names_required():
    with pytest.raises(RecordValidationError) as excinfo:
        Author.new(" ", "").validate()
    assert excinfo.value.problems == ["first_name is empty", "last_name is empty"]
    assert excinfo.value.kind is ErrorKind.VALIDATION


def test_user_names_required():
    with pytest.raises(RecordValidationError):
        User.new("Ada", None).validate()


def test_book_checks():
    with pytest.raises(RecordValidationError) as excinfo:
        Book.new("", None, -5, None, -1).validate()
    assert len(excinfo.value.problems) == 3


def test_borrow_return_before_borrow_date():
    start = now()
    borrow = Borrow(1, 1, 1, start, start - timedelta(days=1), start - timedelta(hours=1))
    with pytest.raises(RecordValidationError) as excinfo:
        borrow.validate()
    assert "expected_return_date is before borrowing_date" in excinfo.value.problems
    assert "actual_return_date is before borrowing_date" in excinfo.value.problems


def test_validation_is_not_applied_on_persist(gateway):
    author = Author.new("", "")
    assert author.add_to_database(gateway).ok
