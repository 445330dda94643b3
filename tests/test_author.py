import pytest

from lms.core.constants import UNASSIGNED_ID, ErrorKind
from lms.core.datetimes import now
from lms.models import Author


def test_new_author_is_unassigned():
    author = Author.new("Jane", "Austen")
    assert author.author_id == UNASSIGNED_ID
    assert author.date_added is None
    assert not author.is_persisted


def test_identity_and_date_added_are_read_only():
    author = Author.new("Jane", "Austen")
    with pytest.raises(AttributeError):
        author.author_id = 5
    with pytest.raises(AttributeError):
        author.date_added = now()


def test_add_to_database(gateway):
    author = Author.new("Jane", "Austen")
    before = now()
    result = author.add_to_database(gateway)
    after = now()

    assert result.ok
    assert result.rows_affected == 1
    assert before <= author.date_added <= after
    assert author.author_id > 0

    stored = Author.get(author.author_id, gateway)
    assert stored.first_name == "Jane"
    assert stored.last_name == "Austen"
    assert stored.date_added is not None
    assert stored.date_added == author.date_added


def test_failed_insert_reports_error_and_keeps_sentinel(bare_gateway):
    author = Author.new("Jane", "Austen")
    result = author.add_to_database(bare_gateway)

    assert not result.ok
    assert result.error.kind is ErrorKind.STATEMENT
    assert "author" in result.error.message
    assert author.author_id == UNASSIGNED_ID
    assert author.date_added is None


def test_save_changes(gateway, saved_author):
    saved_author.first_name = "J."
    result = saved_author.save_changes(gateway)

    assert result.ok and result.rows_affected == 1
    assert Author.get(saved_author.author_id, gateway).first_name == "J."


def test_delete(gateway, saved_author):
    assert saved_author.delete(gateway).rows_affected == 1
    assert Author.get(saved_author.author_id, gateway) is None


def test_delete_missing_row_affects_nothing(gateway):
    result = Author(424242, "No", "One").delete(gateway)
    assert result.ok
    assert result.rows_affected == 0


def test_list_all_orders_by_identity(gateway):
    for last in ("Austen", "Bronte", "Eliot"):
        Author.new("X", last).add_to_database(gateway)
    assert [a.last_name for a in Author.list_all(gateway)] == ["Austen", "Bronte", "Eliot"]


def test_get_unknown_returns_none(gateway):
    assert Author.get(99, gateway) is None


def test_rendering():
    author = Author.new("Jane", "Austen")
    assert str(author) == (
        "Author{author_id = -1, first_name = 'Jane', last_name = 'Austen', date_added = NULL}"
    )
    assert repr(author) == "<Author(id=-1, name='Jane Austen')>"


def test_rendering_saved_author_uses_human_pattern(saved_author):
    text = str(saved_author)
    assert "NULL" not in text
    assert str(saved_author.date_added.year) in text
