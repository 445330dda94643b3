from datetime import datetime, timedelta, timezone

from lms.core.constants import UNASSIGNED_ID
from lms.core.datetimes import now
from lms.models import Borrow


def test_new_borrow_is_unassigned():
    borrow = Borrow.new(1, 1, now() + timedelta(days=7))
    assert borrow.borrowing_id == UNASSIGNED_ID
    assert borrow.borrowing_date is None
    assert borrow.actual_return_date is None
    assert not borrow.is_returned


def test_add_to_database(gateway, saved_book, saved_user):
    due = now() + timedelta(days=14)
    borrow = Borrow.new(saved_book.book_id, saved_user.user_id, due)
    before = now()
    assert borrow.add_to_database(gateway).rows_affected == 1
    assert before <= borrow.borrowing_date <= now()

    stored = Borrow.get(borrow.borrowing_id, gateway)
    assert stored.book_id == saved_book.book_id
    assert stored.user_id == saved_user.user_id
    assert stored.borrowing_date == borrow.borrowing_date
    assert stored.expected_return_date == due
    assert stored.actual_return_date is None


def test_return_book(gateway, saved_borrow):
    before = now()
    result = saved_borrow.return_book(gateway)

    assert result.rows_affected == 1
    assert before <= saved_borrow.actual_return_date <= now()
    assert Borrow.get(saved_borrow.borrowing_id, gateway).actual_return_date == saved_borrow.actual_return_date


def test_return_book_twice_overwrites(gateway, saved_borrow):
    saved_borrow.return_book(gateway)
    first = saved_borrow.actual_return_date
    saved_borrow.return_book(gateway)

    assert saved_borrow.actual_return_date >= first
    stored = Borrow.get(saved_borrow.borrowing_id, gateway)
    assert stored.actual_return_date == saved_borrow.actual_return_date


def test_save_changes(gateway, saved_borrow):
    later = saved_borrow.expected_return_date + timedelta(days=7)
    saved_borrow.expected_return_date = later

    assert saved_borrow.save_changes(gateway).rows_affected == 1
    assert Borrow.get(saved_borrow.borrowing_id, gateway).expected_return_date == later


def test_delete(gateway, saved_borrow):
    assert saved_borrow.delete(gateway).rows_affected == 1
    assert Borrow.get(saved_borrow.borrowing_id, gateway) is None


def test_list_outstanding(gateway, saved_borrow, saved_book, saved_user):
    other = Borrow.new(saved_book.book_id, saved_user.user_id, now() + timedelta(days=30))
    other.add_to_database(gateway)
    other.return_book(gateway)

    outstanding = Borrow.list_outstanding(gateway)
    assert [b.borrowing_id for b in outstanding] == [saved_borrow.borrowing_id]


def test_is_overdue():
    borrow = Borrow.new(1, 1, now() - timedelta(days=1))
    assert borrow.is_overdue()
    assert not borrow.is_overdue(at=now() - timedelta(days=2))


def test_returned_borrow_is_not_overdue(gateway, saved_borrow):
    saved_borrow.return_book(gateway)
    assert not saved_borrow.is_overdue(at=now() + timedelta(days=365))


def test_rendering_shows_null_until_returned(gateway, saved_borrow):
    assert "actual_return_date = NULL" in str(saved_borrow)
    saved_borrow.return_book(gateway)
    assert "NULL" not in str(saved_borrow)


def test_failed_return_keeps_book_out(bare_gateway):
    borrow = Borrow(5, 1, 1, now(), now() + timedelta(days=14))

    result = borrow.return_book(bare_gateway)

    assert not result.ok
    assert borrow.actual_return_date is None
    assert not borrow.is_returned


def test_naive_dates_are_taken_as_local_time():
    borrow = Borrow.new(1, 1, datetime(2000, 1, 1))
    assert borrow.expected_return_date.utcoffset() is not None
    assert borrow.is_overdue()

    borrow.expected_return_date = datetime(2999, 1, 1)
    assert not borrow.is_overdue()

    dated = Borrow(3, 1, 1, datetime(2000, 1, 1), now(), actual_return_date=datetime(2000, 1, 2))
    dated.validate()


def test_list_outstanding_orders_by_instant_across_offsets(gateway, saved_book, saved_user):
    # 05:00 UTC, but its text sorts after the 08:00 UTC one
    earlier = Borrow.new(
        saved_book.book_id, saved_user.user_id,
        datetime(2030, 1, 1, 10, 0, tzinfo=timezone(timedelta(hours=5))),
    )
    later = Borrow.new(
        saved_book.book_id, saved_user.user_id,
        datetime(2030, 1, 1, 8, 0, tzinfo=timezone.utc),
    )
    later.add_to_database(gateway)
    earlier.add_to_database(gateway)

    outstanding = Borrow.list_outstanding(gateway)
    assert [b.borrowing_id for b in outstanding] == [earlier.borrowing_id, later.borrowing_id]
