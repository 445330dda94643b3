from datetime import timedelta

import pytest

from lms.config import Settings
from lms.core.datetimes import now
from lms.database import Gateway, create_all_tables, reset_gateway
from lms.models import Author, Book, Borrow, User


def sqlite_settings(path, **overrides) -> Settings:
    # _env_file=None keeps a developer's .env out of the tests
    values = dict(
        db_engine="sqlite",
        sqlite_path=str(path),
        database_url=None,
        db_schema=None,
        app_debug=False,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def make_settings():
    return sqlite_settings


@pytest.fixture
def settings(tmp_path):
    return sqlite_settings(tmp_path / "library.db")


@pytest.fixture
def bare_gateway(settings):
    """Gateway over an empty database (no tables)."""
    gateway = Gateway(settings)
    yield gateway
    gateway.close()


@pytest.fixture
def gateway(bare_gateway):
    """Gateway over a database with the library tables created."""
    create_all_tables(bare_gateway.engine)
    return bare_gateway


@pytest.fixture(autouse=True)
def _no_default_gateway():
    yield
    reset_gateway()


@pytest.fixture
def saved_author(gateway):
    author = Author.new("Jane", "Austen")
    assert author.add_to_database(gateway).ok
    return author


@pytest.fixture
def saved_book(gateway, saved_author):
    book = Book.new("Emma", "A comedy of manners.", 474, "Romance", saved_author.author_id)
    assert book.add_to_database(gateway).ok
    return book


@pytest.fixture
def saved_user(gateway):
    user = User.new("Ada", "Lovelace")
    assert user.add_to_database(gateway).ok
    return user


@pytest.fixture
def saved_borrow(gateway, saved_book, saved_user):
    borrow = Borrow.new(saved_book.book_id, saved_user.user_id, now() + timedelta(days=14))
    assert borrow.add_to_database(gateway).ok
    return borrow
