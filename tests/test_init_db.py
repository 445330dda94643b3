from lms.database import Gateway, init_db
from lms.models import Borrow, User


def test_initialize_with_sample_data(bare_gateway, capsys):
    init_db.initialize_database(sample_data=True, gateway=bare_gateway)

    assert init_db.table_counts(bare_gateway) == {"author": 2, "book": 2, "user": 2, "borrow": 1}
    assert bare_gateway.is_connected

    users = User.list_all(bare_gateway)
    assert [u.booking_record for u in users] == [True, False]
    assert len(Borrow.list_outstanding(bare_gateway)) == 1
    assert "Database initialization complete" in capsys.readouterr().out


def test_reset_drops_existing_rows(bare_gateway):
    init_db.initialize_database(sample_data=True, gateway=bare_gateway)
    init_db.initialize_database(reset=True, gateway=bare_gateway)

    assert set(init_db.table_counts(bare_gateway).values()) == {0}


def test_main_uses_configured_gateway(monkeypatch, settings):
    monkeypatch.setattr(init_db, "Gateway", lambda: Gateway(settings))

    init_db.main(["--reset", "--yes", "--sample-data"])

    with Gateway(settings) as gateway:
        assert init_db.table_counts(gateway)["author"] == 2


def test_main_reset_aborts_without_confirmation(monkeypatch, settings, capsys):
    monkeypatch.setattr(init_db, "Gateway", lambda: Gateway(settings))
    monkeypatch.setattr("builtins.input", lambda prompt: "no")

    init_db.main(["--reset"])

    assert "Aborted" in capsys.readouterr().out
