import sqlite3

import pytest

from shared_modules.storage import MemoryStorage, SqliteStorage


def test_memory_storage():
    storage = MemoryStorage()
    assert storage.get("a") is None
    assert storage.set("a", "1") is True
    assert storage.get("a") == "1"


def test_sqlite_storage_upsert(tmp_path):
    storage = SqliteStorage(tmp_path / "kv.sqlite3")
    assert storage.get("quote_builder.settings") is None
    assert storage.set("quote_builder.settings", '{"taxRate": 0.18}') is True
    assert storage.set("quote_builder.settings", '{"taxRate": 0.2}') is True
    assert storage.get("quote_builder.settings") == '{"taxRate": 0.2}'


def test_sqlite_storage_persists_between_instances(tmp_path):
    path = tmp_path / "kv.sqlite3"
    SqliteStorage(path).set("k", "v")
    assert SqliteStorage(path).get("k") == "v"


def test_sqlite_errors_are_not_raised(tmp_path):
    # Ein Verzeichnis lässt sich nicht als Datenbank öffnen
    storage = SqliteStorage(tmp_path)
    assert storage.get("k") is None
    assert storage.set("k", "v") is False


def test_sqlite_connections_are_closed(tmp_path, monkeypatch):
    storage = SqliteStorage(tmp_path / "kv.sqlite3")
    opened = []
    connect = storage.get_db_connection

    def tracking_connection():
        conn = connect()
        opened.append(conn)
        return conn

    monkeypatch.setattr(storage, "get_db_connection", tracking_connection)
    storage.set("k", "v")
    assert storage.get("k") == "v"
    assert len(opened) == 2
    for conn in opened:
        with pytest.raises(sqlite3.ProgrammingError):
            conn.execute("SELECT 1")
