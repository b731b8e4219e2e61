import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Dict, Optional

from loguru import logger


class KeyValueStorage:
    """
    Dauerhafte Schlüssel-Wert-Ablage für serialisierte Snapshots.
    get liefert None, wenn der Schlüssel fehlt; set meldet Schreibfehler nur über den Rückgabewert.
    """

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> bool:
        raise NotImplementedError


class MemoryStorage(KeyValueStorage):
    """Flüchtige Ablage im Arbeitsspeicher (Tests, einmalige Sitzungen)."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> bool:
        self._data[key] = value
        return True


class SqliteStorage(KeyValueStorage):
    """
    Ablage in einer lokalen SQLite-Datei mit einer Tabelle kv_store(key, value).
    Lese- und Schreibfehler werden geloggt und nie an den Aufrufer weitergegeben.
    """

    TABLE = "kv_store"

    def __init__(self, db_path: Path):
        self.db_path: Path = db_path
        self._create_table()

    def get_db_connection(self) -> sqlite3.Connection:
        """
        Öffnet eine Verbindung zur SQLite-Datenbank. Aufrufer schließen sie mit contextlib.closing.
        """
        logger.debug(f"Verbinde mit SQLite-Datenbank {self.db_path}")
        return sqlite3.connect(self.db_path)

    def _create_table(self) -> None:
        try:
            with closing(self.get_db_connection()) as conn, conn:
                conn.execute(
                    f"CREATE TABLE IF NOT EXISTS {self.TABLE} (key TEXT PRIMARY KEY, value TEXT NOT NULL)"
                )
        except sqlite3.Error as e:
            logger.warning(f"Tabelle {self.TABLE} konnte nicht angelegt werden: {e}")

    def get(self, key: str) -> Optional[str]:
        try:
            with closing(self.get_db_connection()) as conn, conn:
                row = conn.execute(
                    f"SELECT value FROM {self.TABLE} WHERE key = ?", (key,)
                ).fetchone()
        except sqlite3.Error as e:
            logger.warning(f"Lesen von '{key}' fehlgeschlagen: {e}")
            return None
        return row[0] if row else None

    def set(self, key: str, value: str) -> bool:
        try:
            with closing(self.get_db_connection()) as conn, conn:
                conn.execute(
                    f"INSERT INTO {self.TABLE} (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                    (key, value),
                )
        except sqlite3.Error as e:
            logger.warning(f"Schreiben von '{key}' fehlgeschlagen: {e}")
            return False
        return True
