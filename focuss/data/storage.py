from __future__ import annotations

"""SQLite-хранилище ключ-значение: документы профиля и истории сессий в JSON."""

import json
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator


logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class Storage:
    """Ошибки ввода-вывода логируются и не пробрасываются: состояние в памяти главнее."""

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            conn.execute("PRAGMA journal_mode = WAL;")
        except sqlite3.DatabaseError:
            pass
        return conn

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        conn = self._connect()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_db(self) -> bool:
        """Создает таблицы при первом запуске; возвращает False, если база недоступна."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            with self._transaction() as conn:
                conn.execute("CREATE TABLE IF NOT EXISTS schema_version (version INTEGER NOT NULL)")
                row = conn.execute("SELECT version FROM schema_version LIMIT 1").fetchone()
                if not row:
                    conn.execute("INSERT INTO schema_version(version) VALUES (?)", (SCHEMA_VERSION,))
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS settings(
                        key TEXT PRIMARY KEY,
                        value TEXT
                    )
                    """
                )
        except (sqlite3.Error, OSError) as exc:
            logger.warning("storage init failed for %s: %s", self.db_path, exc)
            return False
        return True

    def get(self, key: str, fallback: Any = None) -> Any:
        try:
            conn = self._connect()
            try:
                row = conn.execute("SELECT value FROM settings WHERE key = ?", (key,)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            logger.warning("storage.get(%r) failed: %s", key, exc)
            return fallback
        if not row or row["value"] is None:
            return fallback
        try:
            return json.loads(row["value"])
        except (TypeError, json.JSONDecodeError) as exc:
            logger.warning("storage.get(%r) returned unreadable JSON: %s", key, exc)
            return fallback

    def set(self, key: str, value: Any) -> None:
        try:
            payload = json.dumps(value)
            with self._transaction() as conn:
                conn.execute(
                    "INSERT INTO settings(key, value) VALUES(?, ?) ON CONFLICT(key) DO UPDATE SET value=excluded.value",
                    (key, payload),
                )
        except (sqlite3.Error, TypeError, ValueError) as exc:
            logger.warning("storage.set(%r) failed: %s", key, exc)

    def remove(self, key: str) -> None:
        try:
            with self._transaction() as conn:
                conn.execute("DELETE FROM settings WHERE key = ?", (key,))
        except sqlite3.Error as exc:
            logger.warning("storage.remove(%r) failed: %s", key, exc)
