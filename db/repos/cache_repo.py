from __future__ import annotations

import json
import logging
import sqlite3
import time
from typing import Any, Optional


logger = logging.getLogger(__name__)


class SqliteCache:
    """Key/value cache with per-entry TTL, stored as JSON text.

    Keep this on its own connection (and database file) so that cache writes
    commit independently of any member transaction.
    """

    def __init__(self, conn: sqlite3.Connection, clock=time.time):
        self.conn = conn
        self.clock = clock

    def get(self, key: str) -> Optional[Any]:
        cur = self.conn.cursor()
        cur.execute("SELECT value, expires_at FROM cache_entries WHERE key = ?", (key,))
        row = cur.fetchone()
        if not row:
            return None
        value, expires_at = row
        if expires_at is not None and float(expires_at) <= self.clock():
            self.delete(key)
            return None
        try:
            return json.loads(value)
        except ValueError:
            logger.warning("Discarding unreadable cache entry", extra={"status": "cache_corrupt"})
            self.delete(key)
            return None

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        expires_at = self.clock() + ttl_seconds if ttl_seconds else None
        self.conn.execute(
            "INSERT OR REPLACE INTO cache_entries (key, value, expires_at) VALUES (?, ?, ?)",
            (key, json.dumps(value, ensure_ascii=False), expires_at),
        )
        self.conn.commit()

    def delete(self, key: str) -> None:
        self.conn.execute("DELETE FROM cache_entries WHERE key = ?", (key,))
        self.conn.commit()

    def purge_expired(self) -> int:
        cur = self.conn.execute(
            "DELETE FROM cache_entries WHERE expires_at IS NOT NULL AND expires_at <= ?",
            (self.clock(),),
        )
        self.conn.commit()
        return cur.rowcount
