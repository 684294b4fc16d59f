from __future__ import annotations

import sqlite3
import uuid
from typing import Optional


class SchoolsRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def find_id_by_linkedin_id(self, linkedin_id: str) -> Optional[str]:
        cur = self.conn.cursor()
        cur.execute(
            "SELECT id FROM schools WHERE linkedin_id = ? "
            "UNION ALL SELECT school_id FROM school_linkedin_aliases WHERE alias = ? LIMIT 1",
            (linkedin_id, linkedin_id),
        )
        row = cur.fetchone()
        return str(row[0]) if row else None

    def insert(
        self,
        name: str,
        linkedin_id: Optional[str],
        logo_url: Optional[str] = None,
        address_city: Optional[str] = None,
        address_state: Optional[str] = None,
        address_zip: Optional[str] = None,
    ) -> str:
        """Insert a canonical school row and return its id (no commit)."""
        school_id = uuid.uuid4().hex
        self.conn.execute(
            "INSERT INTO schools (id, name, linkedin_id, logo_url, address_city, address_state, address_zip) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            (school_id, name, linkedin_id, logo_url, address_city, address_state, address_zip),
        )
        return school_id

    def add_alias(self, school_id: str, alias: str) -> None:
        self.conn.execute(
            "INSERT OR IGNORE INTO school_linkedin_aliases (alias, school_id) VALUES (?, ?)",
            (alias, school_id),
        )
