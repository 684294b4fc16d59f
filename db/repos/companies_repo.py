from __future__ import annotations

import sqlite3
import uuid
from typing import Optional


class CompaniesRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def find_id_by_linkedin_id(self, linkedin_id: str) -> Optional[str]:
        cur = self.conn.cursor()
        cur.execute(
            "SELECT id FROM companies WHERE linkedin_id = ? "
            "UNION ALL SELECT company_id FROM company_linkedin_aliases WHERE alias = ? LIMIT 1",
            (linkedin_id, linkedin_id),
        )
        row = cur.fetchone()
        return str(row[0]) if row else None

    def insert(self, name: str, linkedin_id: Optional[str], image_url: Optional[str] = None) -> str:
        """Insert a canonical company row and return its id.

        Runs inside the caller's transaction; does not commit.
        """
        company_id = uuid.uuid4().hex
        self.conn.execute(
            "INSERT INTO companies (id, name, linkedin_id, image_url) VALUES (?, ?, ?, ?)",
            (company_id, name, linkedin_id, image_url),
        )
        return company_id

    def add_alias(self, company_id: str, alias: str) -> None:
        self.conn.execute(
            "INSERT OR IGNORE INTO company_linkedin_aliases (alias, company_id) VALUES (?, ?)",
            (alias, company_id),
        )
