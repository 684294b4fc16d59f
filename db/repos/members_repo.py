from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional, Sequence

from models.member_record import MemberRecord
from utils.batching import split_list


_SUMMARY_COLUMNS = (
    "headline",
    "profile_picture",
    "current_location",
    "current_location_latitude",
    "current_location_longitude",
)

# Keep IN (...) lists under SQLite's bound-parameter limit
_IN_CHUNK = 500


class MembersRepo:
    """Members table access. Writes do not commit; callers own the transaction."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def select_sync_candidates(self, member_ids: Optional[Sequence[str]] = None) -> List[MemberRecord]:
        """Members with a LinkedIn URL, either the given ids or all never-synced ones.

        Members with the fewest work experiences come first, then by acceptance date.
        """
        base = (
            "SELECT m.id, m.linkedin_url, m.headline, m.profile_picture, m.current_location, "
            "       m.linkedin_synced_at, COUNT(w.id) AS work_experience_count, m.accepted_at "
            "FROM members m "
            "LEFT JOIN work_experiences w ON w.member_id = m.id AND w.deleted_at IS NULL "
            "WHERE m.linkedin_url IS NOT NULL AND m.linkedin_url <> '' "
        )
        order = " GROUP BY m.id ORDER BY work_experience_count ASC, m.accepted_at ASC, m.id ASC"
        rows: List[sqlite3.Row] = []
        if member_ids is None:
            rows = self._fetch(base + "AND m.linkedin_synced_at IS NULL" + order, ())
        else:
            for chunk in split_list(list(member_ids), _IN_CHUNK):
                marks = ", ".join("?" for _ in chunk)
                rows.extend(self._fetch(base + f"AND m.id IN ({marks})" + order, tuple(chunk)))
        return [MemberRecord.model_validate(dict(r)) for r in rows]

    def get(self, member_id: str) -> Optional[Dict[str, Any]]:
        rows = self._fetch("SELECT * FROM members WHERE id = ?", (member_id,))
        return dict(rows[0]) if rows else None

    def get_record(self, member_id: str) -> Optional[MemberRecord]:
        row = self.get(member_id)
        return MemberRecord.model_validate(row) if row else None

    def update_summary(self, member_id: str, fields: Dict[str, Any]) -> None:
        """Set the given summary fields and always stamp the sync timestamps."""
        columns = []
        values: List[Any] = []
        for key in _SUMMARY_COLUMNS:
            if key in fields:
                columns.append(f"{key} = ?")
                values.append(fields[key])
        columns.append("linkedin_synced_at = datetime('now')")
        columns.append("updated_at = datetime('now')")
        sql = f"UPDATE members SET {', '.join(columns)} WHERE id = ?;"
        values.append(member_id)
        self.conn.execute(sql, tuple(values))

    def _fetch(self, sql: str, params: tuple) -> List[sqlite3.Row]:
        cur = self.conn.cursor()
        cur.row_factory = sqlite3.Row
        cur.execute(sql, params)
        return cur.fetchall()
