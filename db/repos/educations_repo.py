from __future__ import annotations

import sqlite3
import uuid
from typing import Any, Dict, List, Sequence

from models.history_records import EducationRecord
from utils.batching import split_list


_WRITABLE_COLUMNS = (
    "degree_type",
    "major",
    "other_major",
    "school_id",
    "other_school",
    "start_date",
    "end_date",
)

_SELECT = (
    "SELECT e.id, e.member_id, e.degree_type, e.major, e.other_major, e.school_id, e.other_school, "
    "       e.start_date, e.end_date, "
    "       COALESCE(s.name, e.other_school) AS school, s.linkedin_id AS school_linkedin_id "
    "FROM educations e LEFT JOIN schools s ON s.id = e.school_id "
    "WHERE e.deleted_at IS NULL "
)
_ORDER = " ORDER BY e.start_date DESC, e.end_date DESC"


class EducationsRepo:
    """Education history rows. Writes do not commit; callers own the transaction."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def list_for_members(self, member_ids: Sequence[str]) -> List[EducationRecord]:
        records: List[EducationRecord] = []
        for chunk in split_list(list(member_ids), 500):
            marks = ", ".join("?" for _ in chunk)
            records.extend(self._select(f"AND e.member_id IN ({marks})", tuple(chunk)))
        return records

    def list_for_member(self, member_id: str) -> List[EducationRecord]:
        return self._select("AND e.member_id = ?", (member_id,))

    def insert(self, member_id: str, values: Dict[str, Any]) -> str:
        education_id = uuid.uuid4().hex
        columns = ["id", "member_id"] + [c for c in _WRITABLE_COLUMNS if c in values]
        params = [education_id, member_id] + [values[c] for c in _WRITABLE_COLUMNS if c in values]
        marks = ", ".join("?" for _ in columns)
        self.conn.execute(
            f"INSERT INTO educations ({', '.join(columns)}, linkedin_synced_at) "
            f"VALUES ({marks}, datetime('now'))",
            tuple(params),
        )
        return education_id

    def update(self, education_id: str, fields: Dict[str, Any]) -> None:
        """Write only the given fields; sync and update stamps are always set."""
        columns = [f"{c} = ?" for c in _WRITABLE_COLUMNS if c in fields]
        values: List[Any] = [fields[c] for c in _WRITABLE_COLUMNS if c in fields]
        columns.append("updated_at = datetime('now')")
        columns.append("linkedin_synced_at = datetime('now')")
        values.append(education_id)
        self.conn.execute(f"UPDATE educations SET {', '.join(columns)} WHERE id = ?;", tuple(values))

    def _select(self, where: str, params: tuple) -> List[EducationRecord]:
        cur = self.conn.cursor()
        cur.row_factory = sqlite3.Row
        cur.execute(_SELECT + where + _ORDER, params)
        return [EducationRecord.model_validate(dict(r)) for r in cur.fetchall()]
