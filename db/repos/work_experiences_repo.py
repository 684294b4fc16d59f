from __future__ import annotations

import sqlite3
import uuid
from typing import Any, Dict, List, Sequence

from models.history_records import WorkExperienceRecord
from utils.batching import split_list


_WRITABLE_COLUMNS = (
    "title",
    "company_id",
    "company_name",
    "employment_type",
    "location_type",
    "location_city",
    "location_state",
    "start_date",
    "end_date",
    "description",
    "source",
)

_SELECT = (
    "SELECT w.id, w.member_id, w.title, w.company_id, w.company_name, w.employment_type, "
    "       w.location_type, w.location_city, w.location_state, w.start_date, w.end_date, w.description, "
    "       COALESCE(c.name, w.company_name) AS company, c.linkedin_id AS company_linkedin_id "
    "FROM work_experiences w LEFT JOIN companies c ON c.id = w.company_id "
    "WHERE w.deleted_at IS NULL "
)
_ORDER = " ORDER BY w.end_date DESC, w.start_date DESC"


class WorkExperiencesRepo:
    """Work history rows. Writes do not commit; callers own the transaction."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def list_for_members(self, member_ids: Sequence[str]) -> List[WorkExperienceRecord]:
        records: List[WorkExperienceRecord] = []
        for chunk in split_list(list(member_ids), 500):
            marks = ", ".join("?" for _ in chunk)
            records.extend(self._select(f"AND w.member_id IN ({marks})", tuple(chunk)))
        return records

    def list_for_member(self, member_id: str) -> List[WorkExperienceRecord]:
        return self._select("AND w.member_id = ?", (member_id,))

    def insert(self, member_id: str, values: Dict[str, Any]) -> str:
        experience_id = uuid.uuid4().hex
        columns = ["id", "member_id"] + [c for c in _WRITABLE_COLUMNS if c in values]
        params = [experience_id, member_id] + [values[c] for c in _WRITABLE_COLUMNS if c in values]
        marks = ", ".join("?" for _ in columns)
        self.conn.execute(
            f"INSERT INTO work_experiences ({', '.join(columns)}, linkedin_synced_at) "
            f"VALUES ({marks}, datetime('now'))",
            tuple(params),
        )
        return experience_id

    def update(self, experience_id: str, fields: Dict[str, Any]) -> None:
        """Write only the given fields; sync and update stamps are always set."""
        columns = [f"{c} = ?" for c in _WRITABLE_COLUMNS if c in fields]
        values: List[Any] = [fields[c] for c in _WRITABLE_COLUMNS if c in fields]
        columns.append("updated_at = datetime('now')")
        columns.append("linkedin_synced_at = datetime('now')")
        values.append(experience_id)
        self.conn.execute(f"UPDATE work_experiences SET {', '.join(columns)} WHERE id = ?;", tuple(values))

    def _select(self, where: str, params: tuple) -> List[WorkExperienceRecord]:
        cur = self.conn.cursor()
        cur.row_factory = sqlite3.Row
        cur.execute(_SELECT + where + _ORDER, params)
        return [WorkExperienceRecord.model_validate(dict(r)) for r in cur.fetchall()]
