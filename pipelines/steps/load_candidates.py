from __future__ import annotations

import logging
import sqlite3
from collections import defaultdict
from typing import Dict, List

from db.repos.educations_repo import EducationsRepo
from db.repos.members_repo import MembersRepo
from db.repos.work_experiences_repo import WorkExperiencesRepo
from pipelines.runner import RunContext


logger = logging.getLogger(__name__)


def group_by_member(records) -> Dict[str, List]:
    grouped: Dict[str, List] = defaultdict(list)
    for record in records:
        grouped[record.member_id].append(record)
    return dict(grouped)


class LoadSyncCandidates:
    """Selects the members to sync and bulk-loads their history rows."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def run(self, ctx: RunContext) -> RunContext:
        members = MembersRepo(self.conn).select_sync_candidates(ctx.member_ids)
        member_ids = [m.id for m in members]
        ctx.members = members
        ctx.educations_by_member = group_by_member(EducationsRepo(self.conn).list_for_members(member_ids))
        ctx.experiences_by_member = group_by_member(WorkExperiencesRepo(self.conn).list_for_members(member_ids))
        ctx.meta["members_total"] = len(members)
        logger.info(
            "Loaded %d sync candidates",
            len(members),
            extra={"step": "load_candidates", "status": "ok"},
        )
        return ctx
