from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol

from models.history_records import EducationRecord, WorkExperienceRecord
from models.member_record import MemberRecord
from utils.logging_setup import init_logging


@dataclass
class RunContext:
    # Explicit member ids to sync; None selects every never-synced member
    member_ids: Optional[List[str]] = None
    members: List[MemberRecord] = field(default_factory=list)
    educations_by_member: Dict[str, List[EducationRecord]] = field(default_factory=dict)
    experiences_by_member: Dict[str, List[WorkExperienceRecord]] = field(default_factory=dict)
    meta: dict = field(default_factory=dict)


class Step(Protocol):
    def run(self, ctx: RunContext) -> RunContext:
        ...


class Pipeline:
    def __init__(self, steps: List[Step]):
        self.steps = steps

    def run(self, ctx: RunContext) -> RunContext:
        # Make logging idempotent for any direct runner use
        init_logging()
        for step in self.steps:
            ctx = step.run(ctx)
        return ctx
