from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, Sequence

from models.history_records import EducationRecord, WorkExperienceRecord
from models.member_record import MemberRecord


class MembersRepoPort(Protocol):
    def select_sync_candidates(self, member_ids: Optional[Sequence[str]] = None) -> List[MemberRecord]:
        ...

    def get_record(self, member_id: str) -> Optional[MemberRecord]:
        ...

    def update_summary(self, member_id: str, fields: Dict[str, Any]) -> None:
        ...


class EducationsRepoPort(Protocol):
    def list_for_members(self, member_ids: Sequence[str]) -> List[EducationRecord]:
        ...

    def list_for_member(self, member_id: str) -> List[EducationRecord]:
        ...

    def insert(self, member_id: str, values: Dict[str, Any]) -> str:
        ...

    def update(self, education_id: str, fields: Dict[str, Any]) -> None:
        ...


class WorkExperiencesRepoPort(Protocol):
    def list_for_members(self, member_ids: Sequence[str]) -> List[WorkExperienceRecord]:
        ...

    def list_for_member(self, member_id: str) -> List[WorkExperienceRecord]:
        ...

    def insert(self, member_id: str, values: Dict[str, Any]) -> str:
        ...

    def update(self, experience_id: str, fields: Dict[str, Any]) -> None:
        ...
