from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

from models.history_records import EducationRecord
from models.linkedin_profile import LinkedInDate, LinkedInEducation
from models.sync_outcome import (
    Created,
    FreeTextSchool,
    SchoolIdentity,
    SchoolRef,
    Skipped,
    SyncOutcome,
    Updated,
    school_columns,
)
from ports.collaborators import SchoolResolverPort
from ports.repos import EducationsRepoPort
from services.dates import to_iso
from services.mapping import OTHER_MAJOR, major_from_field_of_study, month_number
from services.matching import QualifiedEducation, find_matching_education, qualify_education


logger = logging.getLogger(__name__)


def _has_month_and_year(partial: Optional[LinkedInDate]) -> bool:
    return partial is not None and bool(partial.year) and month_number(partial.month) is not None


class EducationReconciler:
    """Creates or minimally updates one education row per scraped entry."""

    def __init__(self, repo: EducationsRepoPort, schools: SchoolResolverPort) -> None:
        self.repo = repo
        self.schools = schools

    def reconcile(
        self, member_id: str, entry: LinkedInEducation, existing: Iterable[EducationRecord]
    ) -> SyncOutcome:
        scraped = qualify_education(entry)
        if scraped is None:
            return Skipped("disqualified")

        match = find_matching_education(scraped, existing)
        if match is None:
            return self._create(member_id, scraped)
        return self._update(match, scraped)

    def _create(self, member_id: str, scraped: QualifiedEducation) -> Created:
        identity = self._resolve_identity(scraped)
        major = major_from_field_of_study(scraped.field_of_study)
        values: Dict[str, Any] = {
            "degree_type": scraped.degree_type,
            "major": major,
            "other_major": scraped.field_of_study if major == OTHER_MAJOR else None,
            "start_date": to_iso(scraped.start_date),
            "end_date": to_iso(scraped.end_date),
        }
        values.update(school_columns(identity))
        education_id = self.repo.insert(member_id, values)
        logger.debug("Created education", extra={"member_id": member_id, "status": "created"})
        return Created(education_id)

    def _update(self, record: EducationRecord, scraped: QualifiedEducation) -> SyncOutcome:
        fields: Dict[str, Any] = {}

        identity = self._reresolve_identity(record, scraped)
        if identity is not None:
            for column, value in school_columns(identity).items():
                if getattr(record, column) != value:
                    fields[column] = value

        # A year-only date carries a guessed month; keep whatever is stored
        if _has_month_and_year(scraped.entry.start_date):
            start_date = to_iso(scraped.start_date)
            if start_date != record.start_date:
                fields["start_date"] = start_date
        if _has_month_and_year(scraped.entry.end_date):
            end_date = to_iso(scraped.end_date)
            if end_date != record.end_date:
                fields["end_date"] = end_date

        if not fields:
            return Skipped("unchanged", record.id)
        self.repo.update(record.id, fields)
        logger.debug(
            "Updated education",
            extra={"member_id": record.member_id, "status": "updated"},
        )
        return Updated(record.id, tuple(sorted(fields)))

    def _resolve_identity(self, scraped: QualifiedEducation) -> SchoolIdentity:
        school_id = self.schools.resolve_or_create(scraped.school_linkedin_id)
        if school_id:
            return SchoolRef(school_id)
        return FreeTextSchool(scraped.entry.school_name)

    def _reresolve_identity(
        self, record: EducationRecord, scraped: QualifiedEducation
    ) -> Optional[SchoolIdentity]:
        """New school identity for a matched row, or None to keep the stored one.

        Only a successful resolution replaces what is stored; an unresolved
        school never downgrades an existing reference to free text.
        """
        linkedin_id = scraped.school_linkedin_id
        if not linkedin_id or linkedin_id == record.school_linkedin_id:
            return None
        school_id = self.schools.resolve_or_create(linkedin_id)
        return SchoolRef(school_id) if school_id else None
