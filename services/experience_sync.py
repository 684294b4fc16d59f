from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

from models.history_records import WorkExperienceRecord
from models.sync_outcome import (
    CompanyIdentity,
    CompanyRef,
    Created,
    FreeTextCompany,
    Skipped,
    SyncOutcome,
    Updated,
    company_columns,
)
from models.linkedin_profile import LinkedInExperience
from ports.collaborators import CompanyResolverPort, LocationResolverPort, ResolvedLocation
from ports.repos import WorkExperiencesRepoPort
from services.dates import to_iso
from services.mapping import DEFAULT_EMPLOYMENT_TYPE, employment_type_from_text, location_type_from_text
from services.matching import QualifiedExperience, find_matching_experience, qualify_experience


logger = logging.getLogger(__name__)

SOURCE_LINKEDIN = "linkedin"


class ExperienceReconciler:
    """Creates or minimally updates one work experience row per scraped entry."""

    def __init__(
        self,
        repo: WorkExperiencesRepoPort,
        companies: CompanyResolverPort,
        locations: Optional[LocationResolverPort] = None,
    ) -> None:
        self.repo = repo
        self.companies = companies
        self.locations = locations

    def reconcile(
        self, member_id: str, entry: LinkedInExperience, existing: Iterable[WorkExperienceRecord]
    ) -> SyncOutcome:
        scraped = qualify_experience(entry)
        if scraped is None:
            return Skipped("disqualified")

        match = find_matching_experience(scraped, existing)
        if match is None:
            return self._create(member_id, scraped)
        return self._update(match, scraped)

    def _create(self, member_id: str, scraped: QualifiedExperience) -> Created:
        entry = scraped.entry
        values: Dict[str, Any] = {
            "title": entry.position,
            "description": entry.description,
            "employment_type": employment_type_from_text(entry.employment_type) or DEFAULT_EMPLOYMENT_TYPE,
            "location_type": location_type_from_text(entry.workplace_type),
            "start_date": to_iso(scraped.start_date),
            "end_date": to_iso(scraped.end_date),
            "source": SOURCE_LINKEDIN,
        }
        values.update(company_columns(self._resolve_identity(scraped)))
        location = self._resolve_location(entry.location)
        if location is not None:
            values["location_city"] = location.city
            values["location_state"] = location.state

        experience_id = self.repo.insert(member_id, values)
        logger.debug("Created work experience", extra={"member_id": member_id, "status": "created"})
        return Created(experience_id)

    def _update(self, record: WorkExperienceRecord, scraped: QualifiedExperience) -> SyncOutcome:
        entry = scraped.entry
        candidate: Dict[str, Any] = {
            "title": entry.position,
            "description": entry.description,
            "start_date": to_iso(scraped.start_date),
        }

        identity = self._reresolve_identity(record, scraped)
        if identity is not None:
            candidate.update(company_columns(identity))

        employment_type = employment_type_from_text(entry.employment_type)
        if employment_type:
            candidate["employment_type"] = employment_type

        location_type = location_type_from_text(entry.workplace_type)
        if location_type:
            candidate["location_type"] = location_type

        location = self._resolve_location(entry.location)
        if location is not None:
            candidate["location_city"] = location.city
            candidate["location_state"] = location.state

        # A missing end date on the profile means "current"; never clear a stored one
        if scraped.end_date is not None:
            candidate["end_date"] = to_iso(scraped.end_date)

        fields = {k: v for k, v in candidate.items() if getattr(record, k) != v}
        if not fields:
            return Skipped("unchanged", record.id)
        self.repo.update(record.id, fields)
        logger.debug(
            "Updated work experience",
            extra={"member_id": record.member_id, "status": "updated"},
        )
        return Updated(record.id, tuple(sorted(fields)))

    def _resolve_identity(self, scraped: QualifiedExperience) -> CompanyIdentity:
        company_id = self.companies.resolve_or_create(scraped.company_linkedin_id)
        if company_id:
            return CompanyRef(company_id)
        return FreeTextCompany(scraped.entry.company_name)

    def _reresolve_identity(
        self, record: WorkExperienceRecord, scraped: QualifiedExperience
    ) -> Optional[CompanyIdentity]:
        if scraped.company_linkedin_id == record.company_linkedin_id:
            return None
        company_id = self.companies.resolve_or_create(scraped.company_linkedin_id)
        return CompanyRef(company_id) if company_id else None

    def _resolve_location(self, text: Optional[str]) -> Optional[ResolvedLocation]:
        if self.locations is None or not text:
            return None
        return self.locations.resolve(text)
