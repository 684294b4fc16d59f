from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from db.repos.companies_repo import CompaniesRepo
from db.repos.schools_repo import SchoolsRepo
from models.linkedin_profile import LinkedInOrganization
from services.apify_client import ApifyError


logger = logging.getLogger(__name__)

OrganizationLookupFn = Callable[[str], Optional[LinkedInOrganization]]

STATES_MAP: Mapping[str, str] = MappingProxyType({
    "Alabama": "AL",
    "Alaska": "AK",
    "Arizona": "AZ",
    "Arkansas": "AR",
    "California": "CA",
    "Colorado": "CO",
    "Connecticut": "CT",
    "Delaware": "DE",
    "District Of Columbia": "DC",
    "Florida": "FL",
    "Georgia": "GA",
    "Hawaii": "HI",
    "Idaho": "ID",
    "Illinois": "IL",
    "Indiana": "IN",
    "Iowa": "IA",
    "Kansas": "KS",
    "Kentucky": "KY",
    "Louisiana": "LA",
    "Maine": "ME",
    "Maryland": "MD",
    "Massachusetts": "MA",
    "Michigan": "MI",
    "Minnesota": "MN",
    "Mississippi": "MS",
    "Missouri": "MO",
    "Montana": "MT",
    "Nebraska": "NE",
    "Nevada": "NV",
    "New Hampshire": "NH",
    "New Jersey": "NJ",
    "New Mexico": "NM",
    "New York": "NY",
    "North Carolina": "NC",
    "North Dakota": "ND",
    "Ohio": "OH",
    "Oklahoma": "OK",
    "Oregon": "OR",
    "Pennsylvania": "PA",
    "Puerto Rico": "PR",
    "Rhode Island": "RI",
    "South Carolina": "SC",
    "South Dakota": "SD",
    "Tennessee": "TN",
    "Texas": "TX",
    "Utah": "UT",
    "Vermont": "VT",
    "Virginia": "VA",
    "Washington": "WA",
    "West Virginia": "WV",
    "Wisconsin": "WI",
    "Wyoming": "WY",
})


def state_code(area: Optional[str]) -> Optional[str]:
    """'New York' -> 'NY'; anything unknown is kept as given."""
    if not area:
        return None
    return STATES_MAP.get(area, area)


def _lookup_organization(lookup: Optional[OrganizationLookupFn], linkedin_id: str) -> Optional[LinkedInOrganization]:
    if lookup is None:
        return None
    try:
        return lookup(linkedin_id)
    except ApifyError as exc:
        logger.warning(
            "Organization lookup failed; treating as unresolved",
            extra={"step": "canonicalize", "status": "unresolved", "error": str(exc)},
        )
        return None


class CompanyResolver:
    """Maps a LinkedIn company id to a canonical company row, creating it on first sight.

    Inserts run on the connection the repo wraps, so they join the caller's
    member transaction.
    """

    def __init__(self, repo: CompaniesRepo, lookup: Optional[OrganizationLookupFn] = None) -> None:
        self.repo = repo
        self.lookup = lookup

    def resolve_or_create(self, linkedin_id: Optional[str]) -> Optional[str]:
        if not linkedin_id:
            return None
        existing = self.repo.find_id_by_linkedin_id(linkedin_id)
        if existing:
            return existing
        org = _lookup_organization(self.lookup, linkedin_id)
        if org is None:
            return None
        # The actor may answer with a different id for vanity slugs
        company_id = self.repo.find_id_by_linkedin_id(org.id)
        if company_id is None:
            company_id = self.repo.insert(org.name, org.id, image_url=org.logo)
        if org.id != linkedin_id:
            self.repo.add_alias(company_id, linkedin_id)
        return company_id


class SchoolResolver:
    """Same contract as CompanyResolver, for schools; keeps the first campus address."""

    def __init__(self, repo: SchoolsRepo, lookup: Optional[OrganizationLookupFn] = None) -> None:
        self.repo = repo
        self.lookup = lookup

    def resolve_or_create(self, linkedin_id: Optional[str]) -> Optional[str]:
        if not linkedin_id:
            return None
        existing = self.repo.find_id_by_linkedin_id(linkedin_id)
        if existing:
            return existing
        org = _lookup_organization(self.lookup, linkedin_id)
        if org is None:
            return None
        # Remember the asked-for id so later syncs skip the lookup
        school_id = self.repo.find_id_by_linkedin_id(org.id)
        if school_id is None:
            school_id = self._insert(org)
        if org.id != linkedin_id:
            self.repo.add_alias(school_id, linkedin_id)
        return school_id

    def _insert(self, org: LinkedInOrganization) -> str:
        location = org.locations[0] if org.locations else None
        return self.repo.insert(
            org.name,
            org.id,
            logo_url=org.logo,
            address_city=location.city if location else None,
            address_state=state_code(location.geographic_area) if location else None,
            address_zip=location.postal_code if location else None,
        )
