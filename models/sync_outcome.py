from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union


# Either/or identity of the organization behind a history row


@dataclass(frozen=True)
class SchoolRef:
    school_id: str


@dataclass(frozen=True)
class FreeTextSchool:
    name: str


SchoolIdentity = Union[SchoolRef, FreeTextSchool]


@dataclass(frozen=True)
class CompanyRef:
    company_id: str


@dataclass(frozen=True)
class FreeTextCompany:
    name: str


CompanyIdentity = Union[CompanyRef, FreeTextCompany]


def school_columns(identity: SchoolIdentity) -> dict:
    """Row values for an identity; exactly one column is non-null."""
    if isinstance(identity, SchoolRef):
        return {"school_id": identity.school_id, "other_school": None}
    return {"school_id": None, "other_school": identity.name}


def company_columns(identity: CompanyIdentity) -> dict:
    if isinstance(identity, CompanyRef):
        return {"company_id": identity.company_id, "company_name": None}
    return {"company_id": None, "company_name": identity.name}


# Result of reconciling one scraped record


@dataclass(frozen=True)
class Created:
    record_id: str


@dataclass(frozen=True)
class Updated:
    record_id: str
    fields: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Skipped:
    reason: str
    record_id: Optional[str] = None


SyncOutcome = Union[Created, Updated, Skipped]
