from __future__ import annotations

from datetime import date
from types import MappingProxyType
from typing import Literal, Mapping, Optional, Union

from models.linkedin_profile import LinkedInDate
from services.mapping import month_number


DateRole = Literal["education-start", "education-end", "experience-start", "experience-end"]

# Month assumed when only the year is known
DEFAULT_MONTH_BY_ROLE: Mapping[str, int] = MappingProxyType({
    "education-start": 8,
    "education-end": 5,
    "experience-start": 1,
    "experience-end": 12,
})


def normalize_date(partial: Union[LinkedInDate, dict, None], role: DateRole) -> Optional[date]:
    """Place a partial (month/year) date on the calendar.

    Day is always the 1st. With no usable month, the month falls back to the
    role's default (Aug/May for school start/end, Jan/Dec for jobs). Without a
    year nothing can be placed and None is returned.
    """
    if role not in DEFAULT_MONTH_BY_ROLE:
        raise ValueError(f"Unknown date role: {role}")
    if partial is None:
        return None
    if isinstance(partial, dict):
        partial = LinkedInDate.model_validate(partial)
    if not partial.year:
        return None

    month = month_number(partial.month)
    if month:
        return date(partial.year, int(month), 1)
    return date(partial.year, DEFAULT_MONTH_BY_ROLE[role], 1)


def to_iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None
