from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional


MONTH_MAP: Mapping[str, str] = MappingProxyType({
    "Jan": "01",
    "Feb": "02",
    "Mar": "03",
    "Apr": "04",
    "May": "05",
    "Jun": "06",
    "Jul": "07",
    "Aug": "08",
    "Sep": "09",
    "Oct": "10",
    "Nov": "11",
    "Dec": "12",
})

EMPLOYMENT_TYPE_MAP: Mapping[str, str] = MappingProxyType({
    "Apprenticeship": "apprenticeship",
    "Contract": "contract",
    "Freelance": "freelance",
    "Full-time": "full_time",
    "Internship": "internship",
    "Part-time": "part_time",
})

DEFAULT_EMPLOYMENT_TYPE = "full_time"

LOCATION_TYPE_MAP: Mapping[str, str] = MappingProxyType({
    "Hybrid": "hybrid",
    "On-site": "in_person",
    "Remote": "remote",
})

# Checked in order; first substring hit wins
_DEGREE_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("bachelor", "bachelors"),
    ("master", "masters"),
    ("doctor", "doctoral"),
    ("associate", "associate"),
    ("certificate", "certificate"),
)

_MAJOR_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("Computer Science",), "computer_science"),
    (("Computer Engineering", "Electrical Engineering"), "electrical_or_computer_engineering"),
    (("Data Science", "Data Analytics"), "data_science"),
    (("Information Science",), "information_science"),
    (("Software Engineering",), "software_engineering"),
    (("Cybersecurity",), "cybersecurity"),
)

OTHER_MAJOR = "other"


def month_number(abbreviation: Optional[str]) -> Optional[str]:
    """'Jun' -> '06'; unknown or missing -> None."""
    if not abbreviation:
        return None
    return MONTH_MAP.get(abbreviation.strip()[:3].title())


def degree_type_from_text(degree: Optional[str]) -> Optional[str]:
    """Infer the internal degree type from free text, case-insensitively."""
    if not degree:
        return None
    low = degree.lower()
    for keyword, degree_type in _DEGREE_KEYWORDS:
        if keyword in low:
            return degree_type
    return None


def major_from_field_of_study(field_of_study: str) -> str:
    low = field_of_study.lower()
    for keywords, major in _MAJOR_KEYWORDS:
        if any(k.lower() in low for k in keywords):
            return major
    return OTHER_MAJOR


def employment_type_from_text(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return EMPLOYMENT_TYPE_MAP.get(value)


def location_type_from_text(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return LOCATION_TYPE_MAP.get(value)
