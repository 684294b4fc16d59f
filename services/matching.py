"""Identity matching between scraped history entries and stored rows.

Education matching is a binary gate (degree type + school identity).
Experience matching gates on company identity, then requires a confidence
score of at least EXPERIENCE_MATCH_THRESHOLD:

    title equal ............................ 2
    start year / start month equal ......... 1 each
    end year / end month equal ............. 1 each (stored row must have them)
    both rows have no end date (current) ... 1
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from models.history_records import EducationRecord, WorkExperienceRecord
from models.linkedin_profile import LinkedInEducation, LinkedInExperience
from services.dates import normalize_date
from services.mapping import degree_type_from_text, month_number


logger = logging.getLogger(__name__)

TITLE_POINTS = 2
DATE_PART_POINTS = 1
BOTH_CURRENT_POINTS = 1
EXPERIENCE_MATCH_THRESHOLD = 3


@dataclass(frozen=True)
class QualifiedEducation:
    entry: LinkedInEducation
    degree_type: str
    field_of_study: str
    start_date: date
    end_date: date

    @property
    def school_linkedin_id(self) -> Optional[str]:
        return self.entry.school_linkedin_id


@dataclass(frozen=True)
class QualifiedExperience:
    entry: LinkedInExperience
    company_linkedin_id: str
    start_date: date
    end_date: Optional[date]


def names_overlap(a: Optional[str], b: Optional[str]) -> bool:
    """Case-sensitive containment in either direction; empty names never overlap."""
    if not a or not b:
        return False
    return a in b or b in a


# --- Education ---

def qualify_education(entry: LinkedInEducation) -> Optional[QualifiedEducation]:
    """Return the entry with its derived fields, or None when it must be skipped.

    Entries without a recognizable degree, a field of study, or both a start
    and end year are usually pre-college or non-accredited programs.
    """
    degree_type = degree_type_from_text(entry.degree)
    if not degree_type or not entry.field_of_study:
        logger.debug("Skipping education without degree/field", extra={"status": "disqualified"})
        return None
    start_date = normalize_date(entry.start_date, "education-start")
    end_date = normalize_date(entry.end_date, "education-end")
    if start_date is None or end_date is None:
        logger.debug("Skipping education without dates", extra={"status": "disqualified"})
        return None
    return QualifiedEducation(
        entry=entry,
        degree_type=degree_type,
        field_of_study=entry.field_of_study,
        start_date=start_date,
        end_date=end_date,
    )


def school_identity_matches(scraped: QualifiedEducation, record: EducationRecord) -> bool:
    linkedin_id = scraped.school_linkedin_id
    if linkedin_id and record.school_linkedin_id == linkedin_id:
        return True
    return names_overlap(record.school, scraped.entry.school_name)


def find_matching_education(
    scraped: QualifiedEducation, educations: Iterable[EducationRecord]
) -> Optional[EducationRecord]:
    for record in educations:
        if record.degree_type == scraped.degree_type and school_identity_matches(scraped, record):
            return record
    return None


# --- Experience ---

def qualify_experience(entry: LinkedInExperience) -> Optional[QualifiedExperience]:
    """Only entries with a LinkedIn company id and a start year are considered."""
    if not entry.company_id:
        logger.debug("Skipping experience without company id", extra={"status": "disqualified"})
        return None
    start_date = normalize_date(entry.start_date, "experience-start")
    if start_date is None:
        logger.debug("Skipping experience without start year", extra={"status": "disqualified"})
        return None
    return QualifiedExperience(
        entry=entry,
        company_linkedin_id=entry.company_id,
        start_date=start_date,
        # Missing end date means the position is current
        end_date=normalize_date(entry.end_date, "experience-end"),
    )


def company_identity_matches(scraped: QualifiedExperience, record: WorkExperienceRecord) -> bool:
    if record.company_linkedin_id and record.company_linkedin_id == scraped.company_linkedin_id:
        return True
    return names_overlap(record.company, scraped.entry.company_name)


def experience_match_score(scraped: QualifiedExperience, record: WorkExperienceRecord) -> int:
    entry = scraped.entry
    start = entry.start_date
    end = entry.end_date
    score = 0

    if entry.position == record.title:
        score += TITLE_POINTS

    if record.start_year and start and start.year and int(record.start_year) == start.year:
        score += DATE_PART_POINTS

    if record.start_month and start and month_number(start.month) == record.start_month:
        score += DATE_PART_POINTS

    if record.end_year and end and end.year and int(record.end_year) == end.year:
        score += DATE_PART_POINTS

    if record.end_month and end and month_number(end.month) == record.end_month:
        score += DATE_PART_POINTS

    scraped_is_current = not (end and end.year)
    if scraped_is_current and not record.end_date:
        score += BOTH_CURRENT_POINTS

    return score


def find_matching_experience(
    scraped: QualifiedExperience, experiences: Iterable[WorkExperienceRecord]
) -> Optional[WorkExperienceRecord]:
    """Highest-scoring row that shares the company; ties keep the earlier row."""
    best: Optional[WorkExperienceRecord] = None
    best_score = EXPERIENCE_MATCH_THRESHOLD - 1
    for record in experiences:
        # Company identity is a hard gate, never part of the score
        if not company_identity_matches(scraped, record):
            continue
        score = experience_match_score(scraped, record)
        if score > best_score:
            best, best_score = record, score
    return best
