from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class EducationRecord(BaseModel):
    """App/DB record shape: non-deleted education row joined with its school.

    `school` is the canonical school name when linked, otherwise the free-text
    name; `school_linkedin_id` is only set for linked schools.
    """

    id: str
    member_id: str
    degree_type: str
    major: str
    other_major: str | None = None
    school_id: str | None = None
    other_school: str | None = None
    school: str | None = None
    school_linkedin_id: str | None = None
    start_date: str
    end_date: str | None = None

    model_config = ConfigDict(extra="ignore")


class WorkExperienceRecord(BaseModel):
    """App/DB record shape: non-deleted work experience joined with its company."""

    id: str
    member_id: str
    title: str
    company_id: str | None = None
    company_name: str | None = None
    company: str | None = None
    company_linkedin_id: str | None = None
    employment_type: str | None = None
    location_type: str | None = None
    location_city: str | None = None
    location_state: str | None = None
    start_date: str
    end_date: str | None = None
    description: str | None = None

    model_config = ConfigDict(extra="ignore")

    @property
    def start_year(self) -> str | None:
        return self.start_date[:4] if self.start_date else None

    @property
    def start_month(self) -> str | None:
        return self.start_date[5:7] if self.start_date else None

    @property
    def end_year(self) -> str | None:
        return self.end_date[:4] if self.end_date else None

    @property
    def end_month(self) -> str | None:
        return self.end_date[5:7] if self.end_date else None
