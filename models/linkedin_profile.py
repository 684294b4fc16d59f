from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from services.domain_utils import linkedin_id_from_url


class LinkedInDate(BaseModel):
    """Partial date as scraped: month is a 3-letter abbreviation, either part may be missing."""

    month: Optional[str] = None
    year: Optional[int] = None
    text: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class LinkedInEducation(BaseModel):
    school_name: str = Field(alias="schoolName")
    school_linkedin_url: Optional[str] = Field(default=None, alias="schoolLinkedinUrl")
    degree: Optional[str] = None
    field_of_study: Optional[str] = Field(default=None, alias="fieldOfStudy")
    start_date: Optional[LinkedInDate] = Field(default=None, alias="startDate")
    end_date: Optional[LinkedInDate] = Field(default=None, alias="endDate")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @property
    def school_linkedin_id(self) -> Optional[str]:
        return linkedin_id_from_url(self.school_linkedin_url)


class LinkedInExperience(BaseModel):
    company_id: Optional[str] = Field(default=None, alias="companyId")
    company_name: str = Field(alias="companyName")
    company_linkedin_url: Optional[str] = Field(default=None, alias="companyLinkedinUrl")
    position: str
    description: Optional[str] = None
    employment_type: Optional[str] = Field(default=None, alias="employmentType")
    workplace_type: Optional[str] = Field(default=None, alias="workplaceType")
    location: Optional[str] = None
    start_date: Optional[LinkedInDate] = Field(default=None, alias="startDate")
    end_date: Optional[LinkedInDate] = Field(default=None, alias="endDate")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class LinkedInParsedLocation(BaseModel):
    text: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class LinkedInLocation(BaseModel):
    parsed: LinkedInParsedLocation = Field(default_factory=LinkedInParsedLocation)

    model_config = ConfigDict(extra="ignore")


class LinkedInElement(BaseModel):
    """Summary block of the profile."""

    headline: Optional[str] = None
    location: LinkedInLocation = Field(default_factory=LinkedInLocation)
    photo: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("headline")
    @classmethod
    def _strip_headline(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None


class OriginalQuery(BaseModel):
    query: str

    model_config = ConfigDict(extra="ignore")


class LinkedInProfile(BaseModel):
    """Scraper output for one member; `original_query.query` echoes the lookup key."""

    element: LinkedInElement
    education: list[LinkedInEducation] = Field(default_factory=list)
    experience: list[LinkedInExperience] = Field(default_factory=list)
    original_query: OriginalQuery = Field(alias="originalQuery")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @property
    def lookup_key(self) -> str:
        return self.original_query.query


class LinkedInOrganizationLocation(BaseModel):
    city: Optional[str] = None
    country: Optional[str] = None
    geographic_area: Optional[str] = Field(default=None, alias="geographicArea")
    postal_code: Optional[str] = Field(default=None, alias="postalCode")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class LinkedInOrganization(BaseModel):
    """Company/school page as returned by the organization actor."""

    id: str
    name: str
    logo: Optional[str] = None
    locations: list[LinkedInOrganizationLocation] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")
