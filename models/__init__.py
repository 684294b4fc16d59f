from .linkedin_profile import (
    LinkedInDate,
    LinkedInEducation,
    LinkedInExperience,
    LinkedInOrganization,
    LinkedInProfile,
)
from .member_record import MemberRecord
from .history_records import EducationRecord, WorkExperienceRecord
from .sync_outcome import (
    CompanyRef,
    Created,
    FreeTextCompany,
    FreeTextSchool,
    SchoolRef,
    Skipped,
    SyncOutcome,
    Updated,
)

__all__ = [
    "LinkedInDate",
    "LinkedInEducation",
    "LinkedInExperience",
    "LinkedInOrganization",
    "LinkedInProfile",
    "MemberRecord",
    "EducationRecord",
    "WorkExperienceRecord",
    "CompanyRef",
    "Created",
    "FreeTextCompany",
    "FreeTextSchool",
    "SchoolRef",
    "Skipped",
    "SyncOutcome",
    "Updated",
]
