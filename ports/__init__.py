from .collaborators import (
    CachePort,
    CompanyResolverPort,
    EventSinkPort,
    LocationResolverPort,
    ProfileFetcherPort,
    ResolvedLocation,
    SchoolResolverPort,
)
from .repos import EducationsRepoPort, MembersRepoPort, WorkExperiencesRepoPort

__all__ = [
    "CachePort",
    "CompanyResolverPort",
    "EventSinkPort",
    "LocationResolverPort",
    "ProfileFetcherPort",
    "ResolvedLocation",
    "SchoolResolverPort",
    "EducationsRepoPort",
    "MembersRepoPort",
    "WorkExperiencesRepoPort",
]
