from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

from models.linkedin_profile import LinkedInProfile


@dataclass(frozen=True)
class ResolvedLocation:
    city: str
    state: str
    formatted_address: str
    latitude: float
    longitude: float


class ProfileFetcherPort(Protocol):
    source_tag: str

    def fetch_profiles(self, keys: List[str]) -> List[LinkedInProfile]:
        """Return shape-valid documents for the keys; raise instead of hanging."""
        ...


class CachePort(Protocol):
    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        ...


class CompanyResolverPort(Protocol):
    def resolve_or_create(self, linkedin_id: Optional[str]) -> Optional[str]:
        ...


class SchoolResolverPort(Protocol):
    def resolve_or_create(self, linkedin_id: Optional[str]) -> Optional[str]:
        ...


class LocationResolverPort(Protocol):
    def resolve(self, text: Optional[str]) -> Optional[ResolvedLocation]:
        ...


class EventSinkPort(Protocol):
    def track(self, event: str, member_id: str, properties: Dict[str, Any]) -> None:
        ...
