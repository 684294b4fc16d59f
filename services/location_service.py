from __future__ import annotations

import logging
from dataclasses import asdict
from typing import List, Optional

import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from config.settings import Settings, get_settings
from ports.collaborators import CachePort, ResolvedLocation


logger = logging.getLogger(__name__)


class _Prediction(BaseModel):
    description: str = Field(min_length=1)
    place_id: str = Field(min_length=1)

    model_config = ConfigDict(extra="ignore")


class _AutocompleteResponse(BaseModel):
    predictions: List[_Prediction] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class _AddressComponent(BaseModel):
    long_name: str
    short_name: str
    types: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class _LatLng(BaseModel):
    lat: float
    lng: float


class _Geometry(BaseModel):
    location: _LatLng

    model_config = ConfigDict(extra="ignore")


class _PlaceDetails(BaseModel):
    address_components: List[_AddressComponent] = Field(default_factory=list)
    geometry: _Geometry
    name: str
    formatted_address: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class _DetailsResponse(BaseModel):
    result: _PlaceDetails

    model_config = ConfigDict(extra="ignore")


def _component(details: _PlaceDetails, *types: str) -> Optional[_AddressComponent]:
    for component in details.address_components:
        if any(t in component.types for t in types):
            return component
    return None


class GooglePlacesLocationResolver:
    """Free-text location -> city/state/coordinates via Places autocomplete + details.

    Only complete results (city and state) are cached; anything else is
    looked up again next time.
    """

    def __init__(
        self,
        cache: Optional[CachePort] = None,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.cache = cache
        self.session = session or requests.Session()

    def resolve(self, text: Optional[str]) -> Optional[ResolvedLocation]:
        if not text or not text.strip():
            return None
        if not self.settings.google_maps_api_key:
            return None

        key = f"location:{text}"
        if self.cache is not None:
            cached = self.cache.get(key)
            if isinstance(cached, dict):
                try:
                    return ResolvedLocation(**cached)
                except TypeError:
                    logger.warning("Ignoring malformed cached location", extra={"status": "cache_corrupt"})

        try:
            location = self._lookup(text)
        except (requests.RequestException, ValueError, ValidationError) as exc:
            logger.warning(
                "Location lookup failed",
                extra={"step": "resolve_location", "status": "unresolved", "error": str(exc)},
            )
            return None

        if location is not None and self.cache is not None:
            self.cache.set(key, asdict(location), self.settings.location_cache_ttl_seconds)
        return location

    def _lookup(self, text: str) -> Optional[ResolvedLocation]:
        timeout = self.settings.request_timeout_seconds
        resp = self.session.get(
            self.settings.google_places_autocomplete_url,
            params={
                "key": self.settings.google_maps_api_key,
                "input": text.strip().lower(),
                "types": "locality|administrative_area_level_3",
            },
            timeout=timeout,
        )
        resp.raise_for_status()
        predictions = _AutocompleteResponse.model_validate(resp.json()).predictions
        if not predictions:
            return None
        top = predictions[0]

        resp = self.session.get(
            self.settings.google_places_details_url,
            params={
                "key": self.settings.google_maps_api_key,
                "place_id": top.place_id,
                "fields": "address_components,geometry,name,formatted_address",
            },
            timeout=timeout,
        )
        resp.raise_for_status()
        details = _DetailsResponse.model_validate(resp.json()).result

        city = _component(details, "locality", "administrative_area_level_3")
        state = _component(details, "administrative_area_level_1")
        if city is None or state is None:
            return None
        return ResolvedLocation(
            city=city.long_name,
            state=state.short_name,
            formatted_address=details.formatted_address or top.description,
            latitude=details.geometry.location.lat,
            longitude=details.geometry.location.lng,
        )
