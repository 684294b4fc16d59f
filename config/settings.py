from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


FOUR_WEEKS_IN_SECONDS = 60 * 60 * 24 * 7 * 4


def _load_env() -> None:
    # Centralized dotenv loading; safe if .env missing
    load_dotenv()


@dataclass(frozen=True)
class Settings:
    # Core/runtime
    db_path: str
    cache_db_path: str
    run_env: str
    log_level: str

    # Apify (profile + organization actors)
    apify_api_token: str | None
    apify_base_url: str
    apify_profile_actor_id: str
    apify_organization_actor_id: str
    apify_wait_seconds: int
    request_timeout_seconds: int

    # Google Places (location resolution)
    google_maps_api_key: str | None
    google_places_autocomplete_url: str
    google_places_details_url: str

    # Sync behaviour
    sync_batch_size: int
    profile_cache_ttl_seconds: int
    location_cache_ttl_seconds: int

    # Observability
    sync_event_log_path: str = "logs/sync_events.jsonl"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_env()
    return Settings(
        db_path=os.getenv("DB_PATH", "members.db"),
        cache_db_path=os.getenv("CACHE_DB_PATH", "cache.db"),
        run_env=os.getenv("RUN_ENV", "local"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        apify_api_token=os.getenv("APIFY_API_TOKEN"),
        apify_base_url=os.getenv("APIFY_BASE_URL", "https://api.apify.com/v2"),
        apify_profile_actor_id=os.getenv("APIFY_PROFILE_ACTOR_ID", "harvestapi~linkedin-profile-scraper"),
        apify_organization_actor_id=os.getenv("APIFY_ORGANIZATION_ACTOR_ID", "harvestapi~linkedin-company"),
        apify_wait_seconds=int(os.getenv("APIFY_WAIT_SECONDS", "60")),
        request_timeout_seconds=int(os.getenv("REQUEST_TIMEOUT", "90")),
        google_maps_api_key=os.getenv("GOOGLE_MAPS_API_KEY"),
        google_places_autocomplete_url=os.getenv(
            "GOOGLE_PLACES_AUTOCOMPLETE_URL",
            "https://maps.googleapis.com/maps/api/place/autocomplete/json",
        ),
        google_places_details_url=os.getenv(
            "GOOGLE_PLACES_DETAILS_URL",
            "https://maps.googleapis.com/maps/api/place/details/json",
        ),
        sync_batch_size=int(os.getenv("SYNC_BATCH_SIZE", "100")),
        profile_cache_ttl_seconds=int(os.getenv("PROFILE_CACHE_TTL_SECONDS", str(FOUR_WEEKS_IN_SECONDS))),
        location_cache_ttl_seconds=int(os.getenv("LOCATION_CACHE_TTL_SECONDS", str(FOUR_WEEKS_IN_SECONDS))),
        sync_event_log_path=os.getenv("SYNC_EVENT_LOG_PATH", "logs/sync_events.jsonl"),
    )
