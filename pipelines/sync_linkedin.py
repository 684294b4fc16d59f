from __future__ import annotations

import sqlite3
from typing import Optional

from config.settings import Settings, get_settings
from db.repos.cache_repo import SqliteCache
from db.repos.companies_repo import CompaniesRepo
from db.repos.schools_repo import SchoolsRepo
from pipelines.runner import Pipeline
from pipelines.steps.load_candidates import LoadSyncCandidates
from pipelines.steps.sync_profiles import SyncProfileBatches
from ports.collaborators import EventSinkPort, LocationResolverPort, ProfileFetcherPort
from services.apify_client import ApifyClient, ApifyProfileFetcher, OrganizationLookup
from services.canonical import CompanyResolver, OrganizationLookupFn, SchoolResolver
from services.location_service import GooglePlacesLocationResolver
from utils.event_logger import JsonlEventSink


def build_sync_pipeline(
    conn: sqlite3.Connection,
    cache_conn: sqlite3.Connection,
    settings: Optional[Settings] = None,
    fetcher: Optional[ProfileFetcherPort] = None,
    organization_lookup: Optional[OrganizationLookupFn] = None,
    locations: Optional[LocationResolverPort] = None,
    events: Optional[EventSinkPort] = None,
    batch_size: Optional[int] = None,
) -> Pipeline:
    """Wire the LinkedIn sync with live adapters; any collaborator can be overridden.

    `cache_conn` must be a different connection from `conn` so cache writes
    commit on their own.
    """
    settings = settings or get_settings()
    cache = SqliteCache(cache_conn)

    if fetcher is None or organization_lookup is None:
        client = ApifyClient(settings)
        fetcher = fetcher or ApifyProfileFetcher(client)
        organization_lookup = organization_lookup or OrganizationLookup(client)
    if locations is None:
        locations = GooglePlacesLocationResolver(cache=cache, settings=settings)
    if events is None:
        events = JsonlEventSink(settings.sync_event_log_path)

    return Pipeline([
        LoadSyncCandidates(conn),
        SyncProfileBatches(
            conn,
            fetcher=fetcher,
            cache=cache,
            companies=CompanyResolver(CompaniesRepo(conn), organization_lookup),
            schools=SchoolResolver(SchoolsRepo(conn), organization_lookup),
            locations=locations,
            events=events,
            batch_size=batch_size or settings.sync_batch_size,
            cache_ttl_seconds=settings.profile_cache_ttl_seconds,
        ),
    ])
