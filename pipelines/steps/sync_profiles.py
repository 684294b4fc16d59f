from __future__ import annotations

import logging
import sqlite3
from typing import Dict, List, Optional

from pydantic import ValidationError

from db.connection import transaction
from db.repos.educations_repo import EducationsRepo
from db.repos.members_repo import MembersRepo
from db.repos.work_experiences_repo import WorkExperiencesRepo
from models.linkedin_profile import LinkedInProfile
from models.member_record import MemberRecord
from models.sync_outcome import Created, Skipped, SyncOutcome, Updated
from pipelines.runner import RunContext
from ports.collaborators import (
    CachePort,
    CompanyResolverPort,
    EventSinkPort,
    LocationResolverPort,
    ProfileFetcherPort,
    SchoolResolverPort,
)
from services.domain_utils import normalize_linkedin_profile_url
from services.education_sync import EducationReconciler
from services.experience_sync import ExperienceReconciler
from services.member_sync import ProfileFieldReconciler
from utils.batching import split_list
from utils.event_logger import LINKEDIN_PROFILE_SYNCED


logger = logging.getLogger(__name__)

_COUNTERS = (
    "batches",
    "cache_hits",
    "profiles_fetched",
    "profiles_dropped",
    "members_synced",
    "members_failed",
    "members_unmatched",
    "fetch_failures",
    "educations_created",
    "educations_updated",
    "educations_skipped",
    "experiences_created",
    "experiences_updated",
    "experiences_skipped",
)


def _tally(counts: Dict[str, int], kind: str, outcome: SyncOutcome) -> None:
    if isinstance(outcome, Created):
        counts[f"{kind}_created"] += 1
    elif isinstance(outcome, Updated):
        counts[f"{kind}_updated"] += 1
    elif isinstance(outcome, Skipped):
        counts[f"{kind}_skipped"] += 1
    else:
        raise TypeError(f"Unknown sync outcome: {outcome!r}")


def _current_group(groups: Dict[str, List], member_id: str, fresh: List, kind: str) -> List:
    """The member's loaded rows, swapped for the re-read ones when the load went stale."""
    if groups.get(member_id, []) != fresh:
        logger.info(
            "Stored %s changed since load; using the re-read rows",
            kind,
            extra={"step": "sync_member", "member_id": member_id, "status": "stale_snapshot"},
        )
        groups[member_id] = fresh
    return groups.setdefault(member_id, fresh)


class _MemberIndex:
    """Re-associates documents with members by their echoed lookup key."""

    def __init__(self, members: List[MemberRecord]) -> None:
        self.by_key: Dict[str, MemberRecord] = {}
        self.by_url: Dict[str, MemberRecord] = {}
        for member in members:
            if member.linkedin_url:
                self.by_key[member.linkedin_url] = member
                normalized = normalize_linkedin_profile_url(member.linkedin_url)
                if normalized:
                    self.by_url.setdefault(normalized, member)

    def find(self, lookup_key: str) -> Optional[MemberRecord]:
        member = self.by_key.get(lookup_key)
        if member is not None:
            return member
        normalized = normalize_linkedin_profile_url(lookup_key)
        return self.by_url.get(normalized) if normalized else None


class SyncProfileBatches:
    """Fetches profiles batch by batch and reconciles each member in its own transaction.

    Per batch: probe the cache, fetch the misses with one collaborator call,
    then cache and reconcile every document. Cache failures only cost a hit.
    A failed fetch skips only that batch's uncached members; a failed member
    rolls back only that member.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        fetcher: ProfileFetcherPort,
        cache: CachePort,
        companies: CompanyResolverPort,
        schools: SchoolResolverPort,
        locations: Optional[LocationResolverPort] = None,
        events: Optional[EventSinkPort] = None,
        batch_size: int = 100,
        cache_ttl_seconds: Optional[int] = None,
    ) -> None:
        self.conn = conn
        self.fetcher = fetcher
        self.cache = cache
        self.events = events
        self.batch_size = batch_size
        self.cache_ttl_seconds = cache_ttl_seconds

        self.members_repo = MembersRepo(conn)
        self.educations_repo = EducationsRepo(conn)
        self.experiences_repo = WorkExperiencesRepo(conn)
        self.profile_fields = ProfileFieldReconciler(self.members_repo, locations)
        self.educations = EducationReconciler(self.educations_repo, schools)
        self.experiences = ExperienceReconciler(self.experiences_repo, companies, locations)

    def cache_key(self, lookup_key: str) -> str:
        return f"{self.fetcher.source_tag}:{lookup_key}"

    def run(self, ctx: RunContext) -> RunContext:
        for name in _COUNTERS:
            ctx.meta.setdefault(name, 0)

        for index, batch in enumerate(split_list(list(ctx.members), self.batch_size), start=1):
            ctx.meta["batches"] += 1
            logger.info(
                "Syncing batch of %d members",
                len(batch),
                extra={"step": "sync_profiles", "batch": index, "status": "start"},
            )
            documents = self._collect_documents(ctx, batch, index)
            self._reconcile_batch(ctx, batch, documents)
            logger.info(
                "Finished batch",
                extra={"step": "sync_profiles", "batch": index, "status": "done"},
            )
        return ctx

    # --- Fetching ---

    def _collect_documents(
        self, ctx: RunContext, batch: List[MemberRecord], index: int
    ) -> List[LinkedInProfile]:
        """Cached documents first, then whatever one fetch returned for the misses."""
        documents: List[LinkedInProfile] = []
        pending: List[str] = []
        for member in batch:
            key = member.linkedin_url
            if not key:
                continue
            cached = self._cached_profile(key)
            if cached is not None:
                ctx.meta["cache_hits"] += 1
                documents.append(cached)
            else:
                pending.append(key)

        if not pending:
            return documents

        try:
            fetched = self.fetcher.fetch_profiles(pending)
        except Exception as exc:
            # Uncached members of this batch stay unsynced until the next run
            ctx.meta["fetch_failures"] += 1
            logger.warning(
                "Profile fetch failed; skipping %d uncached members",
                len(pending),
                extra={"step": "fetch_profiles", "batch": index, "status": "failed", "error": str(exc)},
            )
            return documents

        ctx.meta["profiles_fetched"] += len(fetched)
        ctx.meta["profiles_dropped"] += max(0, len(pending) - len(fetched))
        documents.extend(fetched)
        return documents

    def _cached_profile(self, key: str) -> Optional[LinkedInProfile]:
        try:
            raw = self.cache.get(self.cache_key(key))
        except Exception as exc:
            # The cache is advisory; an unreadable store is a miss
            logger.warning(
                "Cache read failed; fetching instead",
                extra={"step": "cache", "status": "cache_error", "error": str(exc)},
            )
            return None
        if raw is None:
            return None
        try:
            return LinkedInProfile.model_validate(raw)
        except ValidationError:
            # Treat an unreadable entry as a miss; the next fetch overwrites it
            logger.warning("Ignoring malformed cached profile", extra={"status": "cache_corrupt"})
            return None

    # --- Reconciling ---

    def _reconcile_batch(
        self, ctx: RunContext, batch: List[MemberRecord], documents: List[LinkedInProfile]
    ) -> None:
        index = _MemberIndex(batch)
        seen = set()
        for profile in documents:
            member = index.find(profile.lookup_key)
            if member is None or member.id in seen:
                ctx.meta["members_unmatched"] += 1
                logger.warning(
                    "No member for profile lookup key",
                    extra={"step": "sync_profiles", "status": "unmatched"},
                )
                continue
            seen.add(member.id)

            self._store_profile(member, profile)

            try:
                with transaction(self.conn):
                    counts = self._sync_member(ctx, member, profile)
            except Exception as exc:
                ctx.meta["members_failed"] += 1
                logger.warning(
                    "Member sync rolled back",
                    extra={"step": "sync_member", "member_id": member.id, "status": "rolled_back", "error": str(exc)},
                )
                continue

            ctx.meta["members_synced"] += 1
            for name, value in counts.items():
                ctx.meta[name] += value
            logger.info(
                "Synced member",
                extra={"step": "sync_member", "member_id": member.id, "status": "ok"},
            )
            if self.events is not None:
                self.events.track(LINKEDIN_PROFILE_SYNCED, member.id, counts)

    def _store_profile(self, member: MemberRecord, profile: LinkedInProfile) -> None:
        """Cache under the member's own key; rewriting a cache hit restarts its TTL."""
        try:
            self.cache.set(
                self.cache_key(member.linkedin_url),
                profile.model_dump(mode="json", by_alias=True),
                self.cache_ttl_seconds,
            )
        except Exception as exc:
            logger.warning(
                "Cache write failed; continuing without caching",
                extra={"step": "cache", "member_id": member.id, "status": "cache_error", "error": str(exc)},
            )

    def _sync_member(self, ctx: RunContext, member: MemberRecord, profile: LinkedInProfile) -> Dict[str, int]:
        # Re-read inside the transaction; the batch snapshot may be stale
        current = self.members_repo.get_record(member.id)
        if current is None:
            raise LookupError(f"Member {member.id} no longer exists")
        educations = _current_group(
            ctx.educations_by_member, member.id, self.educations_repo.list_for_member(member.id), "educations"
        )
        experiences = _current_group(
            ctx.experiences_by_member, member.id, self.experiences_repo.list_for_member(member.id), "experiences"
        )

        counts: Dict[str, int] = {
            "educations_created": 0,
            "educations_updated": 0,
            "educations_skipped": 0,
            "experiences_created": 0,
            "experiences_updated": 0,
            "experiences_skipped": 0,
        }
        self.profile_fields.reconcile(current, profile)
        for entry in profile.education:
            _tally(counts, "educations", self.educations.reconcile(member.id, entry, educations))
        for entry in profile.experience:
            _tally(counts, "experiences", self.experiences.reconcile(member.id, entry, experiences))
        return counts
