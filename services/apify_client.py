from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError

from config.settings import Settings, get_settings
from models.linkedin_profile import LinkedInOrganization, LinkedInProfile


logger = logging.getLogger(__name__)


class ApifyError(RuntimeError):
    """An actor run could not be started, finished or read."""


class ApifyClient:
    """Runs Apify actors synchronously and returns their dataset items."""

    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None) -> None:
        self.settings = settings or get_settings()
        if not self.settings.apify_api_token and (self.settings.run_env or "").lower() != "test":
            raise RuntimeError("APIFY_API_TOKEN is required to fetch LinkedIn profiles")
        self.session = session or requests.Session()

    def run_actor(self, actor_id: str, body: Dict[str, Any]) -> List[Any]:
        dataset_id = self._start_run(actor_id, body)
        return self._get_dataset(dataset_id)

    def _start_run(self, actor_id: str, body: Dict[str, Any]) -> str:
        url = f"{self.settings.apify_base_url}/acts/{actor_id}/runs"
        params = {"token": self.settings.apify_api_token, "waitForFinish": self.settings.apify_wait_seconds}
        try:
            resp = self.session.post(url, params=params, json=body, timeout=self.settings.request_timeout_seconds)
        except requests.RequestException as exc:
            raise ApifyError(f"Failed to start run for {actor_id}: {exc}") from exc
        if not resp.ok:
            raise ApifyError(f"Failed to start run for {actor_id}: HTTP {resp.status_code}")
        try:
            return str(resp.json()["data"]["defaultDatasetId"])
        except (ValueError, KeyError, TypeError) as exc:
            raise ApifyError(f"Failed to parse run for {actor_id}") from exc

    def _get_dataset(self, dataset_id: str) -> List[Any]:
        url = f"{self.settings.apify_base_url}/datasets/{dataset_id}/items"
        try:
            resp = self.session.get(
                url,
                params={"token": self.settings.apify_api_token},
                timeout=self.settings.request_timeout_seconds,
            )
        except requests.RequestException as exc:
            raise ApifyError(f"Failed to get dataset {dataset_id}: {exc}") from exc
        if not resp.ok:
            raise ApifyError(f"Failed to get dataset {dataset_id}: HTTP {resp.status_code}")
        try:
            data = resp.json()
        except ValueError as exc:
            raise ApifyError(f"Dataset {dataset_id} is not JSON") from exc
        if not isinstance(data, list):
            raise ApifyError(f"Dataset {dataset_id} is not a list")
        return data


class ApifyProfileFetcher:
    """Profile-fetch collaborator backed by the LinkedIn profile actor."""

    def __init__(self, client: ApifyClient, actor_id: Optional[str] = None) -> None:
        self.client = client
        self.actor_id = actor_id or client.settings.apify_profile_actor_id

    @property
    def source_tag(self) -> str:
        return f"apify:{self.actor_id}"

    def fetch_profiles(self, keys: List[str]) -> List[LinkedInProfile]:
        if not keys:
            return []
        items = self.client.run_actor(self.actor_id, {"urls": list(keys)})
        return validate_profiles(items)


def validate_profiles(items: List[Any]) -> List[LinkedInProfile]:
    """Keep only items that match the profile document shape."""
    profiles: List[LinkedInProfile] = []
    for item in items:
        try:
            profiles.append(LinkedInProfile.model_validate(item))
        except ValidationError as exc:
            logger.warning(
                "Dropping malformed LinkedIn profile",
                extra={"step": "fetch_profiles", "status": "dropped", "error": exc.error_count()},
            )
    return profiles


class OrganizationLookup:
    """Scrapes a company/school page by LinkedIn id via the organization actor."""

    def __init__(self, client: ApifyClient, actor_id: Optional[str] = None) -> None:
        self.client = client
        self.actor_id = actor_id or client.settings.apify_organization_actor_id

    def __call__(self, linkedin_id: str) -> Optional[LinkedInOrganization]:
        items = self.client.run_actor(self.actor_id, {"companies": [linkedin_id]})
        for item in items:
            try:
                return LinkedInOrganization.model_validate(item)
            except ValidationError:
                continue
        return None
