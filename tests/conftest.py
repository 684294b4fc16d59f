from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest


def pytest_configure():
    # Ensure project root is on sys.path for absolute imports like 'pipelines.steps.sync_profiles'
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))
    # Set test environment knobs
    os.environ.setdefault("RUN_ENV", "test")


@pytest.fixture
def conn(tmp_path):
    from db import schema
    from db.connection import get_connection

    c = get_connection(str(tmp_path / "members.db"))
    schema.bootstrap(c)
    try:
        yield c
    finally:
        c.close()


@pytest.fixture
def cache_conn(tmp_path):
    from db import schema
    from db.connection import get_connection

    c = get_connection(str(tmp_path / "cache.db"))
    schema.bootstrap_cache(c)
    try:
        yield c
    finally:
        c.close()


@pytest.fixture
def add_member(conn):
    def _add(member_id: str, linkedin_url: Optional[str] = None, **fields: Any) -> str:
        values = {"id": member_id, "linkedin_url": linkedin_url, **fields}
        columns = ", ".join(values)
        marks = ", ".join("?" for _ in values)
        conn.execute(f"INSERT INTO members ({columns}) VALUES ({marks})", tuple(values.values()))
        conn.commit()
        return member_id

    return _add


def make_profile(
    query: str,
    education: Optional[List[Dict[str, Any]]] = None,
    experience: Optional[List[Dict[str, Any]]] = None,
    headline: Optional[str] = "Software Engineer at Acme",
    location: Optional[str] = None,
    photo: Optional[str] = None,
) -> Dict[str, Any]:
    """Raw scraper document as the profile actor returns it."""
    return {
        "element": {"headline": headline, "location": {"parsed": {"text": location}}, "photo": photo},
        "education": education or [],
        "experience": experience or [],
        "originalQuery": {"query": query},
    }


@pytest.fixture
def profile_factory():
    return make_profile


class StubOrganizations:
    """Organization lookup answering from a dict of LinkedIn id -> (name, locations)."""

    def __init__(self, known: Optional[Dict[str, Dict[str, Any]]] = None) -> None:
        self.known = known or {}
        self.calls: List[str] = []

    def __call__(self, linkedin_id: str):
        from models.linkedin_profile import LinkedInOrganization

        self.calls.append(linkedin_id)
        data = self.known.get(linkedin_id)
        if data is None:
            return None
        return LinkedInOrganization.model_validate({"id": linkedin_id, **data})


@pytest.fixture
def organizations():
    return StubOrganizations({
        "acme-university": {"name": "Acme University", "locations": [{"city": "Ithaca", "geographicArea": "New York", "postalCode": "14850"}]},
        "c1": {"name": "Acme Corp", "logo": "https://media.example/acme.png"},
    })
