from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class MemberRecord(BaseModel):
    """App/DB record shape: the summary fields the sync may touch."""

    id: str
    linkedin_url: str | None = None
    headline: str | None = None
    profile_picture: str | None = None
    current_location: str | None = None
    linkedin_synced_at: str | None = None

    model_config = ConfigDict(extra="ignore")
