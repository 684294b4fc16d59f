from __future__ import annotations

from typing import Any, Dict, Optional

from models.linkedin_profile import LinkedInProfile
from models.member_record import MemberRecord
from ports.collaborators import LocationResolverPort
from ports.repos import MembersRepoPort


class ProfileFieldReconciler:
    """Fills the member summary from the profile without clobbering member edits.

    Headline and photo are only written while empty. The location is
    re-resolved when the profile text differs from what is stored. The sync
    stamps are written on every call, even when nothing else changed.
    """

    def __init__(self, repo: MembersRepoPort, locations: Optional[LocationResolverPort] = None) -> None:
        self.repo = repo
        self.locations = locations

    def reconcile(self, member: MemberRecord, profile: LinkedInProfile) -> Dict[str, Any]:
        element = profile.element
        fields: Dict[str, Any] = {}

        if not member.headline and element.headline:
            fields["headline"] = element.headline
        if not member.profile_picture and element.photo:
            fields["profile_picture"] = element.photo

        location_text = element.location.parsed.text
        if self.locations is not None and location_text and location_text != member.current_location:
            resolved = self.locations.resolve(location_text)
            if resolved is not None:
                fields["current_location"] = resolved.formatted_address
                fields["current_location_latitude"] = resolved.latitude
                fields["current_location_longitude"] = resolved.longitude

        self.repo.update_summary(member.id, fields)
        return fields
