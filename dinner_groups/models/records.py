"""Upstream records the roster is built from."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class GuestRecord:
    """A guest imported into an event's pairing pool."""

    id: str
    event_id: str
    name: str = ""
    email: Optional[str] = None
    user_id: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    personality: Optional[Dict[str, Any]] = None
    pairing_notification_sent: bool = False

    def matches(self, participant_id: str) -> bool:
        return participant_id in (self.id, self.user_id)


@dataclass
class BookingRecord:
    """A booking joined with the booker's profile and assessment."""

    user_id: str
    event_id: str
    status: str = "confirmed"
    email: str = ""
    profile: Dict[str, Any] = field(default_factory=dict)
    assessment_answers: Optional[Dict[str, Any]] = None

    @property
    def is_confirmed(self) -> bool:
        return self.status == "confirmed"

    @property
    def display_name(self) -> str:
        first = self.profile.get("firstName") or self.profile.get("first_name")
        last = self.profile.get("lastName") or self.profile.get("last_name")
        if first and last:
            return f"{first} {last}"
        return self.email.split("@")[0] if self.email else self.user_id
