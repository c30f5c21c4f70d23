"""
Domain types for the scheduling and notification pipeline.

All values are immutable once built. Request payloads are converted into
these types at the HTTP boundary (see schemas.py) and never re-inferred.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any


class MeetingProviderType(str, Enum):
    """Supported video-conferencing providers."""

    ZOOM = "zoom"
    GOOGLE_MEET = "google_meet"


class ChannelType(str, Enum):
    """Notification channels."""

    EMAIL = "email"
    MESSAGING = "messaging"


class NotificationIntent(str, Enum):
    """Why a notification is being sent."""

    SCHEDULE = "schedule"
    REMINDER = "reminder"


class RecipientRole(str, Enum):
    PRESENTER = "presenter"
    ATTENDEE = "attendee"


class DeliveryStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"
    SIMULATED = "simulated"


class ValidationProfile(str, Enum):
    """Which operation a record is being validated for."""

    SCHEDULE = "schedule"
    EMAIL = "email"
    MESSAGING = "messaging"


@dataclass(frozen=True)
class Contact:
    """A person attached to a webinar. Every field may be empty."""

    name: str = ""
    email: str = ""
    phone: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.name or self.email or self.phone)


@dataclass(frozen=True)
class WebinarRecord:
    """One row of webinar input."""

    id: int
    name: str
    date: str
    time: str
    presenter: Contact
    attendee: Contact | None = None

    @property
    def has_attendee(self) -> bool:
        return self.attendee is not None and not self.attendee.is_empty

    @property
    def attendee_email(self) -> str:
        return self.attendee.email if self.attendee else ""

    @property
    def attendee_phone(self) -> str:
        return self.attendee.phone if self.attendee else ""

    def start_at(self) -> datetime:
        """Start instant, with the wall-clock time interpreted as UTC.

        Raises:
            ValueError: if date is not YYYY-MM-DD or time is not HH:MM[:SS].
        """
        day = date.fromisoformat(self.date.strip())
        wall_clock = time.fromisoformat(self.time.strip())
        return datetime.combine(day, wall_clock).replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class ValidationOutcome:
    is_valid: bool
    errors: tuple[str, ...] = ()


@dataclass(frozen=True)
class BatchPartition:
    """Input records split into the valid subset and per-row diagnostics."""

    valid: tuple[WebinarRecord, ...]
    errors: tuple[str, ...]
    invalid_rows: tuple[int, ...]

    @property
    def skipped_invalid(self) -> int:
        return len(self.invalid_rows)


@dataclass(frozen=True)
class ProviderCredential:
    """Bearer credential for a meeting provider, valid for one batch.

    `token` is set for providers that hand out a plain access token.
    `authorizer` carries a provider-specific object able to mint tokens on
    demand (e.g. google.oauth2.credentials.Credentials).
    """

    provider: MeetingProviderType
    token: str | None = None
    expires_at: datetime | None = None
    authorizer: Any = None


@dataclass(frozen=True)
class MeetingRecord:
    provider: MeetingProviderType
    external_id: str
    host_link: str
    join_link: str
    meeting_code: str
    passcode: str | None = None
    raw_provider_payload: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def passcode_required(self) -> bool:
        return bool(self.passcode)


@dataclass(frozen=True)
class ScheduledWebinar:
    record: WebinarRecord
    meeting: MeetingRecord


@dataclass(frozen=True)
class NotificationOutcome:
    webinar_id: int
    recipient_role: RecipientRole
    channel: ChannelType
    status: DeliveryStatus
    to: str
    error_detail: str | None = None
    message_id: str | None = None
    formatted_phone: str | None = None
