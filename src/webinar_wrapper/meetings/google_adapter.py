"""
Google Meet provider adapter.

A Meet session is a Google Calendar event with provider-generated
conference data. Calendar invitations are suppressed (sendUpdates=none);
participants hear about the meeting through the notification channels.
"""

from __future__ import annotations

import secrets
import time
from datetime import timedelta
from functools import partial
from typing import Any, Callable

import httplib2
from google.auth.exceptions import GoogleAuthError
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from webinar_wrapper.config import Settings
from webinar_wrapper.meetings.credentials import GoogleCredentialResolver
from webinar_wrapper.meetings.interface import MeetingProvider
from webinar_wrapper.shared.exceptions import ProviderError
from webinar_wrapper.shared.logging import get_logger
from webinar_wrapper.webinars.models import (
    MeetingProviderType,
    MeetingRecord,
    ProviderCredential,
    WebinarRecord,
)

logger = get_logger(__name__)

REAUTHORIZE_MESSAGE = (
    "Google account is not authorized: GOOGLE_REFRESH_TOKEN is not configured. "
    "Complete the Google OAuth consent flow (offline access, calendar scopes) "
    "and add the issued refresh token to the environment"
)


def build_calendar_service(credentials: Any, timeout: float | None = None) -> Any:
    """Calendar API v3 resource bound to the given credentials.

    Requests go through an httplib2 transport with the given socket timeout.
    """
    http = AuthorizedHttp(credentials, http=httplib2.Http(timeout=timeout))
    return build("calendar", "v3", http=http, cache_discovery=False)


def conference_request_id() -> str:
    """Dedup key for the conference create request, unique per call."""
    return f"meet-{int(time.time() * 1000)}-{secrets.token_hex(5)}"


class GoogleMeetProvider(MeetingProvider):
    """Google Calendar / Meet adapter built on google-api-python-client."""

    provider_type = MeetingProviderType.GOOGLE_MEET
    display_name = "Google Meet"
    resource_name = "event"

    def __init__(
        self,
        settings: Settings,
        credential_resolver: GoogleCredentialResolver | None = None,
        service_factory: Callable[[Any], Any] | None = None,
    ) -> None:
        super().__init__(credential_resolver or GoogleCredentialResolver(settings))
        self._settings = settings
        self._service_factory = service_factory or partial(
            build_calendar_service, timeout=settings.http_timeout_seconds
        )
        # One Calendar resource per credential object, reused across the batch.
        self._service_cache: dict[int, Any] = {}

    def get_calendar_service(self, credential: ProviderCredential) -> Any:
        cache_key = id(credential.authorizer)
        if cache_key not in self._service_cache:
            logger.info("Building Google Calendar service")
            self._service_cache[cache_key] = self._service_factory(credential.authorizer)
        return self._service_cache[cache_key]

    def close(self) -> None:
        self._service_cache.clear()

    def build_event(self, record: WebinarRecord) -> dict[str, Any]:
        start = record.start_at()
        end = start + timedelta(minutes=self._settings.meeting_duration_minutes)

        attendees: list[dict[str, Any]] = [{"email": record.presenter.email, "organizer": True}]
        if record.attendee_email:
            attendees.append({"email": record.attendee_email})

        return {
            "summary": record.name,
            "description": self._describe(record),
            "start": {"dateTime": start.isoformat(), "timeZone": "UTC"},
            "end": {"dateTime": end.isoformat(), "timeZone": "UTC"},
            "attendees": attendees,
            "conferenceData": {
                "createRequest": {
                    "requestId": conference_request_id(),
                    "conferenceSolutionKey": {"type": "hangoutsMeet"},
                },
            },
            "reminders": {
                "useDefault": False,
                "overrides": [
                    {"method": "email", "minutes": 24 * 60},
                    {"method": "popup", "minutes": 10},
                ],
            },
            "visibility": "private",
        }

    @staticmethod
    def _describe(record: WebinarRecord) -> str:
        lines = [
            "Webinar Details:",
            f"- Title: {record.name}",
            f"- Presenter: {record.presenter.name} ({record.presenter.email})",
        ]
        if record.attendee is not None and record.attendee.name:
            lines.append(f"- Attendee: {record.attendee.name} ({record.attendee.email})")
        lines.append("")
        lines.append("Invitations are sent separately by the webinar scheduler.")
        return "\n".join(lines)

    def provision_sync(self, record: WebinarRecord, credential: ProviderCredential) -> MeetingRecord:
        authorizer = credential.authorizer
        if authorizer is None or not getattr(authorizer, "refresh_token", None):
            raise ProviderError(REAUTHORIZE_MESSAGE, error_code="REAUTHORIZATION_REQUIRED", webinar_name=record.name)

        try:
            event = self.build_event(record)
        except ValueError as e:
            raise ProviderError(
                f"Invalid date/time '{record.date} {record.time}': {e!s}",
                error_code="INVALID_START_TIME",
                webinar_name=record.name,
            ) from e

        logger.info(
            "Creating Google Meet event",
            extra={"webinar_id": record.id, "webinar_name": record.name, "start_time": event["start"]["dateTime"]},
        )

        try:
            service = self.get_calendar_service(credential)
            created = (
                service.events()
                .insert(
                    calendarId=self._settings.google_calendar_id,
                    body=event,
                    conferenceDataVersion=1,
                    sendUpdates="none",
                )
                .execute()
            )
        except HttpError as e:
            status = getattr(e.resp, "status", None)
            logger.error(
                "Google Calendar event creation failed",
                extra={"status_code": status, "webinar_id": record.id, "error": str(e)},
            )
            raise ProviderError(
                f"Google Calendar API error: {e!s}",
                error_code=str(status) if status is not None else "HTTP_ERROR",
                webinar_name=record.name,
            ) from e
        except GoogleAuthError as e:
            logger.error("Google token refresh failed", extra={"webinar_id": record.id, "error": str(e)})
            raise ProviderError(
                f"Google authorization failed ({e!s}). {REAUTHORIZE_MESSAGE}",
                error_code="REAUTHORIZATION_REQUIRED",
                webinar_name=record.name,
            ) from e
        except (OSError, httplib2.HttpLib2Error) as e:
            # Timeouts, DNS and connection failures from the httplib2 transport
            reason = str(e) or e.__class__.__name__
            logger.error("Google Calendar request failed", extra={"webinar_id": record.id, "error": reason})
            raise ProviderError(
                f"Google Calendar request failed: {reason}",
                error_code="HTTP_ERROR",
                webinar_name=record.name,
            ) from e

        meeting = self.to_meeting_record(created)
        logger.info(
            "Created Google Meet event",
            extra={"webinar_id": record.id, "event_id": meeting.external_id, "meeting_code": meeting.meeting_code},
        )
        return meeting

    def to_meeting_record(self, event: dict[str, Any]) -> MeetingRecord:
        conference = event.get("conferenceData") or {}
        entry_points = conference.get("entryPoints") or []
        conference_id = conference.get("conferenceId") or ""
        meet_link = event.get("hangoutLink") or ""

        link = meet_link or (entry_points[0].get("uri", "") if entry_points else "")
        code = meet_link.rstrip("/").rsplit("/", 1)[-1] if meet_link else conference_id

        return MeetingRecord(
            provider=self.provider_type,
            external_id=str(event.get("id", "")),
            host_link=link,
            join_link=link,
            meeting_code=conference_id or code,
            passcode=None,
            raw_provider_payload=event,
        )
