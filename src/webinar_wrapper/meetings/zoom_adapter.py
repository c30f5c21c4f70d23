"""
Zoom meeting provider adapter.

Creates scheduled meetings through the Zoom REST API v2 using a bearer
token obtained by ZoomCredentialResolver.
"""

from __future__ import annotations

from typing import Any

import httpx

from webinar_wrapper.config import Settings
from webinar_wrapper.meetings.credentials import ZoomCredentialResolver
from webinar_wrapper.meetings.interface import MeetingProvider
from webinar_wrapper.shared.exceptions import ProviderError
from webinar_wrapper.shared.http import response_json
from webinar_wrapper.shared.logging import get_logger
from webinar_wrapper.webinars.models import (
    MeetingProviderType,
    MeetingRecord,
    ProviderCredential,
    WebinarRecord,
)

logger = get_logger(__name__)

ZOOM_SCHEDULED_MEETING = 2
DEFAULT_TOPIC = "Webinar Meeting"


class ZoomMeetingProvider(MeetingProvider):
    """Zoom adapter. Uses httpx for HTTP requests."""

    provider_type = MeetingProviderType.ZOOM
    display_name = "Zoom"
    resource_name = "meeting"

    def __init__(
        self,
        settings: Settings,
        credential_resolver: ZoomCredentialResolver | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        super().__init__(credential_resolver or ZoomCredentialResolver(settings, http_client=http_client))
        self._settings = settings
        self._http_client = http_client
        self._owns_client = http_client is None

    def _get_client(self) -> httpx.Client:
        if self._http_client is None:
            self._http_client = httpx.Client(timeout=httpx.Timeout(self._settings.http_timeout_seconds))
        return self._http_client

    def close(self) -> None:
        if self._owns_client and self._http_client is not None:
            self._http_client.close()
            self._http_client = None
        resolver_close = getattr(self._credential_resolver, "close", None)
        if resolver_close is not None:
            resolver_close()

    def build_meeting_payload(self, record: WebinarRecord) -> dict[str, Any]:
        start = record.start_at()
        return {
            "topic": record.name or DEFAULT_TOPIC,
            "type": ZOOM_SCHEDULED_MEETING,
            "start_time": start.strftime("%Y-%m-%dT%H:%M:%S"),
            "duration": self._settings.meeting_duration_minutes,
            "timezone": "UTC",
            "agenda": f"Presenter: {record.presenter.name}",
            "settings": {
                "host_video": True,
                "participant_video": True,
                "join_before_host": False,
                "mute_upon_entry": True,
                "watermark": False,
                "use_pmi": False,
                "approval_type": 0,
                "audio": "both",
                "auto_recording": "none",
                "waiting_room": True,
            },
        }

    def provision_sync(self, record: WebinarRecord, credential: ProviderCredential) -> MeetingRecord:
        try:
            payload = self.build_meeting_payload(record)
        except ValueError as e:
            raise ProviderError(
                f"Invalid date/time '{record.date} {record.time}': {e!s}",
                error_code="INVALID_START_TIME",
                webinar_name=record.name,
            ) from e

        url = f"{self._settings.zoom_api_base_url.rstrip('/')}/users/me/meetings"

        logger.info(
            "Creating Zoom meeting",
            extra={"webinar_id": record.id, "webinar_name": record.name, "start_time": payload["start_time"]},
        )

        try:
            response = self._get_client().post(
                url,
                json=payload,
                headers={"Authorization": f"Bearer {credential.token}"},
            )
        except httpx.HTTPError as e:
            logger.exception("HTTP error during Zoom meeting creation", extra={"webinar_id": record.id})
            raise ProviderError(
                f"HTTP error: {e!s}",
                error_code="HTTP_ERROR",
                webinar_name=record.name,
            ) from e

        if response.status_code >= 400:
            error_data = response_json(response)
            logger.error(
                "Zoom meeting creation failed",
                extra={"status_code": response.status_code, "error": error_data, "webinar_id": record.id},
            )
            raise ProviderError(
                error_data.get("message", f"Zoom API returned HTTP {response.status_code}"),
                error_code=str(error_data.get("code", response.status_code)),
                provider_response=error_data,
                webinar_name=record.name,
            )

        data = response_json(response)
        meeting = self.to_meeting_record(data)

        logger.info(
            "Created Zoom meeting",
            extra={"webinar_id": record.id, "meeting_id": meeting.meeting_code},
        )
        return meeting

    def to_meeting_record(self, data: dict[str, Any]) -> MeetingRecord:
        meeting_id = str(data.get("id", ""))
        return MeetingRecord(
            provider=self.provider_type,
            external_id=str(data.get("uuid") or meeting_id),
            host_link=data.get("start_url", ""),
            join_link=data.get("join_url", ""),
            meeting_code=meeting_id,
            passcode=data.get("password") or None,
            raw_provider_payload=data,
        )

