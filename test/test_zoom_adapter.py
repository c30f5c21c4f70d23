"""Tests for the Zoom meeting provider (sync-only, httpx client mocked)."""

from typing import Callable
from unittest.mock import MagicMock

import httpx
import pytest

from webinar_wrapper.config import Settings
from webinar_wrapper.meetings.zoom_adapter import ZoomMeetingProvider
from webinar_wrapper.shared.exceptions import ConfigurationError, ProviderError
from webinar_wrapper.webinars.models import (
    Contact,
    MeetingProviderType,
    ProviderCredential,
    WebinarRecord,
)

ZOOM_MEETING = {
    "uuid": "aBcD1234==",
    "id": 85012345678,
    "start_url": "https://zoom.us/s/85012345678?zak=host-token",
    "join_url": "https://zoom.us/j/85012345678?pwd=xyz",
    "password": "a1b2c3",
    "topic": "Intro to Async Python",
}


@pytest.fixture
def credential() -> ProviderCredential:
    return ProviderCredential(provider=MeetingProviderType.ZOOM, token="zoom-access-token")


@pytest.fixture
def mock_client() -> MagicMock:
    return MagicMock(spec=httpx.Client)


@pytest.fixture
def provider(test_settings: Settings, mock_client: MagicMock) -> ZoomMeetingProvider:
    return ZoomMeetingProvider(test_settings, http_client=mock_client)


class TestZoomMeetingPayload:
    def test_payload_fields(
        self,
        provider: ZoomMeetingProvider,
        make_record: Callable[..., WebinarRecord],
    ) -> None:
        payload = provider.build_meeting_payload(make_record(date="2025-03-10", time="14:30"))

        assert payload["topic"] == "Intro to Async Python"
        assert payload["type"] == 2
        assert payload["start_time"] == "2025-03-10T14:30:00"
        assert payload["timezone"] == "UTC"
        assert payload["duration"] == 60
        assert payload["agenda"] == "Presenter: Ada Lovelace"
        assert payload["settings"]["waiting_room"] is True
        assert payload["settings"]["join_before_host"] is False

    def test_duration_comes_from_settings(
        self,
        test_settings: Settings,
        mock_client: MagicMock,
        make_record: Callable[..., WebinarRecord],
    ) -> None:
        settings = test_settings.model_copy(update={"meeting_duration_minutes": 90})
        provider = ZoomMeetingProvider(settings, http_client=mock_client)

        assert provider.build_meeting_payload(make_record())["duration"] == 90


class TestZoomProvisionSync:
    def test_provision_success(
        self,
        provider: ZoomMeetingProvider,
        mock_client: MagicMock,
        credential: ProviderCredential,
        make_record: Callable[..., WebinarRecord],
    ) -> None:
        mock_client.post.return_value = httpx.Response(status_code=201, json=ZOOM_MEETING)

        meeting = provider.provision_sync(make_record(), credential)

        assert meeting.provider == MeetingProviderType.ZOOM
        assert meeting.external_id == "aBcD1234=="
        assert meeting.meeting_code == "85012345678"
        assert meeting.host_link == ZOOM_MEETING["start_url"]
        assert meeting.join_link == ZOOM_MEETING["join_url"]
        assert meeting.passcode == "a1b2c3"
        assert meeting.passcode_required
        assert meeting.raw_provider_payload["topic"] == "Intro to Async Python"

        mock_client.post.assert_called_once()
        call_args = mock_client.post.call_args
        assert call_args[0][0] == "https://api.zoom.us/v2/users/me/meetings"
        assert call_args[1]["headers"]["Authorization"] == "Bearer zoom-access-token"
        assert call_args[1]["json"]["start_time"] == "2025-03-10T14:30:00"

    def test_meeting_without_password(
        self,
        provider: ZoomMeetingProvider,
        mock_client: MagicMock,
        credential: ProviderCredential,
        make_record: Callable[..., WebinarRecord],
    ) -> None:
        data = {key: value for key, value in ZOOM_MEETING.items() if key not in ("password", "uuid")}
        mock_client.post.return_value = httpx.Response(status_code=201, json=data)

        meeting = provider.provision_sync(make_record(), credential)

        assert meeting.passcode is None
        assert not meeting.passcode_required
        assert meeting.external_id == "85012345678"

    def test_provision_api_error(
        self,
        provider: ZoomMeetingProvider,
        mock_client: MagicMock,
        credential: ProviderCredential,
        make_record: Callable[..., WebinarRecord],
    ) -> None:
        mock_client.post.return_value = httpx.Response(
            status_code=400,
            json={"code": 300, "message": "Invalid meeting start time."},
        )

        with pytest.raises(ProviderError) as exc_info:
            provider.provision_sync(make_record(name="Broken Webinar"), credential)

        assert str(exc_info.value) == "Invalid meeting start time."
        assert exc_info.value.error_code == "300"
        assert exc_info.value.webinar_name == "Broken Webinar"
        assert exc_info.value.provider_response["code"] == 300

    def test_provision_error_without_json_body(
        self,
        provider: ZoomMeetingProvider,
        mock_client: MagicMock,
        credential: ProviderCredential,
        make_record: Callable[..., WebinarRecord],
    ) -> None:
        mock_client.post.return_value = httpx.Response(status_code=502, content=b"")

        with pytest.raises(ProviderError) as exc_info:
            provider.provision_sync(make_record(), credential)

        assert str(exc_info.value) == "Zoom API returned HTTP 502"
        assert exc_info.value.error_code == "502"

    def test_provision_http_error(
        self,
        provider: ZoomMeetingProvider,
        mock_client: MagicMock,
        credential: ProviderCredential,
        make_record: Callable[..., WebinarRecord],
    ) -> None:
        mock_client.post.side_effect = httpx.ReadTimeout("timed out")

        with pytest.raises(ProviderError) as exc_info:
            provider.provision_sync(make_record(), credential)

        assert exc_info.value.error_code == "HTTP_ERROR"

    @pytest.mark.parametrize(("date", "time"), [("10/03/2025", "14:30"), ("2025-03-10", "2:30 PM")])
    def test_unparseable_start_never_calls_zoom(
        self,
        provider: ZoomMeetingProvider,
        mock_client: MagicMock,
        credential: ProviderCredential,
        make_record: Callable[..., WebinarRecord],
        date: str,
        time: str,
    ) -> None:
        with pytest.raises(ProviderError) as exc_info:
            provider.provision_sync(make_record(date=date, time=time), credential)

        assert exc_info.value.error_code == "INVALID_START_TIME"
        mock_client.post.assert_not_called()


class TestZoomProviderLifecycle:
    def test_requires_configuration(self, empty_settings: Settings) -> None:
        with pytest.raises(ConfigurationError):
            ZoomMeetingProvider(empty_settings)

    @pytest.mark.asyncio
    async def test_resolve_and_provision_share_injected_client(
        self,
        provider: ZoomMeetingProvider,
        mock_client: MagicMock,
        make_record: Callable[..., WebinarRecord],
    ) -> None:
        mock_client.post.side_effect = [
            httpx.Response(status_code=200, json={"access_token": "zoom-access-token", "expires_in": 3599}),
            httpx.Response(status_code=201, json=ZOOM_MEETING),
        ]

        credential = await provider.resolve_credential()
        meeting = await provider.provision(
            make_record(presenter=Contact(name="Ada", email="ada@example.com")),
            credential,
        )

        assert meeting.meeting_code == "85012345678"
        assert mock_client.post.call_count == 2

    def test_close_does_not_close_injected_client(
        self,
        provider: ZoomMeetingProvider,
        mock_client: MagicMock,
    ) -> None:
        provider.close()
        mock_client.close.assert_not_called()
