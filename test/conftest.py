"""
Pytest configuration and shared fixtures.

API tests run against the real FastAPI app with the provider and channel
dependencies overridden; no test talks to Zoom, Google, SMTP or Twilio.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from webinar_wrapper.batch.router import (
    get_email_channel,
    get_google_provider,
    get_messaging_channel,
    get_zoom_provider,
)
from webinar_wrapper.config import Settings
from webinar_wrapper.main import app
from webinar_wrapper.meetings.interface import CredentialResolver, MeetingProvider
from webinar_wrapper.notifications.email_channel import (
    EmailChannel,
    EmailSendRequest,
    EmailSendResult,
)
from webinar_wrapper.notifications.messaging_channel import WhatsAppChannel
from webinar_wrapper.shared.exceptions import DeliveryError, ProviderError
from webinar_wrapper.webinars.models import (
    Contact,
    MeetingProviderType,
    MeetingRecord,
    ProviderCredential,
    ScheduledWebinar,
    WebinarRecord,
)

# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class StaticCredentialResolver(CredentialResolver):
    provider_type = MeetingProviderType.ZOOM

    def __init__(self) -> None:
        self.calls = 0

    def resolve_sync(self) -> ProviderCredential:
        self.calls += 1
        return ProviderCredential(provider=self.provider_type, token="test-access-token")


class FakeMeetingProvider(MeetingProvider):
    """Provisions deterministic meetings; fails for webinar names in fail_on."""

    provider_type = MeetingProviderType.ZOOM
    display_name = "Zoom"
    resource_name = "meeting"

    def __init__(self, fail_on: set[str] | None = None) -> None:
        super().__init__(StaticCredentialResolver())
        self.fail_on = set(fail_on or ())
        self.attempted: list[str] = []
        self.closed = False

    @property
    def credential_calls(self) -> int:
        return self._credential_resolver.calls

    def provision_sync(self, record: WebinarRecord, credential: ProviderCredential) -> MeetingRecord:
        self.attempted.append(record.name)
        if record.name in self.fail_on:
            raise ProviderError("Invalid meeting start time", error_code="300", webinar_name=record.name)
        code = str(85000000000 + record.id)
        return MeetingRecord(
            provider=self.provider_type,
            external_id=f"uuid-{code}",
            host_link=f"https://zoom.us/s/{code}",
            join_link=f"https://zoom.us/j/{code}",
            meeting_code=code,
            passcode="a1b2c3",
            raw_provider_payload={"id": int(code)},
        )

    def close(self) -> None:
        self.closed = True


class FakeGoogleMeetProvider(FakeMeetingProvider):
    provider_type = MeetingProviderType.GOOGLE_MEET
    display_name = "Google Meet"
    resource_name = "event"

    def provision_sync(self, record: WebinarRecord, credential: ProviderCredential) -> MeetingRecord:
        self.attempted.append(record.name)
        if record.name in self.fail_on:
            raise ProviderError("Calendar usage limits exceeded", error_code="403", webinar_name=record.name)
        return MeetingRecord(
            provider=self.provider_type,
            external_id=f"event-{record.id}",
            host_link="https://meet.google.com/abc-defg-hij",
            join_link="https://meet.google.com/abc-defg-hij",
            meeting_code="abc-defg-hij",
        )


class RecordingEmailProvider:
    """EmailProvider that records requests and fails for chosen addresses."""

    def __init__(self, fail_for: set[str] | None = None) -> None:
        self.fail_for = set(fail_for or ())
        self.sent: list[EmailSendRequest] = []

    def send_email(self, request: EmailSendRequest) -> EmailSendResult:
        if request.to in self.fail_for:
            raise DeliveryError(f"SMTP delivery to {request.to} failed: 550 mailbox unavailable", error_code="SMTP_ERROR")
        self.sent.append(request)
        return EmailSendResult(message_id=f"<{len(self.sent)}@test.local>", provider="fake")


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def build_record(
    id: int = 1,
    name: str = "Intro to Async Python",
    date: str = "2025-03-10",
    time: str = "14:30",
    presenter: Contact | None = None,
    attendee: Contact | None = None,
) -> WebinarRecord:
    return WebinarRecord(
        id=id,
        name=name,
        date=date,
        time=time,
        presenter=presenter or Contact(name="Ada Lovelace", email="ada@example.com", phone="5551234567"),
        attendee=attendee,
    )


def build_scheduled(record: WebinarRecord, provider: MeetingProviderType = MeetingProviderType.ZOOM) -> ScheduledWebinar:
    code = str(85000000000 + record.id)
    return ScheduledWebinar(
        record=record,
        meeting=MeetingRecord(
            provider=provider,
            external_id=f"uuid-{code}",
            host_link=f"https://zoom.us/s/{code}",
            join_link=f"https://zoom.us/j/{code}",
            meeting_code=code,
            passcode="a1b2c3",
        ),
    )


@pytest.fixture
def make_record() -> Callable[..., WebinarRecord]:
    return build_record


@pytest.fixture
def make_scheduled() -> Callable[..., ScheduledWebinar]:
    return build_scheduled


@pytest.fixture
def attendee() -> Contact:
    return Contact(name="Grace Hopper", email="grace@example.com", phone="+91 98765 43210")


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture
def test_settings() -> Settings:
    """Fully configured settings that never read .env."""
    return Settings(
        _env_file=None,
        app_env="dev",
        debug=True,
        zoom_account_id="acct_TEST123456",
        zoom_client_id="zoom_client_TEST",
        zoom_client_secret="zoom_secret_TEST",
        google_client_id="google-client.apps.googleusercontent.com",
        google_client_secret="google_secret_TEST",
        google_refresh_token="1//refresh-token-TEST",
        email_user="webinars@example.com",
        email_pass="app-password",
        twilio_account_sid="AC_TEST_ACCOUNT_SID",
        twilio_auth_token="test_auth_token_12345",
        messaging_simulate=False,
        default_country_code="+1",
    )


@pytest.fixture
def empty_settings() -> Settings:
    """Settings with every credential missing."""
    return Settings(
        _env_file=None,
        zoom_account_id="",
        zoom_client_id="",
        zoom_client_secret="",
        google_client_id="",
        google_client_secret="",
        google_refresh_token="",
        email_user="",
        email_pass="",
        twilio_account_sid="",
        twilio_auth_token="",
        messaging_simulate=False,
    )


# ---------------------------------------------------------------------------
# API client
# ---------------------------------------------------------------------------


@pytest.fixture
def zoom_provider() -> FakeMeetingProvider:
    return FakeMeetingProvider()


@pytest.fixture
def google_provider() -> FakeGoogleMeetProvider:
    return FakeGoogleMeetProvider()


@pytest.fixture
def email_provider() -> RecordingEmailProvider:
    return RecordingEmailProvider()


@pytest.fixture
def dependency_overrides(
    zoom_provider: FakeMeetingProvider,
    google_provider: FakeGoogleMeetProvider,
    email_provider: RecordingEmailProvider,
) -> dict[Callable[..., Any], Callable[..., Any]]:
    return {
        get_zoom_provider: lambda: zoom_provider,
        get_google_provider: lambda: google_provider,
        get_email_channel: lambda: EmailChannel(provider=email_provider),
        get_messaging_channel: lambda: WhatsAppChannel(client=None, simulate=True),
    }


@pytest_asyncio.fixture
async def async_client(
    dependency_overrides: dict[Callable[..., Any], Callable[..., Any]],
) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API tests."""
    app.dependency_overrides.update(dependency_overrides)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
