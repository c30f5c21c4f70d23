"""
Provider credential resolvers.

Zoom: server-to-server OAuth. The account id and client id/secret are
exchanged for a short-lived bearer token once per batch.

Google: user OAuth. A stored refresh token is wrapped in a google-auth
Credentials object that mints access tokens on demand while the batch runs.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import httpx
from google.oauth2.credentials import Credentials

from webinar_wrapper.config import Settings
from webinar_wrapper.meetings.interface import CredentialResolver
from webinar_wrapper.shared.exceptions import ConfigurationError, CredentialError
from webinar_wrapper.shared.http import response_json
from webinar_wrapper.shared.logging import get_logger, mask
from webinar_wrapper.webinars.models import MeetingProviderType, ProviderCredential

logger = get_logger(__name__)

GOOGLE_CALENDAR_SCOPES = [
    "https://www.googleapis.com/auth/calendar",
    "https://www.googleapis.com/auth/calendar.events",
]


class ZoomCredentialResolver(CredentialResolver):
    """Client-credentials token exchange against the Zoom OAuth endpoint."""

    provider_type = MeetingProviderType.ZOOM

    def __init__(self, settings: Settings, http_client: httpx.Client | None = None) -> None:
        if not settings.zoom_configured:
            raise ConfigurationError(
                "Zoom credentials not configured. Please add ZOOM_ACCOUNT_ID, "
                "ZOOM_CLIENT_ID, and ZOOM_CLIENT_SECRET to the environment"
            )
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

    def resolve_sync(self) -> ProviderCredential:
        settings = self._settings
        client = self._get_client()

        logger.info(
            "Requesting Zoom access token",
            extra={"zoom_account_id": mask(settings.zoom_account_id), "zoom_client_id": mask(settings.zoom_client_id)},
        )

        try:
            response = client.post(
                settings.zoom_oauth_url,
                data={"grant_type": "account_credentials", "account_id": settings.zoom_account_id},
                auth=(settings.zoom_client_id, settings.zoom_client_secret),
            )
        except httpx.HTTPError as e:
            logger.exception("HTTP error during Zoom token exchange")
            raise CredentialError(
                f"Failed to get Zoom access token: HTTP error: {e!s}",
                error_code="HTTP_ERROR",
            ) from e

        if response.status_code >= 400:
            error_data = response_json(response)
            logger.error(
                "Zoom token exchange failed",
                extra={"status_code": response.status_code, "error": error_data},
            )
            reason = error_data.get("reason") or error_data.get("error") or f"HTTP {response.status_code}"
            raise CredentialError(
                f"Failed to get Zoom access token: {reason}",
                error_code=str(error_data.get("error", response.status_code)),
                provider_response=error_data,
            )

        data = response_json(response)
        token = data.get("access_token")
        if not token:
            raise CredentialError(
                "Failed to get Zoom access token: response has no access_token",
                error_code="MISSING_TOKEN",
                provider_response=data,
            )

        expires_at = None
        if data.get("expires_in"):
            expires_at = datetime.now(timezone.utc) + timedelta(seconds=int(data["expires_in"]))

        return ProviderCredential(provider=self.provider_type, token=token, expires_at=expires_at)


class GoogleCredentialResolver(CredentialResolver):
    """Wraps the stored refresh token in refreshable google-auth credentials.

    A missing refresh token is not an error here; provisioning reports it
    with a re-authorization hint.
    """

    provider_type = MeetingProviderType.GOOGLE_MEET

    def __init__(self, settings: Settings) -> None:
        if not settings.google_configured:
            raise ConfigurationError(
                "Google OAuth credentials not configured. Please add GOOGLE_CLIENT_ID "
                "and GOOGLE_CLIENT_SECRET to the environment"
            )
        self._settings = settings

    def resolve_sync(self) -> ProviderCredential:
        settings = self._settings
        refresh_token = settings.google_refresh_token or None

        if refresh_token is None:
            logger.warning("GOOGLE_REFRESH_TOKEN not configured; Google Meet provisioning will fail")

        authorizer = Credentials(
            token=None,
            refresh_token=refresh_token,
            token_uri=settings.google_token_uri,
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret,
            scopes=GOOGLE_CALENDAR_SCOPES,
        )
        return ProviderCredential(provider=self.provider_type, authorizer=authorizer)

