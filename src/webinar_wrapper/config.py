"""
Application configuration with environment-driven settings.

Credentials for every meeting provider and notification channel live here.
Business code never reads os.environ directly: a Settings instance is built
once and handed to the resolvers, providers and channels that need it.
"""

from functools import lru_cache
import os
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_TWILIO_SID = "your_account_sid"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "webinar-wrapper"
    app_env: Literal["dev", "qa", "uat", "prod"] = "dev"
    debug: bool = False
    log_level: str = "INFO"

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins",
    )

    # Zoom (server-to-server OAuth, account_credentials grant)
    zoom_account_id: str = Field(default="")
    zoom_client_id: str = Field(default="")
    zoom_client_secret: str = Field(default="")
    zoom_oauth_url: str = Field(default="https://zoom.us/oauth/token")
    zoom_api_base_url: str = Field(default="https://api.zoom.us/v2")

    # Google Calendar / Meet (user OAuth with a stored refresh token)
    google_client_id: str = Field(default="")
    google_client_secret: str = Field(default="")
    google_refresh_token: str = Field(default="")
    google_token_uri: str = Field(default="https://oauth2.googleapis.com/token")
    google_calendar_id: str = Field(default="primary")

    # Email (SMTP)
    email_user: str = Field(default="")
    email_pass: str = Field(default="")
    email_smtp_host: str = Field(default="smtp.gmail.com")
    email_smtp_port: int = Field(default=587, ge=1, le=65535)
    email_use_tls: bool = Field(default=True)
    email_from: str = Field(default="", description="Defaults to EMAIL_USER")

    # Messaging (Twilio WhatsApp)
    twilio_account_sid: str = Field(default="")
    twilio_auth_token: str = Field(default="")
    twilio_phone_number: str = Field(default="whatsapp:+14155238886")
    twilio_api_base_url: str = Field(default="https://api.twilio.com/2010-04-01")
    messaging_simulate: bool = Field(
        default=False,
        description="Record WhatsApp sends as simulated instead of calling Twilio.",
    )

    # Pipeline
    default_country_code: str = Field(default="+1")
    http_timeout_seconds: float = Field(default=30.0, gt=0, le=300)
    notification_max_concurrency: int = Field(default=4, ge=1, le=32)
    meeting_duration_minutes: int = Field(default=60, ge=1, le=24 * 60)

    @field_validator("default_country_code")
    @classmethod
    def validate_country_code(cls, v: str) -> str:
        """Keep the country code in '+<digits>' form."""
        digits = "".join(ch for ch in v if ch.isdigit())
        if not digits:
            raise ValueError("default_country_code must contain digits")
        return f"+{digits}"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def zoom_configured(self) -> bool:
        return bool(self.zoom_account_id and self.zoom_client_id and self.zoom_client_secret)

    @property
    def google_configured(self) -> bool:
        return bool(self.google_client_id and self.google_client_secret)

    @property
    def email_configured(self) -> bool:
        return bool(self.email_user and self.email_pass)

    @property
    def email_sender(self) -> str:
        return self.email_from or self.email_user

    @property
    def messaging_simulated(self) -> bool:
        return self.messaging_simulate or self.twilio_account_sid == PLACEHOLDER_TWILIO_SID

    @property
    def messaging_configured(self) -> bool:
        if self.messaging_simulated:
            return True
        return bool(self.twilio_account_sid and self.twilio_auth_token)


@lru_cache
def _get_settings_cached() -> Settings:
    return Settings()


def get_settings() -> Settings:
    # Environment is monkeypatched per test; never hand out a frozen instance there.
    if os.environ.get("PYTEST_CURRENT_TEST"):
        return Settings()
    return _get_settings_cached()
