"""
Tests for application settings.
"""

import pydantic
import pytest

from webinar_wrapper.config import PLACEHOLDER_TWILIO_SID, Settings, get_settings


class TestSettingsDefaults:
    def test_default_values(self) -> None:
        # Environment variables may override runtime values; check declared defaults.
        fields = Settings.model_fields
        assert fields["zoom_oauth_url"].default == "https://zoom.us/oauth/token"
        assert fields["zoom_api_base_url"].default == "https://api.zoom.us/v2"
        assert fields["google_calendar_id"].default == "primary"
        assert fields["twilio_phone_number"].default == "whatsapp:+14155238886"
        assert fields["email_smtp_port"].default == 587
        assert fields["default_country_code"].default == "+1"

    def test_custom_values(self, test_settings: Settings) -> None:
        assert test_settings.zoom_account_id == "acct_TEST123456"
        assert test_settings.google_refresh_token == "1//refresh-token-TEST"
        assert test_settings.email_user == "webinars@example.com"
        assert test_settings.twilio_account_sid == "AC_TEST_ACCOUNT_SID"


class TestCountryCode:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("+1", "+1"), ("91", "+91"), ("+44 ", "+44"), ("+(353)", "+353")],
    )
    def test_normalized_to_plus_digits(self, raw: str, expected: str) -> None:
        settings = Settings(_env_file=None, default_country_code=raw)
        assert settings.default_country_code == expected

    def test_rejects_code_without_digits(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            Settings(_env_file=None, default_country_code="+")


class TestCredentialFlags:
    def test_all_configured(self, test_settings: Settings) -> None:
        assert test_settings.zoom_configured
        assert test_settings.google_configured
        assert test_settings.email_configured
        assert test_settings.messaging_configured
        assert not test_settings.messaging_simulated

    def test_nothing_configured(self, empty_settings: Settings) -> None:
        assert not empty_settings.zoom_configured
        assert not empty_settings.google_configured
        assert not empty_settings.email_configured
        assert not empty_settings.messaging_configured

    def test_zoom_requires_all_three_values(self) -> None:
        settings = Settings(
            _env_file=None,
            zoom_account_id="acct",
            zoom_client_id="client",
            zoom_client_secret="",
        )
        assert not settings.zoom_configured

    def test_google_configured_without_refresh_token(self) -> None:
        settings = Settings(
            _env_file=None,
            google_client_id="id",
            google_client_secret="secret",
            google_refresh_token="",
        )
        assert settings.google_configured

    def test_placeholder_sid_switches_to_simulation(self) -> None:
        settings = Settings(_env_file=None, twilio_account_sid=PLACEHOLDER_TWILIO_SID, twilio_auth_token="")
        assert settings.messaging_simulated
        assert settings.messaging_configured

    def test_explicit_simulation_flag(self) -> None:
        settings = Settings(_env_file=None, twilio_account_sid="", twilio_auth_token="", messaging_simulate=True)
        assert settings.messaging_simulated
        assert settings.messaging_configured

    def test_email_sender_falls_back_to_user(self, test_settings: Settings) -> None:
        assert test_settings.email_sender == "webinars@example.com"
        custom = test_settings.model_copy(update={"email_from": "Webinars <noreply@example.com>"})
        assert custom.email_sender == "Webinars <noreply@example.com>"


class TestCorsOrigins:
    def test_parses_comma_separated_list(self) -> None:
        settings = Settings(_env_file=None, cors_origins="http://a.test, http://b.test,,")
        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]


class TestGetSettings:
    def test_reads_environment_on_each_call_under_pytest(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ZOOM_ACCOUNT_ID", "acct_from_env")
        assert get_settings().zoom_account_id == "acct_from_env"

        monkeypatch.setenv("ZOOM_ACCOUNT_ID", "acct_changed")
        assert get_settings().zoom_account_id == "acct_changed"

    def test_env_names_are_case_insensitive(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("TWILIO_ACCOUNT_SID", raising=False)
        monkeypatch.setenv("twilio_account_sid", PLACEHOLDER_TWILIO_SID)
        monkeypatch.delenv("MESSAGING_SIMULATE", raising=False)
        assert get_settings().messaging_simulated
