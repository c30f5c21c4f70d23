"""
WhatsApp notification channel via the Twilio Messages API.

Phone numbers are normalized before sending. When Twilio is not configured
with real credentials the channel runs in simulated mode: nothing is
transmitted and each message gets a synthetic SIM... identifier.
"""

from __future__ import annotations

import secrets

import httpx

from webinar_wrapper.config import Settings
from webinar_wrapper.notifications.interface import (
    DeliveryReceipt,
    NotificationChannel,
    OutboundMessage,
    Recipient,
)
from webinar_wrapper.notifications.rendering import TemplateRenderer
from webinar_wrapper.notifications.templates import MESSAGING_TEMPLATES
from webinar_wrapper.shared.exceptions import ConfigurationError, DeliveryError
from webinar_wrapper.shared.http import response_json
from webinar_wrapper.shared.logging import get_logger, mask
from webinar_wrapper.webinars.models import (
    ChannelType,
    DeliveryStatus,
    RecipientRole,
    ScheduledWebinar,
)
from webinar_wrapper.webinars.phone import normalize_phone

logger = get_logger(__name__)

WHATSAPP_PREFIX = "whatsapp:"


def whatsapp_address(phone: str) -> str:
    return phone if phone.startswith(WHATSAPP_PREFIX) else f"{WHATSAPP_PREFIX}{phone}"


def simulated_message_id() -> str:
    return "SIM" + secrets.token_hex(16)


class TwilioMessagingClient:
    """Minimal Twilio Messages API client. Uses httpx for HTTP requests."""

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        base_url: str = "https://api.twilio.com/2010-04-01",
        timeout: float = 30.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._account_sid = account_sid
        self._auth_token = auth_token
        self._from_number = whatsapp_address(from_number)
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._http_client = http_client
        self._owns_client = http_client is None

    def _get_client(self) -> httpx.Client:
        if self._http_client is None:
            self._http_client = httpx.Client(timeout=httpx.Timeout(self._timeout))
        return self._http_client

    def close(self) -> None:
        if self._owns_client and self._http_client is not None:
            self._http_client.close()
            self._http_client = None

    def _get_api_url(self, endpoint: str) -> str:
        return f"{self._base_url}/Accounts/{self._account_sid}{endpoint}"

    def send_message(self, to: str, body: str) -> str:
        """Send one WhatsApp message and return the Twilio message SID."""
        payload = {"To": whatsapp_address(to), "From": self._from_number, "Body": body}

        try:
            response = self._get_client().post(
                self._get_api_url("/Messages.json"),
                data=payload,
                auth=(self._account_sid, self._auth_token),
            )
        except httpx.HTTPError as e:
            raise DeliveryError(f"HTTP error: {e!s}", error_code="HTTP_ERROR") from e

        if response.status_code >= 400:
            error_data = response_json(response)
            logger.error(
                "Twilio message send failed",
                extra={"status_code": response.status_code, "error": error_data},
            )
            raise DeliveryError(
                error_data.get("message", f"Twilio API returned HTTP {response.status_code}"),
                error_code=str(error_data.get("code", response.status_code)),
            )

        return response_json(response).get("sid", "")


class WhatsAppChannel(NotificationChannel):
    """Sends plain-text WhatsApp messages to presenter and attendee phones."""

    channel = ChannelType.MESSAGING
    display_name = "WhatsApp"
    templates = MESSAGING_TEMPLATES

    def __init__(
        self,
        client: TwilioMessagingClient | None,
        default_country_code: str = "+1",
        simulate: bool = False,
        renderer: TemplateRenderer | None = None,
        max_concurrency: int = 4,
    ) -> None:
        super().__init__(renderer=renderer, max_concurrency=max_concurrency)
        if client is None and not simulate:
            raise ValueError("a TwilioMessagingClient is required unless simulate=True")
        self._client = client
        self._default_country_code = default_country_code
        self._simulate = simulate

    @property
    def simulated(self) -> bool:
        return self._simulate

    @classmethod
    def from_settings(cls, settings: Settings) -> "WhatsAppChannel":
        if not settings.messaging_configured:
            raise ConfigurationError(
                "Twilio credentials not configured. Please add TWILIO_ACCOUNT_SID and "
                "TWILIO_AUTH_TOKEN to the environment"
            )

        simulate = settings.messaging_simulated
        client = None
        if not simulate:
            client = TwilioMessagingClient(
                account_sid=settings.twilio_account_sid,
                auth_token=settings.twilio_auth_token,
                from_number=settings.twilio_phone_number,
                base_url=settings.twilio_api_base_url,
                timeout=settings.http_timeout_seconds,
            )

        logger.info(
            "Messaging channel resolved",
            extra={
                "twilio_account_sid": mask(settings.twilio_account_sid),
                "from_number": settings.twilio_phone_number,
                "simulated": simulate,
            },
        )
        return cls(
            client=client,
            default_country_code=settings.default_country_code,
            simulate=simulate,
            max_concurrency=settings.notification_max_concurrency,
        )

    def recipients(self, webinar: ScheduledWebinar) -> list[Recipient]:
        record = webinar.record
        recipients = [Recipient(RecipientRole.PRESENTER, record.presenter.name, record.presenter.phone)]
        if record.attendee_phone:
            recipients.append(Recipient(RecipientRole.ATTENDEE, record.attendee.name, record.attendee_phone))
        return recipients

    def send_sync(self, message: OutboundMessage) -> DeliveryReceipt:
        formatted = normalize_phone(message.recipient.address, self._default_country_code)
        if not formatted:
            raise DeliveryError(
                f"Phone number '{message.recipient.address}' has no digits",
                error_code="INVALID_PHONE",
            )

        if self._simulate:
            return DeliveryReceipt(
                status=DeliveryStatus.SIMULATED,
                message_id=simulated_message_id(),
                formatted_address=formatted,
            )

        sid = self._client.send_message(formatted, message.body)
        return DeliveryReceipt(status=DeliveryStatus.SENT, message_id=sid, formatted_address=formatted)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
