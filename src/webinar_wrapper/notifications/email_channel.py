"""
Email notification channel over SMTP.
"""

from __future__ import annotations

import smtplib
import ssl
import uuid
from dataclasses import dataclass, replace
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Protocol

from webinar_wrapper.config import Settings
from webinar_wrapper.notifications.interface import (
    DeliveryReceipt,
    NotificationChannel,
    OutboundMessage,
    Recipient,
)
from webinar_wrapper.notifications.rendering import TemplateRenderer, build_variables
from webinar_wrapper.notifications.templates import EMAIL_TEMPLATES, MESSAGING_TEMPLATES
from webinar_wrapper.shared.exceptions import ConfigurationError, DeliveryError
from webinar_wrapper.webinars.models import (
    ChannelType,
    DeliveryStatus,
    NotificationIntent,
    RecipientRole,
    ScheduledWebinar,
)


@dataclass(frozen=True)
class EmailSendRequest:
    to: str
    subject: str
    html_body: str
    text_body: str | None = None


@dataclass(frozen=True)
class EmailSendResult:
    message_id: str
    provider: str


class EmailProvider(Protocol):
    """Minimal provider contract used by the email channel."""

    def send_email(self, request: EmailSendRequest) -> EmailSendResult:  # pragma: no cover - interface
        ...


class SMTPEmailProvider:
    """TLS-enabled SMTP email provider."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str | None = None,
        password: str | None = None,
        sender: str | None = None,
        use_tls: bool = True,
        timeout: float = 10,
    ):
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._sender = sender
        self._use_tls = use_tls
        self._timeout = timeout
        self._ssl_context = ssl.create_default_context()

    @classmethod
    def from_settings(cls, settings: Settings) -> "SMTPEmailProvider":
        return cls(
            host=settings.email_smtp_host,
            port=settings.email_smtp_port,
            username=settings.email_user,
            password=settings.email_pass,
            sender=settings.email_sender,
            use_tls=settings.email_use_tls,
            timeout=settings.http_timeout_seconds,
        )

    def send_email(self, request: EmailSendRequest) -> EmailSendResult:
        msg = EmailMessage()
        msg["Subject"] = request.subject
        msg["To"] = request.to
        msg["From"] = self._sender or self._username
        msg["Message-ID"] = make_msgid()
        if request.text_body:
            msg.set_content(request.text_body)
            msg.add_alternative(request.html_body, subtype="html")
        else:
            msg.set_content(request.html_body, subtype="html")

        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as client:
                if self._use_tls:
                    client.starttls(context=self._ssl_context)
                if self._username and self._password:
                    client.login(self._username, self._password)
                client.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise DeliveryError(f"SMTP delivery to {request.to} failed: {e!s}", error_code="SMTP_ERROR") from e

        message_id = msg.get("Message-ID") or f"msg-{uuid.uuid4()}"
        return EmailSendResult(message_id=message_id, provider="smtp")


class EmailChannel(NotificationChannel):
    """Sends HTML email to the presenter and, when present, the attendee.

    Each message carries a plain-text alternative rendered from the text
    templates for the same role and intent.
    """

    channel = ChannelType.EMAIL
    display_name = "email"
    templates = EMAIL_TEMPLATES
    text_templates = MESSAGING_TEMPLATES

    def __init__(
        self,
        provider: EmailProvider,
        renderer: TemplateRenderer | None = None,
        max_concurrency: int = 4,
    ) -> None:
        super().__init__(renderer=renderer, max_concurrency=max_concurrency)
        self._provider = provider

    @classmethod
    def from_settings(cls, settings: Settings) -> "EmailChannel":
        if not settings.email_configured:
            raise ConfigurationError(
                "Email credentials not configured. Please add EMAIL_USER and EMAIL_PASS to the environment"
            )
        return cls(
            provider=SMTPEmailProvider.from_settings(settings),
            max_concurrency=settings.notification_max_concurrency,
        )

    def recipients(self, webinar: ScheduledWebinar) -> list[Recipient]:
        record = webinar.record
        recipients = [Recipient(RecipientRole.PRESENTER, record.presenter.name, record.presenter.email)]
        if record.attendee_email:
            recipients.append(Recipient(RecipientRole.ATTENDEE, record.attendee.name, record.attendee_email))
        return recipients

    def render(
        self,
        webinar: ScheduledWebinar,
        recipient: Recipient,
        intent: NotificationIntent,
    ) -> OutboundMessage:
        message = super().render(webinar, recipient, intent)
        text = self._renderer.render(
            self.text_templates[(recipient.role, intent)],
            build_variables(webinar, recipient.role, intent),
        )
        return replace(message, text_body=text.body)

    def send_sync(self, message: OutboundMessage) -> DeliveryReceipt:
        result = self._provider.send_email(
            EmailSendRequest(
                to=message.recipient.address,
                subject=message.subject,
                html_body=message.body,
                text_body=message.text_body,
            )
        )
        return DeliveryReceipt(status=DeliveryStatus.SENT, message_id=result.message_id)
