"""
Notification channel interface definition.

A channel turns scheduled webinars into per-recipient messages and tries to
deliver each one independently. A failed delivery is recorded in that
recipient's outcome and never stops the rest of the batch.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, Mapping, Sequence

import anyio

from webinar_wrapper.notifications.rendering import (
    MessageTemplate,
    RenderedMessage,
    TemplateRenderer,
    build_variables,
)
from webinar_wrapper.shared.logging import get_logger
from webinar_wrapper.webinars.models import (
    ChannelType,
    DeliveryStatus,
    NotificationIntent,
    NotificationOutcome,
    RecipientRole,
    ScheduledWebinar,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class Recipient:
    role: RecipientRole
    name: str
    address: str


@dataclass(frozen=True)
class OutboundMessage:
    """A rendered message ready for the transport."""

    webinar_id: int
    recipient: Recipient
    subject: str
    body: str
    is_html: bool = False
    text_body: str | None = None


@dataclass(frozen=True)
class DeliveryReceipt:
    status: DeliveryStatus
    message_id: str | None = None
    formatted_address: str | None = None


class NotificationChannel(ABC):
    """Abstract interface for notification channels.

    Subclasses decide who receives a message (`recipients`) and how it is
    transported (`send_sync`); rendering, bounded fan-out and outcome
    aggregation live here.
    """

    channel: ClassVar[ChannelType]
    display_name: ClassVar[str]
    templates: ClassVar[Mapping[tuple[RecipientRole, NotificationIntent], MessageTemplate]]

    def __init__(self, renderer: TemplateRenderer | None = None, max_concurrency: int = 4) -> None:
        self._renderer = renderer or TemplateRenderer()
        self._max_concurrency = max(1, max_concurrency)

    @abstractmethod
    def recipients(self, webinar: ScheduledWebinar) -> list[Recipient]:
        """Recipients for one webinar, presenter first."""
        ...

    @abstractmethod
    def send_sync(self, message: OutboundMessage) -> DeliveryReceipt:
        """Deliver one message.

        Raises:
            DeliveryError: the transport rejected the message.
        """
        ...

    def render(
        self,
        webinar: ScheduledWebinar,
        recipient: Recipient,
        intent: NotificationIntent,
    ) -> OutboundMessage:
        template = self.templates[(recipient.role, intent)]
        rendered: RenderedMessage = self._renderer.render(
            template, build_variables(webinar, recipient.role, intent)
        )
        return OutboundMessage(
            webinar_id=webinar.record.id,
            recipient=recipient,
            subject=rendered.subject,
            body=rendered.body,
            is_html=rendered.is_html,
        )

    async def dispatch(
        self,
        webinars: Sequence[ScheduledWebinar],
        intent: NotificationIntent,
    ) -> list[NotificationOutcome]:
        """Send every message for the batch.

        Sends run concurrently up to max_concurrency; the returned outcomes
        follow input order (record order, then presenter before attendee).
        """
        jobs = [(webinar, recipient) for webinar in webinars for recipient in self.recipients(webinar)]
        outcomes: list[NotificationOutcome | None] = [None] * len(jobs)
        limiter = anyio.CapacityLimiter(self._max_concurrency)

        async def _run(index: int, webinar: ScheduledWebinar, recipient: Recipient) -> None:
            outcomes[index] = await self._deliver(webinar, recipient, intent, limiter)

        async with anyio.create_task_group() as tg:
            for index, (webinar, recipient) in enumerate(jobs):
                tg.start_soon(_run, index, webinar, recipient)

        return [outcome for outcome in outcomes if outcome is not None]

    async def _deliver(
        self,
        webinar: ScheduledWebinar,
        recipient: Recipient,
        intent: NotificationIntent,
        limiter: anyio.CapacityLimiter,
    ) -> NotificationOutcome:
        try:
            message = self.render(webinar, recipient, intent)
            receipt = await anyio.to_thread.run_sync(self.send_sync, message, limiter=limiter)
        except Exception as e:
            # Any transport failure is this recipient's outcome only.
            logger.warning(
                "Notification delivery failed",
                extra={
                    "channel": self.channel.value,
                    "webinar_id": webinar.record.id,
                    "recipient_role": recipient.role.value,
                    "error": str(e),
                },
            )
            return NotificationOutcome(
                webinar_id=webinar.record.id,
                recipient_role=recipient.role,
                channel=self.channel,
                status=DeliveryStatus.FAILED,
                to=recipient.address,
                error_detail=str(e) or e.__class__.__name__,
            )

        logger.info(
            "Notification delivered",
            extra={
                "channel": self.channel.value,
                "webinar_id": webinar.record.id,
                "recipient_role": recipient.role.value,
                "status": receipt.status.value,
            },
        )
        return NotificationOutcome(
            webinar_id=webinar.record.id,
            recipient_role=recipient.role,
            channel=self.channel,
            status=receipt.status,
            to=recipient.address,
            message_id=receipt.message_id,
            formatted_phone=receipt.formatted_address,
        )

    def close(self) -> None:
        """Release transport resources owned by the channel."""
