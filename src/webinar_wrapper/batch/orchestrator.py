"""
Batch orchestration for scheduling and notification passes.

Schedule pass: validate -> resolve credential -> provision records in input
order. The first provisioning failure is authoritative: later records are
never attempted and nothing provisioned earlier in the pass is returned.

Notification pass: validate -> dispatch through the channel. Individual
delivery failures are part of the result, not errors.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence

from webinar_wrapper.meetings.interface import MeetingProvider
from webinar_wrapper.notifications.interface import NotificationChannel
from webinar_wrapper.shared.exceptions import ProviderError, ValidationError
from webinar_wrapper.shared.logging import get_logger
from webinar_wrapper.webinars.models import (
    BatchPartition,
    ChannelType,
    DeliveryStatus,
    MeetingProviderType,
    NotificationIntent,
    NotificationOutcome,
    ProviderCredential,
    ScheduledWebinar,
    ValidationProfile,
    WebinarRecord,
)
from webinar_wrapper.webinars.validation import RecordValidator

logger = get_logger(__name__)

CHANNEL_PROFILES: dict[ChannelType, ValidationProfile] = {
    ChannelType.EMAIL: ValidationProfile.EMAIL,
    ChannelType.MESSAGING: ValidationProfile.MESSAGING,
}


@dataclass(frozen=True)
class ProvisioningFailure:
    record: WebinarRecord
    error: ProviderError


@dataclass(frozen=True)
class ProvisioningPass:
    """Accumulator threaded through the provisioning fold."""

    scheduled: tuple[ScheduledWebinar, ...] = ()
    failure: ProvisioningFailure | None = None

    @property
    def aborted(self) -> bool:
        return self.failure is not None

    def advance(self, webinar: ScheduledWebinar) -> "ProvisioningPass":
        return replace(self, scheduled=self.scheduled + (webinar,))

    def abort(self, record: WebinarRecord, error: ProviderError) -> "ProvisioningPass":
        # Earlier successes are dropped with the failure.
        return ProvisioningPass(scheduled=(), failure=ProvisioningFailure(record=record, error=error))


@dataclass(frozen=True)
class ScheduleResult:
    provider: MeetingProviderType
    scheduled: tuple[ScheduledWebinar, ...]
    partition: BatchPartition


@dataclass(frozen=True)
class NotifyResult:
    channel: ChannelType
    intent: NotificationIntent
    outcomes: tuple[NotificationOutcome, ...]
    partition: BatchPartition

    def count(self, status: DeliveryStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)

    @property
    def sent_count(self) -> int:
        return self.count(DeliveryStatus.SENT)

    @property
    def failed_count(self) -> int:
        return self.count(DeliveryStatus.FAILED)

    @property
    def simulated_count(self) -> int:
        return self.count(DeliveryStatus.SIMULATED)


class BatchOrchestrator:
    """Runs one self-contained scheduling or notification pass per call."""

    async def schedule(self, records: Sequence[WebinarRecord], provider: MeetingProvider) -> ScheduleResult:
        """Validate the batch and provision a meeting for every valid record.

        Raises:
            ValidationError: no record is valid; no remote call was made.
            CredentialError: the provider credential could not be obtained.
            ProviderError: provisioning failed for a record; names the webinar.
        """
        partition = RecordValidator(ValidationProfile.SCHEDULE).partition(records)
        if not partition.valid:
            raise ValidationError("No valid webinars found to schedule", validation_errors=list(partition.errors))

        logger.info(
            "Provisioning webinars",
            extra={
                "provider": provider.provider_type.value,
                "valid_count": len(partition.valid),
                "skipped_invalid": partition.skipped_invalid,
            },
        )

        credential = await provider.resolve_credential()
        state = await self._provision_all(partition.valid, provider, credential)

        if state.failure is not None:
            failure = state.failure
            what = f"{provider.display_name} {provider.resource_name}"
            raise ProviderError(
                f'Failed to create {what} for "{failure.record.name}": {failure.error}',
                error_code=failure.error.error_code,
                provider_response=failure.error.provider_response,
                webinar_name=failure.record.name,
            ) from failure.error

        logger.info(
            "Provisioning completed",
            extra={"provider": provider.provider_type.value, "scheduled_count": len(state.scheduled)},
        )
        return ScheduleResult(provider=provider.provider_type, scheduled=state.scheduled, partition=partition)

    async def _provision_all(
        self,
        records: Sequence[WebinarRecord],
        provider: MeetingProvider,
        credential: ProviderCredential,
    ) -> ProvisioningPass:
        state = ProvisioningPass()
        for record in records:
            if state.aborted:
                break
            state = await self._provision_one(state, record, provider, credential)
        return state

    async def _provision_one(
        self,
        state: ProvisioningPass,
        record: WebinarRecord,
        provider: MeetingProvider,
        credential: ProviderCredential,
    ) -> ProvisioningPass:
        try:
            meeting = await provider.provision(record, credential)
        except ProviderError as e:
            logger.error(
                "Provisioning failed; aborting batch",
                extra={
                    "provider": provider.provider_type.value,
                    "webinar_id": record.id,
                    "webinar_name": record.name,
                    "error": str(e),
                    "discarded": len(state.scheduled),
                },
            )
            return state.abort(record, e)
        return state.advance(ScheduledWebinar(record=record, meeting=meeting))

    async def notify(
        self,
        webinars: Sequence[ScheduledWebinar],
        channel: NotificationChannel,
        intent: NotificationIntent,
    ) -> NotifyResult:
        """Validate already-scheduled webinars and dispatch notifications.

        Raises:
            ValidationError: no webinar is valid for this channel.
        """
        profile = CHANNEL_PROFILES[channel.channel]
        partition = RecordValidator(profile).partition([webinar.record for webinar in webinars])
        if not partition.valid:
            raise ValidationError(
                f"No valid webinars found for {channel.display_name} sending",
                validation_errors=list(partition.errors),
            )

        invalid_rows = set(partition.invalid_rows)
        valid_webinars = [
            webinar for row, webinar in enumerate(webinars, start=1) if row not in invalid_rows
        ]

        logger.info(
            "Dispatching notifications",
            extra={
                "channel": channel.channel.value,
                "intent": intent.value,
                "valid_count": len(valid_webinars),
                "skipped_invalid": partition.skipped_invalid,
            },
        )

        outcomes = await channel.dispatch(valid_webinars, intent)
        result = NotifyResult(
            channel=channel.channel,
            intent=intent,
            outcomes=tuple(outcomes),
            partition=partition,
        )

        logger.info(
            "Notification pass completed",
            extra={
                "channel": channel.channel.value,
                "sent_count": result.sent_count,
                "failed_count": result.failed_count,
                "simulated_count": result.simulated_count,
            },
        )
        return result
