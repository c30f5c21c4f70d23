"""
Batch API router.

Scheduling endpoints provision meetings for a batch of webinar rows;
notification endpoints send the scheduled webinars out by email or WhatsApp.
Providers and channels are built per request from Settings and closed when
the request finishes.
"""

from typing import Annotated, Iterator

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from webinar_wrapper.batch.orchestrator import BatchOrchestrator
from webinar_wrapper.config import Settings, get_settings
from webinar_wrapper.meetings.factory import create_meeting_provider
from webinar_wrapper.meetings.interface import MeetingProvider
from webinar_wrapper.notifications.email_channel import EmailChannel
from webinar_wrapper.notifications.interface import NotificationChannel
from webinar_wrapper.notifications.messaging_channel import WhatsAppChannel
from webinar_wrapper.shared.exceptions import AppError, UnexpectedError
from webinar_wrapper.shared.logging import get_logger
from webinar_wrapper.webinars.models import MeetingProviderType
from webinar_wrapper.webinars.schemas import (
    EmailResponse,
    ErrorResponse,
    MessagingResponse,
    NotificationOutcomePayload,
    NotifyRequest,
    ScheduledWebinarPayload,
    ScheduleRequest,
    ScheduleResponse,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["webinars"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing credentials or no valid webinars"},
    500: {"model": ErrorResponse, "description": "Provider or unexpected failure"},
}


def get_orchestrator() -> BatchOrchestrator:
    return BatchOrchestrator()


def get_zoom_provider(settings: Annotated[Settings, Depends(get_settings)]) -> Iterator[MeetingProvider]:
    """Dependency for the Zoom meeting provider."""
    provider = create_meeting_provider(MeetingProviderType.ZOOM, settings)
    try:
        yield provider
    finally:
        provider.close()


def get_google_provider(settings: Annotated[Settings, Depends(get_settings)]) -> Iterator[MeetingProvider]:
    """Dependency for the Google Meet provider."""
    provider = create_meeting_provider(MeetingProviderType.GOOGLE_MEET, settings)
    try:
        yield provider
    finally:
        provider.close()


def get_email_channel(settings: Annotated[Settings, Depends(get_settings)]) -> Iterator[NotificationChannel]:
    channel = EmailChannel.from_settings(settings)
    try:
        yield channel
    finally:
        channel.close()


def get_messaging_channel(
    settings: Annotated[Settings, Depends(get_settings)],
) -> Iterator[NotificationChannel]:
    channel = WhatsAppChannel.from_settings(settings)
    try:
        yield channel
    finally:
        channel.close()


async def _schedule(
    body: ScheduleRequest,
    provider: MeetingProvider,
    orchestrator: BatchOrchestrator,
) -> JSONResponse:
    records = body.to_records()
    logger.info(
        "Schedule requested",
        extra={"provider": provider.provider_type.value, "row_count": len(records)},
    )

    try:
        result = await orchestrator.schedule(records, provider)
    except AppError:
        raise
    except Exception as e:
        logger.exception("Unexpected error while scheduling webinars")
        raise UnexpectedError(f"Failed to schedule webinars: {e!s}") from e

    count = len(result.scheduled)
    response = ScheduleResponse(
        message=f"Successfully created {count} {provider.display_name} {provider.resource_name}s",
        scheduled_webinars=[ScheduledWebinarPayload.from_domain(w) for w in result.scheduled],
        validation_warnings=list(result.partition.errors) or None,
        skipped_invalid=result.partition.skipped_invalid,
    )
    return JSONResponse(content=response.to_payload())


@router.post("/schedule", response_model=ScheduleResponse, responses=_ERROR_RESPONSES)
async def schedule_zoom(
    body: ScheduleRequest,
    provider: Annotated[MeetingProvider, Depends(get_zoom_provider)],
    orchestrator: Annotated[BatchOrchestrator, Depends(get_orchestrator)],
) -> JSONResponse:
    """Create one Zoom meeting per valid row.

    The first provisioning failure aborts the batch with a 500 naming the
    webinar; no partial results are returned.
    """
    return await _schedule(body, provider, orchestrator)


@router.post("/schedule-google", response_model=ScheduleResponse, responses=_ERROR_RESPONSES)
async def schedule_google(
    body: ScheduleRequest,
    provider: Annotated[MeetingProvider, Depends(get_google_provider)],
    orchestrator: Annotated[BatchOrchestrator, Depends(get_orchestrator)],
) -> JSONResponse:
    """Create one Google Calendar event with a Meet link per valid row."""
    return await _schedule(body, provider, orchestrator)


@router.post("/send-email", response_model=EmailResponse, responses=_ERROR_RESPONSES)
async def send_email(
    body: NotifyRequest,
    channel: Annotated[NotificationChannel, Depends(get_email_channel)],
    orchestrator: Annotated[BatchOrchestrator, Depends(get_orchestrator)],
) -> JSONResponse:
    """Email presenters and attendees. Individual failures are reported per recipient."""
    logger.info("Email notifications requested", extra={"row_count": len(body.webinars), "type": body.type.value})

    try:
        result = await orchestrator.notify(body.to_scheduled(), channel, body.type)
    except AppError:
        raise
    except Exception as e:
        logger.exception("Unexpected error while sending emails")
        raise UnexpectedError(f"Failed to send emails: {e!s}") from e

    response = EmailResponse(
        message=f"Sent {result.sent_count} emails ({result.failed_count} failed)",
        email_results=[NotificationOutcomePayload.from_domain(o) for o in result.outcomes],
        sent_count=result.sent_count,
        failed_count=result.failed_count,
        validation_warnings=list(result.partition.errors) or None,
        skipped_invalid=result.partition.skipped_invalid,
    )
    return JSONResponse(content=response.to_payload())


@router.post("/send-whatsapp", response_model=MessagingResponse, responses=_ERROR_RESPONSES)
async def send_whatsapp(
    body: NotifyRequest,
    channel: Annotated[NotificationChannel, Depends(get_messaging_channel)],
    orchestrator: Annotated[BatchOrchestrator, Depends(get_orchestrator)],
) -> JSONResponse:
    """Send WhatsApp messages to presenters and attendees.

    In simulated mode every outcome has status "simulated" and a SIM... id.
    """
    logger.info(
        "WhatsApp notifications requested",
        extra={"row_count": len(body.webinars), "type": body.type.value},
    )

    try:
        result = await orchestrator.notify(body.to_scheduled(), channel, body.type)
    except AppError:
        raise
    except Exception as e:
        logger.exception("Unexpected error while sending WhatsApp messages")
        raise UnexpectedError(f"Failed to send WhatsApp messages: {e!s}") from e

    response = MessagingResponse(
        message=(
            f"Sent {result.sent_count} WhatsApp messages "
            f"({result.failed_count} failed, {result.simulated_count} simulated)"
        ),
        whatsapp_results=[NotificationOutcomePayload.from_domain(o) for o in result.outcomes],
        sent_count=result.sent_count,
        failed_count=result.failed_count,
        simulated_count=result.simulated_count,
        validation_warnings=list(result.partition.errors) or None,
        skipped_invalid=result.partition.skipped_invalid,
    )
    return JSONResponse(content=response.to_payload())
