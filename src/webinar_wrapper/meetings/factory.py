"""
Meeting provider factory.

Configuration comes from the injected Settings; adapters never read the
environment themselves.
"""

from __future__ import annotations

from webinar_wrapper.config import Settings
from webinar_wrapper.meetings.google_adapter import GoogleMeetProvider
from webinar_wrapper.meetings.interface import MeetingProvider
from webinar_wrapper.meetings.zoom_adapter import ZoomMeetingProvider
from webinar_wrapper.shared.logging import get_logger, mask
from webinar_wrapper.webinars.models import MeetingProviderType

logger = get_logger(__name__)


def create_meeting_provider(provider_type: MeetingProviderType, settings: Settings) -> MeetingProvider:
    """Build the adapter for the requested provider.

    Raises:
        ConfigurationError: the provider's credentials are not configured.
    """
    if provider_type == MeetingProviderType.ZOOM:
        logger.info(
            "Meeting provider resolved",
            extra={"provider_type": provider_type.value, "zoom_client_id": mask(settings.zoom_client_id)},
        )
        return ZoomMeetingProvider(settings)

    if provider_type == MeetingProviderType.GOOGLE_MEET:
        logger.info(
            "Meeting provider resolved",
            extra={
                "provider_type": provider_type.value,
                "google_client_id": mask(settings.google_client_id),
                "refresh_token_present": bool(settings.google_refresh_token),
            },
        )
        return GoogleMeetProvider(settings)

    raise ValueError(f"Unsupported meeting provider_type: {provider_type}")
