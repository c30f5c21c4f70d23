"""
Pydantic schemas for the batch endpoints.

Request rows use the flat column names of the uploaded spreadsheet. They are
converted once into WebinarRecord / ScheduledWebinar here and the rest of
the pipeline works on the typed domain objects only.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from webinar_wrapper.webinars.models import (
    Contact,
    MeetingProviderType,
    MeetingRecord,
    NotificationIntent,
    NotificationOutcome,
    ScheduledWebinar,
    WebinarRecord,
)

NO_PASSWORD_REQUIRED = "No password required"

_TEXT_FIELDS = (
    "webinar_name",
    "date",
    "time",
    "presenter_name",
    "presenter_email",
    "presenter_phone",
    "attendee_name",
    "attendee_email",
    "attendee_phone",
)


def _cell_to_text(value: Any) -> Any:
    """Spreadsheet cells arrive as numbers as often as strings."""
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return value


class WebinarPayload(BaseModel):
    """One webinar row as sent by the client."""

    model_config = ConfigDict(extra="ignore")

    id: int | None = Field(default=None, description="Row id; defaults to the 1-based position")
    webinar_name: str | None = None
    date: str | None = Field(default=None, description="YYYY-MM-DD")
    time: str | None = Field(default=None, description="HH:MM, UTC")
    presenter_name: str | None = None
    presenter_email: str | None = None
    presenter_phone: str | None = None
    attendee_name: str | None = None
    attendee_email: str | None = None
    attendee_phone: str | None = None

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        return _cell_to_text(v)

    def to_record(self, position: int) -> WebinarRecord:
        """Build the domain record.

        Args:
            position: 1-based position of the row in the request.
        """
        attendee = Contact(
            name=self.attendee_name or "",
            email=self.attendee_email or "",
            phone=self.attendee_phone or "",
        )
        return WebinarRecord(
            id=self.id if self.id is not None else position,
            name=self.webinar_name or "",
            date=self.date or "",
            time=self.time or "",
            presenter=Contact(
                name=self.presenter_name or "",
                email=self.presenter_email or "",
                phone=self.presenter_phone or "",
            ),
            attendee=None if attendee.is_empty else attendee,
        )

    @classmethod
    def record_fields(cls, record: WebinarRecord) -> dict[str, Any]:
        attendee = record.attendee or Contact()
        return {
            "id": record.id,
            "webinar_name": record.name,
            "date": record.date,
            "time": record.time,
            "presenter_name": record.presenter.name,
            "presenter_email": record.presenter.email,
            "presenter_phone": record.presenter.phone or None,
            "attendee_name": attendee.name or None,
            "attendee_email": attendee.email or None,
            "attendee_phone": attendee.phone or None,
        }


class ScheduledWebinarPayload(WebinarPayload):
    """A webinar row plus the meeting that was provisioned for it."""

    provider: MeetingProviderType | None = None
    external_id: str | None = None
    meeting_id: str | None = None
    meeting_code: str | None = None
    meeting_password: str | None = None
    presenter_link: str | None = None
    attendee_link: str | None = None
    provider_payload: dict[str, Any] = Field(default_factory=dict)

    @field_validator("external_id", "meeting_id", "meeting_code", "meeting_password", mode="before")
    @classmethod
    def coerce_meeting_text(cls, v: Any) -> Any:
        return _cell_to_text(v)

    @field_validator("meeting_password")
    @classmethod
    def drop_no_password_marker(cls, v: str | None) -> str | None:
        if not v or v == NO_PASSWORD_REQUIRED:
            return None
        return v

    @classmethod
    def from_domain(cls, webinar: ScheduledWebinar) -> "ScheduledWebinarPayload":
        meeting = webinar.meeting
        return cls(
            **cls.record_fields(webinar.record),
            provider=meeting.provider,
            external_id=meeting.external_id,
            meeting_id=meeting.meeting_code,
            meeting_code=meeting.meeting_code,
            meeting_password=meeting.passcode,
            presenter_link=meeting.host_link,
            attendee_link=meeting.join_link,
            provider_payload=meeting.raw_provider_payload,
        )

    def to_domain(self, position: int) -> ScheduledWebinar:
        join_link = self.attendee_link or ""
        provider = self.provider
        if provider is None:
            provider = (
                MeetingProviderType.GOOGLE_MEET
                if "meet.google.com" in join_link
                else MeetingProviderType.ZOOM
            )
        code = self.meeting_id or self.meeting_code or ""
        meeting = MeetingRecord(
            provider=provider,
            external_id=self.external_id or code,
            host_link=self.presenter_link or join_link,
            join_link=join_link,
            meeting_code=code,
            passcode=self.meeting_password,
            raw_provider_payload=dict(self.provider_payload),
        )
        return ScheduledWebinar(record=self.to_record(position), meeting=meeting)


class ScheduleRequest(BaseModel):
    """Body of the schedule endpoints."""

    webinars: list[WebinarPayload]

    def to_records(self) -> list[WebinarRecord]:
        return [row.to_record(position) for position, row in enumerate(self.webinars, start=1)]


class NotifyRequest(BaseModel):
    """Body of the notification endpoints."""

    webinars: list[ScheduledWebinarPayload]
    type: NotificationIntent = NotificationIntent.SCHEDULE

    def to_scheduled(self) -> list[ScheduledWebinar]:
        return [row.to_domain(position) for position, row in enumerate(self.webinars, start=1)]


class NotificationOutcomePayload(BaseModel):
    """Delivery outcome for one recipient."""

    to: str
    type: str = Field(..., description="presenter | attendee")
    channel: str
    status: str = Field(..., description="sent | failed | simulated")
    webinar_id: int
    error: str | None = None
    message_id: str | None = None
    formatted_phone: str | None = None

    @classmethod
    def from_domain(cls, outcome: NotificationOutcome) -> "NotificationOutcomePayload":
        return cls(
            to=outcome.to,
            type=outcome.recipient_role.value,
            channel=outcome.channel.value,
            status=outcome.status.value,
            webinar_id=outcome.webinar_id,
            error=outcome.error_detail,
            message_id=outcome.message_id,
            formatted_phone=outcome.formatted_phone,
        )


class BatchResponse(BaseModel):
    success: bool = True
    message: str
    validation_warnings: list[str] | None = None
    skipped_invalid: int = 0

    def to_payload(self) -> dict[str, Any]:
        """JSON body; validation_warnings is omitted when there are none."""
        exclude = None if self.validation_warnings else {"validation_warnings"}
        return self.model_dump(mode="json", exclude=exclude)


class ScheduleResponse(BatchResponse):
    scheduled_webinars: list[ScheduledWebinarPayload]


class EmailResponse(BatchResponse):
    email_results: list[NotificationOutcomePayload]
    sent_count: int
    failed_count: int


class MessagingResponse(BatchResponse):
    whatsapp_results: list[NotificationOutcomePayload]
    sent_count: int
    failed_count: int
    simulated_count: int


class ErrorResponse(BaseModel):
    error: str
    validation_errors: list[str] | None = None
