"""
Notification template rendering with variable substitution.

Templates use {{variable}} placeholders. Values substituted into HTML text
only have angle brackets escaped, so names, dates and times appear verbatim
in the body; link values land in href attributes and are fully escaped.
Plain-text bodies are rendered verbatim.
"""

import html
import re
from dataclasses import dataclass
from typing import Any, Optional

from webinar_wrapper.shared.logging import get_logger
from webinar_wrapper.webinars.models import (
    MeetingProviderType,
    NotificationIntent,
    RecipientRole,
    ScheduledWebinar,
)

logger = get_logger(__name__)

NO_PASSWORD_TEXT = "No password required"
NOT_PROVIDED = "Not provided"
LINK_VARIABLES = frozenset({"host_link", "join_link"})


@dataclass(frozen=True)
class MessageTemplate:
    """Subject and body templates for one (role, intent) pair."""

    subject: str
    body: str
    is_html: bool = False


@dataclass(frozen=True)
class RenderedMessage:
    """Result of template rendering."""

    subject: str
    body: str
    is_html: bool = False


class TemplateRenderer:
    """
    Renders notification templates with variable substitution.

    Supports {{variable}} syntax for substitution.
    """

    VARIABLE_PATTERN = re.compile(r"\{\{\s*(\w+)\s*\}\}")

    def __init__(self, escape_html: bool = True):
        """
        Initialize renderer.

        Args:
            escape_html: Whether to HTML-escape variable values in HTML bodies.
        """
        self._escape_html = escape_html

    def render(self, template: MessageTemplate, variables: dict[str, Any]) -> RenderedMessage:
        """
        Render a template with variable substitution.

        Args:
            template: Subject and body templates.
            variables: Dictionary of variable names to values.

        Returns:
            RenderedMessage with substituted values.
        """
        str_vars = {k: str(v) if v is not None else "" for k, v in variables.items()}

        missing = self.extract_variables(template.subject + template.body) - str_vars.keys()
        if missing:
            logger.warning("Template variables not provided", extra={"missing_variables": sorted(missing)})

        subject = self._substitute(template.subject, str_vars, escape=False)
        body = self._substitute(template.body, str_vars, escape=template.is_html and self._escape_html)

        return RenderedMessage(subject=subject, body=body, is_html=template.is_html)

    def _substitute(self, template: str, variables: dict[str, str], escape: bool) -> str:
        def replacer(match: re.Match) -> str:
            name = match.group(1)
            value = variables.get(name, "")
            if not escape:
                return value
            if name in LINK_VARIABLES:
                return html.escape(value, quote=True)
            return escape_text(value)

        return self.VARIABLE_PATTERN.sub(replacer, template)

    def extract_variables(self, template: str) -> set[str]:
        """Variable names referenced by a template."""
        return set(self.VARIABLE_PATTERN.findall(template))


def escape_text(value: str) -> str:
    """Neutralize markup in an HTML text node; ampersands and quotes are kept."""
    return value.replace("<", "&lt;").replace(">", "&gt;")


def _or_not_provided(value: Optional[str]) -> str:
    return value if value else NOT_PROVIDED


def build_variables(
    webinar: ScheduledWebinar,
    role: RecipientRole,
    intent: NotificationIntent,
) -> dict[str, Any]:
    """Template variables shared by every channel."""
    record = webinar.record
    meeting = webinar.meeting
    attendee = record.attendee

    if meeting.provider == MeetingProviderType.GOOGLE_MEET:
        meeting_label = "Meeting Code"
    else:
        meeting_label = "Meeting ID"

    if role == RecipientRole.PRESENTER:
        recipient_name = record.presenter.name
    else:
        recipient_name = _or_not_provided(attendee and attendee.name)

    return {
        "webinar_name": record.name,
        "date": record.date,
        "time": record.time,
        "presenter_name": record.presenter.name,
        "presenter_email": record.presenter.email,
        "recipient_name": recipient_name,
        "attendee_name": _or_not_provided(attendee and attendee.name),
        "attendee_email": _or_not_provided(attendee and attendee.email),
        "attendee_phone": _or_not_provided(attendee and attendee.phone),
        "meeting_label": meeting_label,
        "meeting_code": meeting.meeting_code or NOT_PROVIDED,
        "passcode": meeting.passcode if meeting.passcode_required else NO_PASSWORD_TEXT,
        "host_link": meeting.host_link,
        "join_link": meeting.join_link,
        "intent": intent.value,
    }
