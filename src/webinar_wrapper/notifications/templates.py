"""
Message templates per channel, recipient role and intent.
"""

from webinar_wrapper.notifications.rendering import MessageTemplate
from webinar_wrapper.webinars.models import NotificationIntent, RecipientRole

_EMAIL_FOOTER = """
  <hr style="border: none; border-top: 1px solid #e5e7eb; margin: 30px 0;">
  <p style="color: #6b7280; font-size: 12px;">This is an automated message from Webinar Wrapper</p>
</div>
"""

_PRESENTER_EMAIL_BODY = """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #2563eb;">Hello {{ recipient_name }}!</h2>
  <p>{{ intro }}</p>

  <div style="background: #f0f9ff; padding: 20px; border-radius: 8px; margin: 20px 0;">
    <h3 style="margin-top: 0;">Webinar Details</h3>
    <p><strong>Title:</strong> {{ webinar_name }}</p>
    <p><strong>Date:</strong> {{ date }}</p>
    <p><strong>Time:</strong> {{ time }} (UTC)</p>
    <p><strong>{{ meeting_label }}:</strong> {{ meeting_code }}</p>
    <p><strong>Password:</strong> {{ passcode }}</p>
    <p><strong>Your Host Link:</strong> <a href="{{ host_link }}">Join as Host</a></p>
  </div>

  <div style="background: #f0fdf4; padding: 15px; border-radius: 8px; margin: 20px 0;">
    <h4 style="margin-top: 0;">Attendee Information</h4>
    <p><strong>Name:</strong> {{ attendee_name }}</p>
    <p><strong>Email:</strong> {{ attendee_email }}</p>
    <p><strong>Phone:</strong> {{ attendee_phone }}</p>
  </div>

  <p><strong>Please be ready 10 minutes before the scheduled time.</strong></p>
""" + _EMAIL_FOOTER

_ATTENDEE_EMAIL_BODY = """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #16a34a;">Hello {{ recipient_name }}!</h2>
  <p>{{ intro }}</p>

  <div style="background: #f0fdf4; padding: 20px; border-radius: 8px; margin: 20px 0;">
    <h3 style="margin-top: 0;">Webinar Details</h3>
    <p><strong>Title:</strong> {{ webinar_name }}</p>
    <p><strong>Presenter:</strong> {{ presenter_name }}</p>
    <p><strong>Date:</strong> {{ date }}</p>
    <p><strong>Time:</strong> {{ time }} (UTC)</p>
    <p><strong>{{ meeting_label }}:</strong> {{ meeting_code }}</p>
    <p><strong>Password:</strong> {{ passcode }}</p>
  </div>

  <div style="text-align: center; margin: 30px 0;">
    <a href="{{ join_link }}" style="background: #16a34a; color: white; padding: 15px 30px; text-decoration: none; border-radius: 8px;">Join Webinar</a>
  </div>

  <p><strong>Please join on time to not miss any content.</strong></p>
""" + _EMAIL_FOOTER

EMAIL_TEMPLATES: dict[tuple[RecipientRole, NotificationIntent], MessageTemplate] = {
    (RecipientRole.PRESENTER, NotificationIntent.SCHEDULE): MessageTemplate(
        subject='Your webinar "{{ webinar_name }}" has been scheduled',
        body=_PRESENTER_EMAIL_BODY.replace("{{ intro }}", "Your webinar has been successfully scheduled:"),
        is_html=True,
    ),
    (RecipientRole.PRESENTER, NotificationIntent.REMINDER): MessageTemplate(
        subject='Reminder: Your webinar "{{ webinar_name }}" is coming up!',
        body=_PRESENTER_EMAIL_BODY.replace("{{ intro }}", "This is a reminder that your webinar is starting soon:"),
        is_html=True,
    ),
    (RecipientRole.ATTENDEE, NotificationIntent.SCHEDULE): MessageTemplate(
        subject='You\'re invited to webinar "{{ webinar_name }}"',
        body=_ATTENDEE_EMAIL_BODY.replace("{{ intro }}", "You have been invited to a webinar:"),
        is_html=True,
    ),
    (RecipientRole.ATTENDEE, NotificationIntent.REMINDER): MessageTemplate(
        subject='Reminder: Webinar "{{ webinar_name }}" is starting soon!',
        body=_ATTENDEE_EMAIL_BODY.replace("{{ intro }}", "This is a reminder about your upcoming webinar:"),
        is_html=True,
    ),
}

_MEETING_INFO = "{{ meeting_label }}: {{ meeting_code }}\nPassword: {{ passcode }}"

MESSAGING_TEMPLATES: dict[tuple[RecipientRole, NotificationIntent], MessageTemplate] = {
    (RecipientRole.PRESENTER, NotificationIntent.SCHEDULE): MessageTemplate(
        subject="",
        body=(
            '*WEBINAR SCHEDULED* - "{{ webinar_name }}"\n\n'
            "Date: {{ date }}\nTime: {{ time }} (UTC)\nAttendee: {{ attendee_name }}\n\n"
            "Host Link: {{ host_link }}\n" + _MEETING_INFO
        ),
    ),
    (RecipientRole.PRESENTER, NotificationIntent.REMINDER): MessageTemplate(
        subject="",
        body=(
            '*REMINDER* - Your webinar "{{ webinar_name }}" starts soon!\n\n'
            "Date: {{ date }}\nTime: {{ time }} (UTC)\n\n"
            "Host Link: {{ host_link }}\n" + _MEETING_INFO + "\n\n"
            "Please join 10 minutes early to test your setup!"
        ),
    ),
    (RecipientRole.ATTENDEE, NotificationIntent.SCHEDULE): MessageTemplate(
        subject="",
        body=(
            '*WEBINAR INVITATION* - "{{ webinar_name }}"\n\n'
            "Date: {{ date }}\nTime: {{ time }} (UTC)\nPresenter: {{ presenter_name }}\n\n"
            "Join Link: {{ join_link }}\n" + _MEETING_INFO
        ),
    ),
    (RecipientRole.ATTENDEE, NotificationIntent.REMINDER): MessageTemplate(
        subject="",
        body=(
            '*REMINDER* - Webinar "{{ webinar_name }}" starts soon!\n\n'
            "Date: {{ date }}\nTime: {{ time }} (UTC)\nPresenter: {{ presenter_name }}\n\n"
            "Join Link: {{ join_link }}\n" + _MEETING_INFO + "\n\nSee you there!"
        ),
    ),
}
