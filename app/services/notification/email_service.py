# app/services/notification/email_service.py
"""
Transactional email: booking confirmation and cancellation, contact
acknowledgement, admin contact notification and contact responses.

Templates are Jinja2 strings rendered with autoescaping and delivered over
SMTP. Email is a side effect: every failure is logged and swallowed, and
the send methods report delivery with a boolean.
"""

import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any, Dict, List, Optional

from jinja2 import DictLoader, Environment, TemplateError, select_autoescape

from app.config.settings import Settings
from app.core.logging import get_logger
from app.models.booking.booking import Booking
from app.models.contact.contact import Contact

logger = get_logger(__name__)

BOOKING_CONFIRMATION = "booking_confirmation"
BOOKING_CANCELLATION = "booking_cancellation"
CONTACT_ACKNOWLEDGEMENT = "contact_acknowledgement"
ADMIN_CONTACT_NOTIFICATION = "admin_contact_notification"
CONTACT_RESPONSE = "contact_response"

DEFAULT_TEMPLATES: Dict[str, Dict[str, str]] = {
    BOOKING_CONFIRMATION: {
        "subject": "Booking Confirmation - {{ booking.booking_reference }}",
        "content": """
<h2>Thank you for your reservation, {{ booking.guest_first_name }}!</h2>
<p>Your booking at {{ hotel_name }} has been received.</p>
<table>
  <tr><td><strong>Reference:</strong></td><td>{{ booking.booking_reference }}</td></tr>
  {% if booking.confirmation_number %}
  <tr><td><strong>Confirmation:</strong></td><td>{{ booking.confirmation_number }}</td></tr>
  {% endif %}
  <tr><td><strong>Room:</strong></td><td>{{ room_name }}</td></tr>
  <tr><td><strong>Check-in:</strong></td><td>{{ booking.check_in_date.isoformat() }}</td></tr>
  <tr><td><strong>Check-out:</strong></td><td>{{ booking.check_out_date.isoformat() }}</td></tr>
  <tr><td><strong>Guests:</strong></td><td>{{ booking.number_of_guests }}</td></tr>
  <tr><td><strong>Nights:</strong></td><td>{{ booking.number_of_nights }}</td></tr>
  <tr><td><strong>Subtotal:</strong></td><td>{{ booking.currency }} {{ booking.subtotal }}</td></tr>
  <tr><td><strong>Taxes:</strong></td><td>{{ booking.currency }} {{ booking.taxes }}</td></tr>
  <tr><td><strong>Fees:</strong></td><td>{{ booking.currency }} {{ booking.fees }}</td></tr>
  <tr><td><strong>Total:</strong></td><td>{{ booking.currency }} {{ booking.total_amount }}</td></tr>
</table>
<p>Questions? Call us at {{ hotel_phone }}.</p>
""",
    },
    BOOKING_CANCELLATION: {
        "subject": "Booking Cancelled - {{ booking.booking_reference }}",
        "content": """
<h2>Your booking has been cancelled</h2>
<p>Dear {{ booking.guest_first_name }}, booking {{ booking.booking_reference }} at {{ hotel_name }} was cancelled.</p>
<p><strong>Reason:</strong> {{ booking.cancellation_reason }}</p>
{% if booking.refund_amount and booking.refund_amount > 0 %}
<p>A refund of {{ booking.currency }} {{ booking.refund_amount }} is being processed.</p>
{% endif %}
<p>We hope to welcome you another time.</p>
""",
    },
    CONTACT_ACKNOWLEDGEMENT: {
        "subject": "Thank you for contacting us - {{ hotel_name }}",
        "content": """
<h2>Dear {{ contact.name }},</h2>
<p>We received your message and will get back to you within 24 hours.</p>
<p><strong>Subject:</strong> {{ contact.subject }}</p>
<p><strong>Inquiry type:</strong> {{ contact.inquiry_type_display }}</p>
<p>For urgent matters call {{ hotel_phone }}.</p>
""",
    },
    ADMIN_CONTACT_NOTIFICATION: {
        "subject": "New Contact Submission - {{ contact.inquiry_type.value }} ({{ contact.priority.value }} priority)",
        "content": """
<h3>New contact form submission</h3>
<p><strong>Name:</strong> {{ contact.name }}</p>
<p><strong>Email:</strong> {{ contact.email }}</p>
<p><strong>Phone:</strong> {{ contact.phone }}</p>
<p><strong>Subject:</strong> {{ contact.subject }}</p>
<p><strong>Message:</strong></p>
<p>{{ contact.message }}</p>
<p><strong>Preferred contact:</strong> {{ contact.preferred_contact_method.value }}, {{ contact.preferred_contact_time.value }}</p>
""",
    },
    CONTACT_RESPONSE: {
        "subject": "Re: {{ contact.subject }} - {{ hotel_name }}",
        "content": """
<h2>Dear {{ contact.name }},</h2>
<p>{{ contact.response_message }}</p>
<p>Best regards,<br>{{ contact.responded_by }}<br>{{ hotel_name }}</p>
""",
    },
}


class EmailError(Exception):
    """Raised internally when a message cannot be rendered or delivered."""


@dataclass
class RenderedEmail:
    subject: str
    html: str
    to: List[str]


class TemplateEngine:
    """Jinja2 environment preloaded with the default templates."""

    def __init__(self, templates: Optional[Dict[str, Dict[str, str]]] = None):
        templates = templates or DEFAULT_TEMPLATES
        mapping = {}
        for name, parts in templates.items():
            mapping[f"{name}.subject"] = parts["subject"]
            mapping[f"{name}.html"] = parts["content"]
        self.env = Environment(
            loader=DictLoader(mapping),
            autoescape=select_autoescape(default=True, default_for_string=True),
        )

    def render(self, name: str, context: Dict[str, Any]) -> Dict[str, str]:
        try:
            subject = self.env.get_template(f"{name}.subject").render(**context)
            html = self.env.get_template(f"{name}.html").render(**context)
        except TemplateError as e:
            raise EmailError(f"Failed to render template {name}: {e}") from e
        return {"subject": " ".join(subject.split()), "html": html.strip()}


class EmailService:
    """
    Renders and delivers transactional email.

    When ``EMAIL_ENABLED`` is off the rendered message is logged and
    dropped. ``outbox`` keeps every rendered message, delivered or not.
    """

    def __init__(self, settings: Settings, template_engine: Optional[TemplateEngine] = None):
        self.settings = settings
        self.templates = template_engine or TemplateEngine()
        self.outbox: List[RenderedEmail] = []

    # ------------------------------------------------------------------ #
    # Use cases
    # ------------------------------------------------------------------ #

    def send_booking_confirmation(self, booking: Booking) -> bool:
        return self._send(
            BOOKING_CONFIRMATION,
            [booking.guest_email],
            booking=booking,
            room_name=booking.room.name if booking.room else "",
        )

    def send_booking_cancellation(self, booking: Booking) -> bool:
        return self._send(BOOKING_CANCELLATION, [booking.guest_email], booking=booking)

    def send_contact_acknowledgement(self, contact: Contact) -> bool:
        return self._send(CONTACT_ACKNOWLEDGEMENT, [contact.email], contact=contact)

    def send_admin_contact_notification(self, contact: Contact) -> bool:
        if not self.settings.ADMIN_NOTIFICATION_EMAIL:
            return False
        return self._send(
            ADMIN_CONTACT_NOTIFICATION,
            [self.settings.ADMIN_NOTIFICATION_EMAIL],
            contact=contact,
        )

    def send_contact_response(self, contact: Contact) -> bool:
        return self._send(CONTACT_RESPONSE, [contact.email], contact=contact)

    # ------------------------------------------------------------------ #
    # Delivery
    # ------------------------------------------------------------------ #

    def _send(self, template: str, to: List[str], **context: Any) -> bool:
        context.setdefault("hotel_name", self.settings.HOTEL_NAME)
        context.setdefault("hotel_phone", self.settings.HOTEL_PHONE)
        try:
            rendered = self.templates.render(template, context)
            message = RenderedEmail(subject=rendered["subject"], html=rendered["html"], to=to)
            self.outbox.append(message)

            if not self.settings.EMAIL_ENABLED:
                logger.info(
                    "Email delivery disabled; message suppressed",
                    extra={"template": template, "recipients": to, "subject": message.subject},
                )
                return False

            self._deliver(message)
            logger.info(
                "Email sent",
                extra={"template": template, "recipients": to, "subject": message.subject},
            )
            return True
        except (EmailError, smtplib.SMTPException, OSError) as e:
            logger.error(
                f"Failed to send email: {e}",
                extra={"template": template, "recipients": to},
            )
            return False

    def _deliver(self, message: RenderedEmail) -> None:
        if not self.settings.SMTP_HOST:
            raise EmailError("SMTP_HOST is not configured")

        mime = MIMEMultipart("alternative")
        mime["Subject"] = message.subject
        mime["From"] = f"{self.settings.EMAIL_FROM_NAME} <{self.settings.EMAIL_FROM_ADDRESS}>"
        mime["To"] = ", ".join(message.to)
        mime.attach(MIMEText(message.html, "html"))

        with smtplib.SMTP(
            self.settings.SMTP_HOST,
            self.settings.SMTP_PORT,
            timeout=self.settings.SMTP_TIMEOUT,
        ) as server:
            if self.settings.SMTP_TLS:
                server.starttls()
            if self.settings.SMTP_USER and self.settings.SMTP_PASSWORD:
                server.login(self.settings.SMTP_USER, self.settings.SMTP_PASSWORD)
            server.send_message(mime, to_addrs=message.to)
