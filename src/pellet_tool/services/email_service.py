"""
Email Service - Order and call-back notifications over SMTP.

Formats contact form submissions into notification emails and delivers
them to the sales inbox configured in settings.
"""
import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from html import escape
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from ..config.settings import get_settings, Settings
from .errors import EmailDeliveryError

logger = logging.getLogger(__name__)

CALL_REASONS = {
    "pricing": "Did Justin Trudeau set your prices?",
    "impress": "Need more info to impress my boss",
    "commitment": "I like everything but I have commitment issues",
    "human": "I just want to talk to a human",
}

MESSAGE_MAX_LENGTH = 250


class ContactForm(BaseModel):
    """An order or call-back request submitted by a prospect."""
    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    email: EmailStr
    company: str = Field(min_length=1)
    address: str = Field(min_length=1)
    type: Literal["order", "call"]
    product: Optional[str] = None
    cost: Optional[str] = None
    call_reason: Optional[Literal["pricing", "impress", "commitment", "human"]] = None
    message: Optional[str] = Field(default=None, max_length=MESSAGE_MAX_LENGTH)

    @field_validator("name", "phone", "company", "address", "product", "cost")
    @classmethod
    def _single_line(cls, value: Optional[str]) -> Optional[str]:
        # These end up in mail headers and one-line summaries
        if value is not None and ("\r" in value or "\n" in value):
            raise ValueError("must be a single line")
        return value

    @model_validator(mode="after")
    def _call_needs_reason(self) -> 'ContactForm':
        if self.type == "call" and not self.call_reason:
            raise ValueError("Please select a reason for your call")
        return self


@dataclass
class OutgoingEmail:
    subject: str
    text: str
    html: str


def _contact_rows(form: ContactForm) -> list[tuple[str, str]]:
    return [
        ("Name", form.name),
        ("Company", form.company),
        ("Email", str(form.email)),
        ("Phone", form.phone),
        ("Address", form.address),
    ]


def _html_list(rows: list[tuple[str, str]]) -> str:
    items = "\n".join(f"    <li>{escape(k)}: {escape(v)}</li>" for k, v in rows)
    return f"<ul>\n{items}\n</ul>"


def format_order_email(form: ContactForm) -> OutgoingEmail:
    product = form.product or "N/A"
    cost = form.cost or "N/A"
    html = "\n".join([
        "<h2>New Order Request</h2>",
        "<p><strong>Customer Information:</strong></p>",
        _html_list(_contact_rows(form)),
        "<p><strong>Order Details:</strong></p>",
        _html_list([("Product Amount", f"{product} lbs"), ("Total Cost", f"${cost}")]),
    ])
    return OutgoingEmail(
        subject=f"New Pellet Order - {form.company}",
        text=(
            f"New order request from {form.name} at {form.company}. "
            f"Product: {product} lbs, Cost: ${cost}. "
            f"Contact: {form.phone}, {form.email}"
        ),
        html=html,
    )


def format_call_email(form: ContactForm) -> OutgoingEmail:
    reason = CALL_REASONS.get(form.call_reason or "", "Not given")
    details = [("Reason", reason)]
    if form.message:
        details.append(("Message", form.message))
    html = "\n".join([
        "<h2>New Call Request</h2>",
        "<p><strong>Contact Information:</strong></p>",
        _html_list(_contact_rows(form)),
        "<p><strong>Call Details:</strong></p>",
        _html_list(details),
    ])
    text = (
        f"New call request from {form.name} at {form.company}. "
        f"Reason: {reason}. Contact: {form.phone}, {form.email}"
    )
    if form.message:
        text += f"\nMessage: {form.message}"
    return OutgoingEmail(subject=f"Call Request - {form.company}", text=text, html=html)


def format_contact_email(form: ContactForm) -> OutgoingEmail:
    if form.type == "order":
        return format_order_email(form)
    return format_call_email(form)


class EmailService:
    """Sends notification emails through the configured SMTP relay."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    @property
    def configured(self) -> bool:
        return self.settings.email_configured

    def build_message(self, email: OutgoingEmail, reply_to: Optional[str] = None) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = email.subject
        msg["From"] = self.settings.smtp_from_email
        msg["To"] = self.settings.notify_email
        if reply_to:
            msg["Reply-To"] = reply_to
        msg.set_content(email.text)
        msg.add_alternative(email.html, subtype="html")
        return msg

    def send(self, email: OutgoingEmail, reply_to: Optional[str] = None):
        """
        Deliver ``email`` to the notification inbox.

        Raises:
            EmailDeliveryError: SMTP is not configured, the message has bad
                headers, or the relay refused
        """
        if not self.configured:
            raise EmailDeliveryError("Email is not configured (SMTP_HOST, SMTP_FROM_EMAIL, NOTIFY_EMAIL)")

        try:
            msg = self.build_message(email, reply_to=reply_to)
        except ValueError as e:
            logger.error("Could not build email '%s': %s", email.subject, e)
            raise EmailDeliveryError(f"Invalid email content: {e}") from e

        s = self.settings
        try:
            with smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=s.http_timeout) as server:
                if s.smtp_use_tls:
                    server.starttls()
                if s.smtp_username:
                    server.login(s.smtp_username, s.smtp_password or "")
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Error sending email '%s': %s", email.subject, e)
            raise EmailDeliveryError(f"Failed to send email: {e}") from e

        logger.info("Sent email '%s' to %s", email.subject, s.notify_email)

    def send_contact(self, form: ContactForm):
        self.send(format_contact_email(form), reply_to=str(form.email))
