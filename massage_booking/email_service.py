"""
Unified Email Service using custom SMTP or Resend (fallback)
Provides booking notifications using MJML templates for responsive design
"""

import logging
import smtplib
import ssl
from datetime import datetime, timezone
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Union

import resend
from mjml import mjml_to_html
from pydantic import BaseModel
from sqlalchemy.orm import Session

from .config import (
    EMAIL_ENABLED,
    EMAIL_FROM_ADDRESS,
    RESEND_API_KEY,
    SMTP_HOST,
    SMTP_PASSWORD,
    SMTP_PORT,
    SMTP_USE_TLS,
    SMTP_USERNAME,
)
from .email_templates import (
    admin_notification_template,
    booking_cancellation_template,
    booking_confirmation_template,
)
from .models import User, UserRole
from .shared.validators import to_business_time

logger = logging.getLogger(__name__)

# Initialize Resend as fallback
resend.api_key = RESEND_API_KEY

FRENCH_DAYS = ["lundi", "mardi", "mercredi", "jeudi", "vendredi", "samedi", "dimanche"]
FRENCH_MONTHS = [
    "janvier",
    "février",
    "mars",
    "avril",
    "mai",
    "juin",
    "juillet",
    "août",
    "septembre",
    "octobre",
    "novembre",
    "décembre",
]


def format_french_date(value: datetime) -> tuple[str, str]:
    """
    Format a stored UTC datetime for French readers in the business timezone.

    Returns:
        (date, time) such as ("lundi 25 août 2025", "16:00")
    """
    local = to_business_time(value)
    date_label = (
        f"{FRENCH_DAYS[local.weekday()]} {local.day} {FRENCH_MONTHS[local.month - 1]} {local.year}"
    )
    return date_label, local.strftime("%H:%M")


def send_via_smtp(
    to: Union[str, list[str]],
    subject: str,
    html_content: str,
    from_address: str,
) -> dict:
    """Send email via the configured SMTP server"""
    try:
        msg = MIMEMultipart("mixed")
        msg["Subject"] = subject
        msg["From"] = from_address
        msg["To"] = to if isinstance(to, str) else ", ".join(to)
        msg.attach(MIMEText(html_content, "html"))

        recipients = [to] if isinstance(to, str) else to

        if SMTP_PORT == 465:
            context = ssl.create_default_context()
            server = smtplib.SMTP_SSL(SMTP_HOST, SMTP_PORT, context=context, timeout=30)
        else:
            server = smtplib.SMTP(SMTP_HOST, SMTP_PORT, timeout=30)
            if SMTP_USE_TLS:
                context = ssl.create_default_context()
                server.starttls(context=context)

        if SMTP_USERNAME:
            server.login(SMTP_USERNAME, SMTP_PASSWORD or "")
        server.sendmail(from_address.split("<")[-1].rstrip(">"), recipients, msg.as_string())
        server.quit()

        logger.info(f"✅ SMTP email sent successfully via {SMTP_HOST}")
        return {"id": f"smtp-{datetime.now(timezone.utc).timestamp()}", "success": True}

    except Exception as e:
        logger.error(f"❌ SMTP send failed: {e}")
        raise Exception(f"SMTP failed: {str(e)}") from e


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(mjml_content)
        # mjml_to_html returns a dict with 'html' and 'errors' keys
        if isinstance(result, dict):
            if result.get("errors"):
                logger.warning(f"MJML compilation warnings: {result['errors']}")
            return result.get("html", "")
        return str(result)
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise Exception(f"Failed to compile MJML template: {str(e)}") from e


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    mjml_content: str,
    from_address: Optional[str] = None,
) -> dict:
    """
    Send an email using SMTP (if configured) or Resend (fallback)

    Args:
        to: Recipient email(s)
        subject: Email subject line
        mjml_content: MJML template content (will be compiled to HTML)
        from_address: Optional custom from address

    Returns:
        Send response dict
    """
    recipients = [to] if isinstance(to, str) else to

    if not EMAIL_ENABLED:
        logger.info(f"📭 Email disabled, skipping '{subject}' to {recipients}")
        return {"id": None, "skipped": True}

    html_content = compile_mjml_to_html(mjml_content)
    sender = from_address or EMAIL_FROM_ADDRESS

    if SMTP_HOST:
        try:
            logger.info(f"📧 Sending email via SMTP: {SMTP_HOST}")
            return send_via_smtp(
                to=recipients,
                subject=subject,
                html_content=html_content,
                from_address=sender,
            )
        except Exception as e:
            logger.warning(f"⚠️ SMTP failed, falling back to Resend: {e}")

    if not RESEND_API_KEY:
        logger.error("❌ No email service configured - RESEND_API_KEY missing and no SMTP")
        raise Exception("Email service not configured")

    try:
        logger.info(f"📧 Sending email via Resend to: {recipients}")
        response = resend.Emails.send(
            {
                "from": sender,
                "to": recipients,
                "subject": subject,
                "html": html_content,
            }
        )
        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return response
    except Exception as e:
        logger.error(f"❌ Email send error to {recipients}: {e}")
        raise Exception(f"Failed to send email: {str(e)}") from e


# ============================================
# Booking notifications
# ============================================


class BookingDetails(BaseModel):
    """Denormalized booking data needed by every booking email"""

    client_firstname: str
    client_name: str = ""
    client_email: str
    client_phone: Optional[str] = None
    massage_name: str
    massage_duration: int
    massage_price: float
    start_time: datetime
    end_time: datetime
    notes: Optional[str] = None

    @property
    def client_full_name(self) -> str:
        return f"{self.client_firstname} {self.client_name}".strip()


class NotificationDispatcher:
    """Sends booking emails; every method raises on failure and callers decide what to absorb"""

    def __init__(self, db: Session):
        self.db = db

    def get_admin_emails(self) -> list[str]:
        """Emails of every ADMIN user, empty on lookup failure"""
        try:
            rows = self.db.query(User.email).filter(User.role == UserRole.ADMIN.value).all()
            emails = [row[0] for row in rows]
            logger.info(f"{len(emails)} administrator(s) found for notifications")
            return emails
        except Exception as e:
            logger.error(f"❌ Failed to load administrator emails: {e}")
            return []

    async def send_booking_confirmation(self, details: BookingDetails) -> dict:
        booking_date, booking_time = format_french_date(details.start_time)
        mjml_content = booking_confirmation_template(
            client_name=details.client_full_name,
            massage_name=details.massage_name,
            booking_date=booking_date,
            booking_time=booking_time,
            duration_minutes=details.massage_duration,
            price=details.massage_price,
        )
        response = await send_email(
            to=details.client_email,
            subject=f"Confirmation de votre rendez-vous - {details.massage_name}",
            mjml_content=mjml_content,
        )
        logger.info(f"Confirmation email sent to {details.client_email}")
        return response

    async def send_booking_cancellation(self, details: BookingDetails) -> dict:
        booking_date, booking_time = format_french_date(details.start_time)
        mjml_content = booking_cancellation_template(
            client_name=details.client_full_name,
            massage_name=details.massage_name,
            booking_date=booking_date,
            booking_time=booking_time,
            duration_minutes=details.massage_duration,
            price=details.massage_price,
        )
        response = await send_email(
            to=details.client_email,
            subject=f"Annulation de votre rendez-vous - {details.massage_name}",
            mjml_content=mjml_content,
        )
        logger.info(f"Cancellation email sent to {details.client_email}")
        return response

    async def notify_admins(self, details: BookingDetails) -> Optional[dict]:
        """Send one batch email to every administrator, None when there is nobody to notify"""
        admin_emails = self.get_admin_emails()
        if not admin_emails:
            logger.warning("⚠️ No administrator found for booking notifications")
            return None

        booking_date, booking_time = format_french_date(details.start_time)
        mjml_content = admin_notification_template(
            client_name=details.client_full_name,
            client_email=details.client_email,
            client_phone=details.client_phone,
            massage_name=details.massage_name,
            booking_date=booking_date,
            booking_time=booking_time,
            duration_minutes=details.massage_duration,
            price=details.massage_price,
            notes=details.notes,
        )
        response = await send_email(
            to=admin_emails,
            subject=f"Nouvelle réservation - {details.massage_name}",
            mjml_content=mjml_content,
        )
        logger.info(f"Notification sent to {len(admin_emails)} administrator(s)")
        return response
