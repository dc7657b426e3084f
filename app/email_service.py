"""
Customer e-mail delivery through Resend.
Templates are written in MJML and compiled to HTML before sending.
"""

import logging
from typing import Optional, Union

import resend
from mjml import mjml_to_html

from .config import EMAIL_FROM_ADDRESS, FRONTEND_URL, RESEND_API_KEY
from .email_templates import table_available_template, waitlist_joined_template

logger = logging.getLogger(__name__)

resend.api_key = RESEND_API_KEY

DISPLAY_FORMAT = "%Y-%m-%d %H:%M"


class EmailNotConfiguredError(RuntimeError):
    """Raised when an e-mail is sent without RESEND_API_KEY"""


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(mjml_content)
    except Exception as e:
        logger.error(f"❌ MJML compilation error: {e}")
        raise RuntimeError(f"Failed to compile MJML template: {str(e)}") from e

    errors = result.get("errors") if isinstance(result, dict) else getattr(result, "errors", None)
    if errors:
        logger.warning(f"⚠️ MJML compilation warnings: {errors}")
    if isinstance(result, dict):
        return result.get("html", "")
    return getattr(result, "html", str(result))


def send_email(
    to: Union[str, list[str]],
    subject: str,
    mjml_content: str,
    from_address: Optional[str] = None,
) -> dict:
    """
    Send an e-mail with Resend

    Args:
        to: Recipient email(s)
        subject: Email subject line
        mjml_content: MJML template content (compiled to HTML here)
        from_address: Optional custom from address

    Raises:
        EmailNotConfiguredError: RESEND_API_KEY is not set
    """
    if not RESEND_API_KEY:
        raise EmailNotConfiguredError("Email service not configured")

    recipients = [to] if isinstance(to, str) else to
    email_data = {
        "from": from_address or EMAIL_FROM_ADDRESS,
        "to": recipients,
        "subject": subject,
        "html": compile_mjml_to_html(mjml_content),
    }

    logger.info(f"📧 Sending email via Resend to: {recipients}")
    response = resend.Emails.send(email_data)
    logger.info(f"✅ Email sent successfully via Resend: {response}")
    return response


def send_customer_email_safely(to: Optional[str], subject: str, mjml_content: str) -> bool:
    """
    Send a customer e-mail without ever failing the caller.

    Returns True when the e-mail was handed to Resend.
    """
    if not to:
        return False
    if not RESEND_API_KEY:
        logger.info(f"📭 RESEND_API_KEY not set, skipping e-mail '{subject}' to {to}")
        return False

    try:
        send_email(to=to, subject=subject, mjml_content=mjml_content)
        return True
    except Exception as e:
        logger.error(f"❌ Failed to send e-mail '{subject}' to {to}: {e}")
        return False


# ============================================
# Waitlist e-mails
# ============================================


def send_waitlist_joined_email(entry, branch_name: str, estimated_wait: str) -> bool:
    mjml_content = waitlist_joined_template(
        customer_name=entry.customer_name,
        branch_name=branch_name,
        preferred_time=entry.preferred_start_time.strftime(DISPLAY_FORMAT),
        guest_count=entry.guest_count,
        estimated_wait=estimated_wait,
        expires_at=entry.expires_at.strftime(DISPLAY_FORMAT),
    )
    return send_customer_email_safely(
        entry.customer_email, f"You're on the waitlist at {branch_name}", mjml_content
    )


def send_table_available_email(entry, booking, branch_name: str, table_name: str) -> bool:
    mjml_content = table_available_template(
        customer_name=entry.customer_name,
        branch_name=branch_name,
        table_name=table_name,
        time_start=booking.time_start.strftime(DISPLAY_FORMAT),
        time_end=booking.time_end.strftime(DISPLAY_FORMAT),
        total_deposit=booking.total_deposit or 0,
        payment_deadline=booking.expire_time.strftime(DISPLAY_FORMAT) if booking.expire_time else "-",
        payment_url=f"{FRONTEND_URL}/booking/payment/{booking.id}",
    )
    return send_customer_email_safely(
        entry.customer_email, f"Your table at {branch_name} is ready", mjml_content
    )
