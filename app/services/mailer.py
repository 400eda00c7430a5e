"""Outgoing email over SMTP.

Sending is skipped (with a log line) when SMTP_HOST isn't configured, so local
development works without a mail server.
"""

import asyncio
import logging
import smtplib
from email.message import EmailMessage

from app.core.config import settings

logger = logging.getLogger(__name__)


def _deliver(msg: EmailMessage) -> None:
    with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=settings.smtp_timeout_seconds) as server:
        if settings.smtp_use_tls:
            server.starttls()
        if settings.smtp_username:
            server.login(settings.smtp_username, settings.smtp_password)
        server.send_message(msg)


def build_password_reset_message(to_email: str, reset_url: str) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = "Reset your password"
    msg["From"] = settings.smtp_from
    msg["To"] = to_email
    msg.set_content(
        "Somebody (hopefully you) asked to reset the password for this account.\n\n"
        f"Follow this link to choose a new password:\n{reset_url}\n\n"
        f"The link expires in {settings.password_reset_token_expire_minutes} minutes. "
        "If you didn't ask for this, you can ignore this email."
    )
    return msg


async def send_password_reset_email(to_email: str, reset_url: str) -> None:
    if not settings.smtp_host:
        logger.info("SMTP not configured, skipping password reset email to %s", to_email)
        return

    msg = build_password_reset_message(to_email, reset_url)
    await asyncio.to_thread(_deliver, msg)
    logger.info("Password reset email sent to %s", to_email)
