"""Tests for password reset email delivery."""

from unittest.mock import MagicMock, patch

import pytest

from app.core.config import settings
from app.services.mailer import build_password_reset_message, send_password_reset_email


def test_build_password_reset_message():
    msg = build_password_reset_message("a@b.com", "http://localhost:3000/reset-password?token=abc")
    assert msg["To"] == "a@b.com"
    assert msg["From"] == settings.smtp_from
    assert "token=abc" in msg.get_content()


@pytest.mark.asyncio
async def test_send_skipped_without_smtp_host(monkeypatch):
    monkeypatch.setattr(settings, "smtp_host", "")
    with patch("app.services.mailer.smtplib.SMTP") as smtp:
        await send_password_reset_email("a@b.com", "http://x/reset-password?token=abc")
    smtp.assert_not_called()


@pytest.mark.asyncio
async def test_send_over_smtp(monkeypatch):
    monkeypatch.setattr(settings, "smtp_host", "mail.example.com")
    monkeypatch.setattr(settings, "smtp_username", "mailer")
    monkeypatch.setattr(settings, "smtp_password", "hunter2")
    monkeypatch.setattr(settings, "smtp_use_tls", True)

    server = MagicMock()
    with patch("app.services.mailer.smtplib.SMTP") as smtp:
        smtp.return_value.__enter__.return_value = server
        await send_password_reset_email("a@b.com", "http://x/reset-password?token=abc")

    smtp.assert_called_once_with("mail.example.com", settings.smtp_port, timeout=settings.smtp_timeout_seconds)
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("mailer", "hunter2")
    sent = server.send_message.call_args.args[0]
    assert sent["To"] == "a@b.com"
