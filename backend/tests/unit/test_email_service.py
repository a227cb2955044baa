"""
Tests for email providers and templates.
"""
import smtplib
from unittest.mock import MagicMock, patch

import pytest

from shutterconnect.lib.settings import settings
from shutterconnect.services import email_templates
from shutterconnect.services.email_service import (
    ConsoleEmailProvider,
    EmailService,
    SmtpEmailProvider,
)


@pytest.mark.unit
def test_verification_email_contains_link():
    content = email_templates.verification_email("Ana", "abc123")

    assert "Verify" in content.subject
    assert f"{settings.app_base_url}/auth/verify-email?token=abc123" in content.text
    assert "abc123" in content.html
    assert "24 hours" in content.text


@pytest.mark.unit
def test_password_reset_email_contains_link():
    content = email_templates.password_reset_email("Ana", "xyz789")

    assert f"{settings.app_base_url}/auth/reset-password?token=xyz789" in content.text
    assert "60 minutes" in content.text


@pytest.mark.unit
def test_templates_escape_html():
    content = email_templates.verification_email("<script>", "t")

    assert "<script>" not in content.html
    assert "&lt;script&gt;" in content.html


@pytest.mark.unit
def test_newsletter_welcome_links_unsubscribe():
    content = email_templates.newsletter_welcome_email("ana@example.com")

    assert "unsubscribe" in content.text.lower()


@pytest.mark.asyncio
async def test_console_provider_records_outbox():
    provider = ConsoleEmailProvider()
    service = EmailService(provider)

    sent = await service.send_verification_email("ana@example.com", "tok", "Ana")

    assert sent is True
    assert len(provider.outbox) == 1
    to, content = provider.outbox[0]
    assert to == "ana@example.com"
    assert "tok" in content.text


@pytest.mark.unit
def test_default_provider_from_settings():
    service = EmailService()

    assert isinstance(service.provider, ConsoleEmailProvider)


@pytest.mark.unit
def test_unknown_provider_rejected():
    with patch.object(settings, "email_provider", "pigeon"):
        with pytest.raises(ValueError, match="Unknown email provider"):
            EmailService()


@pytest.mark.unit
def test_smtp_requires_credentials():
    with patch.object(settings, "smtp_username", ""), patch.object(settings, "smtp_password", ""):
        with pytest.raises(ValueError, match="SMTP credentials not configured"):
            SmtpEmailProvider()


@pytest.fixture
def smtp_settings():
    with patch.object(settings, "smtp_username", "mailer@example.com"), \
            patch.object(settings, "smtp_password", "secret"), \
            patch.object(settings, "smtp_port", 587):
        yield


@pytest.mark.asyncio
async def test_smtp_send_uses_starttls(smtp_settings):
    provider = SmtpEmailProvider()
    content = email_templates.password_reset_email("Ana", "tok")

    with patch("shutterconnect.services.email_service.smtplib.SMTP") as mock_smtp:
        server = MagicMock()
        mock_smtp.return_value.__enter__.return_value = server

        sent = await provider.send("ana@example.com", content)

    assert sent is True
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("mailer@example.com", "secret")
    message = server.send_message.call_args[0][0]
    assert message["To"] == "ana@example.com"
    assert message["Subject"] == content.subject


@pytest.mark.asyncio
async def test_smtp_failure_returns_false(smtp_settings):
    provider = SmtpEmailProvider()
    content = email_templates.password_reset_email("Ana", "tok")

    with patch("shutterconnect.services.email_service.smtplib.SMTP") as mock_smtp:
        mock_smtp.return_value.__enter__.side_effect = smtplib.SMTPConnectError(421, "busy")

        sent = await provider.send("ana@example.com", content)

    assert sent is False
