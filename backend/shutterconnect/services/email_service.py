"""Email delivery with console and SMTP adapters.

The console provider logs messages instead of sending them and is the
default for development and tests. SMTP delivery uses the standard
library client against the configured server.
"""
import smtplib
from abc import ABC, abstractmethod
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from shutterconnect.lib.logging import get_logger
from shutterconnect.lib.settings import settings
from shutterconnect.services import email_templates
from shutterconnect.services.email_templates import EmailContent

logger = get_logger(__name__)


class EmailProvider(ABC):
    """Abstract base class for email delivery providers."""

    @abstractmethod
    async def send(self, to: str, content: EmailContent) -> bool:
        """Send a message.

        Returns:
            True if sent successfully, False otherwise
        """


class ConsoleEmailProvider(EmailProvider):
    """Logs emails instead of sending them."""

    def __init__(self):
        self.outbox: list[tuple[str, EmailContent]] = []

    async def send(self, to: str, content: EmailContent) -> bool:
        self.outbox.append((to, content))
        logger.info(
            f"Email to {to}: {content.subject}",
            extra={"email_to": to, "email_body": content.text},
        )
        return True


class SmtpEmailProvider(EmailProvider):
    """SMTP provider.

    Requires SMTP_USERNAME and SMTP_PASSWORD. Port 465 uses implicit TLS,
    anything else uses STARTTLS.
    """

    def __init__(self):
        if not settings.smtp_username or not settings.smtp_password:
            raise ValueError(
                "SMTP credentials not configured. "
                "Set SMTP_USERNAME and SMTP_PASSWORD environment variables."
            )

        self.smtp_host = settings.smtp_host
        self.smtp_port = settings.smtp_port
        self.smtp_username = settings.smtp_username
        self.smtp_password = settings.smtp_password
        self.from_email = settings.smtp_from_email or settings.smtp_username
        self.from_name = settings.smtp_from_name

    def _build_message(self, to: str, content: EmailContent) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = content.subject
        msg["From"] = f"{self.from_name} <{self.from_email}>"
        msg["To"] = to
        msg.attach(MIMEText(content.text, "plain"))
        msg.attach(MIMEText(content.html, "html"))
        return msg

    async def send(self, to: str, content: EmailContent) -> bool:
        msg = self._build_message(to, content)
        try:
            if self.smtp_port == 465:
                with smtplib.SMTP_SSL(self.smtp_host, self.smtp_port) as server:
                    server.login(self.smtp_username, self.smtp_password)
                    server.send_message(msg)
            else:
                with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                    server.starttls()
                    server.login(self.smtp_username, self.smtp_password)
                    server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Email send failed to {to}: {e}")
            return False

        logger.info(f"Email sent to {to}: {content.subject}")
        return True


class EmailService:
    """Sends the application's transactional emails through a provider."""

    def __init__(self, provider: Optional[EmailProvider] = None):
        self.provider = provider or self._get_provider()

    def _get_provider(self) -> EmailProvider:
        """Get email provider based on configuration."""
        provider_name = settings.email_provider.lower()

        if provider_name == "console":
            return ConsoleEmailProvider()
        elif provider_name == "smtp":
            return SmtpEmailProvider()
        else:
            raise ValueError(
                f"Unknown email provider: {provider_name}. "
                f"Valid options: console, smtp"
            )

    async def send_verification_email(self, email: str, token: str, first_name: str) -> bool:
        return await self.provider.send(
            email, email_templates.verification_email(first_name, token)
        )

    async def send_password_reset_email(self, email: str, token: str, first_name: str) -> bool:
        return await self.provider.send(
            email, email_templates.password_reset_email(first_name, token)
        )

    async def send_newsletter_welcome_email(self, email: str) -> bool:
        return await self.provider.send(
            email, email_templates.newsletter_welcome_email(email)
        )


_email_service: Optional[EmailService] = None


def get_email_service() -> EmailService:
    """Get the process-wide email service (FastAPI dependency)."""
    global _email_service
    if _email_service is None:
        _email_service = EmailService()
    return _email_service
