"""Newsletter subscription management."""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from shutterconnect.api.middleware.error_handler import (
    BadRequestException,
    NotFoundException,
)
from shutterconnect.lib.logging import get_logger
from shutterconnect.models.newsletter import NewsletterSubscriber
from shutterconnect.services.email_service import EmailService, get_email_service

logger = get_logger(__name__)


class NewsletterService:
    """Subscribe, unsubscribe and re-subscribe email addresses."""

    def __init__(self, session: Session, email_service: Optional[EmailService] = None):
        self.session = session
        self.email_service = email_service or get_email_service()

    def get(self, email: str) -> Optional[NewsletterSubscriber]:
        return self.session.execute(
            select(NewsletterSubscriber).where(NewsletterSubscriber.email == email.lower())
        ).scalar_one_or_none()

    async def subscribe(self, email: str, source: str = "website") -> NewsletterSubscriber:
        """
        Subscribe an address, reactivating a previous subscription if there is one.

        The welcome email is best effort.

        Raises:
            BadRequestException: Already actively subscribed
        """
        email = email.lower()
        subscriber = self.get(email)

        if subscriber is not None:
            if subscriber.is_active:
                raise BadRequestException("Email is already subscribed to our newsletter")
            subscriber.is_active = True
            subscriber.subscribed_at = datetime.now(timezone.utc)
            subscriber.unsubscribed_at = None
            subscriber.source = source
        else:
            subscriber = NewsletterSubscriber(email=email, source=source, is_active=True)
            self.session.add(subscriber)

        self.session.commit()
        self.session.refresh(subscriber)
        logger.info("Newsletter subscription", extra={"email": email, "source": source})

        sent = await self.email_service.send_newsletter_welcome_email(email)
        if not sent:
            logger.warning(f"Newsletter welcome email to {email} failed")

        return subscriber

    def unsubscribe(self, email: str) -> NewsletterSubscriber:
        """
        Raises:
            NotFoundException: Address never subscribed
            BadRequestException: Already unsubscribed
        """
        subscriber = self.get(email)
        if subscriber is None:
            raise NotFoundException("Subscription")
        if not subscriber.is_active:
            raise BadRequestException("Email is already unsubscribed")

        subscriber.is_active = False
        subscriber.unsubscribed_at = datetime.now(timezone.utc)
        self.session.commit()
        logger.info("Newsletter unsubscribe", extra={"email": subscriber.email})
        return subscriber
