"""
SQLAlchemy models package.
Import all models here to ensure they're registered with Base.metadata.
"""
from shutterconnect.models.users import User, UserRole
from shutterconnect.models.photographers import Photographer, PhotoSessionType
from shutterconnect.models.packages import Package
from shutterconnect.models.availability import Availability
from shutterconnect.models.bookings import (
    Booking,
    BookingStatus,
    BookingPaymentStatus,
    ACTIVE_BOOKING_STATUSES,
)
from shutterconnect.models.payments import Payment, PaymentStatus
from shutterconnect.models.reviews import Review
from shutterconnect.models.notifications import Notification
from shutterconnect.models.tokens import VerificationToken, PasswordResetToken
from shutterconnect.models.newsletter import NewsletterSubscriber

__all__ = [
    "User",
    "UserRole",
    "Photographer",
    "PhotoSessionType",
    "Package",
    "Availability",
    "Booking",
    "BookingStatus",
    "BookingPaymentStatus",
    "ACTIVE_BOOKING_STATUSES",
    "Payment",
    "PaymentStatus",
    "Review",
    "Notification",
    "VerificationToken",
    "PasswordResetToken",
    "NewsletterSubscriber",
]
