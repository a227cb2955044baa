"""
Booking model - photo sessions booked by clients with photographers.
"""
from datetime import date as date_type, datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import uuid4, UUID
import enum

from sqlalchemy import (
    String,
    Text,
    Numeric,
    Date,
    DateTime,
    ForeignKey,
    Uuid,
    Enum as SQLEnum,
    CheckConstraint,
    Index,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shutterconnect.lib.db import Base
from shutterconnect.models.photographers import PhotoSessionType


class BookingStatus(str, enum.Enum):
    """Booking status state machine."""
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# Bookings in these states hold their time slot
ACTIVE_BOOKING_STATUSES = (
    BookingStatus.PENDING,
    BookingStatus.CONFIRMED,
    BookingStatus.IN_PROGRESS,
)


class BookingPaymentStatus(str, enum.Enum):
    """Payment status of a booking."""
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class Booking(Base):
    """
    Booking entity - a reserved [start_time, end_time) slot on a date.
    State machine: PENDING → CONFIRMED → IN_PROGRESS → COMPLETED (or CANCELLED).
    """
    __tablename__ = "bookings"

    # Primary key
    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
    )

    # Relationships
    client_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    photographer_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("photographers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    package_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid,
        ForeignKey("packages.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    session_type: Mapped[PhotoSessionType] = mapped_column(
        SQLEnum(PhotoSessionType, name="photo_session_type"),
        nullable=False,
    )

    # Timing ("HH:MM", zero-padded 24h)
    date: Mapped[date_type] = mapped_column(Date, nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)

    location: Mapped[str] = mapped_column(String(255), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Status
    status: Mapped[BookingStatus] = mapped_column(
        SQLEnum(BookingStatus, name="booking_status"),
        nullable=False,
        default=BookingStatus.PENDING,
        index=True,
    )

    # Payment
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    payment_status: Mapped[BookingPaymentStatus] = mapped_column(
        SQLEnum(BookingPaymentStatus, name="booking_payment_status"),
        nullable=False,
        default=BookingPaymentStatus.PENDING,
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    client: Mapped["User"] = relationship(foreign_keys=[client_id])  # noqa: F821
    photographer: Mapped["Photographer"] = relationship()  # noqa: F821
    package: Mapped[Optional["Package"]] = relationship()  # noqa: F821
    review: Mapped[Optional["Review"]] = relationship(  # noqa: F821
        back_populates="booking",
        uselist=False,
    )

    __table_args__ = (
        CheckConstraint(
            "start_time < end_time",
            name="booking_start_before_end",
        ),
        Index("ix_bookings_photographer_date", "photographer_id", "date"),
    )

    def __repr__(self) -> str:
        return (
            f"<Booking(id={self.id}, status={self.status}, date={self.date}, "
            f"{self.start_time}-{self.end_time})>"
        )
