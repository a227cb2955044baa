"""
Review model - client feedback on completed bookings.
"""
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4, UUID

from sqlalchemy import Text, Integer, DateTime, ForeignKey, Uuid, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shutterconnect.lib.db import Base


class Review(Base):
    """
    Review entity - client rating and comment (1:1 with Booking).
    """
    __tablename__ = "reviews"

    # Primary key
    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
    )

    # One review per booking
    booking_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("bookings.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    client_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    photographer_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("photographers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Rating (1-5 scale)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    booking: Mapped["Booking"] = relationship(back_populates="review")  # noqa: F821
    client: Mapped["User"] = relationship()  # noqa: F821

    __table_args__ = (
        CheckConstraint(
            "rating >= 1 AND rating <= 5",
            name="review_rating_range",
        ),
    )

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, booking_id={self.booking_id}, rating={self.rating})>"
