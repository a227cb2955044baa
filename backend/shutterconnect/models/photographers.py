"""
Photographer model - extends User for service providers.
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import uuid4, UUID
import enum

from sqlalchemy import String, Integer, Numeric, Float, Boolean, DateTime, ForeignKey, Uuid, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shutterconnect.lib.db import Base, JSONType


class PhotoSessionType(str, enum.Enum):
    """Kinds of photo sessions a photographer offers and a client books."""
    WEDDING = "WEDDING"
    PORTRAIT = "PORTRAIT"
    EVENT = "EVENT"
    CORPORATE = "CORPORATE"
    FASHION = "FASHION"
    LANDSCAPE = "LANDSCAPE"
    PRODUCT = "PRODUCT"
    REAL_ESTATE = "REAL_ESTATE"
    FAMILY = "FAMILY"
    NEWBORN = "NEWBORN"
    SPORTS = "SPORTS"
    HEADSHOTS = "HEADSHOTS"
    OTHER = "OTHER"


class Photographer(Base):
    """
    Photographer entity - public profile of a photographer (1:1 with User).
    """
    __tablename__ = "photographers"

    # Primary key
    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
    )

    user_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    # Profile
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    experience: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Years of experience",
    )
    hourly_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)

    # Location and service radius
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    radius: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Travel radius in km",
    )

    # Offerings (lists of strings)
    specialties: Mapped[list[str]] = mapped_column(
        JSONType,
        nullable=False,
        default=list,
        comment="PhotoSessionType values",
    )
    equipment: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    languages: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    portfolio: Mapped[list[str]] = mapped_column(
        JSONType,
        nullable=False,
        default=list,
        comment="Image URLs",
    )

    # Status and aggregates
    is_available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    rating: Mapped[Decimal] = mapped_column(Numeric(3, 2), nullable=False, default=0)
    total_reviews: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_bookings: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

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

    user: Mapped["User"] = relationship(back_populates="photographer")  # noqa: F821
    packages: Mapped[list["Package"]] = relationship(  # noqa: F821
        back_populates="photographer",
        cascade="all, delete",
        order_by="Package.price",
    )
    availability: Mapped[list["Availability"]] = relationship(  # noqa: F821
        back_populates="photographer",
        cascade="all, delete",
        order_by="Availability.date",
    )

    def __repr__(self) -> str:
        return f"<Photographer(id={self.id}, user_id={self.user_id}, rating={self.rating})>"
