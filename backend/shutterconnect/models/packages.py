"""
Package model - priced, fixed-scope offerings by a photographer.
"""
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4, UUID

from sqlalchemy import String, Integer, Numeric, Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shutterconnect.lib.db import Base, JSONType


class Package(Base):
    """
    Package entity - a photographer's priced offering.
    """
    __tablename__ = "packages"

    # Primary key
    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
    )

    photographer_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("photographers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Package details
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    duration: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Duration in minutes",
    )
    deliverables: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)

    # Status
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

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

    photographer: Mapped["Photographer"] = relationship(back_populates="packages")  # noqa: F821

    def __repr__(self) -> str:
        return f"<Package(id={self.id}, name={self.name}, price={self.price})>"
