"""
Availability model - open slots declared by a photographer.
"""
from datetime import date as date_type
from uuid import uuid4, UUID

from sqlalchemy import String, Boolean, Date, ForeignKey, Uuid, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shutterconnect.lib.db import Base


class Availability(Base):
    """
    Availability entity - a [start_time, end_time) slot on a date.
    Times are zero-padded "HH:MM" strings.
    """
    __tablename__ = "availability"

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

    date: Mapped[date_type] = mapped_column(Date, nullable=False, index=True)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)

    is_booked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    photographer: Mapped["Photographer"] = relationship(back_populates="availability")  # noqa: F821

    __table_args__ = (
        CheckConstraint(
            "start_time < end_time",
            name="availability_start_before_end",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Availability(photographer_id={self.photographer_id}, date={self.date}, "
            f"{self.start_time}-{self.end_time}, booked={self.is_booked})>"
        )
