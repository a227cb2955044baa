"""
Open time slots a photographer declares for clients to book into.
"""
from datetime import date as date_type, datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from shutterconnect.api.middleware.error_handler import (
    BadRequestException,
    NotFoundException,
)
from shutterconnect.lib.locks import acquire_xact_lock
from shutterconnect.lib.logging import get_logger
from shutterconnect.models.availability import Availability
from shutterconnect.models.photographers import Photographer
from shutterconnect.services.booking_conflicts import find_conflict

logger = get_logger(__name__)


def availability_lock_name(photographer_id: UUID, slot_date: date_type) -> str:
    return f"availability:{photographer_id}:{slot_date.isoformat()}"


class AvailabilityService:
    """Manage one photographer's availability slots."""

    def __init__(self, session: Session, photographer: Photographer):
        self.session = session
        self.photographer = photographer

    def list_slots(
        self,
        from_date: Optional[date_type] = None,
        to_date: Optional[date_type] = None,
    ) -> list[Availability]:
        """Slots ordered by date and start, from today by default."""
        if from_date is None:
            from_date = datetime.now(timezone.utc).date()

        stmt = select(Availability).where(
            Availability.photographer_id == self.photographer.id,
            Availability.date >= from_date,
        )
        if to_date is not None:
            stmt = stmt.where(Availability.date <= to_date)

        stmt = stmt.order_by(Availability.date, Availability.start_time)
        return list(self.session.execute(stmt).scalars().all())

    def add(self, slot_date: date_type, start_time: str, end_time: str) -> Availability:
        """
        Declare [start_time, end_time) open on slot_date.

        Raises:
            BadRequestException: Overlaps a slot already declared that day
        """
        try:
            acquire_xact_lock(self.session, availability_lock_name(self.photographer.id, slot_date))

            existing = self.session.execute(
                select(Availability).where(
                    Availability.photographer_id == self.photographer.id,
                    Availability.date == slot_date,
                )
            ).scalars().all()

            if find_conflict(start_time, end_time, existing) is not None:
                raise BadRequestException("Availability slot overlaps an existing slot")

            slot = Availability(
                photographer_id=self.photographer.id,
                date=slot_date,
                start_time=start_time,
                end_time=end_time,
                is_booked=False,
            )
            self.session.add(slot)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        self.session.refresh(slot)
        return slot

    def remove(self, slot_id: UUID) -> None:
        """
        Raises:
            NotFoundException: Not this photographer's slot
            BadRequestException: The slot is already booked
        """
        slot = self.session.get(Availability, slot_id)
        if slot is None or slot.photographer_id != self.photographer.id:
            raise NotFoundException("Availability slot", str(slot_id))
        if slot.is_booked:
            raise BadRequestException("Cannot remove a booked availability slot")

        self.session.delete(slot)
        self.session.commit()
