"""
Booking service: create bookings with conflict detection, list a user's bookings.

Creating a booking is a check-then-insert. Both steps run in one
transaction that first takes an advisory lock on (photographer, date), so
two requests for the same photographer and day are serialized and the
second one sees the first one's row.
"""
from datetime import date as date_type
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from shutterconnect.api.middleware.error_handler import (
    BadRequestException,
    NotFoundException,
)
from shutterconnect.lib.locks import acquire_xact_lock
from shutterconnect.lib.logging import get_logger
from shutterconnect.lib.pagination import offset_for
from shutterconnect.models.availability import Availability
from shutterconnect.models.bookings import (
    ACTIVE_BOOKING_STATUSES,
    Booking,
    BookingPaymentStatus,
    BookingStatus,
)
from shutterconnect.models.packages import Package
from shutterconnect.models.photographers import Photographer, PhotoSessionType
from shutterconnect.models.users import User
from shutterconnect.services.booking_conflicts import find_conflict, ranges_overlap
from shutterconnect.services.notification_service import NotificationService

logger = get_logger(__name__)


def booking_lock_name(photographer_id: UUID, booking_date: date_type) -> str:
    return f"booking:{photographer_id}:{booking_date.isoformat()}"


def _minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


class BookingService:
    """Booking creation and listing."""

    def __init__(self, session: Session):
        self.session = session
        self.notifications = NotificationService(session)

    def active_bookings_on(self, photographer_id: UUID, booking_date: date_type) -> list[Booking]:
        """Bookings that still hold their slot for a photographer on a date."""
        stmt = select(Booking).where(
            Booking.photographer_id == photographer_id,
            Booking.date == booking_date,
            Booking.status.in_(ACTIVE_BOOKING_STATUSES),
        )
        return list(self.session.execute(stmt).scalars().all())

    def find_conflicting_booking(
        self,
        photographer_id: UUID,
        booking_date: date_type,
        start_time: str,
        end_time: str,
    ) -> Optional[Booking]:
        """First active booking overlapping [start_time, end_time), if any."""
        existing = self.active_bookings_on(photographer_id, booking_date)
        return find_conflict(start_time, end_time, existing)

    def create_booking(
        self,
        client: User,
        photographer_id: UUID,
        session_type: PhotoSessionType,
        booking_date: date_type,
        start_time: str,
        end_time: str,
        location: str,
        package_id: Optional[UUID] = None,
        notes: Optional[str] = None,
        total_amount: Optional[Decimal] = None,
    ) -> Booking:
        """
        Book a photographer for [start_time, end_time) on booking_date.

        When total_amount is omitted it defaults to the package price, or
        to the hourly rate times the session length.

        Raises:
            NotFoundException: Photographer does not exist
            BadRequestException: Photographer unavailable, package not theirs,
                or the slot overlaps an active booking
        """
        photographer = self.session.get(Photographer, photographer_id)
        if photographer is None:
            raise NotFoundException("Photographer", str(photographer_id))

        if not photographer.is_available:
            raise BadRequestException("Photographer is not available")

        package = None
        if package_id is not None:
            package = self.session.get(Package, package_id)
            if package is None or package.photographer_id != photographer.id:
                raise BadRequestException("Invalid package")

        if total_amount is None:
            if package is not None:
                total_amount = package.price
            else:
                hours = Decimal(_minutes(end_time) - _minutes(start_time)) / Decimal(60)
                total_amount = (photographer.hourly_rate or Decimal("0")) * hours
            total_amount = Decimal(total_amount).quantize(Decimal("0.01"))

        try:
            acquire_xact_lock(self.session, booking_lock_name(photographer.id, booking_date))

            conflict = self.find_conflicting_booking(
                photographer.id, booking_date, start_time, end_time
            )
            if conflict is not None:
                logger.info(
                    "Booking rejected: slot taken",
                    extra={
                        "photographer_id": str(photographer.id),
                        "date": booking_date.isoformat(),
                        "requested": f"{start_time}-{end_time}",
                        "conflicting_booking_id": str(conflict.id),
                    },
                )
                raise BadRequestException("Time slot is already booked")

            booking = Booking(
                client_id=client.id,
                photographer_id=photographer.id,
                package_id=package.id if package else None,
                session_type=session_type,
                date=booking_date,
                start_time=start_time,
                end_time=end_time,
                location=location,
                notes=notes,
                total_amount=total_amount,
                status=BookingStatus.PENDING,
                payment_status=BookingPaymentStatus.PENDING,
            )
            self.session.add(booking)
            self.session.flush()

            self._mark_slots_booked(photographer.id, booking_date, start_time, end_time)

            self.notifications.notify(
                user_id=photographer.user_id,
                title="New Booking Request",
                message=(
                    f"You have a new booking request from {client.full_name} "
                    f"for {session_type.value.lower().replace('_', ' ')} photography."
                ),
                type="booking",
                data={
                    "booking_id": str(booking.id),
                    "client_name": client.full_name,
                    "session_type": session_type.value,
                    "date": booking_date.isoformat(),
                    "location": location,
                },
            )

            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        self.session.refresh(booking)
        logger.info(
            "Booking created",
            extra={
                "booking_id": str(booking.id),
                "photographer_id": str(photographer.id),
                "client_id": str(client.id),
            },
        )
        return booking

    def _mark_slots_booked(
        self,
        photographer_id: UUID,
        booking_date: date_type,
        start_time: str,
        end_time: str,
    ) -> int:
        """Flag the photographer's open slots that overlap the booking."""
        slots = self.session.execute(
            select(Availability).where(
                Availability.photographer_id == photographer_id,
                Availability.date == booking_date,
                Availability.is_booked.is_(False),
            )
        ).scalars().all()

        marked = 0
        for slot in slots:
            if ranges_overlap(start_time, end_time, slot.start_time, slot.end_time):
                slot.is_booked = True
                marked += 1
        return marked

    def list_bookings(
        self,
        user: User,
        as_photographer: bool = False,
        status: Optional[BookingStatus] = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Booking], int]:
        """
        The caller's bookings, newest first.

        With as_photographer the bookings made with the caller's photographer
        profile are returned instead of the ones they made as a client.

        Returns:
            (page of bookings, total matching)
        """
        stmt = select(Booking)
        if as_photographer:
            stmt = stmt.join(Photographer, Booking.photographer_id == Photographer.id).where(
                Photographer.user_id == user.id
            )
        else:
            stmt = stmt.where(Booking.client_id == user.id)

        if status is not None:
            stmt = stmt.where(Booking.status == status)

        total = self.session.execute(
            select(func.count()).select_from(stmt.subquery())
        ).scalar_one()

        stmt = (
            stmt.options(
                selectinload(Booking.client),
                selectinload(Booking.photographer).selectinload(Photographer.user),
                selectinload(Booking.package),
                selectinload(Booking.review),
            )
            .order_by(Booking.created_at.desc())
            .offset(offset_for(page, limit))
            .limit(limit)
        )
        bookings = list(self.session.execute(stmt).scalars().all())
        return bookings, total
