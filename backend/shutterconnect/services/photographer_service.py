"""
Photographer directory and profile management.

Public search and detail views only show photographers that are available
and whose account is an active, verified PHOTOGRAPHER.
"""
from dataclasses import dataclass, field
from datetime import date as date_type, datetime, timezone
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.orm import Session, selectinload

from shutterconnect.api.middleware.error_handler import (
    BadRequestException,
    NotFoundException,
)
from shutterconnect.lib.logging import get_logger
from shutterconnect.lib.pagination import offset_for
from shutterconnect.models.availability import Availability
from shutterconnect.models.bookings import Booking, BookingStatus
from shutterconnect.models.photographers import Photographer, PhotoSessionType
from shutterconnect.models.reviews import Review
from shutterconnect.models.users import User, UserRole

logger = get_logger(__name__)

LISTING_PACKAGE_LIMIT = 3
DETAIL_AVAILABILITY_LIMIT = 30
DETAIL_REVIEW_LIMIT = 10

LIKE_ESCAPE = "\\"

PROFILE_FIELDS = (
    "bio",
    "experience",
    "hourly_rate",
    "location",
    "latitude",
    "longitude",
    "radius",
    "specialties",
    "equipment",
    "languages",
    "portfolio",
)


def contains_pattern(term: str) -> str:
    """ILIKE pattern matching `term` literally anywhere in the column."""
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


@dataclass
class PhotographerSearch:
    """Filters for the public photographer listing."""
    specialty: Optional[PhotoSessionType] = None
    location: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    min_rating: Optional[Decimal] = None
    search: Optional[str] = None


@dataclass
class PhotographerDetail:
    """Everything the public profile page shows."""
    photographer: Photographer
    packages: list = field(default_factory=list)
    availability: list[Availability] = field(default_factory=list)
    booked_windows: list[Booking] = field(default_factory=list)
    reviews: list[Review] = field(default_factory=list)


def _today() -> date_type:
    return datetime.now(timezone.utc).date()


class PhotographerService:
    """Photographer search, public profiles, and profile upkeep."""

    def __init__(self, session: Session):
        self.session = session

    @staticmethod
    def _listable():
        return (
            select(Photographer)
            .join(User, Photographer.user_id == User.id)
            .where(
                Photographer.is_available.is_(True),
                User.is_active.is_(True),
                User.is_verified.is_(True),
                User.role == UserRole.PHOTOGRAPHER,
            )
        )

    def search(
        self,
        filters: PhotographerSearch,
        page: int = 1,
        limit: int = 12,
    ) -> tuple[list[Photographer], int, dict[UUID, int]]:
        """
        Paginated photographer listing.

        Returns:
            (page of photographers, total matching, booking count per photographer id)
        """
        stmt = self._listable()

        if filters.specialty is not None:
            # JSON list column; match the quoted element so "EVENT" never hits "EVENTS"
            stmt = stmt.where(
                cast(Photographer.specialties, String).like(f'%"{filters.specialty.value}"%')
            )

        for term in (filters.location, filters.state, filters.city):
            if term:
                stmt = stmt.where(
                    Photographer.location.ilike(contains_pattern(term), escape=LIKE_ESCAPE)
                )

        if filters.min_price is not None:
            stmt = stmt.where(Photographer.hourly_rate >= filters.min_price)
        if filters.max_price is not None:
            stmt = stmt.where(Photographer.hourly_rate <= filters.max_price)
        if filters.min_rating is not None:
            stmt = stmt.where(Photographer.rating >= filters.min_rating)

        if filters.search:
            pattern = contains_pattern(filters.search)
            stmt = stmt.where(
                or_(
                    User.first_name.ilike(pattern, escape=LIKE_ESCAPE),
                    User.last_name.ilike(pattern, escape=LIKE_ESCAPE),
                    Photographer.bio.ilike(pattern, escape=LIKE_ESCAPE),
                    Photographer.location.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )

        total = self.session.execute(
            select(func.count()).select_from(stmt.subquery())
        ).scalar_one()

        stmt = (
            stmt.options(
                selectinload(Photographer.user),
                selectinload(Photographer.packages),
            )
            .order_by(
                Photographer.rating.desc(),
                Photographer.total_reviews.desc(),
                Photographer.total_bookings.desc(),
            )
            .offset(offset_for(page, limit))
            .limit(limit)
        )
        photographers = list(self.session.execute(stmt).scalars().all())

        return photographers, total, self.booking_counts([p.id for p in photographers])

    def booking_counts(self, photographer_ids: list[UUID]) -> dict[UUID, int]:
        """Number of bookings (any status) per photographer."""
        if not photographer_ids:
            return {}
        rows = self.session.execute(
            select(Booking.photographer_id, func.count(Booking.id))
            .where(Booking.photographer_id.in_(photographer_ids))
            .group_by(Booking.photographer_id)
        ).all()
        counts = {pid: 0 for pid in photographer_ids}
        counts.update({pid: count for pid, count in rows})
        return counts

    @staticmethod
    def listing_packages(photographer: Photographer) -> list:
        """Cheapest active packages shown on a listing card."""
        active = [p for p in photographer.packages if p.is_active]
        return sorted(active, key=lambda p: p.price)[:LISTING_PACKAGE_LIMIT]

    def get_detail(self, photographer_id: UUID) -> PhotographerDetail:
        """
        Public profile with packages, upcoming availability, booked windows
        and recent reviews.

        Raises:
            NotFoundException: Missing or not currently available
        """
        photographer = self.session.get(Photographer, photographer_id)
        if photographer is None:
            raise NotFoundException("Photographer", str(photographer_id))
        if not photographer.is_available or photographer.user is None:
            raise NotFoundException("Photographer", str(photographer_id))

        today = _today()

        availability = self.session.execute(
            select(Availability)
            .where(
                Availability.photographer_id == photographer.id,
                Availability.date >= today,
            )
            .order_by(Availability.date, Availability.start_time)
            .limit(DETAIL_AVAILABILITY_LIMIT)
        ).scalars().all()

        booked_windows = self.session.execute(
            select(Booking)
            .where(
                Booking.photographer_id == photographer.id,
                Booking.status == BookingStatus.CONFIRMED,
                Booking.date >= today,
            )
            .order_by(Booking.date, Booking.start_time)
        ).scalars().all()

        reviews = self.session.execute(
            select(Review)
            .options(selectinload(Review.client))
            .where(Review.photographer_id == photographer.id)
            .order_by(Review.created_at.desc())
            .limit(DETAIL_REVIEW_LIMIT)
        ).scalars().all()

        packages = sorted(
            (p for p in photographer.packages if p.is_active),
            key=lambda p: p.price,
        )

        return PhotographerDetail(
            photographer=photographer,
            packages=packages,
            availability=list(availability),
            booked_windows=list(booked_windows),
            reviews=list(reviews),
        )

    def create_for_user(self, user_id: UUID, **profile: Any) -> Photographer:
        """
        Create a photographer profile for an existing user and promote the
        user to PHOTOGRAPHER.

        Raises:
            NotFoundException: User does not exist
            BadRequestException: User already has a profile
        """
        user = self.session.get(User, user_id)
        if user is None:
            raise NotFoundException("User", str(user_id))
        if user.photographer is not None:
            raise BadRequestException("User is already a photographer")

        photographer = Photographer(user_id=user.id, **self._profile_values(profile))
        self.session.add(photographer)
        user.role = UserRole.PHOTOGRAPHER
        self.session.commit()
        self.session.refresh(photographer)

        logger.info(
            "Photographer profile created",
            extra={"photographer_id": str(photographer.id), "user_id": str(user.id)},
        )
        return photographer

    # Self-service profile (role PHOTOGRAPHER)

    def get_by_user(self, user_id: UUID) -> Optional[Photographer]:
        return self.session.execute(
            select(Photographer).where(Photographer.user_id == user_id)
        ).scalar_one_or_none()

    def require_profile(self, user_id: UUID) -> Photographer:
        """
        Raises:
            NotFoundException: The user has no photographer profile yet
        """
        photographer = self.get_by_user(user_id)
        if photographer is None:
            raise NotFoundException("Photographer profile")
        return photographer

    def create_own_profile(self, user: User, **profile: Any) -> Photographer:
        """
        Raises:
            BadRequestException: A profile already exists
        """
        if self.get_by_user(user.id) is not None:
            raise BadRequestException("Photographer profile already exists. Use PUT to update.")

        photographer = Photographer(user_id=user.id, **self._profile_values(profile))
        self.session.add(photographer)
        self.session.commit()
        self.session.refresh(photographer)
        return photographer

    def upsert_own_profile(self, user: User, **profile: Any) -> Photographer:
        """Update the caller's profile, creating it if missing."""
        photographer = self.get_by_user(user.id)
        if photographer is None:
            photographer = Photographer(user_id=user.id)
            self.session.add(photographer)

        for name, value in self._profile_values(profile).items():
            setattr(photographer, name, value)

        self.session.commit()
        self.session.refresh(photographer)
        return photographer

    @staticmethod
    def _profile_values(profile: dict[str, Any]) -> dict[str, Any]:
        values = {k: v for k, v in profile.items() if k in PROFILE_FIELDS}
        if "specialties" in values and values["specialties"] is not None:
            values["specialties"] = [
                s.value if isinstance(s, PhotoSessionType) else str(s)
                for s in values["specialties"]
            ]
        for list_field in ("specialties", "equipment", "languages", "portfolio"):
            if list_field in values and values[list_field] is None:
                values[list_field] = []
        return values
