"""
Package management for a photographer's own offerings.
"""
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from shutterconnect.api.middleware.error_handler import (
    BadRequestException,
    NotFoundException,
)
from shutterconnect.lib.logging import get_logger
from shutterconnect.models.bookings import ACTIVE_BOOKING_STATUSES, Booking
from shutterconnect.models.packages import Package
from shutterconnect.models.photographers import Photographer

logger = get_logger(__name__)

PACKAGE_FIELDS = ("name", "description", "price", "duration", "deliverables", "is_active")


class PackageService:
    """CRUD over the packages of one photographer."""

    def __init__(self, session: Session, photographer: Photographer):
        self.session = session
        self.photographer = photographer

    def list_packages(self) -> list[Package]:
        """All packages (active or not), cheapest first."""
        stmt = (
            select(Package)
            .where(Package.photographer_id == self.photographer.id)
            .order_by(Package.price.asc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def get(self, package_id: UUID) -> Package:
        """
        Raises:
            NotFoundException: Missing, or owned by another photographer
        """
        package = self.session.get(Package, package_id)
        if package is None or package.photographer_id != self.photographer.id:
            raise NotFoundException("Package", str(package_id))
        return package

    def create(self, **fields: Any) -> Package:
        package = Package(
            photographer_id=self.photographer.id,
            **{k: v for k, v in fields.items() if k in PACKAGE_FIELDS},
        )
        self.session.add(package)
        self.session.commit()
        self.session.refresh(package)
        logger.info(
            "Package created",
            extra={"package_id": str(package.id), "photographer_id": str(self.photographer.id)},
        )
        return package

    def update(self, package_id: UUID, **fields: Any) -> Package:
        package = self.get(package_id)
        for name, value in fields.items():
            if name in PACKAGE_FIELDS:
                setattr(package, name, value)
        self.session.commit()
        self.session.refresh(package)
        return package

    def delete(self, package_id: UUID) -> None:
        """
        Raises:
            NotFoundException: Not this photographer's package
            BadRequestException: Active bookings still reference it
        """
        package = self.get(package_id)

        active = self.session.execute(
            select(func.count(Booking.id)).where(
                Booking.package_id == package.id,
                Booking.status.in_(ACTIVE_BOOKING_STATUSES),
            )
        ).scalar_one()
        if active:
            raise BadRequestException("Cannot delete package with active bookings")

        self.session.delete(package)
        self.session.commit()
        logger.info("Package deleted", extra={"package_id": str(package_id)})
