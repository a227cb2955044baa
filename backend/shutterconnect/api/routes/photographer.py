"""
Photographer self-management routes (role PHOTOGRAPHER).

- /photographer/profile: the caller's public profile
- /photographer/packages: priced offerings
- /photographer/availability: open time slots
- /photographer/payments: earnings dashboard
"""
from datetime import date as date_type, datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field, field_validator, model_validator
from sqlalchemy.orm import Session

from shutterconnect.api.dependencies import require_photographer
from shutterconnect.api.schemas import (
    TIME_FIELD_PATTERN,
    AvailabilityResponse,
    MessageResponse,
    PackageResponse,
    PhotographerResponse,
)
from shutterconnect.lib.db import get_db
from shutterconnect.lib.pagination import Pagination, build_pagination
from shutterconnect.models.photographers import Photographer, PhotoSessionType
from shutterconnect.models.users import User
from shutterconnect.services.availability_service import AvailabilityService
from shutterconnect.services.package_service import PackageService
from shutterconnect.services.payment_service import PaymentService
from shutterconnect.services.photographer_service import PhotographerService


router = APIRouter(prefix="/photographer", tags=["photographer"])


# Request models
class ProfileRequest(BaseModel):
    bio: str = Field(..., min_length=50, max_length=1000)
    experience: int = Field(..., ge=0, le=50, description="Years")
    hourly_rate: Decimal = Field(..., ge=25, le=1000)
    location: str = Field(..., min_length=5)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    radius: Optional[int] = Field(None, ge=0, description="Travel radius in km")
    specialties: List[PhotoSessionType] = Field(..., min_length=1)
    equipment: List[str] = Field(..., min_length=1)
    languages: List[str] = Field(..., min_length=1)
    portfolio: List[str] = []


class ProfileResponse(BaseModel):
    message: str
    photographer: PhotographerResponse


class PackageRequest(BaseModel):
    name: str = Field(..., min_length=3, max_length=100)
    description: str = Field(..., min_length=10, max_length=500)
    price: Decimal = Field(..., ge=25, le=10000)
    duration: int = Field(..., ge=30, le=480, description="Minutes")
    deliverables: List[str] = Field(..., min_length=1)
    is_active: bool = True


class PackageEnvelope(BaseModel):
    message: str
    package: PackageResponse


class AvailabilityRequest(BaseModel):
    date: date_type
    start_time: str = Field(..., pattern=TIME_FIELD_PATTERN, examples=["09:00"])
    end_time: str = Field(..., pattern=TIME_FIELD_PATTERN, examples=["17:00"])

    @model_validator(mode="after")
    def start_before_end(self) -> "AvailabilityRequest":
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self

    @field_validator("date")
    @classmethod
    def not_in_past(cls, v: date_type) -> date_type:
        if v < datetime.now().date():
            raise ValueError("Availability cannot be added in the past")
        return v


# Response models for the payments dashboard
class PaymentItem(BaseModel):
    id: UUID
    booking_id: UUID
    amount: float
    currency: str
    status: str
    method: Optional[str] = None
    transaction_id: Optional[str] = None
    created_at: datetime
    client_name: Optional[str] = None
    client_email: Optional[str] = None
    package_name: Optional[str] = None
    session_date: Optional[date_type] = None


class Totals(BaseModel):
    total_amount: float
    total_payments: int


class PeriodTotals(Totals):
    days: int


class MonthlyEarningsItem(BaseModel):
    month: str
    total_amount: float
    payment_count: int


class PaymentSummary(BaseModel):
    period: PeriodTotals
    all_time: Totals
    pending: Totals
    monthly_earnings: List[MonthlyEarningsItem]


class PaymentsDashboardResponse(BaseModel):
    payments: List[PaymentItem]
    pagination: Pagination
    summary: PaymentSummary


# Dependencies
def get_own_photographer(
    current_user: User = Depends(require_photographer),
    db: Session = Depends(get_db),
) -> Photographer:
    """The caller's photographer profile; 404 if they have not created one."""
    return PhotographerService(db).require_profile(current_user.id)


# Profile
@router.get("/profile", response_model=PhotographerResponse)
def get_profile(
    photographer: Photographer = Depends(get_own_photographer),
) -> PhotographerResponse:
    """The caller's photographer profile."""
    return PhotographerResponse.model_validate(photographer)


@router.post("/profile", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
def create_profile(
    request: ProfileRequest,
    current_user: User = Depends(require_photographer),
    db: Session = Depends(get_db),
) -> ProfileResponse:
    """
    Create the caller's profile.

    Raises:
        400: Profile already exists
    """
    photographer = PhotographerService(db).create_own_profile(current_user, **request.model_dump())
    return ProfileResponse(
        message="Photographer profile created successfully",
        photographer=PhotographerResponse.model_validate(photographer),
    )


@router.put("/profile", response_model=ProfileResponse)
def update_profile(
    request: ProfileRequest,
    current_user: User = Depends(require_photographer),
    db: Session = Depends(get_db),
) -> ProfileResponse:
    """Update the caller's profile, creating it if it does not exist yet."""
    photographer = PhotographerService(db).upsert_own_profile(current_user, **request.model_dump())
    return ProfileResponse(
        message="Photographer profile updated successfully",
        photographer=PhotographerResponse.model_validate(photographer),
    )


# Packages
@router.get("/packages", response_model=List[PackageResponse])
def list_packages(
    photographer: Photographer = Depends(get_own_photographer),
    db: Session = Depends(get_db),
) -> List[PackageResponse]:
    packages = PackageService(db, photographer).list_packages()
    return [PackageResponse.model_validate(p) for p in packages]


@router.post("/packages", response_model=PackageEnvelope, status_code=status.HTTP_201_CREATED)
def create_package(
    request: PackageRequest,
    photographer: Photographer = Depends(get_own_photographer),
    db: Session = Depends(get_db),
) -> PackageEnvelope:
    package = PackageService(db, photographer).create(**request.model_dump())
    return PackageEnvelope(
        message="Package created successfully",
        package=PackageResponse.model_validate(package),
    )


@router.get("/packages/{package_id}", response_model=PackageResponse)
def get_package(
    package_id: UUID,
    photographer: Photographer = Depends(get_own_photographer),
    db: Session = Depends(get_db),
) -> PackageResponse:
    """Raises 404 if the package belongs to another photographer."""
    return PackageResponse.model_validate(PackageService(db, photographer).get(package_id))


@router.put("/packages/{package_id}", response_model=PackageEnvelope)
def update_package(
    package_id: UUID,
    request: PackageRequest,
    photographer: Photographer = Depends(get_own_photographer),
    db: Session = Depends(get_db),
) -> PackageEnvelope:
    package = PackageService(db, photographer).update(package_id, **request.model_dump())
    return PackageEnvelope(
        message="Package updated successfully",
        package=PackageResponse.model_validate(package),
    )


@router.delete("/packages/{package_id}", response_model=MessageResponse)
def delete_package(
    package_id: UUID,
    photographer: Photographer = Depends(get_own_photographer),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """
    Raises:
        400: Package still has active bookings
        404: Not the caller's package
    """
    PackageService(db, photographer).delete(package_id)
    return MessageResponse(message="Package deleted successfully")


# Availability
@router.get("/availability", response_model=List[AvailabilityResponse])
def list_availability(
    from_date: Optional[date_type] = Query(None, description="Defaults to today"),
    to_date: Optional[date_type] = Query(None),
    photographer: Photographer = Depends(get_own_photographer),
    db: Session = Depends(get_db),
) -> List[AvailabilityResponse]:
    slots = AvailabilityService(db, photographer).list_slots(from_date, to_date)
    return [AvailabilityResponse.model_validate(s) for s in slots]


@router.post("/availability", response_model=AvailabilityResponse, status_code=status.HTTP_201_CREATED)
def add_availability(
    request: AvailabilityRequest,
    photographer: Photographer = Depends(get_own_photographer),
    db: Session = Depends(get_db),
) -> AvailabilityResponse:
    """
    Declare an open slot.

    Raises:
        400: Overlaps an existing slot on that date
    """
    slot = AvailabilityService(db, photographer).add(
        request.date, request.start_time, request.end_time
    )
    return AvailabilityResponse.model_validate(slot)


@router.delete("/availability/{slot_id}", response_model=MessageResponse)
def remove_availability(
    slot_id: UUID,
    photographer: Photographer = Depends(get_own_photographer),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """
    Raises:
        400: Slot is already booked
        404: Not the caller's slot
    """
    AvailabilityService(db, photographer).remove(slot_id)
    return MessageResponse(message="Availability slot removed")


# Payments
@router.get("/payments", response_model=PaymentsDashboardResponse)
def payments_dashboard(
    period: int = Query(30, ge=1, le=3650, description="Look-back window in days"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    photographer: Photographer = Depends(get_own_photographer),
    db: Session = Depends(get_db),
) -> PaymentsDashboardResponse:
    """Completed payments in the period with period, all-time and pending totals."""
    payments, total, summary = PaymentService(db, photographer).dashboard(
        period_days=period, page=page, limit=limit
    )

    items = []
    for payment in payments:
        booking = payment.booking
        items.append(PaymentItem(
            id=payment.id,
            booking_id=payment.booking_id,
            amount=float(payment.amount),
            currency=payment.currency,
            status=payment.status.value,
            method=payment.method,
            transaction_id=payment.transaction_id,
            created_at=payment.created_at,
            client_name=booking.client.full_name if booking.client else None,
            client_email=booking.client.email if booking.client else None,
            package_name=booking.package.name if booking.package else None,
            session_date=booking.date,
        ))

    return PaymentsDashboardResponse(
        payments=items,
        pagination=build_pagination(page, limit, total),
        summary=PaymentSummary(
            period=PeriodTotals(
                days=summary.period_days,
                total_amount=float(summary.period.total_amount),
                total_payments=summary.period.total_payments,
            ),
            all_time=Totals(
                total_amount=float(summary.all_time.total_amount),
                total_payments=summary.all_time.total_payments,
            ),
            pending=Totals(
                total_amount=float(summary.pending.total_amount),
                total_payments=summary.pending.total_payments,
            ),
            monthly_earnings=[
                MonthlyEarningsItem(
                    month=m.month,
                    total_amount=float(m.total_amount),
                    payment_count=m.payment_count,
                )
                for m in summary.monthly
            ],
        ),
    )
