"""
Booking routes.

- GET /bookings: the caller's bookings (as client, or as photographer)
- POST /bookings: request a session with a photographer
"""
from datetime import date as date_type, datetime
from decimal import Decimal
from typing import List, Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field, field_validator, model_validator
from sqlalchemy.orm import Session

from shutterconnect.api.dependencies import get_current_user
from shutterconnect.api.schemas import TIME_FIELD_PATTERN, BookingResponse
from shutterconnect.lib.db import get_db
from shutterconnect.lib.pagination import Pagination, build_pagination
from shutterconnect.models.bookings import BookingStatus
from shutterconnect.models.photographers import PhotoSessionType
from shutterconnect.models.users import User
from shutterconnect.services.booking_service import BookingService


router = APIRouter(prefix="/bookings", tags=["bookings"])


class CreateBookingRequest(BaseModel):
    photographer_id: UUID
    package_id: Optional[UUID] = None
    session_type: PhotoSessionType
    date: date_type
    start_time: str = Field(..., pattern=TIME_FIELD_PATTERN, examples=["10:00"])
    end_time: str = Field(..., pattern=TIME_FIELD_PATTERN, examples=["12:00"])
    location: str = Field(..., min_length=1, max_length=255)
    notes: Optional[str] = Field(None, max_length=2000)
    total_amount: Optional[Decimal] = Field(None, ge=0)

    @field_validator("date")
    @classmethod
    def not_in_past(cls, v: date_type) -> date_type:
        if v < datetime.now().date():
            raise ValueError("Booking date cannot be in the past")
        return v

    @model_validator(mode="after")
    def start_before_end(self) -> "CreateBookingRequest":
        # Zero-padded HH:MM compares correctly as text
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class CreateBookingResponse(BaseModel):
    message: str
    booking: BookingResponse


class BookingListResponse(BaseModel):
    bookings: List[BookingResponse]
    pagination: Pagination


@router.get("", response_model=BookingListResponse)
def list_bookings(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[BookingStatus] = Query(None),
    role: Literal["client", "photographer"] = Query("client"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> BookingListResponse:
    """
    The caller's bookings, newest first.

    role=photographer lists bookings made with the caller's photographer profile.
    """
    bookings, total = BookingService(db).list_bookings(
        current_user,
        as_photographer=role == "photographer",
        status=status,
        page=page,
        limit=limit,
    )
    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in bookings],
        pagination=build_pagination(page, limit, total),
    )


@router.post("", response_model=CreateBookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    request: CreateBookingRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> CreateBookingResponse:
    """
    Request a booking.

    Raises:
        400: Photographer unavailable, invalid package, or slot already booked
        404: Photographer not found
    """
    booking = BookingService(db).create_booking(
        client=current_user,
        photographer_id=request.photographer_id,
        session_type=request.session_type,
        booking_date=request.date,
        start_time=request.start_time,
        end_time=request.end_time,
        location=request.location,
        package_id=request.package_id,
        notes=request.notes,
        total_amount=request.total_amount,
    )
    return CreateBookingResponse(
        message="Booking created successfully",
        booking=BookingResponse.model_validate(booking),
    )
