"""
Response schemas shared by several routers.

Request payloads live next to the route that accepts them.
"""
import re
from datetime import date as date_type, datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from shutterconnect.lib.pagination import Pagination
from shutterconnect.models.bookings import BookingPaymentStatus, BookingStatus
from shutterconnect.models.photographers import PhotoSessionType
from shutterconnect.models.users import UserRole

PHONE_PATTERN = re.compile(r"^\+?[\d\s\-\(\)]+$")
TIME_FIELD_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


def validate_phone(value: Optional[str]) -> Optional[str]:
    """Empty phones become None; anything else must look like a phone number."""
    if value is None or value == "":
        return None
    if not PHONE_PATTERN.match(value):
        raise ValueError("Please enter a valid phone number")
    return value


class MessageResponse(BaseModel):
    message: str


class UserResponse(BaseModel):
    """A user account as seen by its owner."""
    id: UUID
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    avatar: Optional[str] = None
    role: UserRole
    is_verified: bool
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class UserSummary(BaseModel):
    """Public fields of a user shown next to bookings, reviews and listings."""
    id: UUID
    first_name: str
    last_name: str
    email: Optional[str] = None
    avatar: Optional[str] = None

    model_config = {"from_attributes": True}


class PackageResponse(BaseModel):
    id: UUID
    photographer_id: UUID
    name: str
    description: str
    price: float
    duration: int = Field(..., description="Minutes")
    deliverables: list[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AvailabilityResponse(BaseModel):
    id: UUID
    date: date_type
    start_time: str
    end_time: str
    is_booked: bool

    model_config = {"from_attributes": True}


class PhotographerResponse(BaseModel):
    id: UUID
    user_id: UUID
    bio: Optional[str] = None
    experience: Optional[int] = None
    hourly_rate: Optional[float] = None
    location: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    radius: Optional[int] = None
    specialties: list[str] = []
    equipment: list[str] = []
    languages: list[str] = []
    portfolio: list[str] = []
    is_available: bool
    rating: float
    total_reviews: int
    total_bookings: int
    created_at: datetime
    updated_at: datetime
    user: Optional[UserSummary] = None

    model_config = {"from_attributes": True}


class PhotographerSummary(BaseModel):
    id: UUID
    location: Optional[str] = None
    rating: float
    user: UserSummary

    model_config = {"from_attributes": True}


class ReviewResponse(BaseModel):
    id: UUID
    booking_id: UUID
    rating: int
    comment: Optional[str] = None
    created_at: datetime
    client: Optional[UserSummary] = None

    model_config = {"from_attributes": True}


class BookingResponse(BaseModel):
    id: UUID
    client_id: UUID
    photographer_id: UUID
    package_id: Optional[UUID] = None
    session_type: PhotoSessionType
    date: date_type
    start_time: str
    end_time: str
    location: str
    notes: Optional[str] = None
    total_amount: float
    status: BookingStatus
    payment_status: BookingPaymentStatus
    created_at: datetime
    updated_at: datetime
    client: Optional[UserSummary] = None
    photographer: Optional[PhotographerSummary] = None
    package: Optional[PackageResponse] = None
    review: Optional[ReviewResponse] = None

    model_config = {"from_attributes": True}


class NotificationResponse(BaseModel):
    id: UUID
    title: str
    message: str
    type: str
    data: Optional[dict[str, Any]] = None
    is_read: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class PaginatedResponse(BaseModel):
    pagination: Pagination
