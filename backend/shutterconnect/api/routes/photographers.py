"""
Public photographer directory routes, plus admin profile creation and demo seeding.
"""
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from shutterconnect.api.dependencies import require_admin
from shutterconnect.api.middleware.error_handler import ForbiddenException
from shutterconnect.api.schemas import (
    AvailabilityResponse,
    MessageResponse,
    PackageResponse,
    PhotographerResponse,
    ReviewResponse,
)
from shutterconnect.lib.db import get_db
from shutterconnect.lib.pagination import Pagination, build_pagination
from shutterconnect.lib.settings import settings
from shutterconnect.models.photographers import PhotoSessionType
from shutterconnect.models.users import User
from shutterconnect.services.photographer_service import (
    PhotographerSearch,
    PhotographerService,
)
from shutterconnect.services.seed_service import SeedService


router = APIRouter(prefix="/photographers", tags=["photographers"])


# Pydantic schemas
class PhotographerListItem(PhotographerResponse):
    """Listing card: profile, cheapest packages and booking count."""
    packages: List[PackageResponse] = []
    booking_count: int = 0


class PhotographerListResponse(BaseModel):
    photographers: List[PhotographerListItem]
    pagination: Pagination


class BookedWindow(BaseModel):
    date: str
    start_time: str
    end_time: str


class PhotographerDetailResponse(PhotographerResponse):
    packages: List[PackageResponse] = []
    availability: List[AvailabilityResponse] = []
    bookings: List[BookedWindow] = []
    reviews: List[ReviewResponse] = []


class PhotographerDetailEnvelope(BaseModel):
    photographer: PhotographerDetailResponse


class CreatePhotographerRequest(BaseModel):
    """Admin payload for turning an existing user into a photographer."""
    user_id: UUID
    bio: Optional[str] = None
    experience: Optional[int] = Field(None, ge=0, le=50)
    hourly_rate: Optional[Decimal] = Field(None, ge=0)
    location: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    radius: Optional[int] = Field(None, ge=0)
    specialties: List[PhotoSessionType] = []
    equipment: List[str] = []
    languages: List[str] = []
    portfolio: List[str] = []


class SeedResponse(BaseModel):
    message: str
    count: int
    photographers: List[PhotographerResponse]


def _require_seed_endpoints() -> None:
    if not settings.allow_seed_endpoints:
        raise ForbiddenException("Seed endpoints are disabled")


@router.get("", response_model=PhotographerListResponse)
def list_photographers(
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    category: Optional[PhotoSessionType] = Query(None, description="Alias of specialty"),
    specialty: Optional[PhotoSessionType] = Query(None),
    location: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    city: Optional[str] = Query(None),
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    min_rating: Optional[Decimal] = Query(None, ge=0, le=5),
    search: Optional[str] = Query(None, description="Matches name, bio or location"),
    db: Session = Depends(get_db),
) -> PhotographerListResponse:
    """
    Search available photographers.

    Ordered by rating, then review count, then booking count.
    """
    filters = PhotographerSearch(
        specialty=category or specialty,
        location=location,
        state=state,
        city=city,
        min_price=min_price,
        max_price=max_price,
        min_rating=min_rating,
        search=search,
    )
    service = PhotographerService(db)
    photographers, total, booking_counts = service.search(filters, page=page, limit=limit)

    items = []
    for photographer in photographers:
        item = PhotographerListItem.model_validate(photographer)
        item.packages = [
            PackageResponse.model_validate(p) for p in service.listing_packages(photographer)
        ]
        item.booking_count = booking_counts.get(photographer.id, 0)
        items.append(item)

    return PhotographerListResponse(
        photographers=items,
        pagination=build_pagination(page, limit, total),
    )


@router.post("", response_model=PhotographerResponse, status_code=status.HTTP_201_CREATED)
def create_photographer(
    request: CreatePhotographerRequest,
    _admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> PhotographerResponse:
    """
    Create a photographer profile for an existing user (admin only).

    Raises:
        404: User not found
        400: User is already a photographer
    """
    fields = request.model_dump(exclude={"user_id"})
    photographer = PhotographerService(db).create_for_user(request.user_id, **fields)
    return PhotographerResponse.model_validate(photographer)


@router.post("/seed", response_model=SeedResponse)
def seed_photographers(db: Session = Depends(get_db)) -> SeedResponse:
    """
    Create the sample photographers.

    Raises:
        403: Seeding disabled in this environment
        400: Photographers already exist
    """
    _require_seed_endpoints()
    created = SeedService(db).seed_photographers()
    return SeedResponse(
        message="Sample photographers created successfully",
        count=len(created),
        photographers=[PhotographerResponse.model_validate(p) for p in created],
    )


@router.delete("/seed", response_model=MessageResponse)
def remove_seed_photographers(db: Session = Depends(get_db)) -> MessageResponse:
    """Remove the sample photographers and everything attached to them."""
    _require_seed_endpoints()
    SeedService(db).remove_sample_photographers()
    return MessageResponse(message="Sample photographers removed successfully")


@router.get("/{photographer_id}", response_model=PhotographerDetailEnvelope)
def get_photographer(
    photographer_id: UUID,
    db: Session = Depends(get_db),
) -> PhotographerDetailEnvelope:
    """
    Public profile page data.

    Raises:
        404: Photographer not found or not available
    """
    detail = PhotographerService(db).get_detail(photographer_id)

    response = PhotographerDetailResponse.model_validate(detail.photographer)
    response.packages = [PackageResponse.model_validate(p) for p in detail.packages]
    response.availability = [AvailabilityResponse.model_validate(a) for a in detail.availability]
    response.bookings = [
        BookedWindow(date=b.date.isoformat(), start_time=b.start_time, end_time=b.end_time)
        for b in detail.booked_windows
    ]
    response.reviews = [ReviewResponse.model_validate(r) for r in detail.reviews]
    return PhotographerDetailEnvelope(photographer=response)
