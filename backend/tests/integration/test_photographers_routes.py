"""Integration tests for the public photographer directory."""
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from conftest import auth_headers, future_date, make_package, make_photographer, make_user
from shutterconnect.lib.settings import settings
from shutterconnect.models.availability import Availability
from shutterconnect.models.bookings import Booking, BookingStatus
from shutterconnect.models.notifications import Notification
from shutterconnect.models.photographers import PhotoSessionType
from shutterconnect.models.reviews import Review
from shutterconnect.models.users import User, UserRole


@pytest.fixture
def directory(db_session):
    """Three listable photographers plus one hidden one."""
    wedding = make_photographer(
        db_session,
        email="w@example.com", first_name="Rajesh", last_name="Kumar",
        specialties=["WEDDING", "EVENT"], location="Delhi, India",
        hourly_rate=Decimal("150"), rating=Decimal("4.90"),
    )
    portrait = make_photographer(
        db_session,
        email="p@example.com", first_name="Priya", last_name="Sharma",
        specialties=["PORTRAIT"], location="Mumbai, India",
        hourly_rate=Decimal("80"), rating=Decimal("4.20"),
        bio="Creative portrait and fashion photographer.",
    )
    corporate = make_photographer(
        db_session,
        email="c@example.com", first_name="Arjun", last_name="Patel",
        specialties=["CORPORATE", "EVENTS_EXTRA"], location="Bangalore, India",
        hourly_rate=Decimal("100"), rating=Decimal("3.50"),
    )
    make_photographer(
        db_session,
        email="h@example.com", first_name="Hidden", last_name="Person",
        is_available=False, rating=Decimal("5.00"),
    )
    return wedding, portrait, corporate


@pytest.mark.integration
def test_list_orders_by_rating(client, directory):
    response = client.get("/photographers")

    assert response.status_code == 200
    data = response.json()
    names = [p["user"]["first_name"] for p in data["photographers"]]
    assert names == ["Rajesh", "Priya", "Arjun"]
    assert data["pagination"]["total"] == 3


@pytest.mark.integration
def test_list_hides_unverified_accounts(client, db_session, directory):
    unverified = make_user(
        db_session, email="u@example.com", role=UserRole.PHOTOGRAPHER, is_verified=False
    )
    make_photographer(db_session, user=unverified, rating=Decimal("5.00"))

    data = client.get("/photographers").json()

    assert data["pagination"]["total"] == 3


@pytest.mark.integration
def test_filter_by_specialty_matches_whole_value(client, directory):
    data = client.get("/photographers", params={"category": "EVENT"}).json()

    names = [p["user"]["first_name"] for p in data["photographers"]]
    assert names == ["Rajesh"]


@pytest.mark.integration
def test_filter_by_location_price_and_search(client, directory):
    assert client.get("/photographers", params={"location": "mumbai"}).json()["pagination"]["total"] == 1
    assert client.get("/photographers", params={"min_price": 90, "max_price": 120}).json()["pagination"]["total"] == 1
    assert client.get("/photographers", params={"min_rating": 4}).json()["pagination"]["total"] == 2

    found = client.get("/photographers", params={"search": "fashion"}).json()["photographers"]
    assert [p["user"]["first_name"] for p in found] == ["Priya"]


@pytest.mark.integration
def test_search_treats_wildcards_literally(client, db_session, directory):
    make_photographer(db_session, bio="Shoots 100% natural light, no flash.")

    assert client.get("/photographers", params={"search": "%"}).json()["pagination"]["total"] == 1
    assert client.get("/photographers", params={"location": "_"}).json()["pagination"]["total"] == 0

    found = client.get("/photographers", params={"search": "100%"}).json()["photographers"]
    assert [p["user"]["first_name"] for p in found] == ["Ansel"]


@pytest.mark.integration
def test_list_pagination(client, directory):
    data = client.get("/photographers", params={"page": 2, "limit": 2}).json()

    assert len(data["photographers"]) == 1
    assert data["pagination"]["total_pages"] == 2
    assert data["pagination"]["has_prev"] is True


@pytest.mark.integration
def test_listing_shows_three_cheapest_active_packages(client, db_session, directory):
    wedding = directory[0]
    for price in (900, 300, 600, 1200):
        make_package(db_session, wedding, name=f"Package {price}", price=Decimal(price))
    make_package(db_session, wedding, name="Retired", price=Decimal(50), is_active=False)

    data = client.get("/photographers").json()
    card = next(p for p in data["photographers"] if p["id"] == str(wedding.id))

    assert [p["price"] for p in card["packages"]] == [300.0, 600.0, 900.0]
    assert card["booking_count"] == 0


@pytest.mark.integration
def test_invalid_category_is_400(client, directory):
    response = client.get("/photographers", params={"category": "UNDERWATER"})

    assert response.status_code == 400


@pytest.mark.integration
def test_detail(client, db_session, directory):
    wedding = directory[0]
    client_user = make_user(db_session, email="client@example.com", first_name="Cara", last_name="Client")
    make_package(db_session, wedding)
    day = future_date()
    db_session.add(Availability(photographer_id=wedding.id, date=day, start_time="09:00", end_time="17:00"))
    confirmed = Booking(
        client_id=client_user.id,
        photographer_id=wedding.id,
        session_type=PhotoSessionType.WEDDING,
        date=day,
        start_time="10:00",
        end_time="12:00",
        location="Delhi",
        total_amount=Decimal("300"),
        status=BookingStatus.CONFIRMED,
    )
    db_session.add(confirmed)
    db_session.flush()
    db_session.add(Review(
        booking_id=confirmed.id,
        client_id=client_user.id,
        photographer_id=wedding.id,
        rating=5,
        comment="Wonderful",
    ))
    db_session.commit()

    response = client.get(f"/photographers/{wedding.id}")

    assert response.status_code == 200
    data = response.json()["photographer"]
    assert data["user"]["first_name"] == "Rajesh"
    assert len(data["packages"]) == 1
    assert data["availability"][0]["start_time"] == "09:00"
    assert data["bookings"] == [{"date": day.isoformat(), "start_time": "10:00", "end_time": "12:00"}]
    assert data["reviews"][0]["comment"] == "Wonderful"
    assert data["reviews"][0]["client"]["first_name"] == "Cara"


@pytest.mark.integration
def test_detail_not_found(client, db_session):
    assert client.get(f"/photographers/{uuid4()}").status_code == 404


@pytest.mark.integration
def test_detail_of_unavailable_photographer_is_404(client, db_session):
    hidden = make_photographer(db_session, is_available=False)

    assert client.get(f"/photographers/{hidden.id}").status_code == 404


@pytest.mark.integration
def test_admin_creates_photographer(client, db_session):
    admin = make_user(db_session, email="admin@example.com", role=UserRole.ADMIN)
    target = make_user(db_session, email="new@example.com")

    response = client.post(
        "/photographers",
        json={"user_id": str(target.id), "bio": "Fresh talent", "specialties": ["PORTRAIT"]},
        headers=auth_headers(admin),
    )

    assert response.status_code == 201
    assert response.json()["specialties"] == ["PORTRAIT"]
    db_session.refresh(target)
    assert target.role == UserRole.PHOTOGRAPHER

    again = client.post(
        "/photographers",
        json={"user_id": str(target.id)},
        headers=auth_headers(admin),
    )
    assert again.status_code == 400


@pytest.mark.integration
def test_create_photographer_requires_admin(client, db_session):
    user = make_user(db_session, email="ana@example.com")

    response = client.post(
        "/photographers",
        json={"user_id": str(user.id)},
        headers=auth_headers(user),
    )

    assert response.status_code == 403


@pytest.mark.integration
def test_seed_and_remove(client, db_session):
    response = client.post("/photographers/seed")
    assert response.status_code == 200
    assert response.json()["count"] == 5

    assert client.post("/photographers/seed").status_code == 400
    listing = client.get("/photographers").json()
    assert listing["pagination"]["total"] == 5

    client_user = make_user(db_session, email="client@example.com")
    booked = client.post(
        "/bookings",
        json={
            "photographer_id": listing["photographers"][0]["id"],
            "session_type": "PORTRAIT",
            "date": future_date().isoformat(),
            "start_time": "10:00",
            "end_time": "12:00",
            "location": "Lodhi Garden, Delhi",
        },
        headers=auth_headers(client_user),
    )
    assert booked.status_code == 201

    assert client.delete("/photographers/seed").status_code == 200
    assert client.get("/photographers").json()["pagination"]["total"] == 0

    # Bookings and the photographer's notifications go with the profile
    assert db_session.execute(select(func.count(Booking.id))).scalar_one() == 0
    assert db_session.execute(select(func.count(Notification.id))).scalar_one() == 0
    assert db_session.execute(select(User.email)).scalars().all() == ["client@example.com"]


@pytest.mark.integration
def test_seed_disabled(client, monkeypatch):
    monkeypatch.setattr(settings, "allow_seed_endpoints", False)

    response = client.post("/photographers/seed")

    assert response.status_code == 403
