"""
Tests for booking creation, conflict detection and listing.
"""
from decimal import Decimal
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest
from sqlalchemy import select

from conftest import future_date, make_package, make_photographer, make_user
from shutterconnect.api.middleware.error_handler import (
    BadRequestException,
    NotFoundException,
)
from shutterconnect.models.availability import Availability
from shutterconnect.models.bookings import Booking, BookingPaymentStatus, BookingStatus
from shutterconnect.models.notifications import Notification
from shutterconnect.models.photographers import PhotoSessionType
from shutterconnect.services.booking_service import BookingService, booking_lock_name


@pytest.fixture
def photographer(db_session):
    return make_photographer(db_session)


@pytest.fixture
def client_user(db_session):
    return make_user(db_session, email="client@example.com", first_name="Cara", last_name="Client")


def _book(service, client_user, photographer, start, end, day=None, **kwargs):
    return service.create_booking(
        client=client_user,
        photographer_id=photographer.id,
        session_type=kwargs.pop("session_type", PhotoSessionType.PORTRAIT),
        booking_date=day or future_date(),
        start_time=start,
        end_time=end,
        location="Lodhi Garden, Delhi",
        **kwargs,
    )


@pytest.mark.unit
def test_booking_lock_name():
    pid = uuid4()
    day = future_date()

    assert booking_lock_name(pid, day) == f"booking:{pid}:{day.isoformat()}"


@pytest.mark.unit
def test_create_booking_defaults(db_session, client_user, photographer):
    booking = _book(BookingService(db_session), client_user, photographer, "10:00", "12:00")

    assert booking.status == BookingStatus.PENDING
    assert booking.payment_status == BookingPaymentStatus.PENDING
    # 2 hours at 100/h
    assert booking.total_amount == Decimal("200.00")


@pytest.mark.unit
def test_overlapping_booking_rejected_adjacent_accepted(db_session, client_user, photographer):
    """A 10-12 holds the slot; B 11-13 overlaps; C 12-14 only touches A."""
    service = BookingService(db_session)
    day = future_date()

    _book(service, client_user, photographer, "10:00", "12:00", day=day)

    with pytest.raises(BadRequestException, match="Time slot is already booked"):
        _book(service, client_user, photographer, "11:00", "13:00", day=day)

    third = _book(service, client_user, photographer, "12:00", "14:00", day=day)
    assert third.start_time == "12:00"

    bookings = db_session.execute(select(Booking)).scalars().all()
    assert len(bookings) == 2


@pytest.mark.unit
def test_cancelled_booking_frees_slot(db_session, client_user, photographer):
    service = BookingService(db_session)
    day = future_date()
    first = _book(service, client_user, photographer, "10:00", "12:00", day=day)
    first.status = BookingStatus.CANCELLED
    db_session.commit()

    again = _book(service, client_user, photographer, "10:00", "12:00", day=day)

    assert again.id != first.id


@pytest.mark.unit
def test_completed_booking_does_not_block(db_session, client_user, photographer):
    service = BookingService(db_session)
    day = future_date()
    first = _book(service, client_user, photographer, "10:00", "12:00", day=day)
    first.status = BookingStatus.COMPLETED
    db_session.commit()

    assert service.find_conflicting_booking(photographer.id, day, "11:00", "12:00") is None


@pytest.mark.unit
def test_same_time_other_day_is_fine(db_session, client_user, photographer):
    service = BookingService(db_session)

    _book(service, client_user, photographer, "10:00", "12:00", day=future_date(7))
    _book(service, client_user, photographer, "10:00", "12:00", day=future_date(8))

    assert len(db_session.execute(select(Booking)).scalars().all()) == 2


@pytest.mark.unit
def test_photographer_not_found(db_session, client_user):
    service = BookingService(db_session)

    with pytest.raises(NotFoundException):
        service.create_booking(
            client=client_user,
            photographer_id=uuid4(),
            session_type=PhotoSessionType.EVENT,
            booking_date=future_date(),
            start_time="10:00",
            end_time="11:00",
            location="Delhi",
        )


@pytest.mark.unit
def test_photographer_unavailable(db_session, client_user):
    photographer = make_photographer(db_session, is_available=False)

    with pytest.raises(BadRequestException, match="not available"):
        _book(BookingService(db_session), client_user, photographer, "10:00", "11:00")


@pytest.mark.unit
def test_package_of_other_photographer_rejected(db_session, client_user, photographer):
    other = make_photographer(db_session, email="other@example.com")
    foreign_package = make_package(db_session, other)

    with pytest.raises(BadRequestException, match="Invalid package"):
        _book(
            BookingService(db_session), client_user, photographer, "10:00", "11:00",
            package_id=foreign_package.id,
        )


@pytest.mark.unit
def test_total_defaults_to_package_price(db_session, client_user, photographer):
    package = make_package(db_session, photographer, price=Decimal("350.00"))

    booking = _book(
        BookingService(db_session), client_user, photographer, "10:00", "11:00",
        package_id=package.id,
    )

    assert booking.package_id == package.id
    assert booking.total_amount == Decimal("350.00")


@pytest.mark.unit
def test_explicit_total_amount_kept(db_session, client_user, photographer):
    booking = _book(
        BookingService(db_session), client_user, photographer, "10:00", "11:30",
        total_amount=Decimal("999.99"),
    )

    assert booking.total_amount == Decimal("999.99")


@pytest.mark.unit
def test_marks_overlapping_availability_booked(db_session, client_user, photographer):
    day = future_date()
    morning = Availability(photographer_id=photographer.id, date=day, start_time="09:00", end_time="11:00")
    noon = Availability(photographer_id=photographer.id, date=day, start_time="11:00", end_time="13:00")
    evening = Availability(photographer_id=photographer.id, date=day, start_time="13:00", end_time="15:00")
    db_session.add_all([morning, noon, evening])
    db_session.commit()

    _book(BookingService(db_session), client_user, photographer, "10:00", "13:00", day=day)

    assert morning.is_booked is True
    assert noon.is_booked is True
    # Touches at 13:00 only
    assert evening.is_booked is False


@pytest.mark.unit
def test_notifies_photographer(db_session, client_user, photographer):
    booking = _book(
        BookingService(db_session), client_user, photographer, "10:00", "11:00",
        session_type=PhotoSessionType.REAL_ESTATE,
    )

    notification = db_session.execute(select(Notification)).scalar_one()
    assert notification.user_id == photographer.user_id
    assert notification.title == "New Booking Request"
    assert notification.type == "booking"
    assert "Cara Client" in notification.message
    assert "real estate photography" in notification.message
    assert notification.data["booking_id"] == str(booking.id)
    assert notification.data["session_type"] == "REAL_ESTATE"


@pytest.mark.unit
def test_rejected_booking_rolls_back(db_session, client_user, photographer):
    service = BookingService(db_session)
    day = future_date()
    _book(service, client_user, photographer, "10:00", "12:00", day=day)

    with pytest.raises(BadRequestException):
        _book(service, client_user, photographer, "11:00", "12:30", day=day)

    assert len(db_session.execute(select(Notification)).scalars().all()) == 1


@pytest.mark.unit
def test_takes_advisory_lock_before_checking(db_session, client_user, photographer):
    day = future_date()
    with patch("shutterconnect.services.booking_service.acquire_xact_lock") as mock_lock:
        _book(BookingService(db_session), client_user, photographer, "10:00", "11:00", day=day)

    mock_lock.assert_called_once_with(db_session, booking_lock_name(photographer.id, day))


@pytest.mark.unit
def test_list_bookings_as_client_and_photographer(db_session, client_user, photographer):
    service = BookingService(db_session)
    other_client = make_user(db_session, email="other@example.com")
    _book(service, client_user, photographer, "10:00", "11:00")
    _book(service, other_client, photographer, "12:00", "13:00")

    mine, total = service.list_bookings(client_user)
    assert total == 1
    assert mine[0].client_id == client_user.id

    received, total = service.list_bookings(photographer.user, as_photographer=True)
    assert total == 2
    assert {b.client_id for b in received} == {client_user.id, other_client.id}


@pytest.mark.unit
def test_list_bookings_status_filter_and_paging(db_session, client_user, photographer):
    service = BookingService(db_session)
    first = _book(service, client_user, photographer, "08:00", "09:00")
    _book(service, client_user, photographer, "10:00", "11:00")
    _book(service, client_user, photographer, "12:00", "13:00")
    first.status = BookingStatus.CONFIRMED
    db_session.commit()

    confirmed, total = service.list_bookings(client_user, status=BookingStatus.CONFIRMED)
    assert total == 1
    assert confirmed[0].id == first.id

    page, total = service.list_bookings(client_user, page=2, limit=2)
    assert total == 3
    assert len(page) == 1


@pytest.mark.unit
def test_find_conflicting_booking_uses_active_rows():
    session = MagicMock()
    existing = Booking(start_time="10:00", end_time="12:00", status=BookingStatus.PENDING)
    session.execute.return_value.scalars.return_value.all.return_value = [existing]

    service = BookingService(session)

    assert service.find_conflicting_booking(uuid4(), future_date(), "11:00", "11:30") is existing
    assert service.find_conflicting_booking(uuid4(), future_date(), "12:00", "13:00") is None
