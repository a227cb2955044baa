"""Tests for in-app notifications."""
from uuid import uuid4

import pytest

from conftest import make_user
from shutterconnect.api.middleware.error_handler import NotFoundException
from shutterconnect.services.notification_service import NotificationService


@pytest.fixture
def user(db_session):
    return make_user(db_session, email="ana@example.com")


def _notify(service, user, title="Hello", data=None):
    notification = service.notify(user.id, title, f"{title} body", "booking", data)
    service.session.commit()
    return notification


@pytest.mark.unit
def test_notify_does_not_commit(db_session, user):
    service = NotificationService(db_session)

    service.notify(user.id, "New Booking Request", "body", "booking")
    db_session.rollback()

    notifications, total, unread = service.list_for_user(user.id)
    assert total == 0


@pytest.mark.unit
def test_list_counts_unread(db_session, user):
    service = NotificationService(db_session)
    first = _notify(service, user, "First", data={"booking_id": "abc"})
    _notify(service, user, "Second")
    first.is_read = True
    db_session.commit()

    notifications, total, unread = service.list_for_user(user.id)
    assert total == 2
    assert unread == 1

    only_unread, total, unread = service.list_for_user(user.id, unread_only=True)
    assert total == 1
    assert only_unread[0].title == "Second"


@pytest.mark.unit
def test_list_is_per_user(db_session, user):
    other = make_user(db_session, email="other@example.com")
    service = NotificationService(db_session)
    _notify(service, other, "Not yours")

    notifications, total, unread = service.list_for_user(user.id)

    assert notifications == []
    assert unread == 0


@pytest.mark.unit
def test_mark_read(db_session, user):
    service = NotificationService(db_session)
    notification = _notify(service, user)

    service.mark_read(user.id, notification.id)

    assert notification.is_read is True


@pytest.mark.unit
def test_mark_read_other_users_notification(db_session, user):
    other = make_user(db_session, email="other@example.com")
    service = NotificationService(db_session)
    notification = _notify(service, other)

    with pytest.raises(NotFoundException):
        service.mark_read(user.id, notification.id)


@pytest.mark.unit
def test_mark_read_missing(db_session, user):
    with pytest.raises(NotFoundException):
        NotificationService(db_session).mark_read(user.id, uuid4())


@pytest.mark.unit
def test_mark_all_read(db_session, user):
    service = NotificationService(db_session)
    _notify(service, user, "One")
    _notify(service, user, "Two")

    assert service.mark_all_read(user.id) == 2
    assert service.list_for_user(user.id)[2] == 0
