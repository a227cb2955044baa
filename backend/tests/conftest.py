"""
Shared fixtures.

Tests run against an in-memory SQLite database; the environment below is
set before any shutterconnect module builds its settings or engine.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["EMAIL_PROVIDER"] = "console"
os.environ["ALLOW_SEED_ENDPOINTS"] = "true"
os.environ["SCHEDULER_ENABLED"] = "false"

from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

import pytest
from fastapi.testclient import TestClient

import shutterconnect.models  # noqa: F401
from shutterconnect.api.app import app
from shutterconnect.lib.db import Base, SessionLocal, engine, get_db
from shutterconnect.lib.jwt import create_access_token
from shutterconnect.lib.passwords import hash_password
from shutterconnect.models.packages import Package
from shutterconnect.models.photographers import Photographer
from shutterconnect.models.users import User, UserRole
from shutterconnect.services import email_service as email_service_module
from shutterconnect.services.email_service import ConsoleEmailProvider, EmailService

DEFAULT_PASSWORD = "Password123"


@pytest.fixture
def db_session():
    """Fresh schema per test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def email_outbox():
    """Capture outgoing email through the console provider."""
    provider = ConsoleEmailProvider()
    email_service_module._email_service = EmailService(provider)
    yield provider.outbox
    email_service_module._email_service = None


@pytest.fixture
def client(db_session, email_outbox):
    """TestClient whose requests share the test's session."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_user(
    db,
    email: str = "client@example.com",
    role: UserRole = UserRole.CLIENT,
    is_verified: bool = True,
    is_active: bool = True,
    password: Optional[str] = DEFAULT_PASSWORD,
    first_name: str = "Test",
    last_name: str = "User",
) -> User:
    user = User(
        email=email,
        password=hash_password(password) if password else None,
        first_name=first_name,
        last_name=last_name,
        role=role,
        is_verified=is_verified,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_photographer(db, user: Optional[User] = None, **fields) -> Photographer:
    if user is None:
        user = make_user(
            db,
            email=fields.pop("email", "photographer@example.com"),
            role=UserRole.PHOTOGRAPHER,
            first_name=fields.pop("first_name", "Ansel"),
            last_name=fields.pop("last_name", "Adams"),
        )
    values = {
        "bio": "Landscape and portrait photographer working across the region.",
        "experience": 5,
        "hourly_rate": Decimal("100.00"),
        "location": "Delhi, India",
        "specialties": ["PORTRAIT", "WEDDING"],
        "equipment": ["Canon EOS R5"],
        "languages": ["English"],
        "portfolio": [],
        "is_available": True,
        "rating": Decimal("4.50"),
    }
    values.update(fields)
    photographer = Photographer(user_id=user.id, **values)
    db.add(photographer)
    db.commit()
    db.refresh(photographer)
    return photographer


def make_package(db, photographer: Photographer, **fields) -> Package:
    values = {
        "name": "Basic Package",
        "description": "Two hours of coverage",
        "price": Decimal("200.00"),
        "duration": 120,
        "deliverables": ["20 edited photos"],
        "is_active": True,
    }
    values.update(fields)
    package = Package(photographer_id=photographer.id, **values)
    db.add(package)
    db.commit()
    db.refresh(package)
    return package


def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(str(user.id), user.role.value, user.is_verified)
    return {"Authorization": f"Bearer {token}"}


def future_date(days: int = 7) -> date:
    return date.today() + timedelta(days=days)
