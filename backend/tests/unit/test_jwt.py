"""
Tests for JWT utilities.
"""
from datetime import timedelta
from uuid import uuid4

import jwt as pyjwt
import pytest

from shutterconnect.lib.jwt import (
    InvalidTokenError,
    create_access_token,
    decode_access_token,
    verify_token,
)
from shutterconnect.lib.settings import settings


@pytest.mark.unit
def test_create_and_verify_token():
    user_id = str(uuid4())

    token = create_access_token(user_id, "CLIENT", is_verified=True)
    payload = verify_token(token)

    assert payload["sub"] == user_id
    assert payload["role"] == "CLIENT"
    assert payload["is_verified"] is True
    assert payload["exp"] > payload["iat"]


@pytest.mark.unit
def test_default_expiration_from_settings():
    token = create_access_token(str(uuid4()), "PHOTOGRAPHER")
    payload = verify_token(token)

    assert payload["exp"] - payload["iat"] == settings.jwt_expiration_minutes * 60


@pytest.mark.unit
def test_expired_token_rejected():
    token = create_access_token(str(uuid4()), "CLIENT", expires_delta=timedelta(seconds=-1))

    with pytest.raises(InvalidTokenError):
        verify_token(token)


@pytest.mark.unit
def test_wrong_secret_rejected():
    token = pyjwt.encode({"sub": "x", "role": "CLIENT"}, "other-secret", algorithm="HS256")

    with pytest.raises(InvalidTokenError):
        verify_token(token)


@pytest.mark.unit
def test_decode_access_token_claims():
    user_id = uuid4()
    token = create_access_token(str(user_id), "ADMIN", is_verified=True)

    claims = decode_access_token(token)

    assert claims.user_id == user_id
    assert claims.role == "ADMIN"
    assert claims.is_verified is True
    assert claims.expires_at > claims.issued_at


@pytest.mark.unit
def test_decode_rejects_non_uuid_subject():
    token = create_access_token("not-a-uuid", "CLIENT")

    with pytest.raises(InvalidTokenError):
        decode_access_token(token)


@pytest.mark.unit
def test_token_without_expiry_rejected():
    token = pyjwt.encode(
        {"sub": str(uuid4()), "role": "CLIENT", "iat": 0},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )

    with pytest.raises(InvalidTokenError):
        verify_token(token)
