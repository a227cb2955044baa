"""
Tests for single-use email tokens.
"""
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select

from shutterconnect.models.tokens import PasswordResetToken, VerificationToken
from shutterconnect.services.token_service import (
    TokenService,
    as_utc,
    generate_token,
    hash_token,
    password_reset_tokens,
    verification_tokens,
)


@pytest.mark.unit
def test_generate_token_is_64_hex():
    token = generate_token()

    assert len(token) == 64
    int(token, 16)
    assert generate_token() != token


@pytest.mark.unit
def test_hash_token_is_sha256_hex():
    assert hash_token("abc") == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


@pytest.mark.unit
def test_as_utc_handles_naive_and_aware():
    naive = datetime(2026, 1, 1, 12, 0)
    aware = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    assert as_utc(naive) == aware
    assert as_utc(aware) is aware


@pytest.mark.unit
def test_issue_stores_only_hash(db_session):
    tokens = verification_tokens(db_session)

    raw = tokens.issue("ana@example.com")
    db_session.commit()

    record = db_session.execute(select(VerificationToken)).scalar_one()
    assert record.identifier == "ana@example.com"
    assert record.token_hash == hash_token(raw)
    assert record.token_hash != raw
    assert tokens.find(raw) is not None


@pytest.mark.unit
def test_issue_replaces_previous_tokens(db_session):
    tokens = password_reset_tokens(db_session)

    first = tokens.issue("ana@example.com")
    second = tokens.issue("ana@example.com")
    db_session.commit()

    assert tokens.find(first) is None
    assert tokens.find(second) is not None
    assert len(db_session.execute(select(PasswordResetToken)).scalars().all()) == 1


@pytest.mark.unit
def test_ttl_matches_kind(db_session):
    verification = verification_tokens(db_session)
    reset = password_reset_tokens(db_session)

    assert verification.ttl == timedelta(hours=24)
    assert reset.ttl == timedelta(hours=1)
    assert verification.cooldown == timedelta(minutes=60)
    assert reset.cooldown == timedelta(minutes=5)


@pytest.mark.unit
def test_cooldown_remaining(db_session):
    tokens = password_reset_tokens(db_session)
    assert tokens.cooldown_remaining("ana@example.com") is None

    tokens.issue("ana@example.com")
    db_session.commit()

    remaining = tokens.cooldown_remaining("ana@example.com")
    assert remaining is not None
    assert timedelta(minutes=4) < remaining <= timedelta(minutes=5)


@pytest.mark.unit
def test_cooldown_elapsed(db_session):
    tokens = password_reset_tokens(db_session)
    tokens.issue("ana@example.com")
    record = tokens.latest_for("ana@example.com")
    record.created_at = datetime.now(timezone.utc) - timedelta(minutes=6)
    db_session.commit()

    assert tokens.cooldown_remaining("ana@example.com") is None


@pytest.mark.unit
def test_is_expired(db_session):
    past = PasswordResetToken(
        email="ana@example.com",
        token_hash=hash_token("x"),
        expires=datetime.now(timezone.utc) - timedelta(seconds=1),
    )
    future = PasswordResetToken(
        email="ana@example.com",
        token_hash=hash_token("y"),
        expires=datetime.now(timezone.utc) + timedelta(minutes=1),
    )

    assert TokenService.is_expired(past)
    assert not TokenService.is_expired(future)


@pytest.mark.unit
def test_consume_and_revoke_all(db_session):
    tokens = verification_tokens(db_session)
    raw = tokens.issue("ana@example.com")
    other = tokens.issue("bob@example.com")
    db_session.commit()

    tokens.consume(tokens.find(raw))
    db_session.commit()
    assert tokens.find(raw) is None

    tokens.revoke_all("bob@example.com")
    db_session.commit()
    assert tokens.find(other) is None


@pytest.mark.unit
def test_purge_expired_keeps_live_tokens(db_session):
    tokens = verification_tokens(db_session)
    live = tokens.issue("live@example.com")
    db_session.add(VerificationToken(
        identifier="old@example.com",
        token_hash=hash_token("old"),
        expires=datetime.now(timezone.utc) - timedelta(hours=1),
    ))
    db_session.commit()

    removed = tokens.purge_expired()
    db_session.commit()

    assert removed == 1
    assert tokens.find(live) is not None
    assert tokens.find("old") is None


@pytest.mark.unit
def test_email_of(db_session):
    verification = verification_tokens(db_session)
    reset = password_reset_tokens(db_session)

    assert verification.email_of(VerificationToken(identifier="a@example.com")) == "a@example.com"
    assert reset.email_of(PasswordResetToken(email="b@example.com")) == "b@example.com"
