"""
Tests for the expired token purge job.
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy import select

from shutterconnect.jobs import token_cleanup
from shutterconnect.models.tokens import PasswordResetToken, VerificationToken
from shutterconnect.services.token_service import hash_token


@pytest.mark.unit
def test_purge_expired_tokens(db_session):
    past = datetime.now(timezone.utc) - timedelta(hours=2)
    future = datetime.now(timezone.utc) + timedelta(hours=2)
    db_session.add_all([
        VerificationToken(identifier="a@example.com", token_hash=hash_token("v1"), expires=past),
        VerificationToken(identifier="b@example.com", token_hash=hash_token("v2"), expires=future),
        PasswordResetToken(email="a@example.com", token_hash=hash_token("r1"), expires=past),
        PasswordResetToken(email="b@example.com", token_hash=hash_token("r2"), expires=past),
    ])
    db_session.commit()

    removed = token_cleanup.purge_expired_tokens(db_session)
    db_session.commit()

    assert removed == {"verification": 1, "password_reset": 2}
    remaining = db_session.execute(select(VerificationToken)).scalars().all()
    assert [t.identifier for t in remaining] == ["b@example.com"]
    assert db_session.execute(select(PasswordResetToken)).first() is None


@pytest.mark.unit
def test_register_adds_interval_job():
    scheduler = MagicMock()

    token_cleanup.register(scheduler)

    scheduler.add_interval_job.assert_called_once()
    args, kwargs = scheduler.add_interval_job.call_args
    assert args == (token_cleanup.run_token_cleanup, token_cleanup.JOB_ID)
    assert kwargs["minutes"] == 60
