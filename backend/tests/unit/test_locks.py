"""
Tests for advisory lock helpers.
"""
from unittest.mock import MagicMock

import pytest

from shutterconnect.lib.locks import (
    acquire_xact_lock,
    get_lock_key,
    release_lock,
    try_acquire_lock,
)


def _session(dialect: str) -> MagicMock:
    session = MagicMock()
    session.get_bind.return_value.dialect.name = dialect
    return session


@pytest.mark.unit
def test_get_lock_key_consistent():
    key1 = get_lock_key("booking:abc:2026-01-01")
    key2 = get_lock_key("booking:abc:2026-01-01")

    assert key1 == key2
    assert isinstance(key1, int)
    assert 0 <= key1 <= 2**63 - 1


@pytest.mark.unit
def test_get_lock_key_unique():
    assert get_lock_key("booking:abc:2026-01-01") != get_lock_key("booking:abc:2026-01-02")


@pytest.mark.unit
def test_acquire_xact_lock_on_postgres():
    session = _session("postgresql")

    assert acquire_xact_lock(session, "booking:abc:2026-01-01") is True

    statement, params = session.execute.call_args[0]
    assert "pg_advisory_xact_lock" in str(statement)
    assert params == {"lock_key": get_lock_key("booking:abc:2026-01-01")}


@pytest.mark.unit
def test_acquire_xact_lock_noop_elsewhere():
    session = _session("sqlite")

    assert acquire_xact_lock(session, "booking:abc:2026-01-01") is False
    session.execute.assert_not_called()


@pytest.mark.unit
def test_try_acquire_lock_success():
    session = _session("postgresql")
    session.execute.return_value.scalar.return_value = True

    assert try_acquire_lock(session, "job:token_cleanup") is True
    assert "pg_try_advisory_lock" in str(session.execute.call_args[0][0])


@pytest.mark.unit
def test_try_acquire_lock_failure():
    session = _session("postgresql")
    session.execute.return_value.scalar.return_value = False

    assert try_acquire_lock(session, "job:token_cleanup") is False


@pytest.mark.unit
def test_try_acquire_lock_without_advisory_locks():
    session = _session("sqlite")

    assert try_acquire_lock(session, "job:token_cleanup") is True
    session.execute.assert_not_called()


@pytest.mark.unit
def test_release_lock():
    session = _session("postgresql")

    release_lock(session, "job:token_cleanup")

    assert "pg_advisory_unlock" in str(session.execute.call_args[0][0])
