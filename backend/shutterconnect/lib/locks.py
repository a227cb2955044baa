"""
Postgres advisory locks for serializing check-then-insert sequences.

Lock keys are derived from a string name so every process computes the
same key for the same resource.
"""
import hashlib

from sqlalchemy import text
from sqlalchemy.orm import Session

from shutterconnect.lib.logging import get_logger

logger = get_logger(__name__)


def get_lock_key(name: str) -> int:
    """
    Generate a consistent integer lock key for pg_advisory_xact_lock.

    Args:
        name: Resource identifier string

    Returns:
        Positive integer within the Postgres bigint range
    """
    hash_bytes = hashlib.sha256(name.encode()).digest()[:8]
    lock_key = int.from_bytes(hash_bytes, byteorder='big', signed=False)
    # Fold into signed int64 range (Postgres bigint)
    if lock_key > 2**63 - 1:
        lock_key = lock_key - 2**64
    return abs(lock_key)


def acquire_xact_lock(db: Session, name: str) -> bool:
    """
    Block until the transaction-scoped advisory lock for `name` is held.

    The lock is released automatically on commit or rollback. Backends
    without advisory locks (SQLite in development and tests) already
    serialize writers, so this is a no-op there.

    Returns:
        True if an advisory lock was taken, False if the dialect has none
    """
    if db.get_bind().dialect.name != "postgresql":
        return False

    lock_key = get_lock_key(name)
    db.execute(
        text("SELECT pg_advisory_xact_lock(:lock_key)"),
        {"lock_key": lock_key},
    )
    logger.debug(f"Acquired advisory lock {lock_key} for {name}")
    return True


def try_acquire_lock(db: Session, name: str) -> bool:
    """
    Try to take the session-level advisory lock for `name` without waiting.

    Must be paired with release_lock. Always succeeds on dialects without
    advisory locks.
    """
    if db.get_bind().dialect.name != "postgresql":
        return True

    result = db.execute(
        text("SELECT pg_try_advisory_lock(:lock_key)"),
        {"lock_key": get_lock_key(name)},
    )
    return bool(result.scalar())


def release_lock(db: Session, name: str) -> None:
    """Release a lock taken with try_acquire_lock."""
    if db.get_bind().dialect.name != "postgresql":
        return

    db.execute(
        text("SELECT pg_advisory_unlock(:lock_key)"),
        {"lock_key": get_lock_key(name)},
    )
