"""
SQLAlchemy 2.x engine, session factory and declarative base.

PostgreSQL is the production target. SQLite (`sqlite://`) is supported for
local runs and the test suite; it shares one in-memory connection across
threads so every session sees the same tables.
"""
from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import JSON, create_engine, event
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from shutterconnect.lib.settings import settings


class Base(DeclarativeBase):
    """Declarative base for every ShutterConnect table."""


# List and dict columns (specialties, deliverables, notification data)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _engine_options(database_url: str) -> dict[str, Any]:
    if database_url.startswith("sqlite"):
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    return {"pool_pre_ping": True, "pool_size": 5, "max_overflow": 10}


engine = create_engine(
    settings.database_url,
    echo=settings.debug,
    **_engine_options(settings.database_url),
)


if engine.dialect.name == "sqlite":
    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        # SQLite ignores ON DELETE CASCADE / SET NULL unless enforcement is on
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Services commit explicitly; objects stay usable after commit for serialization
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: one session per request, closed afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """
    Session for code outside a request, such as scheduled jobs.

    Commits on success and rolls back if the block raises.
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db() -> None:
    """Create any missing tables for the registered models."""
    import shutterconnect.models  # noqa: F401
    Base.metadata.create_all(bind=engine)
