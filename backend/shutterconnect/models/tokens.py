"""
Short-lived credential models: email verification and password reset.

Only the SHA-256 hash of a token is stored; the raw token exists only in
the email sent to the user.
"""
from datetime import datetime, timezone
from uuid import uuid4, UUID

from sqlalchemy import String, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from shutterconnect.lib.db import Base


class VerificationToken(Base):
    """Email verification token. `identifier` is the lowercased email."""
    __tablename__ = "verification_tokens"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    identifier: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    token_hash: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    expires: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    @property
    def email(self) -> str:
        return self.identifier

    def __repr__(self) -> str:
        return f"<VerificationToken(identifier={self.identifier}, expires={self.expires})>"


class PasswordResetToken(Base):
    """Password reset token."""
    __tablename__ = "password_reset_tokens"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    token_hash: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    expires: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<PasswordResetToken(email={self.email}, expires={self.expires})>"
