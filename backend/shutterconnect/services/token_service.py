"""Issue, validate and consume single-use email tokens.

Tokens are 64 hex characters from `secrets.token_hex(32)`. Only their
SHA-256 hash is stored. Issuing a token for an email deletes every earlier
token of the same kind for that email, so at most one is live at a time.
"""
import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Generic, Optional, TypeVar, Union

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from shutterconnect.lib.logging import get_logger
from shutterconnect.lib.settings import settings
from shutterconnect.models.tokens import PasswordResetToken, VerificationToken

logger = get_logger(__name__)

TokenModel = TypeVar("TokenModel", VerificationToken, PasswordResetToken)


def generate_token() -> str:
    """Generate a random 64-character hex token."""
    return secrets.token_hex(32)


def hash_token(token: str) -> str:
    """Hash a token for storage and lookup."""
    return hashlib.sha256(token.encode()).hexdigest()


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (SQLite drops tzinfo) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class TokenService(Generic[TokenModel]):
    """Token lifecycle for one token table.

    Args:
        session: SQLAlchemy session
        model: VerificationToken or PasswordResetToken
        ttl: Lifetime of newly issued tokens
        cooldown: Minimum age of the newest token before another may be issued
    """

    def __init__(
        self,
        session: Session,
        model: type[TokenModel],
        ttl: timedelta,
        cooldown: timedelta,
    ):
        self.session = session
        self.model = model
        self.ttl = ttl
        self.cooldown = cooldown
        # VerificationToken keys on `identifier`, PasswordResetToken on `email`
        self._email_column = (
            model.identifier if model is VerificationToken else model.email
        )

    def _for_email(self, email: str):
        return select(self.model).where(self._email_column == email)

    def latest_for(self, email: str) -> Optional[TokenModel]:
        """Most recently issued token for an email."""
        stmt = self._for_email(email).order_by(self.model.created_at.desc()).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()

    def cooldown_remaining(self, email: str) -> Optional[timedelta]:
        """Time left before a new token may be issued, or None if allowed now."""
        latest = self.latest_for(email)
        if latest is None:
            return None
        elapsed = datetime.now(timezone.utc) - as_utc(latest.created_at)
        if elapsed < self.cooldown:
            return self.cooldown - elapsed
        return None

    def issue(self, email: str) -> str:
        """Replace any existing tokens for `email` with a fresh one.

        Flushes but does not commit; the caller owns the transaction.

        Returns:
            The raw token (to be emailed, never stored)
        """
        self.session.execute(delete(self.model).where(self._email_column == email))

        token = generate_token()
        now = datetime.now(timezone.utc)
        record = self.model(
            token_hash=hash_token(token),
            expires=now + self.ttl,
            created_at=now,
        )
        if self.model is VerificationToken:
            record.identifier = email
        else:
            record.email = email
        self.session.add(record)
        self.session.flush()

        logger.info(
            f"Issued {self.model.__tablename__} token",
            extra={"email": email, "expires": record.expires},
        )
        return token

    def find(self, token: str) -> Optional[TokenModel]:
        """Look up a token by its raw value."""
        stmt = select(self.model).where(self.model.token_hash == hash_token(token))
        return self.session.execute(stmt).scalar_one_or_none()

    @staticmethod
    def is_expired(record: Union[VerificationToken, PasswordResetToken]) -> bool:
        return as_utc(record.expires) < datetime.now(timezone.utc)

    def email_of(self, record: TokenModel) -> str:
        return record.identifier if self.model is VerificationToken else record.email

    def consume(self, record: TokenModel) -> None:
        """Delete a token after use."""
        self.session.delete(record)

    def revoke_all(self, email: str) -> None:
        """Delete every token of this kind for an email."""
        self.session.execute(delete(self.model).where(self._email_column == email))

    def purge_expired(self) -> int:
        """Delete expired tokens. Returns the number removed."""
        result = self.session.execute(
            delete(self.model).where(self.model.expires < datetime.now(timezone.utc))
        )
        return result.rowcount or 0


def verification_tokens(session: Session) -> TokenService[VerificationToken]:
    return TokenService(
        session,
        VerificationToken,
        ttl=timedelta(hours=settings.verification_token_ttl_hours),
        cooldown=timedelta(minutes=settings.verification_resend_cooldown_minutes),
    )


def password_reset_tokens(session: Session) -> TokenService[PasswordResetToken]:
    return TokenService(
        session,
        PasswordResetToken,
        ttl=timedelta(minutes=settings.reset_token_ttl_minutes),
        cooldown=timedelta(minutes=settings.reset_resend_cooldown_minutes),
    )
