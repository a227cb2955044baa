"""Authentication service for credential-based accounts.

Handles the account lifecycle:
1. Signup: create an unverified user and email a verification link
2. Email verification, and resending the link
3. Login: check the password and issue a JWT
4. Password reset via emailed single-use token
5. Profile and password changes for a signed-in user
"""
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from shutterconnect.api.middleware.error_handler import (
    BadRequestException,
    ForbiddenException,
    InternalErrorException,
    NotFoundException,
    TooManyRequestsException,
    UnauthorizedException,
)
from shutterconnect.lib.jwt import create_access_token
from shutterconnect.lib.logging import get_logger
from shutterconnect.lib.passwords import hash_password, verify_password
from shutterconnect.models.users import User, UserRole
from shutterconnect.services.email_service import EmailService, get_email_service
from shutterconnect.services.token_service import (
    password_reset_tokens,
    verification_tokens,
)

logger = get_logger(__name__)

RESEND_VERIFICATION_MESSAGE = (
    "If an account with this email exists, a verification email has been sent."
)
FORGOT_PASSWORD_MESSAGE = (
    "If an account with this email exists, a password reset link has been sent."
)


class AuthService:
    """Authentication service for signup, verification, login and resets.

    Each public method runs in its own transaction and commits on success.
    """

    def __init__(self, session: Session, email_service: Optional[EmailService] = None):
        """Initialize auth service with database session.

        Args:
            session: SQLAlchemy session for database operations
            email_service: Delivery for verification/reset emails
        """
        self.session = session
        self.email_service = email_service or get_email_service()
        self.verification_tokens = verification_tokens(session)
        self.reset_tokens = password_reset_tokens(session)

    def get_user_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email.lower())
        return self.session.execute(stmt).scalar_one_or_none()

    async def signup(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        role: UserRole = UserRole.CLIENT,
        phone: Optional[str] = None,
    ) -> User:
        """Create an unverified account and send the verification email.

        A failed email does not fail signup; the user can ask for a resend.

        Raises:
            BadRequestException: If the email is already registered
        """
        email = email.lower()
        if self.get_user_by_email(email):
            raise BadRequestException("User with this email already exists")

        user = User(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password=hash_password(password),
            phone=phone,
            role=role,
            is_verified=False,
            is_active=True,
        )
        self.session.add(user)
        self.session.flush()

        token = self.verification_tokens.issue(email)
        self.session.commit()
        self.session.refresh(user)

        logger.info("User signed up", extra={"user_id": str(user.id), "role": role.value})

        sent = await self.email_service.send_verification_email(email, token, first_name)
        if not sent:
            logger.warning(f"Verification email to {email} failed; signup continues")

        return user

    def verify_email(self, token: str) -> tuple[User, bool]:
        """Consume a verification token and mark its user verified.

        Returns:
            (user, already_verified)

        Raises:
            BadRequestException: Unknown or expired token
            NotFoundException: Token's user no longer exists
        """
        record = self.verification_tokens.find(token)
        if record is None:
            raise BadRequestException("Invalid or expired verification token")

        if self.verification_tokens.is_expired(record):
            self.verification_tokens.consume(record)
            self.session.commit()
            raise BadRequestException(
                "Verification token has expired. Please request a new one."
            )

        user = self.get_user_by_email(record.identifier)
        if user is None:
            raise NotFoundException("User")

        already_verified = user.is_verified
        user.is_verified = True
        self.verification_tokens.consume(record)
        self.session.commit()

        if not already_verified:
            logger.info("Email verified", extra={"user_id": str(user.id)})
        return user, already_verified

    async def resend_verification(self, email: str) -> str:
        """Send a fresh verification link.

        Unknown emails get the same response as known ones.

        Raises:
            BadRequestException: Already verified
            TooManyRequestsException: Last link is younger than the cooldown
            InternalErrorException: Email delivery failed
        """
        user = self.get_user_by_email(email)
        if user is None:
            return RESEND_VERIFICATION_MESSAGE

        if user.is_verified:
            raise BadRequestException("Email is already verified")

        remaining = self.verification_tokens.cooldown_remaining(user.email)
        if remaining is not None:
            raise TooManyRequestsException(
                "A verification email was recently sent. Please check your inbox "
                "or wait a few minutes before requesting another.",
                retry_after_seconds=int(remaining.total_seconds()),
            )

        token = self.verification_tokens.issue(user.email)
        sent = await self.email_service.send_verification_email(
            user.email, token, user.first_name
        )
        if not sent:
            self.session.rollback()
            raise InternalErrorException(
                "Failed to send verification email. Please try again later."
            )

        self.session.commit()
        return "Verification email sent successfully. Please check your inbox."

    async def forgot_password(self, email: str) -> str:
        """Email a password reset link.

        Unknown emails get the same response as known ones.

        Raises:
            TooManyRequestsException: Last link is younger than the cooldown
            InternalErrorException: Email delivery failed
        """
        user = self.get_user_by_email(email)
        if user is None:
            return FORGOT_PASSWORD_MESSAGE

        remaining = self.reset_tokens.cooldown_remaining(user.email)
        if remaining is not None:
            raise TooManyRequestsException(
                "A password reset email was recently sent. Please check your inbox "
                "or wait a few minutes before requesting another.",
                retry_after_seconds=int(remaining.total_seconds()),
            )

        token = self.reset_tokens.issue(user.email)
        sent = await self.email_service.send_password_reset_email(
            user.email, token, user.first_name
        )
        if not sent:
            self.session.rollback()
            raise InternalErrorException(
                "Failed to send password reset email. Please try again later."
            )

        self.session.commit()
        return FORGOT_PASSWORD_MESSAGE

    def reset_password(self, token: str, new_password: str) -> User:
        """Set a new password using a reset token.

        Raises:
            BadRequestException: Unknown or expired token
            NotFoundException: Token's user no longer exists
        """
        record = self.reset_tokens.find(token)
        if record is None:
            raise BadRequestException("Invalid or expired reset token")

        if self.reset_tokens.is_expired(record):
            self.reset_tokens.consume(record)
            self.session.commit()
            raise BadRequestException(
                "Reset token has expired. Please request a new password reset."
            )

        user = self.get_user_by_email(record.email)
        if user is None:
            raise NotFoundException("User")

        user.password = hash_password(new_password)
        self.reset_tokens.revoke_all(record.email)
        self.session.commit()

        logger.info("Password reset", extra={"user_id": str(user.id)})
        return user

    def validate_reset_token(self, token: str) -> bool:
        """Check a reset token without consuming it. Expired tokens are deleted."""
        record = self.reset_tokens.find(token)
        if record is None:
            return False
        if self.reset_tokens.is_expired(record):
            self.reset_tokens.consume(record)
            self.session.commit()
            return False
        return True

    def login(self, email: str, password: str) -> dict[str, Any]:
        """Check credentials and issue a JWT.

        Returns:
            {"access_token", "token_type", "user"}

        Raises:
            UnauthorizedException: Unknown email, no password set, or wrong password
            ForbiddenException: Unverified or deactivated account
        """
        user = self.get_user_by_email(email)
        if user is None or not user.password:
            raise UnauthorizedException("Invalid email or password")

        if not verify_password(password, user.password):
            raise UnauthorizedException("Invalid email or password")

        if not user.is_verified:
            raise ForbiddenException("Please verify your email before signing in")

        if not user.is_active:
            raise ForbiddenException("Account is deactivated")

        token = create_access_token(
            user_id=str(user.id),
            role=user.role.value,
            is_verified=user.is_verified,
        )
        logger.info("User logged in", extra={"user_id": str(user.id)})

        return {"access_token": token, "token_type": "bearer", "user": user}

    def change_password(self, user: User, current_password: str, new_password: str) -> None:
        """Change a signed-in user's password.

        Raises:
            BadRequestException: Current password is wrong
        """
        if not user.password or not verify_password(current_password, user.password):
            raise BadRequestException("Current password is incorrect")

        user.password = hash_password(new_password)
        self.session.commit()
        logger.info("Password changed", extra={"user_id": str(user.id)})

    def update_profile(self, user: User, **fields: Any) -> User:
        """Update first_name, last_name, phone and avatar."""
        for name in ("first_name", "last_name", "phone", "avatar"):
            if name in fields:
                setattr(user, name, fields[name])
        self.session.commit()
        self.session.refresh(user)
        return user
