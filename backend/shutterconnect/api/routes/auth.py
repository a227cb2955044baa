"""Authentication routes.

Provides credential-based authentication endpoints:
- POST /auth/signup: Create an account and send a verification email
- POST|GET /auth/verify-email: Confirm an email address
- POST /auth/resend-verification: Send a new verification link
- POST /auth/login: Exchange email + password for a JWT
- POST /auth/forgot-password: Send a password reset link
- POST /auth/reset-password: Set a new password with a reset token
- GET /auth/reset-password: Check whether a reset token is still valid
- POST /auth/password-strength: Score a candidate password
"""
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from sqlalchemy.orm import Session

from shutterconnect.api.schemas import MessageResponse, UserResponse, validate_phone
from shutterconnect.lib.db import get_db
from shutterconnect.lib.passwords import check_password_strength, validate_password_rules
from shutterconnect.models.users import UserRole
from shutterconnect.services.auth_service import AuthService


router = APIRouter(prefix="/auth", tags=["Authentication"])


# Request/Response Models
class SignupRequest(BaseModel):
    """Signup payload."""
    first_name: str = Field(..., min_length=2, max_length=50)
    last_name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str
    confirm_password: str
    phone: Optional[str] = None
    role: Literal["CLIENT", "PHOTOGRAPHER"] = Field(..., description="Account type")
    agree_to_terms: bool

    @field_validator("password")
    @classmethod
    def password_rules(cls, v: str) -> str:
        return validate_password_rules(v)

    @field_validator("phone")
    @classmethod
    def phone_format(cls, v: Optional[str]) -> Optional[str]:
        return validate_phone(v)

    @field_validator("agree_to_terms")
    @classmethod
    def must_agree(cls, v: bool) -> bool:
        if not v:
            raise ValueError("You must agree to the terms and conditions")
        return v

    @model_validator(mode="after")
    def passwords_match(self) -> "SignupRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class SignupResponse(BaseModel):
    message: str
    user: UserResponse


class TokenRequest(BaseModel):
    token: str = Field(..., min_length=1)


class VerifyEmailResponse(BaseModel):
    message: str
    user: Optional[UserResponse] = None


class EmailRequest(BaseModel):
    email: EmailStr


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """JWT access token plus the signed-in user."""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    password: str
    confirm_password: str

    @field_validator("password")
    @classmethod
    def password_rules(cls, v: str) -> str:
        return validate_password_rules(v)

    @model_validator(mode="after")
    def passwords_match(self) -> "ResetPasswordRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class ResetTokenStatus(BaseModel):
    valid: bool
    message: str


class PasswordStrengthRequest(BaseModel):
    password: str


class PasswordStrengthResponse(BaseModel):
    score: int
    strength: str
    checks: dict[str, bool]
    is_valid: bool


# Dependency to get AuthService
def get_auth_service(
    db: Session = Depends(get_db)
) -> AuthService:
    """Get AuthService instance with database session."""
    return AuthService(db)


# Routes
@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign up",
)
async def signup(
    request: SignupRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Create an unverified account and email a verification link.

    Raises:
        400: Invalid input or email already registered
    """
    user = await auth_service.signup(
        first_name=request.first_name,
        last_name=request.last_name,
        email=request.email,
        password=request.password,
        role=UserRole(request.role),
        phone=request.phone,
    )
    return SignupResponse(
        message="Account created successfully. Please check your email to verify your account.",
        user=UserResponse.model_validate(user),
    )


def _verify(token: str, auth_service: AuthService) -> VerifyEmailResponse:
    user, already_verified = auth_service.verify_email(token)
    if already_verified:
        return VerifyEmailResponse(message="Email is already verified")
    return VerifyEmailResponse(
        message="Email verified successfully",
        user=UserResponse.model_validate(user),
    )


@router.post("/verify-email", response_model=VerifyEmailResponse, summary="Verify email")
def verify_email(
    request: TokenRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Consume a verification token.

    Raises:
        400: Unknown or expired token
        404: User no longer exists
    """
    return _verify(request.token, auth_service)


@router.get("/verify-email", response_model=VerifyEmailResponse, summary="Verify email via link")
def verify_email_link(
    token: str = Query(..., min_length=1, description="Verification token from the email"),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Same as POST /auth/verify-email, for links opened straight from the email."""
    return _verify(token, auth_service)


@router.post("/resend-verification", response_model=MessageResponse)
async def resend_verification(
    request: EmailRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Send a new verification link.

    Raises:
        400: Email already verified
        429: A link was sent too recently
        500: Email delivery failed
    """
    message = await auth_service.resend_verification(request.email)
    return MessageResponse(message=message)


@router.post("/login", response_model=LoginResponse, summary="Log in")
def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Exchange credentials for a JWT access token.

    Raises:
        401: Unknown email or wrong password
        403: Email not verified, or account deactivated
    """
    result = auth_service.login(request.email, request.password)
    return LoginResponse(
        access_token=result["access_token"],
        token_type=result["token_type"],
        user=UserResponse.model_validate(result["user"]),
    )


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    request: EmailRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Email a password reset link.

    Raises:
        429: A link was sent too recently
        500: Email delivery failed
    """
    message = await auth_service.forgot_password(request.email)
    return MessageResponse(message=message)


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(
    request: ResetPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Set a new password using a reset token.

    Raises:
        400: Unknown or expired token, or invalid password
        404: User no longer exists
    """
    auth_service.reset_password(request.token, request.password)
    return MessageResponse(message="Password reset successfully")


@router.get("/reset-password", response_model=ResetTokenStatus)
def validate_reset_token(
    token: str = Query(..., min_length=1),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Check a reset token before showing the new-password form."""
    if auth_service.validate_reset_token(token):
        return ResetTokenStatus(valid=True, message="Reset token is valid")
    return ResetTokenStatus(valid=False, message="Invalid or expired reset token")


@router.post("/password-strength", response_model=PasswordStrengthResponse)
def password_strength(request: PasswordStrengthRequest):
    """Score a password for the signup form's strength meter."""
    return PasswordStrengthResponse(**check_password_strength(request.password))
