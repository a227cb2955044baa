"""
Current-user account routes.
"""
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_validator, model_validator
from sqlalchemy.orm import Session

from shutterconnect.api.dependencies import get_current_user
from shutterconnect.api.schemas import MessageResponse, UserResponse, validate_phone
from shutterconnect.lib.db import get_db
from shutterconnect.lib.passwords import validate_password_rules
from shutterconnect.models.users import User
from shutterconnect.services.auth_service import AuthService


router = APIRouter(prefix="/users", tags=["users"])


class UpdateProfileRequest(BaseModel):
    first_name: str = Field(..., min_length=2, max_length=50)
    last_name: str = Field(..., min_length=2, max_length=50)
    phone: Optional[str] = None
    avatar: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def phone_format(cls, v: Optional[str]) -> Optional[str]:
        return validate_phone(v)

    @field_validator("avatar")
    @classmethod
    def avatar_url(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        if not v.startswith(("http://", "https://")):
            raise ValueError("Avatar must be a valid URL")
        return v


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str
    confirm_password: str

    @field_validator("new_password")
    @classmethod
    def password_rules(cls, v: str) -> str:
        return validate_password_rules(v)

    @model_validator(mode="after")
    def passwords_match(self) -> "ChangePasswordRequest":
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)) -> UserResponse:
    """The signed-in user's account."""
    return UserResponse.model_validate(current_user)


@router.put("/me", response_model=UserResponse)
def update_me(
    request: UpdateProfileRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserResponse:
    """Update name, phone and avatar."""
    user = AuthService(db).update_profile(current_user, **request.model_dump())
    return UserResponse.model_validate(user)


@router.post("/me/change-password", response_model=MessageResponse)
def change_password(
    request: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """
    Change password after confirming the current one.

    Raises:
        400: Current password wrong, or new password too weak
    """
    AuthService(db).change_password(
        current_user, request.current_password, request.new_password
    )
    return MessageResponse(message="Password changed successfully")
