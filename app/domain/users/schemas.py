"""User account schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...constants import RecordStatus, RoleName
from ...schemas import UserResponse
from ...shared.validators import validate_email, validate_phone

USERNAME_PATTERN = r"^[a-zA-Z0-9_.-]+$"


class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=100, pattern=USERNAME_PATTERN)
    password: str = Field(..., max_length=128)
    fullName: str = Field(..., max_length=255)
    email: Optional[str] = None
    phone: Optional[str] = None
    role: RoleName
    branchId: Optional[int] = None

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v):
        return v.lower()

    @field_validator("fullName")
    @classmethod
    def check_full_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Full name is required")
        return v

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v) or None

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        return validate_phone(v)

    @model_validator(mode="after")
    def check_branch(self):
        if self.branchId is None and self.role != RoleName.SYSTEM_ADMIN:
            raise ValueError(f"Branch is required for role {self.role.value}")
        return self


class UserUpdate(BaseModel):
    """Fields left out keep their current value"""

    fullName: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[RoleName] = None
    branchId: Optional[int] = None
    status: Optional[RecordStatus] = None

    @field_validator("fullName")
    @classmethod
    def check_full_name(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Full name is required")
        return v

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v) or None

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        return validate_phone(v)

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        if v == RecordStatus.DELETED:
            raise ValueError("Use the delete endpoint to remove a user")
        return v


class ChangePasswordRequest(BaseModel):
    currentPassword: str
    newPassword: str = Field(..., max_length=128)

    @model_validator(mode="after")
    def check_different(self):
        if self.currentPassword == self.newPassword:
            raise ValueError("New password must differ from the current password")
        return self


class UserDetailResponse(UserResponse):
    branchName: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, user) -> "UserDetailResponse":
        return cls(
            **UserResponse.from_model(user).model_dump(),
            branchName=user.branch.name if user.branch else None,
            createdAt=user.created_at,
            updatedAt=user.updated_at,
        )
