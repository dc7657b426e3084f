from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1, max_length=128)


class UserResponse(BaseModel):
    id: int
    username: str
    fullName: str
    email: Optional[str] = None
    phone: Optional[str] = None
    role: str
    branchId: Optional[int] = None
    status: str

    @classmethod
    def from_model(cls, user) -> "UserResponse":
        return cls(
            id=user.id,
            username=user.username,
            fullName=user.full_name,
            email=user.email,
            phone=user.phone,
            role=user.role,
            branchId=user.branch_id,
            status=user.status,
        )


class LoginResponse(BaseModel):
    accessToken: str
    tokenType: str = "bearer"
    user: UserResponse


class NotificationResponse(BaseModel):
    id: int
    type: str
    title: str
    message: str
    isRead: bool
    createdAt: datetime

    @classmethod
    def from_model(cls, notification) -> "NotificationResponse":
        return cls(
            id=notification.id,
            type=notification.type,
            title=notification.title,
            message=notification.message,
            isRead=notification.is_read,
            createdAt=notification.created_at,
        )
