"""Waitlist domain schemas"""

from datetime import datetime, timedelta
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.datetime_utils import format_time_remaining, format_wait_time, to_naive_utc, utcnow
from ...shared.validators import validate_customer_name, validate_email, validate_phone
from .status_display import get_status_display


class WaitlistCreate(BaseModel):
    """Guest request to wait for a table"""

    preferredStartTime: datetime
    preferredEndTime: datetime
    duration: int = Field(..., ge=1, le=6)  # hours
    guestCount: int = Field(..., ge=1, le=20)
    customerName: str
    customerPhone: str
    customerEmail: str
    notes: Optional[str] = Field(None, max_length=500)
    maxWaitHours: int = Field(..., ge=1, le=24)
    branchId: int

    @field_validator("preferredStartTime", "preferredEndTime")
    @classmethod
    def normalize_times(cls, v):
        return to_naive_utc(v)

    @field_validator("customerName")
    @classmethod
    def check_name(cls, v):
        return validate_customer_name(v)

    @field_validator("customerPhone")
    @classmethod
    def check_phone(cls, v):
        return validate_phone(v)

    @field_validator("customerEmail")
    @classmethod
    def check_email(cls, v):
        if not v or not v.strip():
            raise ValueError("Email is required")
        return validate_email(v)

    @model_validator(mode="after")
    def check_window(self):
        if self.preferredStartTime <= utcnow() + timedelta(minutes=1):
            raise ValueError("Preferred start time must be at least 1 minute in the future")
        if self.preferredEndTime <= self.preferredStartTime:
            raise ValueError("Preferred end time must be after the start time")
        return self


class WaitlistCreateResponse(BaseModel):
    waitlistId: int
    branchId: int
    preferredStartTime: datetime
    preferredEndTime: datetime
    duration: int
    guestCount: int
    customerName: str
    customerPhone: str
    customerEmail: str
    notes: Optional[str] = None
    maxWaitHours: int
    expiresAt: datetime
    waitlistStatus: str
    estimatedWaitTime: int
    formattedWaitTime: str
    message: str


class WaitlistResponse(BaseModel):
    id: int
    branchId: int
    branchName: Optional[str] = None
    preferredStartTime: datetime
    preferredEndTime: datetime
    duration: int
    guestCount: int
    customerName: str
    customerPhone: str
    customerEmail: str
    notes: Optional[str] = None
    maxWaitHours: int
    notificationSent: bool
    bookingCreatedId: Optional[int] = None
    expiresAt: datetime
    waitlistStatus: str
    estimatedWaitTime: int
    formattedWaitTime: str
    timeRemaining: str
    statusDisplay: dict
    status: str
    createdAt: datetime
    createdBy: Optional[int] = None
    updatedAt: datetime
    updatedBy: Optional[int] = None

    @classmethod
    def from_model(cls, entry) -> "WaitlistResponse":
        return cls(
            id=entry.id,
            branchId=entry.branch_id,
            branchName=entry.branch.name if entry.branch else None,
            preferredStartTime=entry.preferred_start_time,
            preferredEndTime=entry.preferred_end_time,
            duration=entry.duration,
            guestCount=entry.guest_count,
            customerName=entry.customer_name,
            customerPhone=entry.customer_phone,
            customerEmail=entry.customer_email,
            notes=entry.notes,
            maxWaitHours=entry.max_wait_hours,
            notificationSent=entry.notification_sent,
            bookingCreatedId=entry.booking_created_id,
            expiresAt=entry.expires_at,
            waitlistStatus=entry.waitlist_status,
            estimatedWaitTime=entry.estimated_wait_time,
            formattedWaitTime=format_wait_time(entry.estimated_wait_time),
            timeRemaining=format_time_remaining(entry.expires_at),
            statusDisplay=get_status_display(entry.waitlist_status),
            status=entry.status,
            createdAt=entry.created_at,
            createdBy=entry.created_by,
            updatedAt=entry.updated_at,
            updatedBy=entry.updated_by,
        )


class WaitlistProcessSummary(BaseModel):
    processed: int
    notified: int
    stillWaiting: int


class WaitlistCleanupSummary(BaseModel):
    expired: int
