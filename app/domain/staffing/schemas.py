"""Staffing domain schemas - staff shifts, publishing and feedback"""

from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...constants import RequestStatus, ShiftStatus

# Statuses a manager may set directly, the rest are reached through publishing and feedback
MANUAL_SHIFT_STATUSES = (ShiftStatus.DRAFT, ShiftStatus.PUBLISHED)


class StaffShiftCreate(BaseModel):
    staffId: int
    scheduledShiftId: int
    note: Optional[str] = Field(None, max_length=500)
    shiftStatus: Optional[ShiftStatus] = None

    @field_validator("shiftStatus")
    @classmethod
    def check_status(cls, v):
        if v is not None and v not in MANUAL_SHIFT_STATUSES:
            raise ValueError("Staff shifts can only be created as DRAFT or PUBLISHED")
        return v


class StaffShiftBulkCreate(BaseModel):
    assignments: list[StaffShiftCreate] = Field(..., min_length=1)


class StaffShiftUpdate(BaseModel):
    note: Optional[str] = Field(None, max_length=500)
    shiftStatus: Optional[ShiftStatus] = None

    @field_validator("shiftStatus")
    @classmethod
    def check_status(cls, v):
        if v is not None and v not in MANUAL_SHIFT_STATUSES:
            raise ValueError("Staff shift status can only be set to DRAFT or PUBLISHED")
        return v


class StaffShiftResponse(BaseModel):
    id: int
    staffId: int
    staffName: Optional[str] = None
    staffRole: Optional[str] = None
    scheduledShiftId: int
    shiftId: int
    shiftName: str
    date: date
    startTime: time
    endTime: time
    branchId: int
    note: Optional[str] = None
    shiftStatus: str
    status: str
    createdAt: datetime

    @classmethod
    def from_model(cls, staff_shift) -> "StaffShiftResponse":
        scheduled = staff_shift.scheduled_shift
        shift = scheduled.shift
        staff = staff_shift.staff
        return cls(
            id=staff_shift.id,
            staffId=staff_shift.staff_id,
            staffName=staff.full_name if staff else None,
            staffRole=staff.role if staff else None,
            scheduledShiftId=scheduled.id,
            shiftId=shift.id,
            shiftName=shift.name,
            date=scheduled.date,
            startTime=shift.start_time,
            endTime=shift.end_time,
            branchId=scheduled.branch_id,
            note=staff_shift.note,
            shiftStatus=staff_shift.shift_status,
            status=staff_shift.status,
            createdAt=staff_shift.created_at,
        )


class PublishShiftsRequest(BaseModel):
    startDate: date
    endDate: date
    branchId: int

    @model_validator(mode="after")
    def check_range(self):
        if self.endDate < self.startDate:
            raise ValueError("End date must not be before start date")
        return self


class PublishShiftsResponse(BaseModel):
    totalShifts: int
    publishedShifts: int
    conflictedStaffShifts: int
    publishedAt: datetime
    message: str
    staffShifts: list[StaffShiftResponse]


class FeedbackRespond(BaseModel):
    staffShiftId: int
    responseStatus: RequestStatus
    reason: Optional[str] = Field(None, max_length=1000)

    @model_validator(mode="after")
    def check_response(self):
        if self.responseStatus == RequestStatus.PENDING:
            raise ValueError("Response must be APPROVED or REJECTED")
        if self.responseStatus == RequestStatus.REJECTED and not (self.reason and self.reason.strip()):
            raise ValueError("A reason is required when rejecting a shift")
        return self


class FeedbackResponse(BaseModel):
    id: int
    staffShiftId: int
    staffId: int
    staffName: Optional[str] = None
    responseStatus: str
    reason: Optional[str] = None
    responseDate: Optional[datetime] = None
    publishedDate: datetime
    deadline: datetime
    staffShift: StaffShiftResponse

    @classmethod
    def from_model(cls, feedback) -> "FeedbackResponse":
        return cls(
            id=feedback.id,
            staffShiftId=feedback.staff_shift_id,
            staffId=feedback.staff_id,
            staffName=feedback.staff.full_name if feedback.staff else None,
            responseStatus=feedback.response_status,
            reason=feedback.reason,
            responseDate=feedback.response_date,
            publishedDate=feedback.published_date,
            deadline=feedback.deadline,
            staffShift=StaffShiftResponse.from_model(feedback.staff_shift),
        )
