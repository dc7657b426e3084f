"""Scheduling domain schemas - shift templates, scheduled shifts and week copies"""

from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...constants import WEEK_DAYS, RecordStatus, RoleName
from ...shared.datetime_utils import shift_hours


class ShiftRequirementInput(BaseModel):
    role: RoleName
    quantity: int = Field(1, ge=1)


class ShiftCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    startTime: time
    endTime: time
    weekDays: list[str] = Field(..., min_length=1)
    branchId: int
    requirements: list[ShiftRequirementInput] = []

    @field_validator("weekDays")
    @classmethod
    def check_week_days(cls, v):
        days = [d.strip().upper() for d in v]
        invalid = [d for d in days if d not in WEEK_DAYS]
        if invalid:
            raise ValueError(f"Invalid week days: {', '.join(invalid)}")
        # Keep calendar order
        return [d for d in WEEK_DAYS if d in days]

    @model_validator(mode="after")
    def check_shift(self):
        if self.endTime <= self.startTime:
            raise ValueError("End time must be after start time")
        roles = [r.role for r in self.requirements]
        if len(roles) != len(set(roles)):
            raise ValueError("Each role can only be required once per shift")
        return self


class ShiftRequirementResponse(BaseModel):
    role: str
    quantity: int


class ShiftResponse(BaseModel):
    id: int
    name: str
    startTime: time
    endTime: time
    hours: float
    weekDays: list[str]
    branchId: int
    branchName: Optional[str] = None
    requirements: list[ShiftRequirementResponse]
    status: str

    @classmethod
    def from_model(cls, shift) -> "ShiftResponse":
        return cls(
            id=shift.id,
            name=shift.name,
            startTime=shift.start_time,
            endTime=shift.end_time,
            hours=shift_hours(shift.start_time, shift.end_time),
            weekDays=list(shift.week_days or []),
            branchId=shift.branch_id,
            branchName=shift.branch.name if shift.branch else None,
            requirements=[
                ShiftRequirementResponse(role=r.role, quantity=r.quantity) for r in shift.requirements
            ],
            status=shift.status,
        )


class ScheduledShiftCreate(BaseModel):
    shiftId: int
    branchId: int
    date: date


class ScheduledShiftResponse(BaseModel):
    id: int
    shiftId: int
    shiftName: str
    startTime: time
    endTime: time
    branchId: int
    branchName: Optional[str] = None
    date: date
    shiftStatus: str
    publishedAt: Optional[datetime] = None
    requirements: list[ShiftRequirementResponse]
    staffCount: int

    @classmethod
    def from_model(cls, scheduled) -> "ScheduledShiftResponse":
        shift = scheduled.shift
        return cls(
            id=scheduled.id,
            shiftId=scheduled.shift_id,
            shiftName=shift.name,
            startTime=shift.start_time,
            endTime=shift.end_time,
            branchId=scheduled.branch_id,
            branchName=scheduled.branch.name if scheduled.branch else None,
            date=scheduled.date,
            shiftStatus=scheduled.shift_status,
            publishedAt=scheduled.published_at,
            requirements=[
                ShiftRequirementResponse(role=r.role, quantity=r.quantity) for r in shift.requirements
            ],
            staffCount=sum(1 for s in scheduled.staff_shifts if s.status == RecordStatus.ACTIVE.value),
        )


class ScheduledShiftGroup(BaseModel):
    date: date
    shifts: list[ScheduledShiftResponse]


class CopyWeekPreviewRequest(BaseModel):
    branchId: int
    sourceStartDate: date
    targetStartDates: list[date] = Field(..., min_length=1)


class CopyWeekRequest(CopyWeekPreviewRequest):
    withStaff: bool = False


class CopyPreviewItem(BaseModel):
    sourceDate: date
    targetDate: date
    targetWeekStart: date
    shiftId: int
    shiftName: str
    startTime: time
    endTime: time


class CopyWeekResponse(BaseModel):
    totalCopied: int
    totalSkipped: int
    copiedWeeks: list[date]
    skippedDuplicates: list[str]
    message: str
