"""Schedule configuration schemas - roster locks and per-branch scheduling rules"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...config import SHIFT_FEEDBACK_DEADLINE_HOURS


class ScheduleLockRequest(BaseModel):
    branchId: int
    startDate: date
    endDate: date
    lockReason: Optional[str] = Field(None, max_length=500)

    @model_validator(mode="after")
    def check_range(self):
        if self.endDate < self.startDate:
            raise ValueError("End date must not be before start date")
        return self


class ScheduleUnlockRequest(BaseModel):
    unlockReason: str = Field(..., max_length=500)

    @field_validator("unlockReason")
    @classmethod
    def check_reason(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("A reason is required to unlock a schedule")
        return v


class ScheduleLockResponse(BaseModel):
    id: int
    branchId: int
    branchName: Optional[str] = None
    startDate: date
    endDate: date
    lockStatus: str
    lockReason: Optional[str] = None
    lockedById: int
    lockedByName: Optional[str] = None
    lockedAt: datetime
    unlockedById: Optional[int] = None
    unlockedByName: Optional[str] = None
    unlockedAt: Optional[datetime] = None
    unlockReason: Optional[str] = None

    @classmethod
    def from_model(cls, lock) -> "ScheduleLockResponse":
        return cls(
            id=lock.id,
            branchId=lock.branch_id,
            branchName=lock.branch.name if lock.branch else None,
            startDate=lock.start_date,
            endDate=lock.end_date,
            lockStatus=lock.lock_status,
            lockReason=lock.lock_reason,
            lockedById=lock.locked_by_id,
            lockedByName=lock.locked_by.full_name if lock.locked_by else None,
            lockedAt=lock.locked_at,
            unlockedById=lock.unlocked_by_id,
            unlockedByName=lock.unlocked_by.full_name if lock.unlocked_by else None,
            unlockedAt=lock.unlocked_at,
            unlockReason=lock.unlock_reason,
        )


class BranchScheduleConfigRequest(BaseModel):
    branchId: int
    maxShiftsPerDay: Optional[int] = Field(None, ge=1)
    maxShiftsPerWeek: Optional[int] = Field(None, ge=1)
    responseDeadlineHours: Optional[int] = Field(None, ge=1, le=168)
    allowSelfShiftRegistration: bool = True

    @model_validator(mode="after")
    def check_limits(self):
        if self.maxShiftsPerDay and self.maxShiftsPerWeek and self.maxShiftsPerWeek < self.maxShiftsPerDay:
            raise ValueError("Weekly shift limit must not be below the daily limit")
        return self


class BranchScheduleConfigResponse(BaseModel):
    id: Optional[int] = None  # None while the branch runs on defaults
    branchId: int
    branchName: Optional[str] = None
    maxShiftsPerDay: Optional[int] = None
    maxShiftsPerWeek: Optional[int] = None
    responseDeadlineHours: int
    allowSelfShiftRegistration: bool

    @classmethod
    def from_model(cls, config, branch) -> "BranchScheduleConfigResponse":
        if config is None:
            return cls(
                branchId=branch.id,
                branchName=branch.name,
                responseDeadlineHours=SHIFT_FEEDBACK_DEADLINE_HOURS,
                allowSelfShiftRegistration=True,
            )
        return cls(
            id=config.id,
            branchId=config.branch_id,
            branchName=branch.name,
            maxShiftsPerDay=config.max_shifts_per_day,
            maxShiftsPerWeek=config.max_shifts_per_week,
            responseDeadlineHours=config.response_deadline_hours or SHIFT_FEEDBACK_DEADLINE_HOURS,
            allowSelfShiftRegistration=config.allow_self_shift_registration,
        )
