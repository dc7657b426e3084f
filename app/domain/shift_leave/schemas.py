"""Shift leave schemas - leave requests and yearly balances"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...constants import RequestStatus


class ShiftLeaveRequestCreate(BaseModel):
    startDate: Optional[date] = None
    endDate: Optional[date] = None
    shiftIds: list[int] = Field(..., min_length=1)
    reason: str = Field(..., max_length=500)

    @field_validator("shiftIds")
    @classmethod
    def dedupe_shifts(cls, v):
        return list(dict.fromkeys(v))

    @field_validator("reason")
    @classmethod
    def check_reason(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Reason is required")
        return v

    @model_validator(mode="after")
    def check_dates(self):
        if self.startDate is None or self.endDate is None:
            raise ValueError("Start date and end date are required")
        if self.startDate > self.endDate:
            raise ValueError("Start date must not be after end date")
        return self


class ManagerShiftLeaveCreate(ShiftLeaveRequestCreate):
    employeeId: int
    managerNote: Optional[str] = Field(None, max_length=500)


class ApproveRejectRequest(BaseModel):
    requestStatus: RequestStatus
    managerNote: Optional[str] = Field(None, max_length=500)

    @field_validator("requestStatus")
    @classmethod
    def check_decision(cls, v):
        if v == RequestStatus.PENDING:
            raise ValueError("Decision must be APPROVED or REJECTED")
        return v


class BalanceUpdate(BaseModel):
    year: int = Field(..., ge=2000, le=2100)
    bonusShifts: int = Field(..., ge=0)
    reason: Optional[str] = Field(None, max_length=500)


class LeaveShiftInfo(BaseModel):
    id: int
    name: str


class ShiftLeaveRequestResponse(BaseModel):
    id: int
    employeeId: int
    employeeName: Optional[str] = None
    startDate: date
    endDate: date
    shiftIds: list[int]
    shifts: list[LeaveShiftInfo]
    reason: str
    requestStatus: str
    managerNote: Optional[str] = None
    approvedById: Optional[int] = None
    approvedByName: Optional[str] = None
    approvedAt: Optional[datetime] = None
    isManagerAdded: bool
    affectedShiftsCount: int
    createdAt: datetime

    @classmethod
    def from_model(cls, request) -> "ShiftLeaveRequestResponse":
        shifts = sorted(request.requested_shifts, key=lambda s: s.id)
        return cls(
            id=request.id,
            employeeId=request.employee_id,
            employeeName=request.employee.full_name if request.employee else None,
            startDate=request.start_date,
            endDate=request.end_date,
            shiftIds=[s.id for s in shifts],
            shifts=[LeaveShiftInfo(id=s.id, name=s.name) for s in shifts],
            reason=request.reason,
            requestStatus=request.request_status,
            managerNote=request.manager_note,
            approvedById=request.approved_by_id,
            approvedByName=request.approved_by.full_name if request.approved_by else None,
            approvedAt=request.approved_at,
            isManagerAdded=request.is_manager_added,
            affectedShiftsCount=request.affected_shifts_count,
            createdAt=request.created_at,
        )


class BalanceResponse(BaseModel):
    id: int
    userId: int
    userName: Optional[str] = None
    role: Optional[str] = None
    year: int
    totalShifts: int
    usedShifts: int
    bonusShifts: int
    availableShifts: int
    bonusReason: Optional[str] = None

    @classmethod
    def from_model(cls, balance) -> "BalanceResponse":
        return cls(
            id=balance.id,
            userId=balance.user_id,
            userName=balance.user.full_name if balance.user else None,
            role=balance.user.role if balance.user else None,
            year=balance.year,
            totalShifts=balance.total_shifts,
            usedShifts=balance.used_shifts,
            bonusShifts=balance.bonus_shifts,
            availableShifts=balance.available_shifts,
            bonusReason=balance.bonus_reason,
        )
