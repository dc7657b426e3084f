"""Employee portal schemas"""

from datetime import date, time
from typing import Optional

from pydantic import BaseModel, Field


class WorkingHoursResponse(BaseModel):
    totalHours: float
    totalDays: int
    period: str


class AvailableShiftResponse(BaseModel):
    scheduledShiftId: int
    shiftId: int
    shiftName: str
    date: date
    startTime: time
    endTime: time
    branchId: int
    registeredCount: int
    maxStaff: int
    canRegister: bool
    conflictReason: Optional[str] = None


class ShiftRegistration(BaseModel):
    scheduledShiftId: int
    note: Optional[str] = Field(None, max_length=500)
