"""Scheduling routers - shift templates and scheduled shifts"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_manager, get_current_user
from ...database import get_db
from ...models import User
from ...shared.responses import ok
from .schemas import (
    CopyWeekPreviewRequest,
    CopyWeekRequest,
    ScheduledShiftCreate,
    ScheduledShiftResponse,
    ShiftCreate,
    ShiftResponse,
)
from .service import SchedulingService

shifts_router = APIRouter(prefix="/shifts", tags=["Shifts"])
router = APIRouter(prefix="/scheduled-shifts", tags=["Scheduled shifts"])


def get_scheduling_service(db: Session = Depends(get_db)) -> SchedulingService:
    return SchedulingService(db)


# ============================================================================
# SHIFT TEMPLATES
# ============================================================================


@shifts_router.get("")
async def get_shifts(
    branchId: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return ok([ShiftResponse.from_model(s) for s in service.get_shifts(branchId)])


@shifts_router.post("")
async def create_shift(
    data: ShiftCreate,
    current_user: User = Depends(get_current_manager),
    service: SchedulingService = Depends(get_scheduling_service),
):
    shift = service.create_shift(data, current_user)
    return ok(ShiftResponse.from_model(shift), "Shift created successfully")


@shifts_router.put("/{shift_id}")
async def update_shift(
    shift_id: int,
    data: ShiftCreate,
    current_user: User = Depends(get_current_manager),
    service: SchedulingService = Depends(get_scheduling_service),
):
    shift = service.update_shift(shift_id, data, current_user)
    return ok(ShiftResponse.from_model(shift), "Shift updated successfully")


@shifts_router.delete("/{shift_id}")
async def delete_shift(
    shift_id: int,
    current_user: User = Depends(get_current_manager),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return ok(service.delete_shift(shift_id, current_user), "Shift deleted")


# ============================================================================
# SCHEDULED SHIFTS
# ============================================================================


@router.get("")
async def get_scheduled_shifts(
    branchId: Optional[int] = Query(None),
    startDate: Optional[date] = Query(None),
    endDate: Optional[date] = Query(None),
    current_user: User = Depends(get_current_user),
    service: SchedulingService = Depends(get_scheduling_service),
):
    scheduled = service.get_scheduled_shifts(branchId, startDate, endDate)
    return ok([ScheduledShiftResponse.from_model(s) for s in scheduled])


@router.get("/grouped")
async def get_grouped_scheduled_shifts(
    branchId: Optional[int] = Query(None),
    startDate: Optional[date] = Query(None),
    endDate: Optional[date] = Query(None),
    current_user: User = Depends(get_current_user),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return ok(
        service.get_grouped_scheduled_shifts(branch_id=branchId, start_date=startDate, end_date=endDate)
    )


@router.post("")
async def create_scheduled_shift(
    data: ScheduledShiftCreate,
    current_user: User = Depends(get_current_manager),
    service: SchedulingService = Depends(get_scheduling_service),
):
    scheduled = service.create_scheduled_shift(data, current_user)
    return ok(ScheduledShiftResponse.from_model(scheduled), "Shift scheduled successfully")


@router.post("/copy-week/preview")
async def preview_copy_week(
    data: CopyWeekPreviewRequest,
    current_user: User = Depends(get_current_manager),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return ok(service.preview_copy_week(data))


@router.post("/copy-week")
async def copy_week(
    data: CopyWeekRequest,
    current_user: User = Depends(get_current_manager),
    service: SchedulingService = Depends(get_scheduling_service),
):
    result = service.copy_week(data, current_user)
    return ok(result, result.message)


@router.delete("/{scheduled_shift_id}")
async def delete_scheduled_shift(
    scheduled_shift_id: int,
    current_user: User = Depends(get_current_manager),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return ok(service.delete_scheduled_shift(scheduled_shift_id, current_user), "Scheduled shift deleted")
