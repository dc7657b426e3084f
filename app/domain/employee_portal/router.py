"""Employee portal router - self-service for the signed-in employee"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...shared.responses import ok
from ..staffing.schemas import StaffShiftResponse
from .schemas import ShiftRegistration
from .service import EmployeePortalService

router = APIRouter(prefix="/employee-portal", tags=["Employee portal"])


def get_portal_service(db: Session = Depends(get_db)) -> EmployeePortalService:
    return EmployeePortalService(db)


@router.get("/schedule")
async def get_my_schedule(
    startDate: Optional[date] = Query(None),
    endDate: Optional[date] = Query(None),
    current_user: User = Depends(get_current_user),
    service: EmployeePortalService = Depends(get_portal_service),
):
    staff_shifts = service.get_schedule(current_user, startDate, endDate)
    return ok([StaffShiftResponse.from_model(s) for s in staff_shifts])


@router.get("/working-hours/{days}")
async def get_working_hours(
    days: int = Path(..., ge=1, le=366),
    current_user: User = Depends(get_current_user),
    service: EmployeePortalService = Depends(get_portal_service),
):
    return ok(service.get_working_hours(current_user, days))


@router.get("/available-shifts")
async def get_available_shifts(
    current_user: User = Depends(get_current_user),
    service: EmployeePortalService = Depends(get_portal_service),
):
    return ok(service.get_available_shifts(current_user))


@router.post("/shift-registration")
async def register_for_shift(
    data: ShiftRegistration,
    current_user: User = Depends(get_current_user),
    service: EmployeePortalService = Depends(get_portal_service),
):
    staff_shift = service.register(data, current_user)
    return ok(StaffShiftResponse.from_model(staff_shift), "Registered for shift successfully")
