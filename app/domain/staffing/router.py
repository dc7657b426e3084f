"""Staffing routers - staff shift assignment and shift publishing"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_manager, get_current_user
from ...database import get_db
from ...models import User
from ...schemas import UserResponse
from ...shared.responses import ok, page
from .schemas import (
    FeedbackResponse,
    FeedbackRespond,
    PublishShiftsRequest,
    StaffShiftBulkCreate,
    StaffShiftCreate,
    StaffShiftResponse,
    StaffShiftUpdate,
)
from .service import StaffingService

router = APIRouter(prefix="/staff-shifts", tags=["Staff shifts"])
publish_router = APIRouter(prefix="/publish-shifts", tags=["Publish shifts"])


def get_staffing_service(db: Session = Depends(get_db)) -> StaffingService:
    return StaffingService(db)


# ============================================================================
# STAFF SHIFTS
# ============================================================================


@router.get("")
async def list_staff_shifts(
    page_number: int = Query(0, ge=0, alias="page"),
    size: int = Query(20, ge=1, le=200),
    startDate: Optional[date] = Query(None),
    endDate: Optional[date] = Query(None),
    branchId: Optional[int] = Query(None),
    staffId: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    service: StaffingService = Depends(get_staffing_service),
):
    items, total = service.list_staff_shifts(
        page_number, size, start_date=startDate, end_date=endDate, branch_id=branchId, staff_id=staffId
    )
    return ok(page([StaffShiftResponse.from_model(s) for s in items], page_number, size, total))


@router.get("/grouped")
async def get_grouped_staff_shifts(
    startDate: Optional[date] = Query(None),
    endDate: Optional[date] = Query(None),
    branchId: Optional[int] = Query(None),
    staffId: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    service: StaffingService = Depends(get_staffing_service),
):
    return ok(service.get_grouped(start_date=startDate, end_date=endDate, branch_id=branchId, staff_id=staffId))


@router.post("")
async def assign_staff(
    data: StaffShiftCreate,
    current_user: User = Depends(get_current_manager),
    service: StaffingService = Depends(get_staffing_service),
):
    staff_shift = service.assign_staff(data, current_user)
    return ok(StaffShiftResponse.from_model(staff_shift), "Staff assigned successfully")


@router.post("/bulk")
async def bulk_assign_staff(
    data: StaffShiftBulkCreate,
    current_user: User = Depends(get_current_manager),
    service: StaffingService = Depends(get_staffing_service),
):
    created = service.bulk_assign(data, current_user)
    return ok([StaffShiftResponse.from_model(s) for s in created], f"{len(created)} staff shifts created")


@router.get("/{staff_shift_id}")
async def get_staff_shift(
    staff_shift_id: int,
    current_user: User = Depends(get_current_user),
    service: StaffingService = Depends(get_staffing_service),
):
    return ok(StaffShiftResponse.from_model(service.get_staff_shift(staff_shift_id)))


@router.put("/{staff_shift_id}")
async def update_staff_shift(
    staff_shift_id: int,
    data: StaffShiftUpdate,
    current_user: User = Depends(get_current_manager),
    service: StaffingService = Depends(get_staffing_service),
):
    staff_shift = service.update_staff_shift(staff_shift_id, data, current_user)
    return ok(StaffShiftResponse.from_model(staff_shift), "Staff shift updated successfully")


@router.delete("/{staff_shift_id}")
async def delete_staff_shift(
    staff_shift_id: int,
    current_user: User = Depends(get_current_manager),
    service: StaffingService = Depends(get_staffing_service),
):
    return ok(service.delete_staff_shift(staff_shift_id, current_user), "Staff shift deleted")


@router.get("/{staff_shift_id}/replacement-staff")
async def get_replacement_staff(
    staff_shift_id: int,
    current_user: User = Depends(get_current_manager),
    service: StaffingService = Depends(get_staffing_service),
):
    return ok([UserResponse.from_model(u) for u in service.get_replacement_candidates(staff_shift_id)])


@router.put("/{staff_shift_id}/replace-staff/{new_staff_id}")
async def replace_staff_shift(
    staff_shift_id: int,
    new_staff_id: int,
    current_user: User = Depends(get_current_manager),
    service: StaffingService = Depends(get_staffing_service),
):
    staff_shift = service.replace_staff_shift(staff_shift_id, new_staff_id, current_user)
    return ok(StaffShiftResponse.from_model(staff_shift), "Staff replaced successfully")


# ============================================================================
# PUBLISHING AND FEEDBACK
# ============================================================================


@publish_router.post("")
async def publish_shifts(
    data: PublishShiftsRequest,
    current_user: User = Depends(get_current_manager),
    service: StaffingService = Depends(get_staffing_service),
):
    result = service.publish_shifts(data, current_user)
    return ok(result, result.message)


@publish_router.post("/respond")
async def respond_to_shift(
    data: FeedbackRespond,
    current_user: User = Depends(get_current_user),
    service: StaffingService = Depends(get_staffing_service),
):
    feedback = service.respond(data, current_user)
    return ok(FeedbackResponse.from_model(feedback), "Response recorded")


@publish_router.get("/my-pending-shifts")
async def get_my_pending_shifts(
    current_user: User = Depends(get_current_user),
    service: StaffingService = Depends(get_staffing_service),
):
    return ok([FeedbackResponse.from_model(f) for f in service.get_my_pending(current_user)])


@publish_router.get("/pending-feedbacks")
async def get_pending_feedbacks(
    branchId: Optional[int] = Query(None),
    current_user: User = Depends(get_current_manager),
    service: StaffingService = Depends(get_staffing_service),
):
    return ok([FeedbackResponse.from_model(f) for f in service.get_pending_feedbacks(branchId)])


@publish_router.get("/rejected-feedbacks")
async def get_rejected_feedbacks(
    branchId: Optional[int] = Query(None),
    current_user: User = Depends(get_current_manager),
    service: StaffingService = Depends(get_staffing_service),
):
    return ok([FeedbackResponse.from_model(f) for f in service.get_rejected_feedbacks(branchId)])


@publish_router.post("/replace-staff/{feedback_id}/{replacement_staff_id}")
async def replace_staff(
    feedback_id: int,
    replacement_staff_id: int,
    current_user: User = Depends(get_current_manager),
    service: StaffingService = Depends(get_staffing_service),
):
    staff_shift = service.replace_staff(feedback_id, replacement_staff_id, current_user)
    return ok(StaffShiftResponse.from_model(staff_shift), "Staff replaced successfully")
