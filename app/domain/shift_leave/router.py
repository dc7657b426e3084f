"""Shift leave router - employee requests and manager approvals"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_manager, get_current_user
from ...database import get_db
from ...models import User
from ...shared.responses import ok
from .schemas import (
    ApproveRejectRequest,
    BalanceResponse,
    BalanceUpdate,
    ManagerShiftLeaveCreate,
    ShiftLeaveRequestCreate,
    ShiftLeaveRequestResponse,
)
from .service import ShiftLeaveService

router = APIRouter(prefix="/shift-leave-management", tags=["Shift leave"])


def get_shift_leave_service(db: Session = Depends(get_db)) -> ShiftLeaveService:
    return ShiftLeaveService(db)


# ============================================================================
# EMPLOYEE ENDPOINTS
# ============================================================================


@router.post("/requests")
async def create_request(
    data: ShiftLeaveRequestCreate,
    current_user: User = Depends(get_current_user),
    service: ShiftLeaveService = Depends(get_shift_leave_service),
):
    request = service.create_request(data, current_user)
    return ok(ShiftLeaveRequestResponse.from_model(request), "Shift leave request submitted")


@router.get("/my-requests")
async def get_my_requests(
    year: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    service: ShiftLeaveService = Depends(get_shift_leave_service),
):
    return ok([ShiftLeaveRequestResponse.from_model(r) for r in service.get_my_requests(current_user, year)])


@router.delete("/requests/{request_id}")
async def cancel_request(
    request_id: int,
    current_user: User = Depends(get_current_user),
    service: ShiftLeaveService = Depends(get_shift_leave_service),
):
    return ok(service.cancel_request(request_id, current_user), "Shift leave request cancelled")


@router.get("/my-balance")
async def get_my_balance(
    year: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    service: ShiftLeaveService = Depends(get_shift_leave_service),
):
    return ok(BalanceResponse.from_model(service.get_my_balance(current_user, year)))


# ============================================================================
# MANAGER ENDPOINTS
# ============================================================================


@router.get("/pending-requests")
async def get_pending_requests(
    branchId: Optional[int] = Query(None),
    current_user: User = Depends(get_current_manager),
    service: ShiftLeaveService = Depends(get_shift_leave_service),
):
    return ok([ShiftLeaveRequestResponse.from_model(r) for r in service.get_pending_requests(branchId)])


@router.get("/all-requests")
async def get_all_requests(
    branchId: Optional[int] = Query(None),
    year: Optional[int] = Query(None),
    current_user: User = Depends(get_current_manager),
    service: ShiftLeaveService = Depends(get_shift_leave_service),
):
    return ok([ShiftLeaveRequestResponse.from_model(r) for r in service.get_all_requests(branchId, year)])


@router.put("/requests/{request_id}/approve-reject")
async def approve_reject_request(
    request_id: int,
    data: ApproveRejectRequest,
    current_user: User = Depends(get_current_manager),
    service: ShiftLeaveService = Depends(get_shift_leave_service),
):
    request = service.approve_reject(request_id, data, current_user)
    return ok(ShiftLeaveRequestResponse.from_model(request), f"Request {request.request_status.lower()}")


@router.post("/requests/add-for-employee")
async def add_for_employee(
    data: ManagerShiftLeaveCreate,
    current_user: User = Depends(get_current_manager),
    service: ShiftLeaveService = Depends(get_shift_leave_service),
):
    request = service.add_for_employee(data, current_user)
    return ok(ShiftLeaveRequestResponse.from_model(request), "Shift leave added")


@router.put("/balance/{user_id}")
async def update_balance(
    user_id: int,
    data: BalanceUpdate,
    current_user: User = Depends(get_current_manager),
    service: ShiftLeaveService = Depends(get_shift_leave_service),
):
    balance = service.update_balance(user_id, data, current_user)
    return ok(BalanceResponse.from_model(balance), "Balance updated")


@router.get("/branch-balances")
async def get_branch_balances(
    branchId: int = Query(...),
    year: Optional[int] = Query(None),
    current_user: User = Depends(get_current_manager),
    service: ShiftLeaveService = Depends(get_shift_leave_service),
):
    return ok([BalanceResponse.from_model(b) for b in service.get_branch_balances(branchId, year)])


@router.get("/low-balance-employees")
async def get_low_balance_employees(
    branchId: int = Query(...),
    year: Optional[int] = Query(None),
    threshold: Optional[int] = Query(None, ge=0),
    current_user: User = Depends(get_current_manager),
    service: ShiftLeaveService = Depends(get_shift_leave_service),
):
    balances = service.get_low_balance_employees(branchId, year, threshold)
    return ok([BalanceResponse.from_model(b) for b in balances])
