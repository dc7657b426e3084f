"""Shift leave service - leave requests, approvals and yearly balances"""

import logging
from datetime import date
from typing import Iterable, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import DEFAULT_SHIFT_LEAVE_ALLOWANCE, LOW_BALANCE_THRESHOLD
from ...constants import NotificationType, RecordStatus, RequestStatus, ShiftStatus
from ...models import User
from ...models_scheduling import Shift, ShiftLeaveBalance, ShiftLeaveRequest
from ...services.notification_service import notify_user
from ...shared.datetime_utils import daterange, utcnow, weekday_code
from .repository import ShiftLeaveRepository
from .schemas import ApproveRejectRequest, BalanceUpdate, ManagerShiftLeaveCreate, ShiftLeaveRequestCreate

logger = logging.getLogger(__name__)


def count_affected_shifts(shifts: Iterable[Shift], start_date: date, end_date: date) -> int:
    """Number of (date, shift) pairs in the range on which the shift runs"""
    shifts = list(shifts)
    return sum(
        1 for day in daterange(start_date, end_date) for shift in shifts if weekday_code(day) in (shift.week_days or [])
    )


class ShiftLeaveService:
    """Service layer for shift leave"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ShiftLeaveRepository()

    # ------------------------------------------------------------------
    # Balances
    # ------------------------------------------------------------------

    def get_or_create_balance(self, user_id: int, year: int) -> ShiftLeaveBalance:
        """Balances are created on first use with the default yearly allowance"""
        balance = self.repo.get_balance(self.db, user_id, year)
        if balance:
            return balance

        balance = ShiftLeaveBalance(
            user_id=user_id,
            year=year,
            total_shifts=DEFAULT_SHIFT_LEAVE_ALLOWANCE,
            used_shifts=0,
            bonus_shifts=0,
        )
        self.db.add(balance)
        self.db.flush()
        logger.info(f"📊 Created {year} shift leave balance for user {user_id}")
        return balance

    def get_my_balance(self, user: User, year: Optional[int] = None) -> ShiftLeaveBalance:
        balance = self.get_or_create_balance(user.id, year or utcnow().year)
        self.db.commit()
        return balance

    def update_balance(self, user_id: int, data: BalanceUpdate, manager: User) -> ShiftLeaveBalance:
        if not self.repo.get_user(self.db, user_id):
            raise HTTPException(status_code=404, detail="Employee not found")

        balance = self.get_or_create_balance(user_id, data.year)
        balance.bonus_shifts = data.bonusShifts
        balance.bonus_reason = data.reason
        balance.updated_by = manager.id
        self.db.commit()
        logger.info(f"✅ User {user_id} {data.year} bonus shifts set to {data.bonusShifts}")
        return self.repo.get_balance(self.db, user_id, data.year)

    def get_branch_balances(self, branch_id: int, year: Optional[int] = None) -> list[ShiftLeaveBalance]:
        year = year or utcnow().year
        balances = [self.get_or_create_balance(u.id, year) for u in self.repo.get_branch_staff(self.db, branch_id)]
        self.db.commit()
        return balances

    def get_low_balance_employees(
        self, branch_id: int, year: Optional[int] = None, threshold: Optional[int] = None
    ) -> list[ShiftLeaveBalance]:
        threshold = LOW_BALANCE_THRESHOLD if threshold is None else threshold
        balances = self.get_branch_balances(branch_id, year)
        return sorted(
            (b for b in balances if b.available_shifts <= threshold),
            key=lambda b: (b.available_shifts, b.user_id),
        )

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def get_request(self, request_id: int) -> ShiftLeaveRequest:
        request = self.repo.get_request(self.db, request_id)
        if not request:
            raise HTTPException(status_code=404, detail="Shift leave request not found")
        return request

    def _build_request(self, employee: User, data: ShiftLeaveRequestCreate, created_by: int) -> ShiftLeaveRequest:
        shifts = self.repo.get_shifts(self.db, data.shiftIds)
        if len(shifts) != len(data.shiftIds):
            raise HTTPException(status_code=404, detail="One or more shifts were not found")
        if any(s.branch_id != employee.branch_id for s in shifts):
            raise HTTPException(status_code=400, detail="Shifts must belong to the employee's branch")

        if self.repo.find_overlapping_requests(
            self.db, employee.id, data.startDate, data.endDate, data.shiftIds
        ):
            raise HTTPException(
                status_code=409, detail="A pending or approved leave request already covers these shifts"
            )

        affected = count_affected_shifts(shifts, data.startDate, data.endDate)
        if affected == 0:
            raise HTTPException(status_code=400, detail="None of the selected shifts run in the selected dates")

        return ShiftLeaveRequest(
            employee_id=employee.id,
            start_date=data.startDate,
            end_date=data.endDate,
            reason=data.reason,
            request_status=RequestStatus.PENDING.value,
            affected_shifts_count=affected,
            requested_shifts=shifts,
            created_by=created_by,
        )

    def create_request(self, data: ShiftLeaveRequestCreate, user: User) -> ShiftLeaveRequest:
        logger.info(f"📥 Shift leave request from {user.username}: {data.startDate} - {data.endDate}")
        if data.startDate < utcnow().date():
            raise HTTPException(status_code=400, detail="Start date cannot be in the past")

        request = self._build_request(user, data, user.id)
        self.db.add(request)
        self.db.commit()
        logger.info(f"✅ Shift leave request {request.id} created ({request.affected_shifts_count} shifts)")
        return self.get_request(request.id)

    def add_for_employee(self, data: ManagerShiftLeaveCreate, manager: User) -> ShiftLeaveRequest:
        """Record leave on behalf of an employee, already approved"""
        employee = self.repo.get_user(self.db, data.employeeId)
        if not employee or employee.status != RecordStatus.ACTIVE.value:
            raise HTTPException(status_code=404, detail="Employee not found")

        request = self._build_request(employee, data, manager.id)
        request.is_manager_added = True
        self.db.add(request)
        self.db.flush()
        self._approve(request, manager, data.managerNote)
        self.db.commit()
        logger.info(f"✅ Manager {manager.username} added leave {request.id} for {employee.username}")
        return self.get_request(request.id)

    def cancel_request(self, request_id: int, user: User) -> dict:
        request = self.get_request(request_id)
        if request.employee_id != user.id:
            raise HTTPException(status_code=403, detail="You can only cancel your own requests")
        if request.request_status != RequestStatus.PENDING.value:
            raise HTTPException(status_code=400, detail="Only pending requests can be cancelled")

        request.status = RecordStatus.DELETED.value
        request.updated_by = user.id
        self.db.commit()
        return {"message": "Shift leave request cancelled"}

    def get_my_requests(self, user: User, year: Optional[int] = None) -> list[ShiftLeaveRequest]:
        return self.repo.list_requests(self.db, employee_id=user.id, year=year)

    def get_pending_requests(self, branch_id: Optional[int] = None) -> list[ShiftLeaveRequest]:
        return self.repo.list_requests(self.db, branch_id=branch_id, request_status=RequestStatus.PENDING.value)

    def get_all_requests(self, branch_id: Optional[int] = None, year: Optional[int] = None) -> list[ShiftLeaveRequest]:
        return self.repo.list_requests(self.db, branch_id=branch_id, year=year)

    def approve_reject(self, request_id: int, data: ApproveRejectRequest, manager: User) -> ShiftLeaveRequest:
        request = self.get_request(request_id)
        if request.request_status != RequestStatus.PENDING.value:
            raise HTTPException(
                status_code=400, detail=f"Request has already been {request.request_status.lower()}"
            )

        if data.requestStatus == RequestStatus.APPROVED:
            self._approve(request, manager, data.managerNote)
        else:
            request.request_status = RequestStatus.REJECTED.value
            request.manager_note = data.managerNote
            request.approved_by_id = manager.id
            request.approved_at = utcnow()
            request.updated_by = manager.id

        self.db.commit()
        logger.info(f"✅ Shift leave request {request_id} {data.requestStatus.value} by {manager.username}")
        return self.get_request(request_id)

    def _approve(self, request: ShiftLeaveRequest, manager: User, note: Optional[str]) -> None:
        balance = self.get_or_create_balance(request.employee_id, request.start_date.year)
        exceeded = balance.available_shifts < request.affected_shifts_count
        balance.used_shifts += request.affected_shifts_count
        balance.updated_by = manager.id

        request.request_status = RequestStatus.APPROVED.value
        request.manager_note = note
        request.approved_by_id = manager.id
        request.approved_at = utcnow()
        request.updated_by = manager.id

        leave_status = ShiftStatus.APPROVED_LEAVE_EXCEEDED if exceeded else ShiftStatus.APPROVED_LEAVE_VALID
        staff_shifts = self.repo.get_staff_shifts_in_leave(
            self.db,
            request.employee_id,
            request.start_date,
            request.end_date,
            [s.id for s in request.requested_shifts],
        )
        for staff_shift in staff_shifts:
            staff_shift.shift_status = leave_status.value
            staff_shift.updated_by = manager.id

        if exceeded:
            logger.warning(
                f"⚠️ Leave {request.id} exceeds the balance of user {request.employee_id} "
                f"({balance.available_shifts + request.affected_shifts_count} left before approval)"
            )

        notify_user(
            self.db,
            request.employee_id,
            NotificationType.LEAVE_APPROVED,
            "Shift leave approved",
            f"Your leave from {request.start_date} to {request.end_date} "
            f"({request.affected_shifts_count} shifts) was approved",
            created_by=manager.id,
        )
