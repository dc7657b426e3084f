"""Shift leave repository"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from ...constants import RecordStatus, RequestStatus, RoleName
from ...models import User
from ...models_scheduling import (
    ScheduledShift,
    Shift,
    ShiftLeaveBalance,
    ShiftLeaveRequest,
    StaffShift,
    shift_leave_request_shifts,
)

# Requests in these states hold their dates
OPEN_REQUEST_STATUSES = (RequestStatus.PENDING.value, RequestStatus.APPROVED.value)


def year_bounds(year: int) -> tuple[date, date]:
    return date(year, 1, 1), date(year, 12, 31)


class ShiftLeaveRepository:
    """Repository for shift leave requests and balances"""

    @staticmethod
    def get_user(db: Session, user_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_branch_staff(db: Session, branch_id: int) -> list[User]:
        return (
            db.query(User)
            .filter(
                User.branch_id == branch_id,
                User.status == RecordStatus.ACTIVE.value,
                User.role != RoleName.CUSTOMER.value,
            )
            .order_by(User.full_name.asc())
            .all()
        )

    @staticmethod
    def get_shifts(db: Session, shift_ids: list[int]) -> list[Shift]:
        return (
            db.query(Shift)
            .filter(Shift.id.in_(shift_ids), Shift.status != RecordStatus.DELETED.value)
            .all()
        )

    @staticmethod
    def get_balance(db: Session, user_id: int, year: int) -> Optional[ShiftLeaveBalance]:
        return (
            db.query(ShiftLeaveBalance)
            .options(joinedload(ShiftLeaveBalance.user))
            .filter(ShiftLeaveBalance.user_id == user_id, ShiftLeaveBalance.year == year)
            .first()
        )

    @staticmethod
    def request_query(db: Session):
        return (
            db.query(ShiftLeaveRequest)
            .options(
                joinedload(ShiftLeaveRequest.employee),
                joinedload(ShiftLeaveRequest.approved_by),
                selectinload(ShiftLeaveRequest.requested_shifts),
            )
            .filter(ShiftLeaveRequest.status == RecordStatus.ACTIVE.value)
        )

    @classmethod
    def get_request(cls, db: Session, request_id: int) -> Optional[ShiftLeaveRequest]:
        return cls.request_query(db).filter(ShiftLeaveRequest.id == request_id).first()

    @classmethod
    def list_requests(
        cls,
        db: Session,
        employee_id: Optional[int] = None,
        branch_id: Optional[int] = None,
        year: Optional[int] = None,
        request_status: Optional[str] = None,
    ) -> list[ShiftLeaveRequest]:
        query = cls.request_query(db)
        if employee_id is not None:
            query = query.filter(ShiftLeaveRequest.employee_id == employee_id)
        if branch_id is not None:
            query = query.join(User, User.id == ShiftLeaveRequest.employee_id).filter(User.branch_id == branch_id)
        if year is not None:
            first_day, last_day = year_bounds(year)
            query = query.filter(
                ShiftLeaveRequest.start_date >= first_day, ShiftLeaveRequest.start_date <= last_day
            )
        if request_status is not None:
            query = query.filter(ShiftLeaveRequest.request_status == request_status)
        return query.order_by(ShiftLeaveRequest.created_at.desc(), ShiftLeaveRequest.id.desc()).all()

    @staticmethod
    def find_overlapping_requests(
        db: Session, employee_id: int, start_date: date, end_date: date, shift_ids: list[int]
    ) -> list[ShiftLeaveRequest]:
        return (
            db.query(ShiftLeaveRequest)
            .join(shift_leave_request_shifts, shift_leave_request_shifts.c.request_id == ShiftLeaveRequest.id)
            .filter(
                ShiftLeaveRequest.employee_id == employee_id,
                ShiftLeaveRequest.status == RecordStatus.ACTIVE.value,
                ShiftLeaveRequest.request_status.in_(OPEN_REQUEST_STATUSES),
                ShiftLeaveRequest.start_date <= end_date,
                ShiftLeaveRequest.end_date >= start_date,
                shift_leave_request_shifts.c.shift_id.in_(shift_ids),
            )
            .distinct()
            .all()
        )

    @staticmethod
    def has_approved_leave(db: Session, employee_id: int, shift_id: int, on_date: date) -> bool:
        return (
            db.query(ShiftLeaveRequest.id)
            .join(shift_leave_request_shifts, shift_leave_request_shifts.c.request_id == ShiftLeaveRequest.id)
            .filter(
                ShiftLeaveRequest.employee_id == employee_id,
                ShiftLeaveRequest.status == RecordStatus.ACTIVE.value,
                ShiftLeaveRequest.request_status == RequestStatus.APPROVED.value,
                ShiftLeaveRequest.start_date <= on_date,
                ShiftLeaveRequest.end_date >= on_date,
                shift_leave_request_shifts.c.shift_id == shift_id,
            )
            .first()
            is not None
        )

    @staticmethod
    def get_staff_shifts_in_leave(
        db: Session, employee_id: int, start_date: date, end_date: date, shift_ids: list[int]
    ) -> list[StaffShift]:
        return (
            db.query(StaffShift)
            .join(ScheduledShift, ScheduledShift.id == StaffShift.scheduled_shift_id)
            .filter(
                StaffShift.staff_id == employee_id,
                StaffShift.status == RecordStatus.ACTIVE.value,
                ScheduledShift.shift_id.in_(shift_ids),
                ScheduledShift.date >= start_date,
                ScheduledShift.date <= end_date,
            )
            .all()
        )
