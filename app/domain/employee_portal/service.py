"""Employee portal service - own schedule, working hours and shift self-registration"""

import logging
from datetime import date, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...constants import NotificationType, ScheduledShiftStatus, ShiftStatus
from ...models import User
from ...models_scheduling import ScheduledShift, StaffShift
from ...services.notification_service import notify_user
from ...shared.datetime_utils import shift_hours, utcnow
from ..schedule_config.service import ScheduleConfigService
from ..scheduling.repository import SchedulingRepository
from ..shift_leave.repository import ShiftLeaveRepository
from ..staffing.repository import StaffingRepository
from ..staffing.rules import count_registered, find_overlapping, required_quantity
from ..staffing.service import describe
from .schemas import AvailableShiftResponse, ShiftRegistration, WorkingHoursResponse

logger = logging.getLogger(__name__)

SCHEDULE_STATUSES = [
    ShiftStatus.PUBLISHED.value,
    ShiftStatus.APPROVED_LEAVE_VALID.value,
    ShiftStatus.APPROVED_LEAVE_EXCEEDED.value,
]


class EmployeePortalService:
    """Self-service operations of the signed-in employee"""

    def __init__(self, db: Session):
        self.db = db
        self.staffing_repo = StaffingRepository()
        self.schedule_repo = SchedulingRepository()
        self.leave_repo = ShiftLeaveRepository()
        self.config_service = ScheduleConfigService(db)

    def get_schedule(self, user: User, start_date: Optional[date], end_date: Optional[date]) -> list[StaffShift]:
        if start_date and end_date and end_date < start_date:
            raise HTTPException(status_code=400, detail="End date must not be before start date")
        return (
            self.staffing_repo.filter_staff_shifts(
                self.db, start_date=start_date, end_date=end_date, staff_id=user.id, statuses=SCHEDULE_STATUSES
            ).all()
        )

    def get_working_hours(self, user: User, days: int) -> WorkingHoursResponse:
        today = utcnow().date()
        start = today - timedelta(days=days - 1)
        staff_shifts = self.staffing_repo.filter_staff_shifts(
            self.db, start_date=start, end_date=today, staff_id=user.id, statuses=[ShiftStatus.PUBLISHED.value]
        ).all()

        total_hours = sum(
            shift_hours(s.scheduled_shift.shift.start_time, s.scheduled_shift.shift.end_time) for s in staff_shifts
        )
        return WorkingHoursResponse(
            totalHours=round(total_hours, 2),
            totalDays=len({s.scheduled_shift.date for s in staff_shifts}),
            period=f"{start.isoformat()} to {today.isoformat()}",
        )

    def registration_conflict(self, user: User, scheduled: ScheduledShift) -> Optional[str]:
        """First registration rule the employee fails for scheduled, None when registration is allowed"""
        if not self.config_service.allows_self_registration(scheduled.branch_id):
            return "Self registration is disabled for this branch"

        lock = self.config_service.get_active_lock(scheduled.branch_id, scheduled.date)
        if lock:
            return f"Schedule is locked from {lock.start_date.isoformat()} to {lock.end_date.isoformat()}"

        shift = scheduled.shift
        max_staff = required_quantity(shift, user.role)
        if not max_staff:
            return f"This shift does not require role {user.role}"

        if self.staffing_repo.find_assignment(self.db, user.id, scheduled.id):
            return "You are already registered for this shift"

        if count_registered(scheduled, user.role) >= max_staff:
            return "No slots left for your role"

        overlapping = find_overlapping(
            self.staffing_repo.get_staff_shifts_on_date(self.db, user.id, scheduled.date), shift
        )
        if overlapping:
            return f"Overlaps with {describe(overlapping.scheduled_shift)}"

        if self.leave_repo.has_approved_leave(self.db, user.id, shift.id, scheduled.date):
            return "You have approved leave for this shift"

        limit_problem = self.config_service.shift_limit_problem(user.id, scheduled.branch_id, scheduled.date)
        if limit_problem:
            return limit_problem

        return None

    def get_available_shifts(self, user: User) -> list[AvailableShiftResponse]:
        if user.branch_id is None:
            return []

        scheduled_shifts = self.schedule_repo.get_scheduled_shifts(
            self.db,
            branch_id=user.branch_id,
            start_date=utcnow().date(),
            shift_status=ScheduledShiftStatus.PUBLISHED.value,
        )
        available = []
        for scheduled in scheduled_shifts:
            reason = self.registration_conflict(user, scheduled)
            shift = scheduled.shift
            available.append(
                AvailableShiftResponse(
                    scheduledShiftId=scheduled.id,
                    shiftId=shift.id,
                    shiftName=shift.name,
                    date=scheduled.date,
                    startTime=shift.start_time,
                    endTime=shift.end_time,
                    branchId=scheduled.branch_id,
                    registeredCount=count_registered(scheduled, user.role),
                    maxStaff=required_quantity(shift, user.role),
                    canRegister=reason is None,
                    conflictReason=reason,
                )
            )
        return available

    def register(self, data: ShiftRegistration, user: User) -> StaffShift:
        scheduled = self.schedule_repo.get_scheduled_shift(self.db, data.scheduledShiftId)
        if not scheduled:
            raise HTTPException(status_code=404, detail="Scheduled shift not found")
        if scheduled.branch_id != user.branch_id:
            raise HTTPException(status_code=400, detail="You can only register for shifts of your branch")
        if scheduled.shift_status != ScheduledShiftStatus.PUBLISHED.value:
            raise HTTPException(status_code=400, detail="This shift is not open for registration")
        if scheduled.date < utcnow().date():
            raise HTTPException(status_code=400, detail="This shift has already taken place")

        reason = self.registration_conflict(user, scheduled)
        if reason:
            logger.warning(f"⚠️ {user.username} cannot register for {describe(scheduled)}: {reason}")
            raise HTTPException(status_code=400, detail=reason)

        staff_shift = StaffShift(
            staff_id=user.id,
            scheduled_shift_id=scheduled.id,
            note=data.note,
            shift_status=ShiftStatus.PUBLISHED.value,
            created_by=user.id,
        )
        self.db.add(staff_shift)
        self.db.flush()
        notify_user(
            self.db,
            user.id,
            NotificationType.SHIFT_ASSIGNED,
            "Shift registered",
            f"You are registered for {describe(scheduled)}",
            created_by=user.id,
        )
        self.db.commit()
        logger.info(f"✅ {user.username} registered for {describe(scheduled)}")
        return self.staffing_repo.get_staff_shift(self.db, staff_shift.id)
