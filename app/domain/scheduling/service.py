"""Scheduling service - shift templates, scheduled shifts and copying a week"""

import logging
from collections import OrderedDict
from datetime import date, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...constants import RecordStatus, ScheduledShiftStatus, ShiftStatus
from ...models import User
from ...models_scheduling import ScheduledShift, Shift, ShiftRequirement, StaffShift
from ...shared.datetime_utils import week_start, weekday_code
from ..branches.repository import BranchRepository
from ..schedule_config.service import ScheduleConfigService
from .copy_week import build_copy_plan
from .repository import SchedulingRepository
from .schemas import (
    CopyPreviewItem,
    CopyWeekPreviewRequest,
    CopyWeekRequest,
    CopyWeekResponse,
    ScheduledShiftCreate,
    ScheduledShiftGroup,
    ScheduledShiftResponse,
    ShiftCreate,
)

logger = logging.getLogger(__name__)


class SchedulingService:
    """Service layer for shift templates and scheduled shifts"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = SchedulingRepository()
        self.branch_repo = BranchRepository()
        self.config_service = ScheduleConfigService(db)

    def _check_branch(self, branch_id: int) -> None:
        if not self.branch_repo.get_branch(self.db, branch_id):
            raise HTTPException(status_code=404, detail="Branch not found")

    # ------------------------------------------------------------------
    # Shift templates
    # ------------------------------------------------------------------

    def get_shift(self, shift_id: int) -> Shift:
        shift = self.repo.get_shift(self.db, shift_id)
        if not shift:
            raise HTTPException(status_code=404, detail="Shift not found")
        return shift

    def get_shifts(self, branch_id: Optional[int] = None) -> list[Shift]:
        return self.repo.get_shifts(self.db, branch_id)

    def create_shift(self, data: ShiftCreate, user: User) -> Shift:
        self._check_branch(data.branchId)
        shift = Shift(
            name=data.name.strip(),
            start_time=data.startTime,
            end_time=data.endTime,
            week_days=data.weekDays,
            branch_id=data.branchId,
            requirements=[ShiftRequirement(role=r.role.value, quantity=r.quantity) for r in data.requirements],
            created_by=user.id,
        )
        self.db.add(shift)
        self.db.commit()
        logger.info(f"✅ Shift '{shift.name}' created for branch {shift.branch_id}")
        return self.get_shift(shift.id)

    def update_shift(self, shift_id: int, data: ShiftCreate, user: User) -> Shift:
        shift = self.get_shift(shift_id)
        self._check_branch(data.branchId)

        shift.name = data.name.strip()
        shift.start_time = data.startTime
        shift.end_time = data.endTime
        shift.week_days = data.weekDays
        shift.branch_id = data.branchId
        shift.requirements = [
            ShiftRequirement(role=r.role.value, quantity=r.quantity) for r in data.requirements
        ]
        shift.updated_by = user.id
        self.db.commit()
        return self.get_shift(shift_id)

    def delete_shift(self, shift_id: int, user: User) -> dict:
        shift = self.get_shift(shift_id)
        shift.status = RecordStatus.DELETED.value
        shift.updated_by = user.id
        self.db.commit()
        logger.info(f"🗑️ Shift {shift_id} deleted")
        return {"message": "Shift deleted"}

    # ------------------------------------------------------------------
    # Scheduled shifts
    # ------------------------------------------------------------------

    def get_scheduled_shift(self, scheduled_shift_id: int) -> ScheduledShift:
        scheduled = self.repo.get_scheduled_shift(self.db, scheduled_shift_id)
        if not scheduled:
            raise HTTPException(status_code=404, detail="Scheduled shift not found")
        return scheduled

    def create_scheduled_shift(self, data: ScheduledShiftCreate, user: User) -> ScheduledShift:
        shift = self.get_shift(data.shiftId)
        if shift.branch_id != data.branchId:
            raise HTTPException(status_code=400, detail="Shift does not belong to this branch")
        self.config_service.ensure_unlocked(data.branchId, data.date)

        day = weekday_code(data.date)
        if day not in (shift.week_days or []):
            raise HTTPException(
                status_code=400, detail=f"Shift '{shift.name}' does not run on {day}"
            )

        if self.repo.find_scheduled_shift(self.db, shift.id, data.date):
            raise HTTPException(
                status_code=409,
                detail=f"Shift '{shift.name}' is already scheduled on {data.date.isoformat()}",
            )

        scheduled = ScheduledShift(
            shift_id=shift.id,
            branch_id=data.branchId,
            date=data.date,
            shift_status=ScheduledShiftStatus.DRAFT.value,
            created_by=user.id,
        )
        self.db.add(scheduled)
        self.db.commit()
        return self.get_scheduled_shift(scheduled.id)

    def get_scheduled_shifts(
        self,
        branch_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[ScheduledShift]:
        if start_date and end_date and end_date < start_date:
            raise HTTPException(status_code=400, detail="End date must not be before start date")
        return self.repo.get_scheduled_shifts(self.db, branch_id, start_date, end_date)

    def get_grouped_scheduled_shifts(self, **filters) -> list[ScheduledShiftGroup]:
        groups: OrderedDict[date, list] = OrderedDict()
        for scheduled in self.get_scheduled_shifts(**filters):
            groups.setdefault(scheduled.date, []).append(ScheduledShiftResponse.from_model(scheduled))
        return [ScheduledShiftGroup(date=d, shifts=shifts) for d, shifts in groups.items()]

    def delete_scheduled_shift(self, scheduled_shift_id: int, user: User) -> dict:
        scheduled = self.get_scheduled_shift(scheduled_shift_id)
        if scheduled.shift_status != ScheduledShiftStatus.DRAFT.value:
            raise HTTPException(status_code=400, detail="Only draft scheduled shifts can be deleted")
        self.config_service.ensure_unlocked(scheduled.branch_id, scheduled.date)
        if any(s.shift_status == ShiftStatus.PUBLISHED.value for s in scheduled.staff_shifts):
            raise HTTPException(
                status_code=400, detail="Scheduled shift has published staff assignments"
            )

        for staff_shift in list(scheduled.staff_shifts):
            self.db.delete(staff_shift)
        self.db.delete(scheduled)
        self.db.commit()
        logger.info(f"🗑️ Scheduled shift {scheduled_shift_id} deleted by {user.username}")
        return {"message": "Scheduled shift deleted"}

    # ------------------------------------------------------------------
    # Copy week
    # ------------------------------------------------------------------

    def _source_week(self, branch_id: int, source_start: date) -> list[ScheduledShift]:
        self._check_branch(branch_id)
        monday = week_start(source_start)
        return self.repo.get_scheduled_shifts(
            self.db, branch_id, monday, monday + timedelta(days=6)
        )

    def preview_copy_week(self, data: CopyWeekPreviewRequest) -> list[CopyPreviewItem]:
        """Where every source shift would land; nothing is checked or saved"""
        source_shifts = self._source_week(data.branchId, data.sourceStartDate)
        return [
            CopyPreviewItem(
                sourceDate=item.source.date,
                targetDate=item.target_date,
                targetWeekStart=item.target_week_start,
                shiftId=item.source.shift_id,
                shiftName=item.source.shift.name,
                startTime=item.source.shift.start_time,
                endTime=item.source.shift.end_time,
            )
            for item in build_copy_plan(source_shifts, data.sourceStartDate, data.targetStartDates)
        ]

    def copy_week(self, data: CopyWeekRequest, user: User) -> CopyWeekResponse:
        source_monday = week_start(data.sourceStartDate)
        if any(week_start(t) == source_monday for t in data.targetStartDates):
            raise HTTPException(status_code=400, detail="Target week must differ from the source week")

        source_shifts = self._source_week(data.branchId, data.sourceStartDate)
        if not source_shifts:
            raise HTTPException(status_code=400, detail="Source week has no scheduled shifts")

        plan = build_copy_plan(source_shifts, data.sourceStartDate, data.targetStartDates)
        for target_date in sorted({item.target_date for item in plan}):
            self.config_service.ensure_unlocked(data.branchId, target_date)

        logger.info(
            f"📥 Copying week {source_monday} of branch {data.branchId} to "
            f"{[t.isoformat() for t in data.targetStartDates]} (withStaff={data.withStaff})"
        )

        copied = 0
        copied_weeks = []
        skipped = []
        for item in plan:
            source = item.source
            existing = self.repo.find_scheduled_shift(self.db, source.shift_id, item.target_date)
            if existing:
                skipped.append(f"{item.target_date.isoformat()} {source.shift.name}")
                if data.withStaff:
                    self._replace_draft_staff(existing, source, user)
                continue

            target = ScheduledShift(
                shift_id=source.shift_id,
                branch_id=source.branch_id,
                date=item.target_date,
                shift_status=ScheduledShiftStatus.DRAFT.value,
                created_by=user.id,
            )
            self.db.add(target)
            self.db.flush()
            if data.withStaff:
                self._copy_staff(source, target, user)

            copied += 1
            if item.target_week_start not in copied_weeks:
                copied_weeks.append(item.target_week_start)

        self.db.commit()
        message = f"Copied {copied} shifts to {len(copied_weeks)} week(s)"
        if skipped:
            message += f", skipped {len(skipped)} duplicates"
        logger.info(f"✅ {message}")

        return CopyWeekResponse(
            totalCopied=copied,
            totalSkipped=len(skipped),
            copiedWeeks=copied_weeks,
            skippedDuplicates=skipped,
            message=message,
        )

    def _copy_staff(self, source: ScheduledShift, target: ScheduledShift, user: User) -> None:
        assigned = {s.staff_id for s in target.staff_shifts if s.status == RecordStatus.ACTIVE.value}
        for staff_shift in source.staff_shifts:
            if staff_shift.status != RecordStatus.ACTIVE.value or staff_shift.staff_id in assigned:
                continue
            self.db.add(
                StaffShift(
                    staff_id=staff_shift.staff_id,
                    scheduled_shift_id=target.id,
                    note=staff_shift.note,
                    shift_status=ShiftStatus.DRAFT.value,
                    created_by=user.id,
                )
            )
            assigned.add(staff_shift.staff_id)

    def _replace_draft_staff(self, existing: ScheduledShift, source: ScheduledShift, user: User) -> None:
        for staff_shift in list(existing.staff_shifts):
            if staff_shift.shift_status == ShiftStatus.DRAFT.value:
                self.db.delete(staff_shift)
        self.db.flush()
        self.db.refresh(existing)
        self._copy_staff(source, existing, user)
