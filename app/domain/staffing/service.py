"""Staffing service - assigning staff to scheduled shifts, publishing and feedback"""

import logging
from collections import OrderedDict
from datetime import timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...constants import (
    MANAGER_ROLES,
    REPLACEABLE_SHIFT_STATUSES,
    NotificationType,
    RecordStatus,
    RequestStatus,
    ScheduledShiftStatus,
    ShiftStatus,
)
from ...models import User
from ...models_scheduling import ScheduledShift, StaffShift, StaffShiftFeedback
from ...services.notification_service import notify_user, notify_users
from ...shared.datetime_utils import utcnow
from ..schedule_config.service import ScheduleConfigService
from ..scheduling.repository import SchedulingRepository
from .repository import StaffingRepository
from .rules import find_overlapping, required_quantity
from .schemas import (
    FeedbackRespond,
    PublishShiftsRequest,
    PublishShiftsResponse,
    StaffShiftBulkCreate,
    StaffShiftCreate,
    StaffShiftResponse,
    StaffShiftUpdate,
)

logger = logging.getLogger(__name__)


def describe(scheduled: ScheduledShift) -> str:
    shift = scheduled.shift
    return (
        f"{shift.name} on {scheduled.date.isoformat()} "
        f"({shift.start_time.strftime('%H:%M')}-{shift.end_time.strftime('%H:%M')})"
    )


class StaffingService:
    """Service layer for staff shift assignment and publishing"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = StaffingRepository()
        self.schedule_repo = SchedulingRepository()
        self.config_service = ScheduleConfigService(db)

    def get_staff_shift(self, staff_shift_id: int) -> StaffShift:
        staff_shift = self.repo.get_staff_shift(self.db, staff_shift_id)
        if not staff_shift:
            raise HTTPException(status_code=404, detail="Staff shift not found")
        return staff_shift

    def _get_scheduled_shift(self, scheduled_shift_id: int) -> ScheduledShift:
        scheduled = self.schedule_repo.get_scheduled_shift(self.db, scheduled_shift_id)
        if not scheduled:
            raise HTTPException(status_code=404, detail="Scheduled shift not found")
        return scheduled

    def check_assignable(self, staff: Optional[User], scheduled: ScheduledShift) -> Optional[StaffShift]:
        """
        Enforce the assignment rules for staff on scheduled.

        Returns the overlapping staff shift of that day, if any, so the caller
        decides between storing a conflict and refusing.
        """
        if not staff:
            raise HTTPException(status_code=404, detail="Staff member not found")
        if staff.status != RecordStatus.ACTIVE.value:
            raise HTTPException(status_code=400, detail=f"{staff.full_name} is not an active staff member")
        if staff.branch_id != scheduled.branch_id:
            raise HTTPException(status_code=400, detail=f"{staff.full_name} does not work at this branch")
        if not required_quantity(scheduled.shift, staff.role):
            raise HTTPException(
                status_code=400, detail=f"Shift '{scheduled.shift.name}' does not require role {staff.role}"
            )
        if self.repo.find_assignment(self.db, staff.id, scheduled.id):
            raise HTTPException(
                status_code=409, detail=f"{staff.full_name} is already assigned to {describe(scheduled)}"
            )
        limit_problem = self.config_service.shift_limit_problem(staff.id, scheduled.branch_id, scheduled.date)
        if limit_problem:
            raise HTTPException(status_code=400, detail=f"{staff.full_name}: {limit_problem}")

        return find_overlapping(
            self.repo.get_staff_shifts_on_date(self.db, staff.id, scheduled.date), scheduled.shift
        )

    # ------------------------------------------------------------------
    # Assignment CRUD
    # ------------------------------------------------------------------

    def _assign(self, data: StaffShiftCreate, user: User) -> StaffShift:
        scheduled = self._get_scheduled_shift(data.scheduledShiftId)
        self.config_service.ensure_unlocked(scheduled.branch_id, scheduled.date)
        staff = self.repo.get_user(self.db, data.staffId)
        conflict = self.check_assignable(staff, scheduled)

        if conflict:
            status = ShiftStatus.CONFLICTED.value
            logger.warning(
                f"⚠️ {staff.full_name} already works {describe(conflict.scheduled_shift)}, "
                f"storing {describe(scheduled)} as CONFLICTED"
            )
        else:
            status = (data.shiftStatus or ShiftStatus.DRAFT).value

        staff_shift = StaffShift(
            staff_id=staff.id,
            scheduled_shift_id=scheduled.id,
            note=data.note,
            shift_status=status,
            created_by=user.id,
        )
        self.db.add(staff_shift)
        self.db.flush()

        if status == ShiftStatus.PUBLISHED.value:
            notify_user(
                self.db,
                staff.id,
                NotificationType.SHIFT_ASSIGNED,
                "New shift assigned",
                f"You have been assigned to {describe(scheduled)}",
                created_by=user.id,
            )
        return staff_shift

    def assign_staff(self, data: StaffShiftCreate, user: User) -> StaffShift:
        staff_shift = self._assign(data, user)
        self.db.commit()
        logger.info(f"✅ Staff shift {staff_shift.id} created ({staff_shift.shift_status})")
        return self.get_staff_shift(staff_shift.id)

    def bulk_assign(self, data: StaffShiftBulkCreate, user: User) -> list[StaffShift]:
        """All assignments succeed together or none is stored"""
        try:
            created = [self._assign(item, user) for item in data.assignments]
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"✅ {len(created)} staff shifts created in bulk")
        return [self.get_staff_shift(s.id) for s in created]

    def update_staff_shift(self, staff_shift_id: int, data: StaffShiftUpdate, user: User) -> StaffShift:
        staff_shift = self.get_staff_shift(staff_shift_id)
        if data.note is not None:
            staff_shift.note = data.note
        if data.shiftStatus is not None and data.shiftStatus.value != staff_shift.shift_status:
            scheduled = staff_shift.scheduled_shift
            self.config_service.ensure_unlocked(scheduled.branch_id, scheduled.date)
            if staff_shift.shift_status == ShiftStatus.CONFLICTED.value:
                # The clash may be gone since the colleague shift was moved or deleted
                conflict = find_overlapping(
                    self.repo.get_staff_shifts_on_date(self.db, staff_shift.staff_id, scheduled.date),
                    scheduled.shift,
                )
                if conflict:
                    raise HTTPException(
                        status_code=400,
                        detail=f"Resolve the conflict with {describe(conflict.scheduled_shift)} before changing this shift",
                    )
                logger.info(f"✅ Conflict of staff shift {staff_shift_id} cleared")
            staff_shift.shift_status = data.shiftStatus.value
        staff_shift.updated_by = user.id
        self.db.commit()
        return self.get_staff_shift(staff_shift_id)

    def delete_staff_shift(self, staff_shift_id: int, user: User) -> dict:
        staff_shift = self.get_staff_shift(staff_shift_id)
        scheduled = staff_shift.scheduled_shift
        self.config_service.ensure_unlocked(scheduled.branch_id, scheduled.date)
        was_visible = staff_shift.shift_status in (ShiftStatus.PENDING.value, ShiftStatus.PUBLISHED.value)

        staff_shift.status = RecordStatus.DELETED.value
        staff_shift.updated_by = user.id
        if was_visible:
            notify_user(
                self.db,
                staff_shift.staff_id,
                NotificationType.SHIFT_CANCELLED,
                "Shift cancelled",
                f"Your shift {describe(staff_shift.scheduled_shift)} was cancelled",
                created_by=user.id,
            )
        self.db.commit()
        return {"message": "Staff shift deleted"}

    def list_staff_shifts(self, page: int, size: int, **filters) -> tuple[list[StaffShift], int]:
        return self.repo.list_staff_shifts(self.db, page, size, **filters)

    def get_grouped(self, **filters) -> dict:
        """
        ROLE -> staff name -> {staffId, shifts: date -> [staff shift]}

        Namesakes after the first one are keyed "Name (#id)".
        """
        grouped: dict = OrderedDict()
        keys: dict[int, str] = {}
        for staff_shift in self.repo.filter_staff_shifts(self.db, **filters).all():
            staff = staff_shift.staff
            by_staff = grouped.setdefault(staff.role, OrderedDict())
            if staff.id not in keys:
                taken = staff.full_name in by_staff and by_staff[staff.full_name]["staffId"] != staff.id
                keys[staff.id] = f"{staff.full_name} (#{staff.id})" if taken else staff.full_name
            entry = by_staff.setdefault(keys[staff.id], {"staffId": staff.id, "shifts": OrderedDict()})
            day = staff_shift.scheduled_shift.date.isoformat()
            entry["shifts"].setdefault(day, []).append(StaffShiftResponse.from_model(staff_shift))
        return {"data": grouped}

    # ------------------------------------------------------------------
    # Publishing and feedback
    # ------------------------------------------------------------------

    def publish_shifts(self, data: PublishShiftsRequest, user: User) -> PublishShiftsResponse:
        logger.info(f"📥 Publishing shifts of branch {data.branchId} from {data.startDate} to {data.endDate}")
        now = utcnow()
        deadline = now + timedelta(hours=self.config_service.feedback_deadline_hours(data.branchId))

        scheduled_shifts = self.schedule_repo.get_scheduled_shifts(
            self.db, data.branchId, data.startDate, data.endDate
        )
        published = 0
        for scheduled in scheduled_shifts:
            if scheduled.shift_status == ScheduledShiftStatus.DRAFT.value:
                scheduled.shift_status = ScheduledShiftStatus.PUBLISHED.value
                scheduled.published_at = now
                scheduled.updated_by = user.id
                published += 1

        pending = []
        conflicted = 0
        per_staff: dict[int, int] = {}
        for staff_shift in self.repo.get_draft_staff_shifts(self.db, [s.id for s in scheduled_shifts]):
            if staff_shift.shift_status == ShiftStatus.CONFLICTED.value:
                conflicted += 1
                continue
            staff_shift.shift_status = ShiftStatus.PENDING.value
            staff_shift.updated_by = user.id
            self.db.add(
                StaffShiftFeedback(
                    staff_shift_id=staff_shift.id,
                    staff_id=staff_shift.staff_id,
                    response_status=RequestStatus.PENDING.value,
                    published_date=now,
                    deadline=deadline,
                    created_by=user.id,
                )
            )
            pending.append(staff_shift)
            per_staff[staff_shift.staff_id] = per_staff.get(staff_shift.staff_id, 0) + 1

        for staff_id, count in per_staff.items():
            notify_user(
                self.db,
                staff_id,
                NotificationType.SHIFT_PUBLISHED,
                "New shifts published",
                f"{count} shift(s) between {data.startDate} and {data.endDate} need your confirmation "
                f"before {deadline.strftime('%Y-%m-%d %H:%M')}",
                created_by=user.id,
            )

        self.db.commit()
        message = f"Published {published} shifts, {len(pending)} staff shifts awaiting confirmation"
        if conflicted:
            message += f", {conflicted} conflicted staff shifts skipped"
        logger.info(f"📊 {message}")

        return PublishShiftsResponse(
            totalShifts=len(scheduled_shifts),
            publishedShifts=published,
            conflictedStaffShifts=conflicted,
            publishedAt=now,
            message=message,
            staffShifts=[StaffShiftResponse.from_model(self.get_staff_shift(s.id)) for s in pending],
        )

    def respond(self, data: FeedbackRespond, user: User) -> StaffShiftFeedback:
        staff_shift = self.get_staff_shift(data.staffShiftId)
        if staff_shift.staff_id != user.id:
            raise HTTPException(status_code=403, detail="You can only respond to your own shifts")

        feedback = self.repo.get_pending_feedback_for(self.db, staff_shift.id)
        if not feedback:
            raise HTTPException(status_code=400, detail="This shift is not waiting for your response")

        now = utcnow()
        if feedback.deadline < now:
            raise HTTPException(status_code=400, detail="The response deadline for this shift has passed")

        feedback.response_status = data.responseStatus.value
        feedback.response_date = now
        feedback.reason = data.reason
        feedback.updated_by = user.id

        if data.responseStatus == RequestStatus.APPROVED:
            staff_shift.shift_status = ShiftStatus.PUBLISHED.value
        else:
            staff_shift.shift_status = ShiftStatus.REQUEST_CHANGE.value
            managers = self.repo.get_branch_managers(
                self.db, staff_shift.scheduled_shift.branch_id, MANAGER_ROLES
            )
            notify_users(
                self.db,
                [m.id for m in managers],
                NotificationType.SHIFT_FEEDBACK,
                "Shift declined",
                f"{user.full_name} declined {describe(staff_shift.scheduled_shift)}: {data.reason}",
                created_by=user.id,
            )
        staff_shift.updated_by = user.id

        self.db.commit()
        logger.info(f"✅ {user.username} {data.responseStatus.value} staff shift {staff_shift.id}")
        return self.repo.get_feedback(self.db, feedback.id)

    def get_my_pending(self, user: User) -> list[StaffShiftFeedback]:
        return self.repo.get_feedbacks(self.db, RequestStatus.PENDING.value, staff_id=user.id)

    def get_pending_feedbacks(self, branch_id: Optional[int] = None) -> list[StaffShiftFeedback]:
        return self.repo.get_feedbacks(self.db, RequestStatus.PENDING.value, branch_id=branch_id)

    def get_rejected_feedbacks(self, branch_id: Optional[int] = None) -> list[StaffShiftFeedback]:
        return self.repo.get_feedbacks(
            self.db,
            RequestStatus.REJECTED.value,
            branch_id=branch_id,
            shift_status=ShiftStatus.REQUEST_CHANGE.value,
        )

    def replace_staff(self, feedback_id: int, replacement_staff_id: int, user: User) -> StaffShift:
        feedback = self.repo.get_feedback(self.db, feedback_id)
        if not feedback:
            raise HTTPException(status_code=404, detail="Feedback not found")
        if feedback.response_status != RequestStatus.REJECTED.value:
            raise HTTPException(status_code=400, detail="Only declined shifts can be reassigned")

        old_shift = feedback.staff_shift
        if old_shift.shift_status != ShiftStatus.REQUEST_CHANGE.value:
            raise HTTPException(status_code=400, detail="This shift has already been reassigned")

        new_shift = self._replace(old_shift, replacement_staff_id, user)
        logger.info(f"✅ Feedback {feedback_id}: staff {old_shift.staff_id} replaced by {new_shift.staff_id}")
        return new_shift

    # ------------------------------------------------------------------
    # Replacement of conflicted or declined staff shifts
    # ------------------------------------------------------------------

    def _get_replaceable(self, staff_shift_id: int) -> StaffShift:
        staff_shift = self.get_staff_shift(staff_shift_id)
        if staff_shift.shift_status not in REPLACEABLE_SHIFT_STATUSES:
            raise HTTPException(
                status_code=400,
                detail=f"Only {' or '.join(REPLACEABLE_SHIFT_STATUSES)} staff shifts can be handed over",
            )
        return staff_shift

    def get_replacement_candidates(self, staff_shift_id: int) -> list[User]:
        """Active colleagues of the branch who could take the shift without any clash"""
        staff_shift = self._get_replaceable(staff_shift_id)
        scheduled = staff_shift.scheduled_shift

        candidates = []
        for colleague in self.repo.get_branch_staff(self.db, scheduled.branch_id):
            if colleague.id == staff_shift.staff_id:
                continue
            try:
                conflict = self.check_assignable(colleague, scheduled)
            except HTTPException:
                continue
            if conflict is None:
                candidates.append(colleague)
        return candidates

    def replace_staff_shift(self, staff_shift_id: int, replacement_staff_id: int, user: User) -> StaffShift:
        old_shift = self._get_replaceable(staff_shift_id)
        new_shift = self._replace(old_shift, replacement_staff_id, user)
        logger.info(f"✅ Staff shift {staff_shift_id} handed over to staff {replacement_staff_id}")
        return new_shift

    def _replace(self, old_shift: StaffShift, replacement_staff_id: int, user: User) -> StaffShift:
        scheduled = self._get_scheduled_shift(old_shift.scheduled_shift_id)
        self.config_service.ensure_unlocked(scheduled.branch_id, scheduled.date)

        replacement = self.repo.get_user(self.db, replacement_staff_id)
        if replacement and replacement.id == old_shift.staff_id:
            raise HTTPException(status_code=400, detail="Replacement must be a different staff member")

        conflict = self.check_assignable(replacement, scheduled)
        if conflict:
            raise HTTPException(
                status_code=409,
                detail=f"{replacement.full_name} already works {describe(conflict.scheduled_shift)}",
            )

        # A draft roster stays a draft, the replacement goes through publishing like everyone else
        if scheduled.shift_status == ScheduledShiftStatus.PUBLISHED.value:
            new_status = ShiftStatus.PUBLISHED.value
        else:
            new_status = ShiftStatus.DRAFT.value

        old_status = old_shift.shift_status
        old_shift.status = RecordStatus.DELETED.value
        old_shift.updated_by = user.id
        new_shift = StaffShift(
            staff_id=replacement.id,
            scheduled_shift_id=scheduled.id,
            note=old_shift.note,
            shift_status=new_status,
            created_by=user.id,
        )
        self.db.add(new_shift)

        if old_status == ShiftStatus.REQUEST_CHANGE.value:
            notify_user(
                self.db,
                old_shift.staff_id,
                NotificationType.SHIFT_REPLACEMENT,
                "Shift reassigned",
                f"{describe(scheduled)} has been reassigned to a colleague",
                created_by=user.id,
            )
        if new_status == ShiftStatus.PUBLISHED.value:
            notify_user(
                self.db,
                replacement.id,
                NotificationType.SHIFT_REPLACEMENT,
                "Replacement shift",
                f"You are replacing a colleague on {describe(scheduled)}",
                created_by=user.id,
            )
        self.db.commit()
        return self.get_staff_shift(new_shift.id)
