"""Staffing repository - staff shift and feedback queries"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from ...constants import RecordStatus, RequestStatus, ShiftStatus
from ...models import User
from ...models_scheduling import ScheduledShift, Shift, StaffShift, StaffShiftFeedback
from ...shared.query_utils import paginate


def _staff_shift_options():
    return (
        joinedload(StaffShift.staff),
        joinedload(StaffShift.scheduled_shift)
        .joinedload(ScheduledShift.shift)
        .selectinload(Shift.requirements),
    )


class StaffingRepository:
    """Repository for staff shift database operations"""

    @staticmethod
    def get_user(db: Session, user_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_branch_managers(db: Session, branch_id: int, roles) -> list[User]:
        return (
            db.query(User)
            .filter(
                User.branch_id == branch_id,
                User.role.in_(list(roles)),
                User.status == RecordStatus.ACTIVE.value,
            )
            .all()
        )

    @staticmethod
    def get_branch_staff(db: Session, branch_id: int) -> list[User]:
        return (
            db.query(User)
            .filter(User.branch_id == branch_id, User.status == RecordStatus.ACTIVE.value)
            .order_by(User.full_name, User.id)
            .all()
        )

    @staticmethod
    def staff_shift_query(db: Session):
        return (
            db.query(StaffShift)
            .join(ScheduledShift, ScheduledShift.id == StaffShift.scheduled_shift_id)
            .join(Shift, Shift.id == ScheduledShift.shift_id)
            .options(*_staff_shift_options())
            .filter(StaffShift.status == RecordStatus.ACTIVE.value)
        )

    @classmethod
    def get_staff_shift(cls, db: Session, staff_shift_id: int) -> Optional[StaffShift]:
        return cls.staff_shift_query(db).filter(StaffShift.id == staff_shift_id).first()

    @classmethod
    def find_assignment(cls, db: Session, staff_id: int, scheduled_shift_id: int) -> Optional[StaffShift]:
        return (
            cls.staff_shift_query(db)
            .filter(StaffShift.staff_id == staff_id, StaffShift.scheduled_shift_id == scheduled_shift_id)
            .first()
        )

    @classmethod
    def get_staff_shifts_on_date(cls, db: Session, staff_id: int, on_date: date) -> list[StaffShift]:
        return (
            cls.staff_shift_query(db)
            .filter(StaffShift.staff_id == staff_id, ScheduledShift.date == on_date)
            .all()
        )

    @classmethod
    def filter_staff_shifts(
        cls,
        db: Session,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        branch_id: Optional[int] = None,
        staff_id: Optional[int] = None,
        statuses: Optional[list[str]] = None,
    ):
        query = cls.staff_shift_query(db)
        if start_date is not None:
            query = query.filter(ScheduledShift.date >= start_date)
        if end_date is not None:
            query = query.filter(ScheduledShift.date <= end_date)
        if branch_id is not None:
            query = query.filter(ScheduledShift.branch_id == branch_id)
        if staff_id is not None:
            query = query.filter(StaffShift.staff_id == staff_id)
        if statuses:
            query = query.filter(StaffShift.shift_status.in_(statuses))
        return query.order_by(ScheduledShift.date.asc(), Shift.start_time.asc(), StaffShift.id.asc())

    @classmethod
    def list_staff_shifts(cls, db: Session, page: int, size: int, **filters) -> tuple[list[StaffShift], int]:
        return paginate(cls.filter_staff_shifts(db, **filters), page, size)

    @staticmethod
    def feedback_query(db: Session):
        return (
            db.query(StaffShiftFeedback)
            .join(StaffShift, StaffShift.id == StaffShiftFeedback.staff_shift_id)
            .join(ScheduledShift, ScheduledShift.id == StaffShift.scheduled_shift_id)
            .options(
                joinedload(StaffShiftFeedback.staff),
                joinedload(StaffShiftFeedback.staff_shift).options(*_staff_shift_options()),
            )
            .filter(
                StaffShiftFeedback.status == RecordStatus.ACTIVE.value,
                StaffShift.status == RecordStatus.ACTIVE.value,
            )
        )

    @classmethod
    def get_feedback(cls, db: Session, feedback_id: int) -> Optional[StaffShiftFeedback]:
        return cls.feedback_query(db).filter(StaffShiftFeedback.id == feedback_id).first()

    @classmethod
    def get_pending_feedback_for(cls, db: Session, staff_shift_id: int) -> Optional[StaffShiftFeedback]:
        return (
            cls.feedback_query(db)
            .filter(
                StaffShiftFeedback.staff_shift_id == staff_shift_id,
                StaffShiftFeedback.response_status == RequestStatus.PENDING.value,
            )
            .order_by(StaffShiftFeedback.id.desc())
            .first()
        )

    @classmethod
    def get_feedbacks(
        cls,
        db: Session,
        response_status: str,
        staff_id: Optional[int] = None,
        branch_id: Optional[int] = None,
        shift_status: Optional[str] = None,
    ) -> list[StaffShiftFeedback]:
        query = cls.feedback_query(db).filter(StaffShiftFeedback.response_status == response_status)
        if staff_id is not None:
            query = query.filter(StaffShiftFeedback.staff_id == staff_id)
        if branch_id is not None:
            query = query.filter(ScheduledShift.branch_id == branch_id)
        if shift_status is not None:
            query = query.filter(StaffShift.shift_status == shift_status)
        return query.order_by(ScheduledShift.date.asc(), StaffShiftFeedback.id.asc()).all()

    @staticmethod
    def get_draft_staff_shifts(db: Session, scheduled_shift_ids: list[int]) -> list[StaffShift]:
        if not scheduled_shift_ids:
            return []
        return (
            db.query(StaffShift)
            .options(*_staff_shift_options())
            .filter(
                StaffShift.scheduled_shift_id.in_(scheduled_shift_ids),
                StaffShift.status == RecordStatus.ACTIVE.value,
                StaffShift.shift_status.in_([ShiftStatus.DRAFT.value, ShiftStatus.CONFLICTED.value]),
            )
            .all()
        )
