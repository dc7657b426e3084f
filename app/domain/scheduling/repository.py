"""Scheduling repository - shift templates and scheduled shifts"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from ...constants import RecordStatus
from ...models_scheduling import ScheduledShift, Shift, StaffShift


class SchedulingRepository:
    """Repository for shift and scheduled shift database operations"""

    @staticmethod
    def get_shift(db: Session, shift_id: int) -> Optional[Shift]:
        return (
            db.query(Shift)
            .options(joinedload(Shift.branch), selectinload(Shift.requirements))
            .filter(Shift.id == shift_id, Shift.status != RecordStatus.DELETED.value)
            .first()
        )

    @staticmethod
    def get_shifts(db: Session, branch_id: Optional[int] = None) -> list[Shift]:
        query = (
            db.query(Shift)
            .options(joinedload(Shift.branch), selectinload(Shift.requirements))
            .filter(Shift.status != RecordStatus.DELETED.value)
        )
        if branch_id is not None:
            query = query.filter(Shift.branch_id == branch_id)
        return query.order_by(Shift.start_time.asc(), Shift.name.asc()).all()

    @staticmethod
    def _scheduled_query(db: Session):
        return (
            db.query(ScheduledShift)
            .join(Shift, Shift.id == ScheduledShift.shift_id)
            .options(
                joinedload(ScheduledShift.shift).selectinload(Shift.requirements),
                joinedload(ScheduledShift.branch),
                selectinload(ScheduledShift.staff_shifts).joinedload(StaffShift.staff),
            )
            .filter(ScheduledShift.status == RecordStatus.ACTIVE.value)
        )

    @classmethod
    def get_scheduled_shift(cls, db: Session, scheduled_shift_id: int) -> Optional[ScheduledShift]:
        return cls._scheduled_query(db).filter(ScheduledShift.id == scheduled_shift_id).first()

    @classmethod
    def get_scheduled_shifts(
        cls,
        db: Session,
        branch_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        shift_status: Optional[str] = None,
    ) -> list[ScheduledShift]:
        query = cls._scheduled_query(db)
        if branch_id is not None:
            query = query.filter(ScheduledShift.branch_id == branch_id)
        if start_date is not None:
            query = query.filter(ScheduledShift.date >= start_date)
        if end_date is not None:
            query = query.filter(ScheduledShift.date <= end_date)
        if shift_status is not None:
            query = query.filter(ScheduledShift.shift_status == shift_status)
        return query.order_by(ScheduledShift.date.asc(), Shift.start_time.asc()).all()

    @staticmethod
    def find_scheduled_shift(db: Session, shift_id: int, on_date: date) -> Optional[ScheduledShift]:
        return (
            db.query(ScheduledShift)
            .filter(ScheduledShift.shift_id == shift_id, ScheduledShift.date == on_date)
            .first()
        )
