"""Schedule configuration repository - lock lookups, branch rules and shift counts"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...constants import WORKING_SHIFT_STATUSES, RecordStatus, ScheduleLockStatus
from ...models_scheduling import BranchScheduleConfig, ScheduledShift, ScheduleLock, StaffShift


class ScheduleConfigRepository:
    @staticmethod
    def _locks(db: Session):
        return (
            db.query(ScheduleLock)
            .options(
                joinedload(ScheduleLock.branch),
                joinedload(ScheduleLock.locked_by),
                joinedload(ScheduleLock.unlocked_by),
            )
            .filter(ScheduleLock.status == RecordStatus.ACTIVE.value)
        )

    @classmethod
    def get_lock(cls, db: Session, lock_id: int) -> Optional[ScheduleLock]:
        return cls._locks(db).filter(ScheduleLock.id == lock_id).first()

    @classmethod
    def get_locks(
        cls,
        db: Session,
        branch_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        active_only: bool = False,
    ) -> list[ScheduleLock]:
        """Locks of the branch overlapping [start_date, end_date], newest range first"""
        query = cls._locks(db).filter(ScheduleLock.branch_id == branch_id)
        if start_date is not None:
            query = query.filter(ScheduleLock.end_date >= start_date)
        if end_date is not None:
            query = query.filter(ScheduleLock.start_date <= end_date)
        if active_only:
            query = query.filter(ScheduleLock.lock_status == ScheduleLockStatus.LOCKED.value)
        return query.order_by(ScheduleLock.start_date.desc(), ScheduleLock.id.desc()).all()

    @staticmethod
    def get_config(db: Session, branch_id: int) -> Optional[BranchScheduleConfig]:
        return (
            db.query(BranchScheduleConfig)
            .filter(BranchScheduleConfig.branch_id == branch_id)
            .first()
        )

    @staticmethod
    def count_working_shifts(db: Session, staff_id: int, start_date: date, end_date: date) -> int:
        return (
            db.query(StaffShift)
            .join(ScheduledShift, ScheduledShift.id == StaffShift.scheduled_shift_id)
            .filter(
                StaffShift.staff_id == staff_id,
                StaffShift.status == RecordStatus.ACTIVE.value,
                StaffShift.shift_status.in_(WORKING_SHIFT_STATUSES),
                ScheduledShift.date >= start_date,
                ScheduledShift.date <= end_date,
            )
            .count()
        )
