"""Schedule configuration service - roster locks and per-branch scheduling rules"""

import logging
from datetime import date, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import SHIFT_FEEDBACK_DEADLINE_HOURS
from ...constants import ScheduleLockStatus
from ...models import Branch, User
from ...models_scheduling import BranchScheduleConfig, ScheduleLock
from ...shared.datetime_utils import utcnow, week_start
from ..branches.repository import BranchRepository
from .repository import ScheduleConfigRepository
from .schemas import (
    BranchScheduleConfigRequest,
    BranchScheduleConfigResponse,
    ScheduleLockRequest,
    ScheduleUnlockRequest,
)

logger = logging.getLogger(__name__)


class ScheduleConfigService:
    """Locks that freeze a branch's roster and the branch's assignment limits"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ScheduleConfigRepository()
        self.branch_repo = BranchRepository()

    def _get_branch(self, branch_id: int) -> Branch:
        branch = self.branch_repo.get_branch(self.db, branch_id)
        if not branch:
            raise HTTPException(status_code=404, detail="Branch not found")
        return branch

    # ------------------------------------------------------------------
    # Locks
    # ------------------------------------------------------------------

    def get_lock(self, lock_id: int) -> ScheduleLock:
        lock = self.repo.get_lock(self.db, lock_id)
        if not lock:
            raise HTTPException(status_code=404, detail="Schedule lock not found")
        return lock

    def lock(self, data: ScheduleLockRequest, user: User) -> ScheduleLock:
        self._get_branch(data.branchId)
        existing = self.repo.get_locks(self.db, data.branchId, data.startDate, data.endDate, active_only=True)
        if existing:
            raise HTTPException(
                status_code=409,
                detail=f"Schedule is already locked from {existing[0].start_date} to {existing[0].end_date}",
            )

        lock = ScheduleLock(
            branch_id=data.branchId,
            start_date=data.startDate,
            end_date=data.endDate,
            lock_status=ScheduleLockStatus.LOCKED.value,
            lock_reason=data.lockReason,
            locked_by_id=user.id,
            locked_at=utcnow(),
            created_by=user.id,
        )
        self.db.add(lock)
        self.db.commit()
        logger.info(f"🔒 Branch {data.branchId} schedule locked from {data.startDate} to {data.endDate}")
        return self.get_lock(lock.id)

    def unlock(self, lock_id: int, data: ScheduleUnlockRequest, user: User) -> ScheduleLock:
        lock = self.get_lock(lock_id)
        if lock.lock_status != ScheduleLockStatus.LOCKED.value:
            raise HTTPException(status_code=400, detail="Schedule lock is not active")

        lock.lock_status = ScheduleLockStatus.UNLOCKED.value
        lock.unlocked_by_id = user.id
        lock.unlocked_at = utcnow()
        lock.unlock_reason = data.unlockReason
        lock.updated_by = user.id
        self.db.commit()
        logger.info(f"🔓 Schedule lock {lock_id} released by {user.username}: {data.unlockReason}")
        return self.get_lock(lock_id)

    def get_active_lock(self, branch_id: int, on_date: date) -> Optional[ScheduleLock]:
        locks = self.repo.get_locks(self.db, branch_id, on_date, on_date, active_only=True)
        return locks[0] if locks else None

    def get_branch_locks(self, branch_id: int) -> list[ScheduleLock]:
        return self.repo.get_locks(self.db, branch_id)

    def get_locks_in_range(self, branch_id: int, start_date: date, end_date: date) -> list[ScheduleLock]:
        if end_date < start_date:
            raise HTTPException(status_code=400, detail="End date must not be before start date")
        return self.repo.get_locks(self.db, branch_id, start_date, end_date)

    def ensure_unlocked(self, branch_id: int, on_date: date) -> None:
        """Refuse a roster change on a locked date"""
        lock = self.get_active_lock(branch_id, on_date)
        if lock:
            logger.warning(f"⚠️ Roster change on {on_date} refused, branch {branch_id} lock {lock.id} is active")
            raise HTTPException(
                status_code=400,
                detail=f"Schedule is locked from {lock.start_date.isoformat()} to {lock.end_date.isoformat()}",
            )

    # ------------------------------------------------------------------
    # Branch rules
    # ------------------------------------------------------------------

    def get_config(self, branch_id: int) -> BranchScheduleConfigResponse:
        branch = self._get_branch(branch_id)
        return BranchScheduleConfigResponse.from_model(self.repo.get_config(self.db, branch_id), branch)

    def save_config(self, data: BranchScheduleConfigRequest, user: User) -> BranchScheduleConfigResponse:
        branch = self._get_branch(data.branchId)
        config = self.repo.get_config(self.db, data.branchId)
        if config is None:
            config = BranchScheduleConfig(branch_id=data.branchId, created_by=user.id)
            self.db.add(config)

        config.max_shifts_per_day = data.maxShiftsPerDay
        config.max_shifts_per_week = data.maxShiftsPerWeek
        config.response_deadline_hours = data.responseDeadlineHours
        config.allow_self_shift_registration = data.allowSelfShiftRegistration
        config.updated_by = user.id
        self.db.commit()
        self.db.refresh(config)
        logger.info(f"✅ Schedule config of branch {data.branchId} saved")
        return BranchScheduleConfigResponse.from_model(config, branch)

    def delete_config(self, branch_id: int) -> dict:
        config = self.repo.get_config(self.db, branch_id)
        if not config:
            raise HTTPException(status_code=404, detail="Branch has no schedule configuration")
        self.db.delete(config)
        self.db.commit()
        return {"message": "Schedule configuration removed, branch defaults apply"}

    def feedback_deadline_hours(self, branch_id: int) -> int:
        config = self.repo.get_config(self.db, branch_id)
        if config and config.response_deadline_hours:
            return config.response_deadline_hours
        return SHIFT_FEEDBACK_DEADLINE_HOURS

    def allows_self_registration(self, branch_id: int) -> bool:
        config = self.repo.get_config(self.db, branch_id)
        return config is None or config.allow_self_shift_registration

    def shift_limit_problem(self, staff_id: int, branch_id: int, on_date: date) -> Optional[str]:
        """Why one more shift on on_date would break the branch's limits, None when it fits"""
        config = self.repo.get_config(self.db, branch_id)
        if config is None:
            return None

        if config.max_shifts_per_day:
            worked = self.repo.count_working_shifts(self.db, staff_id, on_date, on_date)
            if worked >= config.max_shifts_per_day:
                return f"Daily limit of {config.max_shifts_per_day} shift(s) reached on {on_date.isoformat()}"

        if config.max_shifts_per_week:
            monday = week_start(on_date)
            worked = self.repo.count_working_shifts(self.db, staff_id, monday, monday + timedelta(days=6))
            if worked >= config.max_shifts_per_week:
                return f"Weekly limit of {config.max_shifts_per_week} shift(s) reached for the week of {monday.isoformat()}"

        return None
