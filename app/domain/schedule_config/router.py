"""Schedule configuration routers - roster locks and branch scheduling rules"""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_manager, get_current_user
from ...database import get_db
from ...models import User
from ...shared.responses import ok
from .schemas import (
    BranchScheduleConfigRequest,
    ScheduleLockRequest,
    ScheduleLockResponse,
    ScheduleUnlockRequest,
)
from .service import ScheduleConfigService

lock_router = APIRouter(prefix="/schedule-locks", tags=["Schedule locks"])
config_router = APIRouter(prefix="/branch-schedule-configs", tags=["Schedule configs"])


def get_schedule_config_service(db: Session = Depends(get_db)) -> ScheduleConfigService:
    return ScheduleConfigService(db)


# ============================================================================
# LOCKS
# ============================================================================


@lock_router.post("/lock")
async def lock_schedule(
    data: ScheduleLockRequest,
    current_user: User = Depends(get_current_manager),
    service: ScheduleConfigService = Depends(get_schedule_config_service),
):
    lock = service.lock(data, current_user)
    return ok(ScheduleLockResponse.from_model(lock), "Schedule locked")


@lock_router.put("/{lock_id}/unlock")
async def unlock_schedule(
    lock_id: int,
    data: ScheduleUnlockRequest,
    current_user: User = Depends(get_current_manager),
    service: ScheduleConfigService = Depends(get_schedule_config_service),
):
    lock = service.unlock(lock_id, data, current_user)
    return ok(ScheduleLockResponse.from_model(lock), "Schedule unlocked")


@lock_router.get("/branch/{branch_id}/check")
async def check_lock(
    branch_id: int,
    on_date: date = Query(..., alias="date"),
    current_user: User = Depends(get_current_user),
    service: ScheduleConfigService = Depends(get_schedule_config_service),
):
    return ok(service.get_active_lock(branch_id, on_date) is not None)


@lock_router.get("/branch/{branch_id}/active")
async def get_active_lock(
    branch_id: int,
    on_date: date = Query(..., alias="date"),
    current_user: User = Depends(get_current_user),
    service: ScheduleConfigService = Depends(get_schedule_config_service),
):
    lock = service.get_active_lock(branch_id, on_date)
    return ok(ScheduleLockResponse.from_model(lock) if lock else None)


@lock_router.get("/branch/{branch_id}/range")
async def get_locks_in_range(
    branch_id: int,
    startDate: date = Query(...),
    endDate: date = Query(...),
    current_user: User = Depends(get_current_user),
    service: ScheduleConfigService = Depends(get_schedule_config_service),
):
    locks = service.get_locks_in_range(branch_id, startDate, endDate)
    return ok([ScheduleLockResponse.from_model(lock) for lock in locks])


@lock_router.get("/branch/{branch_id}")
async def get_branch_locks(
    branch_id: int,
    current_user: User = Depends(get_current_user),
    service: ScheduleConfigService = Depends(get_schedule_config_service),
):
    return ok([ScheduleLockResponse.from_model(lock) for lock in service.get_branch_locks(branch_id)])


# ============================================================================
# BRANCH RULES
# ============================================================================


@config_router.post("")
async def save_config(
    data: BranchScheduleConfigRequest,
    current_user: User = Depends(get_current_manager),
    service: ScheduleConfigService = Depends(get_schedule_config_service),
):
    return ok(service.save_config(data, current_user), "Schedule configuration saved")


@config_router.get("/branch/{branch_id}")
async def get_config(
    branch_id: int,
    current_user: User = Depends(get_current_user),
    service: ScheduleConfigService = Depends(get_schedule_config_service),
):
    return ok(service.get_config(branch_id))


@config_router.delete("/branch/{branch_id}")
async def delete_config(
    branch_id: int,
    current_user: User = Depends(get_current_manager),
    service: ScheduleConfigService = Depends(get_schedule_config_service),
):
    return ok(service.delete_config(branch_id))
