"""User routers - back-office staff accounts"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_manager, get_current_user
from ...constants import RecordStatus, RoleName
from ...database import get_db
from ...models import User
from ...shared.responses import ok, page
from .schemas import ChangePasswordRequest, UserCreate, UserDetailResponse, UserUpdate
from .service import UserService

router = APIRouter(prefix="/user", tags=["Users"])


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


@router.get("/list")
async def list_users(
    page_number: int = Query(0, ge=0, alias="page"),
    size: int = Query(20, ge=1, le=200),
    keyword: Optional[str] = Query(None),
    status: Optional[RecordStatus] = Query(None),
    branchId: Optional[int] = Query(None),
    role: Optional[RoleName] = Query(None),
    sortBy: Optional[str] = Query(None, description="field,asc|desc"),
    current_user: User = Depends(get_current_manager),
    service: UserService = Depends(get_user_service),
):
    items, total = service.list_users(
        page_number,
        size,
        keyword=keyword,
        status=status.value if status else None,
        branch_id=branchId,
        role=role.value if role else None,
        sort_by=sortBy,
    )
    return ok(page([UserDetailResponse.from_model(u) for u in items], page_number, size, total))


@router.put("/change-password")
async def change_password(
    data: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return ok(service.change_password(data, current_user), "Password changed successfully")


@router.post("")
async def create_user(
    data: UserCreate,
    current_user: User = Depends(get_current_manager),
    service: UserService = Depends(get_user_service),
):
    user = service.create_user(data, current_user)
    return ok(UserDetailResponse.from_model(user), "User created successfully")


@router.get("/{user_id}")
async def get_user(
    user_id: int,
    current_user: User = Depends(get_current_manager),
    service: UserService = Depends(get_user_service),
):
    return ok(UserDetailResponse.from_model(service.get_user(user_id)))


@router.put("/{user_id}")
async def update_user(
    user_id: int,
    data: UserUpdate,
    current_user: User = Depends(get_current_manager),
    service: UserService = Depends(get_user_service),
):
    user = service.update_user(user_id, data, current_user)
    return ok(UserDetailResponse.from_model(user), "User updated successfully")


@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    current_user: User = Depends(get_current_manager),
    service: UserService = Depends(get_user_service),
):
    return ok(service.delete_user(user_id, current_user), "User deleted")
