"""User service - staff account management and password changes"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...constants import RecordStatus, RoleName
from ...models import User
from ...security_utils import check_password_strength, hash_password, verify_password
from ..branches.repository import BranchRepository
from .repository import UserRepository
from .schemas import ChangePasswordRequest, UserCreate, UserUpdate

logger = logging.getLogger(__name__)


def ensure_strong_password(password: str) -> None:
    result = check_password_strength(password)
    if not result["is_valid"]:
        raise HTTPException(
            status_code=400,
            detail=f"Password is too weak: {'; '.join(result['feedback']) or result['strength']}",
        )


class UserService:
    """Service layer for back-office user accounts"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()
        self.branch_repo = BranchRepository()

    def get_user(self, user_id: int) -> User:
        user = self.repo.get_user(self.db, user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    def list_users(self, page: int, size: int, **filters) -> tuple[list[User], int]:
        return self.repo.list_users(self.db, page, size, **filters)

    def _check_admin_rights(self, actor: User, role: Optional[str]) -> None:
        if role == RoleName.SYSTEM_ADMIN.value and actor.role != RoleName.SYSTEM_ADMIN.value:
            raise HTTPException(status_code=403, detail="Only a system admin can manage system admin accounts")

    def _check_branch(self, branch_id: Optional[int]) -> None:
        if branch_id is not None and not self.branch_repo.get_branch(self.db, branch_id):
            raise HTTPException(status_code=404, detail="Branch not found")

    def _check_email(self, email: Optional[str], user_id: Optional[int] = None) -> None:
        if not email:
            return
        existing = self.repo.find_by_email(self.db, email)
        if existing and existing.id != user_id:
            raise HTTPException(status_code=409, detail=f"Email '{email}' is already in use")

    def create_user(self, data: UserCreate, actor: User) -> User:
        self._check_admin_rights(actor, data.role.value)
        self._check_branch(data.branchId)
        if self.repo.find_by_username(self.db, data.username):
            raise HTTPException(status_code=409, detail=f"Username '{data.username}' is already taken")
        self._check_email(data.email)
        ensure_strong_password(data.password)

        user = User(
            username=data.username,
            hashed_password=hash_password(data.password),
            full_name=data.fullName,
            email=data.email,
            phone=data.phone,
            role=data.role.value,
            branch_id=data.branchId,
            created_by=actor.id,
        )
        self.db.add(user)
        self.db.commit()
        logger.info(f"✅ User {user.username} ({user.role}) created by {actor.username}")
        return self.get_user(user.id)

    def update_user(self, user_id: int, data: UserUpdate, actor: User) -> User:
        user = self.get_user(user_id)
        self._check_admin_rights(actor, user.role)
        if data.role is not None:
            self._check_admin_rights(actor, data.role.value)
            user.role = data.role.value
        if data.branchId is not None:
            self._check_branch(data.branchId)
            user.branch_id = data.branchId
        if data.fullName is not None:
            user.full_name = data.fullName
        if data.email is not None:
            self._check_email(data.email, user.id)
            user.email = data.email
        if data.phone is not None:
            user.phone = data.phone
        if data.status is not None and data.status.value != user.status:
            if user.id == actor.id:
                raise HTTPException(status_code=400, detail="You cannot change the status of your own account")
            user.status = data.status.value
            logger.info(f"🔄 User {user.username} is now {user.status}")

        user.updated_by = actor.id
        self.db.commit()
        return self.get_user(user_id)

    def delete_user(self, user_id: int, actor: User) -> dict:
        user = self.get_user(user_id)
        if user.id == actor.id:
            raise HTTPException(status_code=400, detail="You cannot delete your own account")
        self._check_admin_rights(actor, user.role)

        user.status = RecordStatus.DELETED.value
        user.updated_by = actor.id
        self.db.commit()
        logger.info(f"🗑️ User {user.username} deleted by {actor.username}")
        return {"message": "User deleted"}

    def change_password(self, data: ChangePasswordRequest, user: User) -> dict:
        if not verify_password(data.currentPassword, user.hashed_password):
            logger.warning(f"⚠️ Wrong current password on password change for {user.username}")
            raise HTTPException(status_code=400, detail="Current password is incorrect")
        ensure_strong_password(data.newPassword)

        user.hashed_password = hash_password(data.newPassword)
        user.updated_by = user.id
        self.db.commit()
        logger.info(f"🔑 {user.username} changed their password")
        return {"message": "Password changed"}
