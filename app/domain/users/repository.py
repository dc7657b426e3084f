"""User repository - staff account lookups"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ...constants import RecordStatus
from ...models import User
from ...shared.query_utils import apply_keyword, apply_sort, paginate

SORT_COLUMNS = {
    "id": User.id,
    "username": User.username,
    "fullName": User.full_name,
    "role": User.role,
    "createdAt": User.created_at,
}


class UserRepository:
    @staticmethod
    def user_query(db: Session):
        return (
            db.query(User)
            .options(joinedload(User.branch))
            .filter(User.status != RecordStatus.DELETED.value)
        )

    @classmethod
    def get_user(cls, db: Session, user_id: int) -> Optional[User]:
        return cls.user_query(db).filter(User.id == user_id).first()

    @staticmethod
    def find_by_username(db: Session, username: str) -> Optional[User]:
        # Deleted accounts still hold their username
        return db.query(User).filter(func.lower(User.username) == username.lower()).first()

    @staticmethod
    def find_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(func.lower(User.email) == email.lower()).first()

    @classmethod
    def list_users(
        cls,
        db: Session,
        page: int,
        size: int,
        keyword: Optional[str] = None,
        status: Optional[str] = None,
        branch_id: Optional[int] = None,
        role: Optional[str] = None,
        sort_by: Optional[str] = None,
    ) -> tuple[list[User], int]:
        query = apply_keyword(cls.user_query(db), keyword, User.username, User.full_name, User.email, User.phone)
        if status:
            query = query.filter(User.status == status)
        if branch_id is not None:
            query = query.filter(User.branch_id == branch_id)
        if role:
            query = query.filter(User.role == role)
        query = apply_sort(query, sort_by, SORT_COLUMNS, "id,asc")
        return paginate(query, page, size)
