"""Branch repository - branches, tables and table availability queries"""

from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy.orm import Session, joinedload

from ...constants import BLOCKING_BOOKING_STATUSES, RecordStatus
from ...models import Branch, DiningTable, TableType
from ...models_booking import BookedTable, Booking


class BranchRepository:
    """Repository for branch and table database operations"""

    @staticmethod
    def get_branch(db: Session, branch_id: int) -> Optional[Branch]:
        return (
            db.query(Branch)
            .filter(Branch.id == branch_id, Branch.status != RecordStatus.DELETED.value)
            .first()
        )

    @staticmethod
    def get_branches(db: Session) -> list[Branch]:
        return (
            db.query(Branch)
            .filter(Branch.status != RecordStatus.DELETED.value)
            .order_by(Branch.name.asc())
            .all()
        )

    @staticmethod
    def create(db: Session, entity):
        db.add(entity)
        db.commit()
        db.refresh(entity)
        return entity

    @staticmethod
    def get_table_type(db: Session, table_type_id: int) -> Optional[TableType]:
        return db.query(TableType).filter(TableType.id == table_type_id).first()

    @staticmethod
    def get_table_types(db: Session) -> list[TableType]:
        return db.query(TableType).order_by(TableType.capacity.asc()).all()

    @staticmethod
    def get_tables(db: Session, branch_id: Optional[int] = None) -> list[DiningTable]:
        query = (
            db.query(DiningTable)
            .options(joinedload(DiningTable.table_type))
            .filter(DiningTable.status != RecordStatus.DELETED.value)
        )
        if branch_id is not None:
            query = query.filter(DiningTable.branch_id == branch_id)
        return query.order_by(DiningTable.floor_name, DiningTable.name).all()

    @staticmethod
    def get_tables_by_ids(db: Session, table_ids: Iterable[int]) -> list[DiningTable]:
        ids = list(table_ids)
        if not ids:
            return []
        return (
            db.query(DiningTable)
            .options(joinedload(DiningTable.table_type))
            .filter(DiningTable.id.in_(ids))
            .all()
        )

    @staticmethod
    def get_busy_table_ids(
        db: Session,
        start: datetime,
        end: datetime,
        table_ids: Optional[Iterable[int]] = None,
        branch_id: Optional[int] = None,
    ) -> set[int]:
        """Ids of tables held by a BOOKED/DEPOSIT_PAID booking overlapping [start, end)"""
        query = (
            db.query(BookedTable.table_id)
            .join(Booking, Booking.id == BookedTable.booking_id)
            .filter(
                Booking.booking_status.in_(BLOCKING_BOOKING_STATUSES),
                Booking.status == RecordStatus.ACTIVE.value,
                Booking.time_start < end,
                start < Booking.time_end,
            )
        )
        if table_ids is not None:
            query = query.filter(BookedTable.table_id.in_(list(table_ids)))
        if branch_id is not None:
            query = query.filter(Booking.branch_id == branch_id)
        return {row[0] for row in query.all()}

    @classmethod
    def get_free_tables(
        cls, db: Session, branch_id: int, start: datetime, end: datetime, min_capacity: int = 1
    ) -> list[DiningTable]:
        """ACTIVE tables of the branch with enough seats and no overlapping booking, smallest first"""
        busy = cls.get_busy_table_ids(db, start, end, branch_id=branch_id)
        tables = [
            t
            for t in cls.get_tables(db, branch_id)
            if t.status == RecordStatus.ACTIVE.value and t.capacity >= min_capacity and t.id not in busy
        ]
        return sorted(tables, key=lambda t: (t.capacity, t.id))
