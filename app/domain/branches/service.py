"""Branch service - branches, table types and dining tables"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Branch, DiningTable, TableType, User
from .repository import BranchRepository
from .schemas import BranchCreate, TableCreate, TableTypeCreate

logger = logging.getLogger(__name__)


class BranchService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = BranchRepository()

    def get_branch(self, branch_id: int) -> Branch:
        branch = self.repo.get_branch(self.db, branch_id)
        if not branch:
            raise HTTPException(status_code=404, detail="Branch not found")
        return branch

    def get_branches(self) -> list[Branch]:
        return self.repo.get_branches(self.db)

    def create_branch(self, data: BranchCreate, user: User) -> Branch:
        logger.info(f"📥 Creating branch '{data.name}'")
        branch = Branch(
            name=data.name.strip(),
            address=data.address,
            phone=data.phone,
            pre_order_deposit_percentage=data.preOrderDepositPercentage,
            created_by=user.id,
        )
        return self.repo.create(self.db, branch)

    def get_table_types(self) -> list[TableType]:
        return self.repo.get_table_types(self.db)

    def create_table_type(self, data: TableTypeCreate, user: User) -> TableType:
        table_type = TableType(
            name=data.name.strip(),
            capacity=data.capacity,
            deposit=data.deposit,
            created_by=user.id,
        )
        return self.repo.create(self.db, table_type)

    def get_tables(self, branch_id=None) -> list[DiningTable]:
        return self.repo.get_tables(self.db, branch_id)

    def create_table(self, data: TableCreate, user: User) -> DiningTable:
        self.get_branch(data.branchId)
        table_type = self.repo.get_table_type(self.db, data.tableTypeId)
        if not table_type:
            raise HTTPException(status_code=404, detail="Table type not found")

        table = DiningTable(
            name=data.name.strip(),
            branch_id=data.branchId,
            floor_name=data.floorName,
            table_type_id=table_type.id,
            capacity=data.capacity or table_type.capacity,
            created_by=user.id,
        )
        table = self.repo.create(self.db, table)
        logger.info(f"✅ Table {table.name} created in branch {table.branch_id}")
        return table
