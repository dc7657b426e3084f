"""Branch router - branches, table types and dining tables"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_manager, get_current_user
from ...database import get_db
from ...models import User
from ...shared.responses import ok
from .schemas import (
    BranchCreate,
    BranchResponse,
    TableCreate,
    TableResponse,
    TableTypeCreate,
    TableTypeResponse,
)
from .service import BranchService

router = APIRouter(tags=["Branches"])


def get_branch_service(db: Session = Depends(get_db)) -> BranchService:
    return BranchService(db)


# ============================================================================
# BRANCHES
# ============================================================================


@router.get("/branches")
async def get_branches(
    current_user: User = Depends(get_current_user),
    service: BranchService = Depends(get_branch_service),
):
    return ok([BranchResponse.from_model(b) for b in service.get_branches()])


@router.post("/branches")
async def create_branch(
    data: BranchCreate,
    current_user: User = Depends(get_current_manager),
    service: BranchService = Depends(get_branch_service),
):
    branch = service.create_branch(data, current_user)
    return ok(BranchResponse.from_model(branch), "Branch created successfully")


# ============================================================================
# TABLE TYPES AND TABLES
# ============================================================================


@router.get("/table-types")
async def get_table_types(
    current_user: User = Depends(get_current_user),
    service: BranchService = Depends(get_branch_service),
):
    return ok([TableTypeResponse.model_validate(t) for t in service.get_table_types()])


@router.post("/table-types")
async def create_table_type(
    data: TableTypeCreate,
    current_user: User = Depends(get_current_manager),
    service: BranchService = Depends(get_branch_service),
):
    table_type = service.create_table_type(data, current_user)
    return ok(TableTypeResponse.model_validate(table_type), "Table type created successfully")


@router.get("/tables")
async def get_tables(
    branchId: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    service: BranchService = Depends(get_branch_service),
):
    return ok([TableResponse.from_model(t) for t in service.get_tables(branchId)])


@router.post("/tables")
async def create_table(
    data: TableCreate,
    current_user: User = Depends(get_current_manager),
    service: BranchService = Depends(get_branch_service),
):
    table = service.create_table(data, current_user)
    return ok(TableResponse.from_model(table), "Table created successfully")
