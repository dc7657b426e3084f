"""Branch domain schemas - branches, table types and dining tables"""

from typing import Optional

from pydantic import BaseModel, Field


class BranchCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    address: Optional[str] = None
    phone: Optional[str] = None
    preOrderDepositPercentage: Optional[float] = Field(None, ge=0, le=100)


class BranchResponse(BaseModel):
    id: int
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    preOrderDepositPercentage: Optional[float] = None
    status: str

    class Config:
        from_attributes = True

    @classmethod
    def from_model(cls, branch) -> "BranchResponse":
        return cls(
            id=branch.id,
            name=branch.name,
            address=branch.address,
            phone=branch.phone,
            preOrderDepositPercentage=branch.pre_order_deposit_percentage,
            status=branch.status,
        )


class TableTypeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    capacity: int = Field(4, ge=1)
    deposit: float = Field(0, ge=0)


class TableTypeResponse(BaseModel):
    id: int
    name: str
    capacity: int
    deposit: float

    class Config:
        from_attributes = True


class TableCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    branchId: int
    tableTypeId: int
    floorName: Optional[str] = None
    capacity: Optional[int] = Field(None, ge=1)  # defaults to the table type's capacity


class TableResponse(BaseModel):
    id: int
    name: str
    branchId: int
    floorName: Optional[str] = None
    tableTypeId: int
    tableType: Optional[str] = None
    capacity: int
    deposit: float = 0
    status: str

    @classmethod
    def from_model(cls, table) -> "TableResponse":
        table_type = table.table_type
        return cls(
            id=table.id,
            name=table.name,
            branchId=table.branch_id,
            floorName=table.floor_name,
            tableTypeId=table.table_type_id,
            tableType=table_type.name if table_type else None,
            capacity=table.capacity,
            deposit=table_type.deposit if table_type else 0,
            status=table.status,
        )
