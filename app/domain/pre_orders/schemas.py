"""Pre-order domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...constants import BookingStatus, PaymentType, PreOrderType
from ...shared.datetime_utils import to_naive_utc
from ...shared.validators import validate_customer_name, validate_email, validate_phone


class PreOrderProductInput(BaseModel):
    id: int
    quantity: int = Field(..., ge=1)
    note: Optional[str] = Field(None, max_length=500)


class PreOrderItems(BaseModel):
    product: list[PreOrderProductInput] = Field(..., min_length=1)


class PreOrderCreate(BaseModel):
    type: PreOrderType
    branchId: int
    bookingTableId: Optional[int] = None
    time: datetime
    customerName: str
    customerPhone: str
    customerEmail: Optional[str] = None
    paymentType: PaymentType
    notes: Optional[str] = Field(None, max_length=1000)
    orderItems: PreOrderItems

    @field_validator("time")
    @classmethod
    def normalize_time(cls, v):
        return to_naive_utc(v)

    @field_validator("customerName")
    @classmethod
    def check_name(cls, v):
        return validate_customer_name(v)

    @field_validator("customerPhone")
    @classmethod
    def check_phone(cls, v):
        return validate_phone(v)

    @field_validator("customerEmail")
    @classmethod
    def check_email(cls, v):
        return validate_email(v) or None


class PreOrderStatusUpdate(BaseModel):
    bookingStatus: BookingStatus


class PreOrderConfigUpdate(BaseModel):
    depositPercentage: float = Field(..., ge=0, le=100)


class PreOrderConfigResponse(BaseModel):
    branchId: int
    branchName: str
    depositPercentage: float
    isDefault: bool


class PreOrderItemResponse(BaseModel):
    id: int
    productId: int
    productName: Optional[str] = None
    quantity: int
    price: float
    total: float
    note: Optional[str] = None


class PreOrderResponse(BaseModel):
    id: int
    type: str
    branchId: int
    branchName: Optional[str] = None
    bookingTableId: Optional[int] = None
    time: datetime
    customerName: str
    customerPhone: str
    customerEmail: Optional[str] = None
    paymentType: str
    notes: Optional[str] = None
    totalDeposit: float
    expireTime: Optional[datetime] = None
    bookingStatus: str
    items: list[PreOrderItemResponse]
    totalItems: int
    totalAmount: float
    status: str
    createdAt: datetime

    @classmethod
    def from_model(cls, pre_order) -> "PreOrderResponse":
        items = [
            PreOrderItemResponse(
                id=item.id,
                productId=item.product_id,
                productName=item.product.name if item.product else None,
                quantity=item.quantity,
                price=item.price,
                total=item.price * item.quantity,
                note=item.note,
            )
            for item in pre_order.items
        ]
        return cls(
            id=pre_order.id,
            type=pre_order.type,
            branchId=pre_order.branch_id,
            branchName=pre_order.branch.name if pre_order.branch else None,
            bookingTableId=pre_order.booking_table_id,
            time=pre_order.time,
            customerName=pre_order.customer_name,
            customerPhone=pre_order.customer_phone,
            customerEmail=pre_order.customer_email,
            paymentType=pre_order.payment_type,
            notes=pre_order.notes,
            totalDeposit=pre_order.total_deposit,
            expireTime=pre_order.expire_time,
            bookingStatus=pre_order.booking_status,
            items=items,
            totalItems=sum(item.quantity for item in items),
            totalAmount=pre_order.total_amount,
            status=pre_order.status,
            createdAt=pre_order.created_at,
        )
