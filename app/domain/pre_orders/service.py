"""Pre-order service - food ordered ahead for dine-in bookings or takeaway"""

import logging
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import BOOKING_PAYMENT_WINDOW_MINUTES, DEFAULT_PRE_ORDER_DEPOSIT_PERCENTAGE
from ...constants import BookingStatus, PaymentType, PreOrderType, RecordStatus
from ...models import Branch, User
from ...models_booking import PreOrder, PreOrderItem
from ...services.status_automation import BOOKING_TRANSITIONS, change_status
from ...shared.datetime_utils import utcnow
from ..branches.repository import BranchRepository
from .repository import PreOrderRepository
from .schemas import PreOrderConfigResponse, PreOrderConfigUpdate, PreOrderCreate

logger = logging.getLogger(__name__)


def calculate_deposit(total_amount: float, percentage: float) -> float:
    """Deposit rounded half-up to a whole currency unit"""
    raw = Decimal(str(total_amount)) * Decimal(str(percentage)) / Decimal(100)
    return float(raw.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def deposit_percentage_for(branch: Branch) -> float:
    if branch.pre_order_deposit_percentage is None:
        return DEFAULT_PRE_ORDER_DEPOSIT_PERCENTAGE
    return branch.pre_order_deposit_percentage


class PreOrderService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = PreOrderRepository()
        self.branch_repo = BranchRepository()

    def _get_branch(self, branch_id: int) -> Branch:
        branch = self.branch_repo.get_branch(self.db, branch_id)
        if not branch:
            raise HTTPException(status_code=404, detail="Branch not found")
        return branch

    def get_pre_order(self, pre_order_id: int) -> PreOrder:
        pre_order = self.repo.get_pre_order(self.db, pre_order_id)
        if not pre_order:
            raise HTTPException(status_code=404, detail="Pre-order not found")
        return pre_order

    def create_pre_order(self, data: PreOrderCreate, user: User) -> PreOrder:
        logger.info(f"📥 Creating {data.type.value} pre-order for branch {data.branchId}")
        branch = self._get_branch(data.branchId)

        now = utcnow()
        if data.time <= now:
            raise HTTPException(status_code=400, detail="Pre-order time must be in the future")

        booking_id = None
        if data.type == PreOrderType.DINE_IN:
            if not data.bookingTableId:
                raise HTTPException(status_code=400, detail="Dine-in pre-orders require a table booking")
            booking = self.repo.get_booking(self.db, data.bookingTableId)
            if not booking:
                raise HTTPException(status_code=404, detail="Table booking not found")
            if booking.branch_id != branch.id:
                raise HTTPException(status_code=400, detail="Table booking belongs to another branch")
            if booking.booking_status == BookingStatus.CANCELLED.value:
                raise HTTPException(status_code=400, detail="Table booking was cancelled")
            booking_id = booking.id

        requested = data.orderItems.product
        products = self.repo.get_products(self.db, {p.id for p in requested})
        items = []
        for line in requested:
            product = products.get(line.id)
            if not product:
                raise HTTPException(status_code=404, detail=f"Product {line.id} not found")
            if product.status != RecordStatus.ACTIVE.value:
                raise HTTPException(status_code=400, detail=f"Product {product.name} is not available")
            items.append(
                PreOrderItem(product_id=product.id, quantity=line.quantity, price=product.price, note=line.note)
            )

        total_amount = sum(item.price * item.quantity for item in items)
        paid_in_cash = data.paymentType == PaymentType.CASH

        pre_order = PreOrder(
            type=data.type.value,
            branch_id=branch.id,
            booking_table_id=booking_id,
            time=data.time,
            customer_name=data.customerName,
            customer_phone=data.customerPhone,
            customer_email=data.customerEmail,
            payment_type=data.paymentType.value,
            notes=data.notes,
            total_amount=total_amount,
            total_deposit=calculate_deposit(total_amount, deposit_percentage_for(branch)),
            booking_status=(
                BookingStatus.DEPOSIT_PAID.value if paid_in_cash else BookingStatus.BOOKED.value
            ),
            expire_time=None if paid_in_cash else now + timedelta(minutes=BOOKING_PAYMENT_WINDOW_MINUTES),
            items=items,
            created_by=user.id,
        )
        self.db.add(pre_order)
        self.db.commit()
        logger.info(
            f"✅ Pre-order {pre_order.id} created: total {total_amount}, deposit {pre_order.total_deposit}"
        )
        return self.get_pre_order(pre_order.id)

    def list_pre_orders(self, page: int, size: int, **filters) -> tuple[list[PreOrder], int]:
        return self.repo.list_pre_orders(self.db, page, size, **filters)

    def update_status(self, pre_order_id: int, new_status: BookingStatus, user: User) -> PreOrder:
        pre_order = self.get_pre_order(pre_order_id)
        change_status(pre_order, "booking_status", BOOKING_TRANSITIONS, new_status, "pre-order")
        pre_order.updated_by = user.id
        self.db.commit()
        return self.get_pre_order(pre_order_id)

    # ------------------------------------------------------------------
    # Deposit configuration
    # ------------------------------------------------------------------

    def _config(self, branch: Branch) -> PreOrderConfigResponse:
        return PreOrderConfigResponse(
            branchId=branch.id,
            branchName=branch.name,
            depositPercentage=deposit_percentage_for(branch),
            isDefault=branch.pre_order_deposit_percentage is None,
        )

    def get_config(self, branch_id: int) -> PreOrderConfigResponse:
        return self._config(self._get_branch(branch_id))

    def update_config(self, branch_id: int, data: PreOrderConfigUpdate, user: User) -> PreOrderConfigResponse:
        branch = self._get_branch(branch_id)
        branch.pre_order_deposit_percentage = data.depositPercentage
        branch.updated_by = user.id
        self.db.commit()
        logger.info(f"✅ Pre-order deposit for branch {branch_id} set to {data.depositPercentage}%")
        return self._config(branch)
