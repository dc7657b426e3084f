"""Pre-order repository"""

from typing import Iterable, Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from ...constants import RecordStatus
from ...models_booking import Booking, PreOrder, PreOrderItem
from ...models_menu import Product
from ...shared.query_utils import apply_keyword, paginate


class PreOrderRepository:
    @staticmethod
    def get_pre_order(db: Session, pre_order_id: int) -> Optional[PreOrder]:
        return (
            db.query(PreOrder)
            .options(
                joinedload(PreOrder.branch),
                selectinload(PreOrder.items).joinedload(PreOrderItem.product),
            )
            .filter(PreOrder.id == pre_order_id, PreOrder.status != RecordStatus.DELETED.value)
            .first()
        )

    @staticmethod
    def list_pre_orders(
        db: Session,
        page: int,
        size: int,
        keyword: Optional[str] = None,
        booking_status: Optional[str] = None,
        branch_id: Optional[int] = None,
        order_type: Optional[str] = None,
    ) -> tuple[list[PreOrder], int]:
        query = (
            db.query(PreOrder)
            .options(
                joinedload(PreOrder.branch),
                selectinload(PreOrder.items).joinedload(PreOrderItem.product),
            )
            .filter(PreOrder.status != RecordStatus.DELETED.value)
        )
        query = apply_keyword(query, keyword, PreOrder.customer_name, PreOrder.customer_phone)
        if booking_status:
            query = query.filter(PreOrder.booking_status == booking_status)
        if branch_id:
            query = query.filter(PreOrder.branch_id == branch_id)
        if order_type:
            query = query.filter(PreOrder.type == order_type)
        return paginate(query.order_by(PreOrder.time.desc()), page, size)

    @staticmethod
    def get_products(db: Session, product_ids: Iterable[int]) -> dict[int, Product]:
        ids = list(product_ids)
        products = db.query(Product).filter(Product.id.in_(ids)).all() if ids else []
        return {p.id: p for p in products}

    @staticmethod
    def get_booking(db: Session, booking_id: int) -> Optional[Booking]:
        return db.query(Booking).filter(Booking.id == booking_id).first()
