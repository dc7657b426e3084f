"""Pre-order routers - pre-orders and the per-branch deposit configuration"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_manager, get_current_user
from ...database import get_db
from ...models import User
from ...shared.responses import ok, page
from .schemas import PreOrderConfigUpdate, PreOrderCreate, PreOrderResponse, PreOrderStatusUpdate
from .service import PreOrderService

router = APIRouter(prefix="/pre-orders", tags=["Pre-orders"])
config_router = APIRouter(prefix="/pre-order-config", tags=["Pre-orders"])


def get_pre_order_service(db: Session = Depends(get_db)) -> PreOrderService:
    return PreOrderService(db)


@router.post("/admin/create")
async def create_pre_order(
    data: PreOrderCreate,
    current_user: User = Depends(get_current_manager),
    service: PreOrderService = Depends(get_pre_order_service),
):
    pre_order = service.create_pre_order(data, current_user)
    return ok(PreOrderResponse.from_model(pre_order), "Pre-order created successfully")


@router.get("")
async def list_pre_orders(
    page_number: int = Query(0, ge=0, alias="page"),
    size: int = Query(10, ge=1, le=100),
    keyword: Optional[str] = Query(None),
    bookingStatus: Optional[str] = Query(None),
    branchId: Optional[int] = Query(None),
    type: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    service: PreOrderService = Depends(get_pre_order_service),
):
    pre_orders, total = service.list_pre_orders(
        page_number,
        size,
        keyword=keyword,
        booking_status=bookingStatus,
        branch_id=branchId,
        order_type=type,
    )
    return ok(page([PreOrderResponse.from_model(p) for p in pre_orders], page_number, size, total))


@router.get("/{pre_order_id}")
async def get_pre_order(
    pre_order_id: int,
    current_user: User = Depends(get_current_user),
    service: PreOrderService = Depends(get_pre_order_service),
):
    return ok(PreOrderResponse.from_model(service.get_pre_order(pre_order_id)))


@router.put("/{pre_order_id}/status")
async def update_pre_order_status(
    pre_order_id: int,
    data: PreOrderStatusUpdate,
    current_user: User = Depends(get_current_manager),
    service: PreOrderService = Depends(get_pre_order_service),
):
    pre_order = service.update_status(pre_order_id, data.bookingStatus, current_user)
    return ok(PreOrderResponse.from_model(pre_order), "Pre-order status updated")


# ============================================================================
# DEPOSIT CONFIGURATION
# ============================================================================


@config_router.get("/branch/{branch_id}")
async def get_pre_order_config(
    branch_id: int,
    current_user: User = Depends(get_current_user),
    service: PreOrderService = Depends(get_pre_order_service),
):
    return ok(service.get_config(branch_id))


@config_router.put("/branch/{branch_id}")
async def update_pre_order_config(
    branch_id: int,
    data: PreOrderConfigUpdate,
    current_user: User = Depends(get_current_manager),
    service: PreOrderService = Depends(get_pre_order_service),
):
    return ok(service.update_config(branch_id, data, current_user), "Pre-order configuration updated")
