"""
API endpoints to run reservation automation on demand
The same jobs run on a schedule in the arq worker
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..auth import get_current_manager
from ..database import get_db
from ..models import User
from ..services.status_automation import expire_unpaid_bookings
from ..shared.responses import ok

router = APIRouter(prefix="/status", tags=["status"])


class ExpiryResult(BaseModel):
    bookings_cancelled: int
    pre_orders_cancelled: int
    total_updated: int


@router.post("/automation/expire-bookings")
async def run_booking_expiry(current_user: User = Depends(get_current_manager), db: Session = Depends(get_db)):
    """Manually trigger the unpaid booking expiry job"""
    result = expire_unpaid_bookings(db)
    return ok(ExpiryResult(**result), f"{result['total_updated']} reservations cancelled")
