"""Booking router - guest and back-office table reservation endpoints"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_manager, get_current_user
from ...database import get_db
from ...models import User
from ...rate_limiter import create_rate_limiter
from ...shared.datetime_utils import to_naive_utc
from ...shared.responses import ok, page
from .schemas import AdminBookingCreate, BookingCreate, BookingResponse
from .service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/booking-table", tags=["Bookings"])

guest_booking_rate_limit = create_rate_limiter(limit=10, window_seconds=600, key_prefix="booking_create")
payment_status_rate_limit = create_rate_limiter(limit=60, window_seconds=60, key_prefix="booking_payment")


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db)


# ============================================================================
# GUEST ENDPOINTS
# ============================================================================


@router.post("/create")
async def create_booking(
    data: BookingCreate,
    _: None = Depends(guest_booking_rate_limit),
    service: BookingService = Depends(get_booking_service),
):
    """Book one or more tables from the guest site"""
    booking = service.create_guest_booking(data)
    return ok(BookingResponse.from_model(booking), "Booking created, please pay the deposit")


@router.get("/check-payment-status/{booking_id}")
async def check_payment_status(
    booking_id: int,
    _: None = Depends(payment_status_rate_limit),
    service: BookingService = Depends(get_booking_service),
):
    """Polled by the payment page until the deposit arrives or the window closes"""
    return ok(service.check_payment_status(booking_id))


# ============================================================================
# BACK-OFFICE ENDPOINTS
# ============================================================================


@router.post("/admin/create")
async def create_admin_booking(
    data: AdminBookingCreate,
    current_user: User = Depends(get_current_manager),
    service: BookingService = Depends(get_booking_service),
):
    booking = service.create_admin_booking(data, current_user)
    return ok(BookingResponse.from_model(booking), "Booking created successfully")


@router.get("")
async def list_bookings(
    page_number: int = Query(0, ge=0, alias="page"),
    size: int = Query(10, ge=1, le=100),
    keyword: Optional[str] = Query(None),
    customerName: Optional[str] = Query(None),
    customerPhone: Optional[str] = Query(None),
    bookingStatus: Optional[str] = Query(None),
    timeStart: Optional[datetime] = Query(None),
    timeEnd: Optional[datetime] = Query(None),
    branchId: Optional[int] = Query(None),
    sortBy: Optional[str] = Query(None, description="field,asc|desc"),
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    bookings, total = service.list_bookings(
        page_number,
        size,
        keyword=keyword,
        customer_name=customerName,
        customer_phone=customerPhone,
        booking_status=bookingStatus,
        time_start=to_naive_utc(timeStart),
        time_end=to_naive_utc(timeEnd),
        branch_id=branchId,
        sort_by=sortBy,
    )
    return ok(page([BookingResponse.from_model(b) for b in bookings], page_number, size, total))


@router.get("/{booking_id}")
async def get_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return ok(BookingResponse.from_model(service.get_booking(booking_id)))


@router.post("/{booking_id}/confirm-deposit")
async def confirm_deposit(
    booking_id: int,
    current_user: User = Depends(get_current_manager),
    service: BookingService = Depends(get_booking_service),
):
    booking = service.confirm_deposit(booking_id, current_user)
    return ok(BookingResponse.from_model(booking), "Deposit confirmed")


@router.post("/{booking_id}/complete")
async def complete_booking(
    booking_id: int,
    current_user: User = Depends(get_current_manager),
    service: BookingService = Depends(get_booking_service),
):
    booking = service.complete_booking(booking_id, current_user)
    return ok(BookingResponse.from_model(booking), "Booking completed")


@router.post("/{booking_id}/cancel")
async def cancel_booking(
    booking_id: int,
    current_user: User = Depends(get_current_manager),
    service: BookingService = Depends(get_booking_service),
):
    booking = service.cancel_booking(booking_id, current_user)
    return ok(BookingResponse.from_model(booking), "Booking cancelled")
