"""Waitlist router - guest sign-up and back-office queue management"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_manager, get_current_user
from ...database import get_db
from ...models import User
from ...rate_limiter import create_rate_limiter
from ...shared.datetime_utils import format_wait_time
from ...shared.responses import ok, page
from .schemas import (
    WaitlistCleanupSummary,
    WaitlistCreate,
    WaitlistCreateResponse,
    WaitlistProcessSummary,
    WaitlistResponse,
)
from .service import WaitlistService

router = APIRouter(prefix="/waitlist", tags=["Waitlist"])

waitlist_rate_limit = create_rate_limiter(limit=5, window_seconds=600, key_prefix="waitlist_create")
waitlist_lookup_rate_limit = create_rate_limiter(limit=60, window_seconds=60, key_prefix="waitlist_lookup")


def get_waitlist_service(db: Session = Depends(get_db)) -> WaitlistService:
    return WaitlistService(db)


# ============================================================================
# GUEST ENDPOINTS
# ============================================================================


@router.post("/create")
async def create_waitlist(
    data: WaitlistCreate,
    _: None = Depends(waitlist_rate_limit),
    service: WaitlistService = Depends(get_waitlist_service),
):
    entry = service.create_entry(data)
    wait = format_wait_time(entry.estimated_wait_time)
    response = WaitlistCreateResponse(
        waitlistId=entry.id,
        branchId=entry.branch_id,
        preferredStartTime=entry.preferred_start_time,
        preferredEndTime=entry.preferred_end_time,
        duration=entry.duration,
        guestCount=entry.guest_count,
        customerName=entry.customer_name,
        customerPhone=entry.customer_phone,
        customerEmail=entry.customer_email,
        notes=entry.notes,
        maxWaitHours=entry.max_wait_hours,
        expiresAt=entry.expires_at,
        waitlistStatus=entry.waitlist_status,
        estimatedWaitTime=entry.estimated_wait_time,
        formattedWaitTime=wait,
        message=f"You have been added to the waitlist. Estimated wait time: {wait}",
    )
    return ok(response, response.message)


@router.get("/{entry_id}")
async def get_waitlist(
    entry_id: int,
    _: None = Depends(waitlist_lookup_rate_limit),
    service: WaitlistService = Depends(get_waitlist_service),
):
    return ok(WaitlistResponse.from_model(service.get_entry(entry_id)))


@router.put("/{entry_id}/cancel")
async def cancel_waitlist(
    entry_id: int,
    _: None = Depends(waitlist_lookup_rate_limit),
    service: WaitlistService = Depends(get_waitlist_service),
):
    entry = service.cancel_entry(entry_id)
    return ok(WaitlistResponse.from_model(entry), "Waitlist entry cancelled")


# ============================================================================
# BACK-OFFICE ENDPOINTS
# ============================================================================


@router.get("")
async def list_waitlist(
    page_number: int = Query(0, ge=0, alias="page"),
    size: int = Query(20, ge=1, le=100),
    keyword: Optional[str] = Query(None),
    customerName: Optional[str] = Query(None),
    customerPhone: Optional[str] = Query(None),
    customerEmail: Optional[str] = Query(None),
    waitlistStatus: Optional[str] = Query(None),
    guestCount: Optional[int] = Query(None),
    duration: Optional[int] = Query(None),
    branchId: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    service: WaitlistService = Depends(get_waitlist_service),
):
    entries, total = service.list_entries(
        page_number,
        size,
        keyword=keyword,
        customer_name=customerName,
        customer_phone=customerPhone,
        customer_email=customerEmail,
        waitlist_status=waitlistStatus,
        guest_count=guestCount,
        duration=duration,
        branch_id=branchId,
    )
    return ok(page([WaitlistResponse.from_model(e) for e in entries], page_number, size, total))


@router.post("/process")
async def process_waitlist(
    current_user: User = Depends(get_current_manager),
    service: WaitlistService = Depends(get_waitlist_service),
):
    summary = WaitlistProcessSummary(**service.process())
    return ok(summary, f"Processed {summary.processed} entries, notified {summary.notified}")


@router.post("/cleanup")
async def cleanup_waitlist(
    current_user: User = Depends(get_current_manager),
    service: WaitlistService = Depends(get_waitlist_service),
):
    summary = WaitlistCleanupSummary(**service.cleanup())
    return ok(summary, f"Expired {summary.expired} entries")
