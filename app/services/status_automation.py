"""
Automated status transitions for reservations
Handles BOOKED → CANCELLED for unpaid bookings and pre-orders
Handles waitlist expiry and table matching (delegated to the waitlist service)
"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ..constants import BookingStatus, RecordStatus, WaitlistStatus
from ..models_booking import Booking, PreOrder
from ..shared.datetime_utils import utcnow

logger = logging.getLogger(__name__)

# Valid transitions; terminal states map to an empty list
BOOKING_TRANSITIONS = {
    BookingStatus.BOOKED.value: [BookingStatus.DEPOSIT_PAID.value, BookingStatus.CANCELLED.value],
    BookingStatus.DEPOSIT_PAID.value: [BookingStatus.COMPLETED.value, BookingStatus.CANCELLED.value],
    BookingStatus.COMPLETED.value: [],
    BookingStatus.CANCELLED.value: [],
}

WAITLIST_TRANSITIONS = {
    WaitlistStatus.ACTIVE.value: [
        WaitlistStatus.NOTIFIED.value,
        WaitlistStatus.EXPIRED.value,
        WaitlistStatus.CANCELLED.value,
    ],
    WaitlistStatus.NOTIFIED.value: [
        WaitlistStatus.CONVERTED.value,
        WaitlistStatus.EXPIRED.value,
        WaitlistStatus.CANCELLED.value,
    ],
    WaitlistStatus.CONVERTED.value: [],
    WaitlistStatus.EXPIRED.value: [],
    WaitlistStatus.CANCELLED.value: [],
}


def validate_status_transition(transitions: dict, current_status: str, new_status: str) -> bool:
    """
    Validate if a status transition is allowed

    Args:
        transitions: Transition table (current status -> allowed next statuses)
        current_status: Current status
        new_status: Desired new status

    Returns:
        bool: True if transition is valid, False otherwise
    """
    return new_status in transitions.get(current_status, [])


def change_status(entity, field: str, transitions: dict, new_status: str, label: str) -> None:
    """Apply a validated status change to entity.field, 400 when the move is not allowed"""
    new_status = getattr(new_status, "value", new_status)
    current_status = getattr(entity, field)
    if not validate_status_transition(transitions, current_status, new_status):
        raise HTTPException(
            status_code=400,
            detail=f"Cannot change {label} status from {current_status} to {new_status}",
        )
    setattr(entity, field, new_status)
    logger.info(f"✅ {label.capitalize()} {entity.id} transitioned: {current_status} → {new_status}")


def expire_unpaid_bookings(db: Session) -> dict:
    """
    Cancel bookings and pre-orders still BOOKED after their payment window.
    Should be run as a scheduled job (every minute).

    Returns:
        dict: Summary of status changes made
    """
    summary = {"bookings_cancelled": 0, "pre_orders_cancelled": 0, "total_updated": 0}

    try:
        now = utcnow()

        bookings = (
            db.query(Booking)
            .filter(
                Booking.booking_status == BookingStatus.BOOKED.value,
                Booking.status == RecordStatus.ACTIVE.value,
                Booking.expire_time.isnot(None),
                Booking.expire_time < now,
            )
            .all()
        )
        for booking in bookings:
            change_status(
                booking, "booking_status", BOOKING_TRANSITIONS, BookingStatus.CANCELLED, "booking"
            )
            summary["bookings_cancelled"] += 1

        pre_orders = (
            db.query(PreOrder)
            .filter(
                PreOrder.booking_status == BookingStatus.BOOKED.value,
                PreOrder.status == RecordStatus.ACTIVE.value,
                PreOrder.expire_time.isnot(None),
                PreOrder.expire_time < now,
            )
            .all()
        )
        for pre_order in pre_orders:
            change_status(
                pre_order, "booking_status", BOOKING_TRANSITIONS, BookingStatus.CANCELLED, "pre-order"
            )
            summary["pre_orders_cancelled"] += 1

        total = summary["bookings_cancelled"] + summary["pre_orders_cancelled"]
        if total > 0:
            db.commit()
            summary["total_updated"] = total
            logger.info(f"📊 Unpaid booking expiry summary: {summary}")
        else:
            logger.debug("ℹ️ No unpaid bookings to expire")

        return summary

    except Exception as e:
        logger.error(f"❌ Error expiring unpaid bookings: {str(e)}")
        db.rollback()
        raise


def cleanup_waitlist(db: Session) -> dict:
    """Expire waitlist entries that ran out of time. Scheduled every five minutes."""
    from ..domain.waitlist.service import WaitlistService

    try:
        return WaitlistService(db).cleanup()
    except Exception as e:
        logger.error(f"❌ Error cleaning up waitlist: {str(e)}")
        db.rollback()
        raise


def process_waitlist(db: Session) -> dict:
    """Match waiting customers with free tables. Scheduled every five minutes."""
    from ..domain.waitlist.service import WaitlistService

    try:
        return WaitlistService(db).process()
    except Exception as e:
        logger.error(f"❌ Error processing waitlist: {str(e)}")
        db.rollback()
        raise
