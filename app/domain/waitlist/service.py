"""Waitlist service - queueing guests for a table and matching them when one frees up"""

import logging
from datetime import timedelta

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import WAITLIST_MINUTES_PER_PARTY
from ...constants import BookingStatus, PaymentType, WaitlistStatus
from ...email_service import send_table_available_email, send_waitlist_joined_email
from ...models_booking import WaitlistEntry
from ...services.status_automation import (
    BOOKING_TRANSITIONS,
    WAITLIST_TRANSITIONS,
    change_status,
)
from ...shared.datetime_utils import format_wait_time, utcnow
from ..bookings.service import BookingService
from ..branches.repository import BranchRepository
from .repository import WaitlistRepository
from .schemas import WaitlistCreate

logger = logging.getLogger(__name__)


def estimate_wait_minutes(parties_ahead: int, max_wait_hours: int) -> int:
    """Each party ahead (plus this one) adds a fixed slot, never beyond the maximum wait"""
    return min((parties_ahead + 1) * WAITLIST_MINUTES_PER_PARTY, max_wait_hours * 60)


class WaitlistService:
    """Service layer for waitlist business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = WaitlistRepository()
        self.branch_repo = BranchRepository()

    def get_entry(self, entry_id: int) -> WaitlistEntry:
        entry = self.repo.get_entry(self.db, entry_id)
        if not entry:
            raise HTTPException(status_code=404, detail="Waitlist entry not found")
        return entry

    def create_entry(self, data: WaitlistCreate) -> WaitlistEntry:
        logger.info(f"📥 Waitlist request for branch {data.branchId}: {data.guestCount} guests")

        branch = self.branch_repo.get_branch(self.db, data.branchId)
        if not branch:
            raise HTTPException(status_code=404, detail="Branch not found")

        now = utcnow()
        ahead = self.repo.count_active_ahead(self.db, branch.id)
        entry = WaitlistEntry(
            branch_id=branch.id,
            preferred_start_time=data.preferredStartTime,
            preferred_end_time=data.preferredEndTime,
            duration=data.duration,
            guest_count=data.guestCount,
            customer_name=data.customerName,
            customer_phone=data.customerPhone,
            customer_email=data.customerEmail,
            notes=data.notes,
            max_wait_hours=data.maxWaitHours,
            expires_at=now + timedelta(hours=data.maxWaitHours),
            estimated_wait_time=estimate_wait_minutes(ahead, data.maxWaitHours),
            waitlist_status=WaitlistStatus.ACTIVE.value,
        )
        self.db.add(entry)
        self.db.commit()
        logger.info(
            f"✅ Waitlist entry {entry.id} created, {ahead} parties ahead, "
            f"estimated wait {entry.estimated_wait_time} min"
        )

        send_waitlist_joined_email(entry, branch.name, format_wait_time(entry.estimated_wait_time))
        return self.get_entry(entry.id)

    def list_entries(self, page: int, size: int, **filters):
        return self.repo.list_entries(self.db, page, size, **filters)

    def cancel_entry(self, entry_id: int) -> WaitlistEntry:
        entry = self.get_entry(entry_id)
        change_status(entry, "waitlist_status", WAITLIST_TRANSITIONS, WaitlistStatus.CANCELLED, "waitlist entry")

        # Release the table held for a guest who has not paid yet
        booking = entry.booking
        if booking and booking.booking_status == BookingStatus.BOOKED.value:
            change_status(booking, "booking_status", BOOKING_TRANSITIONS, BookingStatus.CANCELLED, "booking")

        self.db.commit()
        return self.get_entry(entry_id)

    # ------------------------------------------------------------------
    # Automation
    # ------------------------------------------------------------------

    def process(self) -> dict:
        """
        Offer free tables to waiting guests, oldest entry first.

        For each waiting entry the smallest free table of its branch that seats the
        party for the preferred window is booked (BOOKED, awaiting deposit), the entry
        moves to NOTIFIED and the guest is e-mailed after the commit.
        """
        now = utcnow()
        summary = {"processed": 0, "notified": 0, "stillWaiting": 0}
        matched = []
        booking_service = BookingService(self.db)

        for entry in self.repo.get_waiting_entries(self.db, now):
            summary["processed"] += 1

            # Never hold a table for a window that has already started
            if entry.preferred_start_time <= now:
                summary["stillWaiting"] += 1
                continue

            tables = self.branch_repo.get_free_tables(
                self.db,
                entry.branch_id,
                entry.preferred_start_time,
                entry.preferred_end_time,
                min_capacity=entry.guest_count,
            )
            if not tables:
                summary["stillWaiting"] += 1
                continue

            table = tables[0]
            booking = booking_service.reserve_tables(
                tables=[table],
                time_start=entry.preferred_start_time,
                time_end=entry.preferred_end_time,
                guest_count=entry.guest_count,
                customer_name=entry.customer_name,
                customer_phone=entry.customer_phone,
                customer_email=entry.customer_email,
                note=entry.notes,
                payment_type=PaymentType.BANKING,
            )
            entry.booking_created_id = booking.id
            change_status(entry, "waitlist_status", WAITLIST_TRANSITIONS, WaitlistStatus.NOTIFIED, "waitlist entry")
            matched.append((entry, booking, table))
            summary["notified"] += 1
            logger.info(f"🍽️ Waitlist entry {entry.id} matched with table {table.name} (booking {booking.id})")

        if matched:
            self.db.commit()
            for entry, booking, table in matched:
                branch_name = entry.branch.name if entry.branch else ""
                entry.notification_sent = send_table_available_email(entry, booking, branch_name, table.name)
            self.db.commit()

        logger.info(f"📊 Waitlist processing summary: {summary}")
        return summary

    def cleanup(self) -> dict:
        """Expire entries past their maximum wait and those whose held booking was cancelled"""
        now = utcnow()
        expired = 0

        for entry in self.repo.get_timed_out_entries(self.db, now):
            change_status(entry, "waitlist_status", WAITLIST_TRANSITIONS, WaitlistStatus.EXPIRED, "waitlist entry")
            expired += 1

        for entry in self.repo.get_notified_with_cancelled_booking(self.db):
            change_status(entry, "waitlist_status", WAITLIST_TRANSITIONS, WaitlistStatus.EXPIRED, "waitlist entry")
            expired += 1

        if expired:
            self.db.commit()
            logger.info(f"📊 Waitlist cleanup expired {expired} entries")
        else:
            logger.debug("ℹ️ No waitlist entries to expire")
        return {"expired": expired}
