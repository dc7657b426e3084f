from datetime import timedelta

import pytest

from app.constants import BookingStatus, WaitlistStatus
from app.models_booking import Booking, WaitlistEntry
from app.shared.datetime_utils import utcnow


@pytest.fixture
def waitlist_payload(branch):
    start = (utcnow() + timedelta(days=1)).replace(hour=19, minute=0, second=0, microsecond=0)

    def _payload(**overrides):
        payload = {
            "preferredStartTime": start.isoformat(),
            "preferredEndTime": (start + timedelta(hours=2)).isoformat(),
            "duration": 2,
            "guestCount": 3,
            "customerName": "Hoa Pham",
            "customerPhone": "0912345678",
            "customerEmail": "hoa@example.com",
            "maxWaitHours": 2,
            "branchId": branch.id,
        }
        payload.update(overrides)
        return payload

    return _payload


def test_join_waitlist_estimates_wait(client, waitlist_payload):
    first = client.post("/waitlist/create", json=waitlist_payload())
    assert first.status_code == 200
    assert first.json()["payload"]["estimatedWaitTime"] == 15
    assert first.json()["payload"]["waitlistStatus"] == WaitlistStatus.ACTIVE.value

    second = client.post("/waitlist/create", json=waitlist_payload(customerName="Bao Vo"))
    assert second.json()["payload"]["estimatedWaitTime"] == 30
    assert second.json()["payload"]["formattedWaitTime"] == "30 min"


def test_waitlist_requires_future_window(client, waitlist_payload):
    past = utcnow() - timedelta(minutes=5)
    response = client.post(
        "/waitlist/create",
        json=waitlist_payload(preferredStartTime=past.isoformat(), preferredEndTime=utcnow().isoformat()),
    )

    assert response.status_code == 422


def test_waitlist_requires_email(client, waitlist_payload):
    assert client.post("/waitlist/create", json=waitlist_payload(customerEmail="  ")).status_code == 422


def test_process_matches_smallest_free_table(client, tables, waitlist_payload, manager_headers):
    entry_id = client.post("/waitlist/create", json=waitlist_payload()).json()["payload"]["waitlistId"]

    summary = client.post("/waitlist/process", headers=manager_headers).json()["payload"]
    assert summary == {"processed": 1, "notified": 1, "stillWaiting": 0}

    entry = client.get(f"/waitlist/{entry_id}").json()["payload"]
    assert entry["waitlistStatus"] == WaitlistStatus.NOTIFIED.value
    assert entry["statusDisplay"]["canCancel"] is True
    # No e-mail provider is configured
    assert entry["notificationSent"] is False

    booking = client.get(f"/booking-table/{entry['bookingCreatedId']}", headers=manager_headers).json()["payload"]
    assert booking["bookingStatus"] == BookingStatus.BOOKED.value
    assert booking["bookedTables"][0]["tableName"] == "T2"
    assert booking["waitlistId"] == entry_id


def test_deposit_converts_waitlist_entry(client, tables, waitlist_payload, manager_headers):
    entry_id = client.post("/waitlist/create", json=waitlist_payload()).json()["payload"]["waitlistId"]
    client.post("/waitlist/process", headers=manager_headers)
    booking_id = client.get(f"/waitlist/{entry_id}").json()["payload"]["bookingCreatedId"]

    client.post(f"/booking-table/{booking_id}/confirm-deposit", headers=manager_headers)

    entry = client.get(f"/waitlist/{entry_id}").json()["payload"]
    assert entry["waitlistStatus"] == WaitlistStatus.CONVERTED.value
    assert entry["statusDisplay"]["canCancel"] is False


def test_party_too_large_keeps_waiting(client, tables, waitlist_payload, manager_headers):
    client.post("/waitlist/create", json=waitlist_payload(guestCount=12))

    summary = client.post("/waitlist/process", headers=manager_headers).json()["payload"]

    assert summary["notified"] == 0
    assert summary["stillWaiting"] == 1


def test_cancel_releases_held_table(client, tables, waitlist_payload, manager_headers):
    entry_id = client.post("/waitlist/create", json=waitlist_payload()).json()["payload"]["waitlistId"]
    client.post("/waitlist/process", headers=manager_headers)

    cancelled = client.put(f"/waitlist/{entry_id}/cancel").json()["payload"]
    assert cancelled["waitlistStatus"] == WaitlistStatus.CANCELLED.value

    booking = client.get(f"/booking-table/{cancelled['bookingCreatedId']}", headers=manager_headers).json()["payload"]
    assert booking["bookingStatus"] == BookingStatus.CANCELLED.value

    assert client.put(f"/waitlist/{entry_id}/cancel").status_code == 400


def test_cleanup_expires_timed_out_entries(client, db, waitlist_payload, manager_headers):
    entry_id = client.post("/waitlist/create", json=waitlist_payload()).json()["payload"]["waitlistId"]
    entry = db.get(WaitlistEntry, entry_id)
    entry.expires_at = utcnow() - timedelta(minutes=1)
    db.commit()

    summary = client.post("/waitlist/cleanup", headers=manager_headers).json()["payload"]

    assert summary["expired"] == 1
    assert client.get(f"/waitlist/{entry_id}").json()["payload"]["waitlistStatus"] == WaitlistStatus.EXPIRED.value


def test_back_office_list_is_in_queue_order(client, waitlist_payload, manager_headers):
    client.post("/waitlist/create", json=waitlist_payload())
    client.post("/waitlist/create", json=waitlist_payload(customerName="Bao Vo"))

    result = client.get("/waitlist", headers=manager_headers).json()["payload"]

    assert result["total"] == 2
    assert [e["customerName"] for e in result["data"]] == ["Hoa Pham", "Bao Vo"]


def test_process_skips_windows_already_started(client, db, tables, waitlist_payload, manager_headers):
    entry_id = client.post("/waitlist/create", json=waitlist_payload()).json()["payload"]["waitlistId"]
    entry = db.get(WaitlistEntry, entry_id)
    entry.preferred_start_time = utcnow() - timedelta(minutes=5)
    db.commit()

    summary = client.post("/waitlist/process", headers=manager_headers).json()["payload"]

    assert summary == {"processed": 1, "notified": 0, "stillWaiting": 1}
    entry = client.get(f"/waitlist/{entry_id}").json()["payload"]
    assert entry["waitlistStatus"] == WaitlistStatus.ACTIVE.value
    assert entry["bookingCreatedId"] is None


def test_unpaid_held_booking_expires_the_entry(client, db, tables, waitlist_payload, manager_headers):
    entry_id = client.post("/waitlist/create", json=waitlist_payload()).json()["payload"]["waitlistId"]
    client.post("/waitlist/process", headers=manager_headers)
    booking_id = client.get(f"/waitlist/{entry_id}").json()["payload"]["bookingCreatedId"]
    booking = db.get(Booking, booking_id)
    booking.expire_time = utcnow() - timedelta(minutes=1)
    db.commit()

    late = client.post(f"/booking-table/{booking_id}/confirm-deposit", headers=manager_headers)
    assert late.status_code == 400
    assert late.json()["message"] == "Payment window has expired"

    expiry = client.post("/status/automation/expire-bookings", headers=manager_headers).json()["payload"]
    assert expiry["bookings_cancelled"] == 1

    summary = client.post("/waitlist/cleanup", headers=manager_headers).json()["payload"]

    assert summary == {"expired": 1}
    assert client.get(f"/waitlist/{entry_id}").json()["payload"]["waitlistStatus"] == WaitlistStatus.EXPIRED.value
