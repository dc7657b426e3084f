from datetime import timedelta

import pytest

from app.constants import RequestStatus, ShiftStatus
from app.models import Notification
from app.models_scheduling import ShiftLeaveRequest, StaffShift
from app.shared.datetime_utils import utcnow

URL = "/shift-leave-management"


@pytest.fixture
def morning(make_shift):
    return make_shift()


@pytest.fixture
def rostered(db, waiter, morning, schedule, next_monday):
    """Anna's DRAFT morning shift next Monday"""
    staff_shift = StaffShift(staff_id=waiter.id, scheduled_shift_id=schedule(morning, next_monday).id)
    db.add(staff_shift)
    db.commit()
    return staff_shift


def leave(morning, start, days=2, **fields):
    return {
        "startDate": start.isoformat(),
        "endDate": (start + timedelta(days=days - 1)).isoformat(),
        "shiftIds": [morning.id, morning.id],
        "reason": "  Family wedding ",
        **fields,
    }


def test_missing_dates_are_rejected_before_anything_is_stored(client, db, morning, waiter_headers):
    response = client.post(
        f"{URL}/requests", json={"shiftIds": [morning.id], "reason": "Trip"}, headers=waiter_headers
    )

    assert response.status_code == 422
    assert "Start date and end date are required" in response.json()["message"]
    assert db.query(ShiftLeaveRequest).count() == 0


def test_create_request_counts_affected_shifts(client, morning, next_monday, waiter_headers):
    response = client.post(f"{URL}/requests", json=leave(morning, next_monday), headers=waiter_headers)

    assert response.status_code == 200
    request = response.json()["payload"]
    assert request["requestStatus"] == RequestStatus.PENDING.value
    assert request["affectedShiftsCount"] == 2
    assert request["shiftIds"] == [morning.id]
    assert request["reason"] == "Family wedding"
    assert request["isManagerAdded"] is False

    overlapping = leave(morning, next_monday + timedelta(days=1))
    assert client.post(f"{URL}/requests", json=overlapping, headers=waiter_headers).status_code == 409


def test_request_rules(client, make_shift, morning, next_monday, waiter_headers):
    past = leave(morning, utcnow().date() - timedelta(days=3))
    assert client.post(f"{URL}/requests", json=past, headers=waiter_headers).status_code == 400

    weekend = make_shift("Weekend brunch", week_days=["SAT", "SUN"])
    weekdays_only = leave(weekend, next_monday, days=3)
    assert client.post(f"{URL}/requests", json=weekdays_only, headers=waiter_headers).status_code == 400

    reversed_range = leave(morning, next_monday, endDate=(next_monday - timedelta(days=1)).isoformat())
    assert client.post(f"{URL}/requests", json=reversed_range, headers=waiter_headers).status_code == 422


def test_approval_marks_rostered_shifts(client, db, waiter, rostered, morning, next_monday, manager_headers, waiter_headers):
    request_id = client.post(f"{URL}/requests", json=leave(morning, next_monday), headers=waiter_headers).json()["payload"]["id"]

    pending = client.get(f"{URL}/pending-requests", headers=manager_headers).json()["payload"]
    assert [r["id"] for r in pending] == [request_id]

    response = client.put(
        f"{URL}/requests/{request_id}/approve-reject",
        json={"requestStatus": "APPROVED", "managerNote": "Enjoy"},
        headers=manager_headers,
    )

    assert response.status_code == 200
    assert response.json()["payload"]["approvedByName"] == "Manager"
    db.refresh(rostered)
    assert rostered.shift_status == ShiftStatus.APPROVED_LEAVE_VALID.value

    balance = client.get(f"{URL}/my-balance", params={"year": next_monday.year}, headers=waiter_headers).json()["payload"]
    assert balance["usedShifts"] == 2
    assert balance["availableShifts"] == 10

    types = [n.type for n in db.query(Notification).filter(Notification.user_id == waiter.id)]
    assert types == ["LEAVE_APPROVED"]

    again = client.put(
        f"{URL}/requests/{request_id}/approve-reject", json={"requestStatus": "REJECTED"}, headers=manager_headers
    )
    assert again.status_code == 400


def test_leave_beyond_balance_is_flagged(client, db, waiter, rostered, morning, next_monday, manager_headers):
    response = client.post(
        f"{URL}/requests/add-for-employee",
        json=leave(morning, next_monday, days=13, employeeId=waiter.id, managerNote="Hospital stay"),
        headers=manager_headers,
    )

    assert response.status_code == 200
    request = response.json()["payload"]
    assert request["requestStatus"] == RequestStatus.APPROVED.value
    assert request["isManagerAdded"] is True
    assert request["affectedShiftsCount"] == 13

    db.refresh(rostered)
    assert rostered.shift_status == ShiftStatus.APPROVED_LEAVE_EXCEEDED.value


def test_manager_may_record_past_leave(client, waiter, morning, manager_headers):
    start = utcnow().date() - timedelta(days=7)
    response = client.post(
        f"{URL}/requests/add-for-employee",
        json=leave(morning, start, employeeId=waiter.id),
        headers=manager_headers,
    )

    assert response.status_code == 200


def test_cancel_own_pending_request(client, make_user, headers_for, morning, next_monday, manager_headers, waiter_headers):
    request_id = client.post(f"{URL}/requests", json=leave(morning, next_monday), headers=waiter_headers).json()["payload"]["id"]

    colleague = headers_for(make_user("binh"))
    assert client.delete(f"{URL}/requests/{request_id}", headers=colleague).status_code == 403
    assert client.delete(f"{URL}/requests/{request_id}", headers=waiter_headers).status_code == 200

    assert client.get(f"{URL}/my-requests", headers=waiter_headers).json()["payload"] == []
    # A cancelled request no longer blocks the same dates
    assert client.post(f"{URL}/requests", json=leave(morning, next_monday), headers=waiter_headers).status_code == 200


def test_rejected_request_cannot_be_cancelled(client, morning, next_monday, manager_headers, waiter_headers):
    request_id = client.post(f"{URL}/requests", json=leave(morning, next_monday), headers=waiter_headers).json()["payload"]["id"]
    client.put(
        f"{URL}/requests/{request_id}/approve-reject",
        json={"requestStatus": "REJECTED", "managerNote": "Short staffed"},
        headers=manager_headers,
    )

    mine = client.get(f"{URL}/my-requests", headers=waiter_headers).json()["payload"]
    assert [(r["requestStatus"], r["managerNote"]) for r in mine] == [("REJECTED", "Short staffed")]
    assert client.delete(f"{URL}/requests/{request_id}", headers=waiter_headers).status_code == 400


def test_balances(client, branch, manager, waiter, manager_headers):
    year = utcnow().year
    updated = client.put(
        f"{URL}/balance/{waiter.id}",
        json={"year": year, "bonusShifts": 3, "reason": "Overtime in December"},
        headers=manager_headers,
    ).json()["payload"]
    assert updated["availableShifts"] == 15
    assert updated["bonusReason"] == "Overtime in December"

    balances = client.get(
        f"{URL}/branch-balances", params={"branchId": branch.id, "year": year}, headers=manager_headers
    ).json()["payload"]
    assert [(b["userName"], b["availableShifts"]) for b in balances] == [("Anna Nguyen", 15), ("Manager", 12)]

    low = client.get(
        f"{URL}/low-balance-employees",
        params={"branchId": branch.id, "year": year, "threshold": 12},
        headers=manager_headers,
    ).json()["payload"]
    assert [b["userId"] for b in low] == [manager.id]

    assert client.put(f"{URL}/balance/999", json={"year": year, "bonusShifts": 1}, headers=manager_headers).status_code == 404
