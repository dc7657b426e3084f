from datetime import time, timedelta

from app.config import SHIFT_FEEDBACK_DEADLINE_HOURS
from app.constants import ScheduledShiftStatus, ShiftStatus
from app.models_scheduling import StaffShift, StaffShiftFeedback
from app.shared.datetime_utils import utcnow


def lock(client, headers, branch, start, end, reason="Payroll closed"):
    return client.post(
        "/schedule-locks/lock",
        json={"branchId": branch.id, "startDate": start.isoformat(), "endDate": end.isoformat(), "lockReason": reason},
        headers=headers,
    )


def save_config(client, headers, branch, **fields):
    return client.post("/branch-schedule-configs", json={"branchId": branch.id, **fields}, headers=headers)


def test_lock_and_unlock_schedule(client, branch, next_monday, manager_headers, waiter_headers):
    response = lock(client, manager_headers, branch, next_monday, next_monday + timedelta(days=6))

    assert response.status_code == 200
    created = response.json()["payload"]
    assert created["lockStatus"] == "LOCKED"
    assert created["lockedByName"] == "Manager"

    check_url = f"/schedule-locks/branch/{branch.id}/check"
    inside = client.get(check_url, params={"date": (next_monday + timedelta(days=2)).isoformat()}, headers=waiter_headers)
    outside = client.get(check_url, params={"date": (next_monday + timedelta(days=7)).isoformat()}, headers=waiter_headers)
    assert inside.json()["payload"] is True
    assert outside.json()["payload"] is False

    overlapping = lock(client, manager_headers, branch, next_monday + timedelta(days=5), next_monday + timedelta(days=9))
    assert overlapping.status_code == 409
    assert lock(client, waiter_headers, branch, next_monday, next_monday).status_code == 403

    unlock_url = f"/schedule-locks/{created['id']}/unlock"
    assert client.put(unlock_url, json={"unlockReason": "  "}, headers=manager_headers).status_code == 422
    unlocked = client.put(unlock_url, json={"unlockReason": "Opened by mistake"}, headers=manager_headers)
    assert unlocked.status_code == 200
    assert unlocked.json()["payload"]["lockStatus"] == "UNLOCKED"
    assert unlocked.json()["payload"]["unlockedByName"] == "Manager"
    assert client.put(unlock_url, json={"unlockReason": "Again"}, headers=manager_headers).status_code == 400

    active = client.get(
        f"/schedule-locks/branch/{branch.id}/active", params={"date": next_monday.isoformat()}, headers=manager_headers
    )
    assert active.json()["payload"] is None
    history = client.get(f"/schedule-locks/branch/{branch.id}", headers=manager_headers).json()["payload"]
    assert [h["id"] for h in history] == [created["id"]]


def test_lock_rejects_inverted_range(client, branch, next_monday, manager_headers):
    response = lock(client, manager_headers, branch, next_monday, next_monday - timedelta(days=1))

    assert response.status_code == 422
    assert "End date must not be before start date" in response.json()["message"]


def test_locked_dates_refuse_roster_changes(client, db, branch, waiter, make_shift, schedule, next_monday, manager_headers):
    shift = make_shift()
    draft = schedule(shift, next_monday)
    staff_shift_id = client.post(
        "/staff-shifts", json={"staffId": waiter.id, "scheduledShiftId": draft.id}, headers=manager_headers
    ).json()["payload"]["id"]
    lock_id = lock(client, manager_headers, branch, next_monday, next_monday + timedelta(days=1)).json()["payload"]["id"]
    locked_message = (
        f"Schedule is locked from {next_monday.isoformat()} to {(next_monday + timedelta(days=1)).isoformat()}"
    )

    inside = {"shiftId": shift.id, "branchId": branch.id, "date": (next_monday + timedelta(days=1)).isoformat()}
    response = client.post("/scheduled-shifts", json=inside, headers=manager_headers)
    assert response.status_code == 400
    assert response.json()["message"] == locked_message

    outside = dict(inside, date=(next_monday + timedelta(days=2)).isoformat())
    assert client.post("/scheduled-shifts", json=outside, headers=manager_headers).status_code == 200

    assert client.delete(f"/scheduled-shifts/{draft.id}", headers=manager_headers).status_code == 400
    assert client.delete(f"/staff-shifts/{staff_shift_id}", headers=manager_headers).status_code == 400
    update = client.put(f"/staff-shifts/{staff_shift_id}", json={"shiftStatus": "PUBLISHED"}, headers=manager_headers)
    assert update.status_code == 400
    assert db.get(StaffShift, staff_shift_id).shift_status == ShiftStatus.DRAFT.value

    schedule(shift, next_monday + timedelta(days=7))
    copy = client.post(
        "/scheduled-shifts/copy-week",
        json={
            "branchId": branch.id,
            "sourceStartDate": (next_monday + timedelta(days=7)).isoformat(),
            "targetStartDates": [next_monday.isoformat()],
        },
        headers=manager_headers,
    )
    assert copy.status_code == 400
    assert copy.json()["message"] == locked_message

    client.put(f"/schedule-locks/{lock_id}/unlock", json={"unlockReason": "Roster reopened"}, headers=manager_headers)
    assert client.delete(f"/staff-shifts/{staff_shift_id}", headers=manager_headers).status_code == 200


def test_locked_dates_refuse_new_assignments(client, branch, waiter, make_shift, schedule, next_monday, manager_headers):
    scheduled = schedule(make_shift(), next_monday)
    lock(client, manager_headers, branch, next_monday, next_monday)

    response = client.post(
        "/staff-shifts", json={"staffId": waiter.id, "scheduledShiftId": scheduled.id}, headers=manager_headers
    )

    assert response.status_code == 400
    assert response.json()["message"].startswith("Schedule is locked")


def test_branch_config_defaults(client, branch, manager_headers):
    response = client.get(f"/branch-schedule-configs/branch/{branch.id}", headers=manager_headers)

    config = response.json()["payload"]
    assert config["id"] is None
    assert config["responseDeadlineHours"] == SHIFT_FEEDBACK_DEADLINE_HOURS
    assert config["allowSelfShiftRegistration"] is True
    assert client.delete(f"/branch-schedule-configs/branch/{branch.id}", headers=manager_headers).status_code == 404

    invalid = save_config(client, manager_headers, branch, maxShiftsPerDay=3, maxShiftsPerWeek=2)
    assert invalid.status_code == 422


def test_branch_config_limits_and_deadline(client, db, branch, waiter, make_shift, schedule, next_monday, manager_headers):
    saved = save_config(client, manager_headers, branch, maxShiftsPerDay=1, responseDeadlineHours=12)
    assert saved.status_code == 200
    assert saved.json()["payload"]["maxShiftsPerDay"] == 1

    morning = schedule(make_shift(), next_monday)
    late = schedule(make_shift("Late", start=time(16), end=time(23)), next_monday)
    assert client.post(
        "/staff-shifts", json={"staffId": waiter.id, "scheduledShiftId": morning.id}, headers=manager_headers
    ).status_code == 200

    second = client.post(
        "/staff-shifts", json={"staffId": waiter.id, "scheduledShiftId": late.id}, headers=manager_headers
    )
    assert second.status_code == 400
    assert second.json()["message"] == f"Anna Nguyen: Daily limit of 1 shift(s) reached on {next_monday.isoformat()}"

    client.post(
        "/publish-shifts",
        json={"startDate": next_monday.isoformat(), "endDate": next_monday.isoformat(), "branchId": branch.id},
        headers=manager_headers,
    )
    feedback = db.query(StaffShiftFeedback).one()
    assert feedback.deadline < utcnow() + timedelta(hours=13)

    assert client.delete(f"/branch-schedule-configs/branch/{branch.id}", headers=manager_headers).status_code == 200
    config = client.get(f"/branch-schedule-configs/branch/{branch.id}", headers=manager_headers).json()["payload"]
    assert config["maxShiftsPerDay"] is None


def test_self_registration_follows_branch_rules(client, db, branch, make_shift, schedule, next_monday, manager_headers, waiter_headers):
    scheduled = schedule(make_shift(), next_monday)
    scheduled.shift_status = ScheduledShiftStatus.PUBLISHED.value
    db.commit()

    save_config(client, manager_headers, branch, allowSelfShiftRegistration=False)
    shifts = client.get("/employee-portal/available-shifts", headers=waiter_headers).json()["payload"]
    assert shifts[0]["canRegister"] is False
    assert shifts[0]["conflictReason"] == "Self registration is disabled for this branch"
    refused = client.post(
        "/employee-portal/shift-registration", json={"scheduledShiftId": scheduled.id}, headers=waiter_headers
    )
    assert refused.status_code == 400

    save_config(client, manager_headers, branch, allowSelfShiftRegistration=True)
    lock(client, manager_headers, branch, next_monday, next_monday)
    shifts = client.get("/employee-portal/available-shifts", headers=waiter_headers).json()["payload"]
    assert shifts[0]["conflictReason"].startswith("Schedule is locked")
