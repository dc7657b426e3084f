from datetime import time, timedelta

import pytest

from app.constants import RoleName, ShiftStatus
from app.models import Notification
from app.models_scheduling import StaffShift, StaffShiftFeedback
from app.shared.datetime_utils import utcnow


@pytest.fixture
def monday_shifts(make_shift, schedule, next_monday):
    """Morning 07-15 and Evening 14-22 on next Monday, both needing waiters"""
    morning = schedule(make_shift(), next_monday)
    evening = schedule(make_shift("Evening", start=time(14), end=time(22)), next_monday)
    return morning, evening


def assign(client, headers, staff, scheduled, **fields):
    return client.post(
        "/staff-shifts", json={"staffId": staff.id, "scheduledShiftId": scheduled.id, **fields}, headers=headers
    )


def publish(client, headers, branch, day):
    return client.post(
        "/publish-shifts",
        json={"startDate": day.isoformat(), "endDate": day.isoformat(), "branchId": branch.id},
        headers=headers,
    )


def test_assign_staff_as_draft(client, waiter, monday_shifts, manager_headers):
    response = assign(client, manager_headers, waiter, monday_shifts[0])

    assert response.status_code == 200
    staff_shift = response.json()["payload"]
    assert staff_shift["shiftStatus"] == ShiftStatus.DRAFT.value
    assert staff_shift["staffName"] == "Anna Nguyen"
    assert staff_shift["startTime"] == "07:00:00"


def test_assignment_rules(client, make_user, other_branch, waiter, monday_shifts, manager_headers):
    morning = monday_shifts[0]
    assign(client, manager_headers, waiter, morning)
    assert assign(client, manager_headers, waiter, morning).status_code == 409

    cook = make_user("cook", RoleName.KITCHEN)
    response = assign(client, manager_headers, cook, morning)
    assert response.status_code == 400
    assert response.json()["message"] == "Shift 'Morning' does not require role KITCHEN"

    visitor = make_user("visitor", user_branch=other_branch)
    assert assign(client, manager_headers, visitor, morning).status_code == 400

    assert client.post(
        "/staff-shifts", json={"staffId": 999, "scheduledShiftId": morning.id}, headers=manager_headers
    ).status_code == 404


def test_overlapping_assignment_is_stored_as_conflict(client, waiter, monday_shifts, manager_headers):
    morning, evening = monday_shifts
    assign(client, manager_headers, waiter, morning)

    response = assign(client, manager_headers, waiter, evening)

    assert response.status_code == 200
    assert response.json()["payload"]["shiftStatus"] == ShiftStatus.CONFLICTED.value

    staff_shift_id = response.json()["payload"]["id"]
    update = client.put(
        f"/staff-shifts/{staff_shift_id}", json={"shiftStatus": "PUBLISHED"}, headers=manager_headers
    )
    assert update.status_code == 400


def test_bulk_assign_is_all_or_nothing(client, db, waiter, make_user, monday_shifts, manager_headers):
    morning, evening = monday_shifts
    cook = make_user("cook", RoleName.KITCHEN)

    response = client.post(
        "/staff-shifts/bulk",
        json={
            "assignments": [
                {"staffId": waiter.id, "scheduledShiftId": morning.id},
                {"staffId": cook.id, "scheduledShiftId": evening.id},
            ]
        },
        headers=manager_headers,
    )

    assert response.status_code == 400
    assert db.query(StaffShift).count() == 0


def test_published_assignment_notifies_staff(client, db, waiter, monday_shifts, manager_headers):
    assign(client, manager_headers, waiter, monday_shifts[0], shiftStatus="PUBLISHED")

    notifications = db.query(Notification).filter(Notification.user_id == waiter.id).all()
    assert [n.type for n in notifications] == ["SHIFT_ASSIGNED"]


def test_publish_creates_feedback_requests(client, db, branch, waiter, make_user, monday_shifts, next_monday, manager_headers):
    morning, evening = monday_shifts
    assign(client, manager_headers, waiter, morning)
    conflicted = assign(client, manager_headers, waiter, evening).json()["payload"]
    assign(client, manager_headers, make_user("binh"), morning)

    response = publish(client, manager_headers, branch, next_monday)

    result = response.json()["payload"]
    assert result["totalShifts"] == 2
    assert result["publishedShifts"] == 2
    assert result["conflictedStaffShifts"] == 1
    assert {s["shiftStatus"] for s in result["staffShifts"]} == {ShiftStatus.PENDING.value}
    assert len(result["staffShifts"]) == 2

    assert db.get(StaffShift, conflicted["id"]).shift_status == ShiftStatus.CONFLICTED.value
    feedback = db.query(StaffShiftFeedback).filter(StaffShiftFeedback.staff_id == waiter.id).one()
    assert feedback.deadline > utcnow() + timedelta(hours=47)

    published = db.query(Notification).filter(Notification.type == "SHIFT_PUBLISHED").count()
    assert published == 2


def test_staff_approves_published_shift(client, branch, waiter, monday_shifts, next_monday, manager_headers, waiter_headers):
    staff_shift_id = assign(client, manager_headers, waiter, monday_shifts[0]).json()["payload"]["id"]
    publish(client, manager_headers, branch, next_monday)

    pending = client.get("/publish-shifts/my-pending-shifts", headers=waiter_headers).json()["payload"]
    assert [p["staffShiftId"] for p in pending] == [staff_shift_id]

    response = client.post(
        "/publish-shifts/respond",
        json={"staffShiftId": staff_shift_id, "responseStatus": "APPROVED"},
        headers=waiter_headers,
    )

    assert response.status_code == 200
    assert response.json()["payload"]["staffShift"]["shiftStatus"] == ShiftStatus.PUBLISHED.value
    assert client.get("/publish-shifts/my-pending-shifts", headers=waiter_headers).json()["payload"] == []

    again = client.post(
        "/publish-shifts/respond",
        json={"staffShiftId": staff_shift_id, "responseStatus": "APPROVED"},
        headers=waiter_headers,
    )
    assert again.status_code == 400


def test_respond_rules(client, db, branch, waiter, make_user, headers_for, monday_shifts, next_monday, manager_headers, waiter_headers):
    staff_shift_id = assign(client, manager_headers, waiter, monday_shifts[0]).json()["payload"]["id"]
    publish(client, manager_headers, branch, next_monday)

    rejection = {"staffShiftId": staff_shift_id, "responseStatus": "REJECTED"}
    assert client.post("/publish-shifts/respond", json=rejection, headers=waiter_headers).status_code == 422

    colleague = headers_for(make_user("binh"))
    approval = {"staffShiftId": staff_shift_id, "responseStatus": "APPROVED"}
    assert client.post("/publish-shifts/respond", json=approval, headers=colleague).status_code == 403

    feedback = db.query(StaffShiftFeedback).one()
    feedback.deadline = utcnow() - timedelta(minutes=1)
    db.commit()
    response = client.post("/publish-shifts/respond", json=approval, headers=waiter_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "The response deadline for this shift has passed"


def test_rejection_and_replacement(client, db, branch, manager, waiter, make_user, monday_shifts, next_monday, manager_headers, waiter_headers):
    staff_shift_id = assign(client, manager_headers, waiter, monday_shifts[0]).json()["payload"]["id"]
    publish(client, manager_headers, branch, next_monday)

    client.post(
        "/publish-shifts/respond",
        json={"staffShiftId": staff_shift_id, "responseStatus": "REJECTED", "reason": "Exam day"},
        headers=waiter_headers,
    )

    manager_notes = db.query(Notification).filter(Notification.user_id == manager.id).all()
    assert [n.type for n in manager_notes] == ["SHIFT_FEEDBACK"]
    assert "Exam day" in manager_notes[0].message

    rejected = client.get(
        "/publish-shifts/rejected-feedbacks", params={"branchId": branch.id}, headers=manager_headers
    ).json()["payload"]
    assert len(rejected) == 1
    assert rejected[0]["staffShift"]["shiftStatus"] == ShiftStatus.REQUEST_CHANGE.value
    feedback_id = rejected[0]["id"]

    same_person = client.post(f"/publish-shifts/replace-staff/{feedback_id}/{waiter.id}", headers=manager_headers)
    assert same_person.status_code == 400

    binh = make_user("binh", full_name="Binh Ho")
    response = client.post(f"/publish-shifts/replace-staff/{feedback_id}/{binh.id}", headers=manager_headers)

    assert response.status_code == 200
    replacement = response.json()["payload"]
    assert replacement["staffName"] == "Binh Ho"
    assert replacement["shiftStatus"] == ShiftStatus.PUBLISHED.value
    assert client.get(f"/staff-shifts/{staff_shift_id}", headers=manager_headers).status_code == 404

    replaced = db.query(Notification).filter(Notification.type == "SHIFT_REPLACEMENT").count()
    assert replaced == 2
    assert client.get(
        "/publish-shifts/rejected-feedbacks", params={"branchId": branch.id}, headers=manager_headers
    ).json()["payload"] == []


def test_grouped_staff_shifts(client, branch, waiter, make_user, monday_shifts, next_monday, manager_headers):
    morning, evening = monday_shifts
    assign(client, manager_headers, waiter, morning)
    assign(client, manager_headers, make_user("binh", full_name="Binh Ho"), evening)

    response = client.get("/staff-shifts/grouped", params={"branchId": branch.id}, headers=manager_headers)

    grouped = response.json()["payload"]["data"]
    assert set(grouped["WAITER"]) == {"Anna Nguyen", "Binh Ho"}
    anna = grouped["WAITER"]["Anna Nguyen"]
    assert anna["staffId"] == waiter.id
    assert [s["shiftName"] for s in anna["shifts"][next_monday.isoformat()]] == ["Morning"]


def test_deleting_published_shift_notifies_staff(client, db, waiter, monday_shifts, manager_headers):
    staff_shift_id = assign(client, manager_headers, waiter, monday_shifts[0], shiftStatus="PUBLISHED").json()["payload"]["id"]

    assert client.delete(f"/staff-shifts/{staff_shift_id}", headers=manager_headers).status_code == 200

    types = [n.type for n in db.query(Notification).filter(Notification.user_id == waiter.id).order_by(Notification.id)]
    assert types == ["SHIFT_ASSIGNED", "SHIFT_CANCELLED"]
    listing = client.get("/staff-shifts", headers=manager_headers).json()["payload"]
    assert listing["total"] == 0


def test_conflict_can_be_cleared_once_the_overlap_is_gone(client, db, waiter, make_shift, schedule, monday_shifts, next_monday, manager_headers):
    morning = monday_shifts[0]
    brunch = schedule(make_shift("Brunch", start=time(10), end=time(14)), next_monday)
    morning_id = assign(client, manager_headers, waiter, morning).json()["payload"]["id"]
    brunch_shift = assign(client, manager_headers, waiter, brunch).json()["payload"]
    assert brunch_shift["shiftStatus"] == ShiftStatus.CONFLICTED.value

    blocked = client.put(f"/staff-shifts/{brunch_shift['id']}", json={"shiftStatus": "DRAFT"}, headers=manager_headers)
    assert blocked.status_code == 400
    assert "Morning" in blocked.json()["message"]

    client.delete(f"/staff-shifts/{morning_id}", headers=manager_headers)
    response = client.put(f"/staff-shifts/{brunch_shift['id']}", json={"shiftStatus": "DRAFT"}, headers=manager_headers)

    assert response.status_code == 200
    assert response.json()["payload"]["shiftStatus"] == ShiftStatus.DRAFT.value
    assert db.get(StaffShift, brunch_shift["id"]).shift_status == ShiftStatus.DRAFT.value


def test_conflicted_shift_handed_over_to_a_free_colleague(client, db, waiter, make_user, monday_shifts, manager_headers):
    morning, evening = monday_shifts
    morning_id = assign(client, manager_headers, waiter, morning).json()["payload"]["id"]
    conflicted_id = assign(client, manager_headers, waiter, evening).json()["payload"]["id"]
    binh = make_user("binh", full_name="Binh Ho")
    make_user("cook", RoleName.KITCHEN)
    busy = make_user("chi", full_name="Chi Le")
    assign(client, manager_headers, busy, morning)

    candidates = client.get(f"/staff-shifts/{conflicted_id}/replacement-staff", headers=manager_headers)

    assert candidates.status_code == 200
    assert [c["fullName"] for c in candidates.json()["payload"]] == ["Binh Ho"]

    not_replaceable = client.put(f"/staff-shifts/{morning_id}/replace-staff/{binh.id}", headers=manager_headers)
    assert not_replaceable.status_code == 400

    response = client.put(f"/staff-shifts/{conflicted_id}/replace-staff/{binh.id}", headers=manager_headers)

    assert response.status_code == 200
    replacement = response.json()["payload"]
    assert replacement["staffName"] == "Binh Ho"
    assert replacement["shiftStatus"] == ShiftStatus.DRAFT.value
    assert client.get(f"/staff-shifts/{conflicted_id}", headers=manager_headers).status_code == 404
    # Nothing was published yet, so nobody hears about it
    assert db.query(Notification).filter(Notification.type == "SHIFT_REPLACEMENT").count() == 0


def test_grouped_staff_shifts_keep_namesakes_apart(client, branch, waiter, make_user, monday_shifts, manager_headers):
    morning, evening = monday_shifts
    namesake = make_user("anna.n", full_name="Anna Nguyen")
    assign(client, manager_headers, waiter, morning)
    assign(client, manager_headers, namesake, evening)

    grouped = client.get(
        "/staff-shifts/grouped", params={"branchId": branch.id}, headers=manager_headers
    ).json()["payload"]["data"]

    assert list(grouped["WAITER"]) == ["Anna Nguyen", f"Anna Nguyen (#{namesake.id})"]
    assert grouped["WAITER"]["Anna Nguyen"]["staffId"] == waiter.id
    assert grouped["WAITER"][f"Anna Nguyen (#{namesake.id})"]["staffId"] == namesake.id
