from datetime import timedelta

from app.constants import RoleName, ScheduledShiftStatus
from app.models_scheduling import ScheduledShift, StaffShift


def test_create_shift_template(client, branch, manager_headers):
    response = client.post(
        "/shifts",
        json={
            "name": "Evening",
            "startTime": "14:00",
            "endTime": "22:00",
            "weekDays": ["fri", "MON"],
            "branchId": branch.id,
            "requirements": [{"role": "WAITER", "quantity": 3}, {"role": "KITCHEN"}],
        },
        headers=manager_headers,
    )

    assert response.status_code == 200
    shift = response.json()["payload"]
    assert shift["weekDays"] == ["MON", "FRI"]
    assert shift["hours"] == 8.0
    assert {r["role"]: r["quantity"] for r in shift["requirements"]} == {"WAITER": 3, "KITCHEN": 1}


def test_shift_template_validation(client, branch, manager_headers):
    base = {"name": "Broken", "startTime": "15:00", "endTime": "07:00", "weekDays": ["MON"], "branchId": branch.id}
    assert client.post("/shifts", json=base, headers=manager_headers).status_code == 422

    bad_day = dict(base, endTime="16:00", weekDays=["FUNDAY"])
    assert client.post("/shifts", json=bad_day, headers=manager_headers).status_code == 422


def test_schedule_shift_on_matching_weekday(client, branch, make_shift, next_monday, manager_headers):
    shift = make_shift(week_days=["MON"])
    payload = {"shiftId": shift.id, "branchId": branch.id, "date": next_monday.isoformat()}

    created = client.post("/scheduled-shifts", json=payload, headers=manager_headers)
    assert created.status_code == 200
    assert created.json()["payload"]["shiftStatus"] == ScheduledShiftStatus.DRAFT.value

    assert client.post("/scheduled-shifts", json=payload, headers=manager_headers).status_code == 409

    tuesday = dict(payload, date=(next_monday + timedelta(days=1)).isoformat())
    response = client.post("/scheduled-shifts", json=tuesday, headers=manager_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Shift 'Morning' does not run on TUE"


def test_schedule_rejects_other_branch(client, other_branch, make_shift, next_monday, manager_headers):
    shift = make_shift()
    payload = {"shiftId": shift.id, "branchId": other_branch.id, "date": next_monday.isoformat()}

    assert client.post("/scheduled-shifts", json=payload, headers=manager_headers).status_code == 400


def test_grouped_scheduled_shifts(client, branch, make_shift, schedule, next_monday, waiter_headers):
    morning = make_shift()
    evening = make_shift("Evening")
    schedule(morning, next_monday)
    schedule(evening, next_monday)
    schedule(morning, next_monday + timedelta(days=1))

    response = client.get(
        "/scheduled-shifts/grouped",
        params={"branchId": branch.id, "startDate": next_monday.isoformat()},
        headers=waiter_headers,
    )

    groups = response.json()["payload"]
    assert [g["date"] for g in groups] == [next_monday.isoformat(), (next_monday + timedelta(days=1)).isoformat()]
    assert len(groups[0]["shifts"]) == 2


def test_copy_week_preview_saves_nothing(client, db, branch, make_shift, schedule, next_monday, manager_headers):
    shift = make_shift()
    schedule(shift, next_monday)
    schedule(shift, next_monday + timedelta(days=2))

    response = client.post(
        "/scheduled-shifts/copy-week/preview",
        json={
            "branchId": branch.id,
            "sourceStartDate": next_monday.isoformat(),
            "targetStartDates": [(next_monday + timedelta(days=15)).isoformat()],
        },
        headers=manager_headers,
    )

    preview = response.json()["payload"]
    assert [p["targetDate"] for p in preview] == [
        (next_monday + timedelta(days=14)).isoformat(),
        (next_monday + timedelta(days=16)).isoformat(),
    ]
    assert db.query(ScheduledShift).count() == 2


def test_copy_week_skips_duplicates(client, branch, make_shift, schedule, next_monday, manager_headers):
    shift = make_shift()
    schedule(shift, next_monday)
    schedule(shift, next_monday + timedelta(days=2))
    # Already on the target week
    schedule(shift, next_monday + timedelta(days=7))

    response = client.post(
        "/scheduled-shifts/copy-week",
        json={
            "branchId": branch.id,
            "sourceStartDate": next_monday.isoformat(),
            "targetStartDates": [
                (next_monday + timedelta(days=7)).isoformat(),
                (next_monday + timedelta(days=14)).isoformat(),
            ],
        },
        headers=manager_headers,
    )

    result = response.json()["payload"]
    assert result["totalCopied"] == 3
    assert result["totalSkipped"] == 1
    assert result["skippedDuplicates"] == [f"{(next_monday + timedelta(days=7)).isoformat()} Morning"]
    assert result["copiedWeeks"] == [
        (next_monday + timedelta(days=7)).isoformat(),
        (next_monday + timedelta(days=14)).isoformat(),
    ]


def test_copy_week_with_staff(client, db, branch, make_shift, schedule, waiter, next_monday, manager_headers):
    shift = make_shift()
    source = schedule(shift, next_monday)
    db.add(StaffShift(staff_id=waiter.id, scheduled_shift_id=source.id))
    db.commit()

    client.post(
        "/scheduled-shifts/copy-week",
        json={
            "branchId": branch.id,
            "sourceStartDate": next_monday.isoformat(),
            "targetStartDates": [(next_monday + timedelta(days=7)).isoformat()],
            "withStaff": True,
        },
        headers=manager_headers,
    )

    copied = db.query(StaffShift).filter(StaffShift.scheduled_shift_id != source.id).all()
    assert [(s.staff_id, s.shift_status) for s in copied] == [(waiter.id, "DRAFT")]


def test_copy_week_rejects_same_week(client, branch, make_shift, schedule, next_monday, manager_headers):
    schedule(make_shift(), next_monday)

    response = client.post(
        "/scheduled-shifts/copy-week",
        json={
            "branchId": branch.id,
            "sourceStartDate": next_monday.isoformat(),
            "targetStartDates": [(next_monday + timedelta(days=3)).isoformat()],
        },
        headers=manager_headers,
    )

    assert response.status_code == 400


def test_only_draft_scheduled_shifts_can_be_deleted(client, db, make_shift, schedule, next_monday, manager_headers):
    draft = schedule(make_shift(), next_monday)
    published = schedule(make_shift("Evening", requirements={RoleName.KITCHEN: 1}), next_monday)
    published.shift_status = ScheduledShiftStatus.PUBLISHED.value
    db.commit()

    assert client.delete(f"/scheduled-shifts/{draft.id}", headers=manager_headers).status_code == 200
    assert client.delete(f"/scheduled-shifts/{published.id}", headers=manager_headers).status_code == 400
