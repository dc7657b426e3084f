from datetime import date, datetime, time, timedelta
from types import SimpleNamespace

import pytest

from app.constants import BookingStatus, WaitlistStatus
from app.domain.pre_orders.service import calculate_deposit
from app.domain.scheduling.copy_week import build_copy_plan, normalize_target_weeks
from app.domain.shift_leave.service import count_affected_shifts
from app.domain.staffing.rules import find_overlapping, required_quantity
from app.domain.waitlist.service import estimate_wait_minutes
from app.domain.waitlist.status_display import get_status_display
from app.services.status_automation import BOOKING_TRANSITIONS, WAITLIST_TRANSITIONS, validate_status_transition
from app.shared.datetime_utils import format_time_remaining, format_wait_time, times_overlap, week_start
from app.shared.validators import validate_color_code, validate_phone


@pytest.mark.parametrize(
    "minutes,expected",
    [(0, "0 min"), (45, "45 min"), (60, "1 hours"), (120, "2 hours"), (135, "2h 15m")],
)
def test_format_wait_time(minutes, expected):
    assert format_wait_time(minutes) == expected


def test_format_time_remaining():
    now = datetime(2030, 1, 1, 12, 0)
    assert format_time_remaining(now - timedelta(minutes=1), now) == "Expired"
    assert format_time_remaining(now + timedelta(minutes=42), now) == "42m"
    assert format_time_remaining(now + timedelta(hours=2, minutes=5), now) == "2h 5m"


def test_times_overlap_is_half_open():
    assert times_overlap(time(7), time(15), time(14), time(22))
    assert not times_overlap(time(7), time(15), time(15), time(22))


def test_estimate_wait_minutes_is_capped_by_max_wait():
    assert estimate_wait_minutes(0, 2) == 15
    assert estimate_wait_minutes(3, 2) == 60
    assert estimate_wait_minutes(20, 2) == 120


def test_calculate_deposit_rounds_half_up():
    assert calculate_deposit(100000, 30) == 30000
    assert calculate_deposit(25, 50) == 13
    assert calculate_deposit(0, 30) == 0


def test_status_transitions():
    assert validate_status_transition(BOOKING_TRANSITIONS, "BOOKED", "DEPOSIT_PAID")
    assert not validate_status_transition(BOOKING_TRANSITIONS, "COMPLETED", "CANCELLED")
    assert not validate_status_transition(BOOKING_TRANSITIONS, "BOOKED", "BOOKED")
    assert validate_status_transition(WAITLIST_TRANSITIONS, "NOTIFIED", "CONVERTED")
    assert not validate_status_transition(WAITLIST_TRANSITIONS, "EXPIRED", "ACTIVE")
    assert BookingStatus.CANCELLED.value in BOOKING_TRANSITIONS[BookingStatus.DEPOSIT_PAID.value]


def test_status_display():
    waiting = get_status_display(WaitlistStatus.ACTIVE.value)
    assert waiting["displayName"] == "Active"
    assert waiting["canCancel"] is True

    assert get_status_display(WaitlistStatus.CONVERTED.value)["canCancel"] is False
    unknown = get_status_display("SOMETHING_ELSE")
    assert unknown["icon"] == "❓"
    assert unknown["canCancel"] is False


def test_validators():
    assert validate_phone("090 123 4567") == "0901234567"
    with pytest.raises(ValueError):
        validate_phone("12345")
    assert validate_color_code("#ff00aa") == "#FF00AA"
    with pytest.raises(ValueError):
        validate_color_code("red")


def test_week_start_and_target_week_normalization():
    assert week_start(date(2030, 1, 3)) == date(2029, 12, 31)
    weeks = normalize_target_weeks([date(2030, 1, 9), date(2030, 1, 7), date(2030, 1, 14)])
    assert weeks == [date(2030, 1, 7), date(2030, 1, 14)]


def test_build_copy_plan_shifts_by_whole_weeks():
    source = [SimpleNamespace(date=date(2029, 12, 31)), SimpleNamespace(date=date(2030, 1, 4))]
    plan = build_copy_plan(source, date(2030, 1, 2), [date(2030, 1, 16), date(2030, 1, 21)])

    assert [(item.target_week_start, item.target_date) for item in plan] == [
        (date(2030, 1, 14), date(2030, 1, 14)),
        (date(2030, 1, 14), date(2030, 1, 18)),
        (date(2030, 1, 21), date(2030, 1, 21)),
        (date(2030, 1, 21), date(2030, 1, 25)),
    ]


def test_count_affected_shifts_counts_running_days():
    weekdays = SimpleNamespace(week_days=["MON", "TUE", "WED", "THU", "FRI"])
    weekend = SimpleNamespace(week_days=["SAT", "SUN"])
    # 2030-01-07 is a Monday
    assert count_affected_shifts([weekdays], date(2030, 1, 7), date(2030, 1, 13)) == 5
    assert count_affected_shifts([weekdays, weekend], date(2030, 1, 11), date(2030, 1, 12)) == 2
    assert count_affected_shifts([weekend], date(2030, 1, 7), date(2030, 1, 9)) == 0


def test_assignment_rules():
    morning = SimpleNamespace(
        id=1, start_time=time(7), end_time=time(15), requirements=[SimpleNamespace(role="WAITER", quantity=2)]
    )
    evening = SimpleNamespace(id=2, start_time=time(14), end_time=time(22), requirements=[])
    assert required_quantity(morning, "WAITER") == 2
    assert required_quantity(morning, "KITCHEN") == 0

    working = SimpleNamespace(shift_status="DRAFT", scheduled_shift=SimpleNamespace(shift=morning))
    on_leave = SimpleNamespace(shift_status="APPROVED_LEAVE_VALID", scheduled_shift=SimpleNamespace(shift=morning))
    assert find_overlapping([working], evening) is working
    assert find_overlapping([on_leave], evening) is None
    assert find_overlapping([working], morning) is None
