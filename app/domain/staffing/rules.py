"""Assignment rules shared by manager assignment and employee self-registration"""

from typing import Iterable, Optional

from ...constants import WORKING_SHIFT_STATUSES, RecordStatus
from ...shared.datetime_utils import times_overlap


def required_quantity(shift, role: str) -> int:
    """Number of staff of role the shift needs, 0 when the role is not required"""
    for requirement in shift.requirements:
        if requirement.role == role:
            return requirement.quantity
    return 0


def find_overlapping(staff_shifts: Iterable, shift) -> Optional[object]:
    """First working staff shift whose template overlaps shift's hours, if any"""
    for staff_shift in staff_shifts:
        if staff_shift.shift_status not in WORKING_SHIFT_STATUSES:
            continue
        other = staff_shift.scheduled_shift.shift
        if other.id == shift.id:
            continue
        if times_overlap(other.start_time, other.end_time, shift.start_time, shift.end_time):
            return staff_shift
    return None


def count_registered(scheduled_shift, role: str) -> int:
    """Working staff of role already on the scheduled shift"""
    return sum(
        1
        for s in scheduled_shift.staff_shifts
        if s.status == RecordStatus.ACTIVE.value and s.shift_status in WORKING_SHIFT_STATUSES and s.staff.role == role
    )
