"""Week copy planning: maps a source week's scheduled shifts onto target weeks"""

from datetime import date, timedelta
from typing import Iterable, NamedTuple

from ...shared.datetime_utils import week_start


class CopyPlanItem(NamedTuple):
    source: object  # ScheduledShift of the source week
    target_week_start: date
    target_date: date


def normalize_target_weeks(target_starts: Iterable[date]) -> list[date]:
    """Monday of every distinct target week, in request order"""
    weeks = []
    for target in target_starts:
        monday = week_start(target)
        if monday not in weeks:
            weeks.append(monday)
    return weeks


def build_copy_plan(source_shifts: list, source_start: date, target_starts: Iterable[date]) -> list[CopyPlanItem]:
    """
    Shift every source scheduled shift by the day offset between the weeks.

    No duplicate detection happens here; the same plan backs the preview and the commit.
    """
    source_monday = week_start(source_start)
    plan = []
    for target_monday in normalize_target_weeks(target_starts):
        offset = timedelta(days=(target_monday - source_monday).days)
        for scheduled in source_shifts:
            plan.append(CopyPlanItem(scheduled, target_monday, scheduled.date + offset))
    return plan
