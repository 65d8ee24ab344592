"""
Schedule day resolver - classifies one calendar date for one assignment
"""

from datetime import date, datetime
from typing import Optional, Union

from .schema import DayDisplay, DayStatus, PlanType, ScheduleDay

DISPLAYS = {
    DayStatus.REST: DayDisplay(
        status=DayStatus.REST,
        icon="moon",
        css_class="bg-muted/30 text-foreground",
        label="Rest",
    ),
    DayStatus.SKIPPED: DayDisplay(
        status=DayStatus.SKIPPED,
        icon="x-circle",
        css_class="bg-orange-200 text-slate-900",
        label="Skipped",
    ),
    DayStatus.COMPLETED: DayDisplay(
        status=DayStatus.COMPLETED,
        icon="check-circle",
        css_class="bg-green-200 text-slate-900",
        label="Completed",
    ),
    DayStatus.MISSED: DayDisplay(
        status=DayStatus.MISSED,
        icon="x-circle",
        css_class="bg-red-200 text-slate-900",
        label="Missed",
    ),
    DayStatus.SCHEDULED: DayDisplay(
        status=DayStatus.SCHEDULED,
        icon="dumbbell",
        css_class="bg-blue-200 text-slate-900",
        label="Scheduled",
    ),
}


def _today(now: Union[date, datetime]) -> date:
    return now.date() if isinstance(now, datetime) else now


def classify_day(
    day: date, schedule_day: Optional[ScheduleDay], now: Union[date, datetime]
) -> DayStatus:
    """Return the status of ``day``; the checks run in priority order and the first match wins.

    A record carrying several flags resolves by this order, so a day marked
    both skipped and completed is Skipped.
    """
    if schedule_day is None:
        return DayStatus.REST
    if schedule_day.was_skipped:
        return DayStatus.SKIPPED
    if schedule_day.is_completed:
        return DayStatus.COMPLETED
    if schedule_day.is_rest_day:
        return DayStatus.REST
    # today is never missed, even when nothing was logged yet
    if day < _today(now):
        return DayStatus.MISSED
    return DayStatus.SCHEDULED


def resolve_day(
    day: date, schedule_day: Optional[ScheduleDay], now: Union[date, datetime]
) -> DayDisplay:
    return DISPLAYS[classify_day(day, schedule_day, now)]


def can_skip_day(
    schedule_day: Optional[ScheduleDay], day: date, now: Union[date, datetime]
) -> bool:
    """Only an open workout day of a flexible plan, today or later, can be skipped"""
    if schedule_day is None or schedule_day.plan_type != PlanType.FLEXIBLE:
        return False
    if schedule_day.is_completed or schedule_day.was_skipped or schedule_day.is_rest_day:
        return False
    return day >= _today(now)
