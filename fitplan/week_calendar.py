"""
Calendar projection - Monday-start week grid, one row per active assignment
"""

from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .resolver import can_skip_day, resolve_day
from .schema import (
    AssignmentWeek,
    CalendarCell,
    RoutineAssignment,
    ScheduleDay,
    WeekView,
)

DAYS_IN_WEEK = 7


def week_start(pivot: date) -> date:
    # weekday() is 0 for Monday, so a Sunday pivot steps back six days
    return pivot - timedelta(days=pivot.weekday())


def week_dates(pivot: date) -> List[date]:
    start = week_start(pivot)
    return [start + timedelta(days=offset) for offset in range(DAYS_IN_WEEK)]


def shift_week(pivot: date, weeks: int) -> date:
    """Move the pivot by whole weeks; computed from the pivot alone so repeated navigation never drifts"""
    return pivot + timedelta(days=DAYS_IN_WEEK * weeks)


def _index_schedule(
    schedule_days: Iterable[ScheduleDay],
) -> Dict[Tuple[str, date], ScheduleDay]:
    indexed = {}
    for schedule_day in schedule_days:
        indexed[(schedule_day.assignment_id, schedule_day.scheduled_date)] = schedule_day
    return indexed


def project_week(
    pivot: date,
    assignments: List[RoutineAssignment],
    schedule_days: Iterable[ScheduleDay],
    now: Union[date, datetime],
) -> WeekView:
    """Build the 7-day grid containing ``pivot`` for every assignment.

    Schedule records are matched by assignment and calendar day; the time of
    day never takes part in the match since ``ScheduleDay.scheduled_date`` is
    already truncated to a date.
    """
    dates = week_dates(pivot)
    indexed = _index_schedule(schedule_days)

    rows = []
    for assignment in assignments:
        cells = []
        for day in dates:
            schedule_day: Optional[ScheduleDay] = indexed.get((assignment.id, day))
            cells.append(
                CalendarCell(
                    day=day,
                    schedule_day=schedule_day,
                    display=resolve_day(day, schedule_day, now),
                    can_skip=can_skip_day(schedule_day, day, now),
                )
            )
        rows.append(
            AssignmentWeek(
                assignment_id=assignment.id,
                routine_name=assignment.routine_name or "Unnamed Routine",
                plan_type=assignment.plan_type,
                cells=cells,
            )
        )

    return WeekView(week_start=dates[0], week_end=dates[-1], dates=dates, rows=rows)
