"""
Derives schedule records for a window of dates when the database holds none.

Strict plans map weekday positions onto routine days: Monday is day 1,
Tuesday day 2 and so on, with the remaining weekdays resting. Flexible plans
project the assignment's pointer forward from today, one routine day per open
calendar day, wrapping around the routine. Persisted ``workout_schedule`` rows
always win over derived ones.
"""

from datetime import date
from typing import Dict, Iterable, List, Optional

from .schema import (
    PlanType,
    RoutineAssignment,
    RoutineDay,
    ScheduleDay,
    WorkoutSession,
)


def _completed_session(
    assignment: RoutineAssignment,
    routine_day_ids: set,
    sessions: Iterable[WorkoutSession],
    day: date,
) -> Optional[WorkoutSession]:
    for session in sessions:
        if session.day != day or session.routine_id != assignment.routine_id:
            continue
        if session.assignment_id == assignment.id or session.routine_day_id in routine_day_ids:
            return session
    return None


def _record(assignment: RoutineAssignment, day: date, **fields) -> ScheduleDay:
    return ScheduleDay(
        assignment_id=assignment.id,
        routine_id=assignment.routine_id,
        scheduled_date=day,
        plan_type=assignment.plan_type,
        **fields,
    )


def _slot_record(assignment: RoutineAssignment, day: date, slot: Optional[RoutineDay]) -> ScheduleDay:
    if slot is None:
        return _record(assignment, day, is_rest_day=True)
    return _record(assignment, day, routine_day_id=slot.id, routine_day_name=slot.name)


def build_schedule(
    assignment: RoutineAssignment,
    routine_days: List[RoutineDay],
    sessions: Iterable[WorkoutSession],
    dates: List[date],
    today: date,
    persisted: Iterable[ScheduleDay] = (),
) -> List[ScheduleDay]:
    routine_days = sorted(routine_days, key=lambda rd: rd.day_number)
    routine_day_ids = {rd.id for rd in routine_days}
    sessions = list(sessions)
    stored: Dict[date, ScheduleDay] = {
        sd.scheduled_date: sd for sd in persisted if sd.assignment_id == assignment.id
    }
    day_count = len(routine_days)

    # pointer for the first open flexible day inside the window
    pointer = assignment.current_day_index
    if dates and dates[0] > today:
        pointer += (dates[0] - today).days

    schedule = []
    for day in sorted(dates):
        if day < assignment.start_date:
            continue

        # a stored skip keeps the pointer, handing its routine day to the next open day
        if day in stored:
            record = stored[day]
            if record.plan_type is None:
                record = record.model_copy(update={"plan_type": assignment.plan_type})
            schedule.append(record)
            continue

        session = _completed_session(assignment, routine_day_ids, sessions, day)
        if session is not None:
            schedule.append(
                _record(
                    assignment,
                    day,
                    is_completed=True,
                    routine_day_id=session.routine_day_id,
                    routine_day_name=session.name,
                    workout_session_id=session.id,
                    workout_session_name=session.name,
                )
            )
            continue

        if assignment.plan_type == PlanType.STRICT:
            position = day.isoweekday()
            slot = routine_days[position - 1] if position <= day_count else None
            schedule.append(_slot_record(assignment, day, slot))
        elif day < today or day_count == 0:
            # flexible plans never miss a day, unlogged past days rest
            schedule.append(_record(assignment, day, is_rest_day=True))
        else:
            slot = routine_days[pointer % day_count]
            pointer += 1
            schedule.append(_slot_record(assignment, day, slot))

    return schedule
