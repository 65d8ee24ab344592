"""
Derived schedule records for strict and flexible plans.
"""

from datetime import date, datetime, timedelta, timezone

from fitplan.resolver import classify_day
from fitplan.schedule_builder import build_schedule
from fitplan.schema import (
    DayStatus,
    PlanType,
    RoutineAssignment,
    RoutineDay,
    ScheduleDay,
    WorkoutSession,
)
from fitplan.week_calendar import week_dates

ROUTINE_DAYS = [
    RoutineDay(id=f"rd-{n}", routine_id="routine-1", day_number=n, name=f"Day {n}")
    for n in (3, 1, 2)
]


def _assignment(plan_type: PlanType, index: int = 0, start: date = date(2026, 1, 5)):
    return RoutineAssignment(
        id="assign-1",
        routine_id="routine-1",
        client_id="client-1",
        plan_type=plan_type,
        current_day_index=index,
        start_date=start,
    )


def _session(day: date, routine_day_id: str = "rd-1") -> WorkoutSession:
    start = datetime(day.year, day.month, day.day, 7, 30, tzinfo=timezone.utc)
    return WorkoutSession(
        id=f"session-{day.isoformat()}",
        name="Morning lift",
        routine_id="routine-1",
        routine_day_id=routine_day_id,
        start_time=start,
        end_time=start + timedelta(hours=1),
    )


def _by_day(schedule):
    return {record.scheduled_date: record for record in schedule}


# ===========================================================================
# strict plans
# ===========================================================================

class TestStrictSchedule:
    def test_weekday_positions_map_onto_routine_days(self):
        today = date(2026, 10, 19)
        schedule = build_schedule(_assignment(PlanType.STRICT), ROUTINE_DAYS, [], week_dates(today), today)

        assert len(schedule) == 7
        assert [r.routine_day_id for r in schedule[:3]] == ["rd-1", "rd-2", "rd-3"]
        assert all(r.is_rest_day for r in schedule[3:])
        assert all(r.plan_type == PlanType.STRICT for r in schedule)

    def test_past_week_shows_missed_and_completed_days(self):
        today = date(2026, 10, 19)
        last_week = week_dates(date(2026, 10, 12))
        sessions = [_session(date(2026, 10, 13), "rd-2")]
        schedule = build_schedule(_assignment(PlanType.STRICT), ROUTINE_DAYS, sessions, last_week, today)

        statuses = [classify_day(r.scheduled_date, r, today) for r in schedule]
        assert statuses == [
            DayStatus.MISSED,
            DayStatus.COMPLETED,
            DayStatus.MISSED,
            DayStatus.REST,
            DayStatus.REST,
            DayStatus.REST,
            DayStatus.REST,
        ]
        assert schedule[1].workout_session_id == "session-2026-10-13"

    def test_sessions_of_other_routines_are_ignored(self):
        today = date(2026, 10, 19)
        other = _session(date(2026, 10, 13)).model_copy(update={"routine_id": "routine-2"})
        schedule = build_schedule(
            _assignment(PlanType.STRICT), ROUTINE_DAYS, [other], week_dates(date(2026, 10, 12)), today
        )
        assert not any(r.is_completed for r in schedule)

    def test_days_before_start_have_no_record(self):
        today = date(2026, 10, 19)
        assignment = _assignment(PlanType.STRICT, start=date(2026, 10, 21))
        schedule = build_schedule(assignment, ROUTINE_DAYS, [], week_dates(today), today)

        assert min(r.scheduled_date for r in schedule) == date(2026, 10, 21)
        assert len(schedule) == 5


# ===========================================================================
# flexible plans
# ===========================================================================

class TestFlexibleSchedule:
    def test_pointer_projects_forward_from_today(self):
        today = date(2026, 10, 21)
        schedule = _by_day(
            build_schedule(_assignment(PlanType.FLEXIBLE, index=1), ROUTINE_DAYS, [], week_dates(today), today)
        )

        assert schedule[date(2026, 10, 19)].is_rest_day
        assert schedule[date(2026, 10, 20)].is_rest_day
        assert [schedule[date(2026, 10, d)].routine_day_id for d in range(21, 26)] == [
            "rd-2",
            "rd-3",
            "rd-1",
            "rd-2",
            "rd-3",
        ]

    def test_unlogged_past_days_are_never_missed(self):
        today = date(2026, 10, 21)
        schedule = build_schedule(_assignment(PlanType.FLEXIBLE), ROUTINE_DAYS, [], week_dates(today), today)
        past = [r for r in schedule if r.scheduled_date < today]
        assert {classify_day(r.scheduled_date, r, today) for r in past} == {DayStatus.REST}

    def test_skipped_day_shifts_the_routine_day_to_the_next_day(self):
        today = date(2026, 10, 21)
        skipped = ScheduleDay(assignment_id="assign-1", scheduled_date=date(2026, 10, 22), was_skipped=True)
        schedule = _by_day(
            build_schedule(
                _assignment(PlanType.FLEXIBLE, index=1),
                ROUTINE_DAYS,
                [],
                week_dates(today),
                today,
                persisted=[skipped],
            )
        )

        assert schedule[date(2026, 10, 22)].was_skipped
        assert schedule[date(2026, 10, 22)].plan_type == PlanType.FLEXIBLE
        assert schedule[date(2026, 10, 21)].routine_day_id == "rd-2"
        assert schedule[date(2026, 10, 23)].routine_day_id == "rd-3"

    def test_completed_today_does_not_consume_a_projected_day(self):
        # the completion already moved the pointer to index 1
        today = date(2026, 10, 21)
        sessions = [_session(today, "rd-1")]
        schedule = _by_day(
            build_schedule(_assignment(PlanType.FLEXIBLE, index=1), ROUTINE_DAYS, sessions, week_dates(today), today)
        )

        assert schedule[today].is_completed
        assert schedule[date(2026, 10, 22)].routine_day_id == "rd-2"

    def test_future_week_continues_the_projection(self):
        today = date(2026, 10, 21)
        next_week = week_dates(date(2026, 10, 28))
        schedule = build_schedule(_assignment(PlanType.FLEXIBLE, index=1), ROUTINE_DAYS, [], next_week, today)

        # five open days (Wed..Sun) come before next Monday: (1 + 5) % 3 == 0
        assert [r.routine_day_id for r in schedule[:3]] == ["rd-1", "rd-2", "rd-3"]
