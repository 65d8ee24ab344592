import pytest

from fitplan.supabase_client import SupabaseStore

from .fakes import FakeSupabase


def seed_tables(day_count: int = 3, plan_type: str = "flexible", index=0):
    """One client, one routine with ``day_count`` days and one active assignment"""
    routine_days = [
        {
            "id": f"rd-{n}",
            "routine_id": "routine-1",
            "day_number": n,
            "name": f"Day {n}",
            "description": None,
        }
        for n in range(1, day_count + 1)
    ]
    return {
        "workout_routines": [{"id": "routine-1", "name": "Push Pull Legs", "user_id": "coach-1"}],
        "routine_days": routine_days,
        "client_routine_assignments": [
            {
                "id": "assign-1",
                "routine_id": "routine-1",
                "client_id": "client-1",
                "plan_type": plan_type,
                "current_day_index": index,
                "start_date": "2026-01-05",
                "is_active": True,
            }
        ],
        "workout_sessions": [
            {
                "id": "session-1",
                "user_id": "client-1",
                "name": "Day 1",
                "routine_id": "routine-1",
                "routine_day_id": "rd-1",
                "assignment_id": "assign-1",
                "start_time": "2026-10-19T07:30:00+00:00",
                "end_time": "2026-10-19T08:30:00+00:00",
            },
            {
                "id": "free-session",
                "user_id": "client-1",
                "name": "Evening run",
                "routine_id": None,
                "routine_day_id": None,
                "assignment_id": None,
                "start_time": "2026-10-19T18:00:00+00:00",
                "end_time": "2026-10-19T18:40:00+00:00",
            },
        ],
    }


@pytest.fixture
def fake_db():
    return FakeSupabase(seed_tables())


@pytest.fixture
def store(fake_db):
    return SupabaseStore(fake_db)
