from datetime import date, timedelta
from functools import lru_cache
from typing import Any, Dict, List, Optional

from supabase import Client, create_client

from .config import SUPABASE_KEY, SUPABASE_URL
from .errors import ConfigurationError
from .schema import RoutineAssignment, RoutineDay, ScheduleDay, WorkoutSession

ASSIGNMENTS = "client_routine_assignments"
SESSIONS = "workout_sessions"
SESSION_EXERCISES = "workout_exercises"
ROUTINES = "workout_routines"
ROUTINE_DAYS = "routine_days"
ROUTINE_EXERCISES = "routine_exercises"
SCHEDULE = "workout_schedule"

ASSIGNMENT_COLUMNS = (
    "id, routine_id, client_id, plan_type, start_date, is_active, current_day_index"
)


@lru_cache(maxsize=1)
def get_client() -> Client:
    if not SUPABASE_URL or not SUPABASE_KEY:
        raise ConfigurationError(
            "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables must be set"
        )
    return create_client(SUPABASE_URL, SUPABASE_KEY)


def _first(rows: Optional[List[Dict[str, Any]]]) -> Optional[Dict[str, Any]]:
    return rows[0] if rows else None


class SupabaseStore:
    """Read/write contracts the scheduling core needs from the hosted database"""

    def __init__(self, sb: Client):
        self.sb = sb

    # ---------- assignments ----------
    def get_assignment(self, assignment_id: str) -> Optional[RoutineAssignment]:
        row = _first(
            self.sb.table(ASSIGNMENTS)
            .select(ASSIGNMENT_COLUMNS)
            .eq("id", assignment_id)
            .limit(1)
            .execute()
            .data
        )
        return RoutineAssignment.model_validate(row) if row else None

    def list_active_assignments(self, client_id: str) -> List[RoutineAssignment]:
        rows = (
            self.sb.table(ASSIGNMENTS)
            .select(f"{ASSIGNMENT_COLUMNS}, workout_routines(name)")
            .eq("client_id", client_id)
            .eq("is_active", True)
            .order("start_date")
            .execute()
            .data
        ) or []
        assignments = []
        for row in rows:
            routine = row.pop("workout_routines", None) or {}
            assignments.append(
                RoutineAssignment.model_validate({**row, "routine_name": routine.get("name")})
            )
        return assignments

    def compare_and_set_day_index(
        self, assignment_id: str, expected: int, new_index: int
    ) -> bool:
        """Move the pointer only if it still holds ``expected``; returns whether a row changed"""
        query = (
            self.sb.table(ASSIGNMENTS)
            .update({"current_day_index": new_index})
            .eq("id", assignment_id)
        )
        if expected == 0:
            # an unset pointer reads as 0
            query = query.or_("current_day_index.eq.0,current_day_index.is.null")
        else:
            query = query.eq("current_day_index", expected)
        return bool(query.execute().data)

    # ---------- sessions ----------
    def get_session(self, session_id: str) -> Optional[WorkoutSession]:
        row = _first(
            self.sb.table(SESSIONS)
            .select("id, name, user_id, assignment_id, routine_id, routine_day_id, start_time, end_time")
            .eq("id", session_id)
            .limit(1)
            .execute()
            .data
        )
        return WorkoutSession.model_validate(row) if row else None

    def list_sessions(self, client_id: str, start: date, end: date) -> List[WorkoutSession]:
        rows = (
            self.sb.table(SESSIONS)
            .select("id, name, user_id, assignment_id, routine_id, routine_day_id, start_time, end_time")
            .eq("user_id", client_id)
            .gte("start_time", start.isoformat())
            .lt("start_time", (end + timedelta(days=1)).isoformat())
            .order("start_time")
            .execute()
            .data
        ) or []
        return [WorkoutSession.model_validate(row) for row in rows]

    def list_session_lifts(self, session_id: str) -> List[Dict[str, Any]]:
        return (
            self.sb.table(SESSION_EXERCISES)
            .select("exercise_name, weight, reps")
            .eq("workout_session_id", session_id)
            .not_.is_("weight", "null")
            .execute()
            .data
        ) or []

    def check_personal_record(
        self, user_id: str, exercise_name: str, weight: float, reps: Optional[int], session_id: str
    ) -> bool:
        res = self.sb.rpc(
            "check_and_insert_pr",
            {
                "p_user_id": user_id,
                "p_exercise_name": exercise_name,
                "p_weight": weight,
                "p_reps": reps,
                "p_workout_session_id": session_id,
            },
        ).execute()
        return bool(res.data)

    # ---------- routine days ----------
    def count_routine_days(self, routine_id: str) -> int:
        res = (
            self.sb.table(ROUTINE_DAYS)
            .select("id", count="exact")
            .eq("routine_id", routine_id)
            .execute()
        )
        if res.count is not None:
            return res.count
        return len(res.data or [])

    def list_routine_days(self, routine_id: str) -> List[RoutineDay]:
        rows = (
            self.sb.table(ROUTINE_DAYS)
            .select("id, routine_id, day_number, name, description")
            .eq("routine_id", routine_id)
            .order("day_number")
            .execute()
            .data
        ) or []
        return [RoutineDay.model_validate(row) for row in rows]

    # ---------- schedule ----------
    def list_schedule_days(self, assignment_id: str, start: date, end: date) -> List[ScheduleDay]:
        rows = (
            self.sb.table(SCHEDULE)
            .select("*")
            .eq("assignment_id", assignment_id)
            .gte("scheduled_date", start.isoformat())
            .lte("scheduled_date", end.isoformat())
            .order("scheduled_date")
            .execute()
            .data
        ) or []
        return [ScheduleDay.model_validate(row) for row in rows]

    def mark_day_skipped(self, assignment_id: str, client_id: str, day: date) -> ScheduleDay:
        row = _first(
            self.sb.table(SCHEDULE)
            .upsert(
                {
                    "assignment_id": assignment_id,
                    "client_id": client_id,
                    "scheduled_date": day.isoformat(),
                    "was_skipped": True,
                    "is_completed": False,
                },
                on_conflict="assignment_id,scheduled_date",
            )
            .execute()
            .data
        )
        return ScheduleDay.model_validate(row)

    # ---------- routine creation ----------
    def _insert(self, table: str, record: Dict[str, Any]) -> str:
        return self.sb.table(table).insert(record).execute().data[0]["id"]

    def insert_routine(self, record: Dict[str, Any]) -> str:
        return self._insert(ROUTINES, record)

    def insert_routine_day(self, record: Dict[str, Any]) -> str:
        return self._insert(ROUTINE_DAYS, record)

    def insert_routine_exercise(self, record: Dict[str, Any]) -> str:
        return self._insert(ROUTINE_EXERCISES, record)

    def delete_rows(self, table: str, ids: List[str]):
        if ids:
            self.sb.table(table).delete().in_("id", ids).execute()
