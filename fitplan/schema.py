from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


def _calendar_day(value):
    # supabase returns dates as ISO strings, timestamps included for
    # timestamptz columns; only the calendar day matters here
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and len(value) > 10:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    return value


class PlanType(str, Enum):
    STRICT = "strict"
    FLEXIBLE = "flexible"


class DayStatus(str, Enum):
    COMPLETED = "completed"
    MISSED = "missed"
    SKIPPED = "skipped"
    REST = "rest"
    SCHEDULED = "scheduled"


# ---------- stored records ----------
class RoutineAssignment(BaseModel):
    id: str
    routine_id: str
    client_id: str
    plan_type: PlanType = PlanType.STRICT
    # only meaningful for flexible plans; always kept modulo the routine's day count
    current_day_index: int = Field(default=0, ge=0)
    start_date: date
    is_active: bool = True
    routine_name: Optional[str] = None

    @field_validator("current_day_index", mode="before")
    @classmethod
    def _default_index(cls, value):
        return 0 if value is None else value

    @field_validator("start_date", mode="before")
    @classmethod
    def _start_day(cls, value):
        return _calendar_day(value)


class RoutineDay(BaseModel):
    id: str
    routine_id: Optional[str] = None
    # days start at 1
    day_number: int
    name: str
    description: Optional[str] = None


class ScheduleDay(BaseModel):
    id: Optional[str] = None
    assignment_id: str
    routine_id: Optional[str] = None
    scheduled_date: date
    is_rest_day: bool = False
    is_completed: bool = False
    was_skipped: bool = False
    routine_day_id: Optional[str] = None
    routine_day_name: Optional[str] = None
    workout_session_id: Optional[str] = None
    workout_session_name: Optional[str] = None
    plan_type: Optional[PlanType] = None

    @field_validator("scheduled_date", mode="before")
    @classmethod
    def _scheduled_day(cls, value):
        return _calendar_day(value)


class WorkoutSession(BaseModel):
    id: str
    name: Optional[str] = None
    user_id: Optional[str] = None
    assignment_id: Optional[str] = None
    routine_id: Optional[str] = None
    routine_day_id: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @property
    def is_completed(self) -> bool:
        return self.end_time is not None

    @property
    def day(self) -> Optional[date]:
        return self.start_time.date() if self.start_time else None


# ---------- calendar display ----------
class DayDisplay(BaseModel):
    status: DayStatus
    icon: str
    css_class: str
    label: str


class CalendarCell(BaseModel):
    day: date
    schedule_day: Optional[ScheduleDay] = None
    display: DayDisplay
    can_skip: bool = False


class AssignmentWeek(BaseModel):
    assignment_id: str
    routine_name: str
    plan_type: PlanType
    cells: List[CalendarCell]


class WeekView(BaseModel):
    week_start: date
    week_end: date
    dates: List[date]
    rows: List[AssignmentWeek]


# ---------- AI routine text ----------
class AIExercise(BaseModel):
    name: str
    sets: int
    reps: str
    rest: Optional[str] = None
    weight: Optional[str] = None
    notes: Optional[str] = None


class AIWorkoutDay(BaseModel):
    # number as written in the source text, not the persisted position
    day_number: int
    name: str
    exercises: List[AIExercise]


class AIWorkoutRoutine(BaseModel):
    name: str
    description: str
    days_per_week: int
    days: List[AIWorkoutDay]
