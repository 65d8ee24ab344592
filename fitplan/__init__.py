"""
Workout schedule and flexible plan progression

Resolves calendar day status, projects week calendars, advances flexible
routine plans and imports AI generated routines into Supabase.
"""

from .progression import ProgressionEngine, ProgressionResult
from .resolver import can_skip_day, classify_day, resolve_day
from .routine_parser import create_routine_in_database, parse_routine
from .schedule_builder import build_schedule
from .week_calendar import project_week, shift_week, week_dates

__all__ = [
    "ProgressionEngine",
    "ProgressionResult",
    "build_schedule",
    "can_skip_day",
    "classify_day",
    "create_routine_in_database",
    "parse_routine",
    "project_week",
    "resolve_day",
    "shift_week",
    "week_dates",
]
