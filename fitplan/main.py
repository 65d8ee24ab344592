"""
Fitplan - workout schedule and plan progression service
FastAPI application exposing the client calendar, workout completion and AI routine import
"""

from datetime import date
from functools import lru_cache
from typing import List, Optional

import uvicorn
from fastapi import BackgroundTasks, Depends, FastAPI, Form, HTTPException, Request
from fastapi.responses import JSONResponse

from .completion import handle_workout_completion
from .errors import FitplanError, RoutineCreationError
from .logger import setup_logger
from .progression import ProgressionEngine
from .resolver import can_skip_day
from .responses import CompletionAccepted, ErrorResponse, HealthResponse, RoutineCreated
from .routine_parser import create_routine_in_database, parse_routine
from .schedule_builder import build_schedule
from .schema import ScheduleDay, WeekView
from .supabase_client import SupabaseStore, get_client
from .week_calendar import project_week, shift_week, week_dates

logger = setup_logger(__name__)

app = FastAPI(
    title="Fitplan",
    description="Workout schedule, flexible plan progression and AI routine import",
    version="1.0.0",
)


# ---------- dependencies ----------
@lru_cache(maxsize=1)
def get_store() -> SupabaseStore:
    return SupabaseStore(get_client())


@lru_cache(maxsize=1)
def get_engine() -> ProgressionEngine:
    # one engine per process so duplicate completions of a session are recognised
    return ProgressionEngine(get_store())


def error_response(status_code: int, message: str, details=None) -> JSONResponse:
    return JSONResponse(
        ErrorResponse(message=message, details=details).model_dump(),
        status_code=status_code,
    )


@app.exception_handler(FitplanError)
async def fitplan_error_handler(request: Request, exc: FitplanError):
    logger.error("Request %s failed: %s", request.url.path, exc)
    return error_response(500, str(exc))


# ---------- routes ----------
@app.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse()


@app.get("/clients/{client_id}/calendar", response_model=WeekView)
def client_calendar(
    client_id: str,
    week: Optional[date] = None,
    offset: int = 0,
    store: SupabaseStore = Depends(get_store),
):
    """Week grid for every active routine of the client; ``offset`` moves by whole weeks"""
    today = date.today()
    pivot = shift_week(week or today, offset)
    dates = week_dates(pivot)

    assignments = store.list_active_assignments(client_id)
    sessions = store.list_sessions(client_id, dates[0], dates[-1])

    schedule_days: List[ScheduleDay] = []
    for assignment in assignments:
        persisted = store.list_schedule_days(assignment.id, dates[0], dates[-1])
        routine_days = store.list_routine_days(assignment.routine_id)
        schedule_days.extend(
            build_schedule(assignment, routine_days, sessions, dates, today, persisted)
        )

    return project_week(pivot, assignments, schedule_days, today)


@app.post(
    "/sessions/{session_id}/complete",
    response_model=CompletionAccepted,
    status_code=202,
)
def complete_session(
    session_id: str,
    background_tasks: BackgroundTasks,
    user_id: Optional[str] = Form(None),
    store: SupabaseStore = Depends(get_store),
    engine: ProgressionEngine = Depends(get_engine),
):
    """Called once the session row is saved; PR checks and progression run after the response"""
    background_tasks.add_task(handle_workout_completion, store, engine, session_id, user_id)
    return CompletionAccepted(session_id=session_id)


@app.post("/assignments/{assignment_id}/skip", response_model=ScheduleDay)
def skip_day(
    assignment_id: str,
    client_id: str = Form(...),
    day: date = Form(...),
    store: SupabaseStore = Depends(get_store),
):
    assignment = store.get_assignment(assignment_id)
    if assignment is None or assignment.client_id != client_id:
        raise HTTPException(status_code=404, detail="Assignment not found")

    today = date.today()
    existing = store.list_schedule_days(assignment_id, day, day)
    if existing:
        candidate = existing[0].model_copy(update={"plan_type": assignment.plan_type})
    else:
        derived = build_schedule(
            assignment,
            store.list_routine_days(assignment.routine_id),
            store.list_sessions(client_id, day, day),
            [day],
            today,
        )
        candidate = derived[0] if derived else None

    if not can_skip_day(candidate, day, today):
        return error_response(409, "This workout day cannot be skipped")

    return store.mark_day_skipped(assignment_id, client_id, day)


@app.post("/routines/import", response_model=RoutineCreated, status_code=201)
def import_routine(
    user_id: str = Form(...),
    routine_text: str = Form(...),
    store: SupabaseStore = Depends(get_store),
):
    routine = parse_routine(routine_text)
    if routine is None:
        return error_response(422, "Could not understand the routine text")

    try:
        routine_id = create_routine_in_database(routine, user_id, store)
    except RoutineCreationError as e:
        return error_response(502, str(e), {"cleaned_up": e.cleaned_up})

    return RoutineCreated(
        routine_id=routine_id,
        routine=routine,
        redirect=f"/routine/{routine_id}",
    )


# Development server
if __name__ == "__main__":
    uvicorn.run("fitplan.main:app", host="0.0.0.0", port=8000, reload=True)
