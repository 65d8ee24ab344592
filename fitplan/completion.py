"""
Follow-up work for a saved workout session.

The session row is committed before anything here runs. Personal-record
checks and plan progression are side effects: each one logs its own failure
and never turns a successful save into an error.
"""

from typing import List, Optional

from .logger import setup_logger
from .progression import ProgressionEngine, ProgressionResult

logger = setup_logger(__name__)


def check_personal_records(store, user_id: str, session_id: str) -> List[str]:
    """Run the PR check for every weighted lift of the session, returning the exercises that set a record"""
    records = []
    try:
        lifts = store.list_session_lifts(session_id)
    except Exception:
        logger.exception("Error loading lifts for session %s", session_id)
        return records

    for lift in lifts:
        if not lift.get("weight") or not lift.get("exercise_name"):
            continue
        try:
            is_new = store.check_personal_record(
                user_id, lift["exercise_name"], lift["weight"], lift.get("reps"), session_id
            )
        except Exception:
            logger.exception("Error checking PR for %s", lift["exercise_name"])
            continue
        if is_new:
            logger.info("New PR: %s - %skg", lift["exercise_name"], lift["weight"])
            records.append(lift["exercise_name"])
    return records


def handle_workout_completion(
    store,
    engine: ProgressionEngine,
    session_id: str,
    user_id: Optional[str] = None,
) -> Optional[ProgressionResult]:
    if user_id:
        check_personal_records(store, user_id, session_id)
    return engine.on_workout_completed(session_id)
