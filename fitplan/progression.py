"""
Plan progression engine - moves a flexible plan's day pointer when a routine workout is completed
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from cachetools import TTLCache

from .config import HANDLED_SESSION_MAX, HANDLED_SESSION_TTL, MAX_ADVANCE_ATTEMPTS
from .errors import ProgressionConflictError
from .logger import setup_logger
from .schema import PlanType

logger = setup_logger(__name__)


@dataclass
class ProgressionResult:
    session_id: str
    advanced: bool
    reason: str
    assignment_id: Optional[str] = None
    previous_index: Optional[int] = None
    new_index: Optional[int] = None


class ProgressionEngine:
    """Advances ``current_day_index`` once per completed routine session.

    Strict plans follow the calendar and are never advanced. Flexible plans
    move to ``(index + 1) % N`` where ``N`` is the routine's day count. The
    write is a compare-and-swap on the previous index, retried on conflict,
    so two completions racing on one assignment both land.

    Handled session ids are remembered for ``handled_ttl`` seconds, at most
    ``handled_max`` of them, which covers double submits of one save.
    """

    def __init__(
        self,
        store,
        max_attempts: int = MAX_ADVANCE_ATTEMPTS,
        handled_ttl: float = HANDLED_SESSION_TTL,
        handled_max: int = HANDLED_SESSION_MAX,
        timer: Callable[[], float] = time.monotonic,
    ):
        self.store = store
        self.max_attempts = max_attempts
        self._handled = TTLCache(maxsize=handled_max, ttl=handled_ttl, timer=timer)
        self._lock = threading.Lock()

    def on_workout_completed(self, session_id: str) -> Optional[ProgressionResult]:
        """Best-effort hook run after the session is saved; failures are logged, never raised"""
        try:
            result = self.advance(session_id)
        except Exception:
            logger.exception("Error advancing plan for session %s", session_id)
            return None
        logger.info(
            "Progression for session %s: %s (%s -> %s)",
            session_id,
            result.reason,
            result.previous_index,
            result.new_index,
        )
        return result

    def advance(self, session_id: str) -> ProgressionResult:
        with self._lock:
            if session_id in self._handled:
                return ProgressionResult(session_id, False, "already handled")

        session = self.store.get_session(session_id)
        if session is None:
            logger.warning("Session %s not found, skipping progression", session_id)
            return ProgressionResult(session_id, False, "session not found")

        # a free workout outside any routine never moves a plan
        if not session.assignment_id or not session.routine_id:
            return ProgressionResult(session_id, False, "not a routine workout")

        assignment = self.store.get_assignment(session.assignment_id)
        if assignment is None:
            logger.warning(
                "Assignment %s not found, skipping progression", session.assignment_id
            )
            return ProgressionResult(
                session_id, False, "assignment not found", session.assignment_id
            )

        if assignment.plan_type != PlanType.FLEXIBLE:
            return ProgressionResult(
                session_id,
                False,
                "strict plan",
                assignment.id,
                assignment.current_day_index,
                assignment.current_day_index,
            )

        day_count = self.store.count_routine_days(session.routine_id)
        if day_count == 0:
            logger.warning(
                "No routine days found for routine %s, skipping progression",
                session.routine_id,
            )
            return ProgressionResult(session_id, False, "routine has no days", assignment.id)

        with self._lock:
            # a duplicate submit may have raced past the first check
            if session_id in self._handled:
                return ProgressionResult(session_id, False, "already handled")
            self._handled[session_id] = True

        try:
            previous, new = self._swap_index(assignment.id, assignment.current_day_index, day_count)
        except Exception:
            with self._lock:
                self._handled.pop(session_id, None)
            raise

        return ProgressionResult(session_id, True, "advanced", assignment.id, previous, new)

    def _swap_index(self, assignment_id: str, current: int, day_count: int):
        for attempt in range(1, self.max_attempts + 1):
            # the swap compares against the stored value; a stale pointer left
            # over from a shortened routine is folded back into range
            new_index = (current % day_count + 1) % day_count
            if self.store.compare_and_set_day_index(assignment_id, current, new_index):
                return current, new_index

            logger.info(
                "Pointer for assignment %s moved during update (attempt %d), re-reading",
                assignment_id,
                attempt,
            )
            fresh = self.store.get_assignment(assignment_id)
            if fresh is None:
                raise ProgressionConflictError(assignment_id, attempt)
            current = fresh.current_day_index

        raise ProgressionConflictError(assignment_id, self.max_attempts)
