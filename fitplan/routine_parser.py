"""
AI Routine Text Parser - turns coach-generated routine text into a structured routine

Expected text, as produced by the AI trainer chat:

    **Workout Name:** Upper/Lower Split

    **Day 1:**
    * **Exercise:** Bench Press | **Sets:** 4 | **Reps:** 6-8 | **Rest:** 2-3 minutes

Parsing runs in two explicit stages: the text is first segmented into
day-blocks at day headers, then each block is matched line by line against a
strict four-field exercise pattern, falling back to a name-only pattern when
nothing in the block matches strictly.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .errors import RoutineCreationError
from .logger import setup_logger
from .schema import AIExercise, AIWorkoutDay, AIWorkoutRoutine
from .supabase_client import ROUTINE_DAYS, ROUTINE_EXERCISES, ROUTINES

logger = setup_logger(__name__)

DEFAULT_ROUTINE_NAME = "AI Generated Routine"
DEFAULT_DESCRIPTION = "AI generated workout routine tailored to your fitness goals"
DEFAULT_NOTES = "Focus on proper form"

# placeholders for name-only entries such as abbreviated cardio work
FALLBACK_SETS = 1
FALLBACK_REPS = "As prescribed"
FALLBACK_REST = "As needed"

NAME_RE = re.compile(r"\*\*Workout Name:\*\*\s*(.+)", re.IGNORECASE)
DAY_HEADER_RE = re.compile(
    r"^\s*(?:#+\s*)?\*\*\s*(Day\b[^*\n]*)\*\*(.*)$", re.IGNORECASE
)
DAY_LABEL_RE = re.compile(r"^Day\s*(\d+)?\s*[:\-]?\s*(.*?)\s*:?\s*$", re.IGNORECASE)
# top-level sections that end the current day; other bold labels (**Warm-up:**) stay inside it
TOP_LEVEL_SECTIONS = ("Home Day", "Notes", "Workout Name")
SECTION_RE = re.compile(
    r"^\s*(?:#+\s*)?\*\*\s*(?:" + "|".join(TOP_LEVEL_SECTIONS) + r")\s*:",
    re.IGNORECASE,
)
STRICT_EXERCISE_RE = re.compile(
    r"^\s*[*\-]\s*\*\*Exercise:\*\*\s*([^|]+?)\s*\|\s*\*\*Sets:\*\*\s*(\d+)\s*"
    r"\|\s*\*\*Reps:\*\*\s*([^|]+?)\s*\|\s*\*\*Rest:\*\*\s*([^*|\n]+?)\s*(?:\||$)",
    re.IGNORECASE,
)
LOOSE_EXERCISE_RE = re.compile(
    r"^\s*[*\-]\s*\*\*Exercise:\*\*\s*([^|\n]+)", re.IGNORECASE
)
REST_RE = re.compile(
    r"(\d+)(?:\s*-\s*(\d+))?\s*(seconds?|secs?|s|minutes?|mins?|m)\b", re.IGNORECASE
)


@dataclass
class DayBlock:
    ordinal: int
    label: str
    trailing: str = ""
    lines: List[str] = field(default_factory=list)


# ---------- stage 1: segmentation ----------
def segment_day_blocks(text: str) -> List[DayBlock]:
    """Split the text at day headers; anything outside a day (preamble, other sections) is dropped"""
    blocks: List[DayBlock] = []
    current: Optional[DayBlock] = None

    for line in text.splitlines():
        header = DAY_HEADER_RE.match(line)
        if header:
            current = DayBlock(
                ordinal=len(blocks) + 1,
                label=header.group(1).strip(),
                trailing=header.group(2).strip(),
            )
            blocks.append(current)
            continue
        if SECTION_RE.match(line):
            current = None
            continue
        if current is not None:
            current.lines.append(line)

    return blocks


def _day_identity(block: DayBlock):
    label = DAY_LABEL_RE.match(block.label)
    number, title = None, ""
    if label:
        if label.group(1):
            number = int(label.group(1))
        title = label.group(2).strip()
    title = title or block.trailing
    if number is None:
        number = block.ordinal
    name = f"Day {number}: {title}" if title else f"Day {number}"
    return number, name


# ---------- stage 2: exercises ----------
def parse_strict_exercises(lines: List[str]) -> List[AIExercise]:
    exercises = []
    for line in lines:
        match = STRICT_EXERCISE_RE.match(line)
        if match:
            exercises.append(
                AIExercise(
                    name=match.group(1).strip(),
                    sets=int(match.group(2)),
                    reps=match.group(3).strip(),
                    rest=match.group(4).strip(),
                    notes=DEFAULT_NOTES,
                )
            )
    return exercises


def parse_loose_exercises(lines: List[str]) -> List[AIExercise]:
    exercises = []
    for line in lines:
        match = LOOSE_EXERCISE_RE.match(line)
        if match and match.group(1).strip():
            exercises.append(
                AIExercise(
                    name=match.group(1).strip(),
                    sets=FALLBACK_SETS,
                    reps=FALLBACK_REPS,
                    rest=FALLBACK_REST,
                )
            )
    return exercises


def parse_day_block(block: DayBlock) -> Optional[AIWorkoutDay]:
    """Returns None for a block without a single exercise, so no empty day is ever emitted"""
    exercises = parse_strict_exercises(block.lines) or parse_loose_exercises(block.lines)
    if not exercises:
        return None
    number, name = _day_identity(block)
    return AIWorkoutDay(day_number=number, name=name, exercises=exercises)


def parse_routine(routine_text: str) -> Optional[AIWorkoutRoutine]:
    """Parse coach text into a routine, or None when nothing usable can be read.

    ``days_per_week`` is the number of days actually parsed, whatever the
    text claims about its own schedule.
    """
    try:
        if not isinstance(routine_text, str):
            return None

        name_match = NAME_RE.search(routine_text)
        name = name_match.group(1).strip() if name_match else ""

        days = []
        for block in segment_day_blocks(routine_text):
            day = parse_day_block(block)
            if day is not None:
                days.append(day)
        # stable, so repeated day numbers keep their source order
        days.sort(key=lambda d: d.day_number)

        if not days:
            logger.warning("No workout days found in routine text")
            return None

        return AIWorkoutRoutine(
            name=name or DEFAULT_ROUTINE_NAME,
            description=DEFAULT_DESCRIPTION,
            days_per_week=len(days),
            days=days,
        )
    except Exception:
        logger.exception("Error parsing workout routine")
        return None


def rest_to_seconds(rest: Optional[str]) -> Optional[int]:
    """'90 seconds' -> 90, '2-3 min' -> 150; None when the text has no duration"""
    if not rest:
        return None
    match = REST_RE.search(rest)
    if not match:
        return None
    scale = 60 if match.group(3).lower().startswith("m") else 1
    low = int(match.group(1)) * scale
    if match.group(2):
        return (low + int(match.group(2)) * scale) // 2
    return low


# ---------- persistence ----------
def _cleanup(store, inserted: Dict[str, List[str]]) -> bool:
    cleaned = True
    for table in (ROUTINE_EXERCISES, ROUTINE_DAYS, ROUTINES):
        try:
            store.delete_rows(table, inserted[table])
        except Exception:
            logger.exception("Error removing partial rows from %s", table)
            cleaned = False
    return cleaned


def create_routine_in_database(routine: AIWorkoutRoutine, user_id: str, store) -> str:
    """Insert the routine, then its days in ascending order, then each day's exercises in source order.

    The first failing insert stops the creation. Rows already written are
    deleted again (best effort, there is no transaction over the REST API)
    and the failure is raised as RoutineCreationError.
    """
    inserted: Dict[str, List[str]] = {ROUTINES: [], ROUTINE_DAYS: [], ROUTINE_EXERCISES: []}
    try:
        routine_id = store.insert_routine(
            {
                "name": routine.name,
                "description": routine.description,
                "days_per_week": routine.days_per_week,
                "user_id": user_id,
                "is_public": False,
            }
        )
        inserted[ROUTINES].append(routine_id)

        for position, day in enumerate(routine.days, start=1):
            day_id = store.insert_routine_day(
                {
                    "routine_id": routine_id,
                    "day_number": position,
                    "name": day.name,
                    "description": f"{len(day.exercises)} exercises",
                }
            )
            inserted[ROUTINE_DAYS].append(day_id)

            for order_index, exercise in enumerate(day.exercises):
                exercise_id = store.insert_routine_exercise(
                    {
                        "routine_day_id": day_id,
                        "exercise_name": exercise.name,
                        "sets": exercise.sets,
                        "reps": exercise.reps,
                        "weight_suggestion": exercise.weight,
                        "notes": exercise.notes or f"Rest: {exercise.rest or '2-3 min'}",
                        "rest_time_seconds": rest_to_seconds(exercise.rest),
                        "order_index": order_index,
                    }
                )
                inserted[ROUTINE_EXERCISES].append(exercise_id)
    except Exception as e:
        logger.exception("Error creating workout routine %r", routine.name)
        cleaned = _cleanup(store, inserted)
        raise RoutineCreationError(
            f"Failed to create routine: {e}", inserted=inserted, cleaned_up=cleaned
        ) from e

    logger.info("Created routine %s with %d days", routine_id, len(routine.days))
    return routine_id
