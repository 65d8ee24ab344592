from typing import Dict, List, Optional


class FitplanError(Exception):
    """Base class for errors raised by the scheduling service"""


class ConfigurationError(FitplanError):
    pass


class ProgressionConflictError(FitplanError):
    """The assignment pointer kept moving underneath a compare-and-swap"""

    def __init__(self, assignment_id: str, attempts: int):
        super().__init__(
            f"Could not advance assignment {assignment_id} after {attempts} attempts"
        )
        self.assignment_id = assignment_id
        self.attempts = attempts


class RoutineCreationError(FitplanError):
    """An insert failed while persisting a parsed routine"""

    def __init__(
        self,
        message: str,
        inserted: Optional[Dict[str, List[str]]] = None,
        cleaned_up: bool = False,
    ):
        super().__init__(message)
        self.inserted = inserted or {}
        self.cleaned_up = cleaned_up
