from typing import Any, Literal, Optional

from pydantic import BaseModel

from .schema import AIWorkoutRoutine


class CompletionAccepted(BaseModel):
    type: Literal["completion_accepted"] = "completion_accepted"
    status: Literal["accepted"] = "accepted"
    session_id: str


class RoutineCreated(BaseModel):
    type: Literal["routine_created"] = "routine_created"
    status: Literal["success"] = "success"
    routine_id: str
    routine: AIWorkoutRoutine
    redirect: str


class ErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    message: str
    details: Optional[Any] = None


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
