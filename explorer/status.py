"""
Task status tracking for the explorer UI.

Each task kind (main generation, exploration) owns one TaskState. A request is
bound to the token handed out when it began; updates carrying any other token
are ignored, so a response that arrives after the user moved on cannot
overwrite newer state.
"""

from enum import Enum
from dataclasses import dataclass, replace
from typing import Optional

from explorer.models import GenerationResult


class TaskStatus(str, Enum):
    """Lifecycle of a gateway request."""
    IDLE = "idle"
    UPLOADING = "uploading"
    GENERATING = "generating"
    POLLING = "polling"
    DONE = "done"
    ERROR = "error"


BUSY_STATUSES = frozenset({TaskStatus.UPLOADING, TaskStatus.GENERATING, TaskStatus.POLLING})


@dataclass(frozen=True)
class TaskState:
    """Status of one task kind plus the token of the request it is tracking."""
    status: TaskStatus = TaskStatus.IDLE
    message: str = ""
    token: Optional[int] = None

    @property
    def is_busy(self) -> bool:
        """True while the triggering control must stay disabled."""
        return self.status in BUSY_STATUSES

    def to_dict(self) -> dict:
        return {"status": self.status.value, "message": self.message, "token": self.token}

    @classmethod
    def from_dict(cls, data: dict) -> "TaskState":
        return cls(TaskStatus(data["status"]), data.get("message", ""), data.get("token"))


def begin(token: int, status: TaskStatus, message: str = "") -> TaskState:
    """Start tracking the request identified by ``token``."""
    return TaskState(status=status, message=message, token=token)


def advance(task: TaskState, token: int, status: TaskStatus, message: str = "") -> TaskState:
    """Move the active request to ``status``; stale tokens leave the task untouched."""
    if token != task.token:
        return task
    return replace(task, status=status, message=message)


def idle() -> TaskState:
    """Drop any tracked request and return to idle."""
    return TaskState()


@dataclass(frozen=True)
class GenerationState:
    """State of the main two-video generation."""
    task: TaskState = TaskState()
    result: Optional[GenerationResult] = None
    next_token: int = 1

    def to_dict(self) -> dict:
        return {
            "task": self.task.to_dict(),
            "result": self.result.to_dict() if self.result else None,
            "nextToken": self.next_token,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GenerationState":
        result = data.get("result")
        return cls(
            task=TaskState.from_dict(data["task"]),
            result=GenerationResult(result["settingVideoUrl"], result["personVideoUrl"]) if result else None,
            next_token=data.get("nextToken", 1),
        )


def begin_generation(state: GenerationState, message: str = "Preparing images...") -> GenerationState:
    """Issue a new token, clear the previous result and enter ``uploading``."""
    token = state.next_token
    return GenerationState(
        task=begin(token, TaskStatus.UPLOADING, message),
        result=None,
        next_token=token + 1,
    )


def advance_generation(state: GenerationState, token: int, status: TaskStatus, message: str = "") -> GenerationState:
    return replace(state, task=advance(state.task, token, status, message))


def complete_generation(state: GenerationState, token: int, result: GenerationResult) -> GenerationState:
    """Store ``result`` if ``token`` is still the active request."""
    if token != state.task.token:
        return state
    return replace(
        state,
        task=replace(state.task, status=TaskStatus.DONE, message="Videos generated successfully!"),
        result=result,
    )


def fail_generation(state: GenerationState, token: int, message: str) -> GenerationState:
    return advance_generation(state, token, TaskStatus.ERROR, message)
