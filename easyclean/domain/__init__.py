"""Domain models and DTOs."""

from easyclean.domain.create_models import TaskCreate, ZoneCreate
from easyclean.domain.session import CleaningSession, QueueBuild, QueueOutcome, SessionHistory, SwapResult
from easyclean.domain.task import Priority, Task, TaskStatus, Zone
from easyclean.domain.update_models import TaskEdit, TaskUpdate


__all__ = [
    "CleaningSession",
    "Priority",
    "QueueBuild",
    "QueueOutcome",
    "SessionHistory",
    "SwapResult",
    "Task",
    "TaskCreate",
    "TaskEdit",
    "TaskStatus",
    "TaskUpdate",
    "Zone",
    "ZoneCreate",
]
