"""Cleaning session domain models."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from easyclean.domain.task import Task


class QueueOutcome(StrEnum):
    """Result of building a session queue."""

    READY = "ready"
    ALL_CLEAR = "all_clear"  # No pending task matches the filters
    NOTHING_FITS = "nothing_fits"  # Candidates exist but none fit the time budget
    ALL_BLOCKED = "all_blocked"  # Unlimited budget, every candidate waits on a dependency


class QueueBuild(BaseModel):
    """Queue produced by the scheduler together with its outcome."""

    model_config = ConfigDict(frozen=True)

    tasks: list[Task]
    outcome: QueueOutcome
    candidate_count: int = 0

    @property
    def total_duration(self) -> int:
        return sum(task.duration for task in self.tasks)


class CleaningSession(BaseModel):
    """One interactive pass through a built queue.

    Values are immutable; transitions return a new session.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Session ID")
    started_at: datetime
    time_budget: int | None = Field(default=None, description="Minutes, None for unlimited")
    zone: str | None = None
    level: str | int | None = None
    queue: list[Task] = Field(default_factory=list)
    cursor: int = 0
    completed_ids: list[str] = Field(default_factory=list)
    skipped_ids: list[str] = Field(default_factory=list)
    outcome: QueueOutcome = QueueOutcome.READY

    @property
    def is_finished(self) -> bool:
        return self.cursor >= len(self.queue)

    @property
    def current_task(self) -> Task | None:
        return None if self.is_finished else self.queue[self.cursor]

    @property
    def total_duration(self) -> int:
        return sum(task.duration for task in self.queue)

    @property
    def remaining_tasks(self) -> list[Task]:
        return self.queue[self.cursor :]


class SwapResult(BaseModel):
    """Outcome of swapping the current queue entry."""

    session: CleaningSession
    swapped: bool
    replaced: Task | None = None
    replacement: Task | None = None

    @property
    def message(self) -> str:
        if not self.swapped:
            return "No alternative available"
        return f"Swapped '{self.replaced.label}' for '{self.replacement.label}'"


class SessionHistory(BaseModel):
    """Record of a finished session, kept after the live session is removed."""

    id: str = Field(..., description="History record ID")
    session_id: str
    started_at: datetime
    ended_at: datetime
    time_budget: int | None = None
    zone: str | None = None
    level: str | int | None = None
    completed_ids: list[str] = Field(default_factory=list)
    skipped_ids: list[str] = Field(default_factory=list)
