"""Task and zone domain models and enums.

Records coming from the store or from imported backups are often incomplete or
hand-edited, so the validators below normalize bad values to their most
permissive reading instead of rejecting the record.
"""

from datetime import datetime
from enum import IntEnum, StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, TypeAdapter, ValidationError, field_validator

from easyclean.core.config import constants


_DATETIME_ADAPTER = TypeAdapter(datetime)


class TaskStatus(StrEnum):
    """Task lifecycle status."""

    PENDING = "pending"
    COMPLETED = "completed"
    BLOCKED = "blocked"  # Derived view only, never persisted


class Priority(IntEnum):
    """Task priority, lower value is more urgent."""

    HIGH = 1
    MEDIUM = 2
    LOW = 3


def _coerce_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


class Task(BaseModel):
    """Task data transfer object."""

    id: str = Field(..., description="Opaque unique task ID")
    zone: str = Field(default="", description="Name of the owning zone")
    label: str = Field(default="", description="Task description (e.g., 'Clean Toilet')")
    duration: int = Field(default=constants.DEFAULT_TASK_DURATION_MINUTES, description="Duration in minutes")
    priority: int = Field(default=Priority.MEDIUM, description="1 = high, 2 = medium, 3 = low")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="Current lifecycle status")
    dependency: str | None = Field(default=None, description="ID of the task that must be completed first")
    recurrence: int = Field(default=0, description="Days after completion until due again, 0 = one-shot")
    completed_at: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("completed_at", "completedAt", "lastCompleted"),
        description="Most recent completion time",
    )
    completed_by: str | None = Field(
        default=None,
        validation_alias=AliasChoices("completed_by", "completedBy"),
        description="Who completed the task last",
    )
    image_path: str | None = Field(
        default=None,
        validation_alias=AliasChoices("image_path", "imagePath"),
        description="Storage path of an attached image",
    )

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @field_validator("zone", "label", mode="before")
    @classmethod
    def _missing_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("duration", mode="before")
    @classmethod
    def _normalize_duration(cls, value: Any) -> int:
        return _coerce_int(value, 0)

    @field_validator("priority", mode="before")
    @classmethod
    def _normalize_priority(cls, value: Any) -> int:
        return _coerce_int(value, Priority.MEDIUM)

    @field_validator("recurrence", mode="before")
    @classmethod
    def _normalize_recurrence(cls, value: Any) -> int:
        return _coerce_int(value, 0)

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> Any:
        try:
            return TaskStatus(value)
        except ValueError:
            return TaskStatus.PENDING

    @field_validator("dependency", mode="before")
    @classmethod
    def _normalize_dependency(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        return str(value)

    @field_validator("completed_at", mode="before")
    @classmethod
    def _normalize_completed_at(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        try:
            return _DATETIME_ADAPTER.validate_python(value)
        except ValidationError:
            return None


class Zone(BaseModel):
    """Named grouping of tasks (a room)."""

    name: str = Field(..., description="Zone name, unique")
    level: str | int | None = Field(default=None, description="Floor tag (e.g., 'upstairs' or 1)")
