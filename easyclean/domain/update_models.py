"""Update models for store operations."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from easyclean.domain.task import TaskStatus


class TaskUpdate(BaseModel):
    """Partial update intent handed to the mutation sink.

    Only fields that were explicitly set are written, so ``completed_at=None``
    clears the timestamp while an omitted ``completed_at`` leaves it alone.
    """

    model_config = ConfigDict(extra="forbid")

    status: TaskStatus | None = None
    completed_at: datetime | None = None
    completed_by: str | None = None
    image_path: str | None = None

    @field_validator("status")
    @classmethod
    def _status_is_persistable(cls, value: TaskStatus | None) -> TaskStatus | None:
        if value == TaskStatus.BLOCKED:
            msg = "Cannot persist blocked status: blocking is derived from dependencies"
            raise ValueError(msg)
        return value

    @model_validator(mode="after")
    def _not_empty(self) -> "TaskUpdate":
        if not self.model_fields_set:
            msg = "Empty task update"
            raise ValueError(msg)
        return self

    def as_record(self) -> dict:
        """Return the set fields as a JSON-ready dict."""
        return self.model_dump(mode="json", exclude_unset=True)


class TaskEdit(BaseModel):
    """Inventory edit of a task's definition."""

    model_config = ConfigDict(extra="forbid")

    zone: str | None = None
    label: str | None = Field(default=None, min_length=1)
    duration: int | None = Field(default=None, gt=0)
    priority: int | None = Field(default=None, ge=1, le=3)
    recurrence: int | None = Field(default=None, ge=0)
    dependency: str | None = None

    def as_record(self) -> dict:
        """Return the set fields as a JSON-ready dict."""
        return self.model_dump(mode="json", exclude_unset=True)
