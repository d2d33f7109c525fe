"""Create models for store operations."""

from pydantic import BaseModel, Field

from easyclean.core.config import constants


class TaskCreate(BaseModel):
    """DTO for creating a task."""

    zone: str = Field(..., min_length=1)
    label: str = Field(..., min_length=1)
    duration: int = Field(default=constants.DEFAULT_TASK_DURATION_MINUTES, gt=0)
    priority: int = Field(default=constants.DEFAULT_TASK_PRIORITY, ge=1, le=3)
    recurrence: int = Field(default=0, ge=0)
    dependency: str | None = None


class ZoneCreate(BaseModel):
    """DTO for creating a zone."""

    name: str = Field(..., min_length=1)
    level: str | int | None = None
