"""Pydantic models for service layer return types."""

from pydantic import BaseModel


class ZoneProgress(BaseModel):
    """Completion progress of one zone."""

    zone: str
    done: int
    total: int
    percent: int

    @property
    def is_complete(self) -> bool:
        return self.total > 0 and self.done == self.total


class ProgressSummary(BaseModel):
    """Household-wide tidiness overview."""

    total_tasks: int
    completed_tasks: int
    percent_tidied: int
    due_tasks: int
    zones: list[ZoneProgress]


class ImportSummary(BaseModel):
    """Result of importing a backup document."""

    tasks_imported: int
    zones_added: int
    version: str | None = None
