"""HTTP API router for inventory, sessions, progress and backups."""

import logging
from typing import Any

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, computed_field

from easyclean.core.config import constants
from easyclean.core.errors import classify_error_with_response
from easyclean.core.recurrence import recurrence_to_human
from easyclean.domain.create_models import TaskCreate, ZoneCreate
from easyclean.domain.session import CleaningSession, SessionHistory
from easyclean.domain.task import Task, Zone
from easyclean.domain.update_models import TaskEdit
from easyclean.models.service_models import ImportSummary, ProgressSummary
from easyclean.services import analytics_service, backup_service, inventory_service, session_service


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["easyclean"])


class SessionStart(BaseModel):
    """Request body for starting a session."""

    time_budget: int | None = Field(default=None, description="Minutes, 9999 for unlimited")
    zone: str | None = None
    level: str | int | None = None


class SessionView(BaseModel):
    """Session state as returned to clients."""

    session: CleaningSession
    current_task: Task | None
    message: str


class SwapView(SessionView):
    """Session state after a swap attempt."""

    swapped: bool


class CompleteRequest(BaseModel):
    """Request body for completing the current task."""

    completed_by: str | None = None


class TaskView(Task):
    """Task as returned to clients, with a readable recurrence."""

    @computed_field
    @property
    def recurrence_label(self) -> str:
        return recurrence_to_human(self.recurrence)

    @classmethod
    def from_task(cls, task: Task) -> "TaskView":
        return cls.model_validate(task.model_dump())


_OUTCOME_MESSAGES = {
    "ready": "Let's go!",
    "all_clear": "All clear! Nothing is due here.",
    "nothing_fits": "Nothing fits in the time you have. Try a longer session.",
    "all_blocked": "Everything left is waiting on another task.",
}


def _view(session: CleaningSession) -> SessionView:
    if session.is_finished and session.queue:
        message = "Session complete!"
    else:
        message = _OUTCOME_MESSAGES[session.outcome]
    return SessionView(session=session, current_task=session.current_task, message=message)


async def handle_service_error(_request: Request, exc: Exception) -> JSONResponse:
    """Render service exceptions as structured error responses."""
    response = classify_error_with_response(exc)
    logger.warning("request_failed", extra={"code": response.code, "error": str(exc)})
    return JSONResponse(status_code=response.status_code, content=response.model_dump(mode="json"))


@router.get("/tasks")
async def list_tasks(zone: str | None = None) -> list[TaskView]:
    """List tasks, optionally for one zone."""
    return [TaskView.from_task(task) for task in await inventory_service.list_tasks(zone=zone)]


@router.post("/tasks", status_code=status.HTTP_201_CREATED)
async def create_task(task: TaskCreate) -> TaskView:
    """Create a task."""
    return TaskView.from_task(await inventory_service.create_task(task))


@router.patch("/tasks/{task_id}")
async def edit_task(task_id: str, edit: TaskEdit) -> TaskView:
    """Edit a task's definition."""
    return TaskView.from_task(await inventory_service.edit_task(task_id, edit))


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: str) -> None:
    """Delete a task."""
    await inventory_service.delete_task(task_id=task_id)


@router.get("/zones")
async def list_zones() -> list[Zone]:
    """List zones."""
    return await inventory_service.list_zones()


@router.post("/zones", status_code=status.HTTP_201_CREATED)
async def create_zone(zone: ZoneCreate) -> Zone:
    """Create a zone (idempotent by name)."""
    return await inventory_service.create_zone(zone)


@router.get("/progress")
async def get_progress() -> ProgressSummary:
    """Household progress overview."""
    return await analytics_service.get_progress()


@router.post("/sessions", status_code=status.HTTP_201_CREATED)
async def start_session(body: SessionStart) -> SessionView:
    """Build a queue and start a session."""
    session = await session_service.start_session(time_budget=body.time_budget, zone=body.zone, level=body.level)
    return _view(session)


@router.get("/sessions/{session_id}")
async def get_session(session_id: str) -> SessionView:
    """Resume a session."""
    return _view(await session_service.get_session(session_id=session_id))


@router.post("/sessions/{session_id}/complete")
async def complete_current(session_id: str, body: CompleteRequest | None = None) -> SessionView:
    """Complete the current task."""
    completed_by = body.completed_by if body else None
    return _view(await session_service.complete_current(session_id=session_id, completed_by=completed_by))


@router.post("/sessions/{session_id}/skip")
async def skip_current(session_id: str) -> SessionView:
    """Skip the current task."""
    return _view(await session_service.skip_current(session_id=session_id))


@router.post("/sessions/{session_id}/swap")
async def swap_current(session_id: str) -> SwapView:
    """Swap the current task for a similar-length alternative."""
    result = await session_service.swap_current(session_id=session_id)
    return SwapView(
        session=result.session,
        current_task=result.session.current_task,
        message=result.message,
        swapped=result.swapped,
    )


@router.get("/sessions/{session_id}/preview")
async def preview_unlocked_next(session_id: str) -> list[Task]:
    """Tasks that completing the current task unblocks."""
    return await session_service.preview_unlocked_next(session_id=session_id)


@router.delete("/sessions/{session_id}")
async def end_session(session_id: str, skip_rest: bool = False) -> SessionHistory:
    """End a session and record it in the history."""
    return await session_service.end_session(session_id=session_id, skip_rest=skip_rest)


@router.get("/history")
async def list_session_history() -> list[SessionHistory]:
    """Finished sessions, oldest first."""
    return await session_service.list_session_history()


@router.get("/time-budgets")
async def list_time_budgets() -> list[int]:
    """Session lengths offered to users, in minutes."""
    return list(constants.TIME_BUDGET_OPTIONS)


@router.get("/backup")
async def export_backup() -> dict[str, Any]:
    """Download the inventory as a backup document."""
    return await backup_service.export_backup()


@router.post("/backup")
async def import_backup(request: Request) -> ImportSummary:
    """Restore a backup document (tasks are appended, zones merged)."""
    document = backup_service.parse_backup((await request.body()).decode("utf-8", errors="replace"))
    return await backup_service.import_backup(document)
