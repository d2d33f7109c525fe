"""Pure state transition functions for cleaning session traversal."""

import logging
from datetime import UTC, datetime

from easyclean.domain.session import CleaningSession, SwapResult
from easyclean.domain.task import Task, TaskStatus
from easyclean.domain.update_models import TaskUpdate
from easyclean.services import scheduler


logger = logging.getLogger(__name__)


def _require_current(session: CleaningSession, action: str) -> Task:
    task = session.current_task
    if task is None:
        msg = f"Cannot {action}: session {session.id} is finished"
        raise ValueError(msg)
    return task


def complete_current(
    session: CleaningSession,
    *,
    now: datetime | None = None,
    completed_by: str | None = None,
) -> tuple[CleaningSession, TaskUpdate]:
    """Mark the current task completed and advance the cursor.

    The queue is not rebuilt, so dependents excluded at build time stay out.

    Returns:
        Tuple of (advanced session, update intent for the mutation sink)
    """
    task = _require_current(session, "complete")
    update = TaskUpdate(
        status=TaskStatus.COMPLETED,
        completed_at=now or datetime.now(UTC),
        completed_by=completed_by,
    )
    advanced = session.model_copy(
        update={
            "cursor": session.cursor + 1,
            "completed_ids": [*session.completed_ids, task.id],
        }
    )
    logger.info("Completed session task", extra={"session_id": session.id, "task_id": task.id})
    return advanced, update


def skip_current(session: CleaningSession) -> CleaningSession:
    """Advance past the current task without touching its status."""
    task = _require_current(session, "skip")
    logger.info("Skipped session task", extra={"session_id": session.id, "task_id": task.id})
    return session.model_copy(
        update={
            "cursor": session.cursor + 1,
            "skipped_ids": [*session.skipped_ids, task.id],
        }
    )


def skip_remaining(session: CleaningSession) -> CleaningSession:
    """Skip every task from the cursor to the end of the queue."""
    remaining = [task.id for task in session.remaining_tasks]
    return session.model_copy(
        update={
            "cursor": len(session.queue),
            "skipped_ids": [*session.skipped_ids, *remaining],
        }
    )


def swap_current(
    session: CleaningSession,
    pool: list[Task],
    *,
    zone_levels: dict[str, str | int | None] | None = None,
) -> SwapResult:
    """Replace the current task with the closest-duration eligible alternative.

    Leaves the session unchanged when no alternative exists.
    """
    current = _require_current(session, "swap")
    replacement = scheduler.find_swap_candidate(
        pool,
        session.queue,
        session.cursor,
        session.time_budget,
        zone=session.zone,
        level=session.level,
        zone_levels=zone_levels,
    )
    if replacement is None:
        logger.info("No swap candidate", extra={"session_id": session.id, "task_id": current.id})
        return SwapResult(session=session, swapped=False)

    queue = list(session.queue)
    queue[session.cursor] = replacement
    logger.info(
        "Swapped session task",
        extra={"session_id": session.id, "replaced": current.id, "replacement": replacement.id},
    )
    return SwapResult(
        session=session.model_copy(update={"queue": queue}),
        swapped=True,
        replaced=current,
        replacement=replacement,
    )


def preview_unlocked_next(session: CleaningSession, pool: list[Task]) -> list[Task]:
    """Return tasks that completing the current task would unblock."""
    return scheduler.preview_unlocked(pool, session.current_task)
