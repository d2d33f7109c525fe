"""Recurrence utilities for task due-ness and reactivation."""

from datetime import datetime, timedelta

from croniter import croniter

from easyclean.core.config import settings
from easyclean.domain.task import Task, TaskStatus
from easyclean.domain.update_models import TaskUpdate


def recurrence_to_human(recurrence: int) -> str:
    """Convert a recurrence in days to human-readable text.

    Args:
        recurrence: Days between completions (0 = one-shot)

    Returns:
        Human-readable description (e.g., "weekly", "every 3 days")
    """
    if recurrence <= 0:
        return "one-off"
    if recurrence == 1:
        return "daily"
    if recurrence == 7:
        return "weekly"
    if recurrence == 14:
        return "every 2 weeks"
    return f"every {recurrence} days"


def _align(moment: datetime, now: datetime) -> datetime:
    """Express ``moment`` in the same timezone convention as ``now``.

    Naive datetimes are local wall-clock time.
    """
    if now.tzinfo is None:
        return moment if moment.tzinfo is None else moment.astimezone().replace(tzinfo=None)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=now.tzinfo)
    return moment.astimezone(now.tzinfo)


def next_checkpoint(moment: datetime, *, checkpoint_cron: str | None = None) -> datetime:
    """Return the first reset checkpoint at or after ``moment``."""
    cron = croniter(checkpoint_cron or settings.reset_checkpoint_cron, moment - timedelta(seconds=1))
    checkpoint = cron.get_next(datetime)
    while checkpoint < moment:
        checkpoint = cron.get_next(datetime)
    return checkpoint


def next_reset_at(
    *,
    completed_at: datetime,
    recurrence: int,
    checkpoint_cron: str | None = None,
) -> datetime | None:
    """Calculate when a completed task becomes due again.

    The naive ``completed_at + recurrence days`` instant is moved forward to the
    next reset checkpoint (07:00 by default). One-shot tasks never reset.
    """
    if recurrence <= 0:
        return None
    return next_checkpoint(completed_at + timedelta(days=recurrence), checkpoint_cron=checkpoint_cron)


def is_task_due(task: Task, now: datetime | None = None, *, checkpoint_cron: str | None = None) -> bool:
    """Return True if the task should be worked on at ``now``.

    Anything not completed is due. A completed task is due again once its reset
    checkpoint has passed; without a completion time it is treated as never
    completed.
    """
    if task.status != TaskStatus.COMPLETED:
        return True
    if task.recurrence <= 0:
        return False
    if task.completed_at is None:
        return True

    current = now or datetime.now()
    reset_at = next_reset_at(
        completed_at=_align(task.completed_at, current),
        recurrence=task.recurrence,
        checkpoint_cron=checkpoint_cron,
    )
    return reset_at is not None and current >= reset_at


def reactivation_update(task: Task, now: datetime | None = None) -> TaskUpdate | None:
    """Return the update that puts a due completed task back to pending, if any."""
    if task.status != TaskStatus.COMPLETED or not is_task_due(task, now):
        return None
    return TaskUpdate(status=TaskStatus.PENDING, completed_at=None)


def reactivate(pool: list[Task], now: datetime | None = None) -> tuple[list[Task], dict[str, TaskUpdate]]:
    """Apply recurrence reactivation to a pool snapshot.

    Returns:
        Tuple of (new pool, updates keyed by task ID) - the input is not modified
    """
    current = now or datetime.now()
    updates: dict[str, TaskUpdate] = {}
    result: list[Task] = []
    for task in pool:
        update = reactivation_update(task, current)
        if update is None:
            result.append(task)
            continue
        updates[task.id] = update
        result.append(task.model_copy(update={"status": TaskStatus.PENDING, "completed_at": None}))
    return result, updates
