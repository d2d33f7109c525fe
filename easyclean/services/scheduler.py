"""Session scheduler: builds time-boxed task queues from a task pool.

All functions are pure. They read a pool snapshot and return derived values;
nothing here writes to the store.

Key Concepts:
- Candidate: a pending task inside the session's zone/level filters.
- Blocked: a task whose dependency exists in the pool and is not completed.
  Dangling dependencies read as unblocked. Only the direct dependency is
  checked, so dependency cycles leave their members blocked without recursion.
- Admission is greedy over (unblocked first, priority, duration), skipping
  any task that would overrun the time budget. It is not an optimal packing.
"""

import logging
from collections.abc import Iterable, Mapping

from easyclean.core.config import constants
from easyclean.domain.session import QueueBuild, QueueOutcome
from easyclean.domain.task import Task, TaskStatus


logger = logging.getLogger(__name__)


def is_unlimited(time_budget: int | None) -> bool:
    """Return True if the budget places no time constraint."""
    return time_budget is None or time_budget >= constants.UNLIMITED_TIME_BUDGET


def index_pool(pool: Iterable[Task]) -> dict[str, Task]:
    """Map task IDs to tasks. The first occurrence of a duplicated ID wins."""
    index: dict[str, Task] = {}
    for task in pool:
        index.setdefault(task.id, task)
    return index


def is_blocked(task: Task, pool_index: Mapping[str, Task]) -> bool:
    """Return True if the task waits on an unresolved dependency."""
    if task.dependency is None:
        return False
    dependency = pool_index.get(task.dependency)
    if dependency is None:
        return False
    return dependency.status != TaskStatus.COMPLETED


def matches_filters(
    task: Task,
    *,
    zone: str | None = None,
    level: str | int | None = None,
    zone_levels: Mapping[str, str | int | None] | None = None,
) -> bool:
    """Return True if the task belongs to the requested zone and level."""
    if zone is not None and task.zone != zone:
        return False
    if level is not None:
        return (zone_levels or {}).get(task.zone) == level
    return True


def select_candidates(
    pool: Iterable[Task],
    *,
    zone: str | None = None,
    level: str | int | None = None,
    zone_levels: Mapping[str, str | int | None] | None = None,
) -> list[Task]:
    """Return pending tasks inside the zone/level filters, in pool order."""
    return [
        task
        for task in pool
        if task.status == TaskStatus.PENDING
        and matches_filters(task, zone=zone, level=level, zone_levels=zone_levels)
    ]


def sort_candidates(candidates: Iterable[Task], pool_index: Mapping[str, Task]) -> list[Task]:
    """Order candidates: unblocked before blocked, then priority, then shorter first.

    The sort is stable, so pool order breaks remaining ties.
    """
    return sorted(candidates, key=lambda task: (is_blocked(task, pool_index), task.priority, task.duration))


def build_queue(
    pool: list[Task],
    time_budget: int | None,
    *,
    zone: str | None = None,
    level: str | int | None = None,
    zone_levels: Mapping[str, str | int | None] | None = None,
) -> QueueBuild:
    """Build a dependency-respecting, priority-ordered, time-boxed queue.

    Args:
        pool: Every task across all zones
        time_budget: Minutes available, None or the unlimited sentinel for no limit
        zone: Only schedule tasks of this zone
        level: Only schedule tasks whose zone has this level
        zone_levels: Zone name to level mapping used by the level filter

    Returns:
        QueueBuild with the admitted tasks in execution order and the outcome
    """
    pool_index = index_pool(pool)
    candidates = select_candidates(pool, zone=zone, level=level, zone_levels=zone_levels)
    unlimited = is_unlimited(time_budget)

    queue: list[Task] = []
    total = 0
    for task in sort_candidates(candidates, pool_index):
        if is_blocked(task, pool_index):
            continue
        if not unlimited and total + task.duration > time_budget:
            continue
        queue.append(task)
        total += task.duration

    if queue:
        outcome = QueueOutcome.READY
    elif not candidates:
        outcome = QueueOutcome.ALL_CLEAR
    elif unlimited:
        outcome = QueueOutcome.ALL_BLOCKED
    else:
        outcome = QueueOutcome.NOTHING_FITS

    logger.info(
        "Built session queue",
        extra={
            "outcome": outcome,
            "queued": len(queue),
            "candidates": len(candidates),
            "total_minutes": total,
            "time_budget": time_budget,
            "zone": zone,
            "level": level,
        },
    )
    return QueueBuild(tasks=queue, outcome=outcome, candidate_count=len(candidates))


def find_swap_candidate(
    pool: list[Task],
    queue: list[Task],
    cursor: int,
    time_budget: int | None,
    *,
    zone: str | None = None,
    level: str | int | None = None,
    zone_levels: Mapping[str, str | int | None] | None = None,
) -> Task | None:
    """Pick the replacement for the queue entry at ``cursor``.

    Eligible tasks are pending, unblocked, inside the filters, absent from the
    queue, and keep the queue total within the time budget. The one closest in
    duration to the replaced task wins; pool order breaks ties.
    """
    if not 0 <= cursor < len(queue):
        return None

    current = queue[cursor]
    queued_ids = {task.id for task in queue}
    pool_index = index_pool(pool)
    unlimited = is_unlimited(time_budget)
    total_without_current = sum(task.duration for task in queue) - current.duration

    best: Task | None = None
    for task in select_candidates(pool, zone=zone, level=level, zone_levels=zone_levels):
        if task.id in queued_ids or is_blocked(task, pool_index):
            continue
        if not unlimited and total_without_current + task.duration > time_budget:
            continue
        if best is None or abs(task.duration - current.duration) < abs(best.duration - current.duration):
            best = task
    return best


def preview_unlocked(pool: list[Task], task: Task | None) -> list[Task]:
    """Return blocked pending tasks that become unblocked once ``task`` is completed."""
    if task is None:
        return []
    pool_index = index_pool(pool)
    return [
        candidate
        for candidate in pool
        if candidate.status == TaskStatus.PENDING
        and candidate.dependency == task.id
        and candidate.id != task.id
        and is_blocked(candidate, pool_index)
    ]
