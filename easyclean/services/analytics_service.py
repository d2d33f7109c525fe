"""Analytics service for household progress statistics.

Key Concepts:
- Percent tidied: share of all tasks currently completed (100 with no tasks).
- Zone progress: done/total per zone, zones ordered by first appearance in the
  pool followed by registered zones without tasks.
- Due: tasks that should be worked on now, including recurring tasks whose
  reset checkpoint has passed but have not been reactivated yet.
"""

import logging
import math
from datetime import datetime

from easyclean.core.logging import span
from easyclean.core.recurrence import is_task_due
from easyclean.domain.task import Task, TaskStatus
from easyclean.models.service_models import ProgressSummary, ZoneProgress
from easyclean.services import inventory_service


logger = logging.getLogger(__name__)


def _percent(done: int, total: int, *, empty: int) -> int:
    # Halves round up
    return math.floor(done / total * 100 + 0.5) if total > 0 else empty


def summarize_progress(
    pool: list[Task],
    *,
    zone_names: list[str] | None = None,
    now: datetime | None = None,
) -> ProgressSummary:
    """Summarize completion progress of a task pool."""
    names = list(dict.fromkeys([task.zone for task in pool] + (zone_names or [])))
    zones = []
    for name in names:
        zone_tasks = [task for task in pool if task.zone == name]
        done = sum(1 for task in zone_tasks if task.status == TaskStatus.COMPLETED)
        zones.append(
            ZoneProgress(zone=name, done=done, total=len(zone_tasks), percent=_percent(done, len(zone_tasks), empty=0))
        )

    completed = sum(1 for task in pool if task.status == TaskStatus.COMPLETED)
    return ProgressSummary(
        total_tasks=len(pool),
        completed_tasks=completed,
        percent_tidied=_percent(completed, len(pool), empty=100),
        due_tasks=sum(1 for task in pool if is_task_due(task, now)),
        zones=zones,
    )


async def get_progress(*, now: datetime | None = None) -> ProgressSummary:
    """Get progress for the stored inventory."""
    with span("analytics_service.get_progress"):
        pool = await inventory_service.list_tasks()
        zones = await inventory_service.list_zones()
        summary = summarize_progress(pool, zone_names=[zone.name for zone in zones], now=now)
        logger.debug("Computed progress", extra={"percent_tidied": summary.percent_tidied})
        return summary
