"""Session service for running and persisting cleaning sessions.

Sessions are stored after every step so an interrupted session can be picked
up again after a restart. Task status changes go through the inventory
service, which is the only writer of task records.
"""

import logging
from datetime import UTC, datetime

from easyclean.core import db_client
from easyclean.core.config import constants, settings
from easyclean.core.logging import log_with_context, span
from easyclean.domain.session import CleaningSession, SessionHistory, SwapResult
from easyclean.domain.task import Task
from easyclean.services import inventory_service, scheduler, session_state_machine


logger = logging.getLogger(__name__)


async def _save(session: CleaningSession) -> CleaningSession:
    await db_client.update_record(
        collection=constants.SESSIONS_COLLECTION,
        record_id=session.id,
        data=session.model_dump(mode="json"),
    )
    return session


async def start_session(
    *,
    time_budget: int | None = None,
    zone: str | None = None,
    level: str | int | None = None,
    now: datetime | None = None,
) -> CleaningSession:
    """Build a queue from the current pool and start a session over it.

    Args:
        time_budget: Minutes available (None uses the configured default,
            the unlimited sentinel removes the limit)
        zone: Only schedule tasks of this zone
        level: Only schedule tasks on this level
        now: Evaluation time for recurrence reactivation

    Returns:
        Persisted session, check ``outcome`` for empty queues
    """
    with span("session_service.start_session"):
        budget = settings.default_time_budget_minutes if time_budget is None else time_budget
        if scheduler.is_unlimited(budget):
            budget = None

        pool = await inventory_service.load_pool(now=now)
        zone_levels = await inventory_service.get_zone_levels() if level is not None else None
        build = scheduler.build_queue(pool, budget, zone=zone, level=level, zone_levels=zone_levels)

        record = await db_client.create_record(
            collection=constants.SESSIONS_COLLECTION,
            data={
                "started_at": (now or datetime.now(UTC)).isoformat(),
                "time_budget": budget,
                "zone": zone,
                "level": level,
                "queue": [task.model_dump(mode="json") for task in build.tasks],
                "outcome": build.outcome,
            },
        )
        session = CleaningSession.model_validate(record)
        log_with_context(
            logger,
            "info",
            "Started cleaning session",
            session_id=session.id,
            outcome=session.outcome,
            queued=len(session.queue),
            total_minutes=session.total_duration,
        )
        return session


async def get_session(*, session_id: str) -> CleaningSession:
    """Load a persisted session, e.g. to resume it after a restart.

    Raises:
        db_client.RecordNotFoundError: If the session does not exist
    """
    record = await db_client.get_record(collection=constants.SESSIONS_COLLECTION, record_id=session_id)
    return CleaningSession.model_validate(record)


async def complete_current(*, session_id: str, completed_by: str | None = None) -> CleaningSession:
    """Complete the task at the cursor and persist its new status.

    Raises:
        ValueError: If the session is finished
    """
    with span("session_service.complete_current"):
        session = await get_session(session_id=session_id)
        advanced, update = session_state_machine.complete_current(session, completed_by=completed_by)
        await inventory_service.update_task(advanced.completed_ids[-1], update)
        return await _save(advanced)


async def skip_current(*, session_id: str) -> CleaningSession:
    """Skip the task at the cursor.

    Raises:
        ValueError: If the session is finished
    """
    with span("session_service.skip_current"):
        session = await get_session(session_id=session_id)
        return await _save(session_state_machine.skip_current(session))


async def swap_current(*, session_id: str) -> SwapResult:
    """Swap the task at the cursor for an alternative from the fresh pool.

    Raises:
        ValueError: If the session is finished
    """
    with span("session_service.swap_current"):
        session = await get_session(session_id=session_id)
        pool = await inventory_service.list_tasks()
        zone_levels = await inventory_service.get_zone_levels() if session.level is not None else None
        result = session_state_machine.swap_current(session, pool, zone_levels=zone_levels)
        if result.swapped:
            await _save(result.session)
        return result


async def preview_unlocked_next(*, session_id: str) -> list[Task]:
    """List tasks that completing the current task would unblock."""
    session = await get_session(session_id=session_id)
    pool = await inventory_service.list_tasks()
    return session_state_machine.preview_unlocked_next(session, pool)


async def end_session(
    *,
    session_id: str,
    skip_rest: bool = False,
    now: datetime | None = None,
) -> SessionHistory:
    """Finish a session, record it in the session history and drop its live state.

    Args:
        session_id: Session to end
        skip_rest: Record every remaining task as skipped
        now: End time (defaults to the current time)

    Returns:
        The stored history record
    """
    with span("session_service.end_session"):
        session = await get_session(session_id=session_id)
        if skip_rest:
            session = session_state_machine.skip_remaining(session)
        record = await db_client.create_record(
            collection=constants.SESSION_HISTORY_COLLECTION,
            data={
                "session_id": session.id,
                "started_at": session.started_at.isoformat(),
                "ended_at": (now or datetime.now(UTC)).isoformat(),
                "time_budget": session.time_budget,
                "zone": session.zone,
                "level": session.level,
                "completed_ids": session.completed_ids,
                "skipped_ids": session.skipped_ids,
            },
        )
        await db_client.delete_record(collection=constants.SESSIONS_COLLECTION, record_id=session_id)
        logger.info(
            "Ended cleaning session",
            extra={
                "session_id": session_id,
                "completed": len(session.completed_ids),
                "skipped": len(session.skipped_ids),
            },
        )
        return SessionHistory.model_validate(record)


async def list_session_history() -> list[SessionHistory]:
    """List finished sessions, oldest first."""
    records = await db_client.list_records(collection=constants.SESSION_HISTORY_COLLECTION)
    return [SessionHistory.model_validate(record) for record in records]
