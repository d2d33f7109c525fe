"""Inventory service: task and zone records, and the task mutation sink."""

import logging
from datetime import datetime

from easyclean.core import db_client
from easyclean.core.config import constants
from easyclean.core.logging import span
from easyclean.core.recurrence import reactivate
from easyclean.domain.create_models import TaskCreate, ZoneCreate
from easyclean.domain.task import Task, TaskStatus, Zone
from easyclean.domain.update_models import TaskEdit, TaskUpdate


logger = logging.getLogger(__name__)


async def create_task(task: TaskCreate) -> Task:
    """Create a new pending task.

    The task's zone is registered if it does not exist yet.

    Args:
        task: Task definition

    Returns:
        Created task

    Raises:
        db_client.DatabaseError: If store operation fails
    """
    with span("inventory_service.create_task"):
        await ensure_zone(task.zone)
        record = await db_client.create_record(
            collection=constants.TASKS_COLLECTION,
            data={
                **task.model_dump(mode="json"),
                "status": TaskStatus.PENDING,
                "completed_at": None,
            },
        )
        logger.info("Created task: %s (zone: %s)", task.label, task.zone)
        return Task.model_validate(record)


async def get_task(*, task_id: str) -> Task:
    """Get task by ID.

    Raises:
        db_client.RecordNotFoundError: If task not found
    """
    record = await db_client.get_record(collection=constants.TASKS_COLLECTION, record_id=task_id)
    return Task.model_validate(record)


async def list_tasks(*, zone: str | None = None) -> list[Task]:
    """List tasks in store order, optionally limited to one zone."""
    with span("inventory_service.list_tasks"):
        records = await db_client.list_records(collection=constants.TASKS_COLLECTION)
        tasks = [Task.model_validate(record) for record in records]
        if zone is not None:
            tasks = [task for task in tasks if task.zone == zone]
        logger.debug("Retrieved %d tasks (zone: %s)", len(tasks), zone or "all")
        return tasks


async def update_task(task_id: str, update: TaskUpdate) -> Task:
    """Apply a status/completion update intent to a task.

    Raises:
        db_client.RecordNotFoundError: If task not found
    """
    with span("inventory_service.update_task"):
        record = await db_client.update_record(
            collection=constants.TASKS_COLLECTION,
            record_id=task_id,
            data=update.as_record(),
        )
        logger.info("Updated task %s", task_id, extra={"fields": sorted(update.model_fields_set)})
        return Task.model_validate(record)


async def edit_task(task_id: str, edit: TaskEdit) -> Task:
    """Edit a task's definition (zone, label, duration, priority, recurrence, dependency).

    Raises:
        ValueError: If the task would depend on itself
        db_client.RecordNotFoundError: If task not found
    """
    with span("inventory_service.edit_task"):
        if edit.dependency is not None and edit.dependency == task_id:
            msg = f"Cannot edit task {task_id}: a task cannot depend on itself"
            raise ValueError(msg)
        data = edit.as_record()
        if not data:
            return await get_task(task_id=task_id)
        if edit.zone:
            await ensure_zone(edit.zone)
        record = await db_client.update_record(
            collection=constants.TASKS_COLLECTION,
            record_id=task_id,
            data=data,
        )
        logger.info("Edited task %s", task_id, extra={"fields": sorted(data)})
        return Task.model_validate(record)


async def delete_task(*, task_id: str) -> None:
    """Delete a task.

    Tasks depending on it keep the now dangling reference, which reads as
    unblocked.

    Raises:
        db_client.RecordNotFoundError: If task not found
    """
    with span("inventory_service.delete_task"):
        await db_client.delete_record(collection=constants.TASKS_COLLECTION, record_id=task_id)
        logger.info("Deleted task %s", task_id)


async def load_pool(*, now: datetime | None = None) -> list[Task]:
    """Read the full task pool, reactivating recurring tasks that are due again.

    Reactivations are written back before the pool is returned.
    """
    with span("inventory_service.load_pool"):
        pool, updates = reactivate(await list_tasks(), now)
        for task_id, update in updates.items():
            await update_task(task_id, update)
        if updates:
            logger.info("Reactivated %d recurring tasks", len(updates), extra={"task_ids": list(updates)})
        return pool


async def list_zones() -> list[Zone]:
    """List zones in creation order."""
    records = await db_client.list_records(collection=constants.ZONES_COLLECTION)
    return [Zone.model_validate(record) for record in records]


async def create_zone(zone: ZoneCreate) -> Zone:
    """Create a zone, or return the existing zone with the same name."""
    with span("inventory_service.create_zone"):
        for existing in await list_zones():
            if existing.name == zone.name:
                return existing
        record = await db_client.create_record(
            collection=constants.ZONES_COLLECTION,
            data=zone.model_dump(mode="json"),
        )
        logger.info("Created zone: %s (level: %s)", zone.name, zone.level)
        return Zone.model_validate(record)


async def ensure_zone(name: str) -> Zone:
    """Make sure a zone with this name exists."""
    return await create_zone(ZoneCreate(name=name))


async def get_zone_levels() -> dict[str, str | int | None]:
    """Map zone names to their level tags."""
    return {zone.name: zone.level for zone in await list_zones()}
