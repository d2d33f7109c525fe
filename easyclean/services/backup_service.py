"""Backup service for exporting and importing the inventory as JSON."""

import json
import logging
from typing import Any

from pydantic import ValidationError

from easyclean.core import db_client
from easyclean.core.config import constants, settings
from easyclean.core.errors import BackupFormatError
from easyclean.core.logging import span
from easyclean.domain.create_models import ZoneCreate
from easyclean.domain.task import Task
from easyclean.models.service_models import ImportSummary
from easyclean.services import inventory_service


logger = logging.getLogger(__name__)


async def export_backup() -> dict[str, Any]:
    """Export all tasks and zones as a backup document.

    Returns:
        Dict with ``inventory``, ``zones`` and ``version`` keys
    """
    with span("backup_service.export_backup"):
        tasks = await inventory_service.list_tasks()
        zones = await inventory_service.list_zones()
        logger.info("Exported backup", extra={"tasks": len(tasks), "zones": len(zones)})
        return {
            "inventory": [task.model_dump(mode="json") for task in tasks],
            "zones": [zone.model_dump(mode="json") for zone in zones],
            "version": settings.backup_version,
        }


def parse_backup(text: str) -> dict[str, Any]:
    """Parse backup file contents.

    Raises:
        BackupFormatError: If the text is not a backup document
    """
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        msg = f"Invalid backup file: {e.msg}"
        raise BackupFormatError(msg) from e
    if not isinstance(document, dict):
        msg = "Invalid backup file: expected a JSON object"
        raise BackupFormatError(msg)
    return document


def _zone_entries(raw_zones: Any) -> list[ZoneCreate]:
    """Read zones given either as plain names or as zone objects."""
    entries: list[ZoneCreate] = []
    for raw in raw_zones if isinstance(raw_zones, list) else []:
        try:
            if isinstance(raw, str):
                entries.append(ZoneCreate(name=raw))
            elif isinstance(raw, dict):
                entries.append(ZoneCreate.model_validate(raw))
        except ValidationError:
            logger.warning("Skipping invalid zone in backup", extra={"zone": raw})
    return entries


def remap_tasks(raw_tasks: list[Any]) -> list[Task]:
    """Give imported tasks fresh IDs and rewrite dependencies to match.

    Dependencies pointing outside the imported set are dropped.
    """
    id_map: dict[str, str] = {}
    tasks: list[Task] = []
    for raw in raw_tasks:
        if not isinstance(raw, dict):
            logger.warning("Skipping non-object task in backup")
            continue
        new_id = db_client.new_record_id()
        try:
            task = Task.model_validate({**raw, "id": new_id})
        except ValidationError:
            logger.warning("Skipping invalid task in backup", extra={"task_id": raw.get("id")})
            continue
        if raw.get("id") is not None:
            id_map.setdefault(str(raw["id"]), new_id)
        tasks.append(task)

    return [
        task.model_copy(update={"dependency": id_map.get(task.dependency) if task.dependency else None})
        for task in tasks
    ]


async def import_backup(document: dict[str, Any]) -> ImportSummary:
    """Import a backup document into the store.

    Tasks are appended with regenerated IDs. Zones are merged by name,
    including zones only referenced by imported tasks.

    Raises:
        BackupFormatError: If the document has no task list
    """
    with span("backup_service.import_backup"):
        raw_tasks = document.get("inventory")
        if not isinstance(raw_tasks, list):
            msg = "Invalid backup file: missing 'inventory' list"
            raise BackupFormatError(msg)

        tasks = remap_tasks(raw_tasks)

        existing_zones = {zone.name for zone in await inventory_service.list_zones()}
        zone_entries = _zone_entries(document.get("zones"))
        zone_entries += [ZoneCreate(name=task.zone) for task in tasks if task.zone]
        zones_added = 0
        for entry in zone_entries:
            if entry.name in existing_zones:
                continue
            await inventory_service.create_zone(entry)
            existing_zones.add(entry.name)
            zones_added += 1

        for task in tasks:
            await db_client.create_record(collection=constants.TASKS_COLLECTION, data=task.model_dump(mode="json"))

        version = document.get("version")
        logger.info("Imported backup", extra={"tasks": len(tasks), "zones_added": zones_added, "version": version})
        return ImportSummary(
            tasks_imported=len(tasks),
            zones_added=zones_added,
            version=None if version is None else str(version),
        )
