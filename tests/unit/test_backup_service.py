"""Unit tests for backup_service module."""

import json
from datetime import UTC, datetime

import pytest

from easyclean.core.errors import BackupFormatError
from easyclean.domain.create_models import TaskCreate, ZoneCreate
from easyclean.domain.task import TaskStatus
from easyclean.services import backup_service, inventory_service


@pytest.mark.unit
class TestExportBackup:
    """Tests for export_backup."""

    async def test_export_contains_tasks_zones_and_version(self, patched_db):
        """Test the exported document lists tasks and zones."""
        await inventory_service.create_zone(ZoneCreate(name="Bathroom", level="upstairs"))
        task = await inventory_service.create_task(TaskCreate(zone="Bathroom", label="Clean Toilet"))

        document = await backup_service.export_backup()

        assert document["version"] == "3.2"
        assert [item["id"] for item in document["inventory"]] == [task.id]
        assert document["zones"] == [{"name": "Bathroom", "level": "upstairs"}]
        json.dumps(document)

    async def test_export_then_import_duplicates_with_new_ids(self, patched_db):
        """Test importing an export appends copies rather than replacing."""
        await inventory_service.create_task(TaskCreate(zone="Kitchen", label="Mop"))
        document = await backup_service.export_backup()

        summary = await backup_service.import_backup(document)

        tasks = await inventory_service.list_tasks()
        assert summary.tasks_imported == 1
        assert summary.zones_added == 0
        assert len(tasks) == 2
        assert tasks[0].id != tasks[1].id


@pytest.mark.unit
class TestParseBackup:
    """Tests for parse_backup."""

    def test_invalid_json(self):
        """Test malformed text raises a format error."""
        with pytest.raises(BackupFormatError, match="Invalid backup file"):
            backup_service.parse_backup("{not json")

    def test_non_object(self):
        """Test a JSON array is not a backup document."""
        with pytest.raises(BackupFormatError):
            backup_service.parse_backup("[1, 2]")

    def test_valid_document(self):
        """Test a valid document is returned as a dict."""
        assert backup_service.parse_backup('{"inventory": []}') == {"inventory": []}


@pytest.mark.unit
class TestRemapTasks:
    """Tests for remap_tasks."""

    def test_dependencies_follow_new_ids(self):
        """Test dependencies are rewritten to the regenerated IDs."""
        tasks = backup_service.remap_tasks(
            [
                {"id": 1, "zone": "Kitchen", "label": "Unload", "duration": 5},
                {"id": 2, "zone": "Kitchen", "label": "Load", "dependency": 1},
            ]
        )

        assert tasks[0].id not in {"1", "2"}
        assert tasks[1].dependency == tasks[0].id

    def test_unknown_dependency_dropped(self):
        """Test a dependency outside the imported set is cleared."""
        tasks = backup_service.remap_tasks([{"id": "a", "zone": "Kitchen", "label": "Load", "dependency": "zzz"}])

        assert tasks[0].dependency is None

    def test_non_object_entries_skipped(self):
        """Test entries that are not objects are ignored."""
        tasks = backup_service.remap_tasks(["junk", {"id": "a", "label": "Mop"}])

        assert [task.label for task in tasks] == ["Mop"]

    def test_legacy_field_names(self):
        """Test camelCase completion fields and epoch milliseconds are read."""
        completed_ms = int(datetime(2026, 2, 1, tzinfo=UTC).timestamp() * 1000)

        (task,) = backup_service.remap_tasks(
            [
                {
                    "id": "a",
                    "zone": "Kitchen",
                    "label": "Mop",
                    "status": "completed",
                    "lastCompleted": completed_ms,
                    "completedBy": "sam",
                }
            ]
        )

        assert task.status == TaskStatus.COMPLETED
        assert task.completed_at == datetime(2026, 2, 1, tzinfo=UTC)
        assert task.completed_by == "sam"


@pytest.mark.unit
class TestImportBackup:
    """Tests for import_backup."""

    async def test_import_merges_zones(self, patched_db):
        """Test zones given as names or objects are merged without duplicates."""
        await inventory_service.create_zone(ZoneCreate(name="Kitchen"))
        document = {
            "inventory": [{"id": "x", "zone": "Garage", "label": "Sweep"}],
            "zones": ["Kitchen", {"name": "Attic", "level": "upstairs"}, "Attic"],
            "version": 3.2,
        }

        summary = await backup_service.import_backup(document)

        zones = {zone.name: zone.level for zone in await inventory_service.list_zones()}
        assert zones == {"Kitchen": None, "Attic": "upstairs", "Garage": None}
        assert summary.zones_added == 2
        assert summary.version == "3.2"

    async def test_imported_tasks_are_schedulable(self, patched_db):
        """Test imported dependency chains keep blocking after import."""
        document = {
            "inventory": [
                {"id": 10, "zone": "Kitchen", "label": "Unload", "priority": 1},
                {"id": 11, "zone": "Kitchen", "label": "Load", "dependency": 10},
            ]
        }

        await backup_service.import_backup(document)

        tasks = await inventory_service.list_tasks()
        assert tasks[1].dependency == tasks[0].id

    async def test_missing_inventory_rejected(self, patched_db):
        """Test a document without a task list is rejected."""
        with pytest.raises(BackupFormatError, match="inventory"):
            await backup_service.import_backup({"zones": []})

        assert await inventory_service.list_tasks() == []
