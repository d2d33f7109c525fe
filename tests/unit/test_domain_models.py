"""Unit tests for domain models."""

import pytest
from pydantic import ValidationError

from easyclean.domain.session import CleaningSession, QueueOutcome
from easyclean.domain.task import Priority, Task, TaskStatus
from easyclean.domain.update_models import TaskEdit, TaskUpdate
from tests.unit.factories import make_task


@pytest.mark.unit
class TestTaskNormalization:
    """Tests for lenient reading of stored task records."""

    def test_minimal_record(self):
        """Test a record with only an id gets the defaults."""
        task = Task.model_validate({"id": 7})

        assert task.id == "7"
        assert task.zone == ""
        assert task.duration == 10
        assert task.priority == Priority.MEDIUM
        assert task.status == TaskStatus.PENDING
        assert task.recurrence == 0

    def test_bad_values_are_normalized(self):
        """Test unreadable values fall back instead of failing."""
        task = Task.model_validate(
            {
                "id": "a",
                "zone": None,
                "duration": "long",
                "priority": "urgent",
                "recurrence": "weekly",
                "status": "archived",
                "dependency": "",
                "completedAt": "yesterday",
            }
        )

        assert task.zone == ""
        assert task.duration == 0
        assert task.priority == 2
        assert task.recurrence == 0
        assert task.status == TaskStatus.PENDING
        assert task.dependency is None
        assert task.completed_at is None

    def test_numeric_strings_and_dependency_ids(self):
        """Test numeric strings are parsed and dependency ids become strings."""
        task = Task.model_validate({"id": "a", "duration": "15", "priority": "1", "dependency": 3})

        assert task.duration == 15
        assert task.priority == 1
        assert task.dependency == "3"

    def test_out_of_range_priority_kept(self):
        """Test integer priorities outside 1-3 are kept for ordering."""
        assert make_task("a", priority=9).priority == 9


@pytest.mark.unit
class TestTaskUpdate:
    """Tests for TaskUpdate."""

    def test_as_record_only_set_fields(self):
        """Test unset fields are left out and explicit None is kept."""
        update = TaskUpdate(status=TaskStatus.PENDING, completed_at=None)

        assert update.as_record() == {"status": "pending", "completed_at": None}

    def test_blocked_status_rejected(self):
        """Test the derived blocked status cannot be persisted."""
        with pytest.raises(ValidationError, match="Cannot persist blocked status"):
            TaskUpdate(status=TaskStatus.BLOCKED)

    def test_empty_update_rejected(self):
        """Test an update without fields is rejected."""
        with pytest.raises(ValidationError, match="Empty task update"):
            TaskUpdate()

    def test_unknown_field_rejected(self):
        """Test definition fields cannot sneak into a status update."""
        with pytest.raises(ValidationError):
            TaskUpdate(duration=5)

    def test_edit_as_record(self):
        """Test TaskEdit keeps only the edited fields."""
        assert TaskEdit(label="Mop floor", dependency=None).as_record() == {"label": "Mop floor", "dependency": None}


@pytest.mark.unit
class TestCleaningSession:
    """Tests for CleaningSession properties."""

    def test_cursor_properties(self):
        """Test current task and remaining tasks follow the cursor."""
        queue = [make_task("a", duration=5), make_task("b", duration=7)]
        session = CleaningSession(id="s", started_at="2026-03-10T09:00:00", queue=queue, cursor=1)

        assert session.current_task.id == "b"
        assert [task.id for task in session.remaining_tasks] == ["b"]
        assert session.total_duration == 12
        assert not session.is_finished
        assert session.outcome == QueueOutcome.READY

    def test_session_is_immutable(self):
        """Test sessions cannot be changed in place."""
        session = CleaningSession(id="s", started_at="2026-03-10T09:00:00")

        with pytest.raises(ValidationError):
            session.cursor = 3


@pytest.mark.unit
@pytest.mark.parametrize("fields", [{"duration": 0}, {"duration": -5}, {"priority": 0}, {"priority": 4}])
def test_task_edit_bounds_match_creation(fields):
    """Test edits are held to the same duration and priority bounds as creation."""
    with pytest.raises(ValidationError):
        TaskEdit(**fields)
