"""Unit tests for session cursor transitions."""

from datetime import UTC, datetime

import pytest

from easyclean.domain.session import CleaningSession
from easyclean.domain.task import TaskStatus
from easyclean.services import session_state_machine
from tests.unit.factories import make_task


def _session(queue, *, time_budget=None, zone=None, level=None) -> CleaningSession:
    return CleaningSession(
        id="s1",
        started_at=datetime(2026, 3, 10, 9, 0, tzinfo=UTC),
        time_budget=time_budget,
        zone=zone,
        level=level,
        queue=queue,
    )


@pytest.mark.unit
class TestCompleteCurrent:
    """Tests for complete_current."""

    def test_emits_completion_update_and_advances(self):
        """Test completing returns an update intent and moves the cursor."""
        now = datetime(2026, 3, 10, 9, 30, tzinfo=UTC)
        session = _session([make_task("a"), make_task("b")])

        advanced, update = session_state_machine.complete_current(session, now=now, completed_by="sam")

        assert advanced.cursor == 1
        assert advanced.completed_ids == ["a"]
        assert advanced.current_task.id == "b"
        assert update.status == TaskStatus.COMPLETED
        assert update.completed_at == now
        assert update.completed_by == "sam"
        assert session.cursor == 0

    def test_queue_task_status_untouched(self):
        """Test the queue snapshot is not mutated."""
        session = _session([make_task("a")])

        advanced, _ = session_state_machine.complete_current(session)

        assert advanced.queue[0].status == TaskStatus.PENDING
        assert advanced.is_finished

    def test_finished_session_raises(self):
        """Test completing past the end is rejected."""
        session = _session([])

        with pytest.raises(ValueError, match="Cannot complete"):
            session_state_machine.complete_current(session)


@pytest.mark.unit
class TestSkipCurrent:
    """Tests for skip_current."""

    def test_skip_advances_without_status_change(self):
        """Test skipping keeps the task pending."""
        session = _session([make_task("a"), make_task("b")])

        advanced = session_state_machine.skip_current(session)

        assert advanced.cursor == 1
        assert advanced.skipped_ids == ["a"]
        assert advanced.queue[0].status == TaskStatus.PENDING

    def test_skip_finished_session_raises(self):
        """Test skipping past the end is rejected."""
        with pytest.raises(ValueError, match="Cannot skip"):
            session_state_machine.skip_current(_session([]))

    def test_skip_remaining(self):
        """Test skipping the rest of the queue."""
        session = _session([make_task("a"), make_task("b"), make_task("c")])
        session, _ = session_state_machine.complete_current(session)

        finished = session_state_machine.skip_remaining(session)

        assert finished.is_finished
        assert finished.completed_ids == ["a"]
        assert finished.skipped_ids == ["b", "c"]


@pytest.mark.unit
class TestSwapCurrent:
    """Tests for swap_current."""

    def test_swaps_closest_duration(self):
        """Test A is replaced by the closer B rather than C."""
        a = make_task("A", duration=10)
        pool = [a, make_task("B", duration=12), make_task("C", duration=50)]
        session = _session([a], time_budget=30)

        result = session_state_machine.swap_current(session, pool)

        assert result.swapped
        assert result.replaced.id == "A"
        assert result.replacement.id == "B"
        assert [task.id for task in result.session.queue] == ["B"]
        assert result.session.cursor == 0
        assert "Swapped" in result.message

    def test_swap_keeps_budget(self):
        """Test the swapped queue stays within the original budget."""
        a = make_task("A", duration=10)
        b = make_task("B", duration=15)
        pool = [a, b, make_task("long", duration=14), make_task("fits", duration=4)]
        session = _session([a, b], time_budget=25)

        result = session_state_machine.swap_current(session, pool)

        assert result.replacement.id == "fits"
        assert result.session.total_duration <= 25

    def test_no_alternative(self):
        """Test the session is unchanged when nothing can be swapped in."""
        a = make_task("A")
        session = _session([a])

        result = session_state_machine.swap_current(session, [a])

        assert not result.swapped
        assert result.session == session
        assert result.message == "No alternative available"

    def test_swap_does_not_reuse_completed_entries(self):
        """Test tasks earlier in the queue are not swapped back in."""
        a, b = make_task("A", duration=10), make_task("B", duration=10)
        session, _ = session_state_machine.complete_current(_session([a, b]))

        result = session_state_machine.swap_current(session, [a, b])

        assert not result.swapped

    def test_swap_respects_level_filter(self):
        """Test candidates on another level are ignored."""
        a = make_task("A", zone="Bedroom")
        pool = [a, make_task("down", zone="Kitchen"), make_task("up", zone="Bathroom")]
        zone_levels = {"Bedroom": "upstairs", "Bathroom": "upstairs", "Kitchen": "downstairs"}
        session = _session([a], level="upstairs")

        result = session_state_machine.swap_current(session, pool, zone_levels=zone_levels)

        assert result.replacement.id == "up"


@pytest.mark.unit
def test_preview_unlocked_next():
    """Test the preview lists dependents of the current task."""
    a = make_task("A")
    pool = [a, make_task("after-a", dependency="A"), make_task("other")]

    preview = session_state_machine.preview_unlocked_next(_session([a]), pool)

    assert [task.id for task in preview] == ["after-a"]
