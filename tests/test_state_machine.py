"""
Tests for status transitions and their timestamp side effects.
"""

from status_hub.core.state_machine import (
    apply_status,
    reset_on_focus,
    should_reset_on_focus,
)
from status_hub.models import Task, TaskSource, TaskStatus


class TestApplyStatus:
    """Test apply_status()."""

    def test_armed_to_running_sets_start_time(self):
        task = Task(id="t")
        previous = apply_status(task, TaskStatus.RUNNING, now=1000)

        assert previous == TaskStatus.ARMED
        assert task.status == TaskStatus.RUNNING
        assert task.start_time == 1000
        assert task.end_time is None

    def test_running_again_keeps_start_time(self):
        task = Task(id="t")
        apply_status(task, TaskStatus.RUNNING, now=1000)
        apply_status(task, TaskStatus.RUNNING, now=5000)
        assert task.start_time == 1000

    def test_completion_sets_end_time_and_full_progress(self):
        task = Task(id="t", progress=40)
        apply_status(task, TaskStatus.RUNNING, now=1000)
        apply_status(task, TaskStatus.COMPLETED, now=4000)

        assert task.end_time == 4000
        assert task.progress == 100

    def test_end_time_written_once_per_cycle(self):
        """Test a second terminal report keeps the first end time."""
        task = Task(id="t")
        apply_status(task, TaskStatus.RUNNING, now=1000)
        apply_status(task, TaskStatus.ERROR, now=2000)
        apply_status(task, TaskStatus.CANCELLED, now=3000)

        assert task.status == TaskStatus.CANCELLED
        assert task.end_time == 2000

    def test_restart_from_terminal(self):
        """Test running after completion starts a fresh cycle."""
        task = Task(id="t", active_file="main.py", estimated_duration=9000)
        apply_status(task, TaskStatus.RUNNING, now=1000)
        apply_status(task, TaskStatus.COMPLETED, now=2000)
        apply_status(task, TaskStatus.RUNNING, now=3000)

        assert task.status == TaskStatus.RUNNING
        assert task.start_time == 3000
        assert task.end_time is None
        assert task.progress == 0
        assert task.estimated_duration is None
        assert task.current_stage == "main.py"

    def test_armed_clears_run_cycle(self):
        task = Task(id="t", current_stage="Thinking", progress=60)
        apply_status(task, TaskStatus.RUNNING, now=1000)
        apply_status(task, TaskStatus.ARMED, now=2000)

        assert task.status == TaskStatus.ARMED
        assert task.start_time == 0
        assert task.end_time is None
        assert task.progress == 0
        assert task.current_stage is None


class TestFocusReset:
    """Test completed -> armed on focus."""

    def test_reset_only_on_focus_gain(self):
        task = Task(id="t", status=TaskStatus.COMPLETED)
        assert should_reset_on_focus(task, was_focused=False, is_focused=True)
        assert not should_reset_on_focus(task, was_focused=True, is_focused=True)
        assert not should_reset_on_focus(task, was_focused=False, is_focused=False)

    def test_reset_only_for_completed(self):
        for status in (TaskStatus.ERROR, TaskStatus.CANCELLED, TaskStatus.RUNNING, TaskStatus.ARMED):
            task = Task(id="t", status=status)
            assert not should_reset_on_focus(task, was_focused=False, is_focused=True)

    def test_reset_hands_task_back_to_plugin(self):
        task = Task(
            id="t",
            status=TaskStatus.COMPLETED,
            source=TaskSource.HOOK,
            progress=100,
            start_time=1000,
            end_time=2000,
        )
        reset_on_focus(task)

        assert task.status == TaskStatus.ARMED
        assert task.source == TaskSource.PLUGIN
        assert task.progress == 0
        assert task.start_time == 0
        assert task.end_time is None
