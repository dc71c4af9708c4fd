"""
Tests for source priority, display naming and derived progress.
"""

import pytest

from status_hub.core import policy
from status_hub.models import Task, TaskSource, TaskStatus
from status_hub.utils.exceptions import InvalidEnumValueError


class TestSourcePriority:
    """Test the hook > mcp > plugin ranking."""

    def test_ranking_is_total(self):
        """Test each channel's rank."""
        assert policy.source_priority(TaskSource.HOOK) == 3
        assert policy.source_priority(TaskSource.MCP) == 2
        assert policy.source_priority(TaskSource.PLUGIN) == 1

    def test_unknown_source_ranks_lowest(self):
        """Test unrecognised strings rank below every channel."""
        assert policy.source_priority("webhook") == 0
        assert policy.source_priority(None) == 0
        assert policy.source_priority("hook") == 3

    @pytest.mark.parametrize("owner,incoming,allowed", [
        (TaskSource.PLUGIN, TaskSource.PLUGIN, True),
        (TaskSource.PLUGIN, TaskSource.MCP, True),
        (TaskSource.PLUGIN, TaskSource.HOOK, True),
        (TaskSource.MCP, TaskSource.PLUGIN, False),
        (TaskSource.MCP, TaskSource.MCP, True),
        (TaskSource.HOOK, TaskSource.MCP, False),
        (TaskSource.HOOK, TaskSource.PLUGIN, False),
        (TaskSource.HOOK, TaskSource.HOOK, True),
    ])
    def test_can_update(self, owner, incoming, allowed):
        """Test writes are permitted only from an equal or higher channel."""
        assert policy.can_update(owner, incoming) is allowed


class TestSorting:
    """Test display ordering."""

    def test_priority_then_id(self):
        """Test higher owners come first and ties break on id."""
        tasks = [
            Task(id="b", source=TaskSource.PLUGIN),
            Task(id="a", source=TaskSource.PLUGIN),
            Task(id="z", source=TaskSource.HOOK),
            Task(id="m", source=TaskSource.MCP),
        ]
        assert [t.id for t in policy.sort_tasks(tasks)] == ["z", "m", "a", "b"]


class TestDisplayName:
    """Test IDE prefix stripping."""

    def test_strips_ide_prefix(self):
        assert policy.display_name("cursor - proj", "cursor") == "proj"

    def test_keeps_name_without_prefix(self):
        assert policy.display_name("proj", "cursor") == "proj"
        assert policy.display_name("vscode - proj", "cursor") == "vscode - proj"


class TestProgress:
    """Test clamping and time-derived progress."""

    def test_clamp(self):
        assert policy.clamp_progress(-5) == 0
        assert policy.clamp_progress(42) == 42
        assert policy.clamp_progress(150) == 100

    def test_derived_progress_while_running(self):
        """Test elapsed time drives progress when an estimate is known."""
        task = Task(id="t", status=TaskStatus.RUNNING, start_time=1000, estimated_duration=10000)
        assert policy.effective_progress(task, now=6000) == 50

    def test_derived_progress_caps_below_completion(self):
        task = Task(id="t", status=TaskStatus.RUNNING, start_time=1000, estimated_duration=1000)
        assert policy.effective_progress(task, now=100000) == policy.MAX_DERIVED_PROGRESS

    def test_stored_progress_wins_when_higher(self):
        task = Task(id="t", status=TaskStatus.RUNNING, progress=80, start_time=1000, estimated_duration=10000)
        assert policy.effective_progress(task, now=2000) == 80

    def test_no_estimate_returns_stored(self):
        task = Task(id="t", status=TaskStatus.RUNNING, progress=7, start_time=1000)
        assert policy.effective_progress(task, now=50000) == 7

    def test_not_running_returns_stored(self):
        task = Task(id="t", status=TaskStatus.COMPLETED, progress=100, start_time=1000, estimated_duration=10)
        assert policy.effective_progress(task, now=50000) == 100


class TestNormalizePath:
    """Test project path comparison form."""

    def test_separators_and_trailing_slash(self):
        assert policy.normalize_path("C:\\work\\proj\\") == "C:/work/proj"
        assert policy.normalize_path("/work/proj/") == "/work/proj"

    def test_root_and_none(self):
        assert policy.normalize_path("/") == "/"
        assert policy.normalize_path(None) is None

    def test_blank_is_no_path(self):
        assert policy.normalize_path("") is None
        assert policy.normalize_path("   ") is None
        assert policy.normalize_path("\\") == "/"


class TestEnumParsing:
    """Test the shared closed-set parsers."""

    def test_parse_valid(self):
        assert TaskStatus.parse("running") is TaskStatus.RUNNING
        assert TaskSource.parse("mcp") is TaskSource.MCP

    def test_parse_rejects_unknown_and_wrong_case(self):
        with pytest.raises(InvalidEnumValueError) as exc_info:
            TaskStatus.parse("done")
        assert exc_info.value.field_name == "status"
        assert "done" in exc_info.value.message

        with pytest.raises(InvalidEnumValueError):
            TaskSource.parse("HOOK")

    def test_parse_rejects_non_strings(self):
        with pytest.raises(InvalidEnumValueError):
            TaskStatus.parse(3)

    def test_terminal_statuses(self):
        assert TaskStatus.COMPLETED.is_terminal
        assert TaskStatus.ERROR.is_terminal
        assert TaskStatus.CANCELLED.is_terminal
        assert not TaskStatus.RUNNING.is_terminal
        assert not TaskStatus.ARMED.is_terminal
