"""
Task Registry - the single shared table of observed AI tasks

Tasks, the focused-task pointer and the global "block plugin status" flag
form one aggregate guarded by one lock. Every public method performs its
find-then-mutate inside a single critical section and hands back copies, so
callers never hold references into the shared table.

Nothing inside the critical section does I/O: log records produced while the
lock is held are buffered and emitted after it is released.

Reads are not pure: ``get_all()`` and ``status_view()`` first evict tasks
whose heartbeat is older than the configured timeout.
"""

import threading
from typing import Callable, Dict, List, Optional, Tuple, Any

from status_hub.config.hub_config import DEFAULT_HEARTBEAT_TIMEOUT_MS
from status_hub.core import policy
from status_hub.core.state_machine import (
    apply_status,
    reset_on_focus,
    should_reset_on_focus,
)
from status_hub.models import (
    IgnoreReason,
    Task,
    TaskSource,
    TaskStatus,
    TaskView,
    UpdateOutcome,
)
from status_hub.utils.clock import now_millis
from status_hub.utils.logger import get_logger

logger = get_logger(__name__)

_LogEvent = Tuple[str, str, Optional[Dict[str, Any]]]


class TaskRegistry:
    """In-memory task table with source-priority reconciliation."""

    def __init__(
        self,
        heartbeat_timeout_ms: int = DEFAULT_HEARTBEAT_TIMEOUT_MS,
        block_plugin_status: bool = False,
        clock: Callable[[], int] = now_millis,
    ):
        """
        Args:
            heartbeat_timeout_ms: Age (ms) at which a heartbeating task is evicted
            block_plugin_status: Drop status writes from the plugin channel
            clock: Returns "now" in epoch milliseconds
        """
        self.heartbeat_timeout_ms = heartbeat_timeout_ms
        self._clock = clock
        self._lock = threading.Lock()
        self._tasks: Dict[str, Task] = {}
        self._focused_id: Optional[str] = None
        self._block_plugin_status = block_plugin_status

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    @property
    def block_plugin_status(self) -> bool:
        with self._lock:
            return self._block_plugin_status

    def set_block_plugin_status(self, enabled: bool) -> None:
        with self._lock:
            self._block_plugin_status = bool(enabled)
        logger.info("Plugin status blocking updated", extra={"block_plugin_status": bool(enabled)})

    @property
    def focused_task_id(self) -> Optional[str]:
        with self._lock:
            return self._focused_id

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, task_id: str) -> Optional[Task]:
        """Copy of the task with *task_id*, or None."""
        with self._lock:
            task = self._tasks.get(task_id)
            return task.copy() if task else None

    def get_all(self) -> List[TaskView]:
        """Swept, sorted, display-name annotated view of every task."""
        views, _ = self.status_view()
        return views

    def status_view(self) -> Tuple[List[TaskView], Optional[TaskView]]:
        """
        Sweep, then return ``(tasks, focused)`` taken from one critical section.
        """
        events: List[_LogEvent] = []
        with self._lock:
            now = self._clock()
            self._sweep(now, events)
            views = [self._view(task, now) for task in policy.sort_tasks(self._tasks.values())]
            focused = next((v for v in views if v.task.id == self._focused_id), None)
        self._emit(events)
        return views, focused

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    # ------------------------------------------------------------------
    # Window reports (plugin channel)
    # ------------------------------------------------------------------

    def report(
        self,
        task_id: str,
        name: str,
        ide: str,
        window_title: str,
        is_focused: bool = False,
        project_path: Optional[str] = None,
        active_file: Optional[str] = None,
    ) -> UpdateOutcome:
        """
        Register or refresh a window from the plugin channel.

        Heartbeat and focus always apply. Metadata applies only while the
        plugin channel may write the task, except that a completed task
        whose window regains focus is reset to ``armed`` unconditionally.
        Unknown ids are auto-registered as ``armed``/``plugin``.
        """
        events: List[_LogEvent] = []
        with self._lock:
            now = self._clock()
            task = self._tasks.get(task_id)

            if task is None:
                task = Task(
                    id=task_id,
                    name=name,
                    ide=ide,
                    window_title=window_title,
                    project_path=project_path,
                    active_file=active_file,
                    last_heartbeat=now,
                )
                self._tasks[task_id] = task
                self._set_focus(task, is_focused)
                events.append(("info", "Task auto-registered", {"task_id": task_id, "ide": ide, "name": name}))
                outcome = UpdateOutcome.ok(task.copy(), owner=TaskSource.PLUGIN, created=True)
            else:
                outcome = self._refresh_locked(
                    task, now, name, ide, window_title, is_focused, project_path, active_file, events
                )
        self._emit(events)
        return outcome

    def _refresh_locked(
        self,
        task: Task,
        now: int,
        name: str,
        ide: str,
        window_title: str,
        is_focused: bool,
        project_path: Optional[str],
        active_file: Optional[str],
        events: List[_LogEvent],
    ) -> UpdateOutcome:
        previous_status = task.status
        owner = task.source
        was_focused = task.is_focused

        task.last_heartbeat = now
        self._set_focus(task, is_focused)

        if should_reset_on_focus(task, was_focused, is_focused):
            reset_on_focus(task)
            events.append((
                "info",
                "Completed task re-armed (window focused)",
                {"task_id": task.id, "previous_source": owner.value},
            ))
        elif not policy.can_update(task.source, TaskSource.PLUGIN):
            events.append((
                "debug",
                "Report metadata ignored - lower priority source",
                {"task_id": task.id, "current_source": task.source.value},
            ))
            return UpdateOutcome.ignored(IgnoreReason.LOWER_PRIORITY_SOURCE, task.copy())

        task.name = name
        task.ide = ide
        task.window_title = window_title
        if project_path is not None:
            task.project_path = project_path
        if active_file is not None:
            task.active_file = active_file

        events.append((
            "debug",
            "Task report processed",
            {"task_id": task.id, "is_focused": is_focused, "status": task.status.value},
        ))
        return UpdateOutcome.ok(task.copy(), previous_status=previous_status, owner=owner)

    def touch_heartbeat(self, task_id: str, focused: Optional[bool] = None) -> UpdateOutcome:
        """
        Bump liveness (and optionally focus) without touching ownership.

        Unknown ids are auto-registered as ``armed``/``plugin`` with empty
        metadata; the next report fills it in.
        """
        events: List[_LogEvent] = []
        with self._lock:
            now = self._clock()
            task = self._tasks.get(task_id)
            if task is None:
                task = Task(id=task_id, last_heartbeat=now)
                self._tasks[task_id] = task
                if focused is not None:
                    self._set_focus(task, focused)
                events.append(("info", "Task auto-registered from heartbeat", {"task_id": task_id}))
                outcome = UpdateOutcome.ok(task.copy(), owner=TaskSource.PLUGIN, created=True)
            else:
                previous_status = task.status
                owner = task.source
                task.last_heartbeat = now
                if focused is not None:
                    was_focused = task.is_focused
                    self._set_focus(task, focused)
                    if should_reset_on_focus(task, was_focused, focused):
                        reset_on_focus(task)
                        events.append(("info", "Completed task re-armed (window focused)", {"task_id": task_id}))
                outcome = UpdateOutcome.ok(task.copy(), previous_status=previous_status, owner=owner)
        self._emit(events)
        return outcome

    # ------------------------------------------------------------------
    # State updates (any channel)
    # ------------------------------------------------------------------

    def update_state(
        self,
        task_id: str,
        source: TaskSource = TaskSource.PLUGIN,
        status: Optional[TaskStatus] = None,
        progress: Optional[int] = None,
        current_stage: Optional[str] = None,
        estimated_duration: Optional[int] = None,
    ) -> UpdateOutcome:
        """
        Apply a status/progress update from *source* to the task with *task_id*.

        Returns a not-found outcome for unknown ids; updates never register
        tasks.
        """
        events: List[_LogEvent] = []
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                outcome = UpdateOutcome.not_found()
            else:
                outcome = self._apply_update_locked(
                    task, source, status, progress, current_stage, estimated_duration, events
                )
        self._emit(events)
        return outcome

    def update_state_by_path(
        self,
        project_path: str,
        ide: Optional[str] = None,
        source: TaskSource = TaskSource.PLUGIN,
        status: Optional[TaskStatus] = None,
        progress: Optional[int] = None,
        current_stage: Optional[str] = None,
        estimated_duration: Optional[int] = None,
    ) -> UpdateOutcome:
        """
        Same as update_state, resolving the target by project path (and ide).

        When several windows match, the focused one wins, otherwise the first
        in display order.
        """
        events: List[_LogEvent] = []
        with self._lock:
            task = self._find_by_path_locked(project_path, ide)
            if task is None:
                outcome = UpdateOutcome.not_found()
            else:
                outcome = self._apply_update_locked(
                    task, source, status, progress, current_stage, estimated_duration, events
                )
        self._emit(events)
        return outcome

    def _find_by_path_locked(self, project_path: str, ide: Optional[str]) -> Optional[Task]:
        wanted = policy.normalize_path(project_path)
        if wanted is None:
            return None
        wanted_ide = ide.lower() if ide else None
        matches = [
            t for t in policy.sort_tasks(self._tasks.values())
            if policy.normalize_path(t.project_path) == wanted
            and (wanted_ide is None or t.ide.lower() == wanted_ide)
        ]
        if not matches:
            return None
        return next((t for t in matches if t.id == self._focused_id), matches[0])

    def _apply_update_locked(
        self,
        task: Task,
        source: TaskSource,
        status: Optional[TaskStatus],
        progress: Optional[int],
        current_stage: Optional[str],
        estimated_duration: Optional[int],
        events: List[_LogEvent],
    ) -> UpdateOutcome:
        if not policy.can_update(task.source, source):
            events.append((
                "info",
                "Update ignored - lower priority source",
                {"task_id": task.id, "source": source.value, "current_source": task.source.value},
            ))
            return UpdateOutcome.ignored(IgnoreReason.LOWER_PRIORITY_SOURCE, task.copy())

        if status is not None and source == TaskSource.PLUGIN and self._block_plugin_status:
            events.append((
                "info",
                "Update ignored - plugin status blocked",
                {"task_id": task.id, "status": status.value},
            ))
            return UpdateOutcome.ignored(IgnoreReason.PLUGIN_STATUS_BLOCKED, task.copy())

        now = self._clock()
        owner = task.source
        previous = task.status

        if status is not None:
            apply_status(task, status, now)
            if status != previous:
                events.append((
                    "info",
                    "Task status changed",
                    {"task_id": task.id, "from": previous.value, "to": status.value, "source": source.value},
                ))

        if progress is not None and status != TaskStatus.COMPLETED:
            task.progress = policy.clamp_progress(progress)
        if estimated_duration is not None:
            task.estimated_duration = estimated_duration if estimated_duration > 0 else None
        if current_stage is not None:
            task.current_stage = current_stage or None

        task.source = source
        return UpdateOutcome.ok(task.copy(), previous_status=previous, owner=owner)

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------

    def delete(self, task_id: str) -> bool:
        """Remove one task regardless of its owner. False if it did not exist."""
        with self._lock:
            removed = self._remove_locked(task_id)
        if removed:
            logger.info("Task deleted", extra={"task_id": task_id})
        return removed

    def reset(self, task_id: Optional[str] = None) -> int:
        """Remove one task, or every task when *task_id* is None. Returns the count removed."""
        with self._lock:
            if task_id is not None:
                count = 1 if self._remove_locked(task_id) else 0
            else:
                count = len(self._tasks)
                self._tasks.clear()
                self._focused_id = None
        if task_id is not None:
            logger.info("Task reset", extra={"task_id": task_id, "removed": count})
        else:
            logger.info("All tasks reset", extra={"removed": count})
        return count

    # ------------------------------------------------------------------
    # Internals (lock held)
    # ------------------------------------------------------------------

    def _remove_locked(self, task_id: str) -> bool:
        if self._tasks.pop(task_id, None) is None:
            return False
        if self._focused_id == task_id:
            self._focused_id = None
        return True

    def _set_focus(self, task: Task, is_focused: bool) -> None:
        task.is_focused = is_focused
        if is_focused:
            # at most one window has OS focus
            for other in self._tasks.values():
                if other is not task:
                    other.is_focused = False
            self._focused_id = task.id
        elif self._focused_id == task.id:
            self._focused_id = None

    def _sweep(self, now: int, events: List[_LogEvent]) -> None:
        expired = [
            task_id for task_id, task in self._tasks.items()
            if task.last_heartbeat > 0 and now - task.last_heartbeat >= self.heartbeat_timeout_ms
        ]
        for task_id in expired:
            self._remove_locked(task_id)
        if expired:
            events.append((
                "info",
                f"Cleaned up {len(expired)} stale tasks",
                {"task_ids": expired, "timeout_ms": self.heartbeat_timeout_ms},
            ))

    def _view(self, task: Task, now: int) -> TaskView:
        return TaskView(
            task=task.copy(),
            display_name=policy.display_name(task.name, task.ide),
            progress=policy.effective_progress(task, now),
        )

    @staticmethod
    def _emit(events: List[_LogEvent]) -> None:
        for level, message, extra in events:
            logger.log(level, message, extra=extra, stacklevel=2)
