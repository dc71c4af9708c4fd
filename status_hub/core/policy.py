"""
Priority & Merge Policy - pure functions used by the registry

Source ranking is fixed and total: hook (3) > mcp (2) > plugin (1) > unknown (0).
A write from source S to a task owned by source O is permitted iff
priority(S) >= priority(O).
"""

from typing import Iterable, List, Optional, Union

from status_hub.models import Task, TaskSource, TaskStatus

SourceLike = Union[TaskSource, str, None]

# Derived progress never reaches 100 on its own; only completion does.
MAX_DERIVED_PROGRESS = 99


def source_priority(source: SourceLike) -> int:
    """Rank of *source*; unrecognised values rank below every channel."""
    if isinstance(source, TaskSource):
        return source.priority
    try:
        return TaskSource(source).priority
    except ValueError:
        return 0


def can_update(current_owner: SourceLike, incoming: SourceLike) -> bool:
    """True if *incoming* may overwrite a task currently owned by *current_owner*."""
    return source_priority(incoming) >= source_priority(current_owner)


def sort_tasks(tasks: Iterable[Task]) -> List[Task]:
    """Display order: highest-priority owner first, then id ascending."""
    return sorted(tasks, key=lambda t: (-source_priority(t.source), t.id))


def display_name(name: str, ide: str) -> str:
    """Strip a leading ``"{ide} - "`` from *name* (``"cursor - proj"`` -> ``"proj"``)."""
    prefix = f"{ide} - "
    if name.startswith(prefix):
        return name[len(prefix):]
    return name


def clamp_progress(value: int) -> int:
    return max(0, min(100, int(value)))


def effective_progress(task: Task, now: int) -> int:
    """
    Progress to show for *task* at time *now*.

    A running task with an ``estimated_duration`` advances with elapsed time
    (capped below completion); the stored value wins when it is higher.
    """
    if (
        task.status == TaskStatus.RUNNING
        and task.estimated_duration
        and task.estimated_duration > 0
        and task.start_time > 0
    ):
        elapsed = max(0, now - task.start_time)
        derived = min(MAX_DERIVED_PROGRESS, elapsed * 100 // task.estimated_duration)
        return max(task.progress, derived)
    return task.progress


def normalize_path(path: Optional[str]) -> Optional[str]:
    """Compare-form of a project path: no trailing separators, ``/`` only; blank is no path."""
    if path is None or not path.strip():
        return None
    normalized = path.replace("\\", "/").rstrip("/")
    return normalized or "/"
