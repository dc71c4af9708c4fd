"""
Status State Machine - transitions and their timestamp side effects

    armed -> running -> completed | error | cancelled

A terminal task leaves its state only through a new ``running`` report
(restart), an explicit ``armed`` reset, deletion, or, for ``completed``, the
owning window regaining focus.

Functions here mutate the Task they are given and must be called with the
registry lock held.
"""

from status_hub.models import Task, TaskSource, TaskStatus


def apply_status(task: Task, new_status: TaskStatus, now: int) -> TaskStatus:
    """
    Move *task* to *new_status*, recording run-cycle timestamps.

    Returns:
        The status the task had before the call.
    """
    previous = task.status

    if new_status == TaskStatus.RUNNING:
        if previous.is_terminal:
            _restart(task, now)
        elif previous != TaskStatus.RUNNING and task.start_time == 0:
            task.start_time = now
    elif new_status.is_terminal:
        # end_time is written once per run-cycle
        if task.end_time is None:
            task.end_time = now
        if new_status == TaskStatus.COMPLETED:
            task.progress = 100
    elif new_status == TaskStatus.ARMED:
        clear_run_cycle(task)

    task.status = new_status
    return previous


def should_reset_on_focus(task: Task, was_focused: bool, is_focused: bool) -> bool:
    """True when the window of a completed task has just regained focus."""
    return task.status == TaskStatus.COMPLETED and is_focused and not was_focused


def reset_on_focus(task: Task) -> None:
    """
    completed -> armed because the user came back to the window.

    Bypasses the priority gate and hands the task back to the plugin channel.
    """
    clear_run_cycle(task)
    task.status = TaskStatus.ARMED
    task.source = TaskSource.PLUGIN


def clear_run_cycle(task: Task) -> None:
    task.progress = 0
    task.start_time = 0
    task.end_time = None
    task.estimated_duration = None
    task.current_stage = None


def _restart(task: Task, now: int) -> None:
    task.start_time = now
    task.end_time = None
    task.estimated_duration = None
    task.progress = 0
    task.current_stage = task.active_file or None
