"""
Task module - One unit of observable AI-agent work
"""

from dataclasses import dataclass, replace
from typing import Optional, Dict, Any

from .enums import TaskStatus, TaskSource


@dataclass
class Task:
    """
    A task as held by the registry.

    Timestamps are epoch milliseconds. ``start_time == 0`` means "not
    started"; ``last_heartbeat == 0`` means the task never heartbeated and is
    exempt from liveness expiry.
    """
    id: str
    name: str = ""
    ide: str = ""
    window_title: str = ""
    project_path: Optional[str] = None
    active_file: Optional[str] = None
    is_focused: bool = False
    status: TaskStatus = TaskStatus.ARMED
    source: TaskSource = TaskSource.PLUGIN
    progress: int = 0
    start_time: int = 0
    end_time: Optional[int] = None
    last_heartbeat: int = 0
    current_stage: Optional[str] = None
    estimated_duration: Optional[int] = None

    def copy(self) -> "Task":
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "ide": self.ide,
            "window_title": self.window_title,
            "project_path": self.project_path,
            "active_file": self.active_file,
            "is_focused": self.is_focused,
            "status": self.status.value,
            "source": self.source.value,
            "progress": self.progress,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "last_heartbeat": self.last_heartbeat,
            "current_stage": self.current_stage,
            "estimated_duration": self.estimated_duration,
        }

    def to_summary(self) -> Dict[str, Any]:
        """Compact form handed to MCP callers by ``list_tasks``."""
        return {
            "id": self.id,
            "ide": self.ide,
            "window_title": self.window_title,
            "project_path": self.project_path,
            "active_file": self.active_file,
            "status": self.status.value,
            "progress": self.progress,
            "source": self.source.value,
        }


@dataclass
class TaskView:
    """Read-side projection of a Task: a copy plus values derived at read time."""
    task: Task
    display_name: str
    progress: int

    def to_dict(self) -> Dict[str, Any]:
        data = self.task.to_dict()
        data["display_name"] = self.display_name
        data["progress"] = self.progress
        return data

    def to_summary(self) -> Dict[str, Any]:
        data = self.task.to_summary()
        data["progress"] = self.progress
        return data
