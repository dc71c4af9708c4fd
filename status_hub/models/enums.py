"""
Enums module - Task status, reporting source and outcome types

TaskStatus.parse and TaskSource.parse are the only places a raw string from a
request becomes an enum member; the REST and MCP surfaces both go through
them, so the two protocols accept exactly the same values.
"""

from enum import Enum
from typing import Any, List

from status_hub.utils.exceptions import InvalidEnumValueError


class TaskStatus(str, Enum):
    """Execution state of an observed AI task"""
    ARMED = "armed"
    RUNNING = "running"
    COMPLETED = "completed"
    ERROR = "error"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATUSES

    @classmethod
    def values(cls) -> List[str]:
        return [member.value for member in cls]

    @classmethod
    def parse(cls, raw: Any) -> "TaskStatus":
        """Parse a request value, raising InvalidEnumValueError for anything else."""
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, str):
            try:
                return cls(raw)
            except ValueError:
                pass
        raise InvalidEnumValueError("status", raw, cls.values())


_TERMINAL_STATUSES = frozenset({TaskStatus.COMPLETED, TaskStatus.ERROR, TaskStatus.CANCELLED})


class TaskSource(str, Enum):
    """
    Reporting channel that last wrote a task.

    Ranked hook > mcp > plugin; a write is accepted only from a channel
    ranked at least as high as the current owner.
    """
    HOOK = "hook"
    MCP = "mcp"
    PLUGIN = "plugin"

    @property
    def priority(self) -> int:
        return _SOURCE_PRIORITY[self]

    @classmethod
    def values(cls) -> List[str]:
        return [member.value for member in cls]

    @classmethod
    def parse(cls, raw: Any) -> "TaskSource":
        """Parse a request value, raising InvalidEnumValueError for anything else."""
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, str):
            try:
                return cls(raw)
            except ValueError:
                pass
        raise InvalidEnumValueError("source", raw, cls.values())


_SOURCE_PRIORITY = {
    TaskSource.HOOK: 3,
    TaskSource.MCP: 2,
    TaskSource.PLUGIN: 1,
}


class OutcomeStatus(str, Enum):
    """Result of a mutating registry call"""
    OK = "ok"
    IGNORED = "ignored"
    NOT_FOUND = "not_found"


class IgnoreReason(str, Enum):
    """Machine-readable reason attached to an ignored outcome"""
    LOWER_PRIORITY_SOURCE = "lower_priority_source"
    PLUGIN_STATUS_BLOCKED = "plugin_status_blocked"
