"""
Vibe Status Hub - Local aggregator for AI coding task status

Editor plugins, CLI hooks and MCP-speaking agents report the execution state
of AI coding tasks (armed/running/completed/error/cancelled) to one local
process, which merges the reports into a single authoritative view for a
desktop tray or UI.

Features:
- In-memory task registry guarded by one lock
- Source-priority reconciliation (hook > mcp > plugin)
- Status state machine with focus-triggered re-arming
- Heartbeat-based liveness expiry, evaluated on every read
- REST and MCP (JSON-RPC 2.0) surfaces over the same registry

Example:
    >>> from status_hub import TaskRegistry, TaskSource, TaskStatus
    >>>
    >>> registry = TaskRegistry()
    >>> _ = registry.report("cursor_proj", "cursor - proj", "cursor", "proj", is_focused=True)
    >>> _ = registry.update_state("cursor_proj", source=TaskSource.HOOK, status=TaskStatus.RUNNING)
    >>> [view.display_name for view in registry.get_all()]
    ['proj']
"""

__version__ = "1.0.0"
__all__ = [
    'TaskRegistry',
    'McpDispatcher',
    'HubConfig',
    'ConfigProperties',
    'Task',
    'TaskView',
    'TaskStatus',
    'TaskSource',
    'UpdateOutcome',
]

from status_hub.config import HubConfig, ConfigProperties
from status_hub.models import Task, TaskView, TaskStatus, TaskSource, UpdateOutcome
from status_hub.core import TaskRegistry, McpDispatcher
