"""
MCP Dispatcher - JSON-RPC 2.0 tool surface over the task registry

AI agents reach the registry through the Model Context Protocol: they
``initialize``, discover tools with ``tools/list`` and act through
``tools/call``. Every write made here carries the ``mcp`` source.

Failures never escape ``handle()``: each one becomes a JSON-RPC error object
echoed with the request id.
"""

import json
import math
from typing import Any, Callable, Dict, Optional

from status_hub import __version__
from status_hub.core.registry import TaskRegistry
from status_hub.models import OutcomeStatus, TaskSource, TaskStatus
from status_hub.utils.exceptions import JsonRpcError, StatusHubError
from status_hub.utils.logger import get_logger

logger = get_logger(__name__)

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "vibe-status-hub"

INSTRUCTIONS = """Vibe Status Hub - AI Task Status Tracker.

Usage:
1. Call `list_tasks` first to get the current list of tasks.
2. Find the target task by matching `ide`, `project_path` (or `window_title`), and `active_file`.
3. Updates are prioritized by source: hook > mcp > plugin.

To update status:
- Call `update_task_status(task_id, status)`
- Call `update_task_progress(task_id, progress, current_stage, estimated_duration)` for progress hints

Status values:
- `armed`: Task is registered and monitoring.
- `running`: Task is actively processing (AI generating).
- `completed`: Task finished successfully.
- `error`: Task failed.
- `cancelled`: Task was cancelled."""

TOOLS = [
    {
        "name": "list_tasks",
        "description": "Get all IDE windows/tasks with their id, IDE name, project path, active file, and status",
        "inputSchema": {
            "type": "object",
            "properties": {},
            "required": [],
        },
    },
    {
        "name": "update_task_status",
        "description": (
            "Update a task's status. Priority: hook > mcp > plugin. "
            "Valid statuses: " + ", ".join(TaskStatus.values())
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "task_id": {"type": "string", "description": "The task ID to update"},
                "status": {
                    "type": "string",
                    "enum": TaskStatus.values(),
                    "description": "New status",
                },
            },
            "required": ["task_id", "status"],
        },
    },
    {
        "name": "update_task_progress",
        "description": "Report progress hints for a task. Priority: hook > mcp > plugin.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "task_id": {"type": "string", "description": "The task ID to update"},
                "progress": {"type": "integer", "minimum": 0, "maximum": 100},
                "current_stage": {"type": "string", "description": "Short description of the current step"},
                "estimated_duration": {
                    "type": "integer",
                    "description": "Expected total run time in milliseconds",
                },
            },
            "required": ["task_id"],
        },
    },
]


def _text_result(text: str) -> Dict[str, Any]:
    return {"content": [{"type": "text", "text": text}]}


class McpDispatcher:
    """Routes JSON-RPC requests to handlers backed by one TaskRegistry."""

    def __init__(self, registry: TaskRegistry):
        self.registry = registry
        self._methods: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
            "initialize": self._initialize,
            "ping": lambda params: {},
            "tools/list": lambda params: {"tools": TOOLS},
            "tools/call": self._call_tool,
        }
        self._tools: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
            "list_tasks": self._list_tasks,
            "update_task_status": self._update_task_status,
            "update_task_progress": self._update_task_progress,
        }

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def handle_raw(self, body: bytes) -> Optional[Dict[str, Any]]:
        """Decode *body* and dispatch it; parse failures yield ``-32700``."""
        try:
            payload = json.loads(body)
        except (ValueError, UnicodeDecodeError) as e:
            logger.warning("MCP parse error", extra={"error": str(e)})
            return self._error_response(None, JsonRpcError(JsonRpcError.PARSE_ERROR, "Parse error"))
        return self.handle(payload)

    def handle(self, payload: Any) -> Optional[Dict[str, Any]]:
        """
        Dispatch one decoded JSON-RPC message.

        Returns:
            The response envelope, or None for notifications (no body).
        """
        if not isinstance(payload, dict) or not isinstance(payload.get("method"), str):
            request_id = payload.get("id") if isinstance(payload, dict) else None
            return self._error_response(
                request_id, JsonRpcError(JsonRpcError.INVALID_REQUEST, "Invalid Request")
            )

        method = payload["method"]
        request_id = payload.get("id")

        if method.startswith("notifications/"):
            logger.debug("MCP notification received", extra={"method": method})
            return None

        params = payload.get("params")
        if params is None:
            params = {}

        try:
            if not isinstance(params, dict):
                raise JsonRpcError(JsonRpcError.INVALID_PARAMS, "params must be an object")
            handler = self._methods.get(method)
            if handler is None:
                raise JsonRpcError(JsonRpcError.METHOD_NOT_FOUND, f"Method not found: {method}")
            result = handler(params)
        except JsonRpcError as e:
            logger.warning("MCP request failed", extra={"method": method, "code": e.code, "error": e.message})
            return self._error_response(request_id, e)
        except Exception as e:
            logger.log_exception(f"MCP handler crashed for method {method}", e)
            return self._error_response(
                request_id, JsonRpcError(JsonRpcError.INTERNAL_ERROR, f"Internal error: {e}")
            )

        return {"jsonrpc": "2.0", "result": result, "id": request_id}

    @staticmethod
    def _error_response(request_id: Any, error: JsonRpcError) -> Dict[str, Any]:
        return {"jsonrpc": "2.0", "error": error.to_error_object(), "id": request_id}

    # ------------------------------------------------------------------
    # Methods
    # ------------------------------------------------------------------

    def _initialize(self, params: Dict[str, Any]) -> Dict[str, Any]:
        client = params.get("clientInfo") or {}
        logger.info("MCP client initialized", extra={"client": client.get("name") if isinstance(client, dict) else None})
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {}},
            "serverInfo": {"name": SERVER_NAME, "version": __version__},
            "instructions": INSTRUCTIONS,
        }

    def _call_tool(self, params: Dict[str, Any]) -> Dict[str, Any]:
        name = params.get("name")
        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise JsonRpcError(JsonRpcError.INVALID_PARAMS, "arguments must be an object")

        tool = self._tools.get(name) if isinstance(name, str) else None
        if tool is None:
            raise JsonRpcError(JsonRpcError.METHOD_NOT_FOUND, f"Unknown tool: {name}")
        return tool(arguments)

    # ------------------------------------------------------------------
    # Tools
    # ------------------------------------------------------------------

    def _list_tasks(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        summaries = [view.to_summary() for view in self.registry.get_all()]
        logger.info(f"MCP list_tasks: returning {len(summaries)} tasks")
        return _text_result(json.dumps(summaries, indent=2, ensure_ascii=False))

    def _update_task_status(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        task_id = self._require_task_id(arguments)
        status = self._parse(TaskStatus.parse, arguments.get("status"))

        outcome = self.registry.update_state(task_id, source=TaskSource.MCP, status=status)
        if outcome.status == OutcomeStatus.NOT_FOUND:
            raise JsonRpcError(JsonRpcError.INVALID_PARAMS, f"Task not found: {task_id}")
        if outcome.status == OutcomeStatus.IGNORED:
            return _text_result(
                f"Ignored: task {task_id} has higher priority source '{outcome.owner.value}'"
            )

        logger.info(
            f"MCP update_task_status: {task_id} {outcome.previous_status.value} -> {status.value}"
        )
        return _text_result(
            f"Task {task_id} status updated: {outcome.previous_status.value} -> {status.value}"
        )

    def _update_task_progress(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        task_id = self._require_task_id(arguments)
        progress = self._optional_int(arguments, "progress")
        estimated_duration = self._optional_int(arguments, "estimated_duration")
        current_stage = arguments.get("current_stage")
        if current_stage is not None and not isinstance(current_stage, str):
            raise JsonRpcError(JsonRpcError.INVALID_PARAMS, "current_stage must be a string")

        outcome = self.registry.update_state(
            task_id,
            source=TaskSource.MCP,
            progress=progress,
            current_stage=current_stage,
            estimated_duration=estimated_duration,
        )
        if outcome.status == OutcomeStatus.NOT_FOUND:
            raise JsonRpcError(JsonRpcError.INVALID_PARAMS, f"Task not found: {task_id}")
        if outcome.status == OutcomeStatus.IGNORED:
            return _text_result(
                f"Ignored: task {task_id} has higher priority source '{outcome.owner.value}'"
            )
        return _text_result(f"Task {task_id} progress updated: {outcome.task.progress}%")

    # ------------------------------------------------------------------
    # Argument helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _require_task_id(arguments: Dict[str, Any]) -> str:
        task_id = arguments.get("task_id")
        if not isinstance(task_id, str) or not task_id:
            raise JsonRpcError(JsonRpcError.INVALID_PARAMS, "task_id is required and must be a string")
        return task_id

    @staticmethod
    def _optional_int(arguments: Dict[str, Any], key: str) -> Optional[int]:
        value = arguments.get(key)
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise JsonRpcError(JsonRpcError.INVALID_PARAMS, f"{key} must be a number")
        return int(value)

    @staticmethod
    def _parse(parser: Callable[[Any], Any], raw: Any) -> Any:
        try:
            return parser(raw)
        except StatusHubError as e:
            raise JsonRpcError(JsonRpcError.INVALID_PARAMS, e.message)
