"""
Vibe Status Hub Server

FastAPI-based server providing:
- REST API for window reports, state updates, deletion and reset
- MCP (JSON-RPC 2.0) endpoint for AI agents
- Live settings and health endpoints for the tray UI

One TaskRegistry is built per application by create_app() and shared by
both protocol surfaces.
"""

from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from status_hub import __version__
from status_hub.config import HubConfig
from status_hub.core import McpDispatcher, TaskRegistry
from status_hub.models import OutcomeStatus, TaskSource, TaskStatus
from status_hub.utils.exceptions import (
    InvalidRequestError,
    TaskNotFoundError,
    ValidationError,
)
from status_hub.utils.logger import get_logger

logger = get_logger(__name__)

SERVICE_NAME = "vibe-status-hub"


# ============================================================================
# PYDANTIC MODELS
# ============================================================================

class TaskReport(BaseModel):
    task_id: str
    name: str
    ide: str
    window_title: str
    is_focused: bool = False
    project_path: Optional[str] = None
    active_file: Optional[str] = None


class StateUpdate(BaseModel):
    task_id: str
    status: Optional[str] = None
    progress: Optional[int] = None
    source: Optional[str] = None
    estimated_duration: Optional[int] = None
    current_stage: Optional[str] = None


class PathStateUpdate(BaseModel):
    project_path: str
    ide: Optional[str] = None
    status: Optional[str] = None
    progress: Optional[int] = None
    source: Optional[str] = None
    estimated_duration: Optional[int] = None
    current_stage: Optional[str] = None


class TaskDelete(BaseModel):
    task_id: str


class ResetRequest(BaseModel):
    task_id: Optional[str] = None


class SettingsUpdate(BaseModel):
    block_plugin_status: Optional[bool] = None


# ============================================================================
# HELPERS
# ============================================================================

def _parse_source(raw: Optional[str]) -> TaskSource:
    """Missing source means the plugin channel."""
    return TaskSource.PLUGIN if raw is None else TaskSource.parse(raw)


def _parse_status(raw: Optional[str]) -> Optional[TaskStatus]:
    return None if raw is None else TaskStatus.parse(raw)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": "error", "error": message})


def _to_invalid_request(exc: RequestValidationError) -> InvalidRequestError:
    """Flatten FastAPI body errors (missing fields, bad JSON) into one message."""
    parts = []
    first_location = None
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        first_location = first_location or location or None
        message = err.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    message = "Invalid request: " + "; ".join(parts) if parts else "Invalid request"
    return InvalidRequestError(message, parameter_name=first_location)


# ============================================================================
# APP FACTORY
# ============================================================================

def create_app(
    registry: Optional[TaskRegistry] = None,
    config: Optional[HubConfig] = None,
) -> FastAPI:
    """
    Build the hub application around one registry.

    Args:
        registry: Registry to serve; built from *config* when omitted
        config: Hub settings; read from config.properties / env when omitted
    """
    config = config or HubConfig.from_properties()
    if registry is None:
        registry = TaskRegistry(
            heartbeat_timeout_ms=config.heartbeat_timeout_ms,
            block_plugin_status=config.block_plugin_status,
        )
    dispatcher = McpDispatcher(registry)

    app = FastAPI(
        title="Vibe Status Hub",
        description="Local aggregator for AI coding task status",
        version=__version__,
    )
    app.state.registry = registry
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ------------------------------------------------------------------
    # Error mapping
    # ------------------------------------------------------------------

    @app.exception_handler(ValidationError)
    async def hub_validation_error(request: Request, exc: ValidationError):
        logger.warning(
            "Rejected invalid request",
            extra={"path": request.url.path, "error": exc.message, **exc.details},
        )
        return _error(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        return await hub_validation_error(request, _to_invalid_request(exc))

    @app.exception_handler(TaskNotFoundError)
    async def task_not_found(request: Request, exc: TaskNotFoundError):
        logger.warning("Task not found", extra={"path": request.url.path, **exc.details})
        return _error(404, "Task not found")

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    @app.get("/api/status")
    async def get_status():
        views, focused = registry.status_view()
        return {
            "tasks": [v.to_dict() for v in views],
            "taskCount": len(views),
            "currentTask": focused.to_dict() if focused else None,
        }

    @app.get("/api/health")
    async def health():
        return {"status": "ok", "service": SERVICE_NAME, "version": __version__}

    # ------------------------------------------------------------------
    # Task API
    # ------------------------------------------------------------------

    @app.post("/api/task/report")
    async def report_task(data: TaskReport):
        outcome = registry.report(
            data.task_id,
            name=data.name,
            ide=data.ide,
            window_title=data.window_title,
            is_focused=data.is_focused,
            project_path=data.project_path,
            active_file=data.active_file,
        )
        return outcome.to_response()

    @app.post("/api/task/update_state")
    async def update_state(data: StateUpdate):
        outcome = registry.update_state(
            data.task_id,
            source=_parse_source(data.source),
            status=_parse_status(data.status),
            progress=data.progress,
            current_stage=data.current_stage,
            estimated_duration=data.estimated_duration,
        )
        if outcome.status == OutcomeStatus.NOT_FOUND:
            raise TaskNotFoundError(task_id=data.task_id)
        return outcome.to_response()

    @app.post("/api/task/update_state_by_path")
    async def update_state_by_path(data: PathStateUpdate):
        outcome = registry.update_state_by_path(
            data.project_path,
            ide=data.ide,
            source=_parse_source(data.source),
            status=_parse_status(data.status),
            progress=data.progress,
            current_stage=data.current_stage,
            estimated_duration=data.estimated_duration,
        )
        if outcome.status == OutcomeStatus.NOT_FOUND:
            raise TaskNotFoundError(project_path=data.project_path)
        return outcome.to_response()

    @app.post("/api/task/delete")
    async def delete_task(data: TaskDelete):
        if not registry.delete(data.task_id):
            raise TaskNotFoundError(task_id=data.task_id)
        return {"status": "ok"}

    @app.post("/api/reset")
    async def reset_tasks(data: Optional[ResetRequest] = None):
        registry.reset(data.task_id if data else None)
        return {"status": "ok"}

    # ------------------------------------------------------------------
    # Settings API
    # ------------------------------------------------------------------

    @app.get("/api/settings")
    async def get_settings():
        settings: Dict[str, Any] = config.to_dict()
        settings["block_plugin_status"] = registry.block_plugin_status
        return settings

    @app.post("/api/settings")
    async def update_settings(data: SettingsUpdate):
        if data.block_plugin_status is not None:
            registry.set_block_plugin_status(data.block_plugin_status)
        return {"status": "ok", "block_plugin_status": registry.block_plugin_status}

    # ------------------------------------------------------------------
    # MCP
    # ------------------------------------------------------------------

    @app.post("/mcp")
    async def mcp_endpoint(request: Request):
        body = await request.body()
        response = dispatcher.handle_raw(body)
        if response is None:
            return Response(status_code=202)
        return JSONResponse(content=response)

    logger.info(
        "Status hub app created",
        extra={
            "heartbeat_timeout_ms": registry.heartbeat_timeout_ms,
            "block_plugin_status": registry.block_plugin_status,
        },
    )
    return app
