"""
Status Hub Client - HTTP reporter used by editor hooks and the CLI

Thin synchronous wrapper over the hub's REST API. Every call returns the
decoded JSON body; transport failures and 4xx/5xx answers raise
HubClientError.

Example:
    with StatusHubClient() as hub:
        hub.update_state_by_path("/work/proj", status="running", source="hook")
"""

from typing import Any, Dict, Optional

import httpx

from status_hub.config.hub_config import DEFAULT_HTTP_HOST, DEFAULT_HTTP_PORT
from status_hub.utils.exceptions import HubClientError
from status_hub.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0


def _without_none(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in payload.items() if v is not None}


class StatusHubClient:
    """Client for one running hub instance."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Args:
            base_url: Hub root URL; defaults to the loopback address and port
            timeout: Per-request timeout in seconds
            transport: Custom httpx transport (tests pass a MockTransport)
        """
        self.base_url = (base_url or f"http://{DEFAULT_HTTP_HOST}:{DEFAULT_HTTP_PORT}").rstrip("/")
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    def __enter__(self) -> "StatusHubClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # API
    # ------------------------------------------------------------------

    def status(self) -> Dict[str, Any]:
        """Current task list, count and focused task."""
        return self._request("GET", "/api/status")

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/api/health")

    def report(
        self,
        task_id: str,
        name: str,
        ide: str,
        window_title: str,
        is_focused: bool = False,
        project_path: Optional[str] = None,
        active_file: Optional[str] = None,
    ) -> Dict[str, Any]:
        return self._request("POST", "/api/task/report", _without_none({
            "task_id": task_id,
            "name": name,
            "ide": ide,
            "window_title": window_title,
            "is_focused": is_focused,
            "project_path": project_path,
            "active_file": active_file,
        }))

    def update_state(
        self,
        task_id: str,
        status: Optional[str] = None,
        source: Optional[str] = None,
        progress: Optional[int] = None,
        current_stage: Optional[str] = None,
        estimated_duration: Optional[int] = None,
    ) -> Dict[str, Any]:
        return self._request("POST", "/api/task/update_state", _without_none({
            "task_id": task_id,
            "status": status,
            "source": source,
            "progress": progress,
            "current_stage": current_stage,
            "estimated_duration": estimated_duration,
        }))

    def update_state_by_path(
        self,
        project_path: str,
        status: Optional[str] = None,
        source: Optional[str] = None,
        ide: Optional[str] = None,
        progress: Optional[int] = None,
        current_stage: Optional[str] = None,
        estimated_duration: Optional[int] = None,
    ) -> Dict[str, Any]:
        return self._request("POST", "/api/task/update_state_by_path", _without_none({
            "project_path": project_path,
            "ide": ide,
            "status": status,
            "source": source,
            "progress": progress,
            "current_stage": current_stage,
            "estimated_duration": estimated_duration,
        }))

    def delete(self, task_id: str) -> Dict[str, Any]:
        return self._request("POST", "/api/task/delete", {"task_id": task_id})

    def reset(self, task_id: Optional[str] = None) -> Dict[str, Any]:
        """Remove one task, or all of them when *task_id* is omitted."""
        return self._request("POST", "/api/reset", _without_none({"task_id": task_id}))

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            response = self._client.request(method, path, json=payload)
        except httpx.HTTPError as e:
            logger.warning("Hub request failed", extra={"method": method, "path": path, "error": str(e)})
            raise HubClientError(f"Could not reach status hub at {self.base_url}", original_error=e)

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code >= 400:
            message = body.get("error") if isinstance(body, dict) else None
            raise HubClientError(
                message or f"Hub answered HTTP {response.status_code}",
                status_code=response.status_code,
            )

        logger.debug("Hub request completed", extra={"method": method, "path": path, "result": body})
        return body
