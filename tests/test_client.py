"""
Tests for the HTTP reporter client and the CLI built on it.
"""

import json
import os

import httpx
import pytest

from status_hub import cli
from status_hub.client import StatusHubClient
from status_hub.utils.exceptions import HubClientError


class RecordingTransport:
    """Collects requests and answers each with a canned response."""

    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self.body = body if body is not None else {"status": "ok"}
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last_json(self):
        return json.loads(self.requests[-1].content)


def _client(handler):
    return StatusHubClient(base_url="http://hub.test", transport=httpx.MockTransport(handler))


class TestStatusHubClient:
    """Test StatusHubClient request building and error mapping."""

    def test_default_base_url(self):
        with StatusHubClient() as hub:
            assert hub.base_url == "http://127.0.0.1:31415"

    def test_update_state_omits_unset_fields(self):
        transport = RecordingTransport()
        with _client(transport) as hub:
            result = hub.update_state("t1", status="running", source="hook")

        assert result == {"status": "ok"}
        request = transport.requests[-1]
        assert request.method == "POST"
        assert request.url.path == "/api/task/update_state"
        assert transport.last_json == {"task_id": "t1", "status": "running", "source": "hook"}

    def test_report_payload(self):
        transport = RecordingTransport()
        with _client(transport) as hub:
            hub.report("t1", "cursor - proj", "cursor", "proj", is_focused=True, project_path="/work/proj")

        assert transport.last_json == {
            "task_id": "t1",
            "name": "cursor - proj",
            "ide": "cursor",
            "window_title": "proj",
            "is_focused": True,
            "project_path": "/work/proj",
        }

    def test_reset_without_id_sends_empty_object(self):
        transport = RecordingTransport()
        with _client(transport) as hub:
            hub.reset()

        assert transport.requests[-1].url.path == "/api/reset"
        assert transport.last_json == {}

    def test_ignored_is_returned_not_raised(self):
        transport = RecordingTransport(body={"status": "ignored", "reason": "lower_priority_source"})
        with _client(transport) as hub:
            result = hub.update_state("t1", status="completed")

        assert result["reason"] == "lower_priority_source"

    def test_not_found_raises(self):
        transport = RecordingTransport(status_code=404, body={"status": "error", "error": "Task not found"})
        with _client(transport) as hub:
            with pytest.raises(HubClientError) as exc_info:
                hub.delete("ghost")

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Task not found"

    def test_connection_error_raises(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        with _client(refuse) as hub:
            with pytest.raises(HubClientError) as exc_info:
                hub.status()

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.original_error, httpx.ConnectError)


class TestCli:
    """Test the report_status command line."""

    def test_status(self, capsys):
        transport = RecordingTransport(body={"tasks": [], "taskCount": 0, "currentTask": None})

        code = cli.main(["status"], client=_client(transport))

        assert code == cli.EXIT_OK
        assert transport.requests[-1].method == "GET"
        assert json.loads(capsys.readouterr().out)["taskCount"] == 0

    def test_update_by_path_defaults(self):
        transport = RecordingTransport()

        cli.main(["update-by-path", "--status", "running"], client=_client(transport))

        assert transport.requests[-1].url.path == "/api/task/update_state_by_path"
        assert transport.last_json == {
            "project_path": os.getcwd(),
            "status": "running",
            "source": "hook",
        }

    def test_update_with_progress(self):
        transport = RecordingTransport()

        cli.main(
            ["update", "--task-id", "t1", "--progress", "40", "--stage", "Testing", "--source", "mcp"],
            client=_client(transport),
        )

        assert transport.last_json == {
            "task_id": "t1",
            "source": "mcp",
            "progress": 40,
            "current_stage": "Testing",
        }

    def test_ignored_exit_code(self):
        transport = RecordingTransport(body={"status": "ignored", "reason": "plugin_status_blocked"})

        code = cli.main(["update", "--task-id", "t1", "--status", "running"], client=_client(transport))

        assert code == cli.EXIT_IGNORED

    def test_error_exit_code(self, capsys):
        transport = RecordingTransport(status_code=404, body={"status": "error", "error": "Task not found"})

        code = cli.main(["delete", "--task-id", "ghost"], client=_client(transport))

        assert code == cli.EXIT_ERROR
        assert "Task not found" in capsys.readouterr().err

    def test_rejects_unknown_status(self):
        with pytest.raises(SystemExit):
            cli.main(["update", "--task-id", "t1", "--status", "done"], client=_client(RecordingTransport()))
