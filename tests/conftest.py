"""
Shared fixtures for the status hub test suite.
"""

import os

# Keep test runs from writing ./logs; must happen before status_hub is imported
os.environ.setdefault("HUB_ENABLE_FILE_LOGGING", "false")
os.environ.setdefault("HUB_LOG_LEVEL", "WARNING")

import pytest

from status_hub.core import TaskRegistry


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry(clock):
    """Registry with plugin blocking off and a controllable clock."""
    return TaskRegistry(heartbeat_timeout_ms=15000, block_plugin_status=False, clock=clock)


@pytest.fixture
def hub_env(monkeypatch):
    """Remove HUB_* settings overrides inherited from the shell."""
    for name in ("HUB_HTTP_HOST", "HUB_HTTP_PORT", "HUB_BLOCK_PLUGIN_STATUS", "HUB_HEARTBEAT_TIMEOUT_MS"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
