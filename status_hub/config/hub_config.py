"""
Hub configuration - Settings for the status aggregation server
"""

from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any
import os

from .config_properties import ConfigProperties
from status_hub.utils.exceptions import ConfigurationError

DEFAULT_HTTP_HOST = "127.0.0.1"
DEFAULT_HTTP_PORT = 31415

# Editor plugins heartbeat every 10s; the timeout must outlast one missed beat.
DEFAULT_HEARTBEAT_TIMEOUT_MS = 15000


@dataclass
class HubConfig:
    """
    Configuration for the hub server and its task registry.

    Attributes:
        http_host: Interface the HTTP server binds to (loopback by default)
        http_port: TCP port of the HTTP server
        block_plugin_status: Drop status writes coming from the plugin channel
        heartbeat_timeout_ms: Age after which a heartbeating task is evicted
    """

    http_host: str = DEFAULT_HTTP_HOST
    http_port: int = DEFAULT_HTTP_PORT
    block_plugin_status: bool = True
    heartbeat_timeout_ms: int = DEFAULT_HEARTBEAT_TIMEOUT_MS

    def __post_init__(self):
        """Validate configuration."""
        if not self.http_host or not self.http_host.strip():
            raise ValueError("http_host must not be empty")

        if not 1 <= self.http_port <= 65535:
            raise ValueError(f"http_port must be between 1 and 65535, got {self.http_port}")

        if self.heartbeat_timeout_ms <= 0:
            raise ValueError(
                f"heartbeat_timeout_ms must be positive, got {self.heartbeat_timeout_ms}"
            )

    @classmethod
    def from_properties(cls, path: Optional[str] = None) -> "HubConfig":
        """
        Build configuration from config.properties, with environment overrides.

        File keys live under the ``hub.`` prefix (``hub.http_port``); the
        matching environment variables are ``HUB_HTTP_PORT`` etc.

        Args:
            path: Explicit config.properties path; auto-discovered if omitted.

        Raises:
            ConfigurationError: A numeric or boolean setting cannot be parsed
            ValueError: A setting is out of range
        """
        if path:
            ConfigProperties.reload(path)
        section = ConfigProperties.get_section("hub")

        def _value(name: str, default: str) -> str:
            env_value = os.getenv(f"HUB_{name.upper()}")
            if env_value is not None and env_value.strip() != "":
                return env_value.strip()
            return section.get(name, default)

        def _int(name: str, default: int) -> int:
            raw = _value(name, str(default))
            try:
                return int(raw)
            except ValueError:
                raise ConfigurationError(
                    name, "must be an integer", expected_value="integer", actual_value=raw
                )

        def _bool(name: str, default: bool) -> bool:
            raw = _value(name, str(default).lower())
            if raw.lower() in ("true", "1", "yes", "on"):
                return True
            if raw.lower() in ("false", "0", "no", "off"):
                return False
            raise ConfigurationError(
                name, "must be a boolean", expected_value="true|false", actual_value=raw
            )

        return cls(
            http_host=_value("http_host", DEFAULT_HTTP_HOST),
            http_port=_int("http_port", DEFAULT_HTTP_PORT),
            block_plugin_status=_bool("block_plugin_status", True),
            heartbeat_timeout_ms=_int("heartbeat_timeout_ms", DEFAULT_HEARTBEAT_TIMEOUT_MS),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)
