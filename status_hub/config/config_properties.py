"""
Configuration Properties - single source of truth for all hub configuration.

Reads config.properties and provides access to every setting. Also exposes
env-var-style helpers (get_env, get_bool_env, ...) so settings can be
overridden per process without editing the file.
"""

import os
from pathlib import Path
from typing import Optional, Dict, Any


class ConfigProperties:
    """
    Unified configuration loader and accessor.

    Reads config.properties once at startup, injects all plain-key values
    into os.environ, and exposes both file-based and env-var accessors.

    Quick usage::

        # File-based (dot-notation and plain keys from config.properties)
        ConfigProperties.get("hub.http_host")
        ConfigProperties.get_int("hub.http_port", 31415)

        # Env-var accessors (reads os.environ, respects OS overrides)
        ConfigProperties.get_env("HUB_LOG_LEVEL")
        ConfigProperties.get_logging_config()
    """

    _instance: Optional["ConfigProperties"] = None
    _properties: Dict[str, str] = {}
    _loaded: bool = False
    _source: Optional[Path] = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, path: Optional[str] = None) -> "ConfigProperties":
        """
        Parse config.properties and return the singleton instance.

        Args:
            path: Explicit path to config.properties; auto-discovered if omitted.
        """
        if cls._instance and cls._loaded and path is None:
            return cls._instance

        cls._instance = cls()
        cls._properties = {}

        config_path = Path(path) if path else cls._find_config_file()

        if config_path and config_path.exists():
            cls._parse_file(config_path)
            cls._source = config_path
        else:
            cls._source = None

        cls._loaded = True
        return cls._instance

    @classmethod
    def load_to_env(cls) -> None:
        """
        Populate os.environ from config.properties (plain keys only).

        - OS/container env vars already set are **never** overwritten.
        - Dot-notation keys (e.g. ``hub.http_port``) are skipped; they are
          not valid env-var identifiers and must be accessed via :meth:`get`.
        """
        if not cls._loaded:
            cls.load()

        for key, value in cls._properties.items():
            if "." in key:
                continue
            if key not in os.environ:
                os.environ[key] = value

    @classmethod
    def reload(cls, path: Optional[str] = None) -> "ConfigProperties":
        """Force a fresh re-parse of config.properties."""
        cls._loaded = False
        cls._properties = {}
        cls._instance = None
        return cls.load(path)

    @classmethod
    def source_path(cls) -> Optional[Path]:
        """Path of the file the current properties were read from, if any."""
        return cls._source

    # ------------------------------------------------------------------
    # File-based accessors  (read from the parsed properties dict)
    # ------------------------------------------------------------------

    @classmethod
    def get(cls, key: str, default: Optional[str] = None) -> Optional[str]:
        """Return the value for *key* from config.properties (or *default*)."""
        if not cls._loaded:
            cls.load()
        return cls._properties.get(key, default)

    @classmethod
    def get_bool(cls, key: str, default: bool = False) -> bool:
        """Return a boolean value from config.properties."""
        val = cls.get(key)
        if val is None:
            return default
        return val.lower() in ("true", "1", "yes", "on")

    @classmethod
    def get_int(cls, key: str, default: int = 0) -> int:
        """Return an integer value from config.properties."""
        val = cls.get(key)
        if val is None:
            return default
        try:
            return int(val)
        except ValueError:
            return default

    @classmethod
    def get_section(cls, prefix: str) -> Dict[str, str]:
        """Return all keys/values under dot-notation *prefix* as a flat dict."""
        if not cls._loaded:
            cls.load()
        prefix_dot = prefix if prefix.endswith(".") else prefix + "."
        return {
            key[len(prefix_dot):]: val
            for key, val in cls._properties.items()
            if key.startswith(prefix_dot)
        }

    # ------------------------------------------------------------------
    # Env-var-style accessors  (reads os.environ, respects OS overrides)
    # ------------------------------------------------------------------

    @staticmethod
    def get_env(key: str, default: Optional[str] = None) -> Optional[str]:
        """Get an environment variable (same as ``os.getenv``)."""
        return os.getenv(key, default)

    @staticmethod
    def get_bool_env(key: str, default: bool = False) -> bool:
        """Get a boolean from an environment variable."""
        value = os.getenv(key, str(default)).lower()
        return value in ("true", "1", "yes", "on")

    @staticmethod
    def get_int_env(key: str, default: int = 0) -> int:
        """Get an integer from an environment variable."""
        try:
            return int(os.getenv(key, str(default)))
        except ValueError:
            return default

    # ------------------------------------------------------------------
    # Logging configuration helper
    # ------------------------------------------------------------------

    @staticmethod
    def get_logging_config() -> Dict[str, Any]:
        """
        Return a ``ComprehensiveLogger.initialize()``-compatible dict
        built from the current environment (populated by ``load_to_env``).
        """
        return {
            "log_folder":     os.getenv("HUB_LOG_FOLDER", "./logs"),
            "log_level":      os.getenv("HUB_LOG_LEVEL", "INFO"),
            "enable_console": ConfigProperties.get_bool_env("HUB_ENABLE_CONSOLE_LOGGING", True),
            "enable_file":    ConfigProperties.get_bool_env("HUB_ENABLE_FILE_LOGGING", True),
            "max_bytes":      ConfigProperties.get_int_env("HUB_LOG_MAX_BYTES", 10485760),
            "backup_count":   ConfigProperties.get_int_env("HUB_LOG_BACKUP_COUNT", 5),
        }

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @classmethod
    def _find_config_file(cls) -> Optional[Path]:
        """Search for config.properties starting from the project root."""
        fixed = Path(__file__).parent.parent.parent / "config.properties"
        if fixed.exists():
            return fixed

        current = Path.cwd()
        for _ in range(4):
            candidate = current / "config.properties"
            if candidate.exists():
                return candidate
            if current.parent == current:
                break
            current = current.parent

        return None

    @classmethod
    def _parse_file(cls, path: Path) -> None:
        """Parse a Java-style .properties file into ``_properties``."""
        with open(path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#") or line.startswith("!"):
                    continue
                for sep in ("=", ":"):
                    if sep in line:
                        key, value = line.split(sep, 1)
                        cls._properties[key.strip()] = value.strip()
                        break
