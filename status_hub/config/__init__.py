"""
Configuration module - Settings and configuration management
"""

from .config_properties import ConfigProperties
from .hub_config import (
    HubConfig,
    DEFAULT_HTTP_HOST,
    DEFAULT_HTTP_PORT,
    DEFAULT_HEARTBEAT_TIMEOUT_MS,
)

__all__ = [
    'ConfigProperties',
    'HubConfig',
    'DEFAULT_HTTP_HOST',
    'DEFAULT_HTTP_PORT',
    'DEFAULT_HEARTBEAT_TIMEOUT_MS',
]
