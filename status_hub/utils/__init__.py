"""
Utilities module - Logging, clock and exception helpers
"""

from .logger import get_logger
from .comprehensive_logger import ComprehensiveLogger, HubLogger
from .clock import now_millis
from .exceptions import (
    StatusHubError,
    ConfigurationError,
    ValidationError,
    InvalidEnumValueError,
    InvalidRequestError,
    TaskNotFoundError,
    JsonRpcError,
    HubClientError,
)

__all__ = [
    'get_logger',
    'ComprehensiveLogger',
    'HubLogger',
    'now_millis',
    'StatusHubError',
    'ConfigurationError',
    'ValidationError',
    'InvalidEnumValueError',
    'InvalidRequestError',
    'TaskNotFoundError',
    'JsonRpcError',
    'HubClientError',
]
