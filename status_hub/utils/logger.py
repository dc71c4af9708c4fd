"""
Logger module - Logging configuration and utilities

Every module obtains its logger through get_logger(__name__). The first call
initializes ComprehensiveLogger from config.properties / environment:

    HUB_LOG_FOLDER               ./logs
    HUB_LOG_LEVEL                INFO
    HUB_ENABLE_CONSOLE_LOGGING   true
    HUB_ENABLE_FILE_LOGGING      true
    HUB_LOG_MAX_BYTES            10485760
    HUB_LOG_BACKUP_COUNT         5
"""

import logging

from .comprehensive_logger import ComprehensiveLogger, HubLogger

# Flag to track if ComprehensiveLogger has been initialized
_comprehensive_logger_initialized = False


def _ensure_comprehensive_logger_initialized():
    """
    Initialize ComprehensiveLogger from configuration on first use.
    This is called automatically by get_logger().
    """
    global _comprehensive_logger_initialized

    if _comprehensive_logger_initialized:
        return

    _comprehensive_logger_initialized = True

    from status_hub.config.config_properties import ConfigProperties

    ConfigProperties.load_to_env()
    try:
        ComprehensiveLogger.initialize(**ConfigProperties.get_logging_config())
    except (OSError, ValueError) as e:
        # Unwritable log folder or bad level: keep console output going
        ComprehensiveLogger.initialize(log_level="INFO", enable_console=True, enable_file=False)
        logging.getLogger(__name__).warning(
            f"Failed to initialize file logging: {e}. Using console only."
        )


def get_logger(name: str) -> HubLogger:
    """
    Get or create a logger with standard formatting and configured handlers.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured HubLogger instance
    """
    _ensure_comprehensive_logger_initialized()
    return ComprehensiveLogger.get_logger(name)
