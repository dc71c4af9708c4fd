"""
Comprehensive Logging System with File and Console Output

Features:
- Configurable log folder (via config.properties / environment)
- Console and rotating file logging
- Structured context appended to messages as JSON
- Unicode support on Windows
"""

import logging
import logging.handlers
import sys
import os
import codecs
from pathlib import Path
from typing import Optional, Dict, Any
import json
import traceback

# Fix Unicode support on Windows BEFORE any logging is configured
if sys.platform == 'win32':
    try:
        if hasattr(sys.stdout, 'encoding') and sys.stdout.encoding and sys.stdout.encoding.lower() != 'utf-8':
            sys.stdout = codecs.getwriter('utf-8')(sys.stdout.buffer, 'backslashreplace')
            sys.stderr = codecs.getwriter('utf-8')(sys.stderr.buffer, 'backslashreplace')
    except (AttributeError, TypeError):
        pass


class SafeStreamHandler(logging.StreamHandler):
    """
    StreamHandler that safely handles Unicode on Windows.
    Uses 'replace' error handling to avoid UnicodeEncodeError.
    """
    def emit(self, record):
        try:
            msg = self.format(record)
            stream = self.stream
            if hasattr(stream, 'buffer'):
                stream.buffer.write((msg + self.terminator).encode('utf-8', errors='replace'))
                stream.buffer.flush()
            else:
                try:
                    stream.write(msg + self.terminator)
                except UnicodeEncodeError:
                    safe_msg = msg.encode(stream.encoding or 'utf-8', errors='replace').decode(stream.encoding or 'utf-8')
                    stream.write(safe_msg + self.terminator)
                self.flush()
        except Exception:
            self.handleError(record)


class ComprehensiveLogger:
    """
    Centralized logging system with file and console support.

    Usage:
        ComprehensiveLogger.initialize(log_folder="./logs", log_level="DEBUG")
        logger = ComprehensiveLogger.get_logger("status_hub.core.registry")
        logger.info("Task registered", extra={"task_id": "cursor_proj"})
    """

    _loggers: Dict[str, "HubLogger"] = {}
    _log_folder: Optional[str] = None
    _config: Dict[str, Any] = {}

    @classmethod
    def initialize(
        cls,
        log_folder: Optional[str] = None,
        log_level: str = "INFO",
        enable_console: bool = True,
        enable_file: bool = True,
        max_bytes: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5
    ) -> None:
        """
        Initialize the logging system.

        Args:
            log_folder: Folder for log files (default: ./logs)
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            enable_console: Enable console logging
            enable_file: Enable file logging
            max_bytes: Max file size before rotation (default: 10MB)
            backup_count: Number of backup files to keep
        """
        cls._log_folder = log_folder or "./logs"
        cls._config = {
            "log_level": log_level.upper(),
            "enable_console": enable_console,
            "enable_file": enable_file,
            "max_bytes": max_bytes,
            "backup_count": backup_count,
        }

        if enable_file:
            Path(cls._log_folder).mkdir(parents=True, exist_ok=True)

        # Re-apply handlers on loggers created before (re)initialization
        for logger in cls._loggers.values():
            logger.configure(cls._log_folder, cls._config)

    @classmethod
    def get_logger(cls, name: str) -> "HubLogger":
        """Get or create a logger instance."""
        if name not in cls._loggers:
            cls._loggers[name] = HubLogger(name, cls._log_folder, cls._config)
        return cls._loggers[name]

    @classmethod
    def flush(cls):
        """Flush all loggers."""
        for logger in cls._loggers.values():
            logger.flush()


class HubLogger:
    """
    Individual logger instance with file and console handlers.
    """

    def __init__(
        self,
        name: str,
        log_folder: Optional[str],
        config: Dict[str, Any]
    ):
        self.name = name
        self.logger = logging.getLogger(name)
        self.configure(log_folder, config)

    def configure(self, log_folder: Optional[str], config: Dict[str, Any]) -> None:
        """(Re)build handlers from *config*."""
        self.log_folder = log_folder or "./logs"
        self.config = config
        self.logger.setLevel(config.get("log_level", "INFO"))

        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        if config.get("enable_console"):
            self._add_console_handler()

        if config.get("enable_file"):
            self._add_file_handler()

    def _add_console_handler(self) -> None:
        """Add console handler with Unicode-safe output."""
        handler = SafeStreamHandler(sys.stdout)
        handler.setLevel(self.config.get("log_level", "INFO"))

        formatter = logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        self.logger.addHandler(handler)

    def _add_file_handler(self) -> None:
        """Add rotating file handler with UTF-8 encoding."""
        Path(self.log_folder).mkdir(parents=True, exist_ok=True)

        log_file = os.path.join(self.log_folder, f"{self.name}.log")

        try:
            handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=self.config.get("max_bytes", 10 * 1024 * 1024),
                backupCount=self.config.get("backup_count", 5),
                encoding='utf-8'
            )
            handler.setLevel(self.config.get("log_level", "INFO"))

            formatter = logging.Formatter(
                '%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)
        except OSError as e:
            self.logger.error(f"Failed to add file handler: {e}")

    def debug(self, message: str, extra: Optional[Dict] = None):
        """Log debug message."""
        self._log(logging.DEBUG, message, extra)

    def info(self, message: str, extra: Optional[Dict] = None):
        """Log info message."""
        self._log(logging.INFO, message, extra)

    def warning(self, message: str, extra: Optional[Dict] = None):
        """Log warning message."""
        self._log(logging.WARNING, message, extra)

    def error(self, message: str, extra: Optional[Dict] = None):
        """Log error message."""
        self._log(logging.ERROR, message, extra)

    def critical(self, message: str, extra: Optional[Dict] = None):
        """Log critical message."""
        self._log(logging.CRITICAL, message, extra)

    def log(self, level: str, message: str, extra: Optional[Dict] = None, stacklevel: int = 1) -> None:
        """
        Log at a level given by name, e.g. ``"info"``.

        Args:
            level: Level name, case-insensitive
            message: Log message
            extra: Context appended as JSON
            stacklevel: As for :meth:`logging.Logger.log`; 2 attributes the
                record to the caller of the function calling this one
        """
        self._log(getattr(logging, level.upper()), message, extra, stacklevel=2 + stacklevel)

    def _log(self, level: int, message: str, extra: Optional[Dict] = None, stacklevel: int = 3) -> None:
        """Log *message*, appending *extra* context as JSON."""
        if not self.logger.isEnabledFor(level):
            return
        if extra:
            message = f"{message} | {json.dumps(extra, default=str)}"
        # stacklevel 3 points funcName/lineno at the caller of info()/debug()
        self.logger.log(level, message, stacklevel=stacklevel)

    def log_exception(self, message: str, exc: Optional[BaseException] = None) -> None:
        """
        Log exception with full traceback.

        Args:
            message: Error message
            exc: Exception object (uses current exception if None)
        """
        if exc:
            tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
        else:
            tb = traceback.format_exc().splitlines(keepends=True)

        self.logger.error(f"{message}\n{''.join(tb)}")

    def flush(self) -> None:
        """Flush all handlers."""
        for handler in self.logger.handlers:
            handler.flush()
