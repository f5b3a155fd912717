"""
BlockGenesis - Logging System
===============================
Structured logging (JSON or colored text) for codec and registry events.

Security Level: MEDIUM
Last Updated: 2026-10-12
Version: 1.0.0

Features:
- JSON structured logging
- Automatic file rotation
- Context enrichment via extra_data
- Performance tracking
"""

import logging
import logging.handlers
import json
import sys
from pathlib import Path
from typing import Optional, Dict, Any
from datetime import datetime, timezone
import traceback


ROOT_LOGGER_NAME = "blockgenesis"


# ============================================================================
# JSON FORMATTER
# ============================================================================

class JSONFormatter(logging.Formatter):
    """
    Formatter for JSON log lines.

    Output structure:
    {
        "timestamp": "2026-10-12T10:00:00.000000Z",
        "level": "INFO",
        "logger": "blockgenesis.genesis",
        "message": "Genesis registry initialized",
        "extra_data": {...},
        "exception": {...}
    }
    """

    def __init__(
        self,
        include_extra: bool = True,
        include_stack: bool = True
    ):
        super().__init__()
        self.include_extra = include_extra
        self.include_stack = include_stack

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": _utc(record.created).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.thread:
            log_data["thread_name"] = record.threadName

        if self.include_extra and hasattr(record, 'extra_data'):
            log_data["extra_data"] = record.extra_data

        if record.exc_info and self.include_stack:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info)
            }

        return json.dumps(log_data, default=str)


# ============================================================================
# TEXT FORMATTER (Human-Readable)
# ============================================================================

class ColoredTextFormatter(logging.Formatter):
    """
    Colored console formatter.

    Colors:
    - DEBUG: Gray
    - INFO: Green
    - WARNING: Yellow
    - ERROR: Red
    - CRITICAL: Bold Red
    """

    COLORS = {
        'DEBUG': '\033[90m',
        'INFO': '\033[92m',
        'WARNING': '\033[93m',
        'ERROR': '\033[91m',
        'CRITICAL': '\033[1;91m',
        'RESET': '\033[0m'
    }

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        if levelname in self.COLORS:
            levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"

        timestamp = _utc(record.created).strftime('%Y-%m-%d %H:%M:%S')

        message = f"{timestamp} [{levelname}] {record.name}: {record.getMessage()}"

        if hasattr(record, 'extra_data'):
            message += f" | {record.extra_data}"

        if record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"

        return message


def _utc(created: float) -> datetime:
    return datetime.fromtimestamp(created, tz=timezone.utc)


# ============================================================================
# LOGGER CLASS
# ============================================================================

class GenesisLogger:
    """
    Logger wrapper accepting structured extra_data.

    Example:
        >>> logger = get_logger("codec")
        >>> logger.set_context(network="mainnet")
        >>> logger.info("Block decoded", extra_data={"tx_count": 1})
    """

    def __init__(self, logger: logging.Logger):
        self._logger = logger
        self._context: Dict[str, Any] = {}

    @property
    def name(self) -> str:
        return self._logger.name

    def set_context(self, **kwargs):
        """Set context fields added to every record"""
        self._context.update(kwargs)

    def clear_context(self):
        self._context.clear()

    def is_enabled_for(self, level: int) -> bool:
        return self._logger.isEnabledFor(level)

    def _log(
        self,
        level: int,
        message: str,
        extra_data: Optional[Dict[str, Any]] = None,
        exc_info=None
    ):
        merged_extra = {**self._context}
        if extra_data:
            merged_extra.update(extra_data)

        self._logger.log(
            level,
            message,
            exc_info=exc_info,
            extra={'extra_data': merged_extra} if merged_extra else {}
        )

    def debug(self, message: str, extra_data: Optional[Dict] = None):
        self._log(logging.DEBUG, message, extra_data)

    def info(self, message: str, extra_data: Optional[Dict] = None):
        self._log(logging.INFO, message, extra_data)

    def warning(self, message: str, extra_data: Optional[Dict] = None):
        self._log(logging.WARNING, message, extra_data)

    def error(self, message: str, extra_data: Optional[Dict] = None, exc_info=None):
        self._log(logging.ERROR, message, extra_data, exc_info)

    def critical(self, message: str, extra_data: Optional[Dict] = None, exc_info=None):
        self._log(logging.CRITICAL, message, extra_data, exc_info)


# ============================================================================
# SETUP FUNCTION
# ============================================================================

def setup_logging(
    log_level: str = "INFO",
    log_to_file: bool = False,
    log_dir: Path = Path("./logs"),
    log_format: str = "text",
    log_rotation_mb: int = 10,
    log_retention_days: int = 7,
    enable_console: bool = True,
) -> GenesisLogger:
    """
    Configure the blockgenesis logger hierarchy.

    Args:
        log_level: Level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: Also write to a rotating file
        log_dir: Directory for log files
        log_format: File format (json, text)
        log_rotation_mb: MB before rotation
        log_retention_days: Number of rotated files kept
        enable_console: Log to stderr

    Returns:
        GenesisLogger: Root logger wrapper

    Example:
        >>> logger = setup_logging(log_level="DEBUG", log_format="json")
        >>> logger.info("Registry ready", extra_data={"networks": 5})
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(getattr(logging, log_level.upper()))

    root_logger.handlers.clear()

    # ========================================================================
    # FILE HANDLER (with rotation)
    # ========================================================================

    if log_to_file:
        log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_dir / "blockgenesis.log",
            maxBytes=log_rotation_mb * 1024 * 1024,
            backupCount=log_retention_days,
            encoding='utf-8'
        )

        if log_format == "json":
            file_handler.setFormatter(JSONFormatter())
        else:
            file_handler.setFormatter(
                logging.Formatter(
                    '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
                )
            )

        root_logger.addHandler(file_handler)

    # ========================================================================
    # CONSOLE HANDLER
    # ========================================================================

    if enable_console:
        # stderr keeps CLI stdout clean for --json output
        console_handler = logging.StreamHandler(sys.stderr)

        if log_format == "json":
            console_handler.setFormatter(JSONFormatter())
        else:
            console_handler.setFormatter(ColoredTextFormatter())

        root_logger.addHandler(console_handler)

    return GenesisLogger(root_logger)


# ============================================================================
# CATEGORY LOGGERS
# ============================================================================

def get_logger(category: str) -> GenesisLogger:
    """
    Get logger for a category.

    Args:
        category: Category (codec, genesis, cli, ...)

    Example:
        >>> get_logger("codec").debug("Decoding block")
    """
    return GenesisLogger(logging.getLogger(f"{ROOT_LOGGER_NAME}.{category}"))


# ============================================================================
# PERFORMANCE TRACKING
# ============================================================================

class PerformanceLogger:
    """
    Context manager timing an operation.

    Example:
        >>> logger = get_logger("genesis")
        >>> with PerformanceLogger(logger, "build_registry"):
        ...     build_registry()
        # Logs: "build_registry completed in 1.23ms"
    """

    def __init__(
        self,
        logger: GenesisLogger,
        operation: str,
        threshold_ms: Optional[int] = None
    ):
        self.logger = logger
        self.operation = operation
        self.threshold_ms = threshold_ms
        self.start_time = None
        self.elapsed_ms: Optional[float] = None

    def __enter__(self):
        import time
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        import time
        self.elapsed_ms = (time.perf_counter() - self.start_time) * 1000

        extra = {
            "operation": self.operation,
            "duration_ms": round(self.elapsed_ms, 2)
        }

        if self.threshold_ms and self.elapsed_ms > self.threshold_ms:
            self.logger.warning(
                f"{self.operation} took {self.elapsed_ms:.2f}ms "
                f"(threshold: {self.threshold_ms}ms)",
                extra_data=extra
            )
        else:
            self.logger.debug(
                f"{self.operation} completed in {self.elapsed_ms:.2f}ms",
                extra_data=extra
            )


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "setup_logging",
    "get_logger",
    "GenesisLogger",
    "PerformanceLogger",
    "JSONFormatter",
    "ColoredTextFormatter",
    "ROOT_LOGGER_NAME",
]
