"""
Structured logging for recencycache.

JSON or plain-text output, correlation IDs carried in a context variable,
and optional size-based log rotation. Library modules log through
``logging.getLogger(__name__)``; applications call :func:`initialize_logging`
(or a preset from :mod:`recencycache.utils.logging_config`) to install
handlers.
"""
import json
import logging
import logging.handlers
import sys
import threading
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

# Context variable for correlation ID
correlation_id: ContextVar[Optional[str]] = ContextVar('recencycache_correlation_id', default=None)

# LogRecord attributes that are not user-supplied extra fields
_RESERVED_RECORD_ATTRS = frozenset({
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'exc_info', 'exc_text',
    'stack_info', 'taskName', 'message', 'extra_fields', 'correlation_id',
})


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter with a consistent record structure.

    Each record becomes one JSON object with timestamp, level, logger,
    message and source location, plus the correlation ID, exception details
    and any extra fields attached to the record.
    """

    def __init__(self, include_correlation_id: bool = True):
        super().__init__()
        self.include_correlation_id = include_correlation_id

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if self.include_correlation_id:
            current_correlation_id = correlation_id.get() or getattr(record, 'correlation_id', None)
            if current_correlation_id:
                log_entry["correlation_id"] = current_correlation_id

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info)
            }

        if hasattr(record, 'extra_fields'):
            log_entry.update(record.extra_fields)

        for key, value in record.__dict__.items():
            if key.startswith('_') or key in _RESERVED_RECORD_ATTRS:
                continue
            if isinstance(value, (str, int, float, bool, list, dict, type(None))):
                log_entry[key] = value

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class CorrelationIdFilter(logging.Filter):
    """Copies the current correlation ID onto each log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        current_correlation_id = correlation_id.get()
        if current_correlation_id:
            record.correlation_id = current_correlation_id
        return True


class RecencyCacheLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that automatically adds correlation IDs and structured data.
    """

    def __init__(self, logger, correlation_id=None, extra_fields=None):
        super().__init__(logger, {})
        self.correlation_id = correlation_id
        self.extra_fields = extra_fields or {}

    def process(self, msg, kwargs):
        if self.correlation_id:
            kwargs.setdefault('extra', {})['correlation_id'] = self.correlation_id

        if self.extra_fields:
            kwargs.setdefault('extra', {})['extra_fields'] = self.extra_fields

        return msg, kwargs

    def bind(self, **kwargs):
        """Create a new adapter with additional context."""
        new_extra_fields = {**self.extra_fields, **kwargs}
        return RecencyCacheLoggerAdapter(self.logger, self.correlation_id, new_extra_fields)


class MetricsLogger:
    """
    Logger for cache hit, miss and eviction events.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def _emit(self, level: int, message: str, event_type: str, **fields):
        if self.logger.isEnabledFor(level):
            self.logger.log(
                level,
                message,
                extra={'extra_fields': {'event_type': event_type, **fields}}
            )

    def log_cache_hit(self, cache_name: str, key: Any, **kwargs):
        self._emit(logging.DEBUG, "Cache hit", 'cache_hit', cache_name=cache_name, cache_key=repr(key), **kwargs)

    def log_cache_miss(self, cache_name: str, key: Any, **kwargs):
        self._emit(logging.DEBUG, "Cache miss", 'cache_miss', cache_name=cache_name, cache_key=repr(key), **kwargs)

    def log_eviction(self, cache_name: str, key: Any, **kwargs):
        """
        Log an entry evicted at capacity.

        Args:
            cache_name: Name of the cache that evicted the entry
            key: Evicted key
            **kwargs: Additional metadata
        """
        self._emit(logging.DEBUG, "Cache eviction", 'cache_eviction', cache_name=cache_name, cache_key=repr(key), **kwargs)


class LogManager:
    """
    Thread-safe owner of the root logger configuration.

    Installs a console handler and, when ``log_file`` is set, a rotating
    file handler, both sharing one formatter.
    """

    def __init__(self,
                 log_level: str = "INFO",
                 log_format: str = "json",
                 log_file: Optional[str] = None,
                 max_bytes: int = 10 * 1024 * 1024,  # 10MB
                 backup_count: int = 5,
                 include_correlation_id: bool = True):
        """
        Initialize the log manager.

        Args:
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_format: Log format ('json' or 'text')
            log_file: Path to log file (optional)
            max_bytes: Maximum size of log file before rotation
            backup_count: Number of backup files to keep
            include_correlation_id: Whether to include correlation IDs
        """
        level = getattr(logging, log_level.upper(), None)
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {log_level}")
        if log_format not in ("json", "text"):
            raise ValueError(f"Unknown log format: {log_format}")

        self.log_level = level
        self.log_format = log_format
        self.log_file = log_file
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.include_correlation_id = include_correlation_id

        self._lock = threading.RLock()
        self._handlers: list = []
        self._loggers: Dict[str, logging.Logger] = {}

        self._configure_root_logger()

        self.logger = self.get_logger("recencycache")
        self.metrics = MetricsLogger(self.logger)

    def _make_formatter(self) -> logging.Formatter:
        if self.log_format == "json":
            return StructuredFormatter(self.include_correlation_id)
        return logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    def _configure_root_logger(self):
        root_logger = logging.getLogger()
        root_logger.setLevel(self.log_level)

        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        formatter = self._make_formatter()

        console_handler = logging.StreamHandler(sys.stdout)
        self._install_handler(root_logger, console_handler, formatter)

        if self.log_file:
            log_path = Path(self.log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                self.log_file,
                maxBytes=self.max_bytes,
                backupCount=self.backup_count,
                encoding="utf-8",
            )
            self._install_handler(root_logger, file_handler, formatter)

    def _install_handler(self, root_logger: logging.Logger, handler: logging.Handler, formatter: logging.Formatter):
        handler.setLevel(self.log_level)
        handler.setFormatter(formatter)
        if self.include_correlation_id:
            handler.addFilter(CorrelationIdFilter())
        root_logger.addHandler(handler)
        self._handlers.append(handler)

    def get_logger(self, name: str) -> logging.Logger:
        with self._lock:
            if name not in self._loggers:
                logger = logging.getLogger(name)
                logger.setLevel(self.log_level)
                self._loggers[name] = logger
            return self._loggers[name]

    def get_adapter(self, name: str, correlation_id: Optional[str] = None, **extra_fields) -> RecencyCacheLoggerAdapter:
        return RecencyCacheLoggerAdapter(self.get_logger(name), correlation_id, extra_fields)

    def shutdown(self):
        """Detach and close every handler this manager installed."""
        root_logger = logging.getLogger()
        with self._lock:
            for handler in self._handlers:
                root_logger.removeHandler(handler)
                handler.close()
            self._handlers.clear()
            for logger in self._loggers.values():
                logger.setLevel(logging.NOTSET)
            self._loggers.clear()


# Global log manager instance
_log_manager: Optional[LogManager] = None
_log_manager_lock = threading.RLock()


def initialize_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    include_correlation_id: bool = True,
) -> LogManager:
    """
    Initialize the global logging system.

    Returns the existing manager unchanged if logging is already
    initialized; call :func:`shutdown_logging` first to reconfigure.

    Returns:
        Configured log manager instance
    """
    global _log_manager

    with _log_manager_lock:
        if _log_manager is None:
            _log_manager = LogManager(
                log_level=log_level,
                log_format=log_format,
                log_file=log_file,
                max_bytes=max_bytes,
                backup_count=backup_count,
                include_correlation_id=include_correlation_id,
            )

    return _log_manager


def shutdown_logging():
    """Remove the handlers installed by :func:`initialize_logging`."""
    global _log_manager

    with _log_manager_lock:
        if _log_manager is not None:
            _log_manager.shutdown()
            _log_manager = None


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the specified name, initializing logging if needed.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    with _log_manager_lock:
        if _log_manager is None:
            initialize_logging()
        return _log_manager.get_logger(name)


def get_adapter(name: str, correlation_id: Optional[str] = None, **extra_fields) -> RecencyCacheLoggerAdapter:
    with _log_manager_lock:
        if _log_manager is None:
            initialize_logging()
        return _log_manager.get_adapter(name, correlation_id, **extra_fields)


def get_metrics_logger() -> MetricsLogger:
    with _log_manager_lock:
        if _log_manager is None:
            initialize_logging()
        return _log_manager.metrics


def set_correlation_id(correlation_id_value: str):
    correlation_id.set(correlation_id_value)


def get_correlation_id() -> Optional[str]:
    return correlation_id.get()


def clear_correlation_id():
    correlation_id.set(None)


class CorrelationIdContext:
    """
    Context manager that sets a correlation ID and restores the previous one on exit.
    """

    def __init__(self, correlation_id_value: Optional[str] = None):
        self.correlation_id_value = correlation_id_value or str(uuid.uuid4())
        self._token = None

    def __enter__(self):
        self._token = correlation_id.set(self.correlation_id_value)
        return self.correlation_id_value

    def __exit__(self, exc_type, exc_val, exc_tb):
        correlation_id.reset(self._token)


def with_correlation_id(correlation_id_value: Optional[str] = None) -> CorrelationIdContext:
    """
    Create a correlation ID context.

    Args:
        correlation_id_value: Correlation ID value (auto-generated if None)
    """
    return CorrelationIdContext(correlation_id_value)
