"""
Structured JSON Logging Module.

Every report run logs one JSON object per line.  Services pass report
context (period, month key, row counts) through the ``extra`` kwarg; it is
emitted under the ``extra`` key with JSON-native values so the web layer's
log shipper can filter on it.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, TextIO, Union

JsonScalar = Union[str, int, float, bool, None]

# Attributes every LogRecord carries; anything else came from ``extra``.
_RECORD_ATTRS: frozenset[str] = frozenset(
    logging.LogRecord(
        name="", level=0, pathname="", lineno=0, msg="", args=(), exc_info=None
    ).__dict__.keys()
) | {"message", "asctime"}


def _jsonable(value: object) -> JsonScalar:
    # Decimals, datetimes and enums are written as text.
    if value is None or isinstance(value, (bool, int, float)):
        return value
    return str(value)


class JSONFormatter(logging.Formatter):
    """Render a log record as one JSON line.

    Keys: ``timestamp`` (UTC ISO-8601), ``level``, ``logger_name``,
    ``message``, then ``extra`` and ``exception`` when present.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger_name": record.name,
            "message": record.getMessage(),
        }

        context: dict[str, JsonScalar] = {
            key: _jsonable(value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS
        }
        if context:
            entry["extra"] = context

        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            entry["exception"] = record.exc_text

        return json.dumps(entry, ensure_ascii=False)


def _file_handler(
    log_file: str,
    max_bytes: int,
    backup_count: int,
) -> RotatingFileHandler:
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        filename=str(log_path),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )


class StructuredLogger:
    """Injectable wrapper around a JSON-configured ``logging.Logger``.

    Level, log file and rotation default to ``AppConfig``.  Handlers are
    attached once per logger name, so constructing the same name twice
    shares one set of handlers.

    Usage::

        log = StructuredLogger(name="minersales.performance")
        log.info("Performance list built", extra={"period": "month", "salespeople": 4})
    """

    def __init__(
        self,
        name: str = "minersales",
        level: Optional[int] = None,
        stream: Union[TextIO, None] = None,
        log_file: Optional[str] = None,
        max_bytes: Optional[int] = None,
        backup_count: Optional[int] = None,
    ) -> None:
        # Lazy import to avoid circular dependency at module level
        from minersales.config import get_config
        cfg = get_config()

        resolved_level: int = level if level is not None else cfg.log_level
        self._logger: logging.Logger = logging.getLogger(name)
        self._logger.setLevel(resolved_level)

        if self._logger.handlers:
            return

        formatter = JSONFormatter()
        console = logging.StreamHandler(stream or sys.stdout)
        console.setLevel(resolved_level)
        console.setFormatter(formatter)
        self._logger.addHandler(console)

        resolved_log_file: str = log_file or cfg.LOG_FILE
        try:
            rotating = _file_handler(
                resolved_log_file,
                max_bytes if max_bytes is not None else cfg.LOG_MAX_BYTES,
                backup_count if backup_count is not None else cfg.LOG_BACKUP_COUNT,
            )
        except OSError as exc:
            self._logger.warning(
                "Could not open log file '%s': %s. Logging to console only.",
                resolved_log_file,
                exc,
            )
            return
        rotating.setLevel(resolved_level)
        rotating.setFormatter(formatter)
        self._logger.addHandler(rotating)

    @property
    def logger(self) -> logging.Logger:
        """The underlying ``logging.Logger``."""
        return self._logger

    def debug(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.error(msg, *args, **kwargs)


def get_logger(name: str = "minersales") -> StructuredLogger:
    """``StructuredLogger`` for *name* with configured defaults."""
    return StructuredLogger(name=name)
