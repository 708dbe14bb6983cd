# backend/app/core/observability.py
"""Structured logging facade.

Every record carries a ``category`` (e.g. ``"api"``, ``"fetcher"``) and an
optional ``data`` dict. Output is ``key=value`` text by default, or one JSON
object per line when ``LOG_JSON`` is enabled.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .config import settings

LOGGER_NAME = "ssl_grader"
SECURITY = 35  # between WARNING and ERROR

logging.addLevelName(SECURITY, "SECURITY")


class JsonFormatter(logging.Formatter):
    """Render records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "category": getattr(record, "category", "app"),
            "message": record.getMessage(),
        }
        data = getattr(record, "data", None)
        if data:
            payload["data"] = data
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class TextFormatter(logging.Formatter):
    """Render records as ``LEVEL [category] message key=value ...``."""

    def format(self, record: logging.LogRecord) -> str:
        category = getattr(record, "category", "app")
        line = f"{record.levelname:<8} [{category}] {record.getMessage()}"
        data = getattr(record, "data", None)
        if data:
            line += " " + " ".join(f"{k}={v}" for k, v in data.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class Logs:
    """Thin wrapper that attaches category and data to log records."""

    def __init__(self, name: str = LOGGER_NAME) -> None:
        self._logger = logging.getLogger(name)

    def configure(self, level: str = "INFO", json_output: bool = False) -> None:
        """Install a single stderr handler with the chosen formatter."""
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JsonFormatter() if json_output else TextFormatter())
        self._logger.handlers = [handler]
        self._logger.setLevel(level.upper())
        self._logger.propagate = False

    def _log(
        self,
        level: int,
        message: str,
        category: str,
        data: Optional[Dict[str, Any]] = None,
        exception: Optional[BaseException] = None,
    ) -> None:
        exc_info = None
        if exception is not None:
            exc_info = (type(exception), exception, exception.__traceback__)
        self._logger.log(
            level,
            message,
            exc_info=exc_info,
            extra={"category": category, "data": data or {}},
        )

    def debug(self, message: str, category: str = "app", data: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.DEBUG, message, category, data)

    def info(self, message: str, category: str = "app", data: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.INFO, message, category, data)

    def warning(self, message: str, category: str = "app", data: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.WARNING, message, category, data)

    def security(self, message: str, category: str = "security", data: Optional[Dict[str, Any]] = None) -> None:
        """Log a security-relevant event (e.g. a failed TLS handshake)."""
        self._log(SECURITY, message, category, data)

    def error(
        self,
        message: str,
        category: str = "app",
        data: Optional[Dict[str, Any]] = None,
        exception: Optional[BaseException] = None,
    ) -> None:
        self._log(logging.ERROR, message, category, data, exception)


logs = Logs()
logs.configure(settings.LOG_LEVEL, settings.LOG_JSON)
