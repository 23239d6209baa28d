"""
Structured logging for the object API.

Loggers accept keyword context (``logger.info("Object trashed", object_id=3)``).
Production writes one JSON document per line; development writes a colored
single line. Object identity (``object_type``/``object_id``) is promoted out
of the context so every line about an object reads the same way.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from shared.config.settings import settings

# Context keys promoted to top-level fields
IDENTITY_KEYS = ("object_type", "object_id")


def _split_context(record: logging.LogRecord) -> tuple[dict[str, Any], dict[str, Any]]:
    context = dict(getattr(record, "context", None) or {})
    identity = {key: context.pop(key) for key in IDENTITY_KEYS if context.get(key) is not None}
    return identity, context


class StructuredFormatter(logging.Formatter):
    """JSON lines for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        identity, context = _split_context(record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **identity,
        }

        request_id = getattr(record, "request_id", "")
        if request_id:
            payload["request_id"] = request_id
        if context:
            payload["context"] = context
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if settings.debug:
            payload["source"] = f"{record.pathname}:{record.lineno}"

        return json.dumps(payload, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Colored single-line output for local runs."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"
    DIM = "\033[2m"

    def format(self, record: logging.LogRecord) -> str:
        identity, context = _split_context(record)
        color = self.LEVEL_COLORS.get(record.levelname, self.RESET)
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        parts = [f"{color}{clock} {record.levelname:<8}{self.RESET}"]
        request_id = getattr(record, "request_id", "")
        if request_id:
            parts.append(f"{self.DIM}{request_id[:8]}{self.RESET}")
        if identity:
            target = identity.get("object_type", "?")
            if "object_id" in identity:
                target += f"#{identity['object_id']}"
            parts.append(f"[{target}]")
        parts.append(record.getMessage())

        line = " ".join(parts)
        if context:
            line += f" {self.DIM}" + " ".join(f"{k}={v}" for k, v in context.items()) + self.RESET
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class StructuredLogger(logging.Logger):
    """Logger whose level methods take keyword context."""

    def _log_context(self, level: int, msg: str, args: tuple, kwargs: dict[str, Any]) -> None:
        if not self.isEnabledFor(level):
            return
        exc_info = kwargs.pop("exc_info", None)
        extra = kwargs.pop("extra", None) or {}
        extra["context"] = kwargs
        # stacklevel=3 skips this helper and the level method
        self._log(level, msg, args, exc_info=exc_info, extra=extra, stacklevel=3)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_context(logging.DEBUG, msg, args, kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_context(logging.INFO, msg, args, kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_context(logging.WARNING, msg, args, kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_context(logging.ERROR, msg, args, kwargs)

    def critical(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_context(logging.CRITICAL, msg, args, kwargs)


logging.setLoggerClass(StructuredLogger)


def _resolve_level() -> int:
    if settings.log_level:
        return logging.getLevelName(settings.log_level.upper())
    return logging.DEBUG if settings.debug else logging.INFO


def setup_logging() -> None:
    """
    Install the stdout handler on the root logger.
    Called once from the application lifespan.
    """
    from shared.infrastructure.correlation import CorrelationIdFilter

    level = _resolve_level()
    use_json = settings.log_format == "json" or (
        not settings.log_format and settings.environment == "production"
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(StructuredFormatter() if use_json else DevelopmentFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    for name, library_level in (
        ("uvicorn.access", logging.WARNING),
        ("sqlalchemy.engine", logging.WARNING),
        ("httpx", logging.WARNING),
    ):
        logging.getLogger(name).setLevel(library_level)


def get_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger.

    Usage:
        logger = get_logger(__name__)
        logger.info("Object trashed", object_type="page", object_id=12)
        logger.error("Failed to delete object", object_id=12, exc_info=True)
    """
    return logging.getLogger(name)  # type: ignore[return-value]


objects_api_logger = get_logger("objects_api")
