"""JSON-lines logging for the toolkit.

Every record is one JSON object carrying the request id of the HTTP call
that produced it, so resolver and tagging logs can be joined with the
per-request summary line written by the app middleware. Structured
payloads are passed as `extra={"fields": {...}}`.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone

from src.config.settings import Settings, get_settings

LOGGER_NAME = "toolkit"

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class JSONFormatter(logging.Formatter):
    """Renders a record, its `fields` payload and any traceback as one JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": request_id_var.get(""),
        }
        entry.update(getattr(record, "fields", {}))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _handlers(settings: Settings) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file))
    return handlers


def setup_logging() -> None:
    """Attach JSON handlers to the `toolkit` logger tree."""
    settings = get_settings()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    logger.handlers.clear()

    formatter = JSONFormatter()
    for handler in _handlers(settings):
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # Child loggers (toolkit.lambdas, toolkit.tagging) stop here
    logger.propagate = False


def get_logger(name: str = "") -> logging.Logger:
    """Return the toolkit logger, or a named child of it."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}" if name else LOGGER_NAME)


def bind_request_id() -> str:
    """Generate a request id and make it current for this context."""
    rid = uuid.uuid4().hex[:12]
    request_id_var.set(rid)
    return rid


class RequestTimer:
    """Wall-clock duration of a block, in milliseconds."""

    def __init__(self):
        self.elapsed_ms: float = 0.0
        self._started: float = 0.0

    def __enter__(self):
        self._started = time.perf_counter()
        return self

    def __exit__(self, *exc_info):
        self.elapsed_ms = round((time.perf_counter() - self._started) * 1000, 2)
