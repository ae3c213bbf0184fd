from __future__ import annotations

import json
import logging
import os
from collections.abc import MutableMapping
from typing import Any


class JsonFormatter(logging.Formatter):
    """Very small JSON formatter for structured logs."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - short
        payload = {
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            "session_id": getattr(record, "session_id", None),
            "event_type": getattr(record, "event_type", None),
            "error_category": getattr(record, "error_category", None),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class _SessionIdFilter(logging.Filter):
    """Give every record a ``session_id`` so the plain format never fails."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "session_id"):
            record.session_id = "-"
        return True


class SessionLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter scoped to one session.

    Unlike the stock adapter, call-site ``extra`` values are merged with the
    session context instead of being replaced by it.
    """

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**(self.extra or {}), **(kwargs.get("extra") or {})}
        return msg, kwargs


def session_logger(logger: logging.Logger, session_id: str) -> SessionLoggerAdapter:
    return SessionLoggerAdapter(logger, {"session_id": session_id})


def configure_logging(level: str | int | None = None, fmt: str | None = None) -> None:
    """Configure logging.

    Default format is human friendly, but when ``LOG_FORMAT=json`` is set the
    output becomes structured JSON carrying the session id and error category.
    """

    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = level.upper()

    fmt = (fmt or os.getenv("LOG_FORMAT", "plain")).lower()
    handler = logging.StreamHandler()
    handler.addFilter(_SessionIdFilter())
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)s %(name)s [%(session_id)s] %(message)s",
                datefmt="%H:%M:%S",
            )
        )
    logging.basicConfig(level=level, handlers=[handler], force=True)
