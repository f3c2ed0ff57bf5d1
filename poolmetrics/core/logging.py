"""Logging for pool metrics.

``logger`` is a ``LoggerAdapter`` that carries structured context.  Use
``logger.with_context(pool_name=..., operation=...)`` to get a child adapter;
the context travels on every record as ``record.context``.

The package never installs handlers on import.  Applications that want the
package's formatting call ``configure_logging()`` once at startup.
"""

from __future__ import annotations

import json
import logging
from typing import Any, MutableMapping

from poolmetrics.core.config import Settings, settings

LOGGER_NAME = "poolmetrics"


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter with chained structured context."""

    def __init__(self, logger: logging.Logger, extra: dict[str, Any] | None = None):
        super().__init__(logger, extra or {})

    def with_context(self, **kwargs: Any) -> "ContextualLogger":
        """Return a new adapter with ``kwargs`` merged into the current context."""
        return ContextualLogger(self.logger, {**self.extra, **kwargs})

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra["context"] = {**self.extra, **extra.get("context", {})}
        kwargs["extra"] = extra
        return msg, kwargs


class ConsoleFormatter(logging.Formatter):
    """Human readable lines with ``key=value`` context appended."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)s %(name)s %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = getattr(record, "context", None)
        if context:
            pairs = " ".join(f"{k}={v}" for k, v in sorted(context.items()))
            line = f"{line} [{pairs}]"
        return line


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(getattr(record, "context", None) or {})
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(config: Settings = settings) -> logging.Logger:
    """Attach a stream handler to the package logger using ``config``.

    Safe to call more than once; an existing handler is replaced.
    """
    base = logging.getLogger(LOGGER_NAME)
    for handler in list(base.handlers):
        if getattr(handler, "_poolmetrics", False):
            base.removeHandler(handler)

    handler = logging.StreamHandler()
    handler._poolmetrics = True  # type: ignore[attr-defined]
    handler.setFormatter(JsonFormatter() if config.log_format == "json" else ConsoleFormatter())
    base.addHandler(handler)
    base.setLevel(config.log_level)
    return base


logger = ContextualLogger(logging.getLogger(LOGGER_NAME))
