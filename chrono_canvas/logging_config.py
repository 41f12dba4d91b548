"""
Logging setup for ChronoCanvas.

Engine modules log through named loggers and attach timeline context
(element id, position, active driver) with ``extra=timeline_context(...)``.
configure_logging() renders that context as JSON fields in production and
as a bracketed suffix during development.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

CONTEXT_FIELDS = ("element_id", "position", "driver")

PRODUCTION_ENVS = ("production", "prod", "staging")


def timeline_context(element_id: Optional[str] = None,
                     position: Optional[float] = None,
                     driver: Any = None) -> dict[str, Any]:
    """Build the ``extra`` mapping for a log call, skipping unset fields."""
    context: dict[str, Any] = {}
    if element_id is not None:
        context["element_id"] = element_id
    if position is not None:
        context["position"] = round(float(position), 3)
    if driver is not None:
        context["driver"] = driver.value if isinstance(driver, Enum) else str(driver)
    return context


def _record_context(record: logging.LogRecord) -> dict[str, Any]:
    return {key: getattr(record, key) for key in CONTEXT_FIELDS if hasattr(record, key)}


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with timeline context as top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(_record_context(record))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


class ContextFormatter(logging.Formatter):
    """Human-readable lines ending in ``[position=.. driver=..]`` when context is set."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _record_context(record)
        if context:
            line += " [" + " ".join(f"{k}={v}" for k, v in context.items()) + "]"
        return line


def configure_logging(level: int = logging.INFO, json_output: Optional[bool] = None) -> None:
    """
    Install a single stdout handler on the root logger.

    Args:
        level: Root log level
        json_output: Force JSON on or off; by default JSON is used when
            CHRONO_ENV names a production environment
    """
    if json_output is None:
        json_output = os.environ.get("CHRONO_ENV", "development").lower() in PRODUCTION_ENVS

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter() if json_output else ContextFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
