from __future__ import annotations

import logging
import sys
from typing import Any

from config.settings import get_settings


_INITIALIZED: bool = False

# Pipeline fields every discovery log line carries, '-' when not applicable
PIPELINE_FIELDS: dict[str, Any] = {
    "request_id": "-",
    "step": "-",
    "state": "-",
    "status": "-",
    "searches": "-",
    "duration_ms": "-",
    "provider": "-",
    "error": "-",
}


class SafeExtraFormatter(logging.Formatter):
    """Formatter that tolerates missing pipeline fields by injecting defaults."""

    DEFAULTS = PIPELINE_FIELDS

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        for key, value in self.DEFAULTS.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return super().format(record)


def pipeline_format() -> str:
    fields = " ".join(f"{key}=%({key})s" for key in PIPELINE_FIELDS)
    return f"%(asctime)s %(levelname)s %(name)s %(message)s {fields}"


def init_logging(level: str | None = None) -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return

    settings = get_settings()
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(log_level)
        handler.setFormatter(SafeExtraFormatter(fmt=pipeline_format()))
        root_logger.addHandler(handler)

    _INITIALIZED = True
