"""Structured logging for blessed runs.

Controlled via BLESSED_LOG_FORMAT env var: "text" (default) or "json".
Records may carry ``blessed_*`` extras (blessed_case, blessed_harness,
blessed_duration_ms, ...); both formats render them.
"""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _blessed_extras(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key.startswith("blessed_")
    }


class JSONFormatter(logging.Formatter):
    """Emit log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
        }
        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = "".join(traceback.format_exception(*record.exc_info))
        log_entry.update(_blessed_extras(record))
        return json.dumps(log_entry, default=str)


class TextFormatter(logging.Formatter):
    """Plain text lines with blessed_* extras appended as key=value pairs."""

    def __init__(self) -> None:
        super().__init__(_TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = _blessed_extras(record)
        if not extras:
            return line
        suffix = " ".join(f"{key[len('blessed_'):]}={value}" for key, value in sorted(extras.items()))
        return f"{line} [{suffix}]"


def setup_logging(log_format: str, level: int = logging.INFO) -> None:
    """Configure root logger with either JSON or plaintext format."""
    root = logging.getLogger()
    root.setLevel(level)

    # Replace existing handlers so repeated CLI invocations don't duplicate output
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter() if log_format == "json" else TextFormatter())
    root.addHandler(handler)
