"""
Process-wide logging setup for the CLI.

- APPROVALGATE_LOG_LEVEL: root level (default INFO)
- APPROVALGATE_LOG_FORMAT: "text" (default) or "json", one object per line
"""
import json
import logging
import os
from datetime import datetime, timezone


class JsonLogFormatter(logging.Formatter):
    """Renders each record as a single-line JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def configure_logging() -> None:
    """Apply level and format to the root logger; reuses existing handlers."""
    log_level = (os.getenv("APPROVALGATE_LOG_LEVEL", "INFO") or "INFO").upper()
    level_value = getattr(logging, log_level, logging.INFO)
    log_format = (os.getenv("APPROVALGATE_LOG_FORMAT", "text") or "text").strip().lower()

    root = logging.getLogger()
    root.setLevel(level_value)
    formatter: logging.Formatter
    if log_format == "json":
        formatter = JsonLogFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")

    # PyGithub logs every request at DEBUG
    logging.getLogger("github").setLevel(max(level_value, logging.INFO))
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        root.addHandler(handler)
        return

    for handler in root.handlers:
        handler.setFormatter(formatter)
