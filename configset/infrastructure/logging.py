"""
Centralized Logging

Architectural Intent:
- Provides structured JSON logging for all configset components
- Agent output lines and dispatch events carry agent_id, test_plan_id and
  operation_id when the caller passes them through ``extra``
- Log level and format come from ConfigSetConfig (log_level, json_logs)
"""

import json
import logging
import sys
from datetime import datetime, UTC

CONTEXT_FIELDS = ("agent_id", "test_plan_id", "operation_id")


class JSONFormatter(logging.Formatter):
    """Structured JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_entry[name] = value
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def configure_logging(
    level: int | str = logging.INFO,
    json_format: bool = False,
) -> None:
    """Configure logging for configset.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, etc.), as int or name
        json_format: If True, use JSON structured output. Otherwise human-readable.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    root = logging.getLogger("configset")
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )

    root.addHandler(handler)
