# quotation_pdf/logging_config.py
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Optional


# Per-render fields passed through ``extra=`` by the assembler
RENDER_FIELDS = ("quotation_number", "duration_ms")

PLAIN_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"

QUIET_LOGGERS = ("urllib3", "PIL", "uvicorn.access")


class JSONFormatter(logging.Formatter):
    """One JSON object per line: level, logger, source location, message and render fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        for name in RENDER_FIELDS:
            if hasattr(record, name):
                entry[name] = getattr(record, name)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(level: str = "INFO", json_output: bool = True, stream: Optional[IO[str]] = None) -> None:
    """
    Replace the root handlers with a single stream handler. Unknown level
    names fall back to INFO.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or "INFO").upper(), logging.INFO))

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JSONFormatter() if json_output else logging.Formatter(PLAIN_FORMAT))
    root.handlers = [handler]

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
