"""
Logging setup shared by the API, the Celery worker and the scripts.

Production writes one JSON object per line for the host's log drain;
everywhere else gets a short human-readable line.
"""

import sys
import logging
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from todays_horoscope.config import settings

TEXT_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"

QUIET_LOGGERS = ("uvicorn.access", "httpx", "openai", "redis")


class JSONFormatter(logging.Formatter):
    """One JSON object per record, stamped with the record's own UTC time."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def resolve_level(level: Optional[str] = None) -> int:
    """LOG_LEVEL wins; otherwise INFO in production and DEBUG elsewhere."""
    name = (level or settings.log_level or "").upper()
    resolved = getattr(logging, name, None) if name else None
    if isinstance(resolved, int):
        return resolved
    return logging.INFO if settings.is_production else logging.DEBUG


def configure_logging(level: Optional[str] = None) -> None:
    """Replace the root handlers with a single stdout handler."""
    root_logger = logging.getLogger()
    root_logger.setLevel(resolve_level(level))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    if settings.is_production:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
