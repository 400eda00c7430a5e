"""Logging setup: plain text in development, one JSON object per line otherwise."""

import json
import logging
import sys
from datetime import datetime, timezone

from app.core.config import settings

# Attributes the request middleware passes through ``extra``
REQUEST_FIELDS = ("request_id", "method", "path", "status_code", "duration_ms")


class RequestContextFilter(logging.Filter):
    """Give every record a request_id so the text format never KeyErrors."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = "-"
        return True


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "env": settings.app_env,
        }
        for field in REQUEST_FIELDS:
            value = getattr(record, field, None)
            if value is not None and value != "-":
                entry[field] = value
        if record.exc_info and record.exc_info[1]:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging() -> None:
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestContextFilter())
    if settings.log_json:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)-7s [%(request_id)s] %(name)s: %(message)s",
                datefmt="%H:%M:%S",
            )
        )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    # SQL echo only in debug; the mixpanel SDK goes through urllib3
    logging.getLogger("sqlalchemy.engine").setLevel(level if settings.app_debug else logging.WARNING)
    for name in ("urllib3", "mixpanel"):
        logging.getLogger(name).setLevel(logging.WARNING)
