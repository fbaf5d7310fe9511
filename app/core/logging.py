"""
Logging setup - stdlib logging with a JSON formatter.

Call setup_logging() once at startup; modules use logging.getLogger(__name__).
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from app.core.config import get_settings

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_handler: Optional[logging.Handler] = None


class ForsaLinkJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        if not log_record.get("timestamp"):
            log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname


def setup_logging() -> None:
    settings = get_settings()
    root = logging.getLogger()

    global _handler
    # Idempotent: uvicorn --reload and the test client both re-import the app
    if _handler is not None:
        root.removeHandler(_handler)

    handler = logging.StreamHandler()
    if settings.log_json:
        handler.setFormatter(ForsaLinkJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    root.addHandler(handler)
    _handler = handler
    root.setLevel(settings.log_level.upper())

    if not settings.debug:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
