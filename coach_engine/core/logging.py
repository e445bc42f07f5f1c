"""
Logging setup for the plan engine.

Engine modules log through logging.getLogger(__name__). Calls that concern
one plan pass `extra=log_fields(plan_id=..., profile_id=...)`; both
formatters surface those fields, so a single athlete's plan runs can be
filtered out of the stream.
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Any, Dict, Optional

from coach_engine import __version__
from coach_engine.core.config import Settings, settings as default_settings

SERVICE_NAME = "coach-engine"
TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def log_fields(**fields: Any) -> Dict[str, Dict[str, Any]]:
    """Build the `extra` mapping for a log call. None values are dropped."""
    return {"extra_fields": {k: v for k, v in fields.items() if v is not None}}


class JSONFormatter(logging.Formatter):
    """One JSON object per record, stamped with service, version and environment."""

    def __init__(self, environment: str = "development"):
        super().__init__()
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "line": record.lineno,
            "service": SERVICE_NAME,
            "version": __version__,
            "environment": self.environment,
        }
        entry.update(getattr(record, "extra_fields", None) or {})

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class ContextFormatter(logging.Formatter):
    """Plain text for terminals; log_fields() are appended as key=value pairs."""

    def __init__(self):
        super().__init__(TEXT_FORMAT)

    def formatMessage(self, record: logging.LogRecord) -> str:
        text = super().formatMessage(record)
        fields = getattr(record, "extra_fields", None)
        if fields:
            text += " [" + " ".join(f"{k}={v}" for k, v in fields.items()) + "]"
        return text


def setup_logging(
    settings: Optional[Settings] = None,
    level: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """
    Configure the root logger for a CLI run or an embedding service.

    JSON when LOG_FORMAT=json or in production, text otherwise. Output goes
    to stderr by default so stdout stays free for plan JSON.

    Args:
        settings: Settings to read LOG_LEVEL/LOG_FORMAT/ENVIRONMENT from
        level: Level name overriding LOG_LEVEL (e.g. from --log-level)
        stream: Destination stream (default sys.stderr)
    """
    settings = settings or default_settings
    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)

    if settings.LOG_FORMAT == "json" or settings.ENVIRONMENT == "production":
        formatter: logging.Formatter = JSONFormatter(settings.ENVIRONMENT)
    else:
        formatter = ContextFormatter()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers[:] = [handler]
    root_logger.setLevel(log_level)

    # ConfigService reports every file it reads at DEBUG
    logging.getLogger("coach_engine.plan_framework.config").setLevel(
        max(log_level, logging.INFO)
    )

    return root_logger
