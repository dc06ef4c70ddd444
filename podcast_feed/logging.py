"""Logging configuration for the podcast feed generator."""

import json
import logging
import sys

from podcast_feed.config import get_settings

PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, for machine-read logs in prod."""

    def format(self, record: logging.LogRecord) -> str:
        base = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base)


def setup_logging(level: str | None = None) -> None:
    """Route log records to stdout.

    Uses JSON lines when ``env`` is ``prod`` and a plain format otherwise.
    ``level`` overrides the configured ``log_level``.
    """
    settings = get_settings()
    handler = logging.StreamHandler(sys.stdout)
    formatter = JsonFormatter() if settings.env == "prod" else logging.Formatter(PLAIN_FORMAT)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel((level or settings.log_level).upper())
