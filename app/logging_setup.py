"""
Logging setup.

- Rotating file handlers for runtime and errors
- Request ID aware formatter
"""

from __future__ import annotations
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from flask import g, has_request_context

from app.config import Settings

_FMT = "%(asctime)s [%(levelname)s] %(name)s %(request_id)s - %(message)s"
_HANDLER_TAG = "_remix_handler"


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        # Middleware stores request_id on flask.g
        if not hasattr(record, "request_id"):
            rid = "-"
            if has_request_context():
                rid = g.get("request_id", "-")
            record.request_id = rid
        return True


def _mk_handler(path: Path, level: int) -> RotatingFileHandler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(path, maxBytes=5_000_000, backupCount=3, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FMT))
    handler.addFilter(RequestIdFilter())
    setattr(handler, _HANDLER_TAG, True)
    return handler


def _drop_previous(logger: logging.Logger) -> None:
    # create_app() may run many times per process (tests); keep one set of handlers.
    for h in list(logger.handlers):
        if getattr(h, _HANDLER_TAG, False):
            logger.removeHandler(h)
            h.close()


def configure_logging(settings: Settings) -> None:
    root = logging.getLogger()
    root.setLevel(logging.INFO)
    _drop_previous(root)
    for name in ("Runtime", "Remix", "Storage"):
        _drop_previous(logging.getLogger(name))

    # Console (dev)
    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter(_FMT))
    console.addFilter(RequestIdFilter())
    setattr(console, _HANDLER_TAG, True)
    root.addHandler(console)

    # Files
    logs_dir = Path(settings.LOG_DIR)
    runtime = _mk_handler(logs_dir / "remix.log", logging.INFO)
    errors = _mk_handler(logs_dir / "errors.log", logging.ERROR)

    logging.getLogger("Runtime").addHandler(runtime)
    logging.getLogger("Remix").addHandler(runtime)
    logging.getLogger("Storage").addHandler(runtime)
    root.addHandler(errors)
