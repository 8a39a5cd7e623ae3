import logging
import os
from contextvars import ContextVar
from typing import Optional


DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEFAULT_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | user=%(user_id)s set=%(set_id)s | %(message)s"
)

# Libraries that are chatty at INFO/DEBUG
QUIET_LOGGERS = ("multipart", "python_multipart", "PIL")

_current_user: ContextVar[Optional[int]] = ContextVar("current_user", default=None)


def bind_user(user_id: Optional[int]) -> None:
    """Tag log records emitted while handling this request with ``user_id``."""
    _current_user.set(user_id)


class ContextFilter(logging.Filter):
    """Fills user/set fields from ``extra`` or the request context, else ``-``."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not hasattr(record, "user_id"):
            user_id = _current_user.get()
            record.user_id = "-" if user_id is None else user_id
        if not hasattr(record, "set_id"):
            record.set_id = "-"
        return True


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    resolved_level = getattr(logging, (level or DEFAULT_LEVEL).upper(), logging.INFO)
    formatter = logging.Formatter(fmt or DEFAULT_FORMAT)

    root = logging.getLogger()
    root.setLevel(resolved_level)

    # Clear existing handlers to avoid duplicate logs in reloads
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    handler.addFilter(ContextFilter())
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved_level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """Get a module logger; ensure root is initialized."""
    if not logging.getLogger().handlers:
        setup_logging()
    return logging.getLogger(name)
