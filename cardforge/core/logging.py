import logging
import os
from typing import Any, Optional


DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEFAULT_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | %(provider)s:%(action)s | %(message)s"
)
CONTEXT_FIELDS = ("provider", "action")


class ContextFilter(logging.Filter):
    """Fills pipeline context fields so the formatter never hits a KeyError."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        for name in CONTEXT_FIELDS:
            if not hasattr(record, name):
                setattr(record, name, "-")
        return True


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """Initialize the root logger with one stream handler and the context filter."""
    resolved_level = getattr(logging, (level or DEFAULT_LEVEL).upper(), logging.INFO)
    formatter = logging.Formatter(fmt or DEFAULT_FORMAT)

    root = logging.getLogger()
    root.setLevel(resolved_level)

    # Reloads (uvicorn --reload, repeated CLI calls in tests) must not stack handlers
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    handler.addFilter(ContextFilter())
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger; ensure root is initialized."""
    if not logging.getLogger().handlers:
        setup_logging()
    return logging.getLogger(name)


def with_context(logger: logging.Logger, **context: Any) -> logging.LoggerAdapter:
    """Bind provider/action context to every record emitted through the adapter."""
    return logging.LoggerAdapter(logger, {k: v for k, v in context.items() if v})
