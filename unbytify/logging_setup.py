from __future__ import annotations

import contextlib
import contextvars
import logging
import os
import uuid
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterator, Optional

DEFAULT_CATEGORY = "CONFIG"
CATEGORIES = {
    "PARSE",
    "FORMAT",
    "CONFIG",
    "ERRORS",
}
LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(category)s | cid=%(correlation_id)s | %(name)s | "
    "%(filename)s:%(lineno)d %(funcName)s() | %(message)s"
)

# Propagated automatically within async tasks; threads must re-set explicitly.
_correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("correlation_id", default="-")
_category_var: contextvars.ContextVar[str] = contextvars.ContextVar("category", default=DEFAULT_CATEGORY)


def short_uuid() -> str:
    return uuid.uuid4().hex[:8]


def get_correlation_id() -> str:
    return _correlation_id_var.get()


def get_category() -> str:
    return _category_var.get()


@contextlib.contextmanager
def correlation_context(correlation_id: Optional[str] = None) -> Iterator[None]:
    token = _correlation_id_var.set(correlation_id or short_uuid())
    try:
        yield
    finally:
        _correlation_id_var.reset(token)


@contextlib.contextmanager
def category_context(category: str) -> Iterator[None]:
    token = _category_var.set(category if category in CATEGORIES else DEFAULT_CATEGORY)
    try:
        yield
    finally:
        _category_var.reset(token)


class ContextEnricherFilter(logging.Filter):
    """
    Ensures every LogRecord has:
      - category
      - correlation_id
    """

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        if not getattr(record, "category", None):
            record.category = get_category()
        if not getattr(record, "correlation_id", None):
            record.correlation_id = get_correlation_id()
        return True


class CategoryLoggerAdapter(logging.LoggerAdapter):
    def __init__(self, logger: logging.Logger, category: Optional[str] = None) -> None:
        super().__init__(logger, extra={"category": category})

    def process(self, msg, kwargs):
        extra = kwargs.get("extra", {})
        if "category" not in extra:
            extra["category"] = self.extra.get("category") or get_category()
        if "correlation_id" not in extra:
            extra["correlation_id"] = get_correlation_id()
        kwargs["extra"] = extra
        return msg, kwargs


def _level_from_env(name: str, default: str) -> int:
    level_name = os.environ.get(name, default).strip().upper()
    return getattr(logging, level_name, getattr(logging, default))


def setup_logging() -> None:
    """
    Central logging setup.

    Console output always; a rotating file is added when UNBYTIFY_LOG_FILE is set.
    Calling it again only refreshes the level.
    """
    level = _level_from_env("UNBYTIFY_LOG_LEVEL", "WARNING")
    root_logger = logging.getLogger()

    # Avoid double-installation; still allow runtime level update.
    if getattr(root_logger, "_unbytify_logging_installed", False):
        root_logger.setLevel(level)
        for h in root_logger.handlers:
            h.setLevel(level)
        return
    root_logger.setLevel(level)

    # Important: do NOT pass datefmt; default includes ",%03d" milliseconds.
    formatter = logging.Formatter(fmt=LOG_FORMAT)
    enricher = ContextEnricherFilter()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.addFilter(enricher)
    root_logger.addHandler(console_handler)

    log_file = os.environ.get("UNBYTIFY_LOG_FILE", "").strip()
    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path,
            maxBytes=10 * 1024 * 1024,
            backupCount=10,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(enricher)
        root_logger.addHandler(file_handler)

    root_logger._unbytify_logging_installed = True  # type: ignore[attr-defined]


def get_logger(name: str, category: Optional[str] = None) -> CategoryLoggerAdapter:
    """Without a category the adapter follows the active category_context."""
    if category is not None and category not in CATEGORIES:
        category = DEFAULT_CATEGORY
    return CategoryLoggerAdapter(logging.getLogger(name), category)
