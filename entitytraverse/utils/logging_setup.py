"""Logging format with per-file and per-stage context."""

import contextvars
import logging
from contextlib import contextmanager
from typing import Iterator

_FILE_VAR: contextvars.ContextVar = contextvars.ContextVar("file", default="-")
_STAGE_VAR: contextvars.ContextVar = contextvars.ContextVar("stage", default="-")

LOG_FORMAT = "%(asctime)s | %(levelname)s | file=%(file)s | stage=%(stage)s | %(name)s | %(message)s"


class _ExtractionContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.file = _FILE_VAR.get("-")
        record.stage = _STAGE_VAR.get("-")
        return True


def _ensure_filter_on_root_handlers() -> None:
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, _ExtractionContextFilter) for f in handler.filters):
            handler.addFilter(_ExtractionContextFilter())


def configure_logging(level: int = logging.INFO) -> None:
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root_logger.setLevel(level)
        formatter = logging.Formatter(LOG_FORMAT)
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)
    _ensure_filter_on_root_handlers()


def current_file() -> str:
    return _FILE_VAR.get("-")


def current_stage() -> str:
    return _STAGE_VAR.get("-")


@contextmanager
def file_scope(path: str) -> Iterator[None]:
    token = _FILE_VAR.set(path)
    try:
        yield
    finally:
        _FILE_VAR.reset(token)


@contextmanager
def stage_scope(stage: str) -> Iterator[None]:
    token = _STAGE_VAR.set(stage)
    try:
        yield
    finally:
        _STAGE_VAR.reset(token)
