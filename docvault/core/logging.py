"""Настройка логирования процесса.

Используется стандартный модуль :mod:`logging`. ``setup_logging`` ставит один
консольный обработчик, форматтер которого выводит одну строку на запись:
время в UTC, уровень, имя логгера, идентификатор запроса и поля из ``extra``
в виде ``key=value``.
"""

import logging
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Optional

_REQUEST_ID: ContextVar[Optional[str]] = ContextVar("docvault_request_id", default=None)

# Атрибуты, которые logging выставляет сам; всё остальное пришло из `extra`
_STANDARD_ATTRS = {
    "name", "msg", "args", "levelname", "levelno", "pathname", "filename",
    "module", "exc_info", "exc_text", "stack_info", "lineno", "funcName",
    "created", "msecs", "relativeCreated", "thread", "threadName",
    "processName", "process", "message", "asctime", "request_id",
    "taskName", "color_message",
}

_CONFIGURED_FLAG = "_docvault_configured"


class ConsoleLogFormatter(logging.Formatter):
    """Однострочный консольный форматтер.

    Пример:

        2026-01-05T10:12:00.302Z INFO  docvault.domains.documents.services [rid=4f1c] document.created document_id=... owner_id=...
    """

    _time_format = "%Y-%m-%dT%H:%M:%S"

    def __init__(self) -> None:
        fmt = "%(asctime)s %(levelname)-5s %(name)s [rid=%(request_id)s] %(message)s"
        super().__init__(fmt=fmt, datefmt=self._time_format)

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return f"{dt.strftime(datefmt or self._time_format)}.{int(record.msecs):03d}Z"

    def format(self, record: logging.LogRecord) -> str:
        record.request_id = getattr(record, "request_id", None) or _REQUEST_ID.get() or "-"
        base = super().format(record)

        extras = [
            f"{key}={value}"
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        ]
        if extras:
            return f"{base} " + " ".join(extras)
        return base


def setup_logging(level_name: str = "INFO") -> None:
    """Настройка корневого логгера (повторный вызов меняет только уровень)"""
    root_logger = logging.getLogger()
    level = getattr(logging, level_name.upper(), logging.INFO)

    if getattr(root_logger, _CONFIGURED_FLAG, False):
        root_logger.setLevel(level)
        return

    handler = logging.StreamHandler()
    handler.setFormatter(ConsoleLogFormatter())
    root_logger.handlers = [handler]
    root_logger.setLevel(level)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "alembic", "sqlalchemy"):
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.propagate = True

    setattr(root_logger, _CONFIGURED_FLAG, True)


def bind_request_id(request_id: Optional[str]) -> None:
    _REQUEST_ID.set(request_id)


def log_context(*, document_id: Any = None, owner_id: Any = None, **extra: Any) -> dict:
    """Payload для ``extra``: пустые значения отбрасываются, идентификаторы приводятся к str"""
    context = {"document_id": document_id, "owner_id": owner_id, **extra}
    return {
        key: str(value) if key.endswith("_id") else value
        for key, value in context.items()
        if value is not None
    }
