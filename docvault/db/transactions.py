"""Ограничение времени операций с хранилищем и перевод сбоев в StorageUnavailableError."""

import asyncio
import logging
from typing import Awaitable, TypeVar

from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError

from docvault.core.logging import log_context
from docvault.domains.exceptions import StorageUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# lock_not_available, query_canceled, serialization_failure, deadlock_detected
TRANSIENT_SQLSTATES = {"55P03", "57014", "40001", "40P01"}


def is_transient(exc: DBAPIError) -> bool:
    """Можно ли повторить операцию после этой ошибки драйвера"""
    if isinstance(exc, IntegrityError):
        return False
    if isinstance(exc, OperationalError) or exc.connection_invalidated:
        return True
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    return sqlstate in TRANSIENT_SQLSTATES


async def bounded(operation: str, awaitable: Awaitable[T], timeout: float) -> T:
    """Выполнение операции с таймаутом.

    Незакоммиченная транзакция откатывается при отмене, поэтому таймаут никогда
    не оставляет частично применённых изменений.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as exc:
        logger.warning(
            "storage.timeout",
            extra=log_context(operation=operation, timeout_seconds=timeout),
        )
        raise StorageUnavailableError(operation, "timeout") from exc
    except DBAPIError as exc:
        if not is_transient(exc):
            raise
        logger.warning(
            "storage.unavailable",
            extra=log_context(operation=operation, error=type(exc.orig).__name__),
        )
        raise StorageUnavailableError(operation, str(exc.orig)) from exc
