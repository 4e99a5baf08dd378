import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from docvault.core.config import Settings, get_settings
from docvault.core.db import get_db
from docvault.db.transactions import bounded
from docvault.domains.exceptions import StorageUnavailableError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    """Процесс жив"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """Готовность принимать запросы: хранилище отвечает на SELECT 1"""
    try:
        await bounded("ready", db.execute(text("SELECT 1")), settings.operation_timeout_seconds)
    except (StorageUnavailableError, SQLAlchemyError) as exc:
        logger.warning("readiness.failed", extra={"reason": type(exc).__name__})
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable"}
        )
    return {"status": "ready"}
