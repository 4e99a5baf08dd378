import logging
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request

from docvault.api.errors import register_exception_handlers
from docvault.api.http.health import router as health_router
from docvault.api.http.users import router as users_router
from docvault.api.http.documents import router as documents_router
from docvault.core.config import Settings, get_settings
from docvault.core.db import dispose_engine
from docvault.core.logging import bind_request_id, setup_logging

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("app.started")
    yield
    await dispose_engine()
    logger.info("app.stopped")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="DocVault",
        description="Хранилище документов с неизменяемой историей версий",
        version="1.0.0",
        lifespan=lifespan
    )

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        bind_request_id(request_id)
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    register_exception_handlers(app)

    # Подключаем роутеры
    app.include_router(health_router)
    app.include_router(users_router)
    app.include_router(documents_router)

    return app


app = create_app()
