from docvault.api.http.health import router as health_router
from docvault.api.http.users import router as users_router
from docvault.api.http.documents import router as documents_router

__all__ = [
    "health_router",
    "users_router",
    "documents_router"
]
