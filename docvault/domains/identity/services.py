import logging
import uuid
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from docvault.core.config import Settings, get_settings
from docvault.core.security import verify_token
from docvault.db.repositories.user_repository import UserRepository
from docvault.db.transactions import bounded
from docvault.domains.exceptions import UserAlreadyExistsError, UserNotFoundError
from docvault.domains.identity.entities import User
from docvault.domains.identity.schemas import UserCreate

logger = logging.getLogger(__name__)


class IdentityService:
    """Сервис для работы с пользователями и их идентификацией"""

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or get_settings()
        self.user_repository = UserRepository(session)

    async def register_user(self, user_data: UserCreate) -> User:
        """Регистрация нового пользователя"""

        async def _register() -> User:
            async with self.session.begin():
                if await self.user_repository.email_exists(user_data.email):
                    raise UserAlreadyExistsError(user_data.email)

                user = User.create_user(email=user_data.email, display_name=user_data.display_name)
                try:
                    return await self.user_repository.create(user)
                except IntegrityError as exc:
                    # параллельная регистрация с тем же email
                    raise UserAlreadyExistsError(user_data.email) from exc

        user = await bounded("register_user", _register(), self.settings.operation_timeout_seconds)
        logger.info("user.created", extra={"user_id": str(user.uuid)})
        return user

    async def get_user(self, user_uuid: uuid.UUID) -> User:
        """Получение пользователя по UUID"""

        async def _get() -> Optional[User]:
            async with self.session.begin():
                return await self.user_repository.get_by_uuid(user_uuid)

        user = await bounded("get_user", _get(), self.settings.operation_timeout_seconds)
        if user is None:
            raise UserNotFoundError(user_uuid)
        return user

    @staticmethod
    def user_id_from_token(token: str) -> Optional[uuid.UUID]:
        """Идентификатор пользователя из JWT токена (None, если токен невалиден)"""
        payload = verify_token(token)
        if not payload or not payload.get("sub"):
            return None
        try:
            return uuid.UUID(str(payload["sub"]))
        except ValueError:
            return None
