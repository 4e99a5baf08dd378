"""Access Guard: определение владельца запроса до вызова сервисов.

Поддерживаются ``Authorization: Bearer <jwt>`` (``sub`` это id пользователя)
и, в режиме разработки, заголовок ``X-User-Id``. Пользователь должен
существовать; ядро дальше только сравнивает owner_id.
"""

import uuid
from typing import Optional

from fastapi import Depends, Header

from docvault.core.config import Settings, get_settings
from docvault.core.db import get_sessionmaker
from docvault.core.security import extract_token_from_header
from docvault.domains.exceptions import AuthenticationError, UserNotFoundError
from docvault.domains.identity.services import IdentityService


def _parse_user_id(raw: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw)
    except ValueError:
        raise AuthenticationError("INVALID_AUTH", "Invalid x-user-id (must be UUID)")


async def get_current_owner(
    authorization: Optional[str] = Header(None),
    x_user_id: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> uuid.UUID:
    """Идентификатор текущего пользователя (владельца)"""
    token = extract_token_from_header(authorization)

    if token:
        user_id = IdentityService.user_id_from_token(token)
        if user_id is None:
            raise AuthenticationError("INVALID_AUTH", "Invalid bearer token")
    elif x_user_id and settings.dev_auth_enabled:
        user_id = _parse_user_id(x_user_id.strip())
    else:
        raise AuthenticationError("AUTH_REQUIRED", "Missing credentials")

    # Поиск ограничен таймаутом операции, как и вызовы сервисов
    async with get_sessionmaker()() as session:
        try:
            user = await IdentityService(session, settings).get_user(user_id)
        except UserNotFoundError:
            raise AuthenticationError("INVALID_AUTH", "User not found")

    return user.uuid
