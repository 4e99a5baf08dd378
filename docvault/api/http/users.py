from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import uuid

from docvault.api.http.documents import to_list_response
from docvault.core.auth import get_current_owner
from docvault.core.db import get_db
from docvault.domains.documents.pagination import DEFAULT_LIMIT, MAX_LIMIT, MIN_LIMIT
from docvault.domains.documents.schemas import DocumentListResponse
from docvault.domains.documents.services import DocumentService
from docvault.domains.exceptions import UserNotFoundError
from docvault.domains.identity.schemas import UserCreate, UserEnvelope, UserResponse
from docvault.domains.identity.services import IdentityService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db)
):
    """Регистрация пользователя"""
    user = await IdentityService(db).register_user(user_data)
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.get("/{user_uuid}/documents", response_model=DocumentListResponse)
async def get_user_documents(
    user_uuid: uuid.UUID,
    include_archived: bool = Query(False, alias="includeArchived"),
    limit: int = Query(DEFAULT_LIMIT, ge=MIN_LIMIT, le=MAX_LIMIT),
    cursor: Optional[str] = Query(None),
    owner_id: uuid.UUID = Depends(get_current_owner),
    db: AsyncSession = Depends(get_db)
):
    """Получение документов пользователя (только своих)"""
    # Чужой список выглядит так же, как несуществующий пользователь
    if user_uuid != owner_id:
        raise UserNotFoundError(user_uuid)

    page = await DocumentService(db).list_page(
        owner_id,
        include_archived=include_archived,
        limit=limit,
        cursor=cursor
    )
    return to_list_response(page)
