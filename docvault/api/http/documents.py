from fastapi import APIRouter, Depends, status, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import uuid

from docvault.core.auth import get_current_owner
from docvault.core.db import get_db
from docvault.domains.documents.pagination import DEFAULT_LIMIT, MAX_LIMIT, MIN_LIMIT, Page
from docvault.domains.documents.schemas import (
    DocumentCreate, DocumentRename, DocumentVersionCreate, DocumentResponse,
    DocumentVersionResponse, DocumentCreatedResponse, DocumentWithLatestVersionResponse,
    DocumentEnvelope, DocumentVersionEnvelope, DocumentVersionListResponse,
    DocumentListResponse
)
from docvault.domains.documents.services import DocumentService, DocumentVersionService

router = APIRouter(prefix="/documents", tags=["documents"])


def to_list_response(page: Page) -> DocumentListResponse:
    return DocumentListResponse(
        items=[
            DocumentWithLatestVersionResponse(
                document=DocumentResponse.model_validate(document),
                latest_version=DocumentVersionResponse.model_validate(version)
            )
            for document, version in page.items
        ],
        next_cursor=page.next_cursor
    )


@router.post("", response_model=DocumentCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_document(
    document_data: DocumentCreate,
    owner_id: uuid.UUID = Depends(get_current_owner),
    db: AsyncSession = Depends(get_db)
):
    """Создание нового документа вместе с версией 1"""
    document, version = await DocumentService(db).create_document(
        owner_id=owner_id,
        title=document_data.title,
        content=document_data.content
    )

    return DocumentCreatedResponse(
        document=DocumentResponse.model_validate(document),
        version=DocumentVersionResponse.model_validate(version)
    )


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    include_archived: bool = Query(False, alias="includeArchived"),
    limit: int = Query(DEFAULT_LIMIT, ge=MIN_LIMIT, le=MAX_LIMIT),
    cursor: Optional[str] = Query(None),
    owner_id: uuid.UUID = Depends(get_current_owner),
    db: AsyncSession = Depends(get_db)
):
    """Страница документов текущего пользователя с последними версиями"""
    page = await DocumentService(db).list_page(
        owner_id,
        include_archived=include_archived,
        limit=limit,
        cursor=cursor
    )
    return to_list_response(page)


@router.get("/{document_uuid}", response_model=DocumentWithLatestVersionResponse)
async def get_document(
    document_uuid: uuid.UUID,
    owner_id: uuid.UUID = Depends(get_current_owner),
    db: AsyncSession = Depends(get_db)
):
    """Получение документа с последней версией"""
    document, version = await DocumentService(db).resolve_latest(document_uuid, owner_id)

    return DocumentWithLatestVersionResponse(
        document=DocumentResponse.model_validate(document),
        latest_version=DocumentVersionResponse.model_validate(version)
    )


@router.patch("/{document_uuid}", response_model=DocumentEnvelope)
async def rename_document(
    document_uuid: uuid.UUID,
    rename_data: DocumentRename,
    owner_id: uuid.UUID = Depends(get_current_owner),
    db: AsyncSession = Depends(get_db)
):
    """Переименование документа"""
    document = await DocumentService(db).rename_document(document_uuid, owner_id, rename_data.title)
    return DocumentEnvelope(document=DocumentResponse.model_validate(document))


@router.patch("/{document_uuid}/archive", response_model=DocumentEnvelope)
async def archive_document(
    document_uuid: uuid.UUID,
    owner_id: uuid.UUID = Depends(get_current_owner),
    db: AsyncSession = Depends(get_db)
):
    """Архивация документа"""
    document = await DocumentService(db).set_archived(document_uuid, owner_id, True)
    return DocumentEnvelope(document=DocumentResponse.model_validate(document))


@router.patch("/{document_uuid}/unarchive", response_model=DocumentEnvelope)
async def unarchive_document(
    document_uuid: uuid.UUID,
    owner_id: uuid.UUID = Depends(get_current_owner),
    db: AsyncSession = Depends(get_db)
):
    """Возврат документа из архива"""
    document = await DocumentService(db).set_archived(document_uuid, owner_id, False)
    return DocumentEnvelope(document=DocumentResponse.model_validate(document))


# Версии документов
@router.get("/{document_uuid}/versions", response_model=DocumentVersionListResponse)
async def get_document_versions(
    document_uuid: uuid.UUID,
    owner_id: uuid.UUID = Depends(get_current_owner),
    db: AsyncSession = Depends(get_db)
):
    """Получение версий документа, новые первыми"""
    versions = await DocumentVersionService(db).list_versions(document_uuid, owner_id)

    return DocumentVersionListResponse(
        versions=[DocumentVersionResponse.model_validate(version) for version in versions]
    )


@router.post(
    "/{document_uuid}/versions",
    response_model=DocumentVersionEnvelope,
    status_code=status.HTTP_201_CREATED
)
async def create_document_version(
    document_uuid: uuid.UUID,
    version_data: DocumentVersionCreate,
    owner_id: uuid.UUID = Depends(get_current_owner),
    db: AsyncSession = Depends(get_db)
):
    """Создание следующей версии документа"""
    version = await DocumentVersionService(db).allocate_next_version(
        document_uuid,
        owner_id,
        version_data.content
    )
    return DocumentVersionEnvelope(version=DocumentVersionResponse.model_validate(version))


@router.get("/{document_uuid}/versions/{version_number}", response_model=DocumentVersionEnvelope)
async def get_document_version(
    document_uuid: uuid.UUID,
    version_number: int = Path(..., ge=1),
    owner_id: uuid.UUID = Depends(get_current_owner),
    db: AsyncSession = Depends(get_db)
):
    """Получение конкретной версии документа"""
    version = await DocumentVersionService(db).get_version(document_uuid, owner_id, version_number)
    return DocumentVersionEnvelope(version=DocumentVersionResponse.model_validate(version))
