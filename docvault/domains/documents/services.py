import logging
import uuid
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from docvault.core.config import Settings, get_settings
from docvault.core.logging import log_context
from docvault.db.repositories.document_repository import DocumentRepository, DocumentVersionRepository
from docvault.db.transactions import bounded
from docvault.domains.documents.entities import Document, DocumentVersion
from docvault.domains.documents.pagination import Page, build_page, clamp_limit, decode_cursor
from docvault.domains.exceptions import (
    DocumentNotFoundError,
    InvalidContentError,
    InvalidTitleError,
    VersionConflictError,
    VersionNotFoundError,
)

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 200

DocumentWithVersion = Tuple[Document, DocumentVersion]


def validate_title(title: str) -> str:
    if not title or not title.strip() or len(title) > TITLE_MAX_LENGTH:
        raise InvalidTitleError()
    return title


def validate_content(content: str) -> str:
    if not content:
        raise InvalidContentError()
    return content


class DocumentService:
    """Сервис для работы с документами.

    Каждая операция это одна транзакция; чтения и изменения фильтруются по
    владельцу, поэтому чужой документ всегда выглядит как отсутствующий.
    """

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or get_settings()
        self.document_repository = DocumentRepository(session)
        self.version_repository = DocumentVersionRepository(session)

    async def create_document(
        self,
        owner_id: uuid.UUID,
        title: str,
        content: str
    ) -> DocumentWithVersion:
        """Создание документа вместе с версией 1"""
        validate_title(title)
        validate_content(content)

        async def _create() -> DocumentWithVersion:
            async with self.session.begin():
                document = Document.create_document(title=title, owner_id=owner_id)
                created_document = await self.document_repository.create(document)
                version = await self.version_repository.create(
                    DocumentVersion.first_version(created_document, content)
                )
            return created_document, version

        document, version = await bounded("create_document", _create(), self.settings.operation_timeout_seconds)
        logger.info("document.created", extra=log_context(document_id=document.uuid, owner_id=owner_id))
        return document, version

    async def rename_document(
        self,
        document_uuid: uuid.UUID,
        owner_id: uuid.UUID,
        title: str
    ) -> Document:
        """Переименование документа"""
        validate_title(title)

        async def _rename() -> Document:
            async with self.session.begin():
                document = await self._lock_document(document_uuid, owner_id)
                document.rename(title)
                return await self.document_repository.update(document)

        document = await bounded("rename_document", _rename(), self.settings.operation_timeout_seconds)
        logger.info("document.renamed", extra=log_context(document_id=document_uuid, owner_id=owner_id))
        return document

    async def set_archived(
        self,
        document_uuid: uuid.UUID,
        owner_id: uuid.UUID,
        archived: bool
    ) -> Document:
        """Установка флага архивации (идемпотентно)"""

        async def _set_archived() -> Document:
            async with self.session.begin():
                document = await self._lock_document(document_uuid, owner_id)
                document.set_archived(archived)
                return await self.document_repository.update(document)

        document = await bounded("set_archived", _set_archived(), self.settings.operation_timeout_seconds)
        logger.info(
            "document.archived" if archived else "document.unarchived",
            extra=log_context(document_id=document_uuid, owner_id=owner_id),
        )
        return document

    async def resolve_latest(self, document_uuid: uuid.UUID, owner_id: uuid.UUID) -> DocumentWithVersion:
        """Документ и его последняя версия"""

        async def _resolve() -> Optional[DocumentWithVersion]:
            async with self.session.begin():
                return await self.document_repository.get_with_latest_version(document_uuid, owner_id)

        result = await bounded("resolve_latest", _resolve(), self.settings.operation_timeout_seconds)
        if result is None:
            raise DocumentNotFoundError(document_uuid)
        return result

    async def list_page(
        self,
        owner_id: uuid.UUID,
        include_archived: bool = False,
        limit: Optional[int] = None,
        cursor: Optional[str] = None
    ) -> Page[DocumentWithVersion]:
        """Страница документов владельца с последними версиями"""
        after = decode_cursor(cursor)
        limit = clamp_limit(limit)

        async def _list() -> List[DocumentWithVersion]:
            async with self.session.begin():
                return await self.document_repository.list_with_latest_version(
                    owner_id=owner_id,
                    include_archived=include_archived,
                    after=after,
                    limit=limit + 1,
                )

        rows = await bounded("list_page", _list(), self.settings.operation_timeout_seconds)
        return build_page([(row, row[0].uuid) for row in rows], limit)

    async def _lock_document(self, document_uuid: uuid.UUID, owner_id: uuid.UUID) -> Document:
        await self.document_repository.apply_timeouts(
            self.settings.lock_timeout_ms, int(self.settings.operation_timeout_seconds * 1000)
        )
        document = await self.document_repository.get_for_owner(document_uuid, owner_id, for_update=True)
        if document is None:
            raise DocumentNotFoundError(document_uuid)
        return document


class DocumentVersionService:
    """Сервис для работы с версиями документов"""

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or get_settings()
        self.version_repository = DocumentVersionRepository(session)
        self.document_repository = DocumentRepository(session)

    async def allocate_next_version(
        self,
        document_uuid: uuid.UUID,
        owner_id: uuid.UUID,
        content: str
    ) -> DocumentVersion:
        """Создание следующей версии документа.

        Строка документа блокируется на время чтения максимума и вставки
        ``max + 1``: второй конкурентный вызов для того же документа ждёт
        коммита первого и видит уже новый максимум. Отказ (нет документа или
        он чужой) не вставляет ничего и не расходует номер.
        """
        validate_content(content)

        async def _allocate() -> DocumentVersion:
            async with self.session.begin():
                await self.document_repository.apply_timeouts(
                    self.settings.lock_timeout_ms, int(self.settings.operation_timeout_seconds * 1000)
                )
                document = await self.document_repository.get_for_owner(document_uuid, owner_id, for_update=True)
                if document is None:
                    raise DocumentNotFoundError(document_uuid)

                current = await self.version_repository.get_max_version_number(document_uuid)
                version = DocumentVersion.create_version(
                    document_id=document_uuid,
                    content=content,
                    version_number=current + 1
                )
                try:
                    return await self.version_repository.create(version)
                except IntegrityError as exc:
                    raise VersionConflictError(document_uuid) from exc

        version = await bounded("allocate_next_version", _allocate(), self.settings.operation_timeout_seconds)
        logger.info(
            "document.version_created",
            extra=log_context(document_id=document_uuid, owner_id=owner_id, version_number=version.version_number),
        )
        return version

    async def list_versions(self, document_uuid: uuid.UUID, owner_id: uuid.UUID) -> List[DocumentVersion]:
        """Все версии документа владельца, новые первыми"""

        async def _list() -> List[DocumentVersion]:
            async with self.session.begin():
                await self._require_document(document_uuid, owner_id)
                return await self.version_repository.get_by_document(document_uuid)

        return await bounded("list_versions", _list(), self.settings.operation_timeout_seconds)

    async def get_version(
        self,
        document_uuid: uuid.UUID,
        owner_id: uuid.UUID,
        version_number: int
    ) -> DocumentVersion:
        """Конкретная версия документа по номеру"""

        async def _get() -> DocumentVersion:
            async with self.session.begin():
                await self._require_document(document_uuid, owner_id)
                version = await self.version_repository.get_version_by_number(document_uuid, version_number)
            if version is None:
                raise VersionNotFoundError(document_uuid, version_number)
            return version

        return await bounded("get_version", _get(), self.settings.operation_timeout_seconds)

    async def _require_document(self, document_uuid: uuid.UUID, owner_id: uuid.UUID) -> Document:
        document = await self.document_repository.get_for_owner(document_uuid, owner_id)
        if document is None:
            raise DocumentNotFoundError(document_uuid)
        return document
