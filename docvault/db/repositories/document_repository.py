from typing import Optional, List, Tuple, TYPE_CHECKING
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func, and_, text
import uuid

from docvault.db.models.document import Document as DocumentModel, DocumentVersion as DocumentVersionModel

if TYPE_CHECKING:
    from docvault.domains.documents.entities import Document, DocumentVersion


def _latest_versions_subquery():
    """Максимальный номер версии для каждого документа"""
    return (
        select(
            DocumentVersionModel.document_id.label("document_id"),
            func.max(DocumentVersionModel.version_number).label("max_version_number"),
        )
        .group_by(DocumentVersionModel.document_id)
        .subquery("latest_versions")
    )


def _with_latest_version():
    """SELECT документ + его последняя версия одним запросом"""
    latest = _latest_versions_subquery()
    return (
        select(DocumentModel, DocumentVersionModel)
        .join(latest, latest.c.document_id == DocumentModel.uuid)
        .join(
            DocumentVersionModel,
            and_(
                DocumentVersionModel.document_id == DocumentModel.uuid,
                DocumentVersionModel.version_number == latest.c.max_version_number,
            ),
        )
    )


class DocumentRepository:
    """Репозиторий для работы с документами.

    Все выборки фильтруются по владельцу: чужой документ неотличим от
    отсутствующего. Транзакциями управляет вызывающий сервис.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def apply_timeouts(self, lock_timeout_ms: int, statement_timeout_ms: int) -> None:
        """Ограничение ожидания блокировки и времени запросов транзакции (только PostgreSQL)"""
        if self.session.get_bind().dialect.name != "postgresql":
            return
        await self.session.execute(text(f"SET LOCAL lock_timeout = '{int(lock_timeout_ms)}ms'"))
        await self.session.execute(text(f"SET LOCAL statement_timeout = '{int(statement_timeout_ms)}ms'"))

    async def create(self, document: "Document") -> "Document":
        """Создание нового документа"""
        db_document = DocumentModel(
            uuid=document.uuid,
            title=document.title,
            owner_id=document.owner_id,
            is_archived=document.is_archived,
            created_at=document.created_at,
            updated_at=document.updated_at
        )

        self.session.add(db_document)
        await self.session.flush()
        return self._to_domain(db_document)

    async def get_for_owner(
        self,
        document_uuid: uuid.UUID,
        owner_id: uuid.UUID,
        for_update: bool = False
    ) -> Optional["Document"]:
        """Получение документа владельца; for_update берёт эксклюзивную блокировку строки"""
        stmt = select(DocumentModel).where(
            DocumentModel.uuid == document_uuid,
            DocumentModel.owner_id == owner_id,
        )
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        db_document = result.scalar_one_or_none()
        return self._to_domain(db_document) if db_document else None

    async def update(self, document: "Document") -> "Document":
        """Сохранение изменяемых полей документа"""
        stmt = (
            update(DocumentModel)
            .where(
                DocumentModel.uuid == document.uuid,
                DocumentModel.owner_id == document.owner_id,
            )
            .values(
                title=document.title,
                is_archived=document.is_archived,
                updated_at=document.updated_at
            )
        )

        await self.session.execute(stmt)
        return document

    async def get_with_latest_version(
        self,
        document_uuid: uuid.UUID,
        owner_id: uuid.UUID
    ) -> Optional[Tuple["Document", "DocumentVersion"]]:
        """Документ владельца вместе с последней версией"""
        result = await self.session.execute(
            _with_latest_version().where(
                DocumentModel.uuid == document_uuid,
                DocumentModel.owner_id == owner_id,
            )
        )
        row = result.one_or_none()
        if row is None:
            return None
        return self._to_domain(row[0]), DocumentVersionRepository.to_domain(row[1])

    async def list_with_latest_version(
        self,
        owner_id: uuid.UUID,
        include_archived: bool,
        after: Optional[uuid.UUID],
        limit: int
    ) -> List[Tuple["Document", "DocumentVersion"]]:
        """Документы владельца по возрастанию uuid, строго после курсора"""
        stmt = _with_latest_version().where(DocumentModel.owner_id == owner_id)

        if not include_archived:
            stmt = stmt.where(DocumentModel.is_archived.is_(False))

        if after is not None:
            stmt = stmt.where(DocumentModel.uuid > after)

        result = await self.session.execute(stmt.order_by(DocumentModel.uuid.asc()).limit(limit))
        return [
            (self._to_domain(db_document), DocumentVersionRepository.to_domain(db_version))
            for db_document, db_version in result.all()
        ]

    def _to_domain(self, db_document: DocumentModel) -> "Document":
        """Преобразование модели БД в доменную сущность"""
        from docvault.domains.documents.entities import Document

        return Document(
            uuid=db_document.uuid,
            title=db_document.title,
            owner_id=db_document.owner_id,
            is_archived=db_document.is_archived,
            created_at=db_document.created_at,
            updated_at=db_document.updated_at
        )


class DocumentVersionRepository:
    """Репозиторий версий документов: только вставка и чтение"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, version: "DocumentVersion") -> "DocumentVersion":
        """Создание новой версии документа"""
        db_version = DocumentVersionModel(
            uuid=version.uuid,
            document_id=version.document_id,
            version_number=version.version_number,
            content=version.content,
            created_at=version.created_at
        )

        self.session.add(db_version)
        await self.session.flush()
        return self.to_domain(db_version)

    async def get_max_version_number(self, document_id: uuid.UUID) -> int:
        """Текущий максимальный номер версии (0, если версий нет)"""
        result = await self.session.execute(
            select(func.coalesce(func.max(DocumentVersionModel.version_number), 0))
            .where(DocumentVersionModel.document_id == document_id)
        )
        return int(result.scalar_one())

    async def get_by_document(self, document_id: uuid.UUID) -> List["DocumentVersion"]:
        """Все версии документа, новые первыми"""
        result = await self.session.execute(
            select(DocumentVersionModel)
            .where(DocumentVersionModel.document_id == document_id)
            .order_by(DocumentVersionModel.version_number.desc())
        )
        return [self.to_domain(version) for version in result.scalars().all()]

    async def get_version_by_number(
        self,
        document_id: uuid.UUID,
        version_number: int
    ) -> Optional["DocumentVersion"]:
        """Получение версии по номеру"""
        result = await self.session.execute(
            select(DocumentVersionModel)
            .where(
                and_(
                    DocumentVersionModel.document_id == document_id,
                    DocumentVersionModel.version_number == version_number
                )
            )
        )
        db_version = result.scalar_one_or_none()
        return self.to_domain(db_version) if db_version else None

    @staticmethod
    def to_domain(db_version: DocumentVersionModel) -> "DocumentVersion":
        """Преобразование модели БД в доменную сущность"""
        from docvault.domains.documents.entities import DocumentVersion

        return DocumentVersion(
            uuid=db_version.uuid,
            document_id=db_version.document_id,
            version_number=db_version.version_number,
            content=db_version.content,
            created_at=db_version.created_at
        )
