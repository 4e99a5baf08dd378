import uuid
from datetime import datetime, timedelta
from typing import Optional

from docvault.core.timeutils import as_utc, utc_now


class Document:
    """Сущность документа домена Documents"""

    def __init__(
        self,
        uuid: uuid.UUID,
        title: str,
        owner_id: uuid.UUID,
        is_archived: bool = False,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.title = title
        self.owner_id = owner_id
        self.is_archived = is_archived
        self.created_at = as_utc(created_at) if created_at else utc_now()
        self.updated_at = as_utc(updated_at) if updated_at else self.created_at

    def rename(self, new_title: str) -> None:
        """Обновление заголовка документа"""
        self.title = new_title
        self.touch()

    def set_archived(self, archived: bool) -> None:
        """Архивация / разархивация (повторная установка того же значения тоже обновляет метку)"""
        self.is_archived = archived
        self.touch()

    def touch(self) -> None:
        # updated_at строго возрастает, даже если часы не успели сдвинуться
        self.updated_at = max(utc_now(), self.updated_at + timedelta(microseconds=1))

    @classmethod
    def create_document(cls, title: str, owner_id: uuid.UUID) -> "Document":
        """Создание нового документа"""
        now = utc_now()
        return cls(
            uuid=uuid.uuid4(),
            title=title,
            owner_id=owner_id,
            is_archived=False,
            created_at=now,
            updated_at=now
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Document):
            return False
        return self.uuid == other.uuid

    def __repr__(self) -> str:
        return f"Document(uuid={self.uuid}, title={self.title}, archived={self.is_archived})"


class DocumentVersion:
    """Неизменяемый снимок содержимого документа"""

    def __init__(
        self,
        uuid: uuid.UUID,
        document_id: uuid.UUID,
        version_number: int,
        content: str,
        created_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.document_id = document_id
        self.version_number = version_number
        self.content = content
        self.created_at = as_utc(created_at) if created_at else utc_now()

    @classmethod
    def create_version(
        cls,
        document_id: uuid.UUID,
        content: str,
        version_number: int
    ) -> "DocumentVersion":
        """Создание новой версии документа"""
        return cls(
            uuid=uuid.uuid4(),
            document_id=document_id,
            version_number=version_number,
            content=content
        )

    @classmethod
    def first_version(cls, document: Document, content: str) -> "DocumentVersion":
        return cls.create_version(document_id=document.uuid, content=content, version_number=1)

    def __eq__(self, other) -> bool:
        if not isinstance(other, DocumentVersion):
            return False
        return self.uuid == other.uuid

    def __repr__(self) -> str:
        return f"DocumentVersion(uuid={self.uuid}, document_id={self.document_id}, version={self.version_number})"
