from sqlalchemy import (
    Boolean, CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, Text,
    UniqueConstraint, Uuid,
)

from docvault.core.timeutils import utc_now
from docvault.db.base import BaseModel


class Document(BaseModel):
    __tablename__ = "documents"
    __table_args__ = (
        Index("ix_documents_owner_id_uuid", "owner_id", "uuid"),
    )

    title = Column(String(200), nullable=False)
    is_archived = Column(Boolean, nullable=False, default=False)
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.uuid"), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)


class DocumentVersion(BaseModel):
    __tablename__ = "document_versions"
    # Версии только добавляются: номер уникален в пределах документа
    __table_args__ = (
        UniqueConstraint("document_id", "version_number", name="uq_document_versions_document_id_version_number"),
        CheckConstraint("version_number > 0", name="ck_document_versions_version_number_positive"),
    )

    document_id = Column(Uuid(as_uuid=True), ForeignKey("documents.uuid"), nullable=False)
    version_number = Column(Integer, nullable=False)
    content = Column(Text, nullable=False)
