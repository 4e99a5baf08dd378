from docvault.domains.documents.entities import Document, DocumentVersion
from docvault.domains.documents.pagination import Page
from docvault.domains.documents.schemas import (
    DocumentCreate, DocumentRename, DocumentVersionCreate, DocumentResponse,
    DocumentVersionResponse, DocumentCreatedResponse, DocumentWithLatestVersionResponse,
    DocumentEnvelope, DocumentVersionEnvelope, DocumentVersionListResponse,
    DocumentListResponse
)
from docvault.domains.documents.services import DocumentService, DocumentVersionService

__all__ = [
    "Document", "DocumentVersion", "Page",
    "DocumentCreate", "DocumentRename", "DocumentVersionCreate", "DocumentResponse",
    "DocumentVersionResponse", "DocumentCreatedResponse", "DocumentWithLatestVersionResponse",
    "DocumentEnvelope", "DocumentVersionEnvelope", "DocumentVersionListResponse",
    "DocumentListResponse",
    "DocumentService", "DocumentVersionService"
]
