from pydantic import AliasChoices, BaseModel, Field, field_validator, ConfigDict
from typing import List, Optional
import uuid
from datetime import datetime


class DocumentCreate(BaseModel):
    """Схема для создания документа"""
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError('Title cannot be empty')
        return v


class DocumentRename(BaseModel):
    """Схема для переименования документа"""
    title: str = Field(..., min_length=1, max_length=200)

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError('Title cannot be empty')
        return v


class DocumentVersionCreate(BaseModel):
    """Схема для создания версии документа"""
    content: str = Field(..., min_length=1)


class DocumentResponse(BaseModel):
    """Схема для ответа с данными документа"""
    id: uuid.UUID = Field(validation_alias=AliasChoices("id", "uuid"))
    owner_id: uuid.UUID
    title: str
    is_archived: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DocumentVersionResponse(BaseModel):
    """Схема для ответа с данными версии документа"""
    id: uuid.UUID = Field(validation_alias=AliasChoices("id", "uuid"))
    document_id: uuid.UUID
    version_number: int
    content: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DocumentCreatedResponse(BaseModel):
    """Ответ на создание документа: документ и версия 1"""
    document: DocumentResponse
    version: DocumentVersionResponse


class DocumentWithLatestVersionResponse(BaseModel):
    """Документ с последней версией"""
    document: DocumentResponse
    latest_version: DocumentVersionResponse = Field(alias="latestVersion")

    model_config = ConfigDict(populate_by_name=True)


class DocumentEnvelope(BaseModel):
    document: DocumentResponse


class DocumentVersionEnvelope(BaseModel):
    version: DocumentVersionResponse


class DocumentVersionListResponse(BaseModel):
    """Схема для списка версий документа"""
    versions: List[DocumentVersionResponse]


class DocumentListResponse(BaseModel):
    """Страница документов с курсором на следующую"""
    items: List[DocumentWithLatestVersionResponse]
    next_cursor: Optional[str] = Field(None, alias="nextCursor")

    model_config = ConfigDict(populate_by_name=True)
