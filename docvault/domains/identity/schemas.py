from pydantic import AliasChoices, BaseModel, EmailStr, Field, field_validator, ConfigDict
from datetime import datetime
import uuid


class UserCreate(BaseModel):
    """Схема для создания пользователя"""
    email: EmailStr
    display_name: str = Field(..., min_length=1, max_length=80, alias="displayName")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator('display_name')
    @classmethod
    def validate_display_name(cls, v):
        if not v.strip():
            raise ValueError('Display name cannot be empty')
        return v.strip()


class UserResponse(BaseModel):
    """Схема для ответа с данными пользователя"""
    id: uuid.UUID = Field(validation_alias=AliasChoices("id", "uuid"))
    email: str
    display_name: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserEnvelope(BaseModel):
    user: UserResponse
