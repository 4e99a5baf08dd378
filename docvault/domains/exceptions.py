"""Доменные исключения.

Каждое исключение относится к одной из категорий ошибок сервиса
(NotFound, Conflict, ValidationError, Unavailable); HTTP-представление
задаётся в ``docvault.api.errors``.
"""

import uuid
from typing import Union


class DocVaultError(Exception):
    """Базовое исключение домена"""


class NotFoundError(DocVaultError):
    """Сущность отсутствует или принадлежит другому пользователю"""


class ConflictError(DocVaultError):
    """Нарушение уникальности"""


class ValidationError(DocVaultError):
    """Некорректные входные данные; проверяется до обращения к хранилищу"""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class UnavailableError(DocVaultError):
    """Таймаут хранилища или ожидания блокировки; повтор безопасен"""


class DocumentNotFoundError(NotFoundError):
    # Одно и то же сообщение для "нет такого" и "не ваш"
    def __init__(self, document_id: Union[uuid.UUID, str]) -> None:
        super().__init__("Document not found")
        self.document_id = str(document_id)


class VersionNotFoundError(DocumentNotFoundError):
    def __init__(self, document_id: Union[uuid.UUID, str], version_number: int) -> None:
        super().__init__(document_id)
        self.version_number = version_number


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: Union[uuid.UUID, str]) -> None:
        super().__init__("User not found")
        self.user_id = str(user_id)


class UserAlreadyExistsError(ConflictError):
    def __init__(self, email: str) -> None:
        super().__init__("Email already registered")
        self.email = email


class VersionConflictError(ConflictError):
    """Сработало ограничение уникальности (document_id, version_number)"""

    def __init__(self, document_id: Union[uuid.UUID, str]) -> None:
        super().__init__("Version number already allocated")
        self.document_id = str(document_id)


class InvalidCursorError(ValidationError):
    def __init__(self, cursor: str) -> None:
        super().__init__("cursor", "Invalid cursor")
        self.cursor = cursor


class InvalidContentError(ValidationError):
    def __init__(self, message: str = "Content cannot be empty") -> None:
        super().__init__("content", message)


class InvalidTitleError(ValidationError):
    def __init__(self, message: str = "Title must be 1-200 characters") -> None:
        super().__init__("title", message)


class StorageUnavailableError(UnavailableError):
    def __init__(self, operation: str, reason: str = "") -> None:
        super().__init__("Storage temporarily unavailable")
        self.operation = operation
        self.reason = reason


class AuthenticationError(DocVaultError):
    """Запрос не прошёл Access Guard; до ядра такие запросы не доходят"""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
