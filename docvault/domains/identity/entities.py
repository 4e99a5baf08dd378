import uuid
from datetime import datetime
from typing import Optional

from docvault.core.timeutils import as_utc, utc_now


class User:
    """Сущность пользователя домена Identity"""

    def __init__(
        self,
        uuid: uuid.UUID,
        email: str,
        display_name: str,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.email = email
        self.display_name = display_name
        self.created_at = as_utc(created_at) if created_at else utc_now()
        self.updated_at = as_utc(updated_at) if updated_at else self.created_at

    @classmethod
    def create_user(cls, email: str, display_name: str) -> "User":
        """Создание нового пользователя"""
        return cls(
            uuid=uuid.uuid4(),
            email=email.lower(),
            display_name=display_name
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, User):
            return False
        return self.uuid == other.uuid

    def __repr__(self) -> str:
        return f"User(uuid={self.uuid}, email={self.email})"
