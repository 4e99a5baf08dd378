import uuid

from sqlalchemy import Column, DateTime, Uuid

from docvault.core.db import Base
from docvault.core.timeutils import utc_now


class BaseModel(Base):
    __abstract__ = True

    uuid = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
