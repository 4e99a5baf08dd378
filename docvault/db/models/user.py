from sqlalchemy import Column, String, DateTime

from docvault.core.timeutils import utc_now
from docvault.db.base import BaseModel


class User(BaseModel):
    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=False)
    display_name = Column(String(80), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
