from docvault.db.models.user import User
from docvault.db.models.document import Document, DocumentVersion

__all__ = [
    "User",
    "Document",
    "DocumentVersion",
]
