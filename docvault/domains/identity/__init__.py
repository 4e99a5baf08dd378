from docvault.domains.identity.entities import User
from docvault.domains.identity.schemas import UserCreate, UserResponse, UserEnvelope
from docvault.domains.identity.services import IdentityService

__all__ = [
    "User",
    "UserCreate", "UserResponse", "UserEnvelope",
    "IdentityService"
]
