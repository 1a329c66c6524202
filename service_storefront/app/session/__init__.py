"""
Client session state: identity, access credential, and its persistence.
"""

from .models import Session, UserIdentity, LoginResult
from .storage import SessionStorage, MemoryStorage, JsonFileStorage
from .credential_store import CredentialStore

__all__ = [
    "Session",
    "UserIdentity",
    "LoginResult",
    "SessionStorage",
    "MemoryStorage",
    "JsonFileStorage",
    "CredentialStore",
]
