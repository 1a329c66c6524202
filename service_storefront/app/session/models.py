"""
Session data models.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class UserIdentity(BaseModel):
    """Authenticated user as returned by the auth endpoints."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str = ""
    email: str = ""
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    roles: List[str] = Field(default_factory=list)
    is_verified: bool = Field(default=False, alias="isVerified")
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")


class LoginResult(BaseModel):
    """Payload of a successful login or refresh."""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    user: Optional[UserIdentity] = None
    message: Optional[str] = None


class Session(BaseModel):
    """Snapshot of the client's authentication state."""

    model_config = ConfigDict(frozen=True)

    authenticated: bool = False
    identity: Optional[UserIdentity] = None
    access_credential: Optional[str] = None

    @classmethod
    def empty(cls) -> "Session":
        return cls()
