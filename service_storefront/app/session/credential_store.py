"""
Credential store holding the client's current session.
"""

from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from shared.logging import get_logger, set_user_context
from .models import LoginResult, Session, UserIdentity
from .storage import MemoryStorage, SessionStorage

AUTH_TOKEN_KEY = "auth_token"
AUTH_STORAGE_KEY = "auth_storage"


class CredentialStore:
    """Owns the session and its persisted copy.

    Only login/logout (user initiated, or driven by the request gateway)
    mutate the store; every other caller reads ``session`` or
    ``access_token``. State is reconciled from storage on construction
    without touching the network.
    """

    def __init__(self, storage: Optional[SessionStorage] = None):
        self.storage = storage or MemoryStorage()
        self.logger = get_logger("storefront.session.credential_store")
        self._session = Session.empty()
        self.hydrate()

    def hydrate(self) -> Session:
        """Rebuild the in-memory session from storage."""
        token = self.storage.load(AUTH_TOKEN_KEY) or None
        identity = None
        if token:
            saved_user = self.storage.load(AUTH_STORAGE_KEY)
            if saved_user:
                try:
                    identity = UserIdentity.model_validate(saved_user)
                except PydanticValidationError as e:
                    self.logger.warning("Discarding malformed persisted identity", error=str(e))

        self._session = Session(
            authenticated=bool(token),
            identity=identity,
            access_credential=token,
        )
        self.logger.debug("Session hydrated", authenticated=self._session.authenticated)
        return self._session

    @property
    def session(self) -> Session:
        return self._session

    @property
    def access_token(self) -> Optional[str]:
        return self._session.access_credential

    @property
    def is_authenticated(self) -> bool:
        return self._session.authenticated

    @property
    def identity(self) -> Optional[UserIdentity]:
        return self._session.identity

    def set_login(self, result: LoginResult) -> Session:
        """Record a successful login or refresh.

        Refresh responses may omit the user; the current identity is kept
        in that case.
        """
        identity = result.user or self._session.identity

        self.storage.save(AUTH_TOKEN_KEY, result.access_token)
        if identity is not None:
            self.storage.save(AUTH_STORAGE_KEY, identity.model_dump(by_alias=True))

        self._session = Session(
            authenticated=True,
            identity=identity,
            access_credential=result.access_token,
        )
        set_user_context(identity.id if identity else None)
        self.logger.info(
            "Session established",
            user_id=identity.id if identity else None
        )
        return self._session

    def set_logout(self) -> Session:
        """Clear the session. Safe to call on an already-cleared store."""
        was_authenticated = self._session.authenticated

        self.storage.delete(AUTH_TOKEN_KEY)
        self.storage.delete(AUTH_STORAGE_KEY)
        self._session = Session.empty()
        set_user_context(None)

        if was_authenticated:
            self.logger.info("Session cleared")
        return self._session
