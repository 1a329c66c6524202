"""
User-initiated authentication flows.
"""

from typing import Any, Dict, Optional, TYPE_CHECKING

from .base import ResourceClient
from ..session.credential_store import CredentialStore
from ..session.models import LoginResult, Session

if TYPE_CHECKING:
    from ..gateway.request_gateway import AuthenticatedGateway


class AuthActions(ResourceClient):
    """Login, registration, verification and logout against /auth."""

    name = "auth"

    def __init__(self, gateway: "AuthenticatedGateway", credential_store: CredentialStore):
        super().__init__(gateway)
        self.credential_store = credential_store

    async def login(self, email: str, password: str) -> Session:
        data = await self._call(
            "POST", "/auth/login", "Login failed",
            json={"email": email.strip().lower(), "password": password}
        )
        return self.credential_store.set_login(LoginResult.model_validate(data))

    async def register(self, name: str, email: str, password: str) -> Dict[str, Any]:
        return await self._call(
            "POST", "/auth/register", "Registration failed",
            json={"name": name.strip(), "email": email.strip().lower(), "password": password}
        )

    async def verify_email(self, email: str, code: str) -> Dict[str, Any]:
        return await self._call(
            "POST", "/auth/verify-email", "Verification failed",
            json={"email": email, "code": code}
        )

    async def resend_verification_code(self, email: str) -> Dict[str, Any]:
        return await self._call(
            "POST", "/auth/resend-verification-code", "Resend verification code failed",
            json={"email": email}
        )

    async def forgot_password(self, email: str) -> Dict[str, Any]:
        return await self._call(
            "POST", "/auth/forgot-password", "Forgot password failed",
            json={"email": email}
        )

    async def check_verification_code(self, email: str, code: str) -> Dict[str, Any]:
        return await self._call(
            "POST", "/auth/check-verification-code", "Check verification code failed",
            json={"email": email, "code": code}
        )

    async def reset_password(self, email: str, code: str, new_password: str) -> Dict[str, Any]:
        return await self._call(
            "POST", "/auth/reset-password", "Reset password failed",
            json={"email": email, "code": code, "newPassword": new_password}
        )

    async def logout(self) -> Optional[Dict[str, Any]]:
        """Log out on the server; the local session is cleared either way."""
        try:
            return await self._call("POST", "/auth/logout", "Logout failed")
        finally:
            self.credential_store.set_logout()
