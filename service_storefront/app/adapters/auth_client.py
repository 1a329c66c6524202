"""
Remote auth service client.

Talks to the token endpoints directly on the shared HTTP client, bypassing
the request gateway so a refresh can never recurse into another refresh.
The refresh credential travels as a cookie held by the client.
"""

import httpx
from pydantic import ValidationError as PydanticValidationError

from shared.logging import get_logger
from shared.errors import ApiError, ExternalServiceError, RefreshFailedError
from ..session.models import LoginResult
from .envelope import error_message, parse_envelope

REFRESH_PATH = "/auth/refresh-token"
LOGOUT_PATH = "/auth/logout"


class RemoteAuthClient:
    """Client for the refresh and logout endpoints."""

    def __init__(self, http_client: httpx.AsyncClient):
        self.http_client = http_client
        self.logger = get_logger("storefront.auth_client")

    async def refresh(self) -> LoginResult:
        """Exchange the refresh cookie for a new access token."""
        try:
            response = await self.http_client.post(REFRESH_PATH)
        except httpx.HTTPError as e:
            self.logger.error("Refresh request failed", error=str(e))
            raise RefreshFailedError(
                "Auth service unavailable",
                details={"http_error": str(e)}
            ) from e

        if response.status_code != 200:
            raise RefreshFailedError(
                error_message(response) or f"Auth service error: {response.status_code}",
                details={"status_code": response.status_code}
            )

        try:
            envelope = parse_envelope(response)
        except ExternalServiceError as e:
            raise RefreshFailedError("Malformed refresh response", details=e.details) from e

        data = envelope.data if isinstance(envelope.data, dict) else {}
        if not data.get("access_token"):
            raise RefreshFailedError(
                "Refresh response did not include an access token",
                details={"status_code": response.status_code}
            )

        try:
            return LoginResult.model_validate(data)
        except PydanticValidationError as e:
            raise RefreshFailedError(
                "Malformed refresh response",
                details={"status_code": response.status_code, "error": str(e)}
            ) from e

    async def logout(self) -> None:
        """Revoke the server-side session."""
        try:
            response = await self.http_client.post(LOGOUT_PATH)
        except httpx.HTTPError as e:
            raise ApiError("Logout failed", details={"http_error": str(e)}) from e

        if not response.is_success:
            raise ApiError(
                error_message(response) or "Logout failed",
                status_code=response.status_code
            )
