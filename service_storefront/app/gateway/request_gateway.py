"""
Authenticated request gateway for the storefront backend.
"""

import asyncio
import time
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple, TYPE_CHECKING
from urllib.parse import urlsplit

import httpx

from shared.logging import get_logger, request_id_var
from shared.errors import RefreshFailedError
from shared.metrics import MetricsCollector, get_metrics_collector
from ..adapters.auth_client import RemoteAuthClient
from ..session.credential_store import CredentialStore

if TYPE_CHECKING:
    from types import TracebackType

REQUEST_ID_HEADER = "X-Request-ID"

# A 401 from these endpoints is final: never refresh on them
EXCLUDED_AUTH_PATHS: Tuple[str, ...] = (
    "/auth/login",
    "/auth/register",
    "/auth/refresh-token",
)


@dataclass(frozen=True)
class RequestAttempt:
    """One outbound call as issued by the caller.

    Retries reuse the same record through ``mark_retried()`` so headers,
    including any idempotency key, go out unchanged.
    """

    method: str
    path: str
    params: Optional[Dict[str, Any]] = None
    headers: Dict[str, str] = field(default_factory=dict)
    json: Any = None
    content: Optional[bytes] = None
    data: Optional[Dict[str, Any]] = None
    files: Any = None
    retried: bool = False

    def mark_retried(self) -> "RequestAttempt":
        return replace(self, retried=True)

    @property
    def endpoint(self) -> str:
        return urlsplit(self.path).path.rstrip("/") or "/"

    @property
    def has_raw_body(self) -> bool:
        """Multipart or byte payloads carry their own content type."""
        return self.files is not None or isinstance(self.content, (bytes, bytearray))

    def targets(self, paths: Tuple[str, ...]) -> bool:
        return any(self.endpoint.endswith(path) for path in paths)


class AuthenticatedGateway:
    """HTTP client wrapper with bearer auth and single-flight token refresh."""

    def __init__(self,
                 credential_store: CredentialStore,
                 base_url: Optional[str] = None,
                 http_client: Optional[httpx.AsyncClient] = None,
                 auth_client: Optional[RemoteAuthClient] = None,
                 timeout: float = 10.0,
                 refresh_timeout: float = 10.0,
                 metrics: Optional[MetricsCollector] = None):
        if http_client is None:
            if base_url is None:
                raise ValueError("Either base_url or http_client is required")
            http_client = httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=timeout)
            self._owns_client = True
        else:
            self._owns_client = False

        self.http_client = http_client
        self.credential_store = credential_store
        self.auth_client = auth_client or RemoteAuthClient(http_client)
        self.refresh_timeout = refresh_timeout
        self.metrics = metrics or get_metrics_collector("storefront")
        self.logger = get_logger("storefront.gateway")

        # Shared in-flight refresh; at most one exists at a time
        self._refresh_task: Optional[asyncio.Task] = None

    async def __aenter__(self) -> "AuthenticatedGateway":
        return self

    async def __aexit__(self, exc_type, exc: Optional[BaseException],
                        tb: Optional["TracebackType"]) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this gateway created it."""
        if self._owns_client:
            await self.http_client.aclose()

    @property
    def refresh_in_flight(self) -> bool:
        return self._refresh_task is not None

    async def request(self, method: str, path: str, *,
                      params: Optional[Dict[str, Any]] = None,
                      headers: Optional[Dict[str, str]] = None,
                      json: Any = None,
                      content: Optional[bytes] = None,
                      data: Optional[Dict[str, Any]] = None,
                      files: Any = None) -> httpx.Response:
        """Issue a request to the backend.

        Returns the response for any 2xx status. Other statuses raise
        ``httpx.HTTPStatusError``; a failed refresh raises
        ``RefreshFailedError``; transport errors propagate as raised by httpx.
        """
        attempt = RequestAttempt(
            method=method.upper(),
            path=path,
            params=params,
            headers=dict(headers or {}),
            json=json,
            content=content,
            data=data,
            files=files,
        )
        return await self.send(attempt)

    async def get(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("DELETE", path, **kwargs)

    def prepare_headers(self, attempt: RequestAttempt) -> httpx.Headers:
        """Build outbound headers from the current session."""
        headers = httpx.Headers(attempt.headers)

        token = self.credential_store.access_token
        if token:
            headers["Authorization"] = f"Bearer {token}"

        request_id = request_id_var.get()
        if request_id and REQUEST_ID_HEADER not in headers:
            headers[REQUEST_ID_HEADER] = request_id

        if not attempt.has_raw_body:
            headers["Content-Type"] = "application/json"

        return headers

    async def send(self, attempt: RequestAttempt) -> httpx.Response:
        """Dispatch an attempt and apply the response policy."""
        response = await self._dispatch(attempt)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            if response.status_code != 401:
                raise
            return await self._handle_unauthorized(attempt, exc)

        return response

    async def _dispatch(self, attempt: RequestAttempt) -> httpx.Response:
        start_time = time.time()
        try:
            response = await self.http_client.request(
                attempt.method,
                attempt.path,
                params=attempt.params,
                headers=self.prepare_headers(attempt),
                json=attempt.json,
                content=attempt.content,
                data=attempt.data,
                files=attempt.files,
            )
        except httpx.TransportError as e:
            self.metrics.record_error(type(e).__name__)
            self.logger.warning("Backend unreachable", method=attempt.method, path=attempt.endpoint, error=str(e))
            raise
        duration = time.time() - start_time

        self.metrics.record_http_request(
            method=attempt.method,
            endpoint=attempt.endpoint,
            status_code=response.status_code,
            duration=duration
        )
        self.logger.debug(
            "Backend request",
            method=attempt.method,
            path=attempt.endpoint,
            status_code=response.status_code,
            retried=attempt.retried,
            duration_ms=round(duration * 1000, 2)
        )
        return response

    async def _handle_unauthorized(self, attempt: RequestAttempt,
                                   exc: httpx.HTTPStatusError) -> httpx.Response:
        if attempt.retried or attempt.targets(EXCLUDED_AUTH_PATHS):
            self.logger.warning(
                "Authentication rejected, clearing session",
                path=attempt.endpoint,
                retried=attempt.retried
            )
            self._clear_session("unauthorized")
            raise exc

        retry_attempt = attempt.mark_retried()
        await self._await_refresh()

        try:
            response = await self.send(retry_attempt)
        except httpx.HTTPStatusError:
            self.metrics.increment_counter("auth_retries_total", outcome="failed")
            raise

        self.metrics.increment_counter("auth_retries_total", outcome="succeeded")
        return response

    async def _await_refresh(self) -> str:
        """Join the in-flight refresh, starting one if none is running.

        The check-or-create step has no suspension point, so every caller
        that gets here while a refresh is pending shares the same task.
        """
        task = self._refresh_task
        if task is None:
            task = asyncio.ensure_future(self._refresh_session())
            task.add_done_callback(self._release_refresh)
            self._refresh_task = task

        # A cancelled waiter must not cancel the refresh other callers share
        return await asyncio.shield(task)

    def _release_refresh(self, task: asyncio.Task) -> None:
        if self._refresh_task is task:
            self._refresh_task = None
        # Waiters may all have been cancelled; mark the outcome as retrieved
        if not task.cancelled():
            task.exception()

    async def _refresh_session(self) -> str:
        """Run one refresh and apply its outcome to the session."""
        self.logger.info("Refreshing access token")
        try:
            with self.metrics.time_operation("auth_refresh_duration_seconds"):
                result = await self._call_refresh()
        except RefreshFailedError as e:
            self.metrics.increment_counter("auth_refresh_total", status="failed")
            self.logger.warning("Token refresh failed", **e.to_response().model_dump())
            await self._teardown_session()
            raise
        else:
            self.credential_store.set_login(result)
            self.metrics.increment_counter("auth_refresh_total", status="succeeded")
            self.logger.info("Access token refreshed")
            return result.access_token

    async def _call_refresh(self):
        try:
            return await asyncio.wait_for(self.auth_client.refresh(), timeout=self.refresh_timeout)
        except asyncio.TimeoutError as e:
            raise RefreshFailedError(
                "Token refresh timed out",
                details={"timeout": self.refresh_timeout}
            ) from e
        except httpx.HTTPError as e:
            raise RefreshFailedError(
                "Auth service unavailable",
                details={"http_error": str(e)}
            ) from e

    async def _teardown_session(self) -> None:
        """Best-effort server logout, then clear the local session."""
        try:
            await asyncio.wait_for(self.auth_client.logout(), timeout=self.refresh_timeout)
        except Exception as e:
            self.logger.warning("Logout after failed refresh did not complete", error=str(e))

        self._clear_session("refresh_failed")

    def _clear_session(self, reason: str) -> None:
        self.credential_store.set_logout()
        self.metrics.increment_counter("session_cleared_total", reason=reason)
