"""
Shared fixtures for storefront client tests.
"""

import asyncio
from typing import List, Optional, Tuple

import httpx
import pytest
from prometheus_client import CollectorRegistry

from shared.metrics import MetricsCollector
from shared.test_helpers import make_envelope, test_data_factory
from service_storefront.app.gateway import AuthenticatedGateway
from service_storefront.app.session import CredentialStore, LoginResult, MemoryStorage, UserIdentity

BASE_URL = "http://backend.test/api"
SHOPPER = test_data_factory.create_test_users()[0]


class FakeBackend:
    """Programmable stand-in for the storefront backend.

    Business endpoints accept only ``Bearer <valid_token>``. A successful
    refresh rotates ``valid_token`` to ``next_token``.
    """

    def __init__(self):
        self.valid_token = "T1"
        self.next_token = "T2"
        self.refresh_status = 200
        self.refresh_delay = 0.01
        self.refresh_omits_token = False
        self.refresh_user = SHOPPER.to_wire()
        self.logout_status = 200
        self.logout_error: Optional[Exception] = None
        self.reject_all = False
        self.refresh_calls = 0
        self.logout_calls = 0
        self.requests: List[httpx.Request] = []

    def seen(self, path: str) -> List[Tuple[str, Optional[str]]]:
        return [
            (r.url.path, r.headers.get("authorization"))
            for r in self.requests
            if r.url.path.endswith(path)
        ]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path[len("/api"):]

        if path == "/auth/refresh-token":
            self.refresh_calls += 1
            await asyncio.sleep(self.refresh_delay)
            if self.refresh_status != 200:
                return httpx.Response(
                    self.refresh_status,
                    json=make_envelope(error_message="Invalid or expired refresh token",
                                       status_code=self.refresh_status)
                )
            if self.refresh_omits_token:
                return httpx.Response(200, json=make_envelope({"message": "refreshed"}))
            self.valid_token = self.next_token
            return httpx.Response(200, json=make_envelope({
                "access_token": self.next_token,
                "user": self.refresh_user,
                "message": "Access token refreshed successfully",
            }))

        if path == "/auth/logout":
            self.logout_calls += 1
            if self.logout_error is not None:
                raise self.logout_error
            if self.logout_status != 200:
                return httpx.Response(self.logout_status, json=make_envelope(error_message="Logout failed",
                                                                             status_code=self.logout_status))
            return httpx.Response(200, json=make_envelope({"message": "Logout successful"}))

        if path in ("/auth/login", "/auth/register"):
            return httpx.Response(401, json=make_envelope(error_message="Invalid credentials", status_code=401))

        if self.reject_all or request.headers.get("authorization") != f"Bearer {self.valid_token}":
            return httpx.Response(401, json=make_envelope(error_message="Access token expired", status_code=401))

        if path == "/boom":
            return httpx.Response(500, json=make_envelope(error_message="Internal error", status_code=500))

        return httpx.Response(200, json=make_envelope({"path": path}))


@pytest.fixture
def backend():
    """Fake backend with a refreshable session."""
    return FakeBackend()


@pytest.fixture
def registry():
    """Isolated Prometheus registry."""
    return CollectorRegistry()


@pytest.fixture
def metrics(registry):
    return MetricsCollector("storefront", registry)


@pytest.fixture
def store():
    """Credential store logged in with the initial token."""
    credential_store = CredentialStore(MemoryStorage())
    credential_store.set_login(LoginResult(
        access_token="T1",
        user=UserIdentity.model_validate(SHOPPER.to_wire()),
    ))
    return credential_store


@pytest.fixture
def http_client(backend):
    return httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(backend))


@pytest.fixture
def gateway(store, http_client, metrics):
    """Gateway wired to the fake backend."""
    return AuthenticatedGateway(store, http_client=http_client, metrics=metrics, refresh_timeout=2.0)
