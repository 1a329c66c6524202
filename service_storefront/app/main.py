"""
Storefront client for the e-commerce backend.
"""

from typing import Optional

import httpx
from prometheus_client import CollectorRegistry

from shared.config import StorefrontConfig, get_config
from shared.logging import configure_logging, get_logger
from shared.metrics import MetricsCollector, get_metrics_collector
from .session import CredentialStore, JsonFileStorage, MemoryStorage, SessionStorage
from .gateway import AuthenticatedGateway
from .adapters import (
    AddressClient,
    AuthActions,
    CartClient,
    CategoryClient,
    OrderClient,
    PaymentClient,
    ProductClient,
    RemoteAuthClient,
    WishlistClient,
)
from .cart import CartState


class StorefrontClient:
    """Wires the session, the request gateway and the resource clients."""

    def __init__(self,
                 config: Optional[StorefrontConfig] = None,
                 http_client: Optional[httpx.AsyncClient] = None,
                 storage: Optional[SessionStorage] = None,
                 metrics: Optional[MetricsCollector] = None,
                 configure_logs: bool = True):
        self.config = config or get_config()
        if configure_logs:
            configure_logging(self.config.service_name, self.config.log_level)
        self.logger = get_logger(f"{self.config.service_name}.client")
        if metrics is None:
            registry = CollectorRegistry() if self.config.enable_metrics else None
            metrics = get_metrics_collector(self.config.service_name, registry)
        self.metrics = metrics

        if storage is None:
            if self.config.session_file:
                storage = JsonFileStorage(self.config.session_file)
            else:
                storage = MemoryStorage()
        self.credential_store = CredentialStore(storage)

        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(
            base_url=self.config.backend_url.rstrip("/"),
            timeout=self.config.request_timeout,
        )

        self.remote_auth = RemoteAuthClient(self.http_client)
        self.gateway = AuthenticatedGateway(
            self.credential_store,
            http_client=self.http_client,
            auth_client=self.remote_auth,
            refresh_timeout=self.config.refresh_timeout,
            metrics=self.metrics,
        )

        self.auth = AuthActions(self.gateway, self.credential_store)
        self.categories = CategoryClient(self.gateway)
        self.products = ProductClient(self.gateway)
        self.cart = CartClient(self.gateway)
        self.wishlist = WishlistClient(self.gateway)
        self.orders = OrderClient(self.gateway)
        self.addresses = AddressClient(self.gateway)
        self.payments = PaymentClient(self.gateway)
        self.cart_state = CartState(self.cart)

        self.logger.info(
            "Storefront client initialized",
            backend_url=self.config.backend_url,
            authenticated=self.credential_store.is_authenticated
        )

    async def __aenter__(self) -> "StorefrontClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def metrics_snapshot(self) -> bytes:
        """Client metrics in Prometheus exposition format."""
        return self.metrics.export()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()


def create_storefront(config: Optional[StorefrontConfig] = None, **kwargs) -> StorefrontClient:
    """Create a storefront client."""
    return StorefrontClient(config=config, **kwargs)
