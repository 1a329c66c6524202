"""
Tests for the storefront resource clients.
"""

import json
from datetime import datetime

import httpx
import pytest

from shared.errors import ApiError
from shared.test_helpers import make_envelope
from service_storefront.app.adapters import (
    AddressClient,
    CartClient,
    CategoryClient,
    OrderClient,
    PaymentClient,
    ProductClient,
    WishlistClient,
)
from service_storefront.app.adapters.base import build_query
from service_storefront.app.gateway import AuthenticatedGateway


class RecordingBackend:
    """Answers every request with a canned envelope and keeps the requests."""

    def __init__(self):
        self.requests = []
        self.responses = {}

    def respond(self, path: str, status_code: int, body):
        self.responses[path] = (status_code, body)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path[len("/api"):]
        status_code, body = self.responses.get(path, (200, make_envelope({"ok": True})))
        return httpx.Response(status_code, json=body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


@pytest.fixture
def recorder():
    return RecordingBackend()


@pytest.fixture
def resource_gateway(recorder, store, metrics):
    client = httpx.AsyncClient(base_url="http://backend.test/api", transport=httpx.MockTransport(recorder))
    return AuthenticatedGateway(store, http_client=client, metrics=metrics)


class TestBuildQuery:

    def test_drops_unset_values(self):
        assert build_query(page=1, search=None) == {"page": "1"}

    def test_booleans_are_lowercase(self):
        assert build_query(isActive=False) == {"isActive": "false"}

    def test_datetimes_are_iso(self):
        assert build_query(startDate=datetime(2024, 5, 1, 12, 0)) == {"startDate": "2024-05-01T12:00:00"}

    def test_empty_query_is_none(self):
        assert build_query(page=None) is None


class TestCategoryClient:

    @pytest.mark.asyncio
    async def test_list_categories_query(self, resource_gateway, recorder):
        await CategoryClient(resource_gateway).list_categories(page=2, limit=10, is_active=True)

        assert recorder.last.method == "GET"
        assert recorder.last.url.path == "/api/categories"
        assert dict(recorder.last.url.params) == {"page": "2", "limit": "10", "isActive": "true"}
        assert recorder.last.headers["authorization"] == "Bearer T1"

    @pytest.mark.asyncio
    async def test_active_categories_without_data_fails(self, resource_gateway, recorder):
        recorder.respond("/categories/active", 200, make_envelope())

        with pytest.raises(ApiError) as exc_info:
            await CategoryClient(resource_gateway).active_categories()

        assert exc_info.value.message == "Failed to fetch active categories"

    @pytest.mark.asyncio
    async def test_update_category_uses_put(self, resource_gateway, recorder):
        await CategoryClient(resource_gateway).update_category("c1", {"name": "Rings"})

        assert recorder.last.method == "PUT"
        assert recorder.last.url.path == "/api/categories/c1"
        assert recorder.last_json() == {"name": "Rings"}

    @pytest.mark.asyncio
    async def test_server_error_message_is_surfaced(self, resource_gateway, recorder):
        recorder.respond("/categories/c9", 404, make_envelope(error_message="Category not found", status_code=404))

        with pytest.raises(ApiError) as exc_info:
            await CategoryClient(resource_gateway).get_category("c9")

        assert exc_info.value.message == "Category not found"
        assert exc_info.value.status_code == 404


class TestProductClient:

    @pytest.mark.asyncio
    async def test_list_products_filters(self, resource_gateway, recorder):
        await ProductClient(resource_gateway).list_products(categoryId="c1", minPrice=10, page=None)

        assert dict(recorder.last.url.params) == {"categoryId": "c1", "minPrice": "10"}

    @pytest.mark.asyncio
    async def test_create_product_is_multipart(self, resource_gateway, recorder):
        await ProductClient(resource_gateway).create_product(
            {"name": "Ring", "price": 99.5, "isActive": True, "salePrice": None},
            [("ring.png", b"\x89PNG", "image/png")]
        )

        request = recorder.last
        content_type = request.headers["content-type"]
        assert content_type.startswith("multipart/form-data; boundary=")
        body = request.content
        assert b'name="name"' in body and b"Ring" in body
        assert b'name="isActive"\r\n\r\ntrue' in body
        assert b"salePrice" not in body
        assert b'name="images"; filename="ring.png"' in body
        assert request.headers["authorization"] == "Bearer T1"

    @pytest.mark.asyncio
    async def test_update_product_without_images_is_form_encoded(self, resource_gateway, recorder):
        await ProductClient(resource_gateway).update_product("p1", {"stock": 3})

        assert recorder.last.method == "PUT"
        assert recorder.last.headers["content-type"] == "application/x-www-form-urlencoded"
        assert recorder.last.content == b"stock=3"

    @pytest.mark.asyncio
    async def test_products_by_category_path(self, resource_gateway, recorder):
        await ProductClient(resource_gateway).products_by_category("c1", page=1)

        assert recorder.last.url.path == "/api/products/category/c1"


class TestCartAndWishlistClients:

    @pytest.mark.asyncio
    async def test_add_to_cart(self, resource_gateway, recorder):
        await CartClient(resource_gateway).add_item("p1", 2)

        assert recorder.last.method == "POST"
        assert recorder.last.url.path == "/api/cart/add"
        assert recorder.last.headers["content-type"] == "application/json"
        assert recorder.last_json() == {"productId": "p1", "quantity": 2}

    @pytest.mark.asyncio
    async def test_remove_from_cart_sends_body_with_delete(self, resource_gateway, recorder):
        await CartClient(resource_gateway).remove_item("p1")

        assert recorder.last.method == "DELETE"
        assert recorder.last.url.path == "/api/cart/remove"
        assert recorder.last_json() == {"productId": "p1"}

    @pytest.mark.asyncio
    async def test_wishlist_sorting(self, resource_gateway, recorder):
        await WishlistClient(resource_gateway).get_wishlist(sort_by="createdAt", sort_order="desc")

        assert dict(recorder.last.url.params) == {"sortBy": "createdAt", "sortOrder": "desc"}

    @pytest.mark.asyncio
    async def test_cart_failure_default_message(self, resource_gateway, recorder):
        recorder.respond("/cart", 500, {})

        with pytest.raises(ApiError) as exc_info:
            await CartClient(resource_gateway).get_cart()

        assert exc_info.value.message == "Failed to fetch cart items"
        assert exc_info.value.status_code == 500


class TestOrderClient:

    @pytest.mark.asyncio
    async def test_create_order_with_idempotency_key(self, resource_gateway, recorder):
        await OrderClient(resource_gateway).create_order("a1", "CARD", idempotency_key="order-1")

        assert recorder.last.headers["idempotency-key"] == "order-1"
        assert recorder.last_json() == {"addressId": "a1", "paymentMethod": "CARD"}

    @pytest.mark.asyncio
    async def test_create_order_without_key(self, resource_gateway, recorder):
        await OrderClient(resource_gateway).create_order("a1", "CARD")

        assert "idempotency-key" not in recorder.last.headers

    @pytest.mark.asyncio
    async def test_list_orders_date_range(self, resource_gateway, recorder):
        await OrderClient(resource_gateway).list_orders(
            status="PENDING",
            start_date=datetime(2024, 1, 1),
            end_date=datetime(2024, 2, 1)
        )

        assert dict(recorder.last.url.params) == {
            "status": "PENDING",
            "startDate": "2024-01-01T00:00:00",
            "endDate": "2024-02-01T00:00:00",
        }

    @pytest.mark.asyncio
    async def test_update_status_uses_patch(self, resource_gateway, recorder):
        await OrderClient(resource_gateway).update_order_status("o1", "SHIPPED")

        assert recorder.last.method == "PATCH"
        assert recorder.last.url.path == "/api/orders/o1/status"


class TestAddressAndPaymentClients:

    @pytest.mark.asyncio
    async def test_set_default_address(self, resource_gateway, recorder):
        await AddressClient(resource_gateway).set_default_address("a1")

        assert recorder.last.method == "PATCH"
        assert recorder.last.url.path == "/api/addresses/a1/set-default"

    @pytest.mark.asyncio
    async def test_payment_intent_omits_unset_fields(self, resource_gateway, recorder):
        await PaymentClient(resource_gateway).create_payment_intent(order_id="o1")

        assert recorder.last.url.path == "/api/payments/create-payment-intent"
        assert recorder.last_json() == {"orderId": "o1"}

    @pytest.mark.asyncio
    async def test_checkout_session(self, resource_gateway, recorder):
        data = await PaymentClient(resource_gateway).create_checkout_session(
            "https://shop.test/success", "https://shop.test/cancel"
        )

        assert data == {"ok": True}
        assert recorder.last_json() == {
            "successUrl": "https://shop.test/success",
            "cancelUrl": "https://shop.test/cancel",
        }
