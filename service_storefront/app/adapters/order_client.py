"""
Order client.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from .base import ResourceClient, build_query

IDEMPOTENCY_HEADER = "Idempotency-Key"


class OrderClient(ResourceClient):
    """Client for the /orders resource."""

    name = "order"

    async def list_orders(self, page: Optional[int] = None, limit: Optional[int] = None,
                          status: Optional[str] = None,
                          start_date: Optional[datetime] = None,
                          end_date: Optional[datetime] = None) -> Dict[str, Any]:
        params = build_query(page=page, limit=limit, status=status, startDate=start_date, endDate=end_date)
        return await self._call("GET", "/orders", "Failed to fetch orders", params=params)

    async def order_summary(self) -> Dict[str, Any]:
        return await self._call("GET", "/orders/summary", "Failed to fetch order summary")

    async def get_order(self, order_id: str) -> Dict[str, Any]:
        return await self._call("GET", f"/orders/{order_id}", "Failed to fetch order details")

    async def create_order(self, address_id: str, payment_method: str,
                           idempotency_key: Optional[str] = None) -> Dict[str, Any]:
        """Place an order for the current cart contents.

        The idempotency key, when given, is sent on the first attempt and
        unchanged on any retry after a token refresh.
        """
        payload: Dict[str, Any] = {"addressId": address_id, "paymentMethod": payment_method}
        headers = {IDEMPOTENCY_HEADER: idempotency_key} if idempotency_key else None
        return await self._call("POST", "/orders", "Failed to create order", json=payload, headers=headers)

    async def cancel_order(self, order_id: str, reason: Optional[str] = None) -> Dict[str, Any]:
        return await self._call(
            "POST", f"/orders/{order_id}/cancel", "Failed to cancel order",
            json={"reason": reason}
        )

    async def update_order_status(self, order_id: str, status: str) -> Dict[str, Any]:
        return await self._call(
            "PATCH", f"/orders/{order_id}/status", "Failed to update order status",
            json={"status": status}
        )
