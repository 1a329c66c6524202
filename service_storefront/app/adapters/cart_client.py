"""
Cart client.
"""

from typing import Any, Dict, Optional

from .base import ResourceClient, build_query


class CartClient(ResourceClient):
    """Client for the /cart resource."""

    name = "cart"

    async def get_cart(self, page: Optional[int] = None, limit: Optional[int] = None) -> Dict[str, Any]:
        params = build_query(page=page, limit=limit)
        return await self._call("GET", "/cart", "Failed to fetch cart items", params=params)

    async def add_item(self, product_id: str, quantity: int) -> Dict[str, Any]:
        return await self._call(
            "POST", "/cart/add", "Failed to add item to cart",
            json={"productId": product_id, "quantity": quantity}
        )

    async def update_item(self, product_id: str, quantity: int) -> Dict[str, Any]:
        return await self._call(
            "PUT", "/cart/update", "Failed to update cart item",
            json={"productId": product_id, "quantity": quantity}
        )

    async def remove_item(self, product_id: str) -> Dict[str, Any]:
        return await self._call(
            "DELETE", "/cart/remove", "Failed to remove item from cart",
            json={"productId": product_id}
        )

    async def clear_cart(self) -> Dict[str, Any]:
        return await self._call("DELETE", "/cart/clear", "Failed to clear cart")
