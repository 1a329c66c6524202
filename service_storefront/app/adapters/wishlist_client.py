"""
Wishlist client.
"""

from typing import Any, Dict, Optional

from .base import ResourceClient, build_query


class WishlistClient(ResourceClient):
    """Client for the /wishlist resource."""

    name = "wishlist"

    async def get_wishlist(self, page: Optional[int] = None, limit: Optional[int] = None,
                           sort_by: Optional[str] = None,
                           sort_order: Optional[str] = None) -> Dict[str, Any]:
        params = build_query(page=page, limit=limit, sortBy=sort_by, sortOrder=sort_order)
        return await self._call("GET", "/wishlist", "Failed to fetch wishlist items", params=params)

    async def add_item(self, product_id: str) -> Dict[str, Any]:
        return await self._call(
            "POST", "/wishlist/add", "Failed to add item to wishlist",
            json={"productId": product_id}
        )

    async def remove_item(self, product_id: str) -> Dict[str, Any]:
        return await self._call(
            "DELETE", "/wishlist/remove", "Failed to remove item from wishlist",
            json={"productId": product_id}
        )

    async def clear_wishlist(self) -> Dict[str, Any]:
        return await self._call("DELETE", "/wishlist/clear", "Failed to clear wishlist")
