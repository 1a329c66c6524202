"""
Cart state kept in sync with the /cart endpoints.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from shared.logging import get_logger
from ..adapters.cart_client import CartClient


class CartSummary(BaseModel):
    """Totals reported alongside the cart items."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    subtotal: float = 0
    discount: float = 0
    total: float = 0
    item_count: int = Field(default=0, alias="itemCount")


class CartState:
    """Mirror of the server cart.

    Every mutation is followed by a full refetch so ``items`` and
    ``summary`` always reflect what the server holds.
    """

    def __init__(self, cart_client: CartClient):
        self.cart_client = cart_client
        self.logger = get_logger("storefront.cart_state")

        self.is_open = False
        self.items: List[Dict[str, Any]] = []
        self.summary = CartSummary()

    @property
    def total_items(self) -> int:
        return len(self.items)

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.is_open = False

    def toggle(self) -> None:
        self.is_open = not self.is_open

    def _apply(self, payload: Dict[str, Any]) -> None:
        cart = payload.get("cart") or {}
        self.items = list(cart.get("items") or [])
        self.summary = CartSummary.model_validate(cart.get("summary") or {})

    async def refresh(self) -> None:
        """Reload items and summary from the server."""
        self._apply(await self.cart_client.get_cart())

    async def add_item(self, product_id: str, quantity: int) -> None:
        try:
            await self.cart_client.add_item(product_id, quantity)
            await self.refresh()
        except Exception as e:
            self.logger.error("Failed to add item to cart", product_id=product_id, error=str(e))
            raise
        self.is_open = True

    async def update_item(self, product_id: str, quantity: int) -> None:
        try:
            await self.cart_client.update_item(product_id, quantity)
            await self.refresh()
        except Exception as e:
            self.logger.error("Failed to update cart item", product_id=product_id, error=str(e))
            raise

    async def remove_item(self, product_id: str) -> None:
        try:
            await self.cart_client.remove_item(product_id)
            await self.refresh()
        except Exception as e:
            self.logger.error("Failed to remove item from cart", product_id=product_id, error=str(e))
            raise

    async def clear(self) -> None:
        try:
            await self.cart_client.clear_cart()
        except Exception as e:
            self.logger.error("Failed to clear cart", error=str(e))
            raise
        self.items = []
        self.summary = CartSummary()
