"""
Payment client.

Payment sessions are created by the backend against the hosted payment
processor; this client only relays the requests.
"""

from typing import Any, Dict, Optional

from .base import ResourceClient


class PaymentClient(ResourceClient):
    """Client for the /payments resource."""

    name = "payment"

    async def create_payment_intent(self, order_id: Optional[str] = None,
                                    currency: Optional[str] = None) -> Dict[str, Any]:
        payload = {k: v for k, v in {"orderId": order_id, "currency": currency}.items() if v is not None}
        return await self._call(
            "POST", "/payments/create-payment-intent", "Failed to create payment intent",
            json=payload
        )

    async def get_payment_intent(self, payment_intent_id: str) -> Dict[str, Any]:
        return await self._call(
            "GET", f"/payments/payment-intent/{payment_intent_id}", "Failed to get payment intent"
        )

    async def create_checkout_session(self, success_url: str, cancel_url: str) -> Dict[str, Any]:
        return await self._call(
            "POST", "/payments/create-checkout-session", "Failed to create checkout session",
            json={"successUrl": success_url, "cancelUrl": cancel_url}
        )

    async def get_payment_config(self) -> Dict[str, Any]:
        return await self._call("GET", "/payments/config", "Failed to get payment config")
