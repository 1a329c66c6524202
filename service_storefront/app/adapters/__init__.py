"""
Adapters package for the storefront client.

Contains HTTP client wrappers for the storefront backend:

- Remote auth service (refresh / logout) used by the request gateway
- Response envelope parsing and error mapping
- Resource clients for auth flows, catalog, cart, wishlist, orders,
  addresses and payments

Resource clients go through the request gateway; only the remote auth
client talks to the HTTP client directly.
"""

from .auth_client import RemoteAuthClient
from .auth_actions import AuthActions
from .envelope import ApiResponse, ApiErrorBody, call_action, unwrap
from .catalog_client import CategoryClient, ProductClient
from .cart_client import CartClient
from .wishlist_client import WishlistClient
from .order_client import OrderClient
from .address_client import AddressClient
from .payment_client import PaymentClient

__all__ = [
    "RemoteAuthClient",
    "AuthActions",
    "ApiResponse",
    "ApiErrorBody",
    "call_action",
    "unwrap",
    "CategoryClient",
    "ProductClient",
    "CartClient",
    "WishlistClient",
    "OrderClient",
    "AddressClient",
    "PaymentClient",
]
