"""
Authenticated request gateway.

Wraps every outbound call to the storefront backend: attaches the bearer
credential, and on 401 coordinates a single shared token refresh before
retrying the original request once.
"""

from .request_gateway import AuthenticatedGateway, RequestAttempt, EXCLUDED_AUTH_PATHS

__all__ = [
    "AuthenticatedGateway",
    "RequestAttempt",
    "EXCLUDED_AUTH_PATHS",
]
