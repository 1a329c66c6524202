"""
Base class for storefront resource clients.
"""

from datetime import date, datetime
from typing import Any, Dict, Optional, TYPE_CHECKING

from shared.logging import get_logger
from .envelope import call_action

if TYPE_CHECKING:
    from ..gateway.request_gateway import AuthenticatedGateway


def build_query(**params: Any) -> Optional[Dict[str, str]]:
    """Drop unset values and stringify the rest."""
    query: Dict[str, str] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            query[key] = "true" if value else "false"
        elif isinstance(value, (datetime, date)):
            query[key] = value.isoformat()
        else:
            query[key] = str(value)
    return query or None


class ResourceClient:
    """Thin wrapper issuing gateway calls and unwrapping their envelope."""

    name = "resource"

    def __init__(self, gateway: "AuthenticatedGateway"):
        self.gateway = gateway
        self.logger = get_logger(f"storefront.{self.name}_client")

    async def _call(self, method: str, path: str, default_message: str, **kwargs) -> Dict[str, Any]:
        return await call_action(self.gateway.request(method, path, **kwargs), default_message)
