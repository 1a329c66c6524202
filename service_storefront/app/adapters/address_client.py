"""
Address client.
"""

from typing import Any, Dict, Optional

from .base import ResourceClient, build_query


class AddressClient(ResourceClient):
    """Client for the /addresses resource."""

    name = "address"

    async def list_addresses(self, page: Optional[int] = None, limit: Optional[int] = None,
                             is_default: Optional[bool] = None) -> Dict[str, Any]:
        params = build_query(page=page, limit=limit, isDefault=is_default)
        return await self._call("GET", "/addresses", "Failed to fetch addresses", params=params)

    async def default_address(self) -> Dict[str, Any]:
        return await self._call("GET", "/addresses/default", "Failed to fetch default address")

    async def address_stats(self) -> Dict[str, Any]:
        return await self._call("GET", "/addresses/stats", "Failed to fetch address stats")

    async def get_address(self, address_id: str) -> Dict[str, Any]:
        return await self._call("GET", f"/addresses/{address_id}", "Failed to fetch address details")

    async def create_address(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._call("POST", "/addresses", "Failed to create address", json=payload)

    async def update_address(self, address_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._call("PATCH", f"/addresses/{address_id}", "Failed to update address", json=payload)

    async def set_default_address(self, address_id: str) -> Dict[str, Any]:
        return await self._call("PATCH", f"/addresses/{address_id}/set-default", "Failed to set default address")

    async def delete_address(self, address_id: str) -> Dict[str, Any]:
        return await self._call("DELETE", f"/addresses/{address_id}", "Failed to delete address")
