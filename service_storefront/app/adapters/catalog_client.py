"""
Category and product clients.
"""

from typing import Any, Dict, List, Optional, Tuple

from .base import ResourceClient, build_query

# (field name, (filename, bytes, content type))
UploadFile = Tuple[str, Tuple[str, bytes, str]]


class CategoryClient(ResourceClient):
    """Client for the /categories resource."""

    name = "category"

    async def list_categories(self, page: Optional[int] = None, limit: Optional[int] = None,
                              search: Optional[str] = None,
                              is_active: Optional[bool] = None) -> Dict[str, Any]:
        params = build_query(page=page, limit=limit, search=search, isActive=is_active)
        return await self._call("GET", "/categories", "Failed to fetch categories", params=params)

    async def active_categories(self) -> Dict[str, Any]:
        return await self._call("GET", "/categories/active", "Failed to fetch active categories")

    async def get_category(self, category_id: str) -> Dict[str, Any]:
        return await self._call("GET", f"/categories/{category_id}", "Failed to fetch category")

    async def create_category(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._call("POST", "/categories", "Failed to create category", json=payload)

    async def update_category(self, category_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._call("PUT", f"/categories/{category_id}", "Failed to update category", json=payload)

    async def delete_category(self, category_id: str) -> Dict[str, Any]:
        return await self._call("DELETE", f"/categories/{category_id}", "Failed to delete category")


class ProductClient(ResourceClient):
    """Client for the /products resource.

    Create and update are multipart uploads: scalar fields go out as form
    values and each image as an ``images`` file part.
    """

    name = "product"

    async def list_products(self, **filters: Any) -> Dict[str, Any]:
        return await self._call("GET", "/products", "Failed to fetch products", params=build_query(**filters))

    async def get_product(self, product_id: str) -> Dict[str, Any]:
        return await self._call("GET", f"/products/{product_id}", "Failed to fetch product")

    async def products_by_category(self, category_id: str, **filters: Any) -> Dict[str, Any]:
        return await self._call(
            "GET",
            f"/products/category/{category_id}",
            "Failed to fetch category products",
            params=build_query(**filters)
        )

    async def create_product(self, fields: Dict[str, Any],
                             images: List[Tuple[str, bytes, str]]) -> Dict[str, Any]:
        return await self._call(
            "POST",
            "/products",
            "Failed to create product",
            data=self._form_fields(fields),
            files=self._image_parts(images)
        )

    async def update_product(self, product_id: str, fields: Dict[str, Any],
                             images: Optional[List[Tuple[str, bytes, str]]] = None) -> Dict[str, Any]:
        return await self._call(
            "PUT",
            f"/products/{product_id}",
            "Failed to update product",
            data=self._form_fields(fields),
            files=self._image_parts(images or [])
        )

    async def delete_product(self, product_id: str) -> Dict[str, Any]:
        return await self._call("DELETE", f"/products/{product_id}", "Failed to delete product")

    @staticmethod
    def _form_fields(fields: Dict[str, Any]) -> Dict[str, str]:
        form: Dict[str, str] = {}
        for key, value in fields.items():
            if key == "images" or value is None:
                continue
            if isinstance(value, bool):
                form[key] = "true" if value else "false"
            else:
                form[key] = str(value)
        return form

    @staticmethod
    def _image_parts(images: List[Tuple[str, bytes, str]]) -> List[UploadFile]:
        return [("images", image) for image in images]
