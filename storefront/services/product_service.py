"""
Product service for catalogue management
"""

import logging
from typing import Any, Dict

from storefront.core.exceptions import DocumentStoreError
from storefront.services.document_store import DocumentStore
from storefront.services.record_fetcher import PRODUCTS, fetch_records
from storefront.utils.helpers import utc_now_iso

logger = logging.getLogger(__name__)


class ProductService:
    """
    Service for reading and editing products
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    async def get_all_products(self) -> Dict[str, Any]:
        """All products, newest first"""
        return await fetch_records(self.store, PRODUCTS)

    async def get_product(self, product_id: str) -> Dict[str, Any]:
        try:
            doc = await self.store.get(PRODUCTS.collection, product_id)
        except DocumentStoreError as e:
            logger.error(f"Error getting product {product_id}: {e}")
            return {"success": False, "error": str(e)}

        if doc is None:
            return {"success": False, "error": "Product not found"}
        return {"success": True, "product": {"id": doc.id, **doc.data}}

    async def add_product(self, product_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a product; products are active unless told otherwise
        """
        now = utc_now_iso()
        product = {
            **product_data,
            "createdAt": now,
            "updatedAt": now,
            "active": product_data.get("active", True),
        }

        try:
            product_id = await self.store.create(PRODUCTS.collection, product)
        except DocumentStoreError as e:
            logger.error(f"Error adding product: {e}")
            return {"success": False, "error": str(e)}

        return {"success": True, "productId": product_id}

    async def update_product(self, product_id: str, product_data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            await self.store.update(
                PRODUCTS.collection,
                product_id,
                {**product_data, "updatedAt": utc_now_iso()}
            )
        except DocumentStoreError as e:
            logger.error(f"Error updating product {product_id}: {e}")
            if e.code == "NotFound":
                return {"success": False, "error": "Product not found"}
            return {"success": False, "error": str(e)}

        return {"success": True}

    async def delete_product(self, product_id: str) -> Dict[str, Any]:
        try:
            await self.store.delete(PRODUCTS.collection, product_id)
        except DocumentStoreError as e:
            logger.error(f"Error deleting product {product_id}: {e}")
            return {"success": False, "error": str(e)}

        return {"success": True}
