"""
Order service for handling order placement and order management
"""

import logging
from typing import Any, Dict, Optional, Union

from storefront.core.config import settings
from storefront.core.exceptions import DocumentStoreError
from storefront.core.session import SessionContext
from storefront.schemas.order import OrderStatus
from storefront.services.document_store import DocumentStore
from storefront.services.record_fetcher import ORDERS, fetch_records
from storefront.services.user_service import UserService
from storefront.utils.helpers import utc_now_iso

logger = logging.getLogger(__name__)


class OrderService:
    """
    Service for managing orders
    """

    def __init__(self, store: DocumentStore, users: Optional[UserService] = None):
        self.store = store
        self.users = users or UserService(store)

    async def get_all_orders(self) -> Dict[str, Any]:
        """Latest orders across all customers"""
        return await fetch_records(self.store, ORDERS)

    async def get_order(self, order_id: str) -> Dict[str, Any]:
        try:
            doc = await self.store.get(ORDERS.collection, order_id)
        except DocumentStoreError as e:
            logger.error(f"Error getting order {order_id}: {e}")
            return {"success": False, "error": str(e)}

        if doc is None:
            return {"success": False, "error": "Order not found"}
        return {"success": True, "order": {"id": doc.id, **doc.data}}

    async def update_order_status(
        self,
        order_id: str,
        status: Union[OrderStatus, str]
    ) -> Dict[str, Any]:
        try:
            status = OrderStatus(status)
        except ValueError:
            return {"success": False, "error": f"Invalid order status: {status}"}

        try:
            await self.store.update(
                ORDERS.collection,
                order_id,
                {"status": status.value, "updatedAt": utc_now_iso()}
            )
        except DocumentStoreError as e:
            logger.error(f"Error updating order status: {e}")
            if e.code == "NotFound":
                return {"success": False, "error": "Order not found"}
            return {"success": False, "error": str(e)}

        return {"success": True}

    async def save_order(self, session: SessionContext, order_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Place an order for the signed-in user

        The shipping address, when present, is copied to the user's profile
        as lastShippingAddress.
        """
        user = session.user
        if user is None:
            return {"success": False, "error": "User not authenticated"}

        now = utc_now_iso()
        order_id = self.store.generate_id(ORDERS.collection)
        order = {
            **order_data,
            "orderId": order_id,
            "userId": user.uid,
            "status": OrderStatus.PENDING.value,
            "createdAt": now,
            "updatedAt": now,
        }

        try:
            await self.store.create(ORDERS.collection, order, doc_id=order_id)
        except DocumentStoreError as e:
            logger.error(f"Error saving order: {e}")
            return {"success": False, "error": str(e)}

        if order_data.get("shipping"):
            result = await self.users.update_user_profile(user.uid, {
                "lastShippingAddress": order_data["shipping"],
                "lastUpdated": now,
            })
            if not result["success"]:
                logger.warning(f"Order {order_id} saved but profile update failed: {result['error']}")

        logger.info(f"Order {order_id} placed by {user.uid}")
        return {"success": True, "orderId": order_id}

    async def get_user_orders(
        self,
        session: SessionContext,
        limit: Optional[int] = None
    ) -> Dict[str, Any]:
        """The signed-in user's most recent orders"""
        user = session.user
        if user is None:
            return {"success": False, "error": "User not authenticated", "orders": []}

        return await fetch_records(
            self.store,
            ORDERS,
            filters=[("userId", user.uid)],
            limit=limit or settings.USER_ORDERS_LIMIT
        )
