"""User service for customer profiles"""

import logging
from typing import Any, Dict

from storefront.core.exceptions import DocumentStoreError
from storefront.services.document_store import DocumentStore
from storefront.services.record_fetcher import USERS, fetch_records
from storefront.utils.helpers import utc_now_iso

logger = logging.getLogger(__name__)


class UserService:
    """Service class for user profile operations"""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def get_all_users(self) -> Dict[str, Any]:
        """Users newest first, capped at USERS_FETCH_LIMIT"""
        return await fetch_records(self.store, USERS)

    async def get_user(self, user_id: str) -> Dict[str, Any]:
        """Get user by ID, falling back to a lookup by e-mail"""
        if not user_id:
            return {"success": False, "error": "User ID is required"}

        try:
            doc = await self.store.get(USERS.collection, user_id)
        except DocumentStoreError as e:
            logger.error(f"Error getting user {user_id}: {e}")
            return {"success": False, "error": str(e) or "Failed to get user"}

        if doc is not None:
            return {"success": True, "user": {"id": doc.id, "uid": doc.id, **doc.data}}

        logger.warning(f"User document does not exist for userId: {user_id}")
        try:
            matches = await self.store.query(USERS.collection, filters=[("email", user_id)])
        except DocumentStoreError as e:
            logger.warning(f"Error querying user by email: {e}")
            matches = []

        if matches:
            match = matches[0]
            return {"success": True, "user": {"id": match.id, "uid": match.id, **match.data}}

        return {"success": False, "error": f"User not found with ID: {user_id}"}

    async def save_user_profile(self, uid: str, profile_data: Dict[str, Any]) -> Dict[str, Any]:
        """Merge profile fields into the user's document"""
        try:
            await self.store.set(USERS.collection, uid, profile_data, merge=True)
        except DocumentStoreError as e:
            logger.error(f"Error saving user profile: {e}")
            return {"success": False, "error": str(e)}
        return {"success": True}

    async def get_user_profile(self, uid: str) -> Dict[str, Any]:
        try:
            doc = await self.store.get(USERS.collection, uid)
        except DocumentStoreError as e:
            logger.error(f"Error getting user profile: {e}")
            return {"success": False, "error": str(e)}

        if doc is None:
            return {"success": False, "error": "Profile not found"}
        return {"success": True, "data": doc.data}

    async def update_user_profile(self, uid: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        try:
            await self.store.update(USERS.collection, uid, {**updates, "updatedAt": utc_now_iso()})
        except DocumentStoreError as e:
            logger.error(f"Error updating user profile: {e}")
            return {"success": False, "error": str(e)}
        return {"success": True}
