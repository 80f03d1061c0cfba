"""Admin access checks for the dashboard"""

import hmac
import logging
from typing import Any, Dict, Optional

from storefront.core.config import settings
from storefront.core.exceptions import DocumentStoreError
from storefront.services.document_store import DocumentStore
from storefront.utils.helpers import utc_now_iso

logger = logging.getLogger(__name__)

CONFIG_COLLECTION = "config"
ADMIN_DOCUMENT = "admin"


class AdminService:
    """Decides who may use the admin dashboard"""

    def __init__(
        self,
        store: DocumentStore,
        admin_email: Optional[str] = None,
        admin_password: Optional[str] = None
    ):
        self.store = store
        self.admin_email = admin_email if admin_email is not None else settings.ADMIN_EMAIL
        self.admin_password = admin_password if admin_password is not None else settings.ADMIN_PASSWORD

    async def get_admin_email(self) -> Dict[str, Any]:
        """Admin e-mail stored in config/admin; None before first-time setup"""
        try:
            doc = await self.store.get(CONFIG_COLLECTION, ADMIN_DOCUMENT)
        except DocumentStoreError as e:
            logger.error(f"Error getting admin email: {e}")
            return {"success": False, "error": str(e)}

        return {"success": True, "adminEmail": doc.data.get("email") if doc else None}

    async def set_admin_email(self, email: str) -> Dict[str, Any]:
        try:
            await self.store.set(
                CONFIG_COLLECTION,
                ADMIN_DOCUMENT,
                {"email": email, "updatedAt": utc_now_iso()},
                merge=True
            )
        except DocumentStoreError as e:
            logger.error(f"Error setting admin email: {e}")
            return {"success": False, "error": str(e)}
        return {"success": True}

    def is_admin_credentials(self, email: str, password: str) -> bool:
        """Check an e-mail/password pair against the configured admin account"""
        if not self.admin_email or not self.admin_password:
            return False
        return (
            email.lower() == self.admin_email.lower()
            and hmac.compare_digest(password.encode(), self.admin_password.encode())
        )

    async def is_admin(self, user_email: Optional[str]) -> Dict[str, Any]:
        """Configured admin first, then the stored admin e-mail"""
        if not user_email:
            return {"success": True, "isAdmin": False}

        if self.admin_email and user_email.lower() == self.admin_email.lower():
            return {"success": True, "isAdmin": True}

        result = await self.get_admin_email()
        if not result["success"]:
            return {"success": False, "isAdmin": False, "error": result["error"]}

        stored = result["adminEmail"]
        return {"success": True, "isAdmin": bool(stored) and stored.lower() == user_email.lower()}
