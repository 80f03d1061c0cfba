"""
API dependencies: services bound to the application's document store and
the admin guard
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from firebase_admin import auth as firebase_auth
from starlette.concurrency import run_in_threadpool

from storefront.core.exceptions import (
    ForbiddenException,
    ServiceUnavailableException,
    UnauthorizedException,
)
from storefront.services.admin_service import AdminService
from storefront.services.document_store import DocumentStore
from storefront.services.order_service import OrderService
from storefront.services.product_service import ProductService
from storefront.services.user_service import UserService

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_document_store(request: Request) -> DocumentStore:
    return request.app.state.document_store

def get_product_service(store: DocumentStore = Depends(get_document_store)) -> ProductService:
    return ProductService(store)

def get_user_service(store: DocumentStore = Depends(get_document_store)) -> UserService:
    return UserService(store)

def get_order_service(store: DocumentStore = Depends(get_document_store)) -> OrderService:
    return OrderService(store)

def get_admin_service(store: DocumentStore = Depends(get_document_store)) -> AdminService:
    return AdminService(store)


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    admin: AdminService = Depends(get_admin_service)
) -> str:
    """
    Verify the Firebase ID token and require an admin e-mail
    Returns the admin's e-mail
    """
    if not credentials:
        raise UnauthorizedException("Missing bearer token")

    try:
        claims = await run_in_threadpool(firebase_auth.verify_id_token, credentials.credentials)
    except (ValueError, firebase_auth.InvalidIdTokenError, firebase_auth.ExpiredIdTokenError) as e:
        logger.warning(f"Rejected admin token: {e}")
        raise UnauthorizedException("Invalid or expired token")
    except firebase_auth.CertificateFetchError as e:
        logger.error(f"Could not fetch token signing certificates: {e}")
        raise ServiceUnavailableException("Token verification unavailable")

    email = claims.get("email")
    result = await admin.is_admin(email)
    if not result.get("isAdmin"):
        raise ForbiddenException("Admin access required")
    return email
