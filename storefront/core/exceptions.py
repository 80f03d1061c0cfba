"""
Custom exception classes
HTTP exceptions give the admin API consistent error responses; the plain
exceptions mark failures at the boundaries of the storefront core
"""

from fastapi import HTTPException, status
from typing import Any, Dict, Optional


class StorefrontException(HTTPException):
    """
    Base exception for the admin API

    Subclasses fix the status code, a default message and an error code.
    """

    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error"
    default_error_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        detail: Optional[str] = None,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=self.http_status,
            detail=detail or self.default_detail,
            headers=headers
        )
        self.error_code = error_code or self.default_error_code

class BadRequestException(StorefrontException):
    http_status = status.HTTP_400_BAD_REQUEST
    default_detail = "Bad request"
    default_error_code = "BAD_REQUEST"

class UnauthorizedException(StorefrontException):
    http_status = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthorized"
    default_error_code = "UNAUTHORIZED"

    def __init__(self, detail: Optional[str] = None, error_code: Optional[str] = None):
        super().__init__(detail, error_code, headers={"WWW-Authenticate": "Bearer"})

class ForbiddenException(StorefrontException):
    http_status = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden"
    default_error_code = "FORBIDDEN"

class NotFoundException(StorefrontException):
    http_status = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"
    default_error_code = "NOT_FOUND"

class ServiceUnavailableException(StorefrontException):
    """Document store unreachable or refusing the request"""
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Service temporarily unavailable"
    default_error_code = "SERVICE_UNAVAILABLE"

# Core boundary exceptions
class DocumentStoreError(Exception):
    """Remote document store call failed (transport, permission, ...)"""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code

class IndexUnavailableError(DocumentStoreError):
    """Ordered query needs a composite index the store does not have"""

    def __init__(self, message: str = "The query requires an index"):
        super().__init__(message, code="failed-precondition")

class StorageError(Exception):
    """Local key-value storage could not be read or written"""

class AuthProviderError(Exception):
    """Auth provider rejected a request; code is an ``auth/...`` identifier"""

    def __init__(self, code: str, message: Optional[str] = None):
        super().__init__(message or code)
        self.code = code
