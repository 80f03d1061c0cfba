"""Services package"""

from .cart_service import CartStore
from .product_service import ProductService
from .order_service import OrderService
from .user_service import UserService
from .admin_service import AdminService
from .auth_service import AuthService, FirebaseAuthProvider

__all__ = [
    "CartStore",
    "ProductService",
    "OrderService",
    "UserService",
    "AdminService",
    "AuthService",
    "FirebaseAuthProvider"
]
