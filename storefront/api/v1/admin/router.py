"""Admin dashboard endpoints for products, orders, users and exports"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Response, status

from storefront.api.dependencies import (
    get_order_service,
    get_product_service,
    get_user_service,
    require_admin,
)
from storefront.core.exceptions import NotFoundException, ServiceUnavailableException
from storefront.schemas.order import OrderStatusUpdate
from storefront.schemas.product import ProductCreate, ProductUpdate
from storefront.services import export_service
from storefront.services.order_service import OrderService
from storefront.services.product_service import ProductService
from storefront.services.user_service import UserService

router = APIRouter(dependencies=[Depends(require_admin)])


def _unwrap(result: Dict[str, Any], key: Optional[str] = None) -> Any:
    """Turn a failed service result into an HTTP error"""
    if not result["success"]:
        error = result.get("error") or "Request failed"
        if "not found" in error.lower():
            raise NotFoundException(error)
        raise ServiceUnavailableException(error)
    return result[key] if key else result

def _download(export: export_service.ExportFile) -> Response:
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'}
    )


# Products
@router.get("/products")
async def list_products(products: ProductService = Depends(get_product_service)):
    """All products, newest first"""
    return {"products": _unwrap(await products.get_all_products(), "products")}

@router.get("/products/{product_id}")
async def get_product(product_id: str, products: ProductService = Depends(get_product_service)):
    return _unwrap(await products.get_product(product_id), "product")

@router.post("/products", status_code=status.HTTP_201_CREATED)
async def create_product(
    body: ProductCreate,
    products: ProductService = Depends(get_product_service)
):
    result = await products.add_product(body.model_dump(exclude_none=True))
    return {"productId": _unwrap(result, "productId")}

@router.patch("/products/{product_id}")
async def update_product(
    product_id: str,
    body: ProductUpdate,
    products: ProductService = Depends(get_product_service)
):
    _unwrap(await products.update_product(product_id, body.model_dump(exclude_unset=True)))
    return {"success": True}

@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: str, products: ProductService = Depends(get_product_service)):
    _unwrap(await products.delete_product(product_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Orders
@router.get("/orders")
async def list_orders(orders: OrderService = Depends(get_order_service)):
    """Latest orders, newest first"""
    return {"orders": _unwrap(await orders.get_all_orders(), "orders")}

@router.get("/orders/{order_id}")
async def get_order(order_id: str, orders: OrderService = Depends(get_order_service)):
    return _unwrap(await orders.get_order(order_id), "order")

@router.patch("/orders/{order_id}/status")
async def update_order_status(
    order_id: str,
    body: OrderStatusUpdate,
    orders: OrderService = Depends(get_order_service)
):
    _unwrap(await orders.update_order_status(order_id, body.status))
    return {"success": True, "status": body.status.value}


# Users
@router.get("/users")
async def list_users(users: UserService = Depends(get_user_service)):
    """Latest users, newest first"""
    return {"users": _unwrap(await users.get_all_users(), "users")}

@router.get("/users/{user_id}")
async def get_user(user_id: str, users: UserService = Depends(get_user_service)):
    return _unwrap(await users.get_user(user_id), "user")


# Exports
@router.get("/export/orders.csv")
async def export_orders_csv(orders: OrderService = Depends(get_order_service)):
    records = _unwrap(await orders.get_all_orders(), "orders")
    return _download(export_service.export_orders_to_csv(records))

@router.get("/export/orders.pdf")
async def export_orders_pdf(orders: OrderService = Depends(get_order_service)):
    records = _unwrap(await orders.get_all_orders(), "orders")
    return _download(export_service.export_orders_to_pdf(records))

@router.get("/export/users.csv")
async def export_users_csv(users: UserService = Depends(get_user_service)):
    records = _unwrap(await users.get_all_users(), "users")
    return _download(export_service.export_users_to_csv(records))

@router.get("/export/users.pdf")
async def export_users_pdf(users: UserService = Depends(get_user_service)):
    records = _unwrap(await users.get_all_users(), "users")
    return _download(export_service.export_users_to_pdf(records))
