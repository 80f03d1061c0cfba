"""
Cart schemas for the client-local cart
"""

from pydantic import BaseModel, Field
from typing import Optional, Tuple
from decimal import Decimal


class CartLine(BaseModel):
    """One product variant held in the cart, keyed by (id, finish)"""
    id: str = Field(..., description="Product ID")
    name: str = ""
    type: Optional[str] = Field(None, description="Category tag, e.g. classic/premium/corporate")
    price: Decimal = Field(default=Decimal("0"), description="Unit price")
    quantity: int = 1
    image: Optional[str] = None
    finish: str = "default"
    sku: Optional[str] = None

    @property
    def key(self) -> Tuple[str, str]:
        return (self.id, self.finish)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class CartSummary(BaseModel):
    """Order summary shown next to the cart"""
    item_count: int
    subtotal: Decimal
    gst: Decimal
    total: Decimal
