"""
Product schemas for admin request validation
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class ProductBase(BaseModel):
    """Catalogue fields; unknown fields are stored as given"""
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    type: Optional[str] = Field(None, description="classic, premium or corporate")
    price: Optional[float] = Field(None, ge=0)
    sku: Optional[str] = None
    image: Optional[str] = None
    description: Optional[str] = None
    active: Optional[bool] = None


class ProductCreate(ProductBase):
    """Schema for creating a product"""
    name: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)


class ProductUpdate(ProductBase):
    """Schema for partial product updates"""
    pass
