"""
Order schemas
"""

import enum
from pydantic import BaseModel, Field


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class OrderStatusUpdate(BaseModel):
    """Schema for changing an order's status"""
    status: OrderStatus = Field(..., description="New order status")
