# app/schemas/order.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from pydantic.alias_generators import to_camel
from sqlmodel import SQLModel

OrderStatus = Literal["pending", "confirmed", "processing", "shipped", "delivered", "cancelled"]


class ShippingInfo(SQLModel):
    """
    Checkout contact and address block.

    name, email and address are required; the rest is optional.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    email: EmailStr
    address: str
    city: str = ""
    postal_code: str = ""
    country: str = ""

    @field_validator("name", "address")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("city", "postal_code", "country")
    @classmethod
    def strip_optional(cls, v: str) -> str:
        return v.strip()


class OrderItemPayload(BaseModel):
    """
    Reduced line projection sent to the order system.

    Full color/pattern state is deliberately left out.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    product_id: str
    name: str
    base_price: float
    category: str
    quantity: int
    customization_name: str
    linked_username: str | None = None


class OrderSubmission(BaseModel):
    """Everything needed to record an order and notify the customer."""

    model_config = ConfigDict(frozen=True)

    order_number: str
    items: list[OrderItemPayload]
    shipping_info: ShippingInfo
    subtotal: float
    shipping: float
    total: float


class OrderRead(SQLModel):
    id: uuid.UUID
    user_id: uuid.UUID
    order_number: str
    status: OrderStatus
    items: list[OrderItemPayload]
    shipping_info: ShippingInfo
    subtotal: float
    shipping_cost: float
    total: float
    created_at: datetime
    updated_at: datetime


class OrderStatusUpdate(SQLModel):
    """
    Admin payload to change order status.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus
