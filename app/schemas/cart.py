# app/schemas/cart.py
import uuid

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field

from app.schemas.customization import DesignCustomization
from app.schemas.product import Category


class CartItemCreate(SQLModel):
    """
    Payload for adding a design to the cart.

    Omitted product_id / customization are taken from the caller's
    current workspace ("Add to cart" from the editor).
    """

    model_config = ConfigDict(extra="forbid")

    product_id: str | None = None
    customization: DesignCustomization | None = None
    quantity: int = Field(default=1, gt=0)


class CartItemUpdate(SQLModel):
    """
    Payload for changing a line quantity.

    Values below 1 are clamped to 1; use DELETE to remove a line.
    """

    model_config = ConfigDict(extra="forbid")

    quantity: int


class CartItemRead(SQLModel):
    """
    Read model for a single cart line, including line_total.
    """

    index: int
    id: uuid.UUID
    product_id: str
    product_name: str
    category: Category
    base_price: float
    quantity: int
    line_total: float
    customization: DesignCustomization


class CartSummary(SQLModel):
    """
    Full cart response model with totals.

    `is_empty` means there is nothing to check out.
    """

    items: list[CartItemRead]
    total_quantity: int
    subtotal: float
    shipping: float
    total: float
    is_empty: bool
