# app/models/cart.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


class CartItem(SQLModel, table=True):
    """
    Cart line: a product with the customization snapshot taken when it
    was added. The same product may appear several times with different
    designs, so lines are addressed by their position in the cart.
    """

    __tablename__ = "cart_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    position: int = Field(
        default=0,
        ge=0,
        description="Insertion order within the user's cart",
    )

    product_id: str = Field(max_length=100)

    quantity: int = Field(
        gt=0,
        description="Must be >= 1",
    )

    snapshot_price: float = Field(
        description="Base price when added to cart",
    )

    product_name: str = Field(max_length=255)
    category: str = Field(max_length=20)

    customization: dict = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
