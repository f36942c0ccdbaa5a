# app/models/order.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


class NFCOrder(SQLModel, table=True):
    """
    Submitted order for customized NFC products.

    `items` is the reduced per-line projection sent at checkout (no
    colors/patterns), `shipping_info` the contact and address block.
    """

    __tablename__ = "nfc_orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    order_number: str = Field(
        max_length=40,
        unique=True,
        index=True,
    )

    # pending | confirmed | processing | shipped | delivered | cancelled
    status: str = Field(
        default="processing",
        index=True,
        description="Order status lifecycle",
    )

    items: list = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    shipping_info: dict = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
    )

    subtotal: float = Field(ge=0)
    shipping_cost: float = Field(ge=0)
    total: float = Field(ge=0)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
