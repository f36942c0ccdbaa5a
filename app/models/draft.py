# app/models/draft.py
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Draft(SQLModel, table=True):
    """
    Saved, resumable design for one catalog product.

    `customization` holds the serialized DesignCustomization, or a legacy
    flat record written by older clients; it is migrated on load.
    """

    __tablename__ = "nfc_product_drafts"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    product_id: str = Field(
        max_length=100,
        description="Catalog product id",
    )

    product_name: str = Field(
        max_length=255,
        description="Product display name at save time",
    )

    customization: Any = Field(
        default=None,
        sa_column=Column(JSON, nullable=False),
    )

    name: str | None = Field(default=None, max_length=255)

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow, index=True)


class DesignWorkspace(SQLModel, table=True):
    """
    The design a user is currently editing (selected product + state).

    One row per user; reset to defaults after checkout.
    """

    __tablename__ = "design_workspaces"

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        primary_key=True,
    )

    product_id: str | None = Field(default=None, max_length=100)

    customization: dict = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
    )

    updated_at: datetime = Field(default_factory=_utcnow)
