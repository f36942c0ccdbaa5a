# app/schemas/draft.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from app.schemas.customization import DesignCustomization


def _normalize_name(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    return v or None


class DraftCreate(SQLModel):
    """
    Payload for saving a new draft.

    Omitted product_id / customization are taken from the caller's
    current workspace (the usual "Save Draft" button flow).
    """

    model_config = ConfigDict(extra="forbid")

    product_id: str | None = None
    customization: DesignCustomization | None = None
    name: str | None = Field(default=None, max_length=255)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        return _normalize_name(v)


class DraftUpdate(SQLModel):
    """
    Payload for overwriting an existing draft in place.

    Omitted customization is taken from the current workspace.
    """

    model_config = ConfigDict(extra="forbid")

    customization: DesignCustomization | None = None
    name: str | None = Field(default=None, max_length=255)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        return _normalize_name(v)


class DraftRead(SQLModel):
    """
    Draft as returned to clients. `customization` is always the migrated,
    current-format design; `legacy` tells whether the stored record was
    in the old flat shape.
    """

    id: uuid.UUID
    user_id: uuid.UUID
    product_id: str
    product_name: str
    name: str | None
    customization: DesignCustomization
    legacy: bool
    swatch_color: str
    created_at: datetime
    updated_at: datetime
