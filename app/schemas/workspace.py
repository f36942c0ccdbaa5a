# app/schemas/workspace.py
from datetime import datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel

from app.schemas.customization import DesignCustomization, Side
from app.schemas.preview import PreviewRead
from app.schemas.product import ProductRead


class WorkspaceProductSelect(SQLModel):
    """Pick the product to design; resets the customization."""

    model_config = ConfigDict(extra="forbid")

    product_id: str


class WorkspaceRead(SQLModel):
    """Current editor state plus its derived preview."""

    product: ProductRead | None
    customization: DesignCustomization
    preview: PreviewRead | None
    updated_at: datetime | None = None


class AssetUploadRead(WorkspaceRead):
    """Workspace after an asset upload was applied to the given side."""

    url: str
    side: Side
