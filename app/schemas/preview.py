# app/schemas/preview.py
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.customization import DesignCustomization, Side


class VisualNode(BaseModel):
    """
    One element of a rendered preview.

    `kind` names the primitive (rect, circle, text, image, qr, ...),
    `props` carries its drawing parameters and `children` are drawn on
    top of it in order.
    """

    model_config = ConfigDict(frozen=True)

    kind: str
    props: dict[str, Any] = Field(default_factory=dict)
    children: list["VisualNode"] = Field(default_factory=list)

    def find(self, kind: str) -> list["VisualNode"]:
        """All descendants (including self) with the given kind, depth-first."""
        found = [self] if self.kind == kind else []
        for child in self.children:
            found.extend(child.find(kind))
        return found


class PreviewRequest(BaseModel):
    """Stateless preview: render any customization for a catalog product."""

    model_config = ConfigDict(extra="forbid")

    product_id: str
    customization: DesignCustomization = Field(default_factory=DesignCustomization)
    show_back: bool | None = None


class PreviewRead(BaseModel):
    product_id: str
    side: Side
    qr_payload: str
    tree: VisualNode
