# app/routers/products.py
from fastapi import APIRouter, HTTPException, status

from app.core.catalog import DESIGN_TEMPLATES, NFC_PRODUCTS, get_product
from app.schemas.customization import ICON_CATALOG
from app.schemas.preview import PreviewRead, PreviewRequest
from app.schemas.product import DesignTemplate, ProductRead
from app.services.preview_service import build_preview
from app.services.workspace_service import product_read

router = APIRouter(tags=["Catalog"])


# -------- Public endpoints --------


@router.get("/products", response_model=list[ProductRead])
def list_products():
    """
    List the NFC product catalog.

    - Public endpoint.
    """
    return [product_read(p) for p in NFC_PRODUCTS]


@router.get("/products/templates", response_model=list[DesignTemplate])
def list_templates():
    """Color presets selectable in the editor."""
    return list(DESIGN_TEMPLATES)


@router.get("/products/icons", response_model=list[str])
def list_icons():
    """Icon ids usable as a side's `icon`."""
    return list(ICON_CATALOG)


@router.get("/products/{product_id}", response_model=ProductRead)
def get_catalog_product(product_id: str):
    """
    Get a single product by id.

    - Public endpoint.
    """
    product = get_product(product_id)
    if product is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )
    return product_read(product)


@router.post("/preview", response_model=PreviewRead)
def preview(payload: PreviewRequest):
    """
    Render any customization for a catalog product.

    Stateless: nothing is stored, so guests can use it too.
    """
    product = get_product(payload.product_id)
    if product is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )
    return build_preview(product, payload.customization, payload.show_back)
