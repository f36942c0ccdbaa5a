# app/routers/cart.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import require_auth
from app.database import get_session
from app.models.user import User
from app.repositories.cart_repo import CartRepository
from app.repositories.draft_repo import WorkspaceRepository
from app.repositories.user_repo import ProfileRepository
from app.schemas.cart import CartSummary, CartItemCreate, CartItemUpdate
from app.services.cart_service import CartService
from app.services.workspace_service import WorkspaceService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
workspace_service = WorkspaceService(WorkspaceRepository(), ProfileRepository())
service = CartService(cart_repo, workspace_service)


@router.get("", response_model=CartSummary)
def get_my_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Get current user's cart summary.
    """
    return service.get_cart_summary(session, current_user.id)


@router.post("", response_model=CartSummary)
def add_to_cart(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Add a design to the cart (defaults to the current workspace design).

    Returns the updated cart summary.
    """
    return service.add_to_cart(session, current_user.id, payload)


@router.patch("/{index}", response_model=CartSummary)
def update_cart_item(
    index: int,
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Update quantity of the cart line at `index` (minimum 1).

    Returns the updated cart summary.
    """
    return service.update_quantity(
        session=session,
        user_id=current_user.id,
        index=index,
        payload=payload,
    )


@router.delete("/{index}", response_model=CartSummary)
def remove_cart_item(
    index: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Remove the cart line at `index`.

    Returns the updated cart summary.
    """
    return service.remove_item(session, current_user.id, index)


@router.delete("", response_model=CartSummary)
def clear_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Clear the entire cart.

    Returns an empty cart summary.
    """
    return service.clear_cart(session, current_user.id)
