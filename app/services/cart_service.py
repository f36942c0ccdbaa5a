# app/services/cart_service.py
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.catalog import get_product
from app.database import commit_or_503
from app.models.cart import CartItem
from app.repositories.cart_repo import CartRepository
from app.schemas.cart import (
    CartItemCreate,
    CartItemUpdate,
    CartItemRead,
    CartSummary,
)
from app.schemas.product import Category, Product
from app.services.migration import decode_customization
from app.services.order_assembler import CartLine, clamp_quantity, compute_totals
from app.services.workspace_service import WorkspaceService


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - add designs (explicit or from the workspace) as new lines
      - address lines by index, in insertion order
      - keep every stored quantity >= 1
      - compute line totals and cart totals
    """

    def __init__(self, cart_repo: CartRepository, workspace_service: WorkspaceService):
        self.cart_repo = cart_repo
        self.workspace_service = workspace_service

    # ---- internal helpers ----

    @staticmethod
    def _product_for(row: CartItem) -> Product:
        """
        Catalog product with the price snapshotted at add time.

        Falls back to the stored snapshot if the product left the catalog.
        """
        product = get_product(row.product_id)
        if product is None:
            return Product(
                id=row.product_id,
                name=row.product_name,
                description="",
                base_price=row.snapshot_price,
                image="",
                category=Category(row.category),
            )
        return product.model_copy(update={"base_price": row.snapshot_price})

    def to_lines(self, rows: list[CartItem]) -> list[CartLine]:
        return [
            CartLine(
                product=self._product_for(row),
                customization=decode_customization(row.customization, context=f"cart item {row.id}"),
                quantity=row.quantity,
            )
            for row in rows
        ]

    def _get_at(self, session: Session, user_id: uuid.UUID, index: int) -> CartItem:
        rows = self.cart_repo.list_for_user(session, user_id)
        if index < 0 or index >= len(rows):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Item not in cart",
            )
        return rows[index]

    # ---- public operations ----

    def get_cart_summary(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> CartSummary:
        """
        Return full cart summary:
          - list of CartItemRead (with line_total)
          - total_quantity
          - subtotal / shipping / total
        """
        rows = self.cart_repo.list_for_user(session, user_id)
        lines = self.to_lines(rows)
        totals = compute_totals(lines)

        item_reads: list[CartItemRead] = []
        for index, (row, line) in enumerate(zip(rows, lines)):
            item_reads.append(
                CartItemRead(
                    index=index,
                    id=row.id,
                    product_id=line.product.id,
                    product_name=line.product.name,
                    category=line.product.category,
                    base_price=line.product.base_price,
                    quantity=line.quantity,
                    line_total=round(line.product.base_price * line.quantity, 2),
                    customization=line.customization,
                )
            )

        return CartSummary(
            items=item_reads,
            total_quantity=sum(line.quantity for line in lines),
            subtotal=totals.subtotal,
            shipping=totals.shipping,
            total=totals.total,
            is_empty=not item_reads,
        )

    def add_to_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CartItemCreate,
    ) -> CartSummary:
        """
        Append a design to the cart as a new line.

        Product / customization default to the current workspace. The
        customization is stored as a snapshot: later edits in the
        workspace do not change the cart.
        """
        product_id = payload.product_id
        customization = payload.customization
        if product_id is None or customization is None:
            ws_product, ws_customization = self.workspace_service.current(session, user_id)
            if product_id is None and ws_product is not None:
                product_id = ws_product.id
            if customization is None:
                customization = ws_customization

        if product_id is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Select a product before adding to cart",
            )

        product = get_product(product_id)
        if product is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )

        item = CartItem(
            user_id=user_id,
            position=self.cart_repo.next_position(session, user_id),
            product_id=product.id,
            quantity=payload.quantity,
            snapshot_price=product.base_price,
            product_name=product.name,
            category=product.category.value,
            customization=customization.to_json(),
        )
        self.cart_repo.add(session, item)
        commit_or_503(session, "add item to cart")

        return self.get_cart_summary(session, user_id)

    def update_quantity(
        self,
        session: Session,
        user_id: uuid.UUID,
        index: int,
        payload: CartItemUpdate,
    ) -> CartSummary:
        """
        Set the quantity of the line at `index`; values below 1 become 1.
        """
        item = self._get_at(session, user_id, index)
        item.quantity = clamp_quantity(payload.quantity)
        session.add(item)
        commit_or_503(session, "update cart")

        return self.get_cart_summary(session, user_id)

    def remove_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        index: int,
    ) -> CartSummary:
        """
        Remove the line at `index` and return the updated summary.
        """
        item = self._get_at(session, user_id, index)
        self.cart_repo.delete_all(session, [item])
        commit_or_503(session, "remove item from cart")
        return self.get_cart_summary(session, user_id)

    def clear_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> CartSummary:
        """
        Clear all items from the cart and return an empty summary.
        """
        self.cart_repo.delete_all(session, self.cart_repo.list_for_user(session, user_id))
        commit_or_503(session, "clear cart")
        return self.get_cart_summary(session, user_id)
