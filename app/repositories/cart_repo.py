# app/repositories/cart_repo.py
import uuid

from sqlalchemy import func
from sqlmodel import Session, select

from app.models.cart import CartItem


class CartRepository:
    """
    Data access layer for cart_items.

    NOTE:
      - Writes are not committed here; checkout deletes cart rows inside
        the order transaction, and CartService commits its own changes.
    """

    # Items for a user, in cart order
    def list_for_user(self, session: Session, user_id: uuid.UUID) -> list[CartItem]:
        stmt = (
            select(CartItem)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.position, CartItem.created_at)
        )
        return session.exec(stmt).all()

    def next_position(self, session: Session, user_id: uuid.UUID) -> int:
        stmt = select(func.max(CartItem.position)).where(CartItem.user_id == user_id)
        current = session.exec(stmt).one()
        return 0 if current is None else current + 1

    def add(self, session: Session, item: CartItem) -> CartItem:
        session.add(item)
        return item

    def delete_all(self, session: Session, items: list[CartItem]) -> None:
        for row in items:
            session.delete(row)
