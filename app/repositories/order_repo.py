# app/repositories/order_repo.py
import uuid

from sqlmodel import Session, select

from app.models.order import NFCOrder


class OrderRepository:
    """
    Data access layer for nfc_orders.

    NOTE:
      - No commits here; placing an order also clears the cart and resets
        the workspace. The service is responsible for session.commit().
    """

    def list_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[NFCOrder]:
        stmt = (
            select(NFCOrder)
            .where(NFCOrder.user_id == user_id)
            .order_by(NFCOrder.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return session.exec(stmt).all()

    def list_all(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        status: str | None = None,
    ) -> list[NFCOrder]:
        stmt = select(NFCOrder)
        if status is not None:
            stmt = stmt.where(NFCOrder.status == status)
        stmt = stmt.order_by(NFCOrder.created_at.desc()).offset(skip).limit(limit)
        return session.exec(stmt).all()

    def get_by_id(self, session: Session, order_id: uuid.UUID) -> NFCOrder | None:
        return session.get(NFCOrder, order_id)

    def create_order(self, session: Session, order: NFCOrder) -> NFCOrder:
        """
        Stage an order insert; the id is assigned client-side.
        """
        session.add(order)
        return order

    def update_order(self, session: Session, order: NFCOrder) -> NFCOrder:
        session.add(order)
        return order
