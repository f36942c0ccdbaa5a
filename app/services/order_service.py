# app/services/order_service.py
import logging
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.email_client import send_order_status_email
from app.database import commit_or_503
from app.models.order import NFCOrder
from app.repositories.cart_repo import CartRepository
from app.repositories.order_repo import OrderRepository
from app.schemas.order import (
    OrderItemPayload,
    OrderRead,
    OrderStatusUpdate,
    ShippingInfo,
)
from app.services.cart_service import CartService
from app.services.order_assembler import EmptyCartError, to_order_payload
from app.services.workspace_service import WorkspaceService

logger = logging.getLogger(__name__)

INITIAL_STATUS = "processing"

# Admin status state machine
ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"confirmed", "cancelled"},
    "confirmed": {"processing", "cancelled"},
    "processing": {"shipped", "cancelled"},
    "shipped": {"delivered"},
    "delivered": set(),
    "cancelled": set(),
}

# Statuses the customer is emailed about
NOTIFY_STATUSES: frozenset[str] = frozenset({"confirmed", "processing", "shipped", "delivered"})


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Turn the cart into an order submission (reduced item projection)
      - Record the order, clear the cart and reset the workspace in one
        transaction
      - Notify the customer (fire-and-forget)
      - Enforce status transitions (admin)
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        cart_service: CartService,
        workspace_service: WorkspaceService,
    ):
        self.order_repo = order_repo
        self.cart_repo = cart_repo
        self.cart_service = cart_service
        self.workspace_service = workspace_service

    # -------- User-facing operations --------

    def place_order(
        self,
        session: Session,
        user_id: uuid.UUID,
        shipping_info: ShippingInfo,
    ) -> OrderRead:
        """
        Convert the current user's cart into an order.

        Steps:
          1. Load cart; error if empty (no order number is generated).
          2. Assemble the order submission (totals, reduced items).
          3. Insert the nfc_orders row (status='processing').
          4. Delete cart rows and reset the workspace to defaults.
          5. Commit; on failure everything is rolled back (503) and the
             cart is still there for a retry.
          6. Email the confirmation; failures are only logged.
        """
        cart_rows = self.cart_repo.list_for_user(session, user_id)
        try:
            submission = to_order_payload(self.cart_service.to_lines(cart_rows), shipping_info)
        except EmptyCartError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cart is empty",
            )

        order = NFCOrder(
            user_id=user_id,
            order_number=submission.order_number,
            status=INITIAL_STATUS,
            items=[item.model_dump(mode="json", by_alias=True) for item in submission.items],
            shipping_info=submission.shipping_info.model_dump(mode="json"),
            subtotal=submission.subtotal,
            shipping_cost=submission.shipping,
            total=submission.total,
        )
        order = self.order_repo.create_order(session, order)
        self.cart_repo.delete_all(session, cart_rows)
        self.workspace_service.reset_pending(session, user_id)
        commit_or_503(session, "place order")
        session.refresh(order)

        logger.info("Order %s placed by user %s (total %.2f)", order.order_number, user_id, order.total)
        self._notify(order)
        return self._to_read(order)

    def list_user_orders(
        self,
        session: Session,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[OrderRead]:
        orders = self.order_repo.list_for_user(session, user_id, skip, limit)
        return [self._to_read(o) for o in orders]

    def get_user_order(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> OrderRead:
        """
        - 404 if order not found or does not belong to this user.
        """
        order = self.order_repo.get_by_id(session, order_id)
        if not order or order.user_id != user_id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        return self._to_read(order)

    # -------- Admin operations --------

    def list_all_orders(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        status_filter: str | None = None,
    ) -> list[OrderRead]:
        orders = self.order_repo.list_all(session, skip, limit, status_filter)
        return [self._to_read(o) for o in orders]

    def get_order_admin(
        self,
        session: Session,
        order_id: uuid.UUID,
    ) -> OrderRead:
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        return self._to_read(order)

    def update_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> OrderRead:
        """
        Admin-only status update with simple state machine:

          pending    -> confirmed, cancelled
          confirmed  -> processing, cancelled
          processing -> shipped, cancelled
          shipped    -> delivered
          delivered  -> (no change)
          cancelled  -> (no change)

        Any invalid transition raises 400. Moving to a customer-facing
        status sends a notification email.
        """
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )

        current = order.status
        new = payload.status

        if current == new:
            return self._to_read(order)

        if current not in ALLOWED_TRANSITIONS or new not in ALLOWED_TRANSITIONS[current]:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid status transition: {current} -> {new}",
            )

        order.status = new
        order.updated_at = datetime.now(timezone.utc)
        self.order_repo.update_order(session, order)
        commit_or_503(session, "update order status")
        session.refresh(order)

        self._notify(order)
        return self._to_read(order)

    # -------- Helpers --------

    def _notify(self, order: NFCOrder) -> None:
        """
        Fire-and-forget customer email. The order is already committed;
        a mail failure is logged and never surfaces to the caller.
        """
        if order.status not in NOTIFY_STATUSES:
            return
        info = order.shipping_info or {}
        email = info.get("email")
        if not email:
            return
        try:
            send_order_status_email(
                to_email=email,
                order_number=order.order_number,
                status=order.status,
                customer_name=info.get("name"),
            )
        except Exception:
            logger.warning(
                "Order email for %s (%s) could not be sent",
                order.order_number,
                order.status,
                exc_info=True,
            )

    @staticmethod
    def _to_read(order: NFCOrder) -> OrderRead:
        return OrderRead(
            id=order.id,
            user_id=order.user_id,
            order_number=order.order_number,
            status=order.status,
            items=[OrderItemPayload.model_validate(item) for item in order.items],
            shipping_info=ShippingInfo.model_validate(order.shipping_info),
            subtotal=order.subtotal,
            shipping_cost=order.shipping_cost,
            total=order.total,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
