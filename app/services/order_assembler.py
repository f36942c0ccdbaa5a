# app/services/order_assembler.py
"""
Pure cart math and order payload assembly.

No database or HTTP here: CartService / OrderService feed in CartLine
tuples built from the stored cart.
"""

import threading
import time

from pydantic import BaseModel, ConfigDict, Field

from app.core.config import get_settings
from app.schemas.customization import DesignCustomization
from app.schemas.order import OrderItemPayload, OrderSubmission, ShippingInfo
from app.schemas.product import Product

ORDER_NUMBER_PREFIX = "NFC-"

_BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
_last_stamp = 0
_stamp_lock = threading.Lock()


class EmptyCartError(ValueError):
    """Raised when an order is assembled from an empty cart."""


class CartLine(BaseModel):
    """A product, the design snapshot taken when it was added, and a quantity."""

    model_config = ConfigDict(frozen=True)

    product: Product
    customization: DesignCustomization
    quantity: int = Field(ge=1)


class Totals(BaseModel):
    model_config = ConfigDict(frozen=True)

    subtotal: float
    shipping: float
    total: float


def clamp_quantity(quantity: int) -> int:
    """Stored quantities never go below 1."""
    return max(1, int(quantity))


def shipping_for(subtotal: float) -> float:
    settings = get_settings()
    return 0.0 if subtotal > settings.FREE_SHIPPING_THRESHOLD else settings.FLAT_SHIPPING_COST


def compute_totals(lines: list[CartLine]) -> Totals:
    """
    subtotal = sum(base_price * quantity)
    shipping = free above the threshold, flat rate otherwise
    total    = subtotal + shipping
    """
    subtotal = round(sum(line.product.base_price * line.quantity for line in lines), 2)
    shipping = shipping_for(subtotal) if lines else 0.0
    return Totals(subtotal=subtotal, shipping=shipping, total=round(subtotal + shipping, 2))


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_order_number() -> str:
    """
    "NFC-" + base36 microsecond timestamp.

    Stamps are strictly increasing within the process, so two orders
    placed in the same microsecond still get distinct numbers.
    """
    global _last_stamp
    with _stamp_lock:
        stamp = max(time.time_ns() // 1000, _last_stamp + 1)
        _last_stamp = stamp
    return f"{ORDER_NUMBER_PREFIX}{_to_base36(stamp)}"


def to_item_payload(line: CartLine) -> OrderItemPayload:
    return OrderItemPayload(
        product_id=line.product.id,
        name=line.product.name,
        base_price=line.product.base_price,
        category=line.product.category.value,
        quantity=line.quantity,
        customization_name=line.customization.front.name,
        linked_username=line.customization.linked_profile_username,
    )


def to_order_payload(lines: list[CartLine], shipping_info: ShippingInfo) -> OrderSubmission:
    """
    Build the order submission for a cart.

    Raises:
        EmptyCartError: nothing to check out (no order number is issued).
    """
    if not lines:
        raise EmptyCartError("Cart is empty")

    totals = compute_totals(lines)
    return OrderSubmission(
        order_number=generate_order_number(),
        items=[to_item_payload(line) for line in lines],
        shipping_info=shipping_info,
        subtotal=totals.subtotal,
        shipping=totals.shipping,
        total=totals.total,
    )
