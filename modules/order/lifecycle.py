"""
Order Module - Lifecycle
==========================
Status state machine for existing orders.

    PENDING -> CONFIRMED -> PROCESSING -> SHIPPED -> DELIVERED
    PENDING | CONFIRMED -> CANCELLED   (restores stock, refunds payments)

Every rule lives in TRANSITIONS. `cancel` is the only transition with
inventory side effects; admin `update_status` sets any known status and
never touches stock, since forward progress assumes fulfillment already
consumed the reservation.
"""

import logging
from dataclasses import dataclass
from typing import FrozenSet, List

from sqlalchemy.orm import Session

from common.exceptions import ValidationError, NotFoundError, InvalidTransitionError
from common.helpers import now_utc
from modules.inventory.service import inventory_ledger
from modules.order.models import Order, OrderStatus
from modules.payment.models import PaymentStatus

logger = logging.getLogger("storefront.lifecycle")


@dataclass(frozen=True)
class Transition:
    name: str
    sources: FrozenSet[OrderStatus]
    target: OrderStatus
    restores_stock: bool = False
    refunds_payments: bool = False


TRANSITIONS = {
    t.name: t for t in (
        Transition("confirm", frozenset({OrderStatus.PENDING}), OrderStatus.CONFIRMED),
        Transition("process", frozenset({OrderStatus.CONFIRMED}), OrderStatus.PROCESSING),
        Transition("ship", frozenset({OrderStatus.PROCESSING}), OrderStatus.SHIPPED),
        Transition("deliver", frozenset({OrderStatus.SHIPPED}), OrderStatus.DELIVERED),
        Transition(
            "cancel",
            frozenset({OrderStatus.PENDING, OrderStatus.CONFIRMED}),
            OrderStatus.CANCELLED,
            restores_stock=True,
            refunds_payments=True,
        ),
    )
}


def allowed_transitions(status) -> List[str]:
    """Names of the transitions that may start from `status`."""
    current = OrderStatus.parse(status)
    return [t.name for t in TRANSITIONS.values() if current in t.sources]


def can_cancel(status) -> bool:
    return OrderStatus.parse(status) in TRANSITIONS["cancel"].sources


class OrderLifecycle:

    # ==========================================
    # Cancel (customer)
    # ==========================================

    def cancel(self, db: Session, order_id: int, user_id: int) -> Order:
        """
        Cancel the caller's own order, put its stock back and refund its
        payments, all in the caller's transaction.
        Raises NotFoundError if the order is missing or owned by someone else.
        """
        order = (
            db.query(Order)
            .filter(Order.id == order_id, Order.user_id == user_id)
            .with_for_update()
            .first()
        )
        if not order:
            raise NotFoundError("Order not found")

        try:
            self._apply(db, order, TRANSITIONS["cancel"])
        except Exception:
            db.rollback()
            raise

        logger.info("Order %s cancelled by user #%s", order.order_number, user_id)
        return order

    # ==========================================
    # Admin status update
    # ==========================================

    def update_status(self, db: Session, order_id: int, new_status: str) -> Order:
        """Set any known status. No transition graph check, no inventory effect."""
        target = OrderStatus.parse(new_status)
        if target is None:
            allowed = ", ".join(s.value for s in OrderStatus)
            raise ValidationError(f"Invalid order status: {new_status}. Allowed: {allowed}")

        order = db.query(Order).filter(Order.id == order_id).with_for_update().first()
        if not order:
            raise NotFoundError("Order not found")

        previous = order.status
        order.status = target.value
        order.updated_at = now_utc()
        db.flush()

        logger.info("Order %s status %s -> %s (admin)", order.order_number, previous, target.value)
        return order

    # ==========================================
    # Private helpers
    # ==========================================

    def _apply(self, db: Session, order: Order, transition: Transition):
        current = OrderStatus.parse(order.status)
        if current not in transition.sources:
            raise InvalidTransitionError(order.status, transition.target.value)

        # Guarded write: only one of two racing transitions can match the row
        matched = (
            db.query(Order)
            .filter(
                Order.id == order.id,
                Order.status.in_([s.value for s in transition.sources]),
            )
            .update(
                {Order.status: transition.target.value, Order.updated_at: now_utc()},
                synchronize_session=False,
            )
        )
        if matched != 1:
            db.refresh(order)
            raise InvalidTransitionError(order.status, transition.target.value)
        db.expire(order, ["status", "updated_at"])

        if transition.restores_stock:
            for line in order.lines:
                inventory_ledger.release(db, line.product_id, line.quantity)

        if transition.refunds_payments:
            for payment in order.payments:
                payment.status = PaymentStatus.REFUNDED.value

        db.flush()


# Singleton
order_lifecycle = OrderLifecycle()
