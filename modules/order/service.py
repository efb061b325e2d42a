"""
Order Module - Service Layer
===============================
Checkout: turn the user's cart into a frozen order.

One transaction, all or nothing:
1. Validate the cart (non-empty, products active, enough stock)
2. Create the order with a fresh order number and the total at current prices
3. Snapshot each cart line into an order line and reserve its stock
4. Record a PENDING payment for the total
5. Clear the cart

The stock check in step 1 only produces a readable error early. The
reservation in step 3 is the authoritative check, because stock can move
between validation and commit.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from common.exceptions import (
    ValidationError, EmptyCartError, ProductUnavailableError,
    InsufficientStockError, OrderNumberConflictError,
)
from common.helpers import generate_order_number, to_money
from config.settings import ORDER_NUMBER_MAX_RETRIES
from modules.cart.models import CartLine
from modules.customer.address_service import address_service
from modules.inventory.service import inventory_ledger
from modules.order.models import Order, OrderLine, OrderStatus
from modules.payment.models import Payment, PaymentMethod, PaymentStatus

logger = logging.getLogger("storefront.order")


class OrderService:

    # ==========================================
    # Checkout
    # ==========================================

    def place_order(
        self,
        db: Session,
        user_id: int,
        payment_method: str,
        shipping_address_id: Optional[int] = None,
        shipping_address: Optional[dict] = None,
        notes: Optional[str] = None,
    ) -> Order:
        """
        Create an order from the user's cart and return it with lines and
        payment loaded. The caller commits.

        shipping_address keys: street, city, state, zip_code, country.
        An inline address is saved before the order transaction starts.

        Raises EmptyCartError, ProductUnavailableError, InsufficientStockError,
        NotFoundError (address), ValidationError (payment method) and, once
        retries are exhausted, OrderNumberConflictError.
        """
        method = self._payment_method(payment_method)
        self._validate(self._load_cart(db, user_id))

        address_id = address_service.resolve_shipping_address(
            db, user_id, shipping_address_id, shipping_address,
        )

        for attempt in range(1, ORDER_NUMBER_MAX_RETRIES + 1):
            try:
                return self._assemble(db, user_id, method, address_id, notes)
            except OrderNumberConflictError as e:
                logger.warning(
                    "Order number %s collided (attempt %s/%s)",
                    e.order_number, attempt, ORDER_NUMBER_MAX_RETRIES,
                )
                if attempt == ORDER_NUMBER_MAX_RETRIES:
                    raise

    # ==========================================
    # Query
    # ==========================================

    def calculate_total(self, lines: List[CartLine]):
        """Sum of quantity * current unit price, the value frozen into the order."""
        return to_money(sum((line.quantity * line.product.unit_price for line in lines), 0))

    # ==========================================
    # Private Helpers
    # ==========================================

    def _assemble(
        self, db: Session, user_id: int, method: PaymentMethod,
        address_id: Optional[int], notes: Optional[str],
    ) -> Order:
        try:
            lines = self._load_cart(db, user_id)
            self._validate(lines)

            total = self.calculate_total(lines)
            order = Order(
                order_number=generate_order_number(),
                user_id=user_id,
                status=OrderStatus.PENDING.value,
                total_amount=total,
                shipping_address_id=address_id,
                notes=notes or None,
            )
            db.add(order)
            try:
                db.flush()
            except IntegrityError as e:
                # Only the order_number unique key is a collision; other violations propagate
                if "order_number" not in str(e.orig):
                    raise
                raise OrderNumberConflictError(order.order_number)

            for line in lines:
                order.lines.append(OrderLine(
                    product_id=line.product_id,
                    product_name=line.product.name,
                    quantity=line.quantity,
                    unit_price_at_purchase=line.product.unit_price,
                ))
                inventory_ledger.reserve(db, line.product_id, line.quantity)

            order.payments.append(Payment(
                amount=total,
                method=method.value,
                status=PaymentStatus.PENDING.value,
            ))

            db.query(CartLine).filter(CartLine.user_id == user_id).delete()
            db.flush()
        except Exception:
            db.rollback()
            raise

        logger.info(
            "Order %s placed by user #%s: %s lines, total=%s",
            order.order_number, user_id, len(lines), total,
        )
        return order

    def _load_cart(self, db: Session, user_id: int) -> List[CartLine]:
        return (
            db.query(CartLine)
            .options(joinedload(CartLine.product))
            .filter(CartLine.user_id == user_id)
            .order_by(CartLine.id)
            .populate_existing()
            .all()
        )

    def _validate(self, lines: List[CartLine]):
        if not lines:
            raise EmptyCartError()
        for line in lines:
            if line.product is None or not line.product.is_active:
                raise ProductUnavailableError(line.product_id)
        for line in lines:
            if line.product.stock_quantity < line.quantity:
                raise InsufficientStockError(line.product.name, line.quantity, line.product.stock_quantity)

    def _payment_method(self, value) -> PaymentMethod:
        try:
            return PaymentMethod(value.value if isinstance(value, PaymentMethod) else str(value).upper())
        except ValueError:
            allowed = ", ".join(m.value for m in PaymentMethod)
            raise ValidationError(f"Invalid payment method: {value}. Allowed: {allowed}")


# Singleton
order_service = OrderService()
