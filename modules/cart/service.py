"""
Cart Module - Service Layer
==============================
Cart management: add/update/remove lines, clear, totals.
Stock checks here are advisory; stock is only reserved at checkout.
"""

import logging
from typing import List, Tuple

from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func

from common.exceptions import ValidationError, NotFoundError, InsufficientStockError
from common.helpers import to_money
from config.settings import CART_MAX_QUANTITY
from modules.cart.models import CartLine
from modules.catalog.service import catalog_service

logger = logging.getLogger("storefront.cart")


class CartService:

    def get_lines(self, db: Session, user_id: int) -> List[CartLine]:
        return (
            db.query(CartLine)
            .options(joinedload(CartLine.product))
            .filter(CartLine.user_id == user_id)
            .order_by(CartLine.id.desc())
            .all()
        )

    def get_cart(self, db: Session, user_id: int) -> dict:
        """
        All cart lines plus totals.
        Returns: {"items", "total_items", "total_amount", "item_count"}
        """
        lines = self.get_lines(db, user_id)
        return {
            "items": lines,
            "total_items": sum(line.quantity for line in lines),
            "total_amount": to_money(sum((line.subtotal for line in lines), 0)),
            "item_count": len(lines),
        }

    def get_count(self, db: Session, user_id: int) -> Tuple[int, int]:
        """Returns: (total_quantity, distinct_line_count)"""
        total, count = db.query(
            func.coalesce(func.sum(CartLine.quantity), 0),
            func.count(CartLine.id),
        ).filter(CartLine.user_id == user_id).one()
        return int(total), int(count)

    def add_item(self, db: Session, user_id: int, product_id: int, quantity: int) -> Tuple[CartLine, bool]:
        """
        Add `quantity` of a product; a repeat add increments the existing line.
        Returns: (line, created)
        """
        self._check_quantity(quantity)

        product = catalog_service.get_active_product(db, product_id)
        if not product:
            raise NotFoundError("Product not found or inactive")

        line = db.query(CartLine).filter(
            CartLine.user_id == user_id,
            CartLine.product_id == product_id,
        ).first()

        new_qty = quantity + (line.quantity if line else 0)
        if new_qty > product.stock_quantity:
            raise InsufficientStockError(product.name, new_qty, product.stock_quantity)

        created = line is None
        if created:
            line = CartLine(user_id=user_id, product_id=product_id, quantity=quantity)
            db.add(line)
        else:
            line.quantity = new_qty

        db.flush()
        return line, created

    def update_quantity(self, db: Session, user_id: int, line_id: int, quantity: int) -> CartLine:
        self._check_quantity(quantity)
        line = self._get_own_line(db, user_id, line_id)

        if quantity > line.product.stock_quantity:
            raise InsufficientStockError(line.product.name, quantity, line.product.stock_quantity)

        line.quantity = quantity
        db.flush()
        return line

    def remove_line(self, db: Session, user_id: int, line_id: int) -> str:
        """Delete one line. Returns the product name for the confirmation message."""
        line = self._get_own_line(db, user_id, line_id)
        name = line.product.name
        db.delete(line)
        db.flush()
        return name

    def clear_cart(self, db: Session, user_id: int) -> int:
        """Remove all lines from the user's cart. Returns the number removed."""
        _, count = self.get_count(db, user_id)
        if count == 0:
            raise ValidationError("Cart is already empty")
        db.query(CartLine).filter(CartLine.user_id == user_id).delete()
        db.flush()
        logger.info("Cart cleared for user #%s (%s lines)", user_id, count)
        return count

    # ==========================================
    # Private helpers
    # ==========================================

    def _get_own_line(self, db: Session, user_id: int, line_id: int) -> CartLine:
        line = db.query(CartLine).filter(
            CartLine.id == line_id,
            CartLine.user_id == user_id,
        ).first()
        if not line:
            raise NotFoundError("Cart item not found")
        return line

    def _check_quantity(self, quantity: int):
        if quantity < 1 or quantity > CART_MAX_QUANTITY:
            raise ValidationError(f"Quantity must be an integer between 1 and {CART_MAX_QUANTITY}")


# Singleton
cart_service = CartService()
