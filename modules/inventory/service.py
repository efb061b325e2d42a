"""
Inventory Module - Stock Ledger
=================================
The only code path allowed to change Product.stock_quantity.

Both operations are a single relative UPDATE evaluated by the database,
never a value computed in Python and written back:

    reserve:  UPDATE products SET stock_quantity = stock_quantity - :n
              WHERE id = :id AND stock_quantity >= :n
    release:  UPDATE products SET stock_quantity = stock_quantity + :n
              WHERE id = :id

The check and the decrement happen in one statement, so two concurrent
reservations cannot both pass against the same units. Changes become
visible to others when the caller's transaction commits.
"""

import logging
from typing import Optional

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from common.exceptions import (
    ValidationError, NotFoundError,
    InsufficientStockError, ProductUnavailableError,
)
from modules.catalog.models import Product

logger = logging.getLogger("storefront.inventory")


class InventoryLedger:

    # ==========================================
    # Query
    # ==========================================

    def get_stock(self, db: Session, product_id: int) -> Optional[int]:
        """Current committed-or-own-transaction stock, straight from the table."""
        row = db.query(Product.stock_quantity).filter(Product.id == product_id).first()
        return row[0] if row else None

    # ==========================================
    # Mutations
    # ==========================================

    def reserve(self, db: Session, product_id: int, quantity: int) -> None:
        """
        Take `quantity` units out of stock.
        Raises InsufficientStockError if fewer remain; nothing is changed then.
        """
        self._check_quantity(quantity)
        matched = (
            db.query(Product)
            .filter(Product.id == product_id, Product.stock_quantity >= quantity)
            .update(
                {Product.stock_quantity: Product.stock_quantity - quantity},
                synchronize_session=False,
            )
        )
        if matched != 1:
            row = db.query(Product.name, Product.stock_quantity).filter(Product.id == product_id).first()
            if row is None:
                raise ProductUnavailableError(product_id)
            logger.info(
                "Reservation refused for product #%s: requested=%s available=%s",
                product_id, quantity, row.stock_quantity,
            )
            raise InsufficientStockError(row.name, quantity, row.stock_quantity)

        self._expire_stock(db, product_id)

    def release(self, db: Session, product_id: int, quantity: int) -> None:
        """Put `quantity` units back. Used by cancellation only."""
        self._check_quantity(quantity)
        matched = (
            db.query(Product)
            .filter(Product.id == product_id)
            .update(
                {Product.stock_quantity: Product.stock_quantity + quantity},
                synchronize_session=False,
            )
        )
        if matched != 1:
            logger.error("Stock release for missing product #%s (qty=%s)", product_id, quantity)
            raise NotFoundError(f"Product not found: {product_id}")

        self._expire_stock(db, product_id)

    # ==========================================
    # Private helpers
    # ==========================================

    def _check_quantity(self, quantity: int):
        if not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError("Quantity must be a positive integer")

    def _expire_stock(self, db: Session, product_id: int):
        """Drop the stale in-session value so the next read hits the database."""
        for obj in list(db.identity_map.values()):
            if isinstance(obj, Product) and inspect(obj).identity == (product_id,):
                db.expire(obj, ["stock_quantity"])


# Singleton
inventory_ledger = InventoryLedger()
