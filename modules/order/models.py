"""
Order Module - Models
======================
Order with a frozen price snapshot per line.
"""

import enum
from sqlalchemy import (
    Column, Integer, String, Numeric, Text,
    ForeignKey, DateTime, CheckConstraint, Index,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from config.database import Base


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

    @classmethod
    def parse(cls, value):
        """Return the member named by `value`, or None if it isn't one."""
        try:
            return cls(str(value).upper())
        except ValueError:
            return None


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String(32), unique=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    status = Column(String, default=OrderStatus.PENDING.value, nullable=False, index=True)
    total_amount = Column(Numeric(10, 2), nullable=False)
    shipping_address_id = Column(Integer, ForeignKey("addresses.id", ondelete="SET NULL"), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    user = relationship("User", back_populates="orders")
    shipping_address = relationship("Address")
    lines = relationship(
        "OrderLine", back_populates="order",
        cascade="all, delete-orphan", order_by="OrderLine.id",
    )
    payments = relationship(
        "Payment", back_populates="order",
        cascade="all, delete-orphan", order_by="Payment.id",
    )

    __table_args__ = (
        Index("ix_orders_user_created", "user_id", "created_at"),
    )

    @property
    def lines_total(self):
        """Sum of the line snapshots; equals total_amount for every committed order."""
        return sum((line.subtotal for line in self.lines), 0)

    def __repr__(self):
        return f"<Order {self.order_number} {self.status}>"


class OrderLine(Base):
    __tablename__ = "order_lines"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False)
    quantity = Column(Integer, nullable=False)

    # Snapshot at time of purchase
    product_name = Column(String, nullable=False)
    unit_price_at_purchase = Column(Numeric(10, 2), nullable=False)

    # Relationships
    order = relationship("Order", back_populates="lines")
    product = relationship("Product")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_order_line_qty"),
    )

    @property
    def subtotal(self):
        return self.quantity * self.unit_price_at_purchase
