"""
User Module - User Model
=========================
Account principal. Registration and credentials live in the account
service; the storefront core only reads id, role and is_active.
"""

import enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from config.database import Base


class UserRole(str, enum.Enum):
    CUSTOMER = "CUSTOMER"
    ADMIN = "ADMIN"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    # === Identity ===
    email = Column(String, unique=True, nullable=False, index=True)

    # === Profile ===
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)

    # === Role & State ===
    role = Column(String, default=UserRole.CUSTOMER.value, server_default=UserRole.CUSTOMER.value, nullable=False)
    is_active = Column(Boolean, default=True, server_default="true", nullable=False, index=True)

    # === Audit ===
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # === Relationships ===
    cart_lines = relationship("CartLine", back_populates="user", cascade="all, delete-orphan")
    orders = relationship("Order", back_populates="user")
    addresses = relationship("Address", back_populates="user", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_users_created", "created_at"),
    )

    @property
    def full_name(self) -> str:
        """Compute full name from first + last."""
        parts = [self.first_name or "", self.last_name or ""]
        name = " ".join(p for p in parts if p).strip()
        return name or self.email

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
