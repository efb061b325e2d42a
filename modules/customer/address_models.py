"""
Customer Module - Address Model
=================================
Saved shipping addresses, referenced by orders.
"""

from sqlalchemy import (
    Column, Integer, String, Boolean, ForeignKey, DateTime,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from config.database import Base


class Address(Base):
    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    street = Column(String, nullable=False)
    city = Column(String, nullable=False)
    state = Column(String, nullable=False)
    zip_code = Column(String(20), nullable=False)
    country = Column(String, nullable=False)
    is_default = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="addresses")

    @property
    def full_address(self) -> str:
        return ", ".join([self.street, self.city, self.state, self.zip_code, self.country])
