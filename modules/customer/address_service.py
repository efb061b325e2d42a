"""
Customer Module - Address Service
====================================
Create and fetch shipping addresses for a user.
"""

from typing import Optional

from sqlalchemy.orm import Session

from common.exceptions import NotFoundError
from modules.customer.address_models import Address

ADDRESS_FIELDS = ("street", "city", "state", "zip_code", "country")


class AddressService:

    def get_user_address(self, db: Session, user_id: int, address_id: int) -> Address:
        """Fetch an address owned by `user_id`. Raises NotFoundError otherwise."""
        address = db.query(Address).filter(
            Address.id == address_id,
            Address.user_id == user_id,
        ).first()
        if not address:
            raise NotFoundError("Shipping address not found")
        return address

    def create_address(self, db: Session, user_id: int, data: dict, is_default: bool = False) -> Address:
        """Add a new address for the user. Caller commits."""
        address = Address(
            user_id=user_id,
            is_default=is_default,
            **{field: data[field] for field in ADDRESS_FIELDS},
        )
        db.add(address)
        db.flush()
        return address

    def resolve_shipping_address(
        self, db: Session, user_id: int,
        address_id: Optional[int] = None, address_data: Optional[dict] = None,
    ) -> Optional[int]:
        """
        Return the id of the address an order ships to.
        An inline address is created and committed on its own, so it
        survives even if the checkout that follows is rolled back.
        """
        if address_id is not None:
            return self.get_user_address(db, user_id, address_id).id
        if address_data:
            address = self.create_address(db, user_id, address_data)
            db.commit()
            return address.id
        return None


# Singleton
address_service = AddressService()
