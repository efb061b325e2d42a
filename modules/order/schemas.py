"""
Order Module - Schemas
========================
Request bodies for the order endpoints and the JSON shape of an order.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from modules.order.lifecycle import allowed_transitions, can_cancel
from modules.order.models import Order
from modules.payment.models import PaymentMethod


# ==========================================
# Requests
# ==========================================

class ShippingAddressIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    street: str = Field(..., min_length=1, max_length=200)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    zip_code: str = Field(..., min_length=1, max_length=20, alias="zipCode")
    country: str = Field(..., min_length=1, max_length=100)


class CheckoutRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    payment_method: PaymentMethod = Field(..., alias="paymentMethod")
    shipping_address_id: Optional[int] = Field(None, gt=0, alias="shippingAddressId")
    shipping_address: Optional[ShippingAddressIn] = Field(None, alias="shippingAddress")
    notes: Optional[str] = Field(None, max_length=500)


class StatusUpdateRequest(BaseModel):
    status: str = Field(..., min_length=1)


# ==========================================
# Responses
# ==========================================

def serialize_order(order: Order, include_user: bool = False) -> dict:
    data = {
        "id": order.id,
        "orderNumber": order.order_number,
        "userId": order.user_id,
        "status": order.status,
        "totalAmount": order.total_amount,
        "notes": order.notes,
        "shippingAddressId": order.shipping_address_id,
        "createdAt": order.created_at,
        "updatedAt": order.updated_at,
        "canCancel": can_cancel(order.status),
        "availableTransitions": allowed_transitions(order.status),
        "orderItems": [
            {
                "id": line.id,
                "productId": line.product_id,
                "productName": line.product_name,
                "quantity": line.quantity,
                "price": line.unit_price_at_purchase,
                "subtotal": line.subtotal,
            }
            for line in order.lines
        ],
        "payments": [
            {
                "id": payment.id,
                "amount": payment.amount,
                "method": payment.method,
                "status": payment.status,
                "transactionId": payment.transaction_id,
                "createdAt": payment.created_at,
            }
            for payment in order.payments
        ],
    }
    if order.shipping_address is not None:
        data["shippingAddress"] = order.shipping_address.full_address
    if include_user and order.user is not None:
        data["user"] = {
            "id": order.user.id,
            "firstName": order.user.first_name,
            "lastName": order.user.last_name,
            "fullName": order.user.full_name,
            "email": order.user.email,
        }
    return data
