"""
Cart Routes
=============
JSON API for the current user's cart.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from config.database import get_db
from config.settings import CART_MAX_QUANTITY
from common.responses import send_success
from modules.auth.deps import require_login
from modules.cart.models import CartLine
from modules.cart.service import cart_service

router = APIRouter(prefix="/api/cart", tags=["cart"])


# ==========================================
# Schemas
# ==========================================

class AddToCartRequest(BaseModel):
    product_id: int = Field(..., gt=0, alias="productId")
    quantity: int = Field(..., ge=1, le=CART_MAX_QUANTITY)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(..., ge=1, le=CART_MAX_QUANTITY)


def serialize_line(line: CartLine) -> dict:
    product = line.product
    return {
        "id": line.id,
        "productId": line.product_id,
        "quantity": line.quantity,
        "product": {
            "id": product.id,
            "name": product.name,
            "description": product.description,
            "price": product.unit_price,
            "stock": product.stock_quantity,
            "isActive": product.is_active,
            "category": (
                {"id": product.category.id, "name": product.category.name}
                if product.category else None
            ),
        },
        "subtotal": line.subtotal,
    }


# ==========================================
# 🛒 View Cart
# ==========================================

@router.get("")
def get_cart(
    db: Session = Depends(get_db),
    me=Depends(require_login),
):
    cart = cart_service.get_cart(db, me.id)
    return send_success("Cart retrieved successfully", {
        "cart": {
            "items": [serialize_line(line) for line in cart["items"]],
            "totalItems": cart["total_items"],
            "totalAmount": cart["total_amount"],
            "itemCount": cart["item_count"],
        },
    })


@router.get("/count")
def get_cart_count(
    db: Session = Depends(get_db),
    me=Depends(require_login),
):
    """Badge counter: total quantity and number of distinct lines."""
    total_items, item_count = cart_service.get_count(db, me.id)
    return send_success("Cart count retrieved successfully", {
        "totalItems": total_items,
        "itemCount": item_count,
    })


# ==========================================
# ➕ Add / ✏️ Update / ➖ Remove
# ==========================================

@router.post("")
def add_to_cart(
    body: AddToCartRequest,
    db: Session = Depends(get_db),
    me=Depends(require_login),
):
    line, created = cart_service.add_item(db, me.id, body.product_id, body.quantity)
    payload = {"item": serialize_line(line)}
    db.commit()
    if created:
        return send_success("Item added to cart successfully", payload, status_code=201)
    return send_success("Cart item updated successfully", payload)


@router.put("/{line_id}")
def update_cart_item(
    line_id: int,
    body: UpdateCartItemRequest,
    db: Session = Depends(get_db),
    me=Depends(require_login),
):
    line = cart_service.update_quantity(db, me.id, line_id, body.quantity)
    payload = {"item": serialize_line(line)}
    db.commit()
    return send_success("Cart item updated successfully", payload)


@router.delete("/{line_id}")
def remove_from_cart(
    line_id: int,
    db: Session = Depends(get_db),
    me=Depends(require_login),
):
    name = cart_service.remove_line(db, me.id, line_id)
    db.commit()
    return send_success(f"{name} removed from cart successfully")


@router.delete("")
def clear_cart(
    db: Session = Depends(get_db),
    me=Depends(require_login),
):
    count = cart_service.clear_cart(db, me.id)
    db.commit()
    return send_success(f"Cart cleared successfully. {count} items removed.")
