"""
Order Routes
==============
Checkout, order list, order detail and cancellation for the current user.

Handlers are plain functions so their blocking session work runs in the
threadpool. Payloads are built before commit, so nothing reloads afterwards.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config.database import get_db
from config.settings import DEFAULT_PAGE_SIZE
from common.responses import send_success
from modules.auth.deps import require_login
from modules.order.lifecycle import order_lifecycle
from modules.order.query import order_query_service, DEFAULT_SORT_KEY, DEFAULT_SORT_ORDER
from modules.order.schemas import CheckoutRequest, serialize_order
from modules.order.service import order_service

router = APIRouter(prefix="/api/orders", tags=["orders"])


# ==========================================
# ✅ Checkout
# ==========================================

@router.post("")
def create_order(
    body: CheckoutRequest,
    db: Session = Depends(get_db),
    me=Depends(require_login),
):
    address = body.shipping_address.model_dump() if body.shipping_address else None
    order = order_service.place_order(
        db,
        user_id=me.id,
        payment_method=body.payment_method,
        shipping_address_id=body.shipping_address_id,
        shipping_address=address,
        notes=body.notes,
    )
    payload = {"order": serialize_order(order)}
    db.commit()
    return send_success("Order created successfully", payload, status_code=201)


# ==========================================
# 📋 My Orders
# ==========================================

@router.get("/my-orders")
def my_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1),
    status: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(DEFAULT_SORT_KEY, alias="sortBy"),
    sort_order: Optional[str] = Query(DEFAULT_SORT_ORDER, alias="sortOrder"),
    db: Session = Depends(get_db),
    me=Depends(require_login),
):
    result = order_query_service.list_orders(
        db, user_id=me.id, status=status,
        page=page, limit=limit, sort_by=sort_by, sort_order=sort_order,
    )
    return send_success("Orders retrieved successfully", {
        "orders": [serialize_order(o) for o in result.orders],
        "pagination": result.pagination(),
    })


@router.get("/{order_id}")
def order_detail(
    order_id: int,
    db: Session = Depends(get_db),
    me=Depends(require_login),
):
    order = order_query_service.get_order(db, order_id, user_id=me.id)
    return send_success("Order retrieved successfully", {"order": serialize_order(order)})


# ==========================================
# ❌ Cancel
# ==========================================

@router.patch("/{order_id}/cancel")
def cancel_order(
    order_id: int,
    db: Session = Depends(get_db),
    me=Depends(require_login),
):
    order = order_lifecycle.cancel(db, order_id, me.id)
    payload = {"order": serialize_order(order)}
    db.commit()
    return send_success("Order cancelled successfully", payload)
