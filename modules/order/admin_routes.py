"""
Order Module - Admin Routes
==============================
Order management for admin: list all orders, set status.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config.database import get_db
from config.settings import DEFAULT_PAGE_SIZE
from common.responses import send_success
from modules.auth.deps import require_admin
from modules.order.lifecycle import order_lifecycle
from modules.order.query import order_query_service, DEFAULT_SORT_KEY, DEFAULT_SORT_ORDER
from modules.order.schemas import StatusUpdateRequest, serialize_order

router = APIRouter(prefix="/api/admin/orders", tags=["order-admin"])


@router.get("")
def admin_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1),
    status: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(DEFAULT_SORT_KEY, alias="sortBy"),
    sort_order: Optional[str] = Query(DEFAULT_SORT_ORDER, alias="sortOrder"),
    db: Session = Depends(get_db),
    user=Depends(require_admin),
):
    result = order_query_service.list_orders(
        db, status=status,
        page=page, limit=limit, sort_by=sort_by, sort_order=sort_order,
    )
    return send_success("All orders retrieved successfully", {
        "orders": [serialize_order(o, include_user=True) for o in result.orders],
        "pagination": result.pagination(),
    })


@router.patch("/{order_id}/status")
def update_order_status(
    order_id: int,
    body: StatusUpdateRequest,
    db: Session = Depends(get_db),
    user=Depends(require_admin),
):
    """Set an order's status. Stock is not touched; customers cancel via /cancel."""
    order = order_lifecycle.update_status(db, order_id, body.status)
    payload = {"order": serialize_order(order, include_user=True)}
    db.commit()
    return send_success("Order status updated successfully", payload)
