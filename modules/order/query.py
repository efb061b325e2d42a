"""
Order Module - Read Side
==========================
Paginated order listing and owner-scoped lookup.
"""

from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import asc, desc
from sqlalchemy.orm import Session, selectinload

from common.exceptions import ValidationError, NotFoundError
from common.helpers import total_pages
from config.settings import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from modules.order.models import Order, OrderStatus

# Closed set of sort keys; anything else falls back to DEFAULT_SORT_KEY
SORT_COLUMNS = {
    "createdAt": Order.created_at,
    "updatedAt": Order.updated_at,
    "status": Order.status,
}
DEFAULT_SORT_KEY = "createdAt"
SORT_DIRECTIONS = {"asc": asc, "desc": desc}
DEFAULT_SORT_ORDER = "desc"


@dataclass
class OrderPage:
    orders: List[Order]
    total_items: int
    current_page: int
    items_per_page: int

    @property
    def total_pages(self) -> int:
        return total_pages(self.total_items, self.items_per_page)

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.current_page > 1

    def pagination(self) -> dict:
        return {
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
            "totalItems": self.total_items,
            "itemsPerPage": self.items_per_page,
            "hasNext": self.has_next,
            "hasPrev": self.has_prev,
        }


class OrderQueryService:

    def list_orders(
        self,
        db: Session,
        user_id: Optional[int] = None,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        sort_by: Optional[str] = DEFAULT_SORT_KEY,
        sort_order: Optional[str] = DEFAULT_SORT_ORDER,
    ) -> OrderPage:
        """
        List orders, newest first by default.
        user_id=None lists every user's orders (admin).
        Unknown sort_by / sort_order silently fall back to the defaults.
        """
        if page < 1:
            raise ValidationError("page must be a positive integer")
        if limit < 1:
            raise ValidationError("limit must be a positive integer")
        limit = min(limit, MAX_PAGE_SIZE)

        query = db.query(Order)
        if user_id is not None:
            query = query.filter(Order.user_id == user_id)
        if status:
            parsed = OrderStatus.parse(status)
            if parsed is None:
                raise ValidationError(f"Invalid order status: {status}")
            query = query.filter(Order.status == parsed.value)

        total = query.count()

        column = SORT_COLUMNS.get(sort_by, SORT_COLUMNS[DEFAULT_SORT_KEY])
        direction = SORT_DIRECTIONS.get(sort_order, SORT_DIRECTIONS[DEFAULT_SORT_ORDER])
        orders = (
            query.options(selectinload(Order.lines), selectinload(Order.payments))
            .order_by(direction(column), direction(Order.id))
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )

        return OrderPage(orders=orders, total_items=total, current_page=page, items_per_page=limit)

    def get_order(self, db: Session, order_id: int, user_id: Optional[int] = None) -> Order:
        """Fetch one order; with user_id the lookup is scoped to that owner."""
        query = db.query(Order).options(
            selectinload(Order.lines),
            selectinload(Order.payments),
        ).filter(Order.id == order_id)
        if user_id is not None:
            query = query.filter(Order.user_id == user_id)
        order = query.first()
        if not order:
            raise NotFoundError("Order not found")
        return order


# Singleton
order_query_service = OrderQueryService()
