"""
Storefront - Shared Helpers
============================
Pure utility functions with NO database or module dependencies.
"""

import math
import secrets
import time
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

CENT = Decimal("0.01")


def now_utc() -> datetime:
    """Returns current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


def safe_int(value: Optional[str]) -> Optional[int]:
    """Safely convert a string to int. Returns None on failure."""
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except (ValueError, TypeError):
        return None


def to_money(value) -> Decimal:
    """Quantize a numeric value to 2 decimal places."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def total_pages(total: int, per_page: int) -> int:
    return math.ceil(total / per_page) if total else 0


# ==========================================
# Order Number Generator
# ==========================================

_ORDER_SUFFIX_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"


def generate_order_number(suffix_length: int = 6) -> str:
    """
    Human-readable order number: ORD-<last 6 digits of epoch ms>-<random suffix>.
    Uniqueness is enforced by the database; callers retry on collision.
    """
    stamp = str(int(time.time() * 1000))[-6:]
    suffix = "".join(secrets.choice(_ORDER_SUFFIX_ALPHABET) for _ in range(suffix_length))
    return f"ORD-{stamp}-{suffix}"
