"""
Storefront - Custom Exceptions
===============================
Business-level exceptions that are caught by the handlers in main.py and
converted to the JSON response envelope.
"""

from fastapi import status


class StorefrontError(Exception):
    """Base exception for all business logic errors."""
    status_code = status.HTTP_400_BAD_REQUEST
    error = "BadRequest"

    def __init__(self, message: str = "Request could not be processed"):
        self.message = message
        super().__init__(self.message)


class ValidationError(StorefrontError):
    """Raised for malformed or missing input."""
    error = "ValidationError"


class AuthenticationError(StorefrontError):
    """Raised when no valid principal is attached to the request."""
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class AuthorizationError(StorefrontError):
    """Raised when user lacks permission."""
    status_code = status.HTTP_403_FORBIDDEN
    error = "Forbidden"

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message)


class NotFoundError(StorefrontError):
    """Raised when a resource doesn't exist or isn't owned by the caller.

    The two cases are deliberately reported the same way.
    """
    status_code = status.HTTP_404_NOT_FOUND
    error = "NotFound"


class ConflictError(StorefrontError):
    """Raised for unique constraint violations at the business level."""
    status_code = status.HTTP_409_CONFLICT
    error = "Conflict"


class OrderNumberConflictError(ConflictError):
    """Raised when a generated order number collides with an existing one."""
    def __init__(self, order_number: str):
        self.order_number = order_number
        super().__init__("Order number already in use, please retry")


class EmptyCartError(StorefrontError):
    error = "EmptyCart"

    def __init__(self):
        super().__init__("Cart is empty")


class ProductUnavailableError(StorefrontError):
    """Raised when a cart line points at a missing or inactive product."""
    error = "ProductUnavailable"

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product not found or inactive: {product_id}")


class InsufficientStockError(StorefrontError):
    """Raised when product stock is not enough."""
    error = "InsufficientStock"

    def __init__(self, product_name: str, requested: int, available: int):
        self.product_name = product_name
        self.requested = requested
        self.available = max(available, 0)
        self.shortfall = requested - self.available
        super().__init__(
            f"Insufficient stock for {product_name}. "
            f"Available: {self.available}, Requested: {requested}, Short by: {self.shortfall}"
        )


class InvalidTransitionError(StorefrontError):
    """Raised when an order cannot move from its current status."""
    error = "InvalidTransition"

    def __init__(self, current: str, attempted: str):
        self.current = current
        self.attempted = attempted
        super().__init__(f"Order cannot move from {current} to {attempted}")
