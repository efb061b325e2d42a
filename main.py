"""
Storefront - Application Entry Point
======================================
FastAPI app initialization, exception handlers, and router registration.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from config.database import Base, engine
from common.exceptions import StorefrontError
from common.responses import send_error

logger = logging.getLogger("storefront.errors")


# ==========================================
# Import ALL models so Base can see them
# ==========================================
from modules.user.models import User  # noqa: F401
from modules.customer.address_models import Address  # noqa: F401
from modules.catalog.models import Category, Product  # noqa: F401
from modules.cart.models import CartLine  # noqa: F401
from modules.order.models import Order, OrderLine  # noqa: F401
from modules.payment.models import Payment  # noqa: F401

# ==========================================
# Import routers
# ==========================================
from modules.cart.routes import router as cart_router
from modules.order.routes import router as order_router
from modules.order.admin_routes import router as order_admin_router


@asynccontextmanager
async def lifespan(app):
    # Auto-create any missing tables (safe for existing tables)
    Base.metadata.create_all(bind=engine)
    logger.info("Storefront %s started", settings.APP_VERSION)
    yield


# ==========================================
# Create App
# ==========================================
app = FastAPI(
    title="Storefront",
    description="Cart, checkout and order lifecycle API",
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url=None,
    lifespan=lifespan,
)


# ==========================================
# Exception handlers → {success, message, error}
# ==========================================

async def storefront_error_handler(request: Request, exc: StorefrontError):
    """Expected business failures: answered as-is, not logged as server errors."""
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.error, exc.message)
    return send_error(exc.message, exc.status_code, exc.error)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed body/query: report the first failing field."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
        message = f"Validation error: {field + ': ' if field else ''}{first.get('msg', 'invalid value')}"
    else:
        message = "Validation error"
    return send_error(message, 400, "ValidationError")


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return send_error(str(exc.detail), exc.status_code)


async def unhandled_exception_handler(request: Request, exc: Exception):
    """Anything unexpected: log with traceback, answer with a generic message."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return send_error("Internal server error", 500, "InternalError")


app.add_exception_handler(StorefrontError, storefront_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


# ==========================================
# Register Routers
# ==========================================
app.include_router(cart_router)
app.include_router(order_router)
app.include_router(order_admin_router)


# ==========================================
# Health check
# ==========================================
@app.get("/health")
async def health():
    return {"status": "ok", "version": settings.APP_VERSION}
