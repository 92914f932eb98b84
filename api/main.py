"""
Art marketplace - Main FastAPI Application.

REST layer over the order engine: carts, checkout, payments and shipping.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import time

from api.routes import health, orders, payments
from artmarket import __version__
from artmarket.domain.exceptions import (
    AmountMismatch,
    InsufficientStock,
    InvalidStateTransition,
    MarketplaceError,
    NotFound,
    Unauthorized,
    UpstreamUnavailable,
)
from artmarket.infrastructure.database.config import close_database, init_database
from artmarket.infrastructure.logging import LOG_FORMAT


# Setup logging
logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
logger = logging.getLogger(__name__)


# Domain error -> HTTP status (first match wins)
ERROR_STATUS = (
    (NotFound, 404),
    (Unauthorized, 403),
    (InsufficientStock, 409),
    (InvalidStateTransition, 409),
    (AmountMismatch, 400),
    (UpstreamUnavailable, 502),
)


def status_for(exc: MarketplaceError) -> int:
    for error_type, status_code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return 500


# =============================================================================
# CREATE FASTAPI APP
# =============================================================================

app = FastAPI(
    title="Art Marketplace - Order Engine API",
    description="""
    Orders, stock reservation, payment settlement and shipping for an art marketplace.

    Features:
    - One open cart per profile with atomic stock reservation
    - Checkout with carrier shipping quotes
    - Gateway payments reconciled by webhook (idempotent)
    - Referral commission accrual
    - Admin shipping with carrier wallet payment
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)


# =============================================================================
# REQUEST LOGGING MIDDLEWARE
# =============================================================================

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing."""
    start_time = time.time()
    logger.info(f"→ {request.method} {request.url.path}")

    response = await call_next(request)

    duration = time.time() - start_time
    logger.info(
        f"← {request.method} {request.url.path} "
        f"[{response.status_code}] ({duration:.3f}s)"
    )
    return response


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

@app.exception_handler(MarketplaceError)
async def marketplace_error_handler(request: Request, exc: MarketplaceError):
    """Translate domain errors to HTTP responses."""
    status_code = status_for(exc)
    logger.warning(f"{request.method} {request.url.path} failed [{status_code}]: {exc.message}")
    return JSONResponse(status_code=status_code, content={**exc.to_dict(), "path": request.url.path})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all uncaught exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc),
            "path": request.url.path
        }
    )


# =============================================================================
# STARTUP/SHUTDOWN EVENTS
# =============================================================================

@app.on_event("startup")
async def startup_event():
    """Run on application startup."""
    logger.info("🚀 Art marketplace API starting up...")
    await init_database()
    logger.info("📚 Swagger UI available at: /docs")


@app.on_event("shutdown")
async def shutdown_event():
    """Run on application shutdown."""
    await close_database()
    logger.info("👋 Art marketplace API shutting down...")


# =============================================================================
# INCLUDE ROUTERS
# =============================================================================

app.include_router(health.router, tags=["Health"])
app.include_router(health.router, prefix="/api/v1", tags=["Health"])
app.include_router(orders.router, prefix="/api/v1/orders", tags=["Orders"])
app.include_router(payments.router, prefix="/api/v1/payments", tags=["Payments"])


@app.get("/", tags=["Root"])
async def root():
    """API root endpoint."""
    return {
        "message": "Art Marketplace - Order Engine API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
