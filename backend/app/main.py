# backend/app/main.py
"""
FastAPI application entry point.

This file:
- Configures application-wide logging
- Creates the FastAPI application
- Registers middleware (CORS, rate limiting, correlation ID)
- Registers global exception handlers
- Registers all routers
- Defines global endpoints (root, health)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException

from app.config import settings
from app.middleware import (
    CorrelationIdMiddleware,
    limiter,
    rate_limit_exceeded_handler,
    SlowAPIMiddleware,
    RATE_LIMIT_HEALTH,
)
from app.routers import returns_router
from app.schemas.errors import ErrorDetail, ValidationErrorDetail
from app.services.exceptions import (
    ServiceError,
    ValidationError,
    TooManyItemsError,
    PurchaseAfterValuationError,
)
from app.utils import setup_logging

logger = logging.getLogger(__name__)

# =============================================================================
# LOGGING SETUP (must be before app creation)
# =============================================================================

setup_logging()

# =============================================================================
# APPLICATION SETUP
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="Invested capital, current value, returns and XIRR for investment portfolios",
    version="0.1.0",
    debug=settings.debug,
)


# =============================================================================
# MIDDLEWARE (order matters: last added = first executed)
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# slowapi reads the limiter from app state
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

# Outermost, so every log line of the request carries the ID
app.add_middleware(CorrelationIdMiddleware)


# =============================================================================
# GLOBAL EXCEPTION HANDLERS
# =============================================================================
# Services raise domain exceptions with no HTTP knowledge; these handlers
# map them to status codes and the ErrorDetail envelope.
# =============================================================================

app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


@app.exception_handler(TooManyItemsError)
async def too_many_items_handler(request: Request, exc: TooManyItemsError) -> JSONResponse:
    """Handle oversized requests (413)."""
    logger.warning(f"Too many items: {exc}")
    return JSONResponse(
        status_code=413,
        content=ErrorDetail(
            error="TooManyItemsError",
            message=str(exc),
            details={"field": exc.field, "count": exc.count, "limit": exc.limit},
        ).model_dump(),
    )


@app.exception_handler(PurchaseAfterValuationError)
async def purchase_after_valuation_handler(
    request: Request, exc: PurchaseAfterValuationError
) -> JSONResponse:
    """Handle holdings bought after the valuation date (400)."""
    logger.warning(f"Purchase after valuation date: {exc.symbol}")
    return JSONResponse(
        status_code=400,
        content=ErrorDetail(
            error="PurchaseAfterValuationError",
            message=str(exc),
            details={
                "field": exc.field,
                "symbol": exc.symbol,
                "purchase_date": exc.purchase_date.isoformat(),
                "as_of": exc.as_of.isoformat(),
            },
        ).model_dump(),
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handle other service validation errors (400)."""
    logger.warning(f"Validation error: {exc}")
    return JSONResponse(
        status_code=400,
        content=ErrorDetail(
            error="ValidationError",
            message=str(exc),
            details={"field": exc.field} if exc.field else None,
        ).model_dump(),
    )


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Handle generic service errors (500)."""
    logger.error(f"Service error: {exc}")
    return JSONResponse(
        status_code=500,
        content=ErrorDetail(
            error="ServiceError",
            message=str(exc),
            details=None,
        ).model_dump(),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """
    Handle all HTTPExceptions with consistent error format.

    Converts the default {"detail": "..."} format to ErrorDetail. Registered
    for the Starlette base class so unknown routes (404) and wrong methods
    (405) get the same envelope.
    """
    error_types = {
        400: "BadRequestError",
        404: "NotFoundError",
        405: "MethodNotAllowedError",
        413: "PayloadTooLargeError",
        422: "ValidationError",
        429: "RateLimitError",
        500: "InternalServerError",
        503: "ServiceUnavailableError",
    }
    error_type = error_types.get(exc.status_code, "HTTPError")

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorDetail(
            error=error_type,
            message=str(exc.detail) if exc.detail else "An error occurred",
            details=None,
        ).model_dump(),
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle Pydantic validation errors with consistent format.

    Converts the default 422 validation error to ValidationErrorDetail.
    """
    errors = []
    for error in exc.errors():
        errors.append({
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        })

    return JSONResponse(
        status_code=422,
        content=ValidationErrorDetail(
            error="ValidationError",
            message="Request validation failed",
            details=errors,
        ).model_dump(),
    )


# =============================================================================
# ROUTER REGISTRATION
# =============================================================================

app.include_router(returns_router)  # /returns/*


# =============================================================================
# GLOBAL ENDPOINTS
# =============================================================================

@app.get("/", tags=["Health"])
@limiter.limit(RATE_LIMIT_HEALTH)
def root(request: Request):
    """
    API root - returns basic application info.
    """
    return {
        "message": f"Welcome to {settings.app_name}!",
        "docs": "/docs",
        "redoc": "/redoc",
    }


@app.get("/health", tags=["Health"])
@limiter.limit(RATE_LIMIT_HEALTH)
def health_check(request: Request):
    """
    Liveness check.

    The service has no database or upstream dependency, so being able to
    answer means being healthy.
    """
    return {
        "status": "healthy",
        "app": settings.app_name,
        "environment": settings.environment,
    }
