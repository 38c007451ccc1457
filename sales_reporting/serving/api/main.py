"""
FastAPI Application Factory

Creates and configures the reporting API application.
"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
import structlog

from sales_reporting.config import get_settings
from sales_reporting.reporting.exceptions import (
    ForbiddenError,
    ReportingError,
    ReportValidationError,
    UnauthenticatedError,
)
from sales_reporting.serving.api.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from sales_reporting.serving.api.routes import dashboard_router, earnings_router, health_router

logger = structlog.get_logger(__name__)

ERROR_STATUS_CODES = {
    UnauthenticatedError: 401,
    ForbiddenError: 403,
    ReportValidationError: 400,
}


async def reporting_error_handler(request: Request, exc: ReportingError) -> JSONResponse:
    """Map reporting errors to HTTP responses"""
    status_code = ERROR_STATUS_CODES.get(type(exc), 500)
    logger.warning(
        "Report request rejected",
        path=request.url.path,
        status_code=status_code,
        error=str(exc),
        error_type=type(exc).__name__,
    )
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def create_api_app(lifespan=None, title: Optional[str] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        lifespan: Optional lifespan context manager
        title: Override the application title

    Returns:
        Configured FastAPI app instance
    """
    settings = get_settings()

    app = FastAPI(
        title=title or "Sales Reporting API",
        description="Dashboard, revenue and earnings reports for sales agents and administrators",
        version=settings.version,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)

    app.add_exception_handler(ReportingError, reporting_error_handler)

    app.include_router(health_router, prefix="/api/v1", tags=["Health"])
    app.include_router(dashboard_router, prefix="/api/v1/dashboard", tags=["Dashboard"])
    app.include_router(earnings_router, prefix="/api/v1/earnings", tags=["Earnings"])

    return app
