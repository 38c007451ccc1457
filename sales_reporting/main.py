"""
FastAPI Production Application

Main entry point for the Sales Reporting API.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
import structlog

from sales_reporting.config import get_settings
from sales_reporting.config.logging import configure_logging
from sales_reporting.database.connection import close_database, init_database
from sales_reporting.serving.api import create_api_app

settings = get_settings()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    configure_logging()

    logger.info("Starting Sales Reporting API", environment=settings.app_env, version=settings.version)
    await init_database()

    yield

    logger.info("Shutting down...")
    await close_database()


app = create_api_app(lifespan=lifespan)


@app.get("/api/v1/info")
async def api_info():
    """API information endpoint."""
    return {
        "name": "Sales Reporting API",
        "version": settings.version,
        "environment": settings.app_env,
        "documentation": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
