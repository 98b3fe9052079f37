#!/usr/bin/env python3
"""
HRMS Insights API - FastAPI Application

Productivity scores, task recommendations, skill gaps and the org
dashboard, with automatic API documentation.

Usage:
    python -m web.backend.app

Then open:
    - http://localhost:8080/docs - API Documentation (Swagger UI)
    - http://localhost:8080/redoc - Alternative API Documentation
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException

from core.errors import ServiceException
from database.database import init_db
from .config import get_config
from .dependencies import get_app_context, get_db_manager
from .exceptions import (
    service_exception_handler,
    http_exception_handler,
    general_exception_handler
)
from .routers import insights_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Load configuration
config = get_config()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Bind the shared engine before any request or in-process rescore job
    get_db_manager()
    yield
    # Only a context some request actually built has a pool to stop
    if get_app_context.cache_info().currsize:
        get_app_context().close()


# Create FastAPI app
app = FastAPI(
    lifespan=lifespan,
    title="HRMS Insights API",
    description="Deterministic productivity scoring, ranking and skill gap analysis",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Register exception handlers
app.add_exception_handler(ServiceException, service_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# Include routers
app.include_router(insights_router)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "hrms-insights"}


def main():
    """Run the web server."""
    import uvicorn

    get_db_manager()
    init_db()

    logger.info(f"Starting HRMS Insights API on {config.web.host}:{config.web.port}")
    logger.info(f"API Docs: http://{config.web.host}:{config.web.port}/docs")

    uvicorn.run(
        "web.backend.app:app",
        host=config.web.host,
        port=config.web.port,
        reload=False,
        log_level="info"
    )


if __name__ == "__main__":
    main()
