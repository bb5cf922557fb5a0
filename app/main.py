"""FastAPI application for the Company Registry Extraction API.

This module provides the main FastAPI application instance with CORS
middleware configuration and router registration.
"""

# Load environment variables before any other imports
from dotenv import load_dotenv

load_dotenv()

import logging
import os
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.jurisdictions import DEFAULT_JURISDICTION, JURISDICTION_ENDPOINTS

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# API version and metadata
API_VERSION = "0.1.0"
API_TITLE = "Company Registry Extraction API"
API_DESCRIPTION = """
Company Registry Extraction API.

This API drives a browser against public company registries and provides
endpoints for:
- Searching companies by name or registry code
- Reading the registry's autocomplete suggestions
- Extracting identity, officers, shareholders and beneficial owners
  from a company detail page
"""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager.

    Browser sessions are opened per request, so startup only reports the
    registries the API can reach.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup is complete.
    """
    logger.info(
        f"Registry jurisdictions available: {', '.join(sorted(JURISDICTION_ENDPOINTS))} "
        f"(default {DEFAULT_JURISDICTION})"
    )
    if os.getenv("BASE_URL") or os.getenv("SEARCH_URL"):
        logger.warning("BASE_URL/SEARCH_URL override the registry endpoints for every jurisdiction")
    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application...")


# Create FastAPI application instance
app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


# Configure CORS middleware
# Can be restricted via CORS_ORIGINS environment variable (comma-separated list)
_cors_origins_env = os.getenv("CORS_ORIGINS", "")
if _cors_origins_env:
    ALLOWED_ORIGINS = [
        origin.strip() for origin in _cors_origins_env.split(",") if origin.strip()
    ]
else:
    ALLOWED_ORIGINS = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=ALLOWED_ORIGINS != ["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=[
        "Content-Type",
        "Authorization",
        "Accept",
        "Origin",
        "X-Requested-With",
    ],
    expose_headers=["Content-Length", "Content-Type"],
)


@app.get("/", tags=["Root"])
async def root() -> dict[str, Any]:
    """Root endpoint returning API information.

    Returns:
        Dict containing API metadata including name, version,
        description, and available documentation URLs.
    """
    return {
        "name": API_TITLE,
        "version": API_VERSION,
        "description": "Company registry search and detail extraction",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
            "openapi": "/openapi.json",
        },
        "status": "operational",
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for monitoring and load balancers.

    Returns:
        Dict with status indicating the API is healthy.
    """
    return {"status": "healthy"}


# Router registration
from app.routers import company

app.include_router(company.router, tags=["company"])
