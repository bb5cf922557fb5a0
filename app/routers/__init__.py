"""Routers package for API endpoints.

This package contains the FastAPI routers for the Company Registry Extraction API.
"""

from app.routers import company

__all__ = ["company"]
