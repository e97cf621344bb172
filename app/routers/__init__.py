"""
API routers for the application.
"""

from fastapi import APIRouter
from app.routers import catalog

api_router = APIRouter()

# Include routers
api_router.include_router(catalog.router)  # Products, variants, lots

__all__ = ["api_router", "catalog"]
