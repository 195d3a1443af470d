"""API router package."""

from fastapi import APIRouter

from .observability import router as observability_router
from .pagination import router as pagination_router

api_router = APIRouter()
api_router.include_router(pagination_router)
api_router.include_router(observability_router)

__all__ = ["api_router"]
