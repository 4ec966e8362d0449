"""API package initialization."""

from app.api.admin import router as admin_router
from app.api.ai import router as ai_router
from app.api.auth import router as auth_router
from app.api.collections import router as collections_router
from app.api.cron import router as cron_router
from app.api.products import router as products_router

__all__ = [
    "admin_router",
    "ai_router",
    "auth_router",
    "collections_router",
    "cron_router",
    "products_router",
]
