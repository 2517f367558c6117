"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .engagement import router as engagement_router
from .logs import router as logs_router
from .posts import router as posts_router
from .users import router as users_router

__all__ = [
    "auth_router",
    "engagement_router",
    "logs_router",
    "posts_router",
    "users_router",
]
