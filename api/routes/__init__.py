"""
API route modules.
"""

from api.routes.posts import router as posts_router
from api.routes.health import router as health_router

__all__ = ["posts_router", "health_router"]
