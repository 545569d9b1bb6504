"""API routes package."""

from fileservice.routes.auth_routes import router as auth_router
from fileservice.routes.blob_routes import router as blob_router
from fileservice.routes.file_routes import router as file_router
from fileservice.routes.leaderboard_routes import router as leaderboard_router
from fileservice.routes.search_routes import router as search_router

__all__ = ["auth_router", "blob_router", "file_router", "leaderboard_router", "search_router"]
