"""API routes package."""

from gridstore.routes.file_routes import id_router as file_id_router
from gridstore.routes.file_routes import router as file_router

__all__ = ["file_router", "file_id_router"]
