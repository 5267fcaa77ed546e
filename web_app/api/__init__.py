"""JSON API for creating, inspecting and deleting links."""

from .routes import router as api_router

__all__ = ["api_router"]
