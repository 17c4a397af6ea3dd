"""FastAPI routes for Shelf Access."""

from shelf_access.api.auth import AdminSession, CurrentSession
from shelf_access.api.routes import router

__all__ = ["AdminSession", "CurrentSession", "router"]
