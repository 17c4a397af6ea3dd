"""Shelf Access - account lifecycle and approval gating for the e-book shelf."""

__version__ = "0.1.0"

from shelf_access.exceptions import GatewayError, ShelfAccessError, StoreError

__all__ = ["__version__", "GatewayError", "ShelfAccessError", "StoreError"]
