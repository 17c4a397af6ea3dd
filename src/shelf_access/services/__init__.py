"""Services for Shelf Access."""

from shelf_access.services.origin import (
    LookupOriginResolver,
    OriginResolver,
    StaticOriginResolver,
)

__all__ = ["LookupOriginResolver", "OriginResolver", "StaticOriginResolver"]
