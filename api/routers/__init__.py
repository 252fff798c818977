"""API Routers Package.

Routers:
- sync.py: sync triggers, online configuration, status, log
- data.py: the current local snapshot

Usage in main.py:
    from api.routers import sync_router, data_router

    app.include_router(sync_router, prefix="/sync", tags=["sync"])
    app.include_router(data_router, prefix="/data", tags=["data"])
"""

from .data import router as data_router
from .sync import router as sync_router

__all__ = [
    "data_router",
    "sync_router",
]
