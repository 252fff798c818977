"""Sync module for local <-> remote snapshot reconciliation."""
from __future__ import annotations

from .remote import RemoteStore
from .service import (
    SyncDirection,
    SyncResult,
    SyncService,
)

__all__ = [
    "RemoteStore",
    "SyncDirection",
    "SyncResult",
    "SyncService",
]
