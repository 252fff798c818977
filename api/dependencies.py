"""Shared dependencies and helper functions for API routers.

Usage in routers:
    from api.dependencies import get_sync_service, serialize_sync_result
"""
from __future__ import annotations

import os
from collections import deque
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Deque, Dict, List

from evaluation_sync.config import load_settings
from evaluation_sync.settings import get_last_sync_result
from evaluation_sync.sync import SyncResult, SyncService


# =============================================================================
# Configuration Constants
# =============================================================================

ALLOWED_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    os.getenv("EVAL_SYNC_ALLOWED_FRONTEND", "").strip(),
]


# =============================================================================
# Alerts
# =============================================================================

class AlertBuffer:
    """Keeps the most recent user alerts raised by the sync service."""

    def __init__(self, max_alerts: int = 20) -> None:
        self._alerts: Deque[Dict[str, str]] = deque(maxlen=max_alerts)

    def __call__(self, message: str, level: str) -> None:
        self._alerts.append({
            "message": message,
            "level": level,
            "ts": datetime.now(timezone.utc).isoformat(),
        })

    def recent(self) -> List[Dict[str, str]]:
        return list(self._alerts)


# =============================================================================
# Cached Functions
# =============================================================================

@lru_cache
def get_settings():
    """Get application settings (cached)."""
    return load_settings()


@lru_cache
def get_alert_buffer() -> AlertBuffer:
    return AlertBuffer()


@lru_cache
def get_sync_service() -> SyncService:
    """Process-wide sync service; it owns the one current local snapshot."""
    return SyncService(get_settings(), notifier=get_alert_buffer())


# =============================================================================
# Serialization Helpers
# =============================================================================

def serialize_sync_result(result: SyncResult) -> Dict[str, Any]:
    """Serialize a SyncResult to API response format."""
    return result.to_dict()


def serialize_status(service: SyncService) -> Dict[str, Any]:
    """Serialize the current status indicators, state and configuration."""
    return {
        "indicator": service.connection_status().to_api_dict(),
        "detailed": {
            name: indicator.to_api_dict()
            for name, indicator in service.detailed_status().items()
        },
        "state": service.state.to_api_dict(),
        "config": service.config.to_api_dict(),
        "lastResult": get_last_sync_result(service.namespace),
    }
