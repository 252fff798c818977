"""Logging utilities for Evaluation Sync."""

from .sync_log import MAX_LOG_ENTRIES, SyncLog, SyncLogEntry

__all__ = ["MAX_LOG_ENTRIES", "SyncLog", "SyncLogEntry"]
