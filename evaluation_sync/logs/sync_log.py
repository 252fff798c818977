"""Bounded sync log shown in the sync panel."""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List

logger = logging.getLogger(__name__)

MAX_LOG_ENTRIES = 50


@dataclass(slots=True)
class SyncLogEntry:
    ts: datetime
    message: str

    def to_api_dict(self) -> Dict[str, Any]:
        return {"ts": self.ts.isoformat(), "message": self.message}

    def format(self) -> str:
        return f"[{self.ts.astimezone().strftime('%H:%M:%S')}] {self.message}"


class SyncLog:
    """Keeps only the most recent ``max_entries`` lines, oldest first."""

    def __init__(self, max_entries: int = MAX_LOG_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._entries: Deque[SyncLogEntry] = deque(maxlen=max_entries)

    def add(self, message: str) -> SyncLogEntry:
        entry = SyncLogEntry(ts=datetime.now(timezone.utc), message=message)
        self._entries.append(entry)
        logger.info(f"[SYNC] {message}")
        return entry

    def entries(self) -> List[SyncLogEntry]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
