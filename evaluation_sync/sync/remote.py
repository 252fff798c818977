"""Simulated remote copy of the evaluation data.

There is no server: the "remote" snapshot lives under the ``server_*`` keys
of the same storage namespace, and optional delays stand in for latency.
"""
from __future__ import annotations

import logging
import time

from ..models import DataSnapshot
from ..storage import get_item, get_json, keys, set_item, set_json

logger = logging.getLogger(__name__)


class RemoteStore:
    """Reads and writes the server copy of a namespace."""

    def __init__(
        self,
        namespace: str,
        *,
        fetch_delay: float = 0.0,
        push_delay: float = 0.0,
        ping_delay: float = 0.0,
    ) -> None:
        self.namespace = namespace
        self.fetch_delay = fetch_delay
        self.push_delay = push_delay
        self.ping_delay = ping_delay

    def fetch(self) -> DataSnapshot:
        """Return the server snapshot. Missing pieces default to empty / never written."""
        self._wait(self.fetch_delay)
        return DataSnapshot.from_dict({
            "evaluations": get_json(self.namespace, keys.SERVER_EVALUATIONS),
            "collaborators": get_json(self.namespace, keys.SERVER_COLLABORATORS),
            "managers": get_json(self.namespace, keys.SERVER_MANAGERS),
            "timestamp": get_item(self.namespace, keys.SERVER_TIMESTAMP),
        })

    def push(self, snapshot: DataSnapshot) -> None:
        """Replace the server copy with snapshot, keeping its timestamp."""
        self._wait(self.push_delay)
        set_json(self.namespace, keys.SERVER_EVALUATIONS, snapshot.evaluations)
        set_json(self.namespace, keys.SERVER_COLLABORATORS, snapshot.collaborators)
        set_json(self.namespace, keys.SERVER_MANAGERS, snapshot.managers)
        set_item(self.namespace, keys.SERVER_TIMESTAMP, snapshot.timestamp)
        logger.debug(f"[Remote] Stored snapshot stamped {snapshot.timestamp}")

    def ping(self) -> bool:
        self._wait(self.ping_delay)
        return True

    @staticmethod
    def _wait(seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)
