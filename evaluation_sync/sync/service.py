"""Snapshot sync service between the local data set and the remote copy.

This service handles:
- Loading and persisting the local snapshot (evaluations, collaborators, managers)
- Fetching and pushing the simulated remote copy
- Conflict detection and last-write-wins resolution of whole snapshots
- Online configuration, connectivity events and sync status tracking
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from ..config import Settings
from ..logs import SyncLog
from ..models import (
    ConflictCheck,
    DataSnapshot,
    OnlineConfig,
    SyncState,
    utc_now_iso,
)
from ..settings import (
    clear_online_config,
    load_online_config,
    record_sync_result,
    save_company_id,
    should_run_scheduled_sync,
)
from ..status import StatusIndicator, connection_status, detailed_status
from ..storage import get_item, get_json, keys, set_item, set_json
from .remote import RemoteStore

logger = logging.getLogger(__name__)

Notifier = Callable[[str, str], None]
DataListener = Callable[[DataSnapshot], None]


class SyncDirection(Enum):
    """Which side the sync kept."""
    REMOTE_WINS = "remote_wins"  # Remote copy was newer and replaced local data
    LOCAL_WINS = "local_wins"    # Local copy was newer (or tied) and was pushed
    IN_SYNC = "in_sync"          # Timestamps matched, local copy pushed as-is


@dataclass(slots=True)
class SyncResult:
    """Result of a sync operation."""
    direction: Optional[SyncDirection] = None
    skipped: bool = False
    reason: Optional[str] = None
    has_conflict: bool = False
    errors: List[str] = field(default_factory=list)
    synced_at: Optional[datetime] = None

    @property
    def success(self) -> bool:
        """Return True if a sync actually ran and completed without errors."""
        return not self.skipped and len(self.errors) == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "skipped": self.skipped,
            "reason": self.reason,
            "direction": self.direction.value if self.direction else None,
            "hasConflict": self.has_conflict,
            "errors": list(self.errors),
            "syncedAt": self.synced_at.isoformat() if self.synced_at else None,
        }


class SyncService:
    """Keeps the one current local snapshot reconciled with the remote copy.

    Design Principles:
    - Snapshots are compared by timestamp only and replaced wholesale
    - The newer side wins; ties keep the local copy
    - Sync failures are recorded in the state and the result, never raised
    """

    def __init__(
        self,
        settings: Settings,
        *,
        remote: Optional[RemoteStore] = None,
        notifier: Optional[Notifier] = None,
        sync_log: Optional[SyncLog] = None,
    ) -> None:
        """Initialize the sync service.

        Args:
            settings: Application settings
            remote: Remote copy to sync against (defaults to the simulated store)
            notifier: Callback receiving (message, level) user alerts
            sync_log: Log panel to write to
        """
        self.settings = settings
        self.namespace = settings.storage_prefix
        self.remote = remote or RemoteStore(
            self.namespace,
            fetch_delay=settings.fetch_delay,
            push_delay=settings.push_delay,
            ping_delay=settings.ping_delay,
        )
        self.notifier = notifier
        self.log = sync_log or SyncLog()
        self.state = SyncState()
        self.config: OnlineConfig = load_online_config(self.namespace)
        self.snapshot: DataSnapshot = self.load_local()
        self._data_listeners: List[DataListener] = []
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Local data
    # ------------------------------------------------------------------

    def load_local(self) -> DataSnapshot:
        """Read the local snapshot from storage."""
        return DataSnapshot.from_dict({
            "evaluations": get_json(self.namespace, keys.EVALUATIONS),
            "collaborators": get_json(self.namespace, keys.COLLABORATORS),
            "managers": get_json(self.namespace, keys.MANAGERS),
            "timestamp": get_item(self.namespace, keys.LAST_MODIFIED),
        })

    def record_local_change(
        self,
        *,
        evaluations: Optional[List[Any]] = None,
        collaborators: Optional[Dict[str, Any]] = None,
        managers: Optional[Dict[str, Any]] = None,
    ) -> DataSnapshot:
        """Apply an edit made by the application and stamp it as the newest write."""
        snapshot = DataSnapshot(
            evaluations=self.snapshot.evaluations if evaluations is None else list(evaluations),
            collaborators=self.snapshot.collaborators if collaborators is None else dict(collaborators),
            managers=self.snapshot.managers if managers is None else dict(managers),
        )
        return self._persist_local(snapshot)

    def save_local(self, snapshot: DataSnapshot) -> DataSnapshot:
        """Replace the current snapshot with snapshot and persist it.

        The stored copy is stamped with the time of the save.
        """
        saved = self._persist_local(DataSnapshot(
            evaluations=snapshot.evaluations or [],
            collaborators=snapshot.collaborators or {},
            managers=snapshot.managers or {},
        ))
        self.log.add("Data saved locally")
        return saved

    def add_data_listener(self, callback: DataListener) -> None:
        """Register a hook called after every local save (statistics refresh etc)."""
        self._data_listeners.append(callback)

    # ------------------------------------------------------------------
    # Sync procedure
    # ------------------------------------------------------------------

    def is_available(self) -> bool:
        return self.config.is_configured and self.state.online

    def initialize(self) -> bool:
        """Bring the online mode up at startup.

        Returns:
            True if the initial sync succeeded and the config is now active
        """
        logger.info("[SYNC] Initializing online mode")

        if not self.config.is_configured:
            logger.info("[SYNC] Company not configured - offline mode")
            return False

        if not self.state.online:
            logger.info("[SYNC] No connection - offline mode")
            return False

        result = self.sync()
        if result.success:
            logger.info("[SYNC] Online mode active")
            return True

        logger.error(f"[SYNC] Failed to initialize online mode: {result.errors or result.reason}")
        return False

    def sync(self) -> SyncResult:
        """Run one full sync: fetch, compare, resolve, save, push.

        Returns:
            SyncResult describing which side won, or why the sync was skipped
        """
        result = SyncResult()

        if not self.is_available():
            logger.info("[SYNC] Sync not available")
            result.skipped = True
            result.reason = "not_configured" if not self.config.is_configured else "offline"
            return result

        with self._lock:
            if self.state.syncing:
                result.skipped = True
                result.reason = "in_progress"
                return result
            self.state.syncing = True

        self.log.add("Starting sync...")

        try:
            remote = self.fetch_remote()
            check = self.detect_conflict(remote)
            result.direction = self._pick_side(check)
            result.has_conflict = check.has_conflict

            resolved = self.resolve_conflict(check)
            saved = self.save_local(resolved)
            self.push_remote(saved)

            result.synced_at = datetime.now(timezone.utc)
            self.config.last_sync = result.synced_at.isoformat()
            self.config.active = True
            self.state.last_error = None

            logger.info("[SYNC] Sync completed")
            self.log.add("Sync completed successfully")
            self._alert("Data synced successfully!", "success")
        except Exception as exc:
            logger.exception("[SYNC] Sync failed")
            self.state.last_error = str(exc)
            result.errors.append(str(exc))
            self.log.add(f"Sync error: {exc}")
            self._alert(f"Sync error: {exc}", "danger")
        finally:
            self.state.syncing = False

        try:
            record_sync_result(self.namespace, result.to_dict())
        except Exception as exc:
            logger.warning(f"[SYNC] Could not record sync result: {exc}")

        return result

    def fetch_remote(self) -> DataSnapshot:
        logger.info("[SYNC] Fetching remote data")
        self.log.add("Connecting to server...")
        return self.remote.fetch()

    def push_remote(self, snapshot: DataSnapshot) -> None:
        logger.info("[SYNC] Pushing data to remote")
        self.log.add("Sending data to server...")
        self.remote.push(snapshot)
        self.log.add("Data sent successfully")

    def detect_conflict(self, remote: DataSnapshot) -> ConflictCheck:
        """Pair the current local snapshot with the remote one."""
        return ConflictCheck(local=self.snapshot, remote=remote)

    def resolve_conflict(self, check: ConflictCheck) -> DataSnapshot:
        """Last-write-wins: return whichever whole snapshot is newer."""
        self.log.add("Analyzing conflicts...")
        side = self._pick_side(check)

        if side is SyncDirection.IN_SYNC:
            self.log.add("No conflict detected")
            return check.local

        if side is SyncDirection.REMOTE_WINS:
            self.log.add("Applying server data (newer)")
            return check.remote

        self.log.add("Keeping local data (newer)")
        return check.local

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def configure_company(self, company_id: Optional[str], *, sync: bool = True) -> bool:
        """Set the company the data syncs for, then run an initial sync."""
        try:
            normalized = save_company_id(self.namespace, company_id)
        except ValueError:
            self._alert("Company ID is required!", "danger")
            return False

        self.config.company_id = normalized
        logger.info(f"[SYNC] Company configured: {normalized}")
        self.log.add(f"Company configured: {normalized}")
        self._alert(f"Company configured: {normalized}", "success")

        if sync:
            self.sync()
        return True

    def sync_manual(self) -> SyncResult:
        """Sync triggered from the sync button."""
        if not self.config.is_configured:
            self._alert("Configure the company first!", "danger")
            return SyncResult(skipped=True, reason="not_configured")
        return self.sync()

    def reset_online_config(self) -> None:
        """Return to local mode. Local data is kept."""
        clear_online_config(self.namespace)
        self.config = OnlineConfig()
        self.log.clear()
        self.log.add("Online configuration reset")
        self._alert("Online configuration reset! Running in local mode.", "warning")

    def test_connection(self) -> bool:
        self.log.add("Testing connection...")

        if not self.state.online:
            self.log.add("No internet connection")
            self._alert("No internet connection!", "danger")
            return False

        try:
            self.remote.ping()
        except Exception as exc:
            self.log.add(f"Connection error: {exc}")
            self._alert(f"Connection error: {exc}", "danger")
            return False

        self.log.add("Server connection OK")
        self._alert("Connection tested successfully!", "success")
        return True

    # ------------------------------------------------------------------
    # Environment events
    # ------------------------------------------------------------------

    def set_online(self, online: bool) -> Optional[SyncResult]:
        """Handle a connectivity change; coming back online triggers a sync."""
        self.state.online = online

        if not online:
            logger.info("[SYNC] Connection lost")
            self.log.add("Internet connection lost - offline mode")
            return None

        logger.info("[SYNC] Connection restored")
        self.log.add("Internet connection restored")
        if self.config.is_configured:
            return self.sync()
        return None

    def handle_before_unload(self) -> bool:
        """Mark a forced exit while online mode is active."""
        if self.config.active and self.state.online:
            set_item(self.namespace, keys.FORCED_EXIT, utc_now_iso())
            return True
        return False

    def run_scheduled_sync(self) -> Optional[SyncResult]:
        """Body of the periodic auto-sync timer."""
        if not should_run_scheduled_sync(self.config, self.state):
            return None
        logger.info("[SYNC] Automatic sync")
        self.log.add("Scheduled automatic sync")
        return self.sync()

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def connection_status(self) -> StatusIndicator:
        return connection_status(self.config, self.state)

    def detailed_status(self) -> Dict[str, StatusIndicator]:
        return detailed_status(self.config, self.state)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _pick_side(self, check: ConflictCheck) -> SyncDirection:
        if not check.has_conflict:
            return SyncDirection.IN_SYNC
        try:
            remote_newer = check.remote.is_newer_than(check.local)
        except ValueError as exc:
            # Unreadable stamps never win; the push below rewrites them.
            logger.warning(f"[SYNC] Unreadable snapshot timestamp, keeping local data: {exc}")
            return SyncDirection.LOCAL_WINS
        if remote_newer:
            return SyncDirection.REMOTE_WINS
        return SyncDirection.LOCAL_WINS

    def _persist_local(self, snapshot: DataSnapshot) -> DataSnapshot:
        snapshot.timestamp = utc_now_iso()
        set_json(self.namespace, keys.EVALUATIONS, snapshot.evaluations)
        set_json(self.namespace, keys.COLLABORATORS, snapshot.collaborators)
        set_json(self.namespace, keys.MANAGERS, snapshot.managers)
        set_item(self.namespace, keys.LAST_MODIFIED, snapshot.timestamp)
        self.snapshot = snapshot

        for listener in self._data_listeners:
            listener(snapshot)
        return snapshot

    def _alert(self, message: str, level: str) -> None:
        if level == "danger":
            logger.error(f"[SYNC] {message}")
        elif level == "warning":
            logger.warning(f"[SYNC] {message}")
        else:
            logger.info(f"[SYNC] {message}")

        if self.notifier is not None:
            self.notifier(message, level)
