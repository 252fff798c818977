"""Online configuration storage.

The online configuration decides whether the local data set is synced at all:
a company identifier must be configured before any sync runs. It is kept in
the same key-value namespace as the data it governs.

Stored keys:
- company_id: Upper-cased company identifier ("" / missing = local mode)
- last_sync: ISO timestamp of the last successful sync
- last_sync_result: Summary of the last sync operation
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from ..models import OnlineConfig, SyncState, utc_now_iso
from ..storage import get_item, get_json, keys, remove_item, set_item, set_json


def load_online_config(namespace: str) -> OnlineConfig:
    """Read the persisted online configuration.

    ``active`` is never persisted; it only becomes True after a sync succeeds
    in the current session.
    """
    return OnlineConfig(
        company_id=get_item(namespace, keys.COMPANY_ID) or "",
        active=False,
        last_sync=get_item(namespace, keys.LAST_SYNC) or None,
    )


def normalize_company_id(company_id: Optional[str]) -> str:
    """Trim and upper-case a company identifier.

    Raises:
        ValueError: if the identifier is missing or blank.
    """
    if company_id is None or not company_id.strip():
        raise ValueError("Company ID is required.")
    return company_id.strip().upper()


def save_company_id(namespace: str, company_id: Optional[str]) -> str:
    """Validate and persist the company identifier. Returns the stored form."""
    normalized = normalize_company_id(company_id)
    set_item(namespace, keys.COMPANY_ID, normalized)
    return normalized


def clear_online_config(namespace: str) -> None:
    """Forget the company and last sync time. Local data is kept."""
    remove_item(namespace, keys.COMPANY_ID)
    remove_item(namespace, keys.LAST_SYNC)


def record_sync_result(namespace: str, result: Dict[str, Any]) -> None:
    """Record the result of a sync operation.

    Args:
        namespace: Storage prefix.
        result: Output of ``SyncResult.to_dict()``.
    """
    if result.get("success") and result.get("syncedAt"):
        set_item(namespace, keys.LAST_SYNC, result["syncedAt"])

    set_json(namespace, keys.LAST_SYNC_RESULT, {
        "success": result.get("success", False),
        "direction": result.get("direction"),
        "hasConflict": result.get("hasConflict", False),
        "errors": len(result.get("errors") or []),
        "syncedAt": result.get("syncedAt"),
        "recordedAt": utc_now_iso(),
    })


def get_last_sync_result(namespace: str) -> Optional[Dict[str, Any]]:
    return get_json(namespace, keys.LAST_SYNC_RESULT, None)


def should_run_scheduled_sync(config: OnlineConfig, state: SyncState) -> bool:
    """Check if the periodic auto-sync should fire.

    Auto sync only runs once the company has synced successfully, while the
    connection is up, and never on top of a sync already in progress.
    """
    return config.active and state.online and not state.syncing
