"""Key-value persistence layer for Evaluation Sync.

Every piece of state the sync helper keeps (the local snapshot, the simulated
server copy, the online configuration) lives here as string values under a
namespace, which is the configured storage prefix. It follows the same
Firestore + file fallback pattern as the other stores.

Architecture:
- Firestore path: storage/{namespace}/items/{key}  ->  {"value": "..."}
- File fallback: {EVAL_SYNC_STORE_DIR}/{namespace}.json (one JSON object)
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

STORAGE_COLLECTION = "storage"
ITEMS_COLLECTION = "items"


def _use_file_storage() -> bool:
    """Check if we should use file-based storage."""
    return os.getenv("EVAL_SYNC_STORE_FORCE_FILE", "").strip() == "1"


def _get_store_dir() -> Path:
    """Get the file storage directory."""
    env_dir = os.getenv("EVAL_SYNC_STORE_DIR", "").strip()
    if env_dir:
        return Path(env_dir)
    return Path(__file__).parent.parent.parent / "sync_store"


def _get_firestore_client():
    """Get Firestore client, or None if not available."""
    if _use_file_storage():
        return None

    try:
        from ..firestore import get_firestore_client
        return get_firestore_client()
    except Exception as exc:
        logger.warning(f"[Store] Firestore unavailable, using local files: {exc}")
        return None


# =============================================================================
# Key-Value Operations
# =============================================================================

def get_item(namespace: str, key: str) -> Optional[str]:
    """Return the stored value for key, or None if it was never set."""
    db = _get_firestore_client()
    if db is not None:
        try:
            return _get_from_firestore(db, namespace, key)
        except Exception as exc:
            logger.warning(f"[Store] Firestore read failed, falling back to local: {exc}")
    return _read_file(namespace).get(key)


def set_item(namespace: str, key: str, value: str) -> None:
    """Store a string value under key."""
    if not isinstance(value, str):
        raise TypeError(f"Stored values must be strings, got {type(value).__name__}")

    db = _get_firestore_client()
    if db is not None:
        try:
            _save_to_firestore(db, namespace, key, value)
            return
        except Exception as exc:
            logger.warning(f"[Store] Firestore write failed, falling back to local: {exc}")

    items = _read_file(namespace)
    items[key] = value
    _write_file(namespace, items)


def remove_item(namespace: str, key: str) -> bool:
    """Remove key. Returns True if it existed."""
    db = _get_firestore_client()
    if db is not None:
        try:
            return _delete_from_firestore(db, namespace, key)
        except Exception as exc:
            logger.warning(f"[Store] Firestore delete failed, falling back to local: {exc}")

    items = _read_file(namespace)
    if key not in items:
        return False
    del items[key]
    _write_file(namespace, items)
    return True


def list_keys(namespace: str) -> List[str]:
    """List the keys stored in a namespace, sorted."""
    db = _get_firestore_client()
    if db is not None:
        try:
            return sorted(doc.id for doc in _items_collection(db, namespace).stream())
        except Exception as exc:
            logger.warning(f"[Store] Firestore list failed, falling back to local: {exc}")
    return sorted(_read_file(namespace).keys())


def clear_namespace(namespace: str) -> int:
    """Remove every key in a namespace. Returns the number removed."""
    db = _get_firestore_client()
    if db is not None:
        try:
            removed = 0
            for doc in _items_collection(db, namespace).stream():
                doc.reference.delete()
                removed += 1
            return removed
        except Exception as exc:
            logger.warning(f"[Store] Firestore clear failed, falling back to local: {exc}")

    items = _read_file(namespace)
    _write_file(namespace, {})
    return len(items)


# =============================================================================
# JSON Helpers
# =============================================================================

def get_json(namespace: str, key: str, default: Any = None) -> Any:
    """Decode a JSON value, returning default when missing or malformed."""
    raw = get_item(namespace, key)
    if raw is None or raw == "":
        return default
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        logger.warning(f"[Store] Ignoring malformed JSON under {namespace}{key}")
        return default


def set_json(namespace: str, key: str, value: Any) -> None:
    """Encode value as JSON and store it."""
    set_item(namespace, key, json.dumps(value, ensure_ascii=False))


# =============================================================================
# Firestore Storage
# =============================================================================

def _items_collection(db, namespace: str):
    return db.collection(STORAGE_COLLECTION).document(namespace).collection(ITEMS_COLLECTION)


def _save_to_firestore(db, namespace: str, key: str, value: str) -> None:
    _items_collection(db, namespace).document(key).set({"value": value})


def _get_from_firestore(db, namespace: str, key: str) -> Optional[str]:
    doc = _items_collection(db, namespace).document(key).get()
    if doc.exists:
        return (doc.to_dict() or {}).get("value")
    return None


def _delete_from_firestore(db, namespace: str, key: str) -> bool:
    doc_ref = _items_collection(db, namespace).document(key)
    doc = doc_ref.get()
    if doc.exists:
        doc_ref.delete()
        return True
    return False


# =============================================================================
# File Storage (Fallback)
# =============================================================================

def _get_namespace_file(namespace: str) -> Path:
    """Get the file path for a namespace."""
    store_dir = _get_store_dir()
    store_dir.mkdir(parents=True, exist_ok=True)

    safe_ns = re.sub(r"[^A-Za-z0-9_-]", "_", namespace) or "default"
    return store_dir / f"{safe_ns}.json"


def _read_file(namespace: str) -> Dict[str, str]:
    file_path = _get_namespace_file(namespace)
    if not file_path.exists():
        return {}
    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        logger.warning(f"[Store] Corrupt store file {file_path}, starting empty")
        return {}
    if not isinstance(data, dict):
        return {}
    return {str(k): v for k, v in data.items() if isinstance(v, str)}


def _write_file(namespace: str, items: Dict[str, str]) -> None:
    file_path = _get_namespace_file(namespace)
    tmp_path = file_path.with_suffix(".json.tmp")
    tmp_path.write_text(json.dumps(items, ensure_ascii=False, indent=2), encoding="utf-8")
    tmp_path.replace(file_path)
