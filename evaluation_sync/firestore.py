"""Firestore client for the key-value store.

The client is built on first use under its own firebase app, so it does not
clash with an app the host process already initialized. Set
EVAL_SYNC_FIRESTORE_PROJECT to target a project other than the one in the
ambient Google credentials.
"""
from __future__ import annotations

import os
from typing import Optional

APP_NAME = "evaluation-sync"

_client = None


def _project_id() -> Optional[str]:
    return os.getenv("EVAL_SYNC_FIRESTORE_PROJECT", "").strip() or None


def get_firestore_client():
    """Return the cached Firestore client, creating it if needed."""

    global _client
    if _client is not None:
        return _client

    try:
        import firebase_admin
        from firebase_admin import firestore
    except ModuleNotFoundError as exc:  # pragma: no cover
        raise RuntimeError(
            "firebase-admin is required for the Firestore storage backend. "
            "Set EVAL_SYNC_STORE_FORCE_FILE=1 to keep data in local files."
        ) from exc

    try:
        app = firebase_admin.get_app(APP_NAME)
    except ValueError:
        project_id = _project_id()
        options = {"projectId": project_id} if project_id else None
        app = firebase_admin.initialize_app(options=options, name=APP_NAME)

    _client = firestore.client(app)
    return _client
