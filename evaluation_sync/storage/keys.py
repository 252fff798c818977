"""Key names used inside a storage namespace."""
from __future__ import annotations

# Local snapshot
EVALUATIONS = "evaluations"
COLLABORATORS = "collaborators"
MANAGERS = "managers"
LAST_MODIFIED = "last_modified"

# Online configuration
COMPANY_ID = "company_id"
LAST_SYNC = "last_sync"
LAST_SYNC_RESULT = "last_sync_result"
FORCED_EXIT = "forced_exit"

# Simulated server copy
SERVER_EVALUATIONS = "server_evaluations"
SERVER_COLLABORATORS = "server_collaborators"
SERVER_MANAGERS = "server_managers"
SERVER_TIMESTAMP = "server_timestamp"
