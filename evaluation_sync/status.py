"""Connection status indicators.

Pure functions over ``OnlineConfig`` and ``SyncState``; the front end only
paints the label with the colour.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from .models import OnlineConfig, SyncState, parse_timestamp

GREEN = "#28a745"
YELLOW = "#ffc107"
RED = "#dc3545"
CYAN = "#17a2b8"
GREY = "#6c757d"


@dataclass(frozen=True, slots=True)
class StatusIndicator:
    label: str
    color: str

    def to_api_dict(self) -> Dict[str, str]:
        return {"label": self.label, "color": self.color}


def connection_status(config: OnlineConfig, state: SyncState) -> StatusIndicator:
    """Main status badge. Earlier conditions take precedence."""
    if not config.is_configured:
        return StatusIndicator("Configure company", YELLOW)
    if not state.online:
        return StatusIndicator("Offline", RED)
    if state.syncing:
        return StatusIndicator("Syncing...", CYAN)
    if config.active:
        return StatusIndicator("Synced", GREEN)
    return StatusIndicator("Not synced", YELLOW)


def format_last_sync(last_sync: Optional[str]) -> Optional[str]:
    """Render the last sync timestamp in local time, or None if unparseable."""
    if not last_sync:
        return None
    try:
        return parse_timestamp(last_sync).astimezone().strftime("%d/%m/%Y %H:%M:%S")
    except ValueError:
        return None


def detailed_status(config: OnlineConfig, state: SyncState) -> Dict[str, StatusIndicator]:
    """Indicators for the settings screen: connection, company, last sync, mode."""
    if not state.online:
        connection = StatusIndicator("Offline", RED)
    elif state.syncing:
        connection = StatusIndicator("Syncing...", YELLOW)
    else:
        connection = StatusIndicator("Online", GREEN)

    if config.is_configured:
        company = StatusIndicator(config.company_id, GREEN)
    else:
        company = StatusIndicator("Not configured", RED)

    formatted = format_last_sync(config.last_sync)
    if formatted:
        last_sync = StatusIndicator(formatted, GREEN)
    else:
        last_sync = StatusIndicator("Never", RED)

    if config.active:
        mode = StatusIndicator("Online synced", GREEN)
    elif config.is_configured:
        mode = StatusIndicator("Online configured", YELLOW)
    else:
        mode = StatusIndicator("Local mode", GREY)

    return {
        "connection": connection,
        "company": company,
        "last_sync": last_sync,
        "mode": mode,
    }
