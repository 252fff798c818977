"""Online configuration settings for Evaluation Sync."""
from .online_config import (
    clear_online_config,
    get_last_sync_result,
    load_online_config,
    normalize_company_id,
    record_sync_result,
    save_company_id,
    should_run_scheduled_sync,
)

__all__ = [
    "clear_online_config",
    "get_last_sync_result",
    "load_online_config",
    "normalize_company_id",
    "record_sync_result",
    "save_company_id",
    "should_run_scheduled_sync",
]
