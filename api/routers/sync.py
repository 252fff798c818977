"""Sync Router - online configuration, sync triggers and status.

Handles:
- Manual and scheduled sync
- Company configuration and reset
- Connectivity events and connection test
- Sync log and alerts
"""
from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import (
    AlertBuffer,
    get_alert_buffer,
    get_sync_service,
    serialize_status,
    serialize_sync_result,
)
from api.models import CompanyRequest, ConnectivityRequest
from evaluation_sync.settings import normalize_company_id
from evaluation_sync.sync import SyncService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/status")
def get_sync_status(service: SyncService = Depends(get_sync_service)) -> dict:
    """Get current status indicators and configuration."""
    return serialize_status(service)


@router.post("/now")
def sync_now(service: SyncService = Depends(get_sync_service)) -> dict:
    """Trigger a manual sync."""
    start_time = time.time()
    logger.info("[SYNC/NOW] Manual sync triggered")

    result = service.sync_manual()

    elapsed = time.time() - start_time
    logger.info(f"[SYNC/NOW] Finished in {elapsed:.2f}s (success={result.success})")
    return serialize_sync_result(result)


@router.post("/scheduled")
def sync_scheduled(service: SyncService = Depends(get_sync_service)) -> dict:
    """Auto-sync timer tick."""
    result = service.run_scheduled_sync()
    if result is None:
        return {
            "skipped": True,
            "reason": "Auto sync requires an active, online, idle configuration",
            "active": service.config.active,
            "online": service.state.online,
            "syncing": service.state.syncing,
        }
    return serialize_sync_result(result)


@router.post("/company")
def configure_company(
    request: CompanyRequest,
    service: SyncService = Depends(get_sync_service),
) -> dict:
    """Configure the company ID and (optionally) run the initial sync."""
    try:
        normalize_company_id(request.company_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    service.configure_company(request.company_id, sync=request.sync)
    return serialize_status(service)


@router.delete("/company")
def reset_company(service: SyncService = Depends(get_sync_service)) -> dict:
    """Reset the online configuration; local data is kept."""
    service.reset_online_config()
    return serialize_status(service)


@router.post("/test-connection")
def test_connection(service: SyncService = Depends(get_sync_service)) -> dict:
    return {"ok": service.test_connection()}


@router.post("/connectivity")
def report_connectivity(
    request: ConnectivityRequest,
    service: SyncService = Depends(get_sync_service),
) -> dict:
    """Client reports it went online or offline."""
    result = service.set_online(request.online)
    return {
        "status": serialize_status(service),
        "sync": serialize_sync_result(result) if result else None,
    }


@router.post("/unload")
def before_unload(service: SyncService = Depends(get_sync_service)) -> dict:
    return {"recorded": service.handle_before_unload()}


@router.get("/log")
def get_sync_log(service: SyncService = Depends(get_sync_service)) -> dict:
    entries = service.log.entries()
    return {
        "entries": [entry.to_api_dict() for entry in entries],
        "count": len(entries),
    }


@router.delete("/log")
def clear_sync_log(service: SyncService = Depends(get_sync_service)) -> dict:
    service.log.clear()
    return {"cleared": True}


@router.get("/alerts")
def get_alerts(alerts: AlertBuffer = Depends(get_alert_buffer)) -> dict:
    return {"alerts": alerts.recent()}
