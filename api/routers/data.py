"""Data Router - the current local snapshot."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_sync_service
from api.models import DataUpdateRequest
from evaluation_sync.sync import SyncService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
def get_data(service: SyncService = Depends(get_sync_service)) -> dict:
    """Return the current local snapshot."""
    return service.snapshot.to_api_dict()


@router.put("")
def update_data(
    request: DataUpdateRequest,
    service: SyncService = Depends(get_sync_service),
) -> dict:
    """Record a local edit; it becomes the newest write for conflict resolution."""
    snapshot = service.record_local_change(
        evaluations=request.evaluations,
        collaborators=request.collaborators,
        managers=request.managers,
    )
    logger.info(f"[DATA] Local change recorded at {snapshot.timestamp}")
    return snapshot.to_api_dict()
