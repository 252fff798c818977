"""Shared Pydantic models for API routers."""
from __future__ import annotations

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class CompanyRequest(BaseModel):
    """Request model for configuring the company."""
    model_config = ConfigDict(populate_by_name=True)

    company_id: str = Field(..., alias="companyId")
    sync: bool = Field(True, description="Run the initial sync right away.")


class ConnectivityRequest(BaseModel):
    """Connectivity change reported by the client."""
    online: bool


class DataUpdateRequest(BaseModel):
    """Local edit to the evaluation data. Omitted collections stay unchanged."""
    evaluations: Optional[List[Any]] = None
    collaborators: Optional[Dict[str, Any]] = None
    managers: Optional[Dict[str, Any]] = None
