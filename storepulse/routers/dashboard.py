"""
Dashboard router.

Wired to:
- DashboardComposer for the live dashboard aggregate

The caller supplies the consolidated log snapshot and master data in the
request body; this surface never reads storage itself.
"""

from datetime import datetime
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from storepulse.config import Settings, get_settings
from storepulse.engine.dashboard_composer import DashboardComposer
from storepulse.models.dashboard import DashboardFilters
from storepulse.models.events import MasterData
from storepulse.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


class DashboardRequest(BaseModel):
    """Log snapshot plus master data for one dashboard computation."""

    events: List[Any] = Field(
        default_factory=list, description="Raw activity log entries"
    )
    master_data: MasterData = Field(default_factory=MasterData)
    filters: Optional[DashboardFilters] = None
    now: Optional[datetime] = Field(
        default=None, description="Reference instant (default: server time)"
    )


@router.post("")
async def get_dashboard(
    request: DashboardRequest,
    settings: Settings = Depends(get_settings),
):
    """
    Compute KPIs, timeline, heatmaps, rollups, correlation and alerts.

    Entries that cannot be normalized are dropped and counted in
    `metadata.data_points.dropped`; they never fail the request.
    """
    logger.info(
        "dashboard_requested",
        events_count=len(request.events),
        filtered=request.filters is not None and not request.filters.is_empty,
    )

    composer = DashboardComposer.from_settings(settings)

    try:
        dashboard = composer.compose(
            request.events,
            master_data=request.master_data,
            filters=request.filters,
            now=request.now,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"success": True, "data": dashboard.model_dump(mode="json")}
