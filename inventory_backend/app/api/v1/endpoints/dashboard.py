"""
Dashboard API endpoint.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_backend.app.core.exceptions import ValidationFailedError
from inventory_backend.app.db.session import get_db
from inventory_backend.app.schemas.report import DashboardSummaryResponse
from inventory_backend.app.services import dashboard

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/summary", response_model=DashboardSummaryResponse)
async def dashboard_summary(
    period: str = Query("monthly", description="weekly, monthly or yearly"),
    db: AsyncSession = Depends(get_db)
):
    """KPIs, the sales chart for the selected period and the recent activity feed."""
    if period not in dashboard.CHART_PERIODS:
        raise ValidationFailedError(
            f"Unknown chart period '{period}'",
            details={"allowed": list(dashboard.CHART_PERIODS)},
        )
    return await dashboard.summary(db, period)
