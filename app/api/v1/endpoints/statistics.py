from datetime import date
from typing import Optional

from fastapi import APIRouter, Query

from app.core.common_deps import CurrentUserDep, StatisticsServiceDep
from app.schemas.statistics import DashboardStatistics

router = APIRouter()


@router.get("", response_model=DashboardStatistics)
async def get_dashboard_statistics(
    service: StatisticsServiceDep,
    current_user: CurrentUserDep,
    start_date: Optional[date] = Query(None, description="Defaults to the current month"),
    end_date: Optional[date] = None,
):
    """Revenue, profit and occupancy across active properties."""
    return await service.get_dashboard(start_date, end_date)
