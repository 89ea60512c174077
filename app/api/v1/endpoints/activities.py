from typing import List, Optional

from fastapi import APIRouter, Query

from app.core.common_deps import ActivityServiceDep, CurrentUserDep, StaffUserDep
from app.models.activity import ActivityType
from app.schemas.activity import Activity, ActivityCreate

router = APIRouter()


@router.get("/", response_model=List[Activity])
async def get_activities(
    service: ActivityServiceDep,
    current_user: CurrentUserDep,
    limit: int = Query(50, ge=1, le=500),
    entity_type: Optional[str] = None,
    type: Optional[ActivityType] = None,
):
    """Most recent activities first."""
    return await service.get_recent(limit, entity_type, type)


@router.post("/", response_model=Activity)
async def create_activity(
    activity_data: ActivityCreate,
    service: ActivityServiceDep,
    current_user: StaffUserDep,
):
    return await service.create(activity_data)
