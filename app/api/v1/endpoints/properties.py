from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Query

from app.core.common_deps import (
    CurrentUserDep,
    PropertyServiceDep,
    StaffUserDep,
    StatisticsServiceDep,
)
from app.core.exceptions import EntityNotFoundError
from app.schemas.property import (
    Property,
    PropertyCreate,
    PropertyUpdate,
    PropertyWithDetails,
)
from app.schemas.responses import MessageResponse
from app.schemas.statistics import PropertyStatistics

router = APIRouter()


@router.get("/", response_model=List[Property])
async def get_properties(
    service: PropertyServiceDep,
    current_user: CurrentUserDep,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    owner_id: Optional[int] = None,
    active: Optional[bool] = None,
    search: Optional[str] = Query(None, description="Search by name"),
):
    return await service.get_all(skip, limit, owner_id, active, search)


@router.post("/", response_model=PropertyWithDetails)
async def create_property(
    property_data: PropertyCreate,
    service: PropertyServiceDep,
    current_user: StaffUserDep,
):
    return await service.create(property_data)


@router.get("/{property_id}", response_model=PropertyWithDetails)
async def get_property(
    property_id: int,
    service: PropertyServiceDep,
    current_user: CurrentUserDep,
):
    db_property = await service.get_by_id(property_id)
    if not db_property:
        raise EntityNotFoundError("Property", property_id)
    return db_property


@router.put("/{property_id}", response_model=PropertyWithDetails)
async def update_property(
    property_id: int,
    property_data: PropertyUpdate,
    service: PropertyServiceDep,
    current_user: StaffUserDep,
):
    return await service.update(property_id, property_data)


@router.delete("/{property_id}", response_model=MessageResponse)
async def delete_property(
    property_id: int,
    service: PropertyServiceDep,
    current_user: StaffUserDep,
):
    await service.delete(property_id)
    return MessageResponse(message="Property deleted successfully")


@router.get("/{property_id}/statistics", response_model=PropertyStatistics)
async def get_property_statistics(
    property_id: int,
    service: StatisticsServiceDep,
    current_user: CurrentUserDep,
    start_date: Optional[date] = Query(None, description="Defaults to the current month"),
    end_date: Optional[date] = None,
):
    """Revenue, costs and occupancy of one property over a period."""
    return await service.get_property_statistics(property_id, start_date, end_date)
