from typing import List, Optional

from fastapi import APIRouter, Query

from app.core.common_deps import CurrentUserDep, MaintenanceServiceDep, StaffUserDep
from app.core.exceptions import EntityNotFoundError
from app.models.maintenance import MaintenanceStatus
from app.schemas.maintenance import (
    MaintenanceTask,
    MaintenanceTaskCreate,
    MaintenanceTaskUpdate,
)
from app.schemas.responses import MessageResponse

router = APIRouter()


@router.get("/", response_model=List[MaintenanceTask])
async def get_maintenance_tasks(
    service: MaintenanceServiceDep,
    current_user: CurrentUserDep,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    property_id: Optional[int] = None,
    status: Optional[MaintenanceStatus] = None,
):
    return await service.get_all(skip, limit, property_id, status)


@router.post("/", response_model=MaintenanceTask)
async def create_maintenance_task(
    task_data: MaintenanceTaskCreate,
    service: MaintenanceServiceDep,
    current_user: StaffUserDep,
):
    return await service.create(task_data)


@router.get("/{task_id}", response_model=MaintenanceTask)
async def get_maintenance_task(
    task_id: int,
    service: MaintenanceServiceDep,
    current_user: CurrentUserDep,
):
    task = await service.get_by_id(task_id)
    if not task:
        raise EntityNotFoundError("Maintenance task", task_id)
    return task


@router.put("/{task_id}", response_model=MaintenanceTask)
async def update_maintenance_task(
    task_id: int,
    task_data: MaintenanceTaskUpdate,
    service: MaintenanceServiceDep,
    current_user: StaffUserDep,
):
    return await service.update(task_id, task_data)


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_maintenance_task(
    task_id: int,
    service: MaintenanceServiceDep,
    current_user: StaffUserDep,
):
    await service.delete(task_id)
    return MessageResponse(message="Maintenance task deleted successfully")
