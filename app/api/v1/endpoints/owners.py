from typing import List, Optional

from fastapi import APIRouter, Query

from app.core.common_deps import CurrentUserDep, OwnerServiceDep, StaffUserDep
from app.core.exceptions import EntityNotFoundError
from app.schemas.owner import Owner, OwnerCreate, OwnerUpdate, OwnerWithProperties
from app.schemas.responses import MessageResponse

router = APIRouter()


@router.get("/", response_model=List[Owner])
async def get_owners(
    service: OwnerServiceDep,
    current_user: CurrentUserDep,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    search: Optional[str] = Query(None, description="Search by name, company or email"),
):
    return await service.get_all(skip, limit, search)


@router.post("/", response_model=Owner)
async def create_owner(
    owner_data: OwnerCreate,
    service: OwnerServiceDep,
    current_user: StaffUserDep,
):
    return await service.create(owner_data)


@router.get("/{owner_id}", response_model=OwnerWithProperties)
async def get_owner(
    owner_id: int,
    service: OwnerServiceDep,
    current_user: CurrentUserDep,
):
    owner = await service.get_by_id(owner_id)
    if not owner:
        raise EntityNotFoundError("Owner", owner_id)
    return owner


@router.put("/{owner_id}", response_model=Owner)
async def update_owner(
    owner_id: int,
    owner_data: OwnerUpdate,
    service: OwnerServiceDep,
    current_user: StaffUserDep,
):
    return await service.update(owner_id, owner_data)


@router.delete("/{owner_id}", response_model=MessageResponse)
async def delete_owner(
    owner_id: int,
    service: OwnerServiceDep,
    current_user: StaffUserDep,
):
    await service.delete(owner_id)
    return MessageResponse(message="Owner deleted successfully")
