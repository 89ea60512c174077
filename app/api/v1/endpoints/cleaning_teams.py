from typing import List, Optional

from fastapi import APIRouter

from app.core.common_deps import CleaningTeamServiceDep, CurrentUserDep, StaffUserDep
from app.core.exceptions import EntityNotFoundError
from app.models.cleaning_team import CleaningTeamStatus
from app.schemas.cleaning_team import (
    CleaningTeam,
    CleaningTeamCreate,
    CleaningTeamUpdate,
)
from app.schemas.responses import MessageResponse

router = APIRouter()


@router.get("/", response_model=List[CleaningTeam])
async def get_cleaning_teams(
    service: CleaningTeamServiceDep,
    current_user: CurrentUserDep,
    status: Optional[CleaningTeamStatus] = None,
):
    return await service.get_all(status)


@router.post("/", response_model=CleaningTeam)
async def create_cleaning_team(
    team_data: CleaningTeamCreate,
    service: CleaningTeamServiceDep,
    current_user: StaffUserDep,
):
    return await service.create(team_data)


@router.get("/{team_id}", response_model=CleaningTeam)
async def get_cleaning_team(
    team_id: int,
    service: CleaningTeamServiceDep,
    current_user: CurrentUserDep,
):
    team = await service.get_by_id(team_id)
    if not team:
        raise EntityNotFoundError("Cleaning team", team_id)
    return team


@router.put("/{team_id}", response_model=CleaningTeam)
async def update_cleaning_team(
    team_id: int,
    team_data: CleaningTeamUpdate,
    service: CleaningTeamServiceDep,
    current_user: StaffUserDep,
):
    return await service.update(team_id, team_data)


@router.delete("/{team_id}", response_model=MessageResponse)
async def delete_cleaning_team(
    team_id: int,
    service: CleaningTeamServiceDep,
    current_user: StaffUserDep,
):
    await service.delete(team_id)
    return MessageResponse(message="Cleaning team deleted successfully")
