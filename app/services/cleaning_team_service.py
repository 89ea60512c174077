from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.service_utils import (
    ensure_exists,
    ensure_no_related_records,
    validate_unique_field,
)
from app.models.cleaning_team import CleaningTeam, CleaningTeamStatus
from app.models.property import Property
from app.schemas.cleaning_team import CleaningTeamCreate, CleaningTeamUpdate


class CleaningTeamService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all(
        self, status: Optional[CleaningTeamStatus] = None
    ) -> List[CleaningTeam]:
        stmt = select(CleaningTeam).order_by(CleaningTeam.name)
        if status:
            stmt = stmt.where(CleaningTeam.status == status)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id(self, team_id: int) -> Optional[CleaningTeam]:
        result = await self.db.execute(
            select(CleaningTeam).where(CleaningTeam.id == team_id)
        )
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Optional[CleaningTeam]:
        result = await self.db.execute(
            select(CleaningTeam).where(CleaningTeam.name == name)
        )
        return result.scalar_one_or_none()

    async def create(self, team_data: CleaningTeamCreate) -> CleaningTeam:
        validate_unique_field(
            await self.get_by_name(team_data.name), "name", "Cleaning team"
        )

        db_team = CleaningTeam(**team_data.model_dump())
        self.db.add(db_team)
        await self.db.commit()
        await self.db.refresh(db_team)
        return db_team

    async def update(
        self, team_id: int, team_data: CleaningTeamUpdate
    ) -> CleaningTeam:
        db_team = ensure_exists(await self.get_by_id(team_id), "Cleaning team", team_id)

        if team_data.name and team_data.name != db_team.name:
            validate_unique_field(
                await self.get_by_name(team_data.name), "name", "Cleaning team"
            )

        for field, value in team_data.model_dump(exclude_unset=True).items():
            setattr(db_team, field, value)

        await self.db.commit()
        await self.db.refresh(db_team)
        return db_team

    async def delete(self, team_id: int) -> bool:
        db_team = ensure_exists(await self.get_by_id(team_id), "Cleaning team", team_id)

        properties_count = await self.db.scalar(
            select(func.count(Property.id)).where(Property.cleaning_team_id == team_id)
        )
        ensure_no_related_records(properties_count or 0, "cleaning team", "properties")

        await self.db.delete(db_team)
        await self.db.commit()
        return True
