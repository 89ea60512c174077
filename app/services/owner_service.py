from typing import List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.service_utils import ensure_exists, ensure_no_related_records
from app.models.activity import ActivityType
from app.models.owner import Owner
from app.models.property import Property
from app.schemas.owner import OwnerCreate, OwnerUpdate
from app.services.activity_service import ActivityService


class OwnerService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.activities = ActivityService(db)

    async def get_all(
        self, skip: int = 0, limit: int = 100, search: Optional[str] = None
    ) -> List[Owner]:
        stmt = select(Owner).order_by(Owner.name)
        if search:
            pattern = f"%{search.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(Owner.name).like(pattern),
                    func.lower(Owner.company).like(pattern),
                    func.lower(Owner.email).like(pattern),
                )
            )
        result = await self.db.execute(stmt.offset(skip).limit(limit))
        return list(result.scalars().all())

    async def get_by_id(self, owner_id: int) -> Optional[Owner]:
        stmt = (
            select(Owner)
            .options(selectinload(Owner.properties))
            .where(Owner.id == owner_id)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, owner_data: OwnerCreate) -> Owner:
        db_owner = Owner(**owner_data.model_dump())
        self.db.add(db_owner)
        await self.db.flush()

        self.activities.log(
            ActivityType.OWNER_CREATED,
            f"Owner {db_owner.name} created",
            db_owner.id,
            "owner",
        )
        await self.db.commit()
        await self.db.refresh(db_owner)
        return db_owner

    async def update(self, owner_id: int, owner_data: OwnerUpdate) -> Owner:
        db_owner = ensure_exists(await self.get_by_id(owner_id), "Owner", owner_id)

        update_data = owner_data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(db_owner, field, value)

        self.activities.log(
            ActivityType.OWNER_UPDATED,
            f"Owner {db_owner.name} updated",
            db_owner.id,
            "owner",
        )
        await self.db.commit()
        await self.db.refresh(db_owner)
        return db_owner

    async def delete(self, owner_id: int) -> bool:
        db_owner = ensure_exists(await self.get_by_id(owner_id), "Owner", owner_id)

        properties_count = await self.db.scalar(
            select(func.count(Property.id)).where(Property.owner_id == owner_id)
        )
        ensure_no_related_records(properties_count or 0, "owner", "properties")

        self.activities.log(
            ActivityType.OWNER_DELETED,
            f"Owner {db_owner.name} deleted",
            owner_id,
            "owner",
        )
        await self.db.delete(db_owner)
        await self.db.commit()
        return True
