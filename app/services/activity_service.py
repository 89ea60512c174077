import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.activity import Activity, ActivityType
from app.schemas.activity import ActivityCreate

logger = logging.getLogger(__name__)


class ActivityService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_recent(
        self,
        limit: int = 50,
        entity_type: Optional[str] = None,
        activity_type: Optional[ActivityType] = None,
    ) -> List[Activity]:
        stmt = select(Activity).order_by(Activity.created_at.desc(), Activity.id.desc())
        if entity_type:
            stmt = stmt.where(Activity.entity_type == entity_type)
        if activity_type:
            stmt = stmt.where(Activity.type == activity_type.value)
        else:
            # Markers are bookkeeping for demo data, not user-facing history
            stmt = stmt.where(Activity.type != ActivityType.DEMO_DATA_MARKER.value)
        result = await self.db.execute(stmt.limit(limit))
        return list(result.scalars().all())

    async def create(self, activity_data: ActivityCreate) -> Activity:
        activity = self.log(
            activity_data.type,
            activity_data.description,
            activity_data.entity_id,
            activity_data.entity_type,
        )
        await self.db.commit()
        await self.db.refresh(activity)
        return activity

    def log(
        self,
        activity_type: ActivityType,
        description: str,
        entity_id: Optional[int] = None,
        entity_type: Optional[str] = None,
    ) -> Activity:
        """Stage an activity in the caller's transaction; the caller commits."""
        activity = Activity(
            type=activity_type.value,
            description=description,
            entity_id=entity_id,
            entity_type=entity_type,
        )
        self.db.add(activity)
        logger.debug(f"Activity staged: {activity_type.value} ({entity_type} {entity_id})")
        return activity
