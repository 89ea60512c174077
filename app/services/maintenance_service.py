from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationError
from app.core.service_utils import ensure_exists
from app.models.activity import ActivityType
from app.models.base import utcnow
from app.models.maintenance import MaintenanceStatus, MaintenanceTask
from app.models.property import Property
from app.schemas.maintenance import MaintenanceTaskCreate, MaintenanceTaskUpdate
from app.services.activity_service import ActivityService


class MaintenanceService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.activities = ActivityService(db)

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        property_id: Optional[int] = None,
        status: Optional[MaintenanceStatus] = None,
    ) -> List[MaintenanceTask]:
        stmt = select(MaintenanceTask).order_by(MaintenanceTask.created_at.desc())
        if property_id is not None:
            stmt = stmt.where(MaintenanceTask.property_id == property_id)
        if status:
            stmt = stmt.where(MaintenanceTask.status == status)
        result = await self.db.execute(stmt.offset(skip).limit(limit))
        return list(result.scalars().all())

    async def get_by_id(self, task_id: int) -> Optional[MaintenanceTask]:
        return await self.db.get(MaintenanceTask, task_id)

    async def create(self, task_data: MaintenanceTaskCreate) -> MaintenanceTask:
        db_property = await self.db.get(Property, task_data.property_id)
        if db_property is None:
            raise ValidationError(
                "Property does not exist", "property_id", task_data.property_id
            )

        db_task = MaintenanceTask(**task_data.model_dump())
        self.db.add(db_task)
        await self.db.flush()

        self.activities.log(
            ActivityType.MAINTENANCE_REQUESTED,
            f"Maintenance requested at {db_property.name}: {db_task.title}",
            db_task.id,
            "maintenance_task",
        )
        await self.db.commit()
        await self.db.refresh(db_task)
        return db_task

    async def update(
        self, task_id: int, task_data: MaintenanceTaskUpdate
    ) -> MaintenanceTask:
        db_task = ensure_exists(
            await self.get_by_id(task_id), "Maintenance task", task_id
        )
        update_data = task_data.model_dump(exclude_unset=True)

        new_status = update_data.get("status")
        if new_status == MaintenanceStatus.COMPLETED and db_task.completed_at is None:
            db_task.completed_at = utcnow()
        elif new_status is not None and new_status != MaintenanceStatus.COMPLETED:
            db_task.completed_at = None

        for field, value in update_data.items():
            setattr(db_task, field, value)

        await self.db.commit()
        await self.db.refresh(db_task)
        return db_task

    async def delete(self, task_id: int) -> bool:
        db_task = ensure_exists(
            await self.get_by_id(task_id), "Maintenance task", task_id
        )
        await self.db.delete(db_task)
        await self.db.commit()
        return True
