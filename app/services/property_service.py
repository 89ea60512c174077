import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import ConflictError, ValidationError
from app.core.query_builders import PropertyQueryBuilder
from app.core.service_utils import ensure_exists, validate_unique_field
from app.models.activity import ActivityType
from app.models.cleaning_team import CleaningTeam
from app.models.owner import Owner
from app.models.property import Property
from app.models.reservation import ReservationStatus
from app.schemas.property import PropertyCreate, PropertyUpdate
from app.services.activity_service import ActivityService

logger = logging.getLogger(__name__)

ACTIVE_RESERVATION_STATUSES = (ReservationStatus.PENDING, ReservationStatus.CONFIRMED)


class PropertyService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.activities = ActivityService(db)

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        owner_id: Optional[int] = None,
        active: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> List[Property]:
        stmt = (
            PropertyQueryBuilder(Property)
            .filter_by_owner(owner_id)
            .filter_by_active(active)
            .search_by_name(search)
            .order_by(Property.name)
            .paginate(skip, limit)
            .build()
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id(self, property_id: int) -> Optional[Property]:
        stmt = (
            select(Property)
            .options(
                selectinload(Property.owner),
                selectinload(Property.cleaning_team),
            )
            .where(Property.id == property_id)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Optional[Property]:
        result = await self.db.execute(select(Property).where(Property.name == name))
        return result.scalar_one_or_none()

    async def get_name_catalogue(self) -> List[Property]:
        """All properties, used to match names read from documents."""
        result = await self.db.execute(select(Property).order_by(Property.id))
        return list(result.scalars().all())

    async def _check_references(
        self, owner_id: Optional[int], cleaning_team_id: Optional[int]
    ) -> None:
        if owner_id is not None and await self.db.get(Owner, owner_id) is None:
            raise ValidationError("Owner does not exist", "owner_id", owner_id)
        if (
            cleaning_team_id is not None
            and await self.db.get(CleaningTeam, cleaning_team_id) is None
        ):
            raise ValidationError(
                "Cleaning team does not exist", "cleaning_team_id", cleaning_team_id
            )

    async def create(self, property_data: PropertyCreate) -> Property:
        validate_unique_field(
            await self.get_by_name(property_data.name), "name", "Property"
        )
        await self._check_references(
            property_data.owner_id, property_data.cleaning_team_id
        )

        db_property = Property(**property_data.model_dump())
        self.db.add(db_property)
        await self.db.flush()

        self.activities.log(
            ActivityType.PROPERTY_CREATED,
            f"Property {db_property.name} created",
            db_property.id,
            "property",
        )
        await self.db.commit()
        return await self.get_by_id(db_property.id)

    async def update(self, property_id: int, property_data: PropertyUpdate) -> Property:
        db_property = ensure_exists(
            await self.get_by_id(property_id), "Property", property_id
        )
        update_data = property_data.model_dump(exclude_unset=True)

        new_name = update_data.get("name")
        if new_name and new_name != db_property.name:
            validate_unique_field(await self.get_by_name(new_name), "name", "Property")
        await self._check_references(
            update_data.get("owner_id"), update_data.get("cleaning_team_id")
        )

        for field, value in update_data.items():
            setattr(db_property, field, value)

        self.activities.log(
            ActivityType.PROPERTY_UPDATED,
            f"Property {db_property.name} updated",
            db_property.id,
            "property",
        )
        await self.db.commit()
        self.db.expunge(db_property)
        return await self.get_by_id(property_id)

    async def delete(self, property_id: int) -> bool:
        """Delete a property with its past reservations and maintenance tasks.

        Refused while the property still has pending or confirmed reservations.
        """
        stmt = (
            select(Property)
            .options(
                selectinload(Property.reservations),
                selectinload(Property.maintenance_tasks),
            )
            .where(Property.id == property_id)
        )
        result = await self.db.execute(stmt)
        db_property = ensure_exists(
            result.scalar_one_or_none(), "Property", property_id
        )

        active = [
            r for r in db_property.reservations if r.status in ACTIVE_RESERVATION_STATUSES
        ]
        if active:
            raise ConflictError(
                "Cannot delete property with pending or confirmed reservations",
                "reservations",
            )

        self.activities.log(
            ActivityType.PROPERTY_DELETED,
            f"Property {db_property.name} deleted",
            property_id,
            "property",
        )
        await self.db.delete(db_property)
        await self.db.commit()
        logger.info(
            f"Property {property_id} deleted with {len(db_property.reservations)} "
            f"reservations and {len(db_property.maintenance_tasks)} maintenance tasks"
        )
        return True
