import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationError
from app.core.query_builders import ReservationQueryBuilder
from app.core.service_utils import ensure_exists, to_money, validate_date_range
from app.models.activity import ActivityType
from app.models.property import Property
from app.models.reservation import (
    Reservation,
    ReservationPlatform,
    ReservationStatus,
)
from app.schemas.reservation import (
    ReservationAvailability,
    ReservationCreate,
    ReservationUpdate,
)
from app.services.activity_service import ActivityService

logger = logging.getLogger(__name__)

# Changing any of these re-prices the reservation
FEE_INPUT_FIELDS = {"total_amount", "platform_fee", "property_id"}

ACTIVE_STATUSES = (ReservationStatus.PENDING, ReservationStatus.CONFIRMED)


def calculate_reservation_fees(
    total_amount: Decimal, platform_fee: Decimal, property: Property
) -> Dict[str, Decimal]:
    """
    Derive the per-reservation fees from the property's cost settings.

    Returns a dict with cleaning_fee, check_in_fee, commission_fee,
    team_payment and net_amount, each rounded to cents.
    """
    total = to_money(total_amount)
    cleaning_fee = to_money(property.cleaning_cost)
    check_in_fee = to_money(property.check_in_fee)
    commission_fee = to_money(
        total * Decimal(str(property.commission or 0)) / Decimal("100")
    )
    team_payment = to_money(property.team_payment)
    net_amount = to_money(
        total
        - cleaning_fee
        - check_in_fee
        - commission_fee
        - team_payment
        - to_money(platform_fee)
    )
    return {
        "cleaning_fee": cleaning_fee,
        "check_in_fee": check_in_fee,
        "commission_fee": commission_fee,
        "team_payment": team_payment,
        "net_amount": net_amount,
    }


class ReservationService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.activities = ActivityService(db)

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        property_id: Optional[int] = None,
        status: Optional[ReservationStatus] = None,
        platform: Optional[ReservationPlatform] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[Reservation], int]:
        """Filtered page of reservations plus the total number of matches."""
        query_builder = (
            ReservationQueryBuilder(Reservation)
            .filter_by_property(property_id)
            .filter_by_status(status)
            .filter_by_platform(platform)
            .filter_by_check_in(start_date, end_date)
            .search_by_guest(search)
        )
        total_count = await self.db.scalar(query_builder.build_count())

        stmt = (
            query_builder.order_by(Reservation.check_in_date, "desc")
            .order_by(Reservation.id, "desc")
            .paginate(skip, limit)
            .build()
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total_count or 0

    async def get_by_id(self, reservation_id: int) -> Optional[Reservation]:
        result = await self.db.execute(
            select(Reservation).where(Reservation.id == reservation_id)
        )
        return result.scalar_one_or_none()

    async def _get_property(self, property_id: int) -> Property:
        db_property = await self.db.get(Property, property_id)
        if db_property is None:
            raise ValidationError("Property does not exist", "property_id", property_id)
        return db_property

    async def create(self, reservation_data: ReservationCreate) -> Reservation:
        db_property = await self._get_property(reservation_data.property_id)

        fees = calculate_reservation_fees(
            reservation_data.total_amount, reservation_data.platform_fee, db_property
        )
        db_reservation = Reservation(**reservation_data.model_dump(), **fees)
        self.db.add(db_reservation)
        await self.db.flush()

        self.activities.log(
            ActivityType.RESERVATION_CREATED,
            f"Reservation for {db_reservation.guest_name} at {db_property.name} "
            f"({db_reservation.check_in_date} to {db_reservation.check_out_date})",
            db_reservation.id,
            "reservation",
        )
        await self.db.commit()
        await self.db.refresh(db_reservation)
        return db_reservation

    async def update(
        self, reservation_id: int, reservation_data: ReservationUpdate
    ) -> Reservation:
        db_reservation = ensure_exists(
            await self.get_by_id(reservation_id), "Reservation", reservation_id
        )
        update_data = reservation_data.model_dump(exclude_unset=True)

        validate_date_range(
            update_data.get("check_in_date", db_reservation.check_in_date),
            update_data.get("check_out_date", db_reservation.check_out_date),
            "check_in_date",
            "check_out_date",
        )

        for field, value in update_data.items():
            setattr(db_reservation, field, value)

        if FEE_INPUT_FIELDS & update_data.keys():
            db_property = await self._get_property(db_reservation.property_id)
            fees = calculate_reservation_fees(
                db_reservation.total_amount, db_reservation.platform_fee, db_property
            )
            for field, value in fees.items():
                setattr(db_reservation, field, value)

        self.activities.log(
            ActivityType.RESERVATION_UPDATED,
            f"Reservation for {db_reservation.guest_name} updated",
            db_reservation.id,
            "reservation",
        )
        await self.db.commit()
        await self.db.refresh(db_reservation)
        return db_reservation

    async def delete(self, reservation_id: int) -> bool:
        db_reservation = ensure_exists(
            await self.get_by_id(reservation_id), "Reservation", reservation_id
        )
        self.activities.log(
            ActivityType.RESERVATION_DELETED,
            f"Reservation for {db_reservation.guest_name} deleted",
            reservation_id,
            "reservation",
        )
        await self.db.delete(db_reservation)
        await self.db.commit()
        return True

    async def check_availability(
        self,
        property_id: int,
        check_in: date,
        check_out: date,
        exclude_reservation_id: Optional[int] = None,
    ) -> ReservationAvailability:
        """Report pending or confirmed reservations overlapping the stay.

        The result is informational; creating an overlapping reservation is allowed.
        """
        validate_date_range(check_in, check_out, "check_in_date", "check_out_date")
        await self._get_property(property_id)

        query_builder = (
            ReservationQueryBuilder(Reservation)
            .filter_by_property(property_id)
            .where_in(Reservation.status, list(ACTIVE_STATUSES))
            .filter_overlapping(check_in, check_out)
        )
        if exclude_reservation_id is not None:
            query_builder.where(Reservation.id != exclude_reservation_id)

        result = await self.db.execute(query_builder.order_by(Reservation.id).build())
        conflicts = [r.id for r in result.scalars().all()]
        if conflicts:
            logger.info(
                f"Property {property_id} has {len(conflicts)} overlapping "
                f"reservations for {check_in}..{check_out}"
            )

        return ReservationAvailability(
            property_id=property_id,
            check_in_date=check_in,
            check_out_date=check_out,
            is_available=not conflicts,
            conflicting_reservation_ids=conflicts,
        )
