from datetime import date
from typing import Optional

from fastapi import APIRouter, Query

from app.core.common_deps import CurrentUserDep, ReservationServiceDep, StaffUserDep
from app.core.exceptions import EntityNotFoundError
from app.models.reservation import ReservationPlatform, ReservationStatus
from app.schemas.reservation import (
    Reservation,
    ReservationAvailability,
    ReservationCreate,
    ReservationUpdate,
)
from app.schemas.responses import MessageResponse, PaginatedResponse

router = APIRouter()


@router.get("/", response_model=PaginatedResponse[Reservation])
async def get_reservations(
    service: ReservationServiceDep,
    current_user: CurrentUserDep,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    property_id: Optional[int] = None,
    status: Optional[ReservationStatus] = None,
    platform: Optional[ReservationPlatform] = None,
    start_date: Optional[date] = Query(None, description="Earliest check-in date"),
    end_date: Optional[date] = Query(None, description="Latest check-in date"),
    search: Optional[str] = Query(None, description="Search by guest name"),
):
    items, total_count = await service.get_all(
        skip, limit, property_id, status, platform, start_date, end_date, search
    )
    return PaginatedResponse.create(
        [Reservation.model_validate(item) for item in items], total_count, skip, limit
    )


@router.get("/check-availability", response_model=ReservationAvailability)
async def check_availability(
    service: ReservationServiceDep,
    current_user: CurrentUserDep,
    property_id: int,
    check_in_date: date,
    check_out_date: date,
    exclude_reservation_id: Optional[int] = None,
):
    """Report active reservations overlapping the requested stay."""
    return await service.check_availability(
        property_id, check_in_date, check_out_date, exclude_reservation_id
    )


@router.post("/", response_model=Reservation)
async def create_reservation(
    reservation_data: ReservationCreate,
    service: ReservationServiceDep,
    current_user: StaffUserDep,
):
    return await service.create(reservation_data)


@router.get("/{reservation_id}", response_model=Reservation)
async def get_reservation(
    reservation_id: int,
    service: ReservationServiceDep,
    current_user: CurrentUserDep,
):
    reservation = await service.get_by_id(reservation_id)
    if not reservation:
        raise EntityNotFoundError("Reservation", reservation_id)
    return reservation


@router.put("/{reservation_id}", response_model=Reservation)
async def update_reservation(
    reservation_id: int,
    reservation_data: ReservationUpdate,
    service: ReservationServiceDep,
    current_user: StaffUserDep,
):
    return await service.update(reservation_id, reservation_data)


@router.delete("/{reservation_id}", response_model=MessageResponse)
async def delete_reservation(
    reservation_id: int,
    service: ReservationServiceDep,
    current_user: StaffUserDep,
):
    await service.delete(reservation_id)
    return MessageResponse(message="Reservation deleted successfully")
