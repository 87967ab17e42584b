# backend/modules/reservations/routes/reservation_routes.py

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from core.auth import AuthUser, get_current_user, require_staff
from core.clock import Clock, get_clock
from core.config import Settings, get_settings
from core.database import get_db
from core.exceptions import ForbiddenError
from core.rate_limiter import RateLimitGroup, rate_limit
from core.response_models import PageParams, StandardResponse, page_params
from ..enums.reservation_enums import ReservationStatus
from ..schemas.reservation_schemas import (
    ReservationCreate,
    ReservationFilter,
    ReservationOut,
    ReservationUpdate,
)
from ..services.reservation_service import ReservationService

router = APIRouter(
    prefix="/reservations",
    tags=["Reservations"],
    dependencies=[Depends(rate_limit(RateLimitGroup.GENERAL, per_user=True))],
)


def get_reservation_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    settings: Settings = Depends(get_settings),
) -> ReservationService:
    return ReservationService(db, clock, settings)


def reservation_filters(
    reservation_status: Optional[ReservationStatus] = Query(None, alias="status"),
    table_number: Optional[int] = Query(None, ge=1),
    day: Optional[date] = Query(None, description="UTC calendar day"),
) -> ReservationFilter:
    return ReservationFilter(status=reservation_status, table_number=table_number, day=day)


@router.post(
    "", response_model=StandardResponse[ReservationOut], status_code=status.HTTP_201_CREATED
)
async def create_reservation(
    data: ReservationCreate,
    user: AuthUser = Depends(get_current_user),
    service: ReservationService = Depends(get_reservation_service),
):
    reservation = await service.create_reservation(user.customer_id, data)
    return StandardResponse[ReservationOut].success(
        data=ReservationOut.model_validate(reservation), message="Reservation created"
    )


@router.get("", response_model=StandardResponse[List[ReservationOut]])
async def list_reservations(
    params: PageParams = Depends(page_params),
    filters: ReservationFilter = Depends(reservation_filters),
    user: AuthUser = Depends(get_current_user),
    service: ReservationService = Depends(get_reservation_service),
):
    """Staff see every reservation, customers only their own."""
    customer_id = None if user.is_staff else user.customer_id
    reservations, meta = service.list_reservations(params, filters, customer_id=customer_id)
    return StandardResponse[List[ReservationOut]].paginated(
        data=[ReservationOut.model_validate(r) for r in reservations], meta=meta
    )


@router.get("/{reservation_id}", response_model=StandardResponse[ReservationOut])
async def get_reservation(
    reservation_id: int,
    user: AuthUser = Depends(get_current_user),
    service: ReservationService = Depends(get_reservation_service),
):
    reservation = service.get_reservation(reservation_id)
    if reservation.customer_id != user.customer_id and not user.is_staff:
        raise ForbiddenError("You do not have access to this reservation")
    return StandardResponse[ReservationOut].success(
        data=ReservationOut.model_validate(reservation)
    )


@router.patch("/{reservation_id}", response_model=StandardResponse[ReservationOut])
async def update_reservation(
    reservation_id: int,
    data: ReservationUpdate,
    user: AuthUser = Depends(require_staff),
    service: ReservationService = Depends(get_reservation_service),
):
    reservation = await service.update_reservation(reservation_id, data)
    return StandardResponse[ReservationOut].success(
        data=ReservationOut.model_validate(reservation), message="Reservation updated"
    )


@router.delete("/{reservation_id}", response_model=StandardResponse[None])
async def delete_reservation(
    reservation_id: int,
    user: AuthUser = Depends(require_staff),
    service: ReservationService = Depends(get_reservation_service),
):
    await service.delete_reservation(reservation_id)
    return StandardResponse[None].success(message="Reservation deleted")
