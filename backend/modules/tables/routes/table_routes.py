# backend/modules/tables/routes/table_routes.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from core.auth import AuthUser, get_current_user, require_staff
from core.clock import Clock, get_clock
from core.database import get_db
from core.rate_limiter import RateLimitGroup, rate_limit
from core.response_models import PageParams, StandardResponse, page_params
from ..schemas.table_schemas import (
    TableAvailabilityUpdate,
    TableCreate,
    TableResponse,
    TableUpdate,
)
from ..services.table_service import TableService

router = APIRouter(
    prefix="/tables",
    tags=["Tables"],
    dependencies=[Depends(rate_limit(RateLimitGroup.GENERAL, per_user=True))],
)


def get_table_service(
    db: Session = Depends(get_db), clock: Clock = Depends(get_clock)
) -> TableService:
    return TableService(db, clock)


@router.get("", response_model=StandardResponse[List[TableResponse]])
async def list_tables(
    is_available: Optional[bool] = Query(None),
    min_capacity: Optional[int] = Query(None, ge=1),
    params: PageParams = Depends(page_params),
    _: AuthUser = Depends(get_current_user),
    service: TableService = Depends(get_table_service),
):
    tables, meta = service.list_tables(params, is_available, min_capacity)
    return StandardResponse[List[TableResponse]].paginated(
        data=[TableResponse.model_validate(t) for t in tables], meta=meta
    )


@router.get("/{table_id}", response_model=StandardResponse[TableResponse])
async def get_table(
    table_id: int,
    _: AuthUser = Depends(get_current_user),
    service: TableService = Depends(get_table_service),
):
    return StandardResponse[TableResponse].success(
        data=TableResponse.model_validate(service.get_table(table_id))
    )


@router.post("", response_model=StandardResponse[TableResponse], status_code=status.HTTP_201_CREATED)
async def create_table(
    data: TableCreate,
    _: AuthUser = Depends(require_staff),
    service: TableService = Depends(get_table_service),
):
    table = service.create_table(data)
    return StandardResponse[TableResponse].success(
        data=TableResponse.model_validate(table), message="Table created"
    )


@router.put("/{table_id}", response_model=StandardResponse[TableResponse])
async def update_table(
    table_id: int,
    data: TableUpdate,
    _: AuthUser = Depends(require_staff),
    service: TableService = Depends(get_table_service),
):
    table = service.update_table(table_id, data)
    return StandardResponse[TableResponse].success(
        data=TableResponse.model_validate(table), message="Table updated"
    )


@router.patch("/{table_id}/availability", response_model=StandardResponse[TableResponse])
async def update_availability(
    table_id: int,
    data: TableAvailabilityUpdate,
    _: AuthUser = Depends(require_staff),
    service: TableService = Depends(get_table_service),
):
    table = service.set_availability(table_id, data.is_available)
    return StandardResponse[TableResponse].success(
        data=TableResponse.model_validate(table), message="Availability updated"
    )


@router.delete("/{table_id}", response_model=StandardResponse[None])
async def delete_table(
    table_id: int,
    _: AuthUser = Depends(require_staff),
    service: TableService = Depends(get_table_service),
):
    service.delete_table(table_id)
    return StandardResponse[None].success(message="Table deleted")
