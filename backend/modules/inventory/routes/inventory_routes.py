# backend/modules/inventory/routes/inventory_routes.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from core.auth import AuthUser, require_staff
from core.clock import Clock, get_clock
from core.database import get_db
from core.rate_limiter import RateLimitGroup, rate_limit
from core.response_models import PageParams, StandardResponse, page_params
from ..schemas.inventory_schemas import (
    InventoryCreate,
    InventoryOut,
    InventoryUpdate,
    StockAdjustment,
)
from ..services.inventory_service import InventoryService

router = APIRouter(
    prefix="/inventories",
    tags=["Inventory"],
    dependencies=[Depends(rate_limit(RateLimitGroup.GENERAL, per_user=True))],
)


def get_inventory_service(
    db: Session = Depends(get_db), clock: Clock = Depends(get_clock)
) -> InventoryService:
    return InventoryService(db, clock)


@router.get("", response_model=StandardResponse[List[InventoryOut]])
async def list_inventory(
    search: Optional[str] = Query(None),
    params: PageParams = Depends(page_params),
    _: AuthUser = Depends(require_staff),
    service: InventoryService = Depends(get_inventory_service),
):
    items, meta = service.list_items(params, search=search)
    return StandardResponse[List[InventoryOut]].paginated(
        data=[InventoryOut.model_validate(i) for i in items], meta=meta
    )


@router.get("/low-stock", response_model=StandardResponse[List[InventoryOut]])
async def list_low_stock(
    _: AuthUser = Depends(require_staff),
    service: InventoryService = Depends(get_inventory_service),
):
    items = service.list_low_stock()
    return StandardResponse[List[InventoryOut]].success(
        data=[InventoryOut.model_validate(i) for i in items]
    )


@router.get("/{item_id}", response_model=StandardResponse[InventoryOut])
async def get_inventory_item(
    item_id: int,
    _: AuthUser = Depends(require_staff),
    service: InventoryService = Depends(get_inventory_service),
):
    return StandardResponse[InventoryOut].success(
        data=InventoryOut.model_validate(service.get_item(item_id))
    )


@router.post("", response_model=StandardResponse[InventoryOut], status_code=status.HTTP_201_CREATED)
async def create_inventory_item(
    data: InventoryCreate,
    _: AuthUser = Depends(require_staff),
    service: InventoryService = Depends(get_inventory_service),
):
    item = service.create_item(data)
    return StandardResponse[InventoryOut].success(
        data=InventoryOut.model_validate(item), message="Inventory item created"
    )


@router.put("/{item_id}", response_model=StandardResponse[InventoryOut])
async def update_inventory_item(
    item_id: int,
    data: InventoryUpdate,
    _: AuthUser = Depends(require_staff),
    service: InventoryService = Depends(get_inventory_service),
):
    item = service.update_item(item_id, data)
    return StandardResponse[InventoryOut].success(
        data=InventoryOut.model_validate(item), message="Inventory item updated"
    )


@router.patch("/{item_id}/stock", response_model=StandardResponse[InventoryOut])
async def adjust_stock(
    item_id: int,
    data: StockAdjustment,
    _: AuthUser = Depends(require_staff),
    service: InventoryService = Depends(get_inventory_service),
):
    item = service.adjust_stock(item_id, data.quantity)
    return StandardResponse[InventoryOut].success(
        data=InventoryOut.model_validate(item), message="Stock updated"
    )


@router.delete("/{item_id}", response_model=StandardResponse[None])
async def delete_inventory_item(
    item_id: int,
    _: AuthUser = Depends(require_staff),
    service: InventoryService = Depends(get_inventory_service),
):
    service.delete_item(item_id)
    return StandardResponse[None].success(message="Inventory item deleted")
