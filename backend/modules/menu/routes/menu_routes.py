# backend/modules/menu/routes/menu_routes.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from core.auth import AuthUser, require_admin
from core.clock import Clock, get_clock
from core.database import get_db
from core.rate_limiter import RateLimitGroup, rate_limit
from core.response_models import PageParams, StandardResponse, page_params
from ..schemas.menu_schemas import MenuCreate, MenuOut, MenuUpdate
from ..services.menu_service import MenuService

router = APIRouter(
    prefix="/menus",
    tags=["Menus"],
    dependencies=[Depends(rate_limit(RateLimitGroup.GENERAL))],
)


def get_menu_service(
    db: Session = Depends(get_db), clock: Clock = Depends(get_clock)
) -> MenuService:
    return MenuService(db, clock)


@router.get("", response_model=StandardResponse[List[MenuOut]])
async def list_menus(
    category: Optional[str] = Query(None, description="Filter by category"),
    search: Optional[str] = Query(None, description="Match against the title"),
    params: PageParams = Depends(page_params),
    service: MenuService = Depends(get_menu_service),
):
    menus, meta = service.list_menus(params, category=category, search=search)
    return StandardResponse[List[MenuOut]].paginated(
        data=[MenuOut.model_validate(m) for m in menus], meta=meta
    )


@router.get("/{menu_id}", response_model=StandardResponse[MenuOut])
async def get_menu(menu_id: int, service: MenuService = Depends(get_menu_service)):
    return StandardResponse[MenuOut].success(
        data=MenuOut.model_validate(service.get_menu(menu_id))
    )


@router.post("", response_model=StandardResponse[MenuOut], status_code=status.HTTP_201_CREATED)
async def create_menu(
    data: MenuCreate,
    _: AuthUser = Depends(require_admin),
    service: MenuService = Depends(get_menu_service),
):
    menu = service.create_menu(data)
    return StandardResponse[MenuOut].success(
        data=MenuOut.model_validate(menu), message="Menu created"
    )


@router.put("/{menu_id}", response_model=StandardResponse[MenuOut])
async def update_menu(
    menu_id: int,
    data: MenuUpdate,
    _: AuthUser = Depends(require_admin),
    service: MenuService = Depends(get_menu_service),
):
    menu = service.update_menu(menu_id, data)
    return StandardResponse[MenuOut].success(
        data=MenuOut.model_validate(menu), message="Menu updated"
    )


@router.delete("/{menu_id}", response_model=StandardResponse[None])
async def delete_menu(
    menu_id: int,
    _: AuthUser = Depends(require_admin),
    service: MenuService = Depends(get_menu_service),
):
    service.delete_menu(menu_id)
    return StandardResponse[None].success(message="Menu deleted")
