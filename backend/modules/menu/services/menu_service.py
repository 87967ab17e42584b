# backend/modules/menu/services/menu_service.py

import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from core.clock import Clock
from core.exceptions import NotFoundError
from core.response_models import PageParams, PaginationMeta, paginate
from ..models.menu_models import Menu
from ..schemas.menu_schemas import MenuCreate, MenuUpdate

logger = logging.getLogger(__name__)


class MenuService:
    def __init__(self, db: Session, clock: Clock):
        self.db = db
        self.clock = clock

    def get_menu(self, menu_id: int) -> Menu:
        menu = self.db.query(Menu).filter(Menu.id == menu_id, Menu.live()).first()
        if not menu:
            raise NotFoundError(f"Menu {menu_id} not found")
        return menu

    def list_menus(
        self,
        params: PageParams,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[Menu], PaginationMeta]:
        query = self.db.query(Menu).filter(Menu.live())
        if category:
            query = query.filter(Menu.category == category)
        if search:
            query = query.filter(Menu.title.ilike(f"%{search}%"))
        return paginate(query.order_by(Menu.id), params)

    def create_menu(self, data: MenuCreate) -> Menu:
        menu = Menu(**data.model_dump())
        self.db.add(menu)
        self.db.commit()
        self.db.refresh(menu)
        logger.info(f"Created menu {menu.id} '{menu.title}'")
        return menu

    def update_menu(self, menu_id: int, data: MenuUpdate) -> Menu:
        menu = self.get_menu(menu_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(menu, field, value)
        self.db.commit()
        self.db.refresh(menu)
        return menu

    def delete_menu(self, menu_id: int) -> None:
        menu = self.get_menu(menu_id)
        menu.deleted_at = self.clock.now()
        self.db.commit()
        logger.info(f"Soft deleted menu {menu_id}")
