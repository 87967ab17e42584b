# backend/modules/wishlist/services/wishlist_service.py

import logging
from typing import List, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from core.clock import Clock
from core.exceptions import MenuAlreadyInWishlistError, NotFoundError
from core.response_models import PageParams, PaginationMeta, paginate
from modules.menu.services.menu_service import MenuService
from ..models.wishlist_models import Wishlist

logger = logging.getLogger(__name__)


class WishlistService:
    def __init__(self, db: Session, clock: Clock):
        self.db = db
        self.clock = clock

    def add(self, customer_id: int, menu_id: int) -> Wishlist:
        MenuService(self.db, self.clock).get_menu(menu_id)

        existing = (
            self.db.query(Wishlist.id)
            .filter(
                Wishlist.customer_id == customer_id,
                Wishlist.menu_id == menu_id,
                Wishlist.live(),
            )
            .first()
        )
        if existing:
            raise MenuAlreadyInWishlistError()

        entry = Wishlist(customer_id=customer_id, menu_id=menu_id)
        self.db.add(entry)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise MenuAlreadyInWishlistError()
        self.db.refresh(entry)
        return entry

    def list_items(
        self, customer_id: int, params: PageParams
    ) -> Tuple[List[Wishlist], PaginationMeta]:
        query = (
            self.db.query(Wishlist)
            .options(joinedload(Wishlist.menu))
            .filter(Wishlist.customer_id == customer_id, Wishlist.live())
            .order_by(Wishlist.id.desc())
        )
        return paginate(query, params)

    def remove(self, customer_id: int, wishlist_id: int) -> None:
        entry = (
            self.db.query(Wishlist)
            .filter(
                Wishlist.id == wishlist_id,
                Wishlist.customer_id == customer_id,
                Wishlist.live(),
            )
            .first()
        )
        if not entry:
            raise NotFoundError(f"Wishlist item {wishlist_id} not found")
        entry.deleted_at = self.clock.now()
        self.db.commit()
        logger.info(f"Customer {customer_id} removed wishlist item {wishlist_id}")
