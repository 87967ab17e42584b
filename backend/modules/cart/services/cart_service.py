# backend/modules/cart/services/cart_service.py

"""
Cart lines per customer.

A customer has at most one live line per menu. Adding a menu that is already
in the cart merges into the existing line: quantities are summed and the
subtotal is recomputed from the menu's current price.
"""

import logging
from typing import List, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from core.clock import Clock
from core.exceptions import ForbiddenError, NotFoundError
from core.response_models import PageParams, PaginationMeta, paginate
from modules.menu.services.menu_service import MenuService
from ..models.cart_models import Cart
from ..schemas.cart_schemas import CartAdd

logger = logging.getLogger(__name__)


class CartService:
    def __init__(self, db: Session, clock: Clock):
        self.db = db
        self.clock = clock
        self.menu_service = MenuService(db, clock)

    def _live_line(self, customer_id: int, menu_id: int, lock: bool = False):
        query = self.db.query(Cart).filter(
            Cart.customer_id == customer_id,
            Cart.menu_id == menu_id,
            Cart.live(),
        )
        if lock:
            query = query.with_for_update()
        return query.first()

    def add_item(self, customer_id: int, data: CartAdd) -> Cart:
        try:
            return self._merge_line(customer_id, data)
        except IntegrityError:
            # A concurrent add inserted the line first; merge into it
            self.db.rollback()
            logger.info(
                f"Concurrent cart insert for customer {customer_id} menu {data.menu_id}, merging"
            )
            return self._merge_line(customer_id, data)

    def _merge_line(self, customer_id: int, data: CartAdd) -> Cart:
        menu = self.menu_service.get_menu(data.menu_id)
        line = self._live_line(customer_id, data.menu_id, lock=True)

        if line is None:
            line = Cart(
                customer_id=customer_id,
                menu_id=menu.id,
                quantity=data.quantity,
                unit_price=menu.price,
                subtotal=menu.price * data.quantity,
            )
            self.db.add(line)
        else:
            line.quantity += data.quantity
            line.unit_price = menu.price
            line.subtotal = menu.price * line.quantity

        self.db.commit()
        self.db.refresh(line)
        logger.info(
            f"Cart line {line.id} for customer {customer_id}: menu {menu.id} x{line.quantity}"
        )
        return line

    def list_items(
        self, customer_id: int, params: PageParams
    ) -> Tuple[List[Cart], PaginationMeta]:
        query = (
            self.db.query(Cart)
            .options(joinedload(Cart.menu))
            .filter(Cart.customer_id == customer_id, Cart.live())
            .order_by(Cart.id)
        )
        return paginate(query, params)

    def get_item(self, customer_id: int, cart_id: int) -> Cart:
        line = self.db.query(Cart).filter(Cart.id == cart_id, Cart.live()).first()
        if not line:
            raise NotFoundError(f"Cart item {cart_id} not found")
        if line.customer_id != customer_id:
            logger.warning(
                f"Customer {customer_id} attempted to access cart item {cart_id}"
            )
            raise ForbiddenError("Cart item belongs to another customer")
        return line

    def remove_item(self, customer_id: int, cart_id: int) -> None:
        line = self.get_item(customer_id, cart_id)
        line.deleted_at = self.clock.now()
        self.db.commit()

    def clear(self, customer_id: int) -> int:
        now = self.clock.now()
        removed = (
            self.db.query(Cart)
            .filter(Cart.customer_id == customer_id, Cart.live())
            .update({Cart.deleted_at: now}, synchronize_session=False)
        )
        self.db.commit()
        return removed

    def bulk_remove(self, customer_id: int, cart_ids: List[int]) -> int:
        lines = (
            self.db.query(Cart)
            .filter(Cart.id.in_(cart_ids), Cart.live())
            .all()
        )
        found = {line.id for line in lines}
        missing = set(cart_ids) - found
        if missing:
            raise NotFoundError(f"Cart items not found: {sorted(missing)}")
        if any(line.customer_id != customer_id for line in lines):
            raise ForbiddenError("Cart item belongs to another customer")

        now = self.clock.now()
        for line in lines:
            line.deleted_at = now
        self.db.commit()
        return len(lines)
