# backend/modules/cart/routes/cart_routes.py

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from core.auth import AuthUser, get_current_user
from core.clock import Clock, get_clock
from core.database import get_db
from core.rate_limiter import RateLimitGroup, rate_limit
from core.response_models import PageParams, StandardResponse, page_params
from ..schemas.cart_schemas import CartAdd, CartBulkDelete, CartOut
from ..services.cart_service import CartService

router = APIRouter(
    prefix="/carts",
    tags=["Carts"],
    dependencies=[Depends(rate_limit(RateLimitGroup.GENERAL, per_user=True))],
)


def get_cart_service(
    db: Session = Depends(get_db), clock: Clock = Depends(get_clock)
) -> CartService:
    return CartService(db, clock)


@router.post("", response_model=StandardResponse[CartOut], status_code=status.HTTP_201_CREATED)
async def add_to_cart(
    data: CartAdd,
    user: AuthUser = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
):
    line = service.add_item(user.customer_id, data)
    return StandardResponse[CartOut].success(
        data=CartOut.model_validate(line), message="Item added to cart"
    )


@router.get("", response_model=StandardResponse[List[CartOut]])
async def list_cart(
    params: PageParams = Depends(page_params),
    user: AuthUser = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
):
    lines, meta = service.list_items(user.customer_id, params)
    return StandardResponse[List[CartOut]].paginated(
        data=[CartOut.model_validate(line) for line in lines], meta=meta
    )


@router.post("/bulk-delete", response_model=StandardResponse[None])
async def bulk_delete(
    data: CartBulkDelete,
    user: AuthUser = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
):
    removed = service.bulk_remove(user.customer_id, data.cart_ids)
    return StandardResponse[None].success(message=f"Removed {removed} cart items")


@router.delete("", response_model=StandardResponse[None])
async def clear_cart(
    user: AuthUser = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
):
    service.clear(user.customer_id)
    return StandardResponse[None].success(message="Cart cleared")


@router.get("/{cart_id}", response_model=StandardResponse[CartOut])
async def get_cart_item(
    cart_id: int,
    user: AuthUser = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
):
    line = service.get_item(user.customer_id, cart_id)
    return StandardResponse[CartOut].success(data=CartOut.model_validate(line))


@router.delete("/{cart_id}", response_model=StandardResponse[None])
async def remove_cart_item(
    cart_id: int,
    user: AuthUser = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
):
    service.remove_item(user.customer_id, cart_id)
    return StandardResponse[None].success(message="Cart item removed")
