from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from core.auth import AuthUser, get_current_user
from core.clock import Clock, get_clock
from core.database import get_db
from core.rate_limiter import RateLimitGroup, rate_limit
from core.response_models import PageParams, StandardResponse, page_params
from ..schemas.wishlist_schemas import WishlistAdd, WishlistOut
from ..services.wishlist_service import WishlistService

router = APIRouter(
    prefix="/wishlists",
    tags=["Wishlists"],
    dependencies=[Depends(rate_limit(RateLimitGroup.GENERAL, per_user=True))],
)


def get_wishlist_service(
    db: Session = Depends(get_db), clock: Clock = Depends(get_clock)
) -> WishlistService:
    return WishlistService(db, clock)


@router.post("", response_model=StandardResponse[WishlistOut], status_code=status.HTTP_201_CREATED)
async def add_to_wishlist(
    data: WishlistAdd,
    user: AuthUser = Depends(get_current_user),
    service: WishlistService = Depends(get_wishlist_service),
):
    entry = service.add(user.customer_id, data.menu_id)
    return StandardResponse[WishlistOut].success(
        data=WishlistOut.model_validate(entry), message="Added to wishlist"
    )


@router.get("", response_model=StandardResponse[List[WishlistOut]])
async def list_wishlist(
    params: PageParams = Depends(page_params),
    user: AuthUser = Depends(get_current_user),
    service: WishlistService = Depends(get_wishlist_service),
):
    entries, meta = service.list_items(user.customer_id, params)
    return StandardResponse[List[WishlistOut]].paginated(
        data=[WishlistOut.model_validate(e) for e in entries], meta=meta
    )


@router.delete("/{wishlist_id}", response_model=StandardResponse[None])
async def remove_from_wishlist(
    wishlist_id: int,
    user: AuthUser = Depends(get_current_user),
    service: WishlistService = Depends(get_wishlist_service),
):
    service.remove(user.customer_id, wishlist_id)
    return StandardResponse[None].success(message="Removed from wishlist")
