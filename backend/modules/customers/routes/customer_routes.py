# backend/modules/customers/routes/customer_routes.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.auth import AuthUser, get_current_user, require_admin
from core.database import get_db
from core.rate_limiter import RateLimitGroup, rate_limit
from core.response_models import StandardResponse
from ..schemas.customer_schemas import CustomerOut, CustomerRoleUpdate, CustomerUpdate
from ..services.customer_service import CustomerService

router = APIRouter(
    prefix="/customers",
    tags=["Customers"],
    dependencies=[Depends(rate_limit(RateLimitGroup.GENERAL, per_user=True))],
)


@router.get("/me", response_model=StandardResponse[CustomerOut])
async def get_profile(
    user: AuthUser = Depends(get_current_user), db: Session = Depends(get_db)
):
    customer = CustomerService(db).get_customer(user.customer_id)
    return StandardResponse[CustomerOut].success(data=CustomerOut.model_validate(customer))


@router.patch("/me", response_model=StandardResponse[CustomerOut])
async def update_profile(
    data: CustomerUpdate,
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    customer = CustomerService(db).update_customer(user.customer_id, data)
    return StandardResponse[CustomerOut].success(
        data=CustomerOut.model_validate(customer), message="Profile updated"
    )


@router.patch("/{customer_id}/role", response_model=StandardResponse[CustomerOut])
async def update_role(
    customer_id: int,
    data: CustomerRoleUpdate,
    _: AuthUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Grant a staff role (admin only)."""
    customer = CustomerService(db).update_role(customer_id, data.role)
    return StandardResponse[CustomerOut].success(
        data=CustomerOut.model_validate(customer), message="Role updated"
    )
