# backend/modules/customers/routes/auth_routes.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from core.clock import Clock, get_clock
from core.config import Settings, get_settings
from core.database import get_db
from core.rate_limiter import RateLimitGroup, rate_limit
from core.response_models import StandardResponse
from ..auth.customer_auth import CustomerAuthService
from ..schemas.customer_schemas import (
    CustomerLogin,
    CustomerOut,
    CustomerRegister,
    TokenOut,
)
from ..services.customer_service import CustomerService

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    dependencies=[Depends(rate_limit(RateLimitGroup.AUTH))],
)


@router.post(
    "/register",
    response_model=StandardResponse[CustomerOut],
    status_code=status.HTTP_201_CREATED,
)
async def register(data: CustomerRegister, db: Session = Depends(get_db)):
    """Register a new customer account."""
    customer = CustomerService(db).create_customer(data)
    return StandardResponse[CustomerOut].success(
        data=CustomerOut.model_validate(customer), message="Customer registered"
    )


@router.post("/login", response_model=StandardResponse[TokenOut])
async def login(
    data: CustomerLogin,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    clock: Clock = Depends(get_clock),
):
    """Exchange email and password for a bearer token."""
    token = CustomerAuthService(db, settings, clock).login(data.email, data.password)
    return StandardResponse[TokenOut].success(data=token, message="Login successful")
