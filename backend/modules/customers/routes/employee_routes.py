# backend/modules/customers/routes/employee_routes.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.auth import AuthUser, Role, require_admin, require_staff
from core.clock import Clock, get_clock
from core.database import get_db
from core.rate_limiter import RateLimitGroup, rate_limit
from core.response_models import PageParams, StandardResponse, page_params
from ..schemas.customer_schemas import CustomerOut, EmployeeUpdate
from ..services.customer_service import CustomerService

router = APIRouter(
    prefix="/employees",
    tags=["Employees"],
    dependencies=[Depends(rate_limit(RateLimitGroup.GENERAL, per_user=True))],
)


@router.get("", response_model=StandardResponse[List[CustomerOut]])
async def list_employees(
    role: Optional[Role] = Query(None),
    params: PageParams = Depends(page_params),
    _: AuthUser = Depends(require_staff),
    db: Session = Depends(get_db),
):
    employees, meta = CustomerService(db).list_employees(params, role)
    return StandardResponse[List[CustomerOut]].paginated(
        data=[CustomerOut.model_validate(e) for e in employees], meta=meta
    )


@router.get("/{employee_id}", response_model=StandardResponse[CustomerOut])
async def get_employee(
    employee_id: int,
    _: AuthUser = Depends(require_staff),
    db: Session = Depends(get_db),
):
    employee = CustomerService(db).get_employee(employee_id)
    return StandardResponse[CustomerOut].success(data=CustomerOut.model_validate(employee))


@router.put("/{employee_id}", response_model=StandardResponse[CustomerOut])
async def update_employee(
    employee_id: int,
    data: EmployeeUpdate,
    _: AuthUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    employee = CustomerService(db).update_employee(employee_id, data)
    return StandardResponse[CustomerOut].success(
        data=CustomerOut.model_validate(employee), message="Employee updated"
    )


@router.delete("/{employee_id}", response_model=StandardResponse[None])
async def delete_employee(
    employee_id: int,
    user: AuthUser = Depends(require_admin),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Soft delete a staff account (admin only)."""
    CustomerService(db).delete_employee(employee_id, user.customer_id, clock)
    return StandardResponse[None].success(message="Employee deleted")
