# backend/modules/customers/services/customer_service.py

import logging
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.auth import STAFF_ROLES, Role, hash_password
from core.clock import Clock
from core.exceptions import DuplicateEmailError, InvalidRequestError, NotFoundError
from core.response_models import PageParams, PaginationMeta, paginate
from ..models.customer_models import Customer
from ..schemas.customer_schemas import CustomerRegister, CustomerUpdate, EmployeeUpdate

logger = logging.getLogger(__name__)


class CustomerService:
    """Customer accounts: registration, lookup and profile changes.

    Employees are customers holding a staff role.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_customer_by_email(self, email: str) -> Optional[Customer]:
        return (
            self.db.query(Customer)
            .filter(func.lower(Customer.email) == email.strip().lower())
            .filter(Customer.live())
            .first()
        )

    def get_customer(self, customer_id: int) -> Customer:
        customer = (
            self.db.query(Customer)
            .filter(Customer.id == customer_id, Customer.live())
            .first()
        )
        if not customer:
            raise NotFoundError(f"Customer {customer_id} not found")
        return customer

    def create_customer(
        self, data: CustomerRegister, role: Role = Role.CUSTOMER
    ) -> Customer:
        email = data.email.strip().lower()
        # Uniqueness spans soft-deleted rows too; the index does
        exists = (
            self.db.query(Customer.id)
            .filter(func.lower(Customer.email) == email)
            .first()
        )
        if exists:
            raise DuplicateEmailError()

        customer = Customer(
            name=data.name,
            email=email,
            password_hash=hash_password(data.password),
            address=data.address,
            phone=data.phone,
            role=role.value,
        )
        self.db.add(customer)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateEmailError()
        self.db.refresh(customer)

        logger.info(f"Registered customer {customer.id}")
        return customer

    def update_customer(self, customer_id: int, data: CustomerUpdate) -> Customer:
        customer = self.get_customer(customer_id)
        changes = data.model_dump(exclude_unset=True)

        password = changes.pop("password", None)
        if password:
            customer.password_hash = hash_password(password)
        for field, value in changes.items():
            setattr(customer, field, value)

        self.db.commit()
        self.db.refresh(customer)
        return customer

    def update_role(self, customer_id: int, role: Role) -> Customer:
        customer = self.get_customer(customer_id)
        if customer.role != role.value:
            logger.info(
                f"Customer {customer_id} role changed from {customer.role} to {role.value}"
            )
            customer.role = role.value
            self.db.commit()
            self.db.refresh(customer)
        return customer

    def _employee_query(self):
        return self.db.query(Customer).filter(
            Customer.role.in_([role.value for role in STAFF_ROLES]),
            Customer.live(),
        )

    def list_employees(
        self, params: PageParams, role: Optional[Role] = None
    ) -> Tuple[List[Customer], PaginationMeta]:
        query = self._employee_query()
        if role is not None:
            query = query.filter(Customer.role == role.value)
        return paginate(query.order_by(Customer.name, Customer.id), params)

    def get_employee(self, employee_id: int) -> Customer:
        employee = self._employee_query().filter(Customer.id == employee_id).first()
        if not employee:
            raise NotFoundError(f"Employee {employee_id} not found")
        return employee

    def update_employee(self, employee_id: int, data: EmployeeUpdate) -> Customer:
        employee = self.get_employee(employee_id)
        changes = data.model_dump(exclude_unset=True)

        email = changes.pop("email", None)
        if email and email.strip().lower() != employee.email:
            email = email.strip().lower()
            taken = (
                self.db.query(Customer.id)
                .filter(func.lower(Customer.email) == email, Customer.id != employee.id)
                .first()
            )
            if taken:
                raise DuplicateEmailError()
            employee.email = email

        role = changes.pop("role", None)
        if role is not None and role.value != employee.role:
            logger.info(
                f"Employee {employee_id} role changed from {employee.role} to {role.value}"
            )
            employee.role = role.value

        for field, value in changes.items():
            setattr(employee, field, value)

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateEmailError()
        self.db.refresh(employee)
        return employee

    def delete_employee(self, employee_id: int, actor_id: int, clock: Clock) -> None:
        if employee_id == actor_id:
            raise InvalidRequestError("You cannot delete your own account")
        employee = self.get_employee(employee_id)
        employee.deleted_at = clock.now()
        self.db.commit()
        logger.info(f"Soft deleted employee {employee_id} by {actor_id}")
