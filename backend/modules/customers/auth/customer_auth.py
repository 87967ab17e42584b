# backend/modules/customers/auth/customer_auth.py

import logging

from sqlalchemy.orm import Session

from core.auth import AuthUser, Role, create_access_token, verify_password
from core.clock import Clock
from core.config import Settings
from core.exceptions import UnauthorizedError
from ..models.customer_models import Customer
from ..schemas.customer_schemas import CustomerOut, TokenOut
from ..services.customer_service import CustomerService

logger = logging.getLogger(__name__)


class CustomerAuthService:
    """Password login and bearer token issuance for customers and staff"""

    def __init__(self, db: Session, settings: Settings, clock: Clock):
        self.db = db
        self.settings = settings
        self.clock = clock
        self.customer_service = CustomerService(db)

    def authenticate_customer(self, email: str, password: str) -> Customer:
        customer = self.customer_service.get_customer_by_email(email)

        if not customer or not verify_password(password, customer.password_hash):
            logger.info("Failed login attempt")
            raise UnauthorizedError("Invalid email or password")

        return customer

    def create_access_token(self, customer: Customer) -> TokenOut:
        user = AuthUser(
            customer_id=customer.id,
            email=customer.email,
            name=customer.name,
            role=Role(customer.role),
        )
        return TokenOut(
            access_token=create_access_token(user, self.settings, self.clock),
            expires_in=self.settings.JWT_EXPIRE_HOURS * 3600,
            customer=CustomerOut.model_validate(customer),
        )

    def login(self, email: str, password: str) -> TokenOut:
        customer = self.authenticate_customer(email, password)
        return self.create_access_token(customer)
