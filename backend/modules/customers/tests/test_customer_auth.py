# backend/modules/customers/tests/test_customer_auth.py

import pytest

from core.auth import Role, decode_access_token, verify_password
from core.exceptions import DuplicateEmailError, NotFoundError, UnauthorizedError
from modules.customers.auth.customer_auth import CustomerAuthService
from modules.customers.schemas.customer_schemas import CustomerRegister, CustomerUpdate
from modules.customers.services.customer_service import CustomerService
from tests.factories import DEFAULT_PASSWORD, CustomerFactory


class TestCustomerService:

    def test_register_normalizes_email_and_hashes_password(self, db_session):
        customer = CustomerService(db_session).create_customer(
            CustomerRegister(name="  Budi ", email="Budi@Example.COM", password="secret1")
        )

        assert customer.email == "budi@example.com"
        assert customer.name == "Budi"
        assert customer.role == Role.CUSTOMER.value
        assert customer.password_hash != "secret1"
        assert verify_password("secret1", customer.password_hash)

    def test_duplicate_email_is_case_insensitive(self, db_session):
        CustomerFactory(email="dup@example.com")

        with pytest.raises(DuplicateEmailError):
            CustomerService(db_session).create_customer(
                CustomerRegister(name="Dup", email="DUP@example.com", password="secret1")
            )

    def test_soft_deleted_email_stays_taken(self, db_session, clock):
        CustomerFactory(email="gone@example.com", deleted_at=clock.now())

        with pytest.raises(DuplicateEmailError):
            CustomerService(db_session).create_customer(
                CustomerRegister(name="Gone", email="gone@example.com", password="secret1")
            )

    def test_update_changes_password(self, db_session):
        customer = CustomerFactory()

        updated = CustomerService(db_session).update_customer(
            customer.id, CustomerUpdate(password="new-secret", phone="0899")
        )

        assert updated.phone == "0899"
        assert verify_password("new-secret", updated.password_hash)

    def test_deleted_customer_is_not_found(self, db_session, clock):
        customer = CustomerFactory(deleted_at=clock.now())
        with pytest.raises(NotFoundError):
            CustomerService(db_session).get_customer(customer.id)


class TestCustomerAuthService:

    def test_login_issues_decodable_token(self, db_session, settings, clock):
        customer = CustomerFactory(email="ani@example.com")

        token = CustomerAuthService(db_session, settings, clock).login(
            "ANI@example.com", DEFAULT_PASSWORD
        )

        user = decode_access_token(token.access_token, settings)
        assert user.customer_id == customer.id
        assert user.role == Role.CUSTOMER
        assert token.expires_in == settings.JWT_EXPIRE_HOURS * 3600

    def test_wrong_password(self, db_session, settings, clock):
        customer = CustomerFactory()
        with pytest.raises(UnauthorizedError):
            CustomerAuthService(db_session, settings, clock).login(customer.email, "nope")

    def test_unknown_email(self, db_session, settings, clock):
        with pytest.raises(UnauthorizedError):
            CustomerAuthService(db_session, settings, clock).login("ghost@example.com", "x")

    def test_deleted_customer_cannot_login(self, db_session, settings, clock):
        customer = CustomerFactory(deleted_at=clock.now())
        with pytest.raises(UnauthorizedError):
            CustomerAuthService(db_session, settings, clock).login(customer.email, DEFAULT_PASSWORD)
