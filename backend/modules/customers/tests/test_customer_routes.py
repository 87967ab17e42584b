# backend/modules/customers/tests/test_customer_routes.py

from tests.factories import DEFAULT_PASSWORD, CustomerFactory


class TestAuthAPI:

    def test_register(self, client, db_session):
        response = client.post(
            "/auth/register",
            json={"name": "Rina", "email": "rina@example.com", "password": "secret1"},
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["email"] == "rina@example.com"
        assert data["role"] == "customer"
        assert "password_hash" not in data

    def test_register_duplicate_is_409(self, client, db_session):
        CustomerFactory(email="taken@example.com")

        response = client.post(
            "/auth/register",
            json={"name": "Again", "email": "taken@example.com", "password": "secret1"},
        )

        assert response.status_code == 409
        assert response.json()["errors"]["code"] == "DUPLICATE_EMAIL"

    def test_register_invalid_email_is_400(self, client):
        response = client.post(
            "/auth/register", json={"name": "X", "email": "not-an-email", "password": "secret1"}
        )
        assert response.status_code == 400
        assert response.json()["errors"]["code"] == "INVALID_REQUEST"

    def test_login_then_profile(self, client, db_session):
        customer = CustomerFactory(email="login@example.com")

        response = client.post(
            "/auth/login", json={"email": "login@example.com", "password": DEFAULT_PASSWORD}
        )
        assert response.status_code == 200
        token = response.json()["data"]["access_token"]

        response = client.get("/customers/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["data"]["id"] == customer.id

    def test_login_wrong_password_is_401(self, client, db_session):
        customer = CustomerFactory()
        response = client.post("/auth/login", json={"email": customer.email, "password": "wrong"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"


class TestCustomerAPI:

    def test_me_requires_token(self, client):
        response = client.get("/customers/me")
        assert response.status_code == 401

    def test_me_rejects_garbage_token(self, client):
        response = client.get("/customers/me", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401

    def test_update_profile(self, client, db_session, customer_headers):
        response = client.patch(
            "/customers/me", json={"address": "Jl. Thamrin 9"}, headers=customer_headers
        )
        assert response.status_code == 200
        assert response.json()["data"]["address"] == "Jl. Thamrin 9"

    def test_admin_grants_role(self, client, db_session, admin_headers):
        customer = CustomerFactory()

        response = client.patch(
            f"/customers/{customer.id}/role", json={"role": "kitchen"}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["data"]["role"] == "kitchen"

    def test_staff_cannot_grant_role(self, client, db_session, staff_headers):
        customer = CustomerFactory()
        response = client.patch(
            f"/customers/{customer.id}/role", json={"role": "admin"}, headers=staff_headers
        )
        assert response.status_code == 403
