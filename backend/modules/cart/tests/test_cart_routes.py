# backend/modules/cart/tests/test_cart_routes.py

from tests.factories import CustomerFactory, MenuFactory


class TestCartAPI:

    def test_add_and_list(self, client, db_session, customer_headers):
        menu = MenuFactory()

        response = client.post(
            "/carts", json={"menu_id": menu.id, "quantity": 2}, headers=customer_headers
        )
        assert response.status_code == 201
        assert response.json()["data"]["subtotal"] == 50000.0

        response = client.get("/carts", headers=customer_headers)
        body = response.json()
        assert body["meta"]["total"] == 1
        assert body["data"][0]["menu"]["id"] == menu.id

    def test_zero_quantity_is_400(self, client, db_session, customer_headers):
        menu = MenuFactory()
        response = client.post(
            "/carts", json={"menu_id": menu.id, "quantity": 0}, headers=customer_headers
        )
        assert response.status_code == 400

    def test_other_customers_item_is_403(self, client, db_session, customer_headers, auth_headers):
        other = CustomerFactory()
        menu = MenuFactory()
        created = client.post(
            "/carts", json={"menu_id": menu.id, "quantity": 1}, headers=auth_headers(other)
        ).json()["data"]

        response = client.get(f"/carts/{created['id']}", headers=customer_headers)
        assert response.status_code == 403

        response = client.delete(f"/carts/{created['id']}", headers=customer_headers)
        assert response.status_code == 403

    def test_bulk_delete_and_clear(self, client, db_session, customer_headers):
        ids = [
            client.post(
                "/carts", json={"menu_id": MenuFactory().id, "quantity": 1}, headers=customer_headers
            ).json()["data"]["id"]
            for _ in range(3)
        ]

        response = client.post(
            "/carts/bulk-delete", json={"cart_ids": ids[:2]}, headers=customer_headers
        )
        assert response.status_code == 200
        assert client.get("/carts", headers=customer_headers).json()["meta"]["total"] == 1

        response = client.delete("/carts", headers=customer_headers)
        assert response.status_code == 200
        assert client.get("/carts", headers=customer_headers).json()["meta"]["total"] == 0

    def test_requires_token(self, client):
        assert client.get("/carts").status_code == 401
