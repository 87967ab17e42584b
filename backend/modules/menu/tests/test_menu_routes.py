# backend/modules/menu/tests/test_menu_routes.py

from tests.factories import MenuFactory


class TestPublicMenuAPI:

    def test_list_is_public_and_paginated(self, client, db_session):
        MenuFactory.create_batch(3)

        response = client.get("/menus?per_page=2")

        assert response.status_code == 200
        body = response.json()
        assert len(body["data"]) == 2
        assert body["meta"]["total"] == 3
        assert body["meta"]["last_page"] == 2
        assert body["meta"]["has_next_page"] is True

    def test_filter_by_category_and_search(self, client, db_session):
        MenuFactory(title="Chocolate Cake", category="cake")
        MenuFactory(title="Cheese Cake", category="cake")
        MenuFactory(title="Baguette", category="bread")

        response = client.get("/menus?category=cake&search=choco")

        titles = [m["title"] for m in response.json()["data"]]
        assert titles == ["Chocolate Cake"]

    def test_get_single(self, client, db_session):
        menu = MenuFactory(title="Pain au Chocolat")

        response = client.get(f"/menus/{menu.id}")

        assert response.status_code == 200
        assert response.json()["data"]["price"] == 25000.0

    def test_unknown_menu_is_404(self, client):
        response = client.get("/menus/999")
        assert response.status_code == 404
        assert response.json()["errors"]["code"] == "NOT_FOUND"


class TestAdminMenuAPI:

    def test_admin_creates_menu(self, client, db_session, admin_headers):
        response = client.post(
            "/menus",
            json={"title": "Lapis Legit", "price": "150000.00", "quantity": 5, "category": "cake"},
            headers=admin_headers,
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["title"] == "Lapis Legit"
        assert data["price"] == 150000.0

    def test_negative_price_is_400(self, client, db_session, admin_headers):
        response = client.post(
            "/menus", json={"title": "Free Lunch", "price": "-1"}, headers=admin_headers
        )
        assert response.status_code == 400

    def test_customer_cannot_create(self, client, db_session, customer_headers):
        response = client.post(
            "/menus", json={"title": "Sneaky", "price": "1.00"}, headers=customer_headers
        )
        assert response.status_code == 403

    def test_admin_updates_price(self, client, db_session, admin_headers):
        menu = MenuFactory()

        response = client.put(f"/menus/{menu.id}", json={"price": "27500.00"}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["data"]["price"] == 27500.0
        assert response.json()["data"]["title"] == menu.title

    def test_soft_deleted_menu_disappears(self, client, db_session, admin_headers):
        menu = MenuFactory()

        response = client.delete(f"/menus/{menu.id}", headers=admin_headers)
        assert response.status_code == 200

        assert client.get(f"/menus/{menu.id}").status_code == 404
        assert client.get("/menus").json()["meta"]["total"] == 0
        db_session.refresh(menu)
        assert menu.deleted_at is not None
