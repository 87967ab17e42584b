# backend/modules/wishlist/tests/test_wishlist_routes.py

from tests.factories import CustomerFactory, MenuFactory


class TestWishlistAPI:

    def test_add_and_list_newest_first(self, client, db_session, customer_headers):
        first, second = MenuFactory(), MenuFactory()

        for menu in (first, second):
            response = client.post("/wishlists", json={"menu_id": menu.id}, headers=customer_headers)
            assert response.status_code == 201

        body = client.get("/wishlists", headers=customer_headers).json()
        assert [entry["menu_id"] for entry in body["data"]] == [second.id, first.id]

    def test_duplicate_is_409(self, client, db_session, customer_headers):
        menu = MenuFactory()
        client.post("/wishlists", json={"menu_id": menu.id}, headers=customer_headers)

        response = client.post("/wishlists", json={"menu_id": menu.id}, headers=customer_headers)

        assert response.status_code == 409
        assert response.json()["errors"]["code"] == "MENU_ALREADY_IN_WISHLIST"

    def test_re_add_after_remove(self, client, db_session, customer_headers):
        menu = MenuFactory()
        entry = client.post(
            "/wishlists", json={"menu_id": menu.id}, headers=customer_headers
        ).json()["data"]

        assert client.delete(f"/wishlists/{entry['id']}", headers=customer_headers).status_code == 200
        response = client.post("/wishlists", json={"menu_id": menu.id}, headers=customer_headers)

        assert response.status_code == 201

    def test_unknown_menu_is_404(self, client, db_session, customer_headers):
        response = client.post("/wishlists", json={"menu_id": 999}, headers=customer_headers)
        assert response.status_code == 404

    def test_cannot_remove_someone_elses_entry(self, client, db_session, customer_headers, auth_headers):
        other = CustomerFactory()
        entry = client.post(
            "/wishlists", json={"menu_id": MenuFactory().id}, headers=auth_headers(other)
        ).json()["data"]

        response = client.delete(f"/wishlists/{entry['id']}", headers=customer_headers)
        assert response.status_code == 404
