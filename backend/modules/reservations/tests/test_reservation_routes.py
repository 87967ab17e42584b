# backend/modules/reservations/tests/test_reservation_routes.py

from tests.factories import DiningTableFactory, ReservationFactory


class TestReservationAPI:

    def test_customer_books_table(self, client, db_session, customer_headers):
        table = DiningTableFactory(table_number=3)

        response = client.post(
            "/reservations",
            json={"table_id": table.id, "guest_count": 2, "reserve_date": "2030-01-05T19:00:00"},
            headers=customer_headers,
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["table_number"] == 3
        assert data["status"] == "pending"

    def test_double_booking_is_409(self, client, db_session, customer_headers):
        existing = ReservationFactory()

        response = client.post(
            "/reservations",
            json={
                "table_id": existing.table_id,
                "guest_count": 2,
                "reserve_date": "2030-01-05T08:00:00Z",
            },
            headers=customer_headers,
        )

        assert response.status_code == 409
        assert response.json()["errors"]["code"] == "TABLE_UNAVAILABLE"

    def test_past_date_is_400(self, client, db_session, customer_headers):
        table = DiningTableFactory()
        response = client.post(
            "/reservations",
            json={"table_id": table.id, "guest_count": 2, "reserve_date": "2020-01-01T10:00:00"},
            headers=customer_headers,
        )
        assert response.status_code == 400
        assert "reserve_date" in response.json()["errors"]

    def test_requires_token(self, client):
        response = client.post(
            "/reservations", json={"guest_count": 2, "reserve_date": "2030-01-05T10:00:00"}
        )
        assert response.status_code == 401

    def test_customer_lists_only_own(self, client, db_session, customer, customer_headers):
        own = ReservationFactory(customer=customer)
        ReservationFactory()

        response = client.get("/reservations", headers=customer_headers)

        assert response.status_code == 200
        body = response.json()
        assert [r["id"] for r in body["data"]] == [own.id]
        assert body["meta"]["total"] == 1

    def test_staff_lists_all_with_filters(self, client, db_session, staff_headers):
        ReservationFactory(status="confirmed")
        ReservationFactory()

        response = client.get("/reservations?status=confirmed&day=2030-01-05", headers=staff_headers)

        assert response.status_code == 200
        assert response.json()["meta"]["total"] == 1

    def test_other_customer_reservation_is_forbidden(self, client, db_session, customer_headers):
        other = ReservationFactory()
        response = client.get(f"/reservations/{other.id}", headers=customer_headers)
        assert response.status_code == 403

    def test_staff_confirms(self, client, db_session, staff_headers):
        reservation = ReservationFactory()

        response = client.patch(
            f"/reservations/{reservation.id}", json={"status": "confirmed"}, headers=staff_headers
        )

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "confirmed"

    def test_invalid_transition_is_409(self, client, db_session, staff_headers):
        reservation = ReservationFactory(status="completed")
        response = client.patch(
            f"/reservations/{reservation.id}", json={"status": "pending"}, headers=staff_headers
        )
        assert response.status_code == 409
        assert response.json()["errors"]["code"] == "INVALID_TRANSITION"

    def test_empty_patch_is_400(self, client, db_session, staff_headers):
        reservation = ReservationFactory()
        response = client.patch(f"/reservations/{reservation.id}", json={}, headers=staff_headers)
        assert response.status_code == 400

    def test_customer_cannot_patch(self, client, db_session, customer, customer_headers):
        reservation = ReservationFactory(customer=customer)
        response = client.patch(
            f"/reservations/{reservation.id}", json={"guest_count": 3}, headers=customer_headers
        )
        assert response.status_code == 403

    def test_staff_deletes(self, client, db_session, staff_headers):
        reservation = ReservationFactory()

        response = client.delete(f"/reservations/{reservation.id}", headers=staff_headers)
        assert response.status_code == 200

        response = client.get(f"/reservations/{reservation.id}", headers=staff_headers)
        assert response.status_code == 404
