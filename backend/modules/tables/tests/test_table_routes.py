# backend/modules/tables/tests/test_table_routes.py

from modules.reservations.models.reservation_models import Reservation
from tests.factories import DiningTableFactory, ReservationFactory


class TestTableAPI:

    def test_staff_creates_table(self, client, db_session, staff_headers):
        response = client.post(
            "/tables", json={"table_number": 12, "capacity": 6}, headers=staff_headers
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["table_number"] == 12
        assert data["is_available"] is True

    def test_duplicate_number_is_409(self, client, db_session, staff_headers):
        DiningTableFactory(table_number=5)

        response = client.post(
            "/tables", json={"table_number": 5, "capacity": 2}, headers=staff_headers
        )

        assert response.status_code == 409

    def test_renumber_onto_existing_is_409(self, client, db_session, staff_headers):
        DiningTableFactory(table_number=1)
        table = DiningTableFactory(table_number=2)

        response = client.put(
            f"/tables/{table.id}", json={"table_number": 1}, headers=staff_headers
        )
        assert response.status_code == 409

    def test_customer_cannot_create(self, client, db_session, customer_headers):
        response = client.post(
            "/tables", json={"table_number": 1, "capacity": 2}, headers=customer_headers
        )
        assert response.status_code == 403

    def test_list_filters(self, client, db_session, customer_headers):
        DiningTableFactory(table_number=1, capacity=2)
        DiningTableFactory(table_number=2, capacity=6)
        DiningTableFactory(table_number=3, capacity=8, is_available=False)

        response = client.get("/tables?is_available=true&min_capacity=4", headers=customer_headers)

        numbers = [t["table_number"] for t in response.json()["data"]]
        assert numbers == [2]

    def test_toggle_availability(self, client, db_session, staff_headers):
        table = DiningTableFactory()

        response = client.patch(
            f"/tables/{table.id}/availability", json={"is_available": False}, headers=staff_headers
        )

        assert response.status_code == 200
        assert response.json()["data"]["is_available"] is False

    def test_delete_detaches_reservations(self, client, db_session, staff_headers):
        reservation = ReservationFactory()
        table_number = reservation.table_number

        response = client.delete(f"/tables/{reservation.table_id}", headers=staff_headers)

        assert response.status_code == 200
        row = db_session.get(Reservation, reservation.id)
        db_session.refresh(row)
        assert row.table_id is None
        assert row.table_number == table_number

    def test_deleted_table_number_can_be_reused(self, client, db_session, staff_headers):
        created = client.post(
            "/tables", json={"table_number": 7, "capacity": 4}, headers=staff_headers
        )
        table_id = created.json()["data"]["id"]
        assert client.delete(f"/tables/{table_id}", headers=staff_headers).status_code == 200
        assert client.get("/tables", headers=staff_headers).json()["data"] == []

        response = client.post(
            "/tables", json={"table_number": 7, "capacity": 2}, headers=staff_headers
        )

        assert response.status_code == 201
        assert response.json()["data"]["id"] != table_id
        assert response.json()["data"]["capacity"] == 2

    def test_renumber_onto_deleted_number(self, client, db_session, staff_headers, clock):
        DiningTableFactory(table_number=8, deleted_at=clock.now())
        table = DiningTableFactory(table_number=9)

        response = client.put(
            f"/tables/{table.id}", json={"table_number": 8}, headers=staff_headers
        )

        assert response.status_code == 200
        assert response.json()["data"]["table_number"] == 8
