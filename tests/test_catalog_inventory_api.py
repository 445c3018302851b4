"""
Tests for the /services and /products endpoints.

Run with: pytest tests/test_catalog_inventory_api.py -v
"""

from barberpro.models import AppointmentService, Profile, UserRole

OWNER_ID = "11111111-1111-1111-1111-111111111111"


def _demote_owner(db_session):
    profile = db_session.query(Profile).filter(Profile.id == OWNER_ID).one()
    db_session.query(UserRole).filter(UserRole.user_id == profile.id).update({"role": "barber"})
    db_session.commit()


# ============================================================================
# SERVICE CATALOG
# ============================================================================


class TestCatalog:
    def test_create_and_list(self, client, auth_headers, new_service):
        new_service("Corte", 30, 35.0)
        new_service("Barba", 20, 25.0, isActive=False)

        everything = client.get("/services", headers=auth_headers).json()
        assert {s["name"] for s in everything} == {"Corte", "Barba"}

        active = client.get("/services?active_only=true", headers=auth_headers).json()
        assert [s["name"] for s in active] == ["Corte"]

    def test_non_positive_duration_rejected(self, client, auth_headers):
        resp = client.post(
            "/services", json={"name": "Corte", "duration": 0, "price": 10}, headers=auth_headers
        )
        assert resp.status_code == 422

    def test_delete_keeps_snapshots(
        self, client, auth_headers, new_client, new_service, book, db_session
    ):
        cut = new_service("Corte", 30, 35.0)
        appt = book(new_client()["id"], [cut["id"]]).json()

        assert client.delete(f"/services/{cut['id']}", headers=auth_headers).status_code == 200

        snapshot = (
            db_session.query(AppointmentService)
            .filter(AppointmentService.appointment_id == appt["id"])
            .one()
        )
        assert snapshot.service_id is None
        assert snapshot.service_name == "Corte"
        assert snapshot.price_at_time == 35.0

    def test_barber_cannot_edit_catalog(self, client, auth_headers, new_service, db_session):
        cut = new_service()
        _demote_owner(db_session)

        resp = client.patch(f"/services/{cut['id']}", json={"price": 1.0}, headers=auth_headers)
        assert resp.status_code == 403
        assert client.get("/services", headers=auth_headers).status_code == 200

    def test_blank_name_on_update_rejected(self, client, auth_headers, new_service):
        cut = new_service()
        resp = client.patch(f"/services/{cut['id']}", json={"name": "   "}, headers=auth_headers)
        assert resp.status_code == 422
        assert client.get("/services", headers=auth_headers).json()[0]["name"] == "Corte"


# ============================================================================
# INVENTORY
# ============================================================================


class TestInventory:
    def _product(self, client, auth_headers, **overrides):
        payload = {"name": "Pomada", "category": "Pomade", "price": 30.0, "cost": 12.0,
                   "stock": 5, "minStock": 2}
        payload.update(overrides)
        resp = client.post("/products", json=payload, headers=auth_headers)
        assert resp.status_code == 201, resp.text
        return resp.json()

    def test_sell_decrements_stock(self, client, auth_headers):
        product = self._product(client, auth_headers)
        resp = client.post(
            f"/products/{product['id']}/sell", json={"quantity": 2}, headers=auth_headers
        )
        assert resp.status_code == 200
        assert resp.json()["stock"] == 3
        assert resp.json()["soldCount"] == 2

    def test_sell_clamps_at_zero(self, client, auth_headers):
        product = self._product(client, auth_headers, stock=2)
        data = client.post(
            f"/products/{product['id']}/sell", json={"quantity": 5}, headers=auth_headers
        ).json()
        assert data["stock"] == 0
        assert data["soldCount"] == 5
        assert data["lowStock"] is True

    def test_sell_requires_positive_quantity(self, client, auth_headers):
        product = self._product(client, auth_headers)
        resp = client.post(
            f"/products/{product['id']}/sell", json={"quantity": 0}, headers=auth_headers
        )
        assert resp.status_code == 422

    def test_low_stock_is_inclusive(self, client, auth_headers):
        self._product(client, auth_headers, name="At minimum", stock=5, minStock=5)
        self._product(client, auth_headers, name="Plenty", stock=6, minStock=5)

        low = client.get("/products/low-stock", headers=auth_headers).json()
        assert [p["name"] for p in low] == ["At minimum"]

    def test_filters(self, client, auth_headers):
        self._product(client, auth_headers, name="Gel Forte", category="Gel")
        self._product(client, auth_headers, name="Pomada Matte", category="Pomade")

        gels = client.get("/products?category=Gel", headers=auth_headers).json()
        assert [p["name"] for p in gels] == ["Gel Forte"]

        matte = client.get("/products?search=MATTE", headers=auth_headers).json()
        assert [p["name"] for p in matte] == ["Pomada Matte"]

        assert client.get("/products?search=%25", headers=auth_headers).json() == []

    def test_blank_name_on_update_rejected(self, client, auth_headers):
        product = self._product(client, auth_headers)
        resp = client.patch(
            f"/products/{product['id']}", json={"name": "   "}, headers=auth_headers
        )
        assert resp.status_code == 422

    def test_update_and_delete(self, client, auth_headers):
        product = self._product(client, auth_headers)
        resp = client.patch(
            f"/products/{product['id']}", json={"price": 35.0, "stock": 9}, headers=auth_headers
        )
        assert resp.json()["price"] == 35.0
        assert resp.json()["stock"] == 9

        assert client.delete(f"/products/{product['id']}", headers=auth_headers).status_code == 200
        assert client.get("/products", headers=auth_headers).json() == []

    def test_categories(self, client):
        assert "Pomade" in client.get("/products/categories").json()
