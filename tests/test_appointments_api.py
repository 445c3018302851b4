"""
Tests for the /appointments endpoints.

Run with: pytest tests/test_appointments_api.py -v
"""

import pytest

from barberpro.domain.scheduling import router as scheduling_router
from barberpro.models import AppointmentService

BOOKING_DAY = "2030-03-12"


@pytest.fixture
def catalog(new_service):
    return {
        "cut": new_service("Corte", 30, 35.0),
        "beard": new_service("Barba", 60, 25.0),
        "combo": new_service("Combo", 90, 55.0),
    }


@pytest.fixture
def joao(new_client):
    return new_client("João Silva", "11987654321")


# ============================================================================
# BOOKING
# ============================================================================


class TestCreateAppointment:
    def test_end_time_and_snapshots(self, book, catalog, joao):
        resp = book(joao["id"], [catalog["cut"]["id"], catalog["beard"]["id"]], "09:00")
        assert resp.status_code == 201, resp.text

        data = resp.json()
        assert data["endTime"] == "10:30"
        assert data["status"] == "scheduled"
        assert data["clientName"] == "João Silva"
        assert data["clientPhone"] == "(11) 98765-4321"
        assert [s["name"] for s in data["services"]] == ["Corte", "Barba"]
        assert data["total"] == 60.0

    def test_overlap_rejected(self, book, catalog, joao):
        """Existing 09:00-10:30: 10:00 conflicts, 10:30 fits"""
        assert book(joao["id"], [catalog["combo"]["id"]], "09:00").status_code == 201

        conflict = book(joao["id"], [catalog["cut"]["id"]], "10:00")
        assert conflict.status_code == 409
        assert "09:00" in conflict.json()["detail"]

        assert book(joao["id"], [catalog["cut"]["id"]], "10:30").status_code == 201

    def test_twenty_minute_booking_around_existing(self, book, catalog, joao, new_service):
        quick = new_service("Pezinho", 20, 15.0)
        book(joao["id"], [catalog["combo"]["id"]], "09:00")

        assert book(joao["id"], [quick["id"]], "10:00").status_code == 409
        fits = book(joao["id"], [quick["id"]], "10:30")
        assert fits.status_code == 201
        assert fits.json()["endTime"] == "10:50"

    def test_cancelled_frees_the_slot(self, client, auth_headers, book, catalog, joao):
        first = book(joao["id"], [catalog["combo"]["id"]], "09:00").json()
        client.post(
            f"/appointments/{first['id']}/status",
            json={"status": "cancelled"},
            headers=auth_headers,
        )
        assert book(joao["id"], [catalog["cut"]["id"]], "09:30").status_code == 201

    def test_outside_business_hours_rejected(self, book, catalog, joao):
        """Default hours are 08:00-20:00"""
        assert book(joao["id"], [catalog["cut"]["id"]], "07:30").status_code == 400
        assert book(joao["id"], [catalog["combo"]["id"]], "19:00").status_code == 400
        assert book(joao["id"], [catalog["combo"]["id"]], "18:30").status_code == 201

    def test_requires_a_service(self, book, joao):
        assert book(joao["id"], []).status_code == 422

    def test_unknown_service_rejected(self, book, joao):
        resp = book(joao["id"], ["00000000-0000-0000-0000-000000000000"])
        assert resp.status_code == 400

    def test_unknown_client(self, book, catalog):
        assert book("missing", [catalog["cut"]["id"]]).status_code == 404

    def test_malformed_start_time(self, book, catalog, joao):
        assert book(joao["id"], [catalog["cut"]["id"]], "9h").status_code == 422

    def test_missing_token(self, client):
        assert client.get("/appointments").status_code in (401, 403)


# ============================================================================
# EDITING
# ============================================================================


class TestEditAppointment:
    def test_replacing_services_recomputes_end(self, client, auth_headers, book, catalog, joao):
        appt = book(joao["id"], [catalog["cut"]["id"]], "09:00").json()
        assert appt["endTime"] == "09:30"

        resp = client.patch(
            f"/appointments/{appt['id']}",
            json={"serviceIds": [catalog["cut"]["id"], catalog["beard"]["id"]]},
            headers=auth_headers,
        )
        assert resp.status_code == 200, resp.text
        assert resp.json()["endTime"] == "10:30"
        assert len(resp.json()["services"]) == 2

    def test_booked_price_survives_catalog_change(
        self, client, auth_headers, book, catalog, joao
    ):
        appt = book(joao["id"], [catalog["cut"]["id"]], "09:00").json()
        client.patch(
            f"/services/{catalog['cut']['id']}", json={"price": 50.0}, headers=auth_headers
        )

        resp = client.patch(
            f"/appointments/{appt['id']}",
            json={"serviceIds": [catalog["cut"]["id"], catalog["beard"]["id"]]},
            headers=auth_headers,
        )
        prices = {s["name"]: s["price"] for s in resp.json()["services"]}
        assert prices == {"Corte": 35.0, "Barba": 25.0}

    def test_old_snapshot_rows_removed(self, client, auth_headers, book, catalog, joao, db_session):
        appt = book(joao["id"], [catalog["cut"]["id"], catalog["beard"]["id"]], "09:00").json()
        client.patch(
            f"/appointments/{appt['id']}",
            json={"serviceIds": [catalog["combo"]["id"]]},
            headers=auth_headers,
        )
        rows = (
            db_session.query(AppointmentService)
            .filter(AppointmentService.appointment_id == appt["id"])
            .all()
        )
        assert [r.service_name for r in rows] == ["Combo"]

    def test_move_into_conflict_leaves_row_untouched(
        self, client, auth_headers, book, catalog, joao
    ):
        book(joao["id"], [catalog["combo"]["id"]], "09:00")
        other = book(joao["id"], [catalog["cut"]["id"]], "14:00").json()

        resp = client.patch(
            f"/appointments/{other['id']}",
            json={"startTime": "09:30", "serviceIds": [catalog["beard"]["id"]]},
            headers=auth_headers,
        )
        assert resp.status_code == 409

        unchanged = client.get(f"/appointments/{other['id']}", headers=auth_headers).json()
        assert unchanged["startTime"] == "14:00"
        assert [s["name"] for s in unchanged["services"]] == ["Corte"]

    def test_editing_in_place_does_not_conflict_with_itself(
        self, client, auth_headers, book, catalog, joao
    ):
        appt = book(joao["id"], [catalog["combo"]["id"]], "09:00").json()
        resp = client.patch(
            f"/appointments/{appt['id']}", json={"startTime": "09:30"}, headers=auth_headers
        )
        assert resp.status_code == 200
        assert resp.json()["endTime"] == "11:00"

    def test_change_client_updates_copy(self, client, auth_headers, book, catalog, joao, new_client):
        maria = new_client("Maria Souza", "21912345678")
        appt = book(joao["id"], [catalog["cut"]["id"]]).json()

        resp = client.patch(
            f"/appointments/{appt['id']}", json={"clientId": maria["id"]}, headers=auth_headers
        )
        assert resp.json()["clientName"] == "Maria Souza"
        assert resp.json()["clientPhone"] == "(21) 91234-5678"

    def test_cancelled_edit_still_checks_business_hours(
        self, client, auth_headers, book, catalog, joao
    ):
        """Cancelled bookings skip the overlap check but not the 20:00 close"""
        appt = book(joao["id"], [catalog["cut"]["id"]], "19:00").json()
        client.post(
            f"/appointments/{appt['id']}/status", json={"status": "cancelled"}, headers=auth_headers
        )

        resp = client.patch(
            f"/appointments/{appt['id']}", json={"startTime": "19:50"}, headers=auth_headers
        )
        assert resp.status_code == 400
        assert "business hours" in resp.json()["detail"]

        unchanged = client.get(f"/appointments/{appt['id']}", headers=auth_headers).json()
        assert unchanged["startTime"] == "19:00"
        assert unchanged["endTime"] == "19:30"


# ============================================================================
# STATUS
# ============================================================================


class TestStatusChange:
    def test_cancel_and_restore(self, client, auth_headers, book, catalog, joao):
        appt = book(joao["id"], [catalog["cut"]["id"]]).json()

        cancelled = client.post(
            f"/appointments/{appt['id']}/status",
            json={"status": "cancelled", "cancelReason": "Rain"},
            headers=auth_headers,
        ).json()
        assert cancelled["status"] == "cancelled"
        assert cancelled["cancelReason"] == "Rain"
        assert cancelled["cancelledAt"] is not None

        restored = client.post(
            f"/appointments/{appt['id']}/status",
            json={"status": "scheduled"},
            headers=auth_headers,
        ).json()
        assert restored["cancelledAt"] is None
        assert restored["cancelReason"] is None

    def test_restore_into_taken_slot_conflicts(self, client, auth_headers, book, catalog, joao):
        first = book(joao["id"], [catalog["combo"]["id"]], "09:00").json()
        client.post(
            f"/appointments/{first['id']}/status", json={"status": "cancelled"}, headers=auth_headers
        )
        book(joao["id"], [catalog["cut"]["id"]], "09:00")

        resp = client.post(
            f"/appointments/{first['id']}/status", json={"status": "scheduled"}, headers=auth_headers
        )
        assert resp.status_code == 409

    def test_restore_after_closing_time_moved_rejected(
        self, client, auth_headers, book, catalog, joao
    ):
        appt = book(joao["id"], [catalog["cut"]["id"]], "19:00").json()
        client.post(
            f"/appointments/{appt['id']}/status", json={"status": "cancelled"}, headers=auth_headers
        )
        client.patch("/settings", json={"closeTime": "19:15"}, headers=auth_headers)

        resp = client.post(
            f"/appointments/{appt['id']}/status", json={"status": "scheduled"}, headers=auth_headers
        )
        assert resp.status_code == 400

        still = client.get(f"/appointments/{appt['id']}", headers=auth_headers).json()
        assert still["status"] == "cancelled"

    def test_invalid_status(self, client, auth_headers, book, catalog, joao):
        appt = book(joao["id"], [catalog["cut"]["id"]]).json()
        resp = client.post(
            f"/appointments/{appt['id']}/status", json={"status": "lost"}, headers=auth_headers
        )
        assert resp.status_code == 422


# ============================================================================
# LISTING / SLOTS / DELETE
# ============================================================================


class TestQueries:
    def test_list_filters(self, client, auth_headers, book, catalog, joao, new_client):
        maria = new_client("Maria Souza", "21912345678")
        book(joao["id"], [catalog["cut"]["id"]], "09:00")
        book(maria["id"], [catalog["cut"]["id"]], "10:00")
        book(maria["id"], [catalog["cut"]["id"]], "10:00", day="2030-03-13")

        by_day = client.get(f"/appointments?date={BOOKING_DAY}", headers=auth_headers).json()
        assert len(by_day) == 2

        by_name = client.get("/appointments?search=maria", headers=auth_headers).json()
        assert {a["date"] for a in by_name} == {"2030-03-12", "2030-03-13"}

        scheduled = client.get("/appointments?status=scheduled", headers=auth_headers).json()
        assert len(scheduled) == 3

    def test_search_by_phone(self, client, auth_headers, book, catalog, joao, new_client):
        maria = new_client("Maria Souza", "21912345678")
        book(joao["id"], [catalog["cut"]["id"]], "09:00")
        book(maria["id"], [catalog["cut"]["id"]], "10:00")

        by_phone = client.get("/appointments?search=91234", headers=auth_headers).json()
        assert [a["clientName"] for a in by_phone] == ["Maria Souza"]

    def test_search_wildcards_are_literal(self, client, auth_headers, book, catalog, joao):
        book(joao["id"], [catalog["cut"]["id"]], "09:00")

        assert client.get("/appointments?search=%25", headers=auth_headers).json() == []
        assert client.get("/appointments?search=_", headers=auth_headers).json() == []

    def test_agenda_sorted(self, client, auth_headers, book, catalog, joao):
        book(joao["id"], [catalog["cut"]["id"]], "15:00")
        book(joao["id"], [catalog["cut"]["id"]], "08:00")

        agenda = client.get(f"/appointments/agenda?date={BOOKING_DAY}", headers=auth_headers).json()
        assert [a["startTime"] for a in agenda] == ["08:00", "15:00"]

    def test_slots(self, client, auth_headers, book, catalog, joao):
        book(joao["id"], [catalog["combo"]["id"]], "09:00")

        slots = client.get(
            f"/appointments/slots?date={BOOKING_DAY}&duration=30", headers=auth_headers
        ).json()
        availability = {s["time"]: s["available"] for s in slots}

        assert len(slots) == 72
        assert availability["08:30"] is True
        assert availability["09:00"] is False
        assert availability["10:20"] is False
        assert availability["10:30"] is True
        assert availability["19:30"] is True
        assert availability["19:40"] is False

    def test_tenant_isolation(self, client, other_headers, book, catalog, joao):
        appt = book(joao["id"], [catalog["cut"]["id"]]).json()
        assert client.get(f"/appointments/{appt['id']}", headers=other_headers).status_code == 404
        assert client.get("/appointments", headers=other_headers).json() == []

    def test_delete(self, client, auth_headers, book, catalog, joao):
        appt = book(joao["id"], [catalog["cut"]["id"]]).json()
        assert client.delete(f"/appointments/{appt['id']}", headers=auth_headers).status_code == 200
        assert client.get(f"/appointments/{appt['id']}", headers=auth_headers).status_code == 404


# ============================================================================
# WEBHOOKS
# ============================================================================


class TestLifecycleWebhooks:
    @pytest.fixture
    def sent(self, monkeypatch, client, auth_headers):
        calls = []

        def record(url, event, appointment):
            calls.append((url, event, appointment))

        monkeypatch.setattr(scheduling_router, "send_appointment_event", record)
        client.patch(
            "/settings",
            json={"n8nWebhook": "https://n8n.example.com/webhook/barber"},
            headers=auth_headers,
        )
        return calls

    def test_events_in_order(self, sent, client, auth_headers, book, catalog, joao):
        appt = book(joao["id"], [catalog["cut"]["id"]]).json()
        client.patch(f"/appointments/{appt['id']}", json={"notes": "VIP"}, headers=auth_headers)
        client.post(
            f"/appointments/{appt['id']}/status", json={"status": "confirmed"}, headers=auth_headers
        )
        client.delete(f"/appointments/{appt['id']}", headers=auth_headers)

        assert [event for _, event, _ in sent] == [
            "appointment.created",
            "appointment.updated",
            "appointment.status_changed",
            "appointment.deleted",
        ]
        assert all(url == "https://n8n.example.com/webhook/barber" for url, _, _ in sent)
        assert sent[-1][2]["id"] == appt["id"]
        assert sent[-1][2]["notes"] == "VIP"

    def test_noop_status_sends_nothing(self, sent, client, auth_headers, book, catalog, joao):
        appt = book(joao["id"], [catalog["cut"]["id"]]).json()
        client.post(
            f"/appointments/{appt['id']}/status", json={"status": "scheduled"}, headers=auth_headers
        )
        assert [event for _, event, _ in sent] == ["appointment.created"]

    def test_no_webhook_configured(self, monkeypatch, book, catalog, joao):
        calls = []
        monkeypatch.setattr(
            scheduling_router, "send_appointment_event", lambda *args: calls.append(args)
        )
        book(joao["id"], [catalog["cut"]["id"]])
        assert calls == []
