"""API tests for the back-office resources, run against a SQLite database."""

from decimal import Decimal

import pytest

from app.core.config import settings


def make_reservation(client, property_id: int, **overrides) -> dict:
    payload = {
        "property_id": property_id,
        "guest_name": "Emma Brown",
        "guest_email": "emma@example.com",
        "check_in_date": "2030-06-10",
        "check_out_date": "2030-06-14",
        "num_guests": 2,
        "total_amount": "500.00",
        "status": "confirmed",
        "platform": "airbnb",
    }
    payload.update(overrides)
    response = client.post("/api/reservations/", json=payload)
    assert response.status_code == 200, response.text
    return response.json()


class TestRoot:
    """Tests for the root endpoint."""

    def test_root(self, client) -> None:
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["message"] == "Maria Faz API"


class TestOwners:
    """Tests for /owners."""

    def test_create_and_get(self, client, owner) -> None:
        response = client.get(f"/api/owners/{owner['id']}")
        assert response.status_code == 200
        assert response.json()["name"] == "João Silva"
        assert response.json()["properties"] == []

    def test_search(self, client, owner) -> None:
        client.post("/api/owners/", json={"name": "Ana Costa"})

        response = client.get("/api/owners/", params={"search": "joão"})
        assert [o["name"] for o in response.json()] == ["João Silva"]

    def test_update(self, client, owner) -> None:
        response = client.put(
            f"/api/owners/{owner['id']}", json={"phone": "+351 912 345 678"}
        )
        assert response.status_code == 200
        assert response.json()["phone"] == "+351 912 345 678"
        assert response.json()["name"] == "João Silva"

    def test_missing_owner(self, client) -> None:
        response = client.get("/api/owners/999")
        assert response.status_code == 404
        assert response.json()["error_type"] == "entity_not_found"
        assert response.json()["detail"] == "Owner with id 999 not found"

    def test_delete_refused_with_properties(self, client, owner, created_property) -> None:
        response = client.delete(f"/api/owners/{owner['id']}")
        assert response.status_code == 409

    def test_delete(self, client, owner) -> None:
        assert client.delete(f"/api/owners/{owner['id']}").status_code == 200
        assert client.get(f"/api/owners/{owner['id']}").status_code == 404


class TestCleaningTeams:
    """Tests for /cleaning-teams."""

    def test_crud(self, client) -> None:
        response = client.post(
            "/api/cleaning-teams/", json={"name": "Equipa Norte", "manager": "Rui"}
        )
        assert response.status_code == 200, response.text
        team_id = response.json()["id"]

        response = client.put(f"/api/cleaning-teams/{team_id}", json={"rating": 4})
        assert response.json()["rating"] == 4

        assert len(client.get("/api/cleaning-teams/").json()) == 1
        assert client.delete(f"/api/cleaning-teams/{team_id}").status_code == 200
        assert client.get(f"/api/cleaning-teams/{team_id}").status_code == 404


class TestProperties:
    """Tests for /properties."""

    def test_create_includes_owner(self, created_property, owner) -> None:
        assert created_property["owner"]["id"] == owner["id"]
        assert created_property["aliases"] == ["Apt Se", "Sé 2"]
        assert Decimal(created_property["cleaning_cost"]) == Decimal("40")

    def test_duplicate_name(self, client, created_property, property_data) -> None:
        response = client.post("/api/properties/", json=property_data)
        assert response.status_code == 409

    def test_unknown_owner(self, client, property_data) -> None:
        property_data["owner_id"] = 999
        response = client.post("/api/properties/", json=property_data)
        assert response.status_code == 400

    def test_list_filters(self, client, created_property, property_data) -> None:
        client.post(
            "/api/properties/",
            json={**property_data, "name": "Casa da Praia", "aliases": [], "active": False},
        )

        names = [p["name"] for p in client.get("/api/properties/").json()]
        assert names == ["Apartamento Sé", "Casa da Praia"]

        active = client.get("/api/properties/", params={"active": True}).json()
        assert [p["name"] for p in active] == ["Apartamento Sé"]

        found = client.get("/api/properties/", params={"search": "praia"}).json()
        assert [p["name"] for p in found] == ["Casa da Praia"]

    def test_update_name(self, client, created_property) -> None:
        response = client.put(
            f"/api/properties/{created_property['id']}", json={"name": "Sé Loft"}
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Sé Loft"

    def test_delete_blocked_by_active_reservation(self, client, created_property) -> None:
        make_reservation(client, created_property["id"])
        response = client.delete(f"/api/properties/{created_property['id']}")
        assert response.status_code == 409

    def test_delete_with_cancelled_reservation(self, client, created_property) -> None:
        make_reservation(client, created_property["id"], status="cancelled")
        response = client.delete(f"/api/properties/{created_property['id']}")
        assert response.status_code == 200
        assert client.get(f"/api/properties/{created_property['id']}").status_code == 404

    def test_statistics(self, client, created_property) -> None:
        make_reservation(client, created_property["id"])
        response = client.get(
            f"/api/properties/{created_property['id']}/statistics",
            params={"start_date": "2030-06-01", "end_date": "2030-06-30"},
        )
        assert response.status_code == 200
        body = response.json()
        assert Decimal(body["total_revenue"]) == Decimal("500")
        assert Decimal(body["total_costs"]) == Decimal("135")
        assert Decimal(body["net_profit"]) == Decimal("365")
        assert body["occupancy_rate"] == pytest.approx(13.33)


class TestReservations:
    """Tests for /reservations."""

    def test_create_derives_fees(self, client, created_property) -> None:
        reservation = make_reservation(
            client, created_property["id"], platform_fee="75.00"
        )
        assert Decimal(reservation["cleaning_fee"]) == Decimal("40")
        assert Decimal(reservation["check_in_fee"]) == Decimal("20")
        assert Decimal(reservation["commission_fee"]) == Decimal("50")
        assert Decimal(reservation["team_payment"]) == Decimal("25")
        assert Decimal(reservation["net_amount"]) == Decimal("290")
        assert reservation["source"] == "manual"

    def test_update_amount_reprices(self, client, created_property) -> None:
        reservation = make_reservation(client, created_property["id"])
        response = client.put(
            f"/api/reservations/{reservation['id']}", json={"total_amount": "1000.00"}
        )
        assert Decimal(response.json()["commission_fee"]) == Decimal("100")
        assert Decimal(response.json()["net_amount"]) == Decimal("815")

    def test_invalid_dates(self, client, created_property) -> None:
        response = client.post(
            "/api/reservations/",
            json={
                "property_id": created_property["id"],
                "guest_name": "Emma Brown",
                "check_in_date": "2030-06-14",
                "check_out_date": "2030-06-10",
            },
        )
        assert response.status_code == 422

    def test_update_invalid_dates(self, client, created_property) -> None:
        reservation = make_reservation(client, created_property["id"])
        response = client.put(
            f"/api/reservations/{reservation['id']}",
            json={"check_out_date": "2030-06-01"},
        )
        assert response.status_code == 400

    def test_unknown_property(self, client) -> None:
        response = client.post(
            "/api/reservations/",
            json={
                "property_id": 999,
                "guest_name": "Emma Brown",
                "check_in_date": "2030-06-10",
                "check_out_date": "2030-06-14",
            },
        )
        assert response.status_code == 400

    def test_list_is_paginated(self, client, created_property) -> None:
        for day in (1, 5, 20):
            make_reservation(
                client,
                created_property["id"],
                check_in_date=f"2030-07-{day:02d}",
                check_out_date=f"2030-07-{day + 2:02d}",
            )

        response = client.get("/api/reservations/", params={"skip": 0, "limit": 2})
        body = response.json()
        assert [r["check_in_date"] for r in body["items"]] == ["2030-07-20", "2030-07-05"]
        assert body["pagination"]["total_count"] == 3
        assert body["pagination"]["total_pages"] == 2
        assert body["pagination"]["has_next"] is True

    def test_search_by_guest(self, client, created_property) -> None:
        make_reservation(client, created_property["id"])
        make_reservation(
            client,
            created_property["id"],
            guest_name="John Smith",
            check_in_date="2030-08-01",
            check_out_date="2030-08-03",
        )
        body = client.get("/api/reservations/", params={"search": "smith"}).json()
        assert [r["guest_name"] for r in body["items"]] == ["John Smith"]

    def test_check_availability(self, client, created_property) -> None:
        existing = make_reservation(client, created_property["id"])
        params = {
            "property_id": created_property["id"],
            "check_in_date": "2030-06-12",
            "check_out_date": "2030-06-16",
        }

        body = client.get("/api/reservations/check-availability", params=params).json()
        assert body["is_available"] is False
        assert body["conflicting_reservation_ids"] == [existing["id"]]

        params["exclude_reservation_id"] = existing["id"]
        body = client.get("/api/reservations/check-availability", params=params).json()
        assert body["is_available"] is True

    def test_back_to_back_stays_do_not_conflict(self, client, created_property) -> None:
        make_reservation(client, created_property["id"])
        body = client.get(
            "/api/reservations/check-availability",
            params={
                "property_id": created_property["id"],
                "check_in_date": "2030-06-14",
                "check_out_date": "2030-06-18",
            },
        ).json()
        assert body["is_available"] is True

    def test_delete(self, client, created_property) -> None:
        reservation = make_reservation(client, created_property["id"])
        assert client.delete(f"/api/reservations/{reservation['id']}").status_code == 200
        assert client.get(f"/api/reservations/{reservation['id']}").status_code == 404


class TestMaintenanceTasks:
    """Tests for /maintenance-tasks."""

    def test_create_and_filter(self, client, created_property) -> None:
        response = client.post(
            "/api/maintenance-tasks/",
            json={
                "property_id": created_property["id"],
                "title": "Trocar torneira",
                "priority": "high",
            },
        )
        assert response.status_code == 200, response.text
        task = response.json()
        assert task["status"] == "pending"

        client.put(f"/api/maintenance-tasks/{task['id']}", json={"status": "completed"})
        pending = client.get(
            "/api/maintenance-tasks/", params={"status": "pending"}
        ).json()
        assert pending == []

    def test_unknown_property(self, client) -> None:
        response = client.post(
            "/api/maintenance-tasks/", json={"property_id": 999, "title": "Pintar"}
        )
        assert response.status_code == 400


class TestFinancialDocuments:
    """Tests for /financial-documents, their items and payments."""

    @pytest.fixture
    def document(self, client, owner) -> dict:
        response = client.post(
            "/api/financial-documents/",
            json={
                "reference": "FT-2030-001",
                "type": "incoming",
                "date": "2030-06-30",
                "entity_type": "owner",
                "entity_id": owner["id"],
                "entity_name": owner["name"],
                "items": [
                    {"description": "Gestão", "quantity": "1", "unit_price": "200.00"},
                    {"description": "Limpezas", "quantity": "3", "unit_price": "40.00"},
                ],
            },
        )
        assert response.status_code == 200, response.text
        return response.json()

    def test_total_follows_items(self, client, document) -> None:
        assert Decimal(document["total_amount"]) == Decimal("320")
        assert len(document["items"]) == 2

        response = client.post(
            f"/api/financial-documents/{document['id']}/items",
            json={"description": "Lavandaria", "quantity": "2", "unit_price": "15.50"},
        )
        assert Decimal(response.json()["amount"]) == Decimal("31")

        refreshed = client.get(f"/api/financial-documents/{document['id']}").json()
        assert Decimal(refreshed["total_amount"]) == Decimal("351")

        item_id = refreshed["items"][0]["id"]
        client.delete(f"/api/financial-documents/{document['id']}/items/{item_id}")
        refreshed = client.get(f"/api/financial-documents/{document['id']}").json()
        assert Decimal(refreshed["total_amount"]) == Decimal("151")

    def test_payments_move_status(self, client, document) -> None:
        url = f"/api/financial-documents/{document['id']}/payments"

        first = client.post(url, json={"amount": "100.00", "method": "cash"}).json()
        body = client.get(f"/api/financial-documents/{document['id']}").json()
        assert body["status"] == "partial"
        assert Decimal(body["paid_amount"]) == Decimal("100")

        client.post(url, json={"amount": "220.00"})
        body = client.get(f"/api/financial-documents/{document['id']}").json()
        assert body["status"] == "paid"

        client.delete(f"{url}/{first['id']}")
        body = client.get(f"/api/financial-documents/{document['id']}").json()
        assert body["status"] == "partial"
        assert Decimal(body["paid_amount"]) == Decimal("220")

    def test_payment_update_recalculates(self, client, document) -> None:
        url = f"/api/financial-documents/{document['id']}/payments"
        payment = client.post(url, json={"amount": "100.00"}).json()

        response = client.put(f"{url}/{payment['id']}", json={"amount": "320.00"})
        assert response.status_code == 200
        assert Decimal(response.json()["amount"]) == Decimal("320")
        body = client.get(f"/api/financial-documents/{document['id']}").json()
        assert body["status"] == "paid"
        assert Decimal(body["paid_amount"]) == Decimal("320")

        client.put(f"{url}/{payment['id']}", json={"amount": "20.00"})
        body = client.get(f"/api/financial-documents/{document['id']}").json()
        assert body["status"] == "partial"
        assert Decimal(body["paid_amount"]) == Decimal("20")

    def test_zero_payment_rejected(self, client, document) -> None:
        response = client.post(
            f"/api/financial-documents/{document['id']}/payments", json={"amount": "0"}
        )
        assert response.status_code == 422

    def test_payment_on_cancelled_document(self, client, document) -> None:
        client.put(
            f"/api/financial-documents/{document['id']}", json={"status": "cancelled"}
        )
        response = client.post(
            f"/api/financial-documents/{document['id']}/payments",
            json={"amount": "50.00"},
        )
        assert response.status_code == 422

    def test_item_of_other_document(self, client, document) -> None:
        response = client.delete(f"/api/financial-documents/{document['id']}/items/999")
        assert response.status_code == 404

    def test_list_filters(self, client, document) -> None:
        incoming = client.get(
            "/api/financial-documents/", params={"type": "incoming"}
        ).json()
        assert [d["reference"] for d in incoming] == ["FT-2030-001"]
        assert client.get(
            "/api/financial-documents/", params={"type": "outgoing"}
        ).json() == []

    def test_financial_summary(self, client, document) -> None:
        client.post(
            f"/api/financial-documents/{document['id']}/payments",
            json={"amount": "120.00"},
        )
        body = client.get(
            "/api/reports/financial-summary",
            params={"start_date": "2030-06-01", "end_date": "2030-06-30"},
        ).json()
        assert Decimal(body["totals"]["incoming"]) == Decimal("320")
        assert Decimal(body["totals"]["pending_incoming"]) == Decimal("200")
        assert body["document_counts"]["partial"] == 1
        [balance] = body["owner_balances"]
        assert balance["entity_name"] == "João Silva"
        assert Decimal(balance["pending"]) == Decimal("200")


class TestQuotations:
    """Tests for /quotations."""

    QUOTATION = {
        "client_name": "Sofia Costa",
        "client_email": "sofia@example.com",
        "property_type": "Moradia",
        "total_area": 180,
        "bedrooms": 3,
        "bathrooms": 2,
        "has_exterior_space": True,
        "exterior_area": 40,
        "is_duplex": True,
        "base_price": "120.00",
    }

    def test_calculate(self, client) -> None:
        response = client.post(
            "/api/quotations/calculate",
            json={"base_price": "100", "has_bbq": True, "has_garden": True},
        )
        body = response.json()
        assert Decimal(body["additional_price"]) == Decimal("10")
        assert Decimal(body["total_price"]) == Decimal("110")

    def test_create_prices_quotation(self, client) -> None:
        response = client.post("/api/quotations/", json=self.QUOTATION)
        assert response.status_code == 200, response.text
        body = response.json()
        assert body["status"] == "draft"
        assert Decimal(body["total_price"]) == Decimal("140")
        assert body["valid_until"] is not None

    def test_update_reprices(self, client) -> None:
        quotation = client.post("/api/quotations/", json=self.QUOTATION).json()
        response = client.put(
            f"/api/quotations/{quotation['id']}", json={"is_duplex": False}
        )
        assert Decimal(response.json()["total_price"]) == Decimal("130")

    def test_pdf_download(self, client, tmp_path, monkeypatch) -> None:
        monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
        quotation = client.post("/api/quotations/", json=self.QUOTATION).json()

        response = client.get(f"/api/quotations/{quotation['id']}/pdf")
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert "attachment" in response.headers["content-disposition"]
        assert response.content.startswith(b"%PDF")
        assert len(list(tmp_path.glob("orcamento_*.pdf"))) == 1

    def test_missing_quotation_pdf(self, client) -> None:
        assert client.get("/api/quotations/999/pdf").status_code == 404


class TestStatisticsAndReports:
    """Tests for /statistics and /reports."""

    def test_dashboard(self, client, created_property) -> None:
        make_reservation(client, created_property["id"])
        make_reservation(
            client,
            created_property["id"],
            status="cancelled",
            check_in_date="2030-06-20",
            check_out_date="2030-06-22",
        )

        body = client.get(
            "/api/statistics",
            params={"start_date": "2030-06-01", "end_date": "2030-06-30"},
        ).json()
        assert Decimal(body["total_revenue"]) == Decimal("500")
        assert Decimal(body["net_profit"]) == Decimal("365")
        assert body["reservations_count"] == 1
        assert body["active_properties"] == 1
        assert body["occupancy_rate"] == pytest.approx(13.33)
        assert body["top_properties"][0]["name"] == "Apartamento Sé"

    def test_dashboard_rejects_inverted_period(self, client) -> None:
        response = client.get(
            "/api/statistics",
            params={"start_date": "2030-06-30", "end_date": "2030-06-01"},
        )
        assert response.status_code == 400

    def test_owner_report(self, client, owner, created_property) -> None:
        # Crosses into July; counted in June by its nights
        make_reservation(
            client,
            created_property["id"],
            check_in_date="2030-06-28",
            check_out_date="2030-07-02",
        )

        response = client.get(
            f"/api/reports/owner/{owner['id']}", params={"month": 6, "year": 2030}
        )
        assert response.status_code == 200
        body = response.json()
        [item] = body["properties"]
        assert item["occupied_days"] == 3
        assert item["available_days"] == 30
        assert body["totals"]["total_reservations"] == 1
        assert Decimal(body["totals"]["total_revenue"]) == Decimal("500")

    def test_owner_report_pdf(self, client, owner, created_property) -> None:
        response = client.get(
            f"/api/reports/owner/{owner['id']}/pdf", params={"month": 6, "year": 2030}
        )
        assert response.status_code == 200
        assert (
            f"relatorio_{owner['id']}_2030_06.pdf"
            in response.headers["content-disposition"]
        )
        assert response.content.startswith(b"%PDF")

    def test_owner_report_invalid_month(self, client, owner) -> None:
        response = client.get(
            f"/api/reports/owner/{owner['id']}", params={"month": 13, "year": 2030}
        )
        assert response.status_code == 422


class TestActivitiesAndDemo:
    """Tests for /activities and /demo."""

    def test_changes_are_logged(self, client, created_property) -> None:
        activities = client.get("/api/activities/").json()
        types = [a["type"] for a in activities]
        assert types == ["property_created", "owner_created"]

        owners_only = client.get("/api/activities/", params={"entity_type": "owner"}).json()
        assert [a["type"] for a in owners_only] == ["owner_created"]

    def test_create_activity(self, client) -> None:
        response = client.post(
            "/api/activities/",
            json={"type": "cleaning_completed", "description": "Limpeza concluída"},
        )
        assert response.status_code == 200
        assert response.json()["type"] == "cleaning_completed"

    def test_generate_and_reset(self, client) -> None:
        response = client.post(
            "/api/demo/generate",
            params={"owners": 2, "properties": 3, "reservations": 4, "documents": 2},
        )
        assert response.status_code == 200
        assert response.json() == {
            "owners": 2,
            "properties": 3,
            "reservations": 4,
            "financial_documents": 2,
            "activities": 2,
        }

        status = client.get("/api/demo/status").json()
        assert status["has_demo_data"] is True
        assert status["counts"]["property"] == 3

        # Markers stay out of the activity history
        history = client.get("/api/activities/").json()
        assert all(a["type"] != "demo_data_marker" for a in history)

        response = client.post("/api/demo/reset")
        assert response.json()["reservations"] == 4
        assert response.json()["owners"] == 2

        assert client.get("/api/demo/status").json()["has_demo_data"] is False
        assert client.get("/api/properties/").json() == []

    def test_reset_keeps_real_data(self, client, created_property) -> None:
        client.post("/api/demo/generate", params={"owners": 1, "properties": 1})
        client.post("/api/demo/reset")

        names = [p["name"] for p in client.get("/api/properties/").json()]
        assert names == ["Apartamento Sé"]
