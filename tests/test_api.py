"""HTTP tests for the reservation, purchase and catalog endpoints."""

import pytest
from httpx import ASGITransport, AsyncClient

from ticket_inventory import main
from ticket_inventory.database import get_db


@pytest.fixture
async def client(session_maker, catalog):
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    main.app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=main.app), base_url="http://test"
    ) as ac:
        yield ac
    main.app.dependency_overrides.clear()


async def reserve(client, event_id, items, session_id=None):
    payload = {
        "event_id": event_id,
        "items": [{"ticket_type_id": tt, "quantity": qty} for tt, qty in items],
    }
    if session_id is not None:
        payload["session_id"] = session_id
    return await client.post("/api/v1/reservations", json=payload)


class TestReserveEndpoint:
    """Tests for POST /api/v1/reservations"""

    async def test_reserve_returns_holds(self, client, catalog):
        response = await reserve(client, catalog.event_id, [(catalog.general_id, 2)])

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["event_id"] == catalog.event_id
        assert len(body["session_id"]) == 32
        assert body["expires_at"].endswith("+00:00")
        assert body["reservations"] == [
            {
                "ticket_type_id": catalog.general_id,
                "quantity": 2,
                "unit_price": "25.00",
                "total_price": "50.00",
            }
        ]

    async def test_zero_quantity_is_validation_error(self, client, catalog):
        response = await reserve(client, catalog.event_id, [(catalog.general_id, 0)])

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "VALIDATION_ERROR"
        assert "detail" not in body

    async def test_missing_items_is_validation_error(self, client, catalog):
        response = await client.post(
            "/api/v1/reservations", json={"event_id": catalog.event_id}
        )
        assert response.status_code == 400

    async def test_unknown_ticket_type_is_not_found(self, client, catalog):
        response = await reserve(client, catalog.event_id, [(987654, 1)])

        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"

    async def test_insufficient_availability_is_conflict(self, client, catalog):
        response = await reserve(client, catalog.event_id, [(catalog.vip_id, 6)])

        assert response.status_code == 409
        assert response.json() == {
            "success": False,
            "error": "CONFLICT",
            "message": "Not enough availability",
        }

    async def test_internal_detail_only_in_debug(self, client, catalog, monkeypatch):
        monkeypatch.setattr(main.settings, "DEBUG", True)
        response = await reserve(client, catalog.event_id, [(987654, 1)])

        assert response.status_code == 404
        assert "987654" in response.json()["detail"]

    async def test_session_holds_listing(self, client, catalog):
        await reserve(client, catalog.event_id, [(catalog.vip_id, 2)], session_id="web-1")

        response = await client.get(
            "/api/v1/reservations",
            params={"session_id": "web-1", "event_id": catalog.event_id},
        )

        assert response.status_code == 200
        holds = response.json()
        assert len(holds) == 1
        assert holds[0]["status"] == "reserved"
        assert holds[0]["total_price"] == "200.00"


class TestPurchaseEndpoint:
    """Tests for POST /api/v1/purchases"""

    async def test_purchase_confirms_order(self, client, catalog):
        held = await reserve(
            client, catalog.event_id, [(catalog.general_id, 2), (catalog.vip_id, 1)]
        )
        session_id = held.json()["session_id"]

        response = await client.post(
            "/api/v1/purchases",
            json={
                "session_id": session_id,
                "event_id": catalog.event_id,
                "buyer_name": "Grace",
                "buyer_phone": "555-0199",
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["total_amount"] == "150.00"
        assert body["line_item_count"] == 2
        assert body["total_tickets"] == 3
        assert body["confirmation_code"].startswith(f"ORD-{body['order_id']}-")
        assert body["title"] == "Autumn Jazz Night"
        assert body["venue"] == "Riverside Hall"
        assert body["date_time"] == "2026-11-20 19:30:00"

        order = await client.get(f"/api/v1/orders/{body['order_id']}")
        assert order.status_code == 200
        order_body = order.json()
        assert order_body["user_name"] == "Grace"
        assert order_body["order_status"] == "confirmed"
        assert sorted(line["line_total"] for line in order_body["lines"]) == [
            "100.00",
            "50.00",
        ]

    async def test_repeat_purchase_is_conflict(self, client, catalog):
        held = await reserve(client, catalog.event_id, [(catalog.general_id, 1)])
        payload = {"session_id": held.json()["session_id"], "event_id": catalog.event_id}

        first = await client.post("/api/v1/purchases", json=payload)
        second = await client.post("/api/v1/purchases", json=payload)

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["message"] == "Hold expired or not found"

    async def test_missing_session_is_validation_error(self, client, catalog):
        response = await client.post(
            "/api/v1/purchases", json={"event_id": catalog.event_id}
        )
        assert response.status_code == 400

    async def test_unknown_order_is_not_found(self, client):
        response = await client.get("/api/v1/orders/424242")
        assert response.status_code == 404


class TestCatalogEndpoints:
    """Tests for GET /api/v1/events and /api/v1/events/{id}/tickets"""

    async def test_lists_only_active_events(self, client, catalog):
        response = await client.get("/api/v1/events")

        assert response.status_code == 200
        ids = [e["event_id"] for e in response.json()]
        assert ids == [catalog.event_id, catalog.other_event_id]

    async def test_ticket_types_show_free_quantity(self, client, catalog):
        await reserve(client, catalog.event_id, [(catalog.general_id, 4)])

        response = await client.get(f"/api/v1/events/{catalog.event_id}/tickets")

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 3
        by_id = {t["ticket_type_id"]: t for t in body["data"]}
        assert by_id[catalog.general_id]["free_quantity"] == 6
        assert by_id[catalog.general_id]["available_quantity"] == 10
        assert by_id[catalog.general_id]["max_per_order"] == 10
        assert by_id[catalog.limited_id]["max_per_order"] == 2
        assert by_id[catalog.vip_id]["is_on_sale"] is True
        assert [t["price"] for t in body["data"]] == ["25.00", "100.00", "250.00"]

    async def test_ticket_types_of_inactive_event_not_found(self, client, catalog):
        response = await client.get(f"/api/v1/events/{catalog.inactive_event_id}/tickets")
        assert response.status_code == 404
