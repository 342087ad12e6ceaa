import uuid
from decimal import Decimal

import pytest

from comanda_digital.db.models import OrderStatus, SessionStatus
from comanda_digital.services.billing_service import compute_totals

from factories import add_order, create_menu_item, create_staff, create_table, open_session


@pytest.mark.parametrize(
    "lines, subtotal, tax, total",
    [
        ([], "0.00", "0.00", "0.00"),
        ([("10.00", 2)], "20.00", "2.80", "22.80"),
        ([("12.50", 1), ("3.35", 3)], "22.55", "3.16", "25.71"),
        ([("0.05", 1)], "0.05", "0.01", "0.06"),
    ],
)
def test_compute_totals_applies_fourteen_percent_vat(lines, subtotal, tax, total):
    totals = compute_totals([(Decimal(price), qty) for price, qty in lines])

    assert totals.subtotal == Decimal(subtotal)
    assert totals.tax == Decimal(tax)
    assert totals.total == Decimal(total)
    assert totals.total == totals.subtotal + totals.tax


async def test_session_total_excludes_cart_and_cancelled(client, db):
    table = await create_table(db, "1")
    session = await open_session(db, table)
    pizza = await create_menu_item(db, "Pizza", "40.00")
    juice = await create_menu_item(db, "Suco", "7.50")
    await add_order(db, session, pizza, status=OrderStatus.PLACED)
    await add_order(db, session, juice, quantity=2, status=OrderStatus.SERVED)
    await add_order(db, session, juice, quantity=4, status=OrderStatus.CART)
    await add_order(db, session, pizza, status=OrderStatus.CANCELLED)

    r = await client.get(f"/api/sessions/{session.id}/total")

    assert r.status_code == 200
    data = r.json()["data"]
    assert data["subtotal"] == 55.0
    assert data["tax"] == 7.7
    assert data["total"] == 62.7
    assert data["vatRate"] == 0.14
    assert data["itemCount"] == 3


async def test_session_total_unknown_session(client):
    r = await client.get(f"/api/sessions/{uuid.uuid4()}/total")

    assert r.status_code == 404
    assert r.json() == {"success": False, "error": "Sessão não encontrada"}


async def test_start_session_with_pin_occupies_table(client, db):
    table = await create_table(db, "2", pin="1234")

    r = await client.post(
        "/api/sessions/", json={"tableId": str(table.id), "pin": "1234", "startedByName": "Bia"}
    )

    assert r.status_code == 201
    data = r.json()["data"]
    assert data["joined"] is False
    assert data["session"]["tableNumber"] == "2"
    assert data["session"]["diners"][0]["name"] == "Bia"
    await db.refresh(table)
    assert table.occupied is True
    assert str(table.current_session_id) == data["session"]["id"]


async def test_start_session_joins_existing(client, db):
    table = await create_table(db, "2")
    session = await open_session(db, table, pin="1234")

    r = await client.post("/api/sessions/", json={"tableId": str(table.id), "pin": "1234", "startedByName": "Caio"})

    assert r.status_code == 201
    assert r.json()["data"]["joined"] is True
    assert r.json()["data"]["session"]["id"] == str(session.id)
    assert [d["name"] for d in r.json()["data"]["session"]["diners"]] == ["Caio"]


async def test_start_session_wrong_pin(client, db):
    table = await create_table(db, "2", pin="1234")

    r = await client.post("/api/sessions/", json={"tableId": str(table.id), "pin": "4321"})

    assert r.status_code == 401
    await db.refresh(table)
    assert table.occupied is False


async def test_join_session_reactivates_returning_diner(client, db):
    table = await create_table(db, "2")
    session = await open_session(
        db, table, diners=[{"name": "Ana", "isActive": False, "logoutTime": "2026-01-01T00:00:00+00:00"}]
    )

    r = await client.post(f"/api/sessions/{session.id}/join", json={"name": "Ana"})

    assert r.status_code == 200
    diners = r.json()["data"]["diners"]
    assert len(diners) == 1
    assert diners[0]["isActive"] is True
    assert diners[0]["logoutTime"] is None


async def test_read_session_includes_table_number(client, db):
    table = await create_table(db, "12")
    session = await open_session(db, table)

    r = await client.get(f"/api/sessions/{session.id}")

    assert r.status_code == 200
    assert r.json()["data"]["tableNumber"] == "12"
    assert r.json()["data"]["status"] == "active"
    assert r.json()["data"]["paymentStatus"] == "unpaid"


async def test_session_orders_get_and_post(client, db):
    table = await create_table(db, "1")
    session = await open_session(db, table)
    pizza = await create_menu_item(db)

    created = await client.post(
        f"/api/sessions/{session.id}/orders", json={"menuItemId": str(pizza.id), "quantity": 2}
    )
    listed = await client.get(f"/api/sessions/{session.id}/orders", params={"status": "cart"})

    assert created.status_code == 201
    assert created.json()["data"]["quantity"] == 2
    assert [o["id"] for o in listed.json()["data"]] == [created.json()["data"]["id"]]
    assert listed.json()["data"][0]["tableNumber"] == "1"


async def test_assign_staff_only_once(client, db, waiter, waiter_headers):
    table = await create_table(db, "1")
    session = await open_session(db, table)
    await create_staff(db, staff_id="WAITER02", name="Duda")

    first = await client.post(
        "/api/sessions/assign-staff", json={"sessionId": str(session.id), "staffId": "WAITER01"}, headers=waiter_headers
    )
    second = await client.post(
        "/api/sessions/assign-staff", json={"sessionId": str(session.id), "staffId": "WAITER02"}, headers=waiter_headers
    )

    assert first.status_code == 200
    assert first.json()["data"]["servedBy"] == str(waiter.id)
    assert second.status_code == 409


async def test_cancel_session_frees_table(client, db, waiter_headers):
    table = await create_table(db, "1")
    session = await open_session(db, table)

    r = await client.post(f"/api/sessions/{session.id}/cancel", headers=waiter_headers)
    again = await client.post(f"/api/sessions/{session.id}/cancel", headers=waiter_headers)

    assert r.status_code == 200
    assert r.json()["data"]["status"] == SessionStatus.CANCELLED.value
    assert again.status_code == 400
    await db.refresh(table)
    assert table.occupied is False
    assert table.current_pin is None
