import pytest
from sqlalchemy import select

from comanda_digital.db.models import AuditAction, AuditLog, Notification, NotificationType, Order, OrderStatus

from factories import add_order, create_menu_item, create_table, open_session


async def _seated(db):
    table = await create_table(db, "9")
    session = await open_session(db, table)
    pizza = await create_menu_item(db)
    return session, pizza


async def test_confirm_moves_cart_to_kitchen(client, db, waiter_headers):
    session, pizza = await _seated(db)
    await add_order(db, session, pizza, quantity=2)
    await add_order(db, session, pizza, diner_name="Bia")

    r = await client.post("/api/orders/confirm", json={"sessionId": str(session.id)})

    assert r.status_code == 200
    assert r.json()["data"]["confirmedCount"] == 2
    assert {o["status"] for o in r.json()["data"]["orders"]} == {"placed"}

    confirmed = await client.get("/api/orders/confirm", params={"sessionId": str(session.id)})
    assert len(confirmed.json()["data"]) == 2

    kitchen = await client.get("/api/orders/kitchen", headers=waiter_headers)
    assert [o["tableNumber"] for o in kitchen.json()["data"]] == ["9", "9"]


async def test_confirm_empty_cart_is_rejected(client, db):
    session, _ = await _seated(db)

    r = await client.post("/api/orders/confirm", json={"sessionId": str(session.id)})

    assert r.status_code == 400
    assert r.json()["error"] == "Carrinho vazio"


async def test_kitchen_queue_requires_staff(client):
    r = await client.get("/api/orders/kitchen")

    assert r.status_code == 401


@pytest.mark.parametrize(
    "current, target",
    [
        (OrderStatus.PLACED, OrderStatus.CART),
        (OrderStatus.SERVED, OrderStatus.PREPARING),
        (OrderStatus.CANCELLED, OrderStatus.PLACED),
        (OrderStatus.READY, OrderStatus.CANCELLED),
    ],
)
async def test_order_status_never_moves_backwards(client, db, waiter_headers, current, target):
    session, pizza = await _seated(db)
    order = await add_order(db, session, pizza, status=current)

    r = await client.post(
        "/api/orders/update-status", json={"orderId": str(order.id), "status": target.value}, headers=waiter_headers
    )

    assert r.status_code == 400
    await db.refresh(order)
    assert order.status == current


async def test_order_ready_notifies_staff_and_is_audited(client, db, waiter_headers):
    session, pizza = await _seated(db)
    order = await add_order(db, session, pizza, status=OrderStatus.PREPARING)

    r = await client.post(
        "/api/orders/update-status", json={"orderId": str(order.id), "status": "ready"}, headers=waiter_headers
    )

    assert r.status_code == 200
    assert r.json()["data"]["status"] == "ready"
    [notification] = (await db.execute(select(Notification))).scalars().all()
    assert notification.type == NotificationType.KITCHEN_READY
    assert notification.meta["order_id"] == str(order.id)
    assert notification.meta["table_number"] == "9"
    [entry] = (await db.execute(select(AuditLog))).scalars().all()
    assert entry.action == AuditAction.ORDER_STATUS_CHANGE
    assert entry.details == {"order_id": str(order.id), "from": "preparing", "to": "ready"}
    assert entry.performed_by == "WAITER01"


async def test_resolving_kitchen_notification_serves_order(client, db, waiter_headers):
    session, pizza = await _seated(db)
    order = await add_order(db, session, pizza, status=OrderStatus.PREPARING)
    await client.post(
        "/api/orders/update-status", json={"orderId": str(order.id), "status": "ready"}, headers=waiter_headers
    )
    [notification] = (await db.execute(select(Notification))).scalars().all()

    r = await client.post(
        f"/api/notifications/{notification.id}/acknowledge", json={"action": "resolve"}, headers=waiter_headers
    )

    assert r.status_code == 200
    assert r.json()["data"]["status"] == "resolved"
    assert r.json()["data"]["resolvedBy"] == "Ana"
    served = (await db.execute(select(Order).where(Order.id == order.id))).scalars().one()
    await db.refresh(served)
    assert served.status == OrderStatus.SERVED


async def test_history_includes_cancelled_but_not_cart(client, db):
    session, pizza = await _seated(db)
    await add_order(db, session, pizza, status=OrderStatus.CART)
    await add_order(db, session, pizza, status=OrderStatus.CANCELLED)
    await add_order(db, session, pizza, status=OrderStatus.SERVED)

    r = await client.get("/api/orders/history", params={"sessionId": str(session.id)})

    assert sorted(o["status"] for o in r.json()["data"]) == ["cancelled", "served"]
