import uuid

from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from comanda_digital import crud
from comanda_digital.db.models import Order, OrderStatus, SplitBillStatus

from factories import add_order, add_split, create_menu_item, create_table, open_session


async def _session_with_item(db, price="50.00"):
    table = await create_table(db, "1")
    session = await open_session(db, table)
    item = await create_menu_item(db, "Pizza Grande", price)
    return session, item


async def _load(client, session, **params):
    return await client.get("/api/cart/load", params={"sessionId": str(session.id), **params})


async def test_load_cart_overlays_active_split(client, db):
    session, pizza = await _session_with_item(db)
    split = await add_split(db, session, pizza, split_count=2)
    order = await add_order(db, session, pizza, split_bill_id=split.id, is_shared=True)

    r = await _load(client, session)

    assert r.status_code == 200
    [line] = r.json()["data"]["items"]
    assert line["id"] == str(order.id)
    assert line["isSplit"] is True
    assert line["splitPrice"] == 25.0
    assert line["originalPrice"] == 50.0
    assert line["splitCount"] == 2
    assert line["participants"] == ["Ana", "Bia"]
    assert line["price"] == 50.0
    assert r.json()["data"]["warnings"] == []

    await db.refresh(order)
    assert order.split_bill_id == split.id
    assert order.status == OrderStatus.CART


async def test_load_cart_never_matches_orders_without_split_id(client, db):
    session, pizza = await _session_with_item(db)
    await add_split(db, session, pizza, split_count=2)
    await add_order(db, session, pizza)

    r = await _load(client, session)

    [line] = r.json()["data"]["items"]
    assert line["isSplit"] is False
    assert line["splitPrice"] is None
    assert r.json()["data"]["warnings"] == []


async def test_load_cart_resolved_split_degrades_with_warning(client, db):
    session, pizza = await _session_with_item(db)
    split = await add_split(db, session, pizza, status=SplitBillStatus.RESOLVED)
    order = await add_order(db, session, pizza, split_bill_id=split.id)

    r = await _load(client, session)

    [line] = r.json()["data"]["items"]
    assert line["isSplit"] is False
    assert r.json()["data"]["warnings"] == [f"split_bill_missing:{order.id}"]


async def test_load_cart_removes_only_carts_older_than_a_day(client, db):
    session, pizza = await _session_with_item(db)
    stale = await add_order(db, session, pizza, age_hours=25)
    fresh = await add_order(db, session, pizza, age_hours=1)
    confirmed_old = await add_order(db, session, pizza, age_hours=30, status=OrderStatus.PLACED)

    r = await _load(client, session)

    assert [line["id"] for line in r.json()["data"]["items"]] == [str(fresh.id)]
    remaining = {o.id for o in (await db.execute(select(Order))).scalars().all()}
    assert stale.id not in remaining
    assert fresh.id in remaining
    assert confirmed_old.id in remaining


async def test_load_cart_survives_cleanup_failure(client, db, monkeypatch):
    session, pizza = await _session_with_item(db)
    await add_order(db, session, pizza, age_hours=2)

    async def locked(*args, **kwargs):
        raise OperationalError("DELETE FROM orders", {}, Exception("database is locked"))

    monkeypatch.setattr(crud.order, "delete_cart_older_than", locked)

    r = await _load(client, session)

    assert r.status_code == 200
    assert len(r.json()["data"]["items"]) == 1
    assert r.json()["data"]["warnings"] == ["cleanup_failed"]


async def test_load_cart_filters_by_diner_and_sorts_newest_first(client, db):
    session, pizza = await _session_with_item(db)
    older = await add_order(db, session, pizza, age_hours=3, diner_name="Ana")
    newer = await add_order(db, session, pizza, age_hours=1, diner_name="Ana")
    await add_order(db, session, pizza, diner_name="Bia")

    r = await _load(client, session, dinerName="Ana")
    posted = await client.post("/api/cart/load", json={"sessionId": str(session.id), "dinerName": "Ana"})

    assert [line["id"] for line in r.json()["data"]["items"]] == [str(newer.id), str(older.id)]
    assert posted.json()["data"] == r.json()["data"]


async def test_load_cart_unknown_session(client):
    r = await client.get("/api/cart/load", params={"sessionId": str(uuid.uuid4())})

    assert r.status_code == 404


async def test_add_to_cart_merges_identical_lines(client, db):
    session, pizza = await _session_with_item(db)
    payload = {"sessionId": str(session.id), "menuItemId": str(pizza.id), "quantity": 1, "dinerName": "Ana"}

    first = await client.post("/api/cart/add", json=payload)
    second = await client.post("/api/cart/add", json={**payload, "quantity": 2})
    with_notes = await client.post("/api/cart/add", json={**payload, "notes": "sem cebola"})

    assert first.status_code == 201
    assert first.json()["message"] == "Item adicionado ao carrinho"
    assert second.json()["message"] == "Quantidade atualizada"
    assert second.json()["data"]["id"] == first.json()["data"]["id"]
    assert second.json()["data"]["quantity"] == 3
    assert with_notes.json()["data"]["id"] != first.json()["data"]["id"]


async def test_add_unavailable_item_is_rejected(client, db):
    session, _ = await _session_with_item(db)
    sold_out = await create_menu_item(db, "Lagosta", "120.00", available=False)

    r = await client.post("/api/cart/add", json={"sessionId": str(session.id), "menuItemId": str(sold_out.id)})

    assert r.status_code == 400
    assert r.json()["success"] is False


async def test_add_to_cart_validates_quantity(client, db):
    session, pizza = await _session_with_item(db)

    r = await client.post(
        "/api/cart/add", json={"sessionId": str(session.id), "menuItemId": str(pizza.id), "quantity": 0}
    )

    assert r.status_code == 400
    assert r.json()["error"].startswith("Dados inválidos: quantity")


async def test_update_cart_line_and_remove_with_zero(client, db):
    session, pizza = await _session_with_item(db)
    order = await add_order(db, session, pizza)

    updated = await client.post("/api/cart/update", json={"orderId": str(order.id), "quantity": 4})
    removed = await client.post("/api/cart/update", json={"orderId": str(order.id), "quantity": 0})

    assert updated.json()["data"]["quantity"] == 4
    assert removed.status_code == 200
    assert removed.json()["data"] is None
    assert (await db.execute(select(Order).where(Order.id == order.id))).scalars().first() is None


async def test_update_confirmed_order_is_rejected(client, db):
    session, pizza = await _session_with_item(db)
    order = await add_order(db, session, pizza, status=OrderStatus.PLACED)

    r = await client.post("/api/cart/update", json={"orderId": str(order.id), "quantity": 3})

    assert r.status_code == 400


async def test_clear_removes_only_the_diner_cart_lines(client, db):
    session, pizza = await _session_with_item(db)
    await add_order(db, session, pizza, diner_name="Ana")
    bia = await add_order(db, session, pizza, diner_name="Bia")
    placed = await add_order(db, session, pizza, status=OrderStatus.PLACED)

    cleared = await client.post("/api/cart/clear", json={"sessionId": str(session.id), "dinerName": "Ana"})

    assert cleared.json()["data"]["deletedCount"] == 1
    remaining = (await db.execute(select(Order.id))).scalars().all()
    assert sorted(remaining) == sorted([bia.id, placed.id])


async def test_manual_cleanup_only_removes_cart_lines_older_than_a_day(client, db):
    session, pizza = await _session_with_item(db)
    await add_order(db, session, pizza, age_hours=25)
    fresh = await add_order(db, session, pizza, age_hours=1)
    old_placed = await add_order(db, session, pizza, status=OrderStatus.PLACED, age_hours=30)

    cleaned = await client.post("/api/cart/cleanup", json={"sessionId": str(session.id)})

    assert cleaned.status_code == 200
    assert cleaned.json()["data"]["deletedCount"] == 1
    remaining = (await db.execute(select(Order.id))).scalars().all()
    assert sorted(remaining) == sorted([fresh.id, old_placed.id])


async def test_manual_cleanup_unknown_session(client):
    r = await client.post("/api/cart/cleanup", json={"sessionId": str(uuid.uuid4())})

    assert r.status_code == 404


async def test_create_split_links_orders(client, db):
    session, pizza = await _session_with_item(db)
    order = await add_order(db, session, pizza, is_shared=True)

    r = await client.post(
        "/api/splits/create",
        json={
            "sessionId": str(session.id),
            "menuItemId": str(pizza.id),
            "originalPrice": 50.0,
            "splitCount": 3,
            "participants": ["Ana", "Bia", "Caio"],
            "orderIds": [str(order.id)],
        },
    )

    assert r.status_code == 201
    assert r.json()["data"]["splitPrice"] == 16.67
    loaded = await _load(client, session)
    [line] = loaded.json()["data"]["items"]
    assert line["isSplit"] is True
    assert line["splitBillId"] == r.json()["data"]["id"]

    resolved = await client.post(f"/api/splits/{r.json()['data']['id']}/resolve")
    assert resolved.json()["data"]["status"] == "resolved"
    reloaded = await _load(client, session)
    assert reloaded.json()["data"]["items"][0]["isSplit"] is False
