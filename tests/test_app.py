import json

from comanda_digital.services import redis_service

from factories import create_menu_item, create_table


async def test_health(client):
    r = await client.get("/health")

    assert r.status_code == 200
    assert r.json() == {
        "success": True,
        "status": "healthy",
        "database": "connected",
        "redis": "disabled",
        "environment": "test",
    }


async def test_root(client):
    r = await client.get("/")

    assert r.json()["status"] == "operacional"


async def test_unknown_route_uses_error_envelope(client):
    r = await client.get("/api/nao-existe")

    assert r.status_code == 404
    assert r.json()["success"] is False
    assert "error" in r.json()


async def test_menu_only_lists_available_items(client, db):
    await create_menu_item(db, "Pizza", "30.00")
    await create_menu_item(db, "Lasanha", "28.00", available=False)

    r = await client.get("/api/menu-items/")

    assert [i["name"] for i in r.json()["data"]] == ["Pizza"]
    assert r.json()["data"][0]["price"] == 30.0


async def test_menu_changes_are_manager_only(client, waiter_headers, manager_headers):
    payload = {"name": "Suco", "price": 8.5, "category": "Bebidas"}

    denied = await client.post("/api/menu-items/", json=payload, headers=waiter_headers)
    created = await client.post("/api/menu-items/", json=payload, headers=manager_headers)
    item_id = created.json()["data"]["id"]
    updated = await client.patch(f"/api/menu-items/{item_id}", json={"available": False}, headers=manager_headers)

    assert denied.status_code == 403
    assert created.status_code == 201
    assert updated.json()["data"]["available"] is False


async def test_create_table_rejects_duplicate_number(client, manager_headers):
    first = await client.post("/api/tables/", json={"tableNumber": "12", "capacity": 4}, headers=manager_headers)
    again = await client.post("/api/tables/", json={"tableNumber": "12"}, headers=manager_headers)
    listed = await client.get("/api/tables/")

    assert first.status_code == 201
    assert first.json()["data"]["state"] == "available"
    assert again.status_code == 400
    assert [t["tableNumber"] for t in listed.json()["data"]] == ["12"]


async def test_table_qrcode_is_png(client, db):
    table = await create_table(db, "5")

    r = await client.get(f"/api/tables/{table.id}/qrcode")

    assert r.status_code == 200
    assert r.headers["content-type"] == "image/png"
    assert r.content.startswith(b"\x89PNG")


class FakeRedis:
    def __init__(self):
        self.published = []

    async def publish(self, channel, message):
        self.published.append((channel, json.loads(message)))


async def test_publish_event_is_noop_when_redis_disabled():
    assert await redis_service.publish_event(redis_service.CHANNEL_TABLES, "table_opened", {}) is False


async def test_publish_event_sends_json(monkeypatch):
    fake = FakeRedis()
    monkeypatch.setattr(redis_service.redis_client, "enabled", True)
    monkeypatch.setattr(redis_service.redis_client, "_client", fake)

    sent = await redis_service.publish_event(redis_service.CHANNEL_ORDERS, "orders_placed", {"count": 2})

    assert sent is True
    assert fake.published == [("pedidos_status", {"event": "orders_placed", "count": 2})]
