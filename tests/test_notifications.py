import uuid

from comanda_digital.db.models import WaiterRequest

from factories import create_table, open_session


async def _create(client, session, type_="customer_help", **extra):
    return await client.post(
        "/api/notifications/",
        json={"sessionId": str(session.id), "type": type_, "title": "Chamado", "message": "Mesa chamando", **extra},
    )


async def test_client_notification_round_trip(client, db, waiter_headers):
    table = await create_table(db, "6")
    session = await open_session(db, table)

    created = await _create(client, session, priority="high", metadata={"source": "qr"})
    listed = await client.get("/api/notifications/", headers=waiter_headers)

    assert created.status_code == 201
    assert created.json()["data"]["metadata"] == {"source": "qr"}
    assert created.json()["data"]["status"] == "pending"
    assert listed.json()["data"]["count"] == 1
    assert listed.json()["data"]["notifications"][0]["tableNumber"] == "6"


async def test_client_cannot_create_internal_notification_types(client, db):
    table = await create_table(db, "6")
    session = await open_session(db, table)

    r = await _create(client, session, type_="table_transfer")

    assert r.status_code == 400
    assert "Tipo de notificação inválido" in r.json()["error"]


async def test_notification_status_is_monotonic(client, db, waiter_headers):
    table = await create_table(db, "6")
    session = await open_session(db, table)
    notification_id = (await _create(client, session)).json()["data"]["id"]
    url = f"/api/notifications/{notification_id}/acknowledge"

    acked = await client.post(url, json={"action": "acknowledge"}, headers=waiter_headers)
    acked_again = await client.post(url, json={"action": "acknowledge"}, headers=waiter_headers)
    resolved = await client.post(url, json={"action": "resolve", "staffMember": "Carla"}, headers=waiter_headers)
    back = await client.post(url, json={"action": "acknowledge"}, headers=waiter_headers)

    assert acked.json()["data"]["status"] == "acknowledged"
    assert acked.json()["data"]["acknowledgedBy"] == "Ana"
    assert acked_again.status_code == 400
    assert resolved.json()["data"]["status"] == "resolved"
    assert resolved.json()["data"]["resolvedBy"] == "Carla"
    assert resolved.json()["data"]["acknowledgedBy"] == "Ana"
    assert back.status_code == 400


async def test_acknowledge_unknown_notification(client, waiter_headers):
    r = await client.post(
        f"/api/notifications/{uuid.uuid4()}/acknowledge", json={"action": "resolve"}, headers=waiter_headers
    )

    assert r.status_code == 404


async def test_customer_help_urgent_is_high_priority(client, db):
    table = await create_table(db, "6")
    session = await open_session(db, table)

    r = await client.post(
        "/api/customer/help", json={"sessionId": str(session.id), "helpType": "urgent", "dinerName": "Bia"}
    )

    assert r.status_code == 201
    data = r.json()["data"]
    assert data["priority"] == "high"
    assert data["type"] == "customer_help"
    assert data["title"] == "Ajuda urgente"
    assert data["message"] == "Bia na Mesa 6 precisa de ajuda"


async def test_waiter_request_is_listed_for_staff(client, db, waiter_headers):
    table = await create_table(db, "6")
    session = await open_session(db, table)

    created = await client.post(
        "/api/waiter/request", json={"sessionId": str(session.id), "requestType": "bill", "customerName": "Bia"}
    )
    listed = await client.get("/api/waiter/requests", headers=waiter_headers)

    assert created.status_code == 201
    assert created.json()["data"]["tableNumber"] == "6"
    assert [w["id"] for w in listed.json()["data"]] == [created.json()["data"]["id"]]
    stored = await db.get(WaiterRequest, uuid.UUID(created.json()["data"]["id"]))
    assert stored.customer_name == "Bia"
