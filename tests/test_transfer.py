import uuid

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from comanda_digital.db.models import AuditAction, AuditLog, Notification, NotificationType, SessionStatus
from comanda_digital.services import audit_service, transfer_service

from factories import create_table, open_session

URL = "/api/tables/transfer"


async def _occupied_and_free(db, pin="4321"):
    source = await create_table(db, "1")
    destination = await create_table(db, "2")
    session = await open_session(db, source, pin=pin)
    return source, destination, session


def _payload(source, destination, session):
    return {
        "sourceTableId": str(source.id),
        "destinationTableId": str(destination.id),
        "sessionId": str(session.id),
    }


async def test_transfer_moves_session_and_pin(client, db, waiter_headers):
    source, destination, session = await _occupied_and_free(db)

    r = await client.post(URL, json=_payload(source, destination, session), headers=waiter_headers)

    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "Mesa transferida com sucesso de 1 para 2"
    data = body["data"]
    assert data["sourceTable"]["occupied"] is False
    assert data["sourceTable"]["currentPin"] is None
    assert data["destinationTable"]["occupied"] is True
    assert data["destinationTable"]["currentPin"] == "4321"
    assert data["session"]["tableId"] == str(destination.id)
    assert data["session"]["tableNumber"] == "2"
    assert data["sideEffects"] == {"auditLogged": True, "notificationCreated": True}

    await db.refresh(source)
    await db.refresh(destination)
    await db.refresh(session)
    assert source.occupied is False
    assert source.current_pin is None
    assert source.current_session_id is None
    assert destination.occupied is True
    assert destination.current_pin == "4321"
    assert destination.current_session_id == session.id
    assert session.table_id == destination.id
    assert session.status == SessionStatus.ACTIVE


async def test_transfer_writes_audit_and_notification(client, db, waiter_headers):
    source, destination, session = await _occupied_and_free(db)

    r = await client.post(URL, json=_payload(source, destination, session), headers=waiter_headers)
    assert r.status_code == 200

    audit = (await db.execute(select(AuditLog).where(AuditLog.session_id == session.id))).scalars().all()
    assert [entry.action for entry in audit] == [AuditAction.TABLE_TRANSFER]
    assert audit[0].details["source_table_number"] == "1"
    assert audit[0].details["destination_table_number"] == "2"
    assert audit[0].details["transferred_by"] == "WAITER01"

    notifications = (
        (await db.execute(select(Notification).where(Notification.session_id == session.id))).scalars().all()
    )
    assert len(notifications) == 1
    assert notifications[0].type == NotificationType.TABLE_TRANSFER
    assert notifications[0].meta["destination_table"] == "2"


async def test_transfer_requires_staff_token(client, db):
    source, destination, session = await _occupied_and_free(db)

    r = await client.post(URL, json=_payload(source, destination, session))

    assert r.status_code == 401
    assert r.json() == {"success": False, "error": "Autenticação necessária"}


async def test_transfer_missing_field_is_validation_error(client, db, waiter_headers):
    source, destination, _ = await _occupied_and_free(db)

    r = await client.post(
        URL,
        json={"sourceTableId": str(source.id), "destinationTableId": str(destination.id)},
        headers=waiter_headers,
    )

    assert r.status_code == 400
    assert r.json()["success"] is False
    assert "sessionId" in r.json()["error"]


async def test_transfer_to_same_table_is_rejected(client, db, waiter_headers):
    source, _, session = await _occupied_and_free(db)

    r = await client.post(URL, json=_payload(source, source, session), headers=waiter_headers)

    assert r.status_code == 400


async def test_transfer_from_free_table_is_conflict(client, db, waiter_headers):
    source = await create_table(db, "1")
    other = await create_table(db, "3")
    destination = await create_table(db, "2")
    session = await open_session(db, other)

    r = await client.post(URL, json=_payload(source, destination, session), headers=waiter_headers)

    assert r.status_code == 400
    assert r.json()["error"] == "Mesa de origem não está ocupada"


async def test_transfer_to_occupied_table_is_conflict(client, db, waiter_headers):
    source = await create_table(db, "1")
    destination = await create_table(db, "2")
    session = await open_session(db, source, pin="1111")
    await open_session(db, destination, pin="2222")

    r = await client.post(URL, json=_payload(source, destination, session), headers=waiter_headers)

    assert r.status_code == 400
    assert r.json()["error"] == "Mesa de destino já está ocupada"
    await db.refresh(source)
    await db.refresh(session)
    assert source.current_pin == "1111"
    assert session.table_id == source.id


async def test_transfer_unknown_tables_and_session_are_not_found(client, db, waiter_headers):
    source, destination, session = await _occupied_and_free(db)
    missing = uuid.uuid4()

    r = await client.post(
        URL,
        json={"sourceTableId": str(missing), "destinationTableId": str(destination.id), "sessionId": str(session.id)},
        headers=waiter_headers,
    )
    assert r.status_code == 404
    assert r.json()["error"] == "Mesa de origem não encontrada"

    r = await client.post(
        URL,
        json={"sourceTableId": str(source.id), "destinationTableId": str(missing), "sessionId": str(session.id)},
        headers=waiter_headers,
    )
    assert r.status_code == 404
    assert r.json()["error"] == "Mesa de destino não encontrada"

    r = await client.post(
        URL,
        json={"sourceTableId": str(source.id), "destinationTableId": str(destination.id), "sessionId": str(missing)},
        headers=waiter_headers,
    )
    assert r.status_code == 404
    assert r.json()["error"] == "Sessão não encontrada"


async def test_transfer_session_from_another_table_is_conflict(client, db, waiter_headers):
    source = await create_table(db, "1")
    elsewhere = await create_table(db, "3")
    destination = await create_table(db, "2")
    await open_session(db, source)
    foreign = await open_session(db, elsewhere)

    r = await client.post(URL, json=_payload(source, destination, foreign), headers=waiter_headers)

    assert r.status_code == 400
    assert r.json()["error"] == "Sessão não pertence à mesa de origem"


async def test_transfer_failure_in_last_step_rolls_back_everything(client, db, waiter_headers, monkeypatch):
    source, destination, session = await _occupied_and_free(db)

    async def broken(*args, **kwargs):
        raise SQLAlchemyError("disk I/O error")

    monkeypatch.setattr(transfer_service, "_occupy_destination", broken)

    r = await client.post(URL, json=_payload(source, destination, session), headers=waiter_headers)

    assert r.status_code == 500
    assert r.json()["success"] is False
    assert "ocupar mesa de destino" in r.json()["error"]

    await db.refresh(source)
    await db.refresh(destination)
    await db.refresh(session)
    assert source.occupied is True
    assert source.current_pin == "4321"
    assert source.current_session_id == session.id
    assert destination.occupied is False
    assert destination.current_session_id is None
    assert session.table_id == source.id

    audit = (await db.execute(select(AuditLog))).scalars().all()
    assert audit == []


async def test_transfer_survives_audit_failure(client, db, waiter_headers, monkeypatch):
    source, destination, session = await _occupied_and_free(db)

    async def audit_down(*args, **kwargs):
        raise RuntimeError("audit store unavailable")

    monkeypatch.setattr(audit_service, "log_action", audit_down)

    r = await client.post(URL, json=_payload(source, destination, session), headers=waiter_headers)

    assert r.status_code == 200
    assert r.json()["data"]["sideEffects"] == {"auditLogged": False, "notificationCreated": True}
    await db.refresh(session)
    assert session.table_id == destination.id
