from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError, PendingRollbackError

from comanda_digital.core.security import get_password_hash
from comanda_digital.db.models import PaymentNotification
from comanda_digital.services import retry, staff_service

from factories import auth_headers, create_staff, create_table, open_session


async def test_login_without_password(client, waiter):
    r = await client.post("/api/staff/login", json={"staffId": "WAITER01"})

    assert r.status_code == 200
    data = r.json()["data"]
    assert data["tokenType"] == "bearer"
    assert data["staff"]["staffId"] == "WAITER01"

    me = await client.get("/api/staff/assigned-tables", headers={"Authorization": f"Bearer {data['accessToken']}"})
    assert me.status_code == 200


async def test_login_checks_password_when_set(client, db):
    await create_staff(db, staff_id="CASHIER1", name="Gil", hashed_password=get_password_hash("segredo"))

    ok = await client.post("/api/staff/login", json={"staffId": "CASHIER1", "password": "segredo"})
    wrong = await client.post("/api/staff/login", json={"staffId": "CASHIER1", "password": "errada"})
    unknown = await client.post("/api/staff/login", json={"staffId": "NOBODY"})

    assert ok.status_code == 200
    assert wrong.status_code == 401
    assert wrong.json() == {"success": False, "error": "Senha incorreta"}
    assert unknown.status_code == 401


async def test_inactive_staff_token_is_rejected(client, db):
    staff = await create_staff(db, staff_id="OLD01", name="Ivo", is_active=False)

    r = await client.get("/api/staff/assigned-tables", headers=auth_headers(staff))

    assert r.status_code == 401


async def test_garbage_token_is_rejected(client):
    r = await client.get("/api/staff/assigned-tables", headers={"Authorization": "Bearer nao-e-um-jwt"})

    assert r.status_code == 401
    assert r.json() == {"success": False, "error": "Token inválido"}


async def test_assigned_tables_lists_only_served_sessions(client, db, waiter, waiter_headers):
    mine = await open_session(db, await create_table(db, "1"), served_by=waiter.id)
    await open_session(db, await create_table(db, "2"))

    r = await client.get("/api/staff/assigned-tables", headers=waiter_headers)

    assert [s["id"] for s in r.json()["data"]] == [str(mine.id)]
    assert r.json()["data"][0]["tableNumber"] == "1"


async def test_manager_only_routes(client, waiter_headers, manager_headers):
    denied = await client.get("/api/admin/audit-logs", headers=waiter_headers)
    allowed = await client.get("/api/admin/audit-logs", headers=manager_headers)

    assert denied.status_code == 403
    assert allowed.status_code == 200


def test_backoff_is_exponential_and_capped():
    assert [retry.backoff_delay(n) for n in range(1, 6)] == [1, 2, 4, 5.0, 5.0]


async def test_with_retry_recovers_from_transient_errors(monkeypatch):
    sleeps = []
    calls = {"n": 0}

    async def fake_sleep(delay):
        sleeps.append(delay)

    async def flaky():
        calls["n"] += 1
        if calls["n"] < 3:
            raise OperationalError("SELECT 1", {}, ConnectionResetError("connection reset"))
        return "ok"

    monkeypatch.setattr(retry.asyncio, "sleep", fake_sleep)

    assert await retry.with_retry(flaky, "leitura") == "ok"
    assert sleeps == [1, 2]


async def test_with_retry_gives_up_after_max_attempts(monkeypatch):
    sleeps = []

    async def fake_sleep(delay):
        sleeps.append(delay)

    async def down():
        raise ConnectionError("network unreachable")

    monkeypatch.setattr(retry.asyncio, "sleep", fake_sleep)

    with pytest.raises(ConnectionError):
        await retry.with_retry(down, "leitura", max_retries=3)
    assert sleeps == [1, 2]


async def test_with_retry_does_not_repeat_other_errors(monkeypatch):
    calls = {"n": 0}

    async def broken():
        calls["n"] += 1
        raise ValueError("bad input")

    with pytest.raises(ValueError):
        await retry.with_retry(broken, "leitura")
    assert calls["n"] == 1


async def test_with_retry_runs_hook_before_each_new_attempt(monkeypatch):
    events = []

    async def fake_sleep(delay):
        events.append(f"sleep {delay}")

    async def hook():
        events.append("rollback")

    async def flaky():
        events.append("call")
        if events.count("call") < 3:
            raise OperationalError("SELECT 1", {}, ConnectionResetError("connection reset"))
        return "ok"

    monkeypatch.setattr(retry.asyncio, "sleep", fake_sleep)

    assert await retry.with_retry(flaky, "leitura", on_retry=hook) == "ok"
    assert events == ["call", "rollback", "sleep 1", "call", "rollback", "sleep 2", "call"]


@pytest.mark.parametrize("max_retries", [0, 1])
async def test_with_retry_honours_small_explicit_limits(monkeypatch, max_retries):
    sleeps = []
    calls = {"n": 0}

    async def fake_sleep(delay):
        sleeps.append(delay)

    async def down():
        calls["n"] += 1
        raise ConnectionError("network unreachable")

    monkeypatch.setattr(retry.asyncio, "sleep", fake_sleep)

    with pytest.raises(ConnectionError):
        await retry.with_retry(down, "leitura", max_retries=max_retries)
    assert calls["n"] == 1
    assert sleeps == []


async def test_payment_notifications_read_recovers_after_connection_drop(db, waiter, monkeypatch):
    table = await create_table(db, "7")
    session = await open_session(db, table, served_by=waiter.id)
    pending = PaymentNotification(
        session_id=session.id,
        table_number="7",
        subtotal=Decimal("50.00"),
        vat_amount=Decimal("7.00"),
        final_total=Decimal("57.00"),
    )
    db.add(pending)
    await db.commit()
    expected = [pending.id]

    real_execute, real_rollback = db.execute, db.rollback
    state = {"dropped": False, "needs_rollback": False, "rollbacks": 0}

    async def execute(*args, **kwargs):
        # Depois de uma queda, a sessão recusa consultas até o rollback
        if state["needs_rollback"]:
            raise PendingRollbackError("rollback pendente")
        if not state["dropped"]:
            state["dropped"] = state["needs_rollback"] = True
            raise OperationalError("SELECT", {}, ConnectionResetError("connection reset"))
        return await real_execute(*args, **kwargs)

    async def rollback():
        state["rollbacks"] += 1
        state["needs_rollback"] = False
        await real_rollback()

    async def fake_sleep(delay):
        pass

    monkeypatch.setattr(db, "execute", execute)
    monkeypatch.setattr(db, "rollback", rollback)
    monkeypatch.setattr(retry.asyncio, "sleep", fake_sleep)

    notifications = await staff_service.pending_payment_notifications(db, staff=waiter)

    assert [n.id for n in notifications] == expected
    assert state["rollbacks"] == 1
