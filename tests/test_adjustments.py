from decimal import Decimal

from sqlalchemy import select

from comanda_digital.db.models import (
    AuditAction,
    AuditLog,
    Discount,
    DiscountType,
    Notification,
    NotificationType,
    OrderStatus,
    SessionStatus,
)
from comanda_digital.services.billing_service import compute_totals

from factories import add_order, create_menu_item, create_table, open_session


async def _bill(db):
    """Mesa 7: 2 pizzas servidas (50,00) e um suco na cozinha (10,00)."""
    table = await create_table(db, "7")
    session = await open_session(db, table)
    pizza = await create_menu_item(db, "Pizza", "25.00")
    juice = await create_menu_item(db, "Suco", "10.00")
    served = await add_order(db, session, pizza, quantity=2, status=OrderStatus.SERVED)
    placed = await add_order(db, session, juice, status=OrderStatus.PLACED)
    return session, served, placed


def test_discount_is_taken_before_tax_and_capped_at_subtotal():
    lines = [(Decimal("100.00"), 1)]

    percent = compute_totals(lines, discounts=[(DiscountType.PERCENTAGE, Decimal("10"))])
    too_much = compute_totals(lines, discounts=[(DiscountType.FIXED, Decimal("150"))])

    assert (percent.discount, percent.tax, percent.total) == (Decimal("10.00"), Decimal("12.60"), Decimal("102.60"))
    assert (too_much.discount, too_much.tax, too_much.total) == (Decimal("100.00"), Decimal("0.00"), Decimal("0.00"))


async def test_voided_order_leaves_the_bill(client, db, manager_headers):
    session, _, placed = await _bill(db)

    r = await client.post(
        "/api/manager/adjust-bill",
        json={"sessionId": str(session.id), "voids": [str(placed.id)], "reason": "Item errado"},
        headers=manager_headers,
    )

    assert r.status_code == 200
    data = r.json()["data"]
    assert data["voidedOrderIds"] == [str(placed.id)]
    assert data["originalTotal"] == 68.4
    assert data["newTotal"] == 57.0
    assert data["sideEffects"] == {"auditLogged": True, "notificationCreated": True}

    total = await client.get(f"/api/sessions/{session.id}/total")
    assert total.json()["data"]["subtotal"] == 50.0
    assert total.json()["data"]["itemCount"] == 2
    await db.refresh(placed)
    assert placed.status == OrderStatus.VOIDED
    assert placed.void_reason == "Item errado"
    assert placed.voided_at is not None


async def test_percentage_discount_changes_totals(client, db, manager_headers):
    session, _, _ = await _bill(db)

    r = await client.post(
        "/api/manager/adjust-bill",
        json={"sessionId": str(session.id), "discount": {"type": "percentage", "amount": 10}},
        headers=manager_headers,
    )

    data = r.json()["data"]
    assert data["discountAmount"] == 6.0
    assert data["vatAmount"] == 7.56
    assert data["newTotal"] == 61.56
    total = await client.get(f"/api/sessions/{session.id}/total")
    assert total.json()["data"]["discount"] == 6.0
    assert total.json()["data"]["total"] == 61.56
    [discount] = (await db.execute(select(Discount))).scalars().all()
    assert discount.applied_by == "MANAGER01"
    assert discount.reason == "manager_override"


async def test_void_and_fixed_discount_together_are_audited(client, db, manager_headers):
    session, _, placed = await _bill(db)

    r = await client.post(
        "/api/manager/adjust-bill",
        json={
            "sessionId": str(session.id),
            "voids": [str(placed.id)],
            "discount": {"type": "fixed", "amount": 20},
        },
        headers=manager_headers,
    )

    assert r.json()["data"]["newTotal"] == 34.2
    [entry] = (await db.execute(select(AuditLog))).scalars().all()
    assert entry.action == AuditAction.MANAGER_BILL_ADJUSTMENT
    assert entry.performed_by == "MANAGER01"
    assert entry.details["voids"] == [str(placed.id)]
    assert entry.details["discount"] == {"type": "fixed", "amount": "20"}
    assert entry.details["original_total"] == "68.40"
    assert entry.details["new_total"] == "34.20"
    [notification] = (await db.execute(select(Notification))).scalars().all()
    assert notification.type == NotificationType.BILL_ADJUSTMENT
    assert notification.message == "Ajuste do gerente: 1 item(ns) estornado(s), desconto de R$ 20"


async def test_adjust_bill_is_manager_only(client, db, waiter_headers):
    session, _, placed = await _bill(db)

    r = await client.post(
        "/api/manager/adjust-bill",
        json={"sessionId": str(session.id), "voids": [str(placed.id)]},
        headers=waiter_headers,
    )

    assert r.status_code == 403
    await db.refresh(placed)
    assert placed.status == OrderStatus.PLACED


async def test_adjust_bill_needs_something_to_adjust(client, db, manager_headers):
    session, _, _ = await _bill(db)

    r = await client.post("/api/manager/adjust-bill", json={"sessionId": str(session.id)}, headers=manager_headers)

    assert r.status_code == 400
    assert r.json()["error"] == "Nenhum ajuste informado"


async def test_percentage_over_hundred_is_rejected(client, db, manager_headers):
    session, _, _ = await _bill(db)

    r = await client.post(
        "/api/manager/adjust-bill",
        json={"sessionId": str(session.id), "discount": {"type": "percentage", "amount": 120}},
        headers=manager_headers,
    )

    assert r.status_code == 400


async def test_only_billed_orders_of_the_session_can_be_voided(client, db, manager_headers):
    session, served, _ = await _bill(db)
    cart = await add_order(db, session, served.menu_item, status=OrderStatus.CART)
    other_table = await create_table(db, "8")
    other_session = await open_session(db, other_table)
    foreign = await add_order(db, other_session, served.menu_item, status=OrderStatus.SERVED)

    in_cart = await client.post(
        "/api/manager/adjust-bill",
        json={"sessionId": str(session.id), "voids": [str(cart.id)]},
        headers=manager_headers,
    )
    elsewhere = await client.post(
        "/api/manager/adjust-bill",
        json={"sessionId": str(session.id), "voids": [str(served.id), str(foreign.id)]},
        headers=manager_headers,
    )

    assert in_cart.status_code == 400
    assert elsewhere.status_code == 400
    await db.refresh(served)
    assert served.status == OrderStatus.SERVED


async def test_adjust_bill_requires_active_session(client, db, manager_headers):
    session, served, _ = await _bill(db)
    session.status = SessionStatus.COMPLETED
    await db.commit()

    r = await client.post(
        "/api/manager/adjust-bill",
        json={"sessionId": str(session.id), "voids": [str(served.id)]},
        headers=manager_headers,
    )

    assert r.status_code == 404
    assert r.json()["error"] == "Sessão ativa não encontrada"


async def test_kitchen_cannot_void_an_order(client, db, waiter_headers):
    _, _, placed = await _bill(db)

    r = await client.post(
        "/api/orders/update-status", json={"orderId": str(placed.id), "status": "voided"}, headers=waiter_headers
    )

    assert r.status_code == 400
