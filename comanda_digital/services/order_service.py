# comanda_digital/services/order_service.py
import logging
import uuid
from typing import List, Optional, Tuple

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital import crud
from comanda_digital.core.exceptions import NotFoundError, ValidationError
from comanda_digital.db.models.audit_log import AuditAction
from comanda_digital.db.models.notification import NotificationPriority, NotificationType
from comanda_digital.db.models.order import BILLABLE_STATUSES, Order, OrderStatus
from comanda_digital.db.models.session import SessionStatus
from comanda_digital.db.models.staff import Staff
from comanda_digital.schemas.order import Order as OrderSchema
from comanda_digital.services import audit_service, notification_service
from comanda_digital.services.redis_service import CHANNEL_ORDERS, publish_event
from comanda_digital.services.side_effects import run_isolated

logger = logging.getLogger(__name__)

HISTORY_STATUSES = BILLABLE_STATUSES + (OrderStatus.CANCELLED,)


def to_order_schema(order: Order, table_number: Optional[str] = None) -> OrderSchema:
    menu_item = order.menu_item
    return OrderSchema(
        id=order.id,
        session_id=order.session_id,
        table_number=table_number,
        menu_item_id=order.menu_item_id,
        name=menu_item.name if menu_item else "Item desconhecido",
        price=menu_item.price if menu_item else 0,
        quantity=order.quantity,
        status=order.status,
        notes=order.notes,
        diner_name=order.diner_name,
        split_bill_id=order.split_bill_id,
        created_at=order.created_at,
    )


async def confirm_cart(db: AsyncSession, *, session_id: uuid.UUID) -> List[Order]:
    """Envia à cozinha todos os itens do carrinho da sessão (cart -> placed)."""
    session = await crud.session.get(db, session_id)
    if session is None:
        raise NotFoundError("Sessão não encontrada")
    if session.status != SessionStatus.ACTIVE:
        raise ValidationError("Sessão não está ativa")
    cart = await crud.order.get_by_session(db, session_id=session_id, statuses=[OrderStatus.CART])
    if not cart:
        raise ValidationError("Carrinho vazio")
    for order in cart:
        order.status = OrderStatus.PLACED
    await db.flush()
    await db.commit()
    logger.info(f"{len(cart)} pedido(s) confirmados na sessão {session_id}")
    await publish_event(CHANNEL_ORDERS, "orders_placed", {"session_id": str(session_id), "count": len(cart)})
    return cart


async def get_confirmed(db: AsyncSession, *, session_id: uuid.UUID) -> List[Order]:
    session = await crud.session.get(db, session_id)
    if session is None:
        raise NotFoundError("Sessão não encontrada")
    if session.status == SessionStatus.CANCELLED:
        return []
    return await crud.order.get_by_session(db, session_id=session_id, statuses=BILLABLE_STATUSES)


async def get_history(db: AsyncSession, *, session_id: uuid.UUID) -> List[Order]:
    if await crud.session.get(db, session_id) is None:
        raise NotFoundError("Sessão não encontrada")
    return await crud.order.get_by_session(db, session_id=session_id, statuses=HISTORY_STATUSES)


async def kitchen_queue(db: AsyncSession) -> List[Tuple[Order, str]]:
    return await crud.order.get_kitchen_queue(db)


async def update_status(
    db: AsyncSession,
    *,
    order_id: uuid.UUID,
    new_status: OrderStatus,
    staff: Staff,
    request: Optional[Request] = None,
) -> Order:
    """Só avança o pedido; chegar em "ready" avisa a equipe para servir."""
    order = await crud.order.get(db, order_id)
    if order is None:
        raise NotFoundError("Pedido não encontrado")
    old_status = OrderStatus(order.status)
    if not order.can_transition_to(new_status):
        raise ValidationError(f"Não é possível mudar status de \"{old_status.value}\" para \"{new_status.value}\"")
    order.status = new_status
    await db.flush()
    await db.commit()
    logger.info(f"Pedido {order.id}: {old_status.value} -> {new_status.value} ({staff.staff_id})")

    if new_status == OrderStatus.READY:
        _, table_number = await crud.session.get_with_table_number(db, order.session_id)
        item_name = order.menu_item.name if order.menu_item else "Pedido"
        await run_isolated(
            db,
            "notificação kitchen_ready",
            lambda side_db: notification_service.notify(
                side_db,
                session_id=order.session_id,
                type=NotificationType.KITCHEN_READY,
                title="Pedido pronto",
                message=f"{item_name} x{order.quantity} pronto para a Mesa {table_number}",
                priority=NotificationPriority.HIGH,
                meta={"order_id": str(order.id), "table_number": table_number},
            ),
        )
    await run_isolated(
        db,
        "auditoria order_status_change",
        lambda side_db: audit_service.log_action(
            side_db,
            action=AuditAction.ORDER_STATUS_CHANGE,
            session_id=order.session_id,
            details={"order_id": str(order.id), "from": old_status.value, "to": new_status.value},
            performed_by=staff.staff_id,
            request=request,
        ),
    )
    await publish_event(
        CHANNEL_ORDERS, "order_status_changed", {"order_id": str(order.id), "status": new_status.value}
    )
    return order


async def list_for_session(
    db: AsyncSession, *, session_id: uuid.UUID, status: Optional[OrderStatus] = None
) -> List[Order]:
    statuses = [status] if status is not None else None
    return await crud.order.get_by_session(db, session_id=session_id, statuses=statuses)
