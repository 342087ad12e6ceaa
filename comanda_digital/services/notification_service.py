# comanda_digital/services/notification_service.py
import logging
import uuid
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital import crud
from comanda_digital.core.exceptions import NotFoundError, ValidationError
from comanda_digital.core.utils import utcnow
from comanda_digital.db.models.notification import (
    CLIENT_NOTIFICATION_TYPES,
    Notification,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
)
from comanda_digital.db.models.order import OrderStatus
from comanda_digital.db.models.session import SessionStatus
from comanda_digital.schemas.notification import HelpRequest, NotificationCreate
from comanda_digital.services.redis_service import CHANNEL_NOTIFICATIONS, publish_event
from comanda_digital.services.side_effects import run_isolated

logger = logging.getLogger(__name__)


async def notify(
    db: AsyncSession,
    *,
    session_id: uuid.UUID,
    type: NotificationType,
    title: str,
    message: str,
    priority: NotificationPriority = NotificationPriority.MEDIUM,
    meta: Optional[Dict[str, Any]] = None,
) -> Notification:
    notification = await crud.notification.create(
        db, session_id=session_id, type=type, title=title, message=message, priority=priority, meta=meta
    )
    await publish_event(
        CHANNEL_NOTIFICATIONS,
        "notification_created",
        {"id": str(notification.id), "type": type.value, "session_id": str(session_id), "priority": priority.value},
    )
    return notification


async def create_from_client(db: AsyncSession, *, obj_in: NotificationCreate) -> Notification:
    """Notificações abertas pelo cliente; apenas os tipos de chamado são aceitos aqui."""
    if obj_in.type not in CLIENT_NOTIFICATION_TYPES:
        allowed = ", ".join(t.value for t in CLIENT_NOTIFICATION_TYPES)
        raise ValidationError(f"Tipo de notificação inválido. Permitidos: {allowed}")
    if await crud.session.get(db, obj_in.session_id) is None:
        raise NotFoundError("Sessão não encontrada")
    notification = await notify(
        db,
        session_id=obj_in.session_id,
        type=obj_in.type,
        title=obj_in.title,
        message=obj_in.message,
        priority=obj_in.priority,
        meta=obj_in.metadata,
    )
    await db.commit()
    return notification


async def request_help(db: AsyncSession, *, obj_in: HelpRequest) -> Notification:
    session, table_number = await crud.session.get_with_table_number(db, obj_in.session_id)
    if session is None:
        raise NotFoundError("Sessão não encontrada")
    if session.status != SessionStatus.ACTIVE:
        raise ValidationError("Sessão não está ativa")
    urgent = obj_in.help_type == "urgent"
    who = obj_in.diner_name or "Cliente"
    notification = await notify(
        db,
        session_id=session.id,
        type=NotificationType.CUSTOMER_HELP,
        title="Ajuda urgente" if urgent else "Ajuda solicitada",
        message=obj_in.message or f"{who} na Mesa {table_number} precisa de ajuda",
        priority=NotificationPriority.HIGH if urgent else NotificationPriority.MEDIUM,
        meta={"help_type": obj_in.help_type, "table_number": table_number, "diner_name": obj_in.diner_name},
    )
    await db.commit()
    return notification


async def acknowledge(
    db: AsyncSession, *, notification_id: uuid.UUID, action: str, staff_member: Optional[str]
) -> Notification:
    """
    Avança o status da notificação (pending -> acknowledged -> resolved, nunca para trás).
    Resolver um aviso de cozinha marca o pedido correspondente como servido.
    """
    notification = await crud.notification.get(db, notification_id)
    if notification is None:
        raise NotFoundError("Notificação não encontrada")

    new_status = NotificationStatus.RESOLVED if action == "resolve" else NotificationStatus.ACKNOWLEDGED
    if not notification.can_transition_to(new_status):
        raise ValidationError(
            f"Não é possível mudar a notificação de \"{notification.status.value}\" para \"{new_status.value}\""
        )

    now = utcnow()
    if new_status == NotificationStatus.ACKNOWLEDGED or notification.acknowledged_at is None:
        notification.acknowledged_at = now
        notification.acknowledged_by = staff_member
    if new_status == NotificationStatus.RESOLVED:
        notification.resolved_at = now
        notification.resolved_by = staff_member
    notification.status = new_status
    await db.commit()

    if new_status == NotificationStatus.RESOLVED and notification.type == NotificationType.KITCHEN_READY:
        order_ref = (notification.meta or {}).get("order_id")
        if order_ref:
            await run_isolated(db, "marcar pedido servido", lambda side_db: _mark_order_served(side_db, order_ref))
    return notification


async def _mark_order_served(db: AsyncSession, order_ref: str) -> None:
    order = await crud.order.get(db, uuid.UUID(str(order_ref)))
    if order is None:
        raise NotFoundError(f"Pedido {order_ref} não encontrado")
    if order.can_transition_to(OrderStatus.SERVED):
        order.status = OrderStatus.SERVED
        await db.flush()
