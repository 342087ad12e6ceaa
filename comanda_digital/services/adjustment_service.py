# comanda_digital/services/adjustment_service.py
import logging
import uuid
from typing import List, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital import crud
from comanda_digital.core.exceptions import NotFoundError, ValidationError
from comanda_digital.core.utils import utcnow
from comanda_digital.db.models.audit_log import AuditAction
from comanda_digital.db.models.discount import DiscountType
from comanda_digital.db.models.notification import NotificationPriority, NotificationType
from comanda_digital.db.models.order import VOIDABLE_STATUSES
from comanda_digital.db.models.session import SessionStatus
from comanda_digital.db.models.staff import Staff
from comanda_digital.schemas.adjustment import BillAdjustmentResult, DiscountIn
from comanda_digital.schemas.common import SideEffects
from comanda_digital.services import audit_service, billing_service, notification_service
from comanda_digital.services.redis_service import CHANNEL_TABLES, publish_event
from comanda_digital.services.side_effects import run_isolated

logger = logging.getLogger(__name__)

DEFAULT_REASON = "manager_override"


def describe(voided: int, discount: Optional[DiscountIn]) -> str:
    parts = []
    if voided:
        parts.append(f"{voided} item(ns) estornado(s)")
    if discount is not None:
        if discount.type == DiscountType.PERCENTAGE:
            parts.append(f"desconto de {discount.amount}%")
        else:
            parts.append(f"desconto de R$ {discount.amount}")
    return "Ajuste do gerente: " + ", ".join(parts)


async def adjust_bill(
    db: AsyncSession,
    *,
    session_id: uuid.UUID,
    voids: List[uuid.UUID],
    discount: Optional[DiscountIn],
    reason: Optional[str],
    staff: Staff,
    request: Optional[Request] = None,
) -> BillAdjustmentResult:
    """
    Ajuste de conta pelo gerente: estorna pedidos confirmados e/ou concede desconto,
    numa única transação. Auditoria e notificação vêm depois, isoladas.
    """
    order_ids = list(dict.fromkeys(voids))
    if not order_ids and discount is None:
        raise ValidationError("Nenhum ajuste informado")

    session, table_number = await crud.session.get_with_table_number(db, session_id)
    if session is None or session.status != SessionStatus.ACTIVE:
        raise NotFoundError("Sessão ativa não encontrada")

    original = await billing_service.get_session_totals(db, session_id=session.id)

    orders = {o.id: o for o in await crud.order.get_many(db, session_id=session.id, ids=order_ids)}
    missing = [str(i) for i in order_ids if i not in orders]
    if missing:
        raise ValidationError(f"Pedido(s) não encontrado(s) nesta sessão: {', '.join(missing)}")
    not_billed = [str(o.id) for o in orders.values() if o.status not in VOIDABLE_STATUSES]
    if not_billed:
        raise ValidationError(f"Só pedidos confirmados podem ser estornados: {', '.join(not_billed)}")

    reason = reason or DEFAULT_REASON
    performed_by = staff.staff_id
    await crud.order.void(db, orders=[orders[i] for i in order_ids], when=utcnow(), reason=reason)
    if discount is not None:
        await crud.discount.create(
            db, session_id=session.id, type=discount.type, amount=discount.amount, applied_by=performed_by, reason=reason
        )
    await db.commit()

    totals = await billing_service.get_session_totals(db, session_id=session.id)
    logger.info(
        f"Conta da mesa {table_number} ajustada por {performed_by}: "
        f"{len(order_ids)} estorno(s), total {original.total} -> {totals.total}"
    )

    details = {
        "voids": [str(i) for i in order_ids],
        "discount": {"type": discount.type.value, "amount": str(discount.amount)} if discount else None,
        "reason": reason,
        "table_number": table_number,
        "original_total": str(original.total),
        "new_total": str(totals.total),
    }
    audit_logged = await run_isolated(
        db,
        "auditoria manager_bill_adjustment",
        lambda side_db: audit_service.log_action(
            side_db,
            action=AuditAction.MANAGER_BILL_ADJUSTMENT,
            session_id=session.id,
            details=details,
            performed_by=performed_by,
            request=request,
        ),
    )
    notification_created = await run_isolated(
        db,
        "notificação bill_adjustment",
        lambda side_db: notification_service.notify(
            side_db,
            session_id=session.id,
            type=NotificationType.BILL_ADJUSTMENT,
            title="Conta ajustada",
            message=describe(len(order_ids), discount),
            priority=NotificationPriority.HIGH,
            meta={**details, "adjusted_by": performed_by},
        ),
    )
    await publish_event(CHANNEL_TABLES, "bill_adjusted", {"session_id": str(session.id), "table_number": table_number})

    return BillAdjustmentResult(
        session_id=session.id,
        table_number=table_number,
        voided_order_ids=order_ids,
        discount=discount,
        original_total=original.total,
        subtotal=totals.subtotal,
        discount_amount=totals.discount,
        vat_amount=totals.tax,
        new_total=totals.total,
        side_effects=SideEffects(audit_logged=audit_logged, notification_created=notification_created),
    )
