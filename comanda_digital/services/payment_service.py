# comanda_digital/services/payment_service.py
import logging
import uuid
from decimal import Decimal
from typing import Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital import crud
from comanda_digital.core.exceptions import NotFoundError, ValidationError
from comanda_digital.core.utils import to_cents, utcnow
from comanda_digital.db.models.audit_log import AuditAction
from comanda_digital.db.models.notification import NotificationPriority, NotificationType
from comanda_digital.db.models.payment_notification import (
    PaymentNotification,
    PaymentNotificationStatus,
    PaymentType,
)
from comanda_digital.db.models.session import DiningSession, PaymentMethod, PaymentStatus, SessionStatus
from comanda_digital.schemas.payment import DinerPaymentStatus, IndividualPaymentStatus, PaymentSummary
from comanda_digital.services import audit_service, billing_service, notification_service
from comanda_digital.services.redis_service import CHANNEL_TABLES, publish_event
from comanda_digital.services.session_service import close_session
from comanda_digital.services.side_effects import run_isolated

logger = logging.getLogger(__name__)


async def _already_paid(db: AsyncSession, session_id: uuid.UUID) -> Decimal:
    """Subtotal + IVA das partes individuais já pagas; a gorjeta de cada cliente fica de fora."""
    rows = await crud.payment_notification.get_by_session(db, session_id=session_id, payment_type=PaymentType.INDIVIDUAL)
    return sum(
        (r.subtotal + r.vat_amount for r in rows if r.status == PaymentNotificationStatus.COMPLETED), Decimal("0")
    )


def _amount_due(total: Decimal, already_paid: Decimal) -> Decimal:
    return max(total - already_paid, Decimal("0"))


async def _summary(db: AsyncSession, session, table_number: Optional[str], already_completed: bool = False) -> PaymentSummary:
    totals = await billing_service.get_session_totals(db, session_id=session.id)
    paid = await _already_paid(db, session.id)
    tip = to_cents(session.tip_amount or Decimal("0"))
    final_total = session.final_total if session.final_total is not None else _amount_due(totals.total, paid) + tip
    return PaymentSummary(
        session_id=session.id,
        table_number=table_number,
        subtotal=totals.subtotal,
        discount_amount=totals.discount,
        vat_amount=totals.tax,
        already_paid=paid,
        tip_amount=tip,
        final_total=final_total,
        payment_status=session.payment_status,
        session_status=session.status,
        payment_method=session.payment_method,
        payment_completed_at=session.payment_completed_at,
        already_completed=already_completed,
    )


def _individual_summary(
    session: DiningSession, table_number: Optional[str], row: PaymentNotification, already_completed: bool = False
) -> PaymentSummary:
    completed = row.status == PaymentNotificationStatus.COMPLETED
    return PaymentSummary(
        session_id=session.id,
        table_number=table_number,
        payment_type=PaymentType.INDIVIDUAL,
        diner_name=row.diner_name,
        subtotal=row.subtotal,
        vat_amount=row.vat_amount,
        tip_amount=row.tip_amount,
        final_total=row.final_total,
        payment_status=PaymentStatus.COMPLETED if completed else PaymentStatus.PENDING,
        session_status=session.status,
        payment_method=row.payment_method,
        payment_completed_at=row.completed_at,
        already_completed=already_completed,
    )


def _diner_names(session: DiningSession) -> list:
    names = []
    for diner in session.diners or []:
        name = diner.get("name")
        if name and name not in names:
            names.append(name)
    return names


async def request_payment(
    db: AsyncSession,
    *,
    session_id: uuid.UUID,
    tip_amount: Decimal,
    payment_type: PaymentType = PaymentType.TABLE,
    diner_name: Optional[str] = None,
) -> PaymentSummary:
    """Cliente pede a conta: congela a gorjeta, avisa a equipe e deixa o pagamento pendente."""
    session, table_number = await crud.session.get_with_table_number(db, session_id)
    if session is None:
        raise NotFoundError("Sessão não encontrada")
    if session.status != SessionStatus.ACTIVE:
        raise ValidationError("Sessão não está ativa")
    if session.payment_status == PaymentStatus.COMPLETED:
        raise ValidationError("Pagamento já foi concluído")
    if payment_type == PaymentType.INDIVIDUAL:
        return await _request_individual(
            db, session=session, table_number=table_number, tip=to_cents(tip_amount), diner_name=diner_name
        )

    totals = await billing_service.get_session_totals(db, session_id=session.id)
    if totals.item_count == 0:
        raise ValidationError("Nenhum pedido confirmado para pagar")
    tip = to_cents(tip_amount)
    final_total = _amount_due(totals.total, await _already_paid(db, session.id)) + tip
    session.tip_amount = tip
    session.payment_status = PaymentStatus.PENDING
    session.payment_requested_at = utcnow()
    await crud.payment_notification.create(
        db,
        session_id=session.id,
        table_number=table_number,
        payment_type=PaymentType.TABLE,
        subtotal=totals.subtotal,
        vat_amount=totals.tax,
        tip_amount=tip,
        final_total=final_total,
    )
    await db.flush()
    await db.commit()
    logger.info(f"Conta solicitada na mesa {table_number} (sessão {session.id}): {final_total}")

    await run_isolated(
        db,
        "notificação payment_request",
        lambda side_db: notification_service.notify(
            side_db,
            session_id=session.id,
            type=NotificationType.PAYMENT_REQUEST,
            title="Conta solicitada",
            message=f"Mesa {table_number} pediu a conta: R$ {final_total}",
            priority=NotificationPriority.HIGH,
            meta={"payment_type": PaymentType.TABLE.value, "final_total": str(final_total), "table_number": table_number},
        ),
    )
    return await _summary(db, session, table_number)


async def _request_individual(
    db: AsyncSession, *, session: DiningSession, table_number: Optional[str], tip: Decimal, diner_name: Optional[str]
) -> PaymentSummary:
    """
    Um cliente pede só a sua parte. O pedido anterior ainda pendente é atualizado;
    o status de pagamento da sessão não muda.
    """
    if not diner_name:
        raise ValidationError("Informe o cliente para o pagamento individual")
    if diner_name not in _diner_names(session):
        raise NotFoundError("Cliente não encontrado na sessão")
    row = await crud.payment_notification.get_for_diner(db, session_id=session.id, diner_name=diner_name)
    if row is not None and row.status == PaymentNotificationStatus.COMPLETED:
        raise ValidationError("Cliente já pagou sua parte")

    share = await billing_service.get_diner_totals(db, session_id=session.id, diner_name=diner_name)
    if share.item_count == 0:
        raise ValidationError("Nenhum pedido confirmado para este cliente")
    amounts = dict(subtotal=share.subtotal, vat_amount=share.tax, tip_amount=tip, final_total=share.total + tip)
    if row is None:
        row = await crud.payment_notification.create(
            db,
            session_id=session.id,
            table_number=table_number,
            payment_type=PaymentType.INDIVIDUAL,
            diner_name=diner_name,
            **amounts,
        )
    else:
        for field, value in amounts.items():
            setattr(row, field, value)
        row.status = PaymentNotificationStatus.PENDING
    await db.flush()
    await db.commit()
    logger.info(f"{diner_name} pediu a conta individual na mesa {table_number}: {row.final_total}")

    final_total = row.final_total
    await run_isolated(
        db,
        "notificação payment_request individual",
        lambda side_db: notification_service.notify(
            side_db,
            session_id=session.id,
            type=NotificationType.PAYMENT_REQUEST,
            title="Conta individual solicitada",
            message=f"{diner_name} na Mesa {table_number} pediu a conta: R$ {final_total}",
            priority=NotificationPriority.HIGH,
            meta={
                "payment_type": PaymentType.INDIVIDUAL.value,
                "diner_name": diner_name,
                "final_total": str(final_total),
                "table_number": table_number,
            },
        ),
    )
    return _individual_summary(session, table_number, row)


async def complete_payment(
    db: AsyncSession,
    *,
    session_id: uuid.UUID,
    payment_method: PaymentMethod,
    completed_by: Optional[str],
    payment_type: PaymentType = PaymentType.TABLE,
    diner_name: Optional[str] = None,
    request: Optional[Request] = None,
) -> PaymentSummary:
    """
    Fecha a conta: grava o total final (total + gorjeta), encerra a sessão e libera a mesa.
    Repetir a chamada numa conta já paga não altera nada.
    """
    session, table_number = await crud.session.get_with_table_number(db, session_id)
    if session is None:
        raise NotFoundError("Sessão não encontrada")
    if payment_type == PaymentType.INDIVIDUAL:
        return await _complete_individual(
            db,
            session=session,
            table_number=table_number,
            payment_method=payment_method,
            completed_by=completed_by,
            diner_name=diner_name,
            request=request,
        )
    if session.payment_status == PaymentStatus.COMPLETED:
        return await _summary(db, session, table_number, already_completed=True)
    if session.payment_status != PaymentStatus.PENDING:
        raise ValidationError("Pagamento não foi solicitado para esta sessão")

    totals = await billing_service.get_session_totals(db, session_id=session.id)
    paid = await _already_paid(db, session.id)
    now = utcnow()
    session.final_total = _amount_due(totals.total, paid) + to_cents(session.tip_amount or Decimal("0"))
    session.payment_status = PaymentStatus.COMPLETED
    session.payment_method = payment_method
    session.payment_completed_at = now
    session.completed_by = completed_by
    await close_session(db, session=session, new_status=SessionStatus.COMPLETED)
    await db.commit()
    logger.info(f"Pagamento da sessão {session.id} concluído ({payment_method.value}): {session.final_total}")

    await run_isolated(
        db,
        "concluir notificações de pagamento",
        lambda side_db: crud.payment_notification.complete_for_session(side_db, session_id=session.id, when=now),
    )
    await run_isolated(db, "desativar clientes", lambda side_db: _deactivate_diners(side_db, session.id))
    await run_isolated(
        db,
        "notificação payment_complete",
        lambda side_db: notification_service.notify(
            side_db,
            session_id=session.id,
            type=NotificationType.PAYMENT_COMPLETE,
            title="Pagamento concluído",
            message=f"Mesa {table_number} pagou R$ {session.final_total} ({payment_method.value})",
            priority=NotificationPriority.LOW,
            meta={
                "payment_method": payment_method.value,
                "payment_type": PaymentType.TABLE.value,
                "completed_by": completed_by,
            },
        ),
    )
    await run_isolated(
        db,
        "auditoria payment_processing",
        lambda side_db: audit_service.log_action(
            side_db,
            action=AuditAction.PAYMENT_PROCESSING,
            session_id=session.id,
            details={
                "payment_method": payment_method.value,
                "final_total": str(session.final_total),
                "already_paid": str(paid),
                "table_number": table_number,
            },
            performed_by=completed_by,
            request=request,
        ),
    )
    await publish_event(CHANNEL_TABLES, "payment_completed", {"session_id": str(session.id), "table_number": table_number})
    return await _summary(db, session, table_number)


async def _complete_individual(
    db: AsyncSession,
    *,
    session: DiningSession,
    table_number: Optional[str],
    payment_method: PaymentMethod,
    completed_by: Optional[str],
    diner_name: Optional[str],
    request: Optional[Request],
) -> PaymentSummary:
    """Quita a parte de um cliente; a sessão continua aberta para os demais."""
    if not diner_name:
        raise ValidationError("Informe o cliente para o pagamento individual")
    row = await crud.payment_notification.get_for_diner(db, session_id=session.id, diner_name=diner_name)
    if row is None:
        raise ValidationError("Pagamento individual não foi solicitado para este cliente")
    if row.status == PaymentNotificationStatus.COMPLETED:
        return _individual_summary(session, table_number, row, already_completed=True)

    row.status = PaymentNotificationStatus.COMPLETED
    row.payment_method = payment_method
    row.completed_at = utcnow()
    await db.flush()
    await db.commit()
    logger.info(f"{diner_name} pagou R$ {row.final_total} na mesa {table_number} ({payment_method.value})")

    details = {
        "payment_type": PaymentType.INDIVIDUAL.value,
        "diner_name": diner_name,
        "payment_method": payment_method.value,
        "final_total": str(row.final_total),
        "table_number": table_number,
    }
    await run_isolated(
        db,
        "auditoria payment_processing individual",
        lambda side_db: audit_service.log_action(
            side_db,
            action=AuditAction.PAYMENT_PROCESSING,
            session_id=session.id,
            details=details,
            performed_by=completed_by,
            request=request,
        ),
    )
    return _individual_summary(session, table_number, row)


async def _deactivate_diners(db: AsyncSession, session_id: uuid.UUID) -> None:
    session = await crud.session.get(db, session_id)
    if session is None:
        return
    logout = utcnow().isoformat()
    session.diners = [
        {**diner, "isActive": False, "logoutTime": diner.get("logoutTime") or logout} for diner in session.diners or []
    ]
    await db.flush()


async def payment_status(db: AsyncSession, *, session_id: uuid.UUID) -> PaymentSummary:
    session, table_number = await crud.session.get_with_table_number(db, session_id)
    if session is None:
        raise NotFoundError("Sessão não encontrada")
    return await _summary(db, session, table_number)


async def individual_status(db: AsyncSession, *, session_id: uuid.UUID) -> IndividualPaymentStatus:
    """
    Situação de cada cliente da sessão. Quem já pediu a conta mostra os valores congelados
    no pedido; os demais mostram a parte atual, sem gorjeta. Conta da mesa paga quita todos.
    """
    session, table_number = await crud.session.get_with_table_number(db, session_id)
    if session is None:
        raise NotFoundError("Sessão não encontrada")
    table_paid = session.payment_status == PaymentStatus.COMPLETED
    latest = {
        row.diner_name: row
        for row in await crud.payment_notification.get_by_session(
            db, session_id=session.id, payment_type=PaymentType.INDIVIDUAL
        )
    }

    entries = []
    for name in _diner_names(session):
        row = latest.get(name)
        if row is not None:
            paid = table_paid or row.status == PaymentNotificationStatus.COMPLETED
            entry = DinerPaymentStatus(
                diner_name=name,
                subtotal=row.subtotal,
                vat_amount=row.vat_amount,
                tip_amount=row.tip_amount,
                final_total=row.final_total,
                payment_status=PaymentStatus.COMPLETED if paid else PaymentStatus.PENDING,
                payment_method=row.payment_method,
                paid_at=row.completed_at,
            )
        else:
            share = await billing_service.get_diner_totals(db, session_id=session.id, diner_name=name)
            entry = DinerPaymentStatus(
                diner_name=name,
                subtotal=share.subtotal,
                vat_amount=share.tax,
                tip_amount=Decimal("0"),
                final_total=share.total,
                payment_status=PaymentStatus.COMPLETED if table_paid else PaymentStatus.UNPAID,
            )
        entries.append(entry)

    paid_diners = sum(1 for e in entries if e.payment_status == PaymentStatus.COMPLETED)
    remaining = sum(1 for e in entries if e.payment_status != PaymentStatus.COMPLETED and e.final_total > 0)
    return IndividualPaymentStatus(
        session_id=session.id,
        table_number=table_number,
        total_diners=len(entries),
        paid_diners=paid_diners,
        remaining_diners=remaining,
        all_paid=table_paid or (remaining == 0 and paid_diners > 0),
        individual_payments=entries,
    )
