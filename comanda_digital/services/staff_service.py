# comanda_digital/services/staff_service.py
import logging
import uuid
from typing import List, Optional, Tuple

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital import crud
from comanda_digital.core.exceptions import AuthError, NotFoundError, ValidationError
from comanda_digital.core.security import create_access_token, verify_password
from comanda_digital.core.utils import utcnow
from comanda_digital.db.models.audit_log import AuditAction
from comanda_digital.db.models.notification import Notification, NotificationStatus
from comanda_digital.db.models.payment_notification import PaymentNotification, PaymentNotificationStatus
from comanda_digital.db.models.session import DiningSession
from comanda_digital.db.models.staff import Staff
from comanda_digital.services import audit_service
from comanda_digital.services.retry import with_retry
from comanda_digital.services.side_effects import run_isolated

logger = logging.getLogger(__name__)


async def authenticate(
    db: AsyncSession, *, staff_code: str, password: Optional[str], request: Optional[Request] = None
) -> Tuple[Staff, str]:
    staff = await crud.staff.get_active_by_staff_id(db, staff_id=staff_code)
    if staff is None:
        raise AuthError("Funcionário não encontrado ou inativo")
    if staff.hashed_password and (not password or not verify_password(password, staff.hashed_password)):
        raise AuthError("Senha incorreta")

    token = create_access_token({"sub": staff.staff_id, "role": staff.role.value})
    logger.info(f"Login de {staff.staff_id} ({staff.role.value})")
    await run_isolated(
        db,
        "auditoria staff_login",
        lambda side_db: audit_service.log_action(
            side_db, action=AuditAction.STAFF_LOGIN, details={"role": staff.role.value}, performed_by=staff.staff_id, request=request
        ),
    )
    return staff, token


async def assigned_sessions(db: AsyncSession, *, staff: Staff) -> List[Tuple[DiningSession, str]]:
    return await crud.session.get_served_by(db, staff_pk=staff.id)


async def staff_notifications(
    db: AsyncSession, *, staff: Staff, status: Optional[NotificationStatus] = NotificationStatus.PENDING
) -> List[Tuple[Notification, Optional[str]]]:
    """Notificações das sessões que o funcionário atende."""
    sessions = await assigned_sessions(db, staff=staff)
    if not sessions:
        return []
    return await crud.notification.get_multi(db, status=status, session_ids=[s.id for s, _ in sessions])


async def pending_payment_notifications(db: AsyncSession, *, staff: Staff) -> List[PaymentNotification]:
    """Gerentes veem todas; os demais só as das suas mesas. Leitura repetida em falhas transitórias."""
    # Lidos antes: o rollback entre tentativas expira o objeto do funcionário
    sees_all = crud.staff.is_manager(staff)
    staff_pk = staff.id

    async def fetch() -> List[PaymentNotification]:
        if sees_all:
            return await crud.payment_notification.get_pending(db)
        sessions = await crud.session.get_served_by(db, staff_pk=staff_pk)
        return await crud.payment_notification.get_pending(db, session_ids=[s.id for s, _ in sessions])

    return await with_retry(fetch, "Busca de notificações de pagamento", on_retry=db.rollback)


async def acknowledge_payment_notification(
    db: AsyncSession, *, notification_id: uuid.UUID, staff: Staff
) -> PaymentNotification:
    notification = await crud.payment_notification.get(db, notification_id)
    if notification is None:
        raise NotFoundError("Notificação de pagamento não encontrada")
    if notification.status != PaymentNotificationStatus.PENDING:
        raise ValidationError("Notificação de pagamento já foi tratada")
    notification.status = PaymentNotificationStatus.ACKNOWLEDGED
    notification.acknowledged_by = staff.staff_id
    notification.acknowledged_at = utcnow()
    await db.flush()
    await db.commit()
    return notification
