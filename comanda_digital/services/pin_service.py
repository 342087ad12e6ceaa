# comanda_digital/services/pin_service.py
import logging
import secrets
import uuid
from dataclasses import dataclass
from typing import Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital import crud
from comanda_digital.core.config import settings
from comanda_digital.core.exceptions import AuthError, ConflictError, NotFoundError, ValidationError
from comanda_digital.db.models.audit_log import AuditAction
from comanda_digital.db.models.session import DiningSession
from comanda_digital.db.models.staff import Staff
from comanda_digital.db.models.table import RestaurantTable
from comanda_digital.services import audit_service
from comanda_digital.services.redis_service import CHANNEL_TABLES, publish_event
from comanda_digital.services.side_effects import run_isolated

logger = logging.getLogger(__name__)


@dataclass
class PinAssignment:
    table: RestaurantTable
    pin: str
    already_assigned: bool


@dataclass
class PinVerification:
    table: RestaurantTable
    session: Optional[DiningSession]

    @property
    def action(self) -> str:
        return "join" if self.session is not None else "start"


def generate_pin() -> str:
    """PIN de 4 dígitos uniforme em [PIN_MIN, PIN_MAX]; colisões entre mesas são permitidas."""
    return str(secrets.choice(range(settings.PIN_MIN, settings.PIN_MAX + 1)))


async def assign_pin(db: AsyncSession, *, table_id: uuid.UUID) -> PinAssignment:
    """Idempotente: se a mesa já tem PIN, devolve o mesmo valor."""
    table = await crud.table.get(db, table_id)
    if table is None or not table.is_active:
        raise NotFoundError("Mesa não encontrada")
    if table.current_pin:
        return PinAssignment(table=table, pin=table.current_pin, already_assigned=True)

    written = await crud.table.set_pin_if_empty(db, table=table, pin=generate_pin())
    await db.commit()
    if not written:
        # Outra requisição gravou o PIN entre a leitura e a escrita: vale o dela
        logger.info(f"PIN da mesa {table.table_number} já havia sido gravado por outra requisição")
    else:
        logger.info(f"PIN gerado para a mesa {table.table_number}")
    return PinAssignment(table=table, pin=table.current_pin, already_assigned=not written)


async def verify_pin(
    db: AsyncSession, *, table_ref: Optional[str], table_number: Optional[str], pin: str
) -> PinVerification:
    """Somente leitura: PIN divergente gera 401 sem alterar nenhuma linha."""
    reference = table_ref or table_number
    if not reference:
        raise ValidationError("Informe tableId ou tableNumber")
    table = await crud.table.get_active_by_reference(db, reference=reference, table_number=table_number)
    if table is None:
        raise NotFoundError("Mesa não encontrada")
    if table.current_pin is None or pin != table.current_pin:
        raise AuthError("PIN inválido")
    session = await crud.session.get_active_for_table(db, table_id=table.id)
    return PinVerification(table=table, session=session)


async def open_table(
    db: AsyncSession,
    *,
    staff: Staff,
    table_id: Optional[uuid.UUID],
    table_number: Optional[str],
    request: Optional[Request] = None,
) -> PinAssignment:
    """
    Abre uma mesa livre para o funcionário: grava PIN, ocupa a mesa e cria a sessão
    atendida por ele, tudo na mesma transação.
    """
    if table_id is None and not table_number:
        raise ValidationError("Informe tableId ou tableNumber")
    table = await crud.table.get(db, table_id) if table_id else None
    if table is None and table_number:
        table = await crud.table.get_by_number(db, table_number=table_number)
    if table is None or not table.is_active:
        raise NotFoundError("Mesa não encontrada")
    if table.occupied:
        raise ConflictError("Mesa já está ocupada", status_code=409)

    pin = generate_pin()
    try:
        session = await crud.session.create(db, table_id=table.id, served_by=staff.id)
        table.current_pin = pin
        table.occupied = True
        table.current_session_id = session.id
        await db.flush()
        await db.commit()
    except Exception:
        await db.rollback()
        logger.error(f"Falha ao abrir a mesa {table.table_number}; alterações desfeitas", exc_info=True)
        raise

    logger.info(f"Mesa {table.table_number} aberta por {staff.staff_id} (sessão {session.id})")
    await run_isolated(
        db,
        "auditoria pin_generation",
        lambda side_db: audit_service.log_action(
            side_db,
            action=AuditAction.PIN_GENERATION,
            session_id=session.id,
            details={"table_id": str(table.id), "table_number": table.table_number},
            performed_by=staff.staff_id,
            request=request,
        ),
    )
    await publish_event(CHANNEL_TABLES, "table_opened", {"table_id": str(table.id), "session_id": str(session.id)})
    return PinAssignment(table=table, pin=pin, already_assigned=False)
