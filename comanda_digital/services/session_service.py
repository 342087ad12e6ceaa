# comanda_digital/services/session_service.py
import logging
import uuid
from typing import List, Optional, Tuple

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital import crud
from comanda_digital.core.exceptions import AuthError, ConflictError, NotFoundError, ValidationError
from comanda_digital.core.utils import utcnow
from comanda_digital.db.models.audit_log import AuditAction
from comanda_digital.db.models.session import DiningSession, SessionStatus
from comanda_digital.db.models.staff import Staff
from comanda_digital.services import audit_service
from comanda_digital.services.redis_service import CHANNEL_TABLES, publish_event
from comanda_digital.services.side_effects import run_isolated

logger = logging.getLogger(__name__)


def new_diner(name: str) -> dict:
    now = utcnow().isoformat()
    return {"name": name, "isActive": True, "joinedAt": now, "lastActive": now, "logoutTime": None}


def with_diner(diners: Optional[list], name: str) -> list:
    """
    Devolve uma nova lista (colunas JSON só detectam reatribuição) com o cliente ativo.
    Quem volta com o mesmo nome é reativado em vez de duplicado.
    """
    updated = [dict(d) for d in (diners or [])]
    now = utcnow().isoformat()
    for diner in updated:
        if diner.get("name") == name:
            diner.update({"isActive": True, "lastActive": now, "logoutTime": None})
            return updated
    updated.append(new_diner(name))
    return updated


async def get_session(db: AsyncSession, session_id: uuid.UUID) -> Tuple[DiningSession, Optional[str]]:
    session, table_number = await crud.session.get_with_table_number(db, session_id)
    if session is None:
        raise NotFoundError("Sessão não encontrada")
    return session, table_number


async def start_session(
    db: AsyncSession,
    *,
    table_id: uuid.UUID,
    pin: str,
    started_by_name: Optional[str],
    request: Optional[Request] = None,
) -> Tuple[DiningSession, str, bool]:
    """
    Inicia a sessão da mesa depois de conferir o PIN. Se a mesa já tem sessão ativa,
    o cliente entra nela. Retorna (sessão, número da mesa, entrou_em_existente).
    """
    table = await crud.table.get(db, table_id)
    if table is None or not table.is_active:
        raise NotFoundError("Mesa não encontrada")
    if table.current_pin is None or pin != table.current_pin:
        raise AuthError("PIN inválido")

    existing = await crud.session.get_active_for_table(db, table_id=table.id)
    if existing is not None:
        if started_by_name:
            existing.diners = with_diner(existing.diners, started_by_name)
            await db.flush()
        await db.commit()
        logger.info(f"Cliente entrou na sessão {existing.id} da mesa {table.table_number}")
        return existing, table.table_number, True

    session = await crud.session.create(
        db,
        table_id=table.id,
        started_by_name=started_by_name,
        diners=[new_diner(started_by_name)] if started_by_name else [],
    )
    table.occupied = True
    table.current_session_id = session.id
    await db.flush()
    await db.commit()
    logger.info(f"Sessão {session.id} iniciada na mesa {table.table_number}")

    await run_isolated(
        db,
        "auditoria session_creation",
        lambda side_db: audit_service.log_action(
            side_db,
            action=AuditAction.SESSION_CREATION,
            session_id=session.id,
            details={"table_id": str(table.id), "table_number": table.table_number},
            performed_by=started_by_name or "customer",
            request=request,
        ),
    )
    await publish_event(CHANNEL_TABLES, "session_started", {"table_id": str(table.id), "session_id": str(session.id)})
    return session, table.table_number, False


async def join_session(db: AsyncSession, *, session_id: uuid.UUID, name: str) -> DiningSession:
    session = await crud.session.get(db, session_id)
    if session is None:
        raise NotFoundError("Sessão não encontrada")
    if session.status != SessionStatus.ACTIVE:
        raise ValidationError("Sessão não está ativa")
    session.diners = with_diner(session.diners, name)
    await db.flush()
    await db.commit()
    return session


async def assign_staff(db: AsyncSession, *, session_id: uuid.UUID, staff_code: str) -> DiningSession:
    staff = await crud.staff.get_active_by_staff_id(db, staff_id=staff_code)
    if staff is None:
        raise NotFoundError("Funcionário não encontrado ou inativo")
    session = await crud.session.get(db, session_id)
    if session is None:
        raise NotFoundError("Sessão não encontrada")
    if session.served_by is not None and session.served_by != staff.id:
        raise ConflictError("Sessão já está sendo atendida por outro funcionário", status_code=409)
    session.served_by = staff.id
    await db.flush()
    await db.commit()
    logger.info(f"Sessão {session.id} atribuída a {staff.staff_id}")
    return session


async def close_session(
    db: AsyncSession, *, session: DiningSession, new_status: SessionStatus
) -> DiningSession:
    """Encerra a sessão (completed/cancelled) e libera a mesa, sem commit."""
    if not session.can_transition_to(new_status):
        raise ValidationError(f"Sessão \"{session.status.value}\" não pode ir para \"{new_status.value}\"")
    session.status = new_status
    table = await crud.table.get(db, session.table_id)
    if table is not None and table.current_session_id == session.id:
        table.occupied = False
        table.current_session_id = None
        table.current_pin = None
    await db.flush()
    return session


async def cancel_session(db: AsyncSession, *, session_id: uuid.UUID, staff: Staff) -> DiningSession:
    session = await crud.session.get(db, session_id)
    if session is None:
        raise NotFoundError("Sessão não encontrada")
    await close_session(db, session=session, new_status=SessionStatus.CANCELLED)
    await db.commit()
    logger.info(f"Sessão {session.id} cancelada por {staff.staff_id}")
    await publish_event(CHANNEL_TABLES, "session_cancelled", {"session_id": str(session.id)})
    return session


async def list_active(db: AsyncSession) -> List[Tuple[DiningSession, str]]:
    return await crud.session.get_multi_active(db)
