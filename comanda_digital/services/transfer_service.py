# comanda_digital/services/transfer_service.py
import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from comanda_digital import crud
from comanda_digital.core.exceptions import ConflictError, InternalError, NotFoundError, ValidationError
from comanda_digital.db.models.audit_log import AuditAction
from comanda_digital.db.models.notification import NotificationPriority, NotificationType
from comanda_digital.db.models.session import DiningSession, SessionStatus
from comanda_digital.db.models.table import RestaurantTable
from comanda_digital.services import audit_service, notification_service
from comanda_digital.services.redis_service import CHANNEL_TABLES, publish_event
from comanda_digital.services.side_effects import run_isolated

logger = logging.getLogger(__name__)


@dataclass
class TransferOutcome:
    source: RestaurantTable
    destination: RestaurantTable
    session: DiningSession
    audit_logged: bool = False
    notification_created: bool = False
    message: str = ""


async def _move_session(db: AsyncSession, session: DiningSession, destination: RestaurantTable) -> None:
    session.table_id = destination.id
    await db.flush()


async def _free_source(db: AsyncSession, source: RestaurantTable) -> None:
    source.occupied = False
    source.current_pin = None
    source.current_session_id = None
    await db.flush()


async def _occupy_destination(
    db: AsyncSession, destination: RestaurantTable, session: DiningSession, pin: Optional[str]
) -> None:
    destination.occupied = True
    destination.current_session_id = session.id
    destination.current_pin = pin
    await db.flush()


async def _load_and_check(
    db: AsyncSession, source_table_id: uuid.UUID, destination_table_id: uuid.UUID, session_id: uuid.UUID
):
    # Pré-condições na ordem: origem, destino, sessão. Nenhuma escrita acontece antes daqui.
    source = await crud.table.get(db, source_table_id)
    if source is None or not source.is_active:
        raise NotFoundError("Mesa de origem não encontrada")
    if not source.occupied:
        raise ConflictError("Mesa de origem não está ocupada")

    destination = await crud.table.get(db, destination_table_id)
    if destination is None or not destination.is_active:
        raise NotFoundError("Mesa de destino não encontrada")
    if destination.occupied:
        raise ConflictError("Mesa de destino já está ocupada")

    session = await crud.session.get(db, session_id)
    if session is None:
        raise NotFoundError("Sessão não encontrada")
    if session.status != SessionStatus.ACTIVE:
        raise ConflictError("Sessão não está ativa")
    if session.table_id != source.id:
        raise ConflictError("Sessão não pertence à mesa de origem")
    return source, destination, session


async def transfer_table(
    db: AsyncSession,
    *,
    source_table_id: Optional[uuid.UUID],
    destination_table_id: Optional[uuid.UUID],
    session_id: Optional[uuid.UUID],
    transferred_by: Optional[str] = None,
    request: Optional[Request] = None,
) -> TransferOutcome:
    """
    Move uma sessão ativa da mesa de origem para uma mesa livre.

    As três escritas (sessão, mesa de origem, mesa de destino) vão numa única transação:
    ou todas são gravadas, ou nenhuma. Auditoria e notificação rodam depois do commit,
    isoladas, e só aparecem no resultado como sideEffects.
    """
    if not source_table_id or not destination_table_id or not session_id:
        raise ValidationError("sourceTableId, destinationTableId e sessionId são obrigatórios")
    if source_table_id == destination_table_id:
        raise ValidationError("Mesa de origem e destino devem ser diferentes")

    source, destination, session = await _load_and_check(db, source_table_id, destination_table_id, session_id)
    source_number, destination_number = source.table_number, destination.table_number
    pin = source.current_pin

    step = "mover sessão"
    try:
        await _move_session(db, session, destination)
        step = "liberar mesa de origem"
        await _free_source(db, source)
        step = "ocupar mesa de destino"
        await _occupy_destination(db, destination, session, pin)
        await db.commit()
    except StaleDataError:
        await db.rollback()
        logger.warning(f"Transferência {source_number} -> {destination_number} abortada: registro alterado concorrentemente")
        raise ConflictError("Mesa ou sessão alterada por outra operação; tente novamente", status_code=409)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(
            f"Transferência da sessão {session_id} ({source_number} -> {destination_number}) "
            f"falhou na etapa '{step}'; transação desfeita: {e}"
        )
        raise InternalError(f"Falha ao transferir mesa na etapa '{step}'; nenhuma alteração foi aplicada")

    logger.info(f"Sessão {session.id} transferida da mesa {source_number} para {destination_number}")
    outcome = TransferOutcome(
        source=source,
        destination=destination,
        session=session,
        message=f"Mesa transferida com sucesso de {source_number} para {destination_number}",
    )

    performed_by = str(session.served_by) if session.served_by else "system"
    outcome.audit_logged = await run_isolated(
        db,
        "auditoria table_transfer",
        lambda side_db: audit_service.log_action(
            side_db,
            action=AuditAction.TABLE_TRANSFER,
            session_id=session.id,
            details={
                "source_table_id": str(source.id),
                "source_table_number": source_number,
                "destination_table_id": str(destination.id),
                "destination_table_number": destination_number,
                "transferred_by": transferred_by,
            },
            performed_by=performed_by,
            request=request,
        ),
    )
    outcome.notification_created = await run_isolated(
        db,
        "notificação table_transfer",
        lambda side_db: notification_service.notify(
            side_db,
            session_id=session.id,
            type=NotificationType.TABLE_TRANSFER,
            title="Mesa transferida",
            message=(
                f"Sessão movida da Mesa {source_number} para a Mesa {destination_number}. "
                "Os clientes devem escanear o QR Code da nova mesa."
            ),
            priority=NotificationPriority.MEDIUM,
            meta={
                "source_table": source_number,
                "destination_table": destination_number,
                "transferred_by": transferred_by or performed_by,
            },
        ),
    )
    await publish_event(
        CHANNEL_TABLES,
        "table_transferred",
        {"session_id": str(session.id), "source_table": source_number, "destination_table": destination_number},
    )
    return outcome
