# comanda_digital/api/v1/endpoints/sessions.py
import uuid
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital import schemas
from comanda_digital.api import deps
from comanda_digital.core.config import settings
from comanda_digital.db.models.order import OrderStatus
from comanda_digital.db.models.staff import Staff
from comanda_digital.services import billing_service, cart_service, order_service, session_service

router = APIRouter()


@router.post("/", response_model=schemas.ApiResponse[schemas.SessionStartResult], status_code=status.HTTP_201_CREATED)
async def start_session(
    *, request: Request, db: AsyncSession = Depends(deps.get_db), session_in: schemas.SessionStart
) -> Any:
    """
    Inicia a sessão da mesa (ou entra na sessão ativa) depois de conferir o PIN.
    """
    session, table_number, joined = await session_service.start_session(
        db,
        table_id=session_in.table_id,
        pin=session_in.pin,
        started_by_name=session_in.started_by_name,
        request=request,
    )
    return schemas.ApiResponse(
        data=schemas.SessionStartResult(session=schemas.DiningSession.with_table(session, table_number), joined=joined),
        message="Você entrou na sessão existente" if joined else "Sessão iniciada",
    )


@router.get("/active", response_model=schemas.ApiResponse[List[schemas.DiningSession]])
async def read_active_sessions(
    db: AsyncSession = Depends(deps.get_db), current_staff: Staff = Depends(deps.get_current_staff)
) -> Any:
    sessions = await session_service.list_active(db)
    return schemas.ApiResponse(data=[schemas.DiningSession.with_table(s, number) for s, number in sessions])


@router.post("/assign-staff", response_model=schemas.ApiResponse[schemas.DiningSession])
async def assign_staff(
    *,
    db: AsyncSession = Depends(deps.get_db),
    assign_in: schemas.AssignStaffRequest,
    current_staff: Staff = Depends(deps.get_current_staff),
) -> Any:
    """
    Atribui um funcionário à sessão. Uma sessão só tem um responsável.
    """
    session = await session_service.assign_staff(db, session_id=assign_in.session_id, staff_code=assign_in.staff_id)
    _, table_number = await session_service.get_session(db, session.id)
    return schemas.ApiResponse(data=schemas.DiningSession.with_table(session, table_number), message="Funcionário atribuído à sessão")


@router.get("/{session_id}", response_model=schemas.ApiResponse[schemas.DiningSession])
async def read_session(session_id: uuid.UUID, db: AsyncSession = Depends(deps.get_db)) -> Any:
    session, table_number = await session_service.get_session(db, session_id)
    return schemas.ApiResponse(data=schemas.DiningSession.with_table(session, table_number))


@router.post("/{session_id}/join", response_model=schemas.ApiResponse[schemas.DiningSession])
async def join_session(
    session_id: uuid.UUID, join_in: schemas.JoinRequest, db: AsyncSession = Depends(deps.get_db)
) -> Any:
    session = await session_service.join_session(db, session_id=session_id, name=join_in.name)
    return schemas.ApiResponse(data=schemas.DiningSession.with_table(session), message=f"{join_in.name} entrou na sessão")


@router.get("/{session_id}/participants", response_model=schemas.ApiResponse[List[dict]])
async def read_participants(session_id: uuid.UUID, db: AsyncSession = Depends(deps.get_db)) -> Any:
    session, _ = await session_service.get_session(db, session_id)
    return schemas.ApiResponse(data=list(session.diners or []))


@router.get("/{session_id}/total", response_model=schemas.ApiResponse[schemas.SessionTotal])
async def read_session_total(session_id: uuid.UUID, db: AsyncSession = Depends(deps.get_db)) -> Any:
    """
    Conta atual da sessão: pedidos confirmados + IVA de 14%. Recalculada a cada chamada.
    """
    totals = await billing_service.get_session_totals(db, session_id=session_id)
    return schemas.ApiResponse(
        data=schemas.SessionTotal(
            session_id=session_id,
            subtotal=totals.subtotal,
            tax=totals.tax,
            discount=totals.discount,
            total=totals.total,
            vat_rate=settings.VAT_RATE,
            item_count=totals.item_count,
        )
    )


@router.get("/{session_id}/orders", response_model=schemas.ApiResponse[List[schemas.Order]])
async def read_session_orders(
    session_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db),
    order_status: Optional[OrderStatus] = Query(None, alias="status"),
) -> Any:
    session, table_number = await session_service.get_session(db, session_id)
    orders = await order_service.list_for_session(db, session_id=session.id, status=order_status)
    return schemas.ApiResponse(data=[order_service.to_order_schema(o, table_number) for o in orders])


@router.post(
    "/{session_id}/orders", response_model=schemas.ApiResponse[schemas.CartItem], status_code=status.HTTP_201_CREATED
)
async def add_session_order(
    session_id: uuid.UUID, line_in: schemas.CartLineIn, db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Adiciona um item ao carrinho da sessão (mesmo efeito de /cart/add).
    """
    item, merged = await cart_service.add_to_cart(db, obj_in=schemas.CartAdd(session_id=session_id, **line_in.model_dump()))
    return schemas.ApiResponse(data=item, message="Quantidade atualizada" if merged else "Item adicionado ao carrinho")


@router.post("/{session_id}/cancel", response_model=schemas.ApiResponse[schemas.DiningSession])
async def cancel_session(
    session_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db),
    current_staff: Staff = Depends(deps.get_current_staff),
) -> Any:
    session = await session_service.cancel_session(db, session_id=session_id, staff=current_staff)
    return schemas.ApiResponse(data=schemas.DiningSession.with_table(session), message="Sessão cancelada")
