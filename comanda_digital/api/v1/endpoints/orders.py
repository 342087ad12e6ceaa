# comanda_digital/api/v1/endpoints/orders.py
import uuid
from typing import Any, List

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital import schemas
from comanda_digital.api import deps
from comanda_digital.db.models.staff import Staff
from comanda_digital.services import order_service

router = APIRouter()


@router.post("/confirm", response_model=schemas.ApiResponse[schemas.ConfirmResult])
async def confirm_orders(confirm_in: schemas.SessionRef, db: AsyncSession = Depends(deps.get_db)) -> Any:
    """
    Envia o carrinho da sessão para a cozinha.
    """
    orders = await order_service.confirm_cart(db, session_id=confirm_in.session_id)
    return schemas.ApiResponse(
        data=schemas.ConfirmResult(
            session_id=confirm_in.session_id,
            confirmed_count=len(orders),
            orders=[order_service.to_order_schema(o) for o in orders],
        ),
        message="Pedido enviado para a cozinha",
    )


@router.get("/confirm", response_model=schemas.ApiResponse[List[schemas.Order]])
async def read_confirmed_orders(
    session_id: uuid.UUID = Query(..., alias="sessionId"), db: AsyncSession = Depends(deps.get_db)
) -> Any:
    orders = await order_service.get_confirmed(db, session_id=session_id)
    return schemas.ApiResponse(data=[order_service.to_order_schema(o) for o in orders])


@router.get("/kitchen", response_model=schemas.ApiResponse[List[schemas.Order]])
async def read_kitchen_queue(
    db: AsyncSession = Depends(deps.get_db), current_staff: Staff = Depends(deps.get_current_staff)
) -> Any:
    """
    Fila da cozinha: pedidos ainda não servidos de sessões ativas, do mais antigo ao mais novo.
    """
    queue = await order_service.kitchen_queue(db)
    return schemas.ApiResponse(data=[order_service.to_order_schema(o, number) for o, number in queue])


@router.post("/update-status", response_model=schemas.ApiResponse[schemas.Order])
async def update_order_status(
    *,
    request: Request,
    db: AsyncSession = Depends(deps.get_db),
    status_in: schemas.OrderStatusUpdate,
    current_staff: Staff = Depends(deps.get_current_staff),
) -> Any:
    order = await order_service.update_status(
        db, order_id=status_in.order_id, new_status=status_in.status, staff=current_staff, request=request
    )
    return schemas.ApiResponse(
        data=order_service.to_order_schema(order), message=f"Status do pedido atualizado para {order.status.value}"
    )


@router.get("/history", response_model=schemas.ApiResponse[List[schemas.Order]])
async def read_order_history(
    session_id: uuid.UUID = Query(..., alias="sessionId"), db: AsyncSession = Depends(deps.get_db)
) -> Any:
    orders = await order_service.get_history(db, session_id=session_id)
    return schemas.ApiResponse(data=[order_service.to_order_schema(o) for o in orders])
