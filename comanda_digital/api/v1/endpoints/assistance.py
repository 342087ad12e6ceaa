# comanda_digital/api/v1/endpoints/assistance.py
from typing import Any, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital import crud, schemas
from comanda_digital.api import deps
from comanda_digital.core.exceptions import NotFoundError, ValidationError
from comanda_digital.db.models.session import SessionStatus
from comanda_digital.db.models.staff import Staff
from comanda_digital.services import notification_service

router = APIRouter()


@router.post("/customer/help", response_model=schemas.ApiResponse[schemas.Notification], status_code=status.HTTP_201_CREATED)
async def request_help(help_in: schemas.HelpRequest, db: AsyncSession = Depends(deps.get_db)) -> Any:
    """
    Cliente chama a equipe. helpType "urgent" gera notificação de prioridade alta.
    """
    notification = await notification_service.request_help(db, obj_in=help_in)
    return schemas.ApiResponse(
        data=schemas.Notification.model_validate(notification), message="A equipe foi avisada e virá em breve"
    )


@router.post("/waiter/request", response_model=schemas.ApiResponse[schemas.WaiterRequest], status_code=status.HTTP_201_CREATED)
async def create_waiter_request(request_in: schemas.WaiterRequestCreate, db: AsyncSession = Depends(deps.get_db)) -> Any:
    session, table_number = await crud.session.get_with_table_number(db, request_in.session_id)
    if session is None:
        raise NotFoundError("Sessão não encontrada")
    if session.status != SessionStatus.ACTIVE:
        raise ValidationError("Sessão não está ativa")
    waiter_request = await crud.waiter_request.create(
        db,
        session_id=session.id,
        request_type=request_in.request_type,
        table_number=table_number,
        customer_name=request_in.customer_name,
    )
    await db.commit()
    return schemas.ApiResponse(data=schemas.WaiterRequest.model_validate(waiter_request), message="Garçom chamado")


@router.get("/waiter/requests", response_model=schemas.ApiResponse[List[schemas.WaiterRequest]])
async def read_waiter_requests(
    db: AsyncSession = Depends(deps.get_db), current_staff: Staff = Depends(deps.get_current_staff)
) -> Any:
    requests = await crud.waiter_request.get_pending(db)
    return schemas.ApiResponse(data=[schemas.WaiterRequest.model_validate(r) for r in requests])
