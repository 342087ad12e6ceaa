# comanda_digital/api/v1/endpoints/staff.py
from typing import Any, List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital import schemas
from comanda_digital.api import deps
from comanda_digital.db.models.staff import Staff
from comanda_digital.services import staff_service

router = APIRouter()


@router.post("/login", response_model=schemas.ApiResponse[schemas.Token])
async def login(*, request: Request, db: AsyncSession = Depends(deps.get_db), login_in: schemas.StaffLogin) -> Any:
    """
    Login da equipe pelo código do crachá (e senha, quando cadastrada). Retorna um token JWT.
    """
    staff, token = await staff_service.authenticate(
        db, staff_code=login_in.staff_id, password=login_in.password, request=request
    )
    return schemas.ApiResponse(
        data=schemas.Token(access_token=token, staff=schemas.Staff.model_validate(staff)), message="Login realizado"
    )


@router.get("/assigned-tables", response_model=schemas.ApiResponse[List[schemas.DiningSession]])
async def read_assigned_tables(
    db: AsyncSession = Depends(deps.get_db), current_staff: Staff = Depends(deps.get_current_staff)
) -> Any:
    sessions = await staff_service.assigned_sessions(db, staff=current_staff)
    return schemas.ApiResponse(data=[schemas.DiningSession.with_table(s, number) for s, number in sessions])


@router.get("/notifications", response_model=schemas.ApiResponse[schemas.NotificationList])
async def read_staff_notifications(
    db: AsyncSession = Depends(deps.get_db), current_staff: Staff = Depends(deps.get_current_staff)
) -> Any:
    rows = await staff_service.staff_notifications(db, staff=current_staff)
    notifications = [
        schemas.Notification.model_validate(n).model_copy(update={"table_number": number}) for n, number in rows
    ]
    return schemas.ApiResponse(data=schemas.NotificationList(notifications=notifications, count=len(notifications)))


@router.get("/payment-notifications", response_model=schemas.ApiResponse[List[schemas.PaymentNotification]])
async def read_payment_notifications(
    db: AsyncSession = Depends(deps.get_db), current_staff: Staff = Depends(deps.get_current_staff)
) -> Any:
    """
    Pedidos de conta pendentes. Falhas transitórias do banco são repetidas com espera exponencial.
    """
    notifications = await staff_service.pending_payment_notifications(db, staff=current_staff)
    return schemas.ApiResponse(data=[schemas.PaymentNotification.model_validate(n) for n in notifications])


@router.post("/payment-notifications/acknowledge", response_model=schemas.ApiResponse[schemas.PaymentNotification])
async def acknowledge_payment_notification(
    ack_in: schemas.PaymentNotificationAck,
    db: AsyncSession = Depends(deps.get_db),
    current_staff: Staff = Depends(deps.get_current_staff),
) -> Any:
    notification = await staff_service.acknowledge_payment_notification(
        db, notification_id=ack_in.notification_id, staff=current_staff
    )
    return schemas.ApiResponse(
        data=schemas.PaymentNotification.model_validate(notification), message="Notificação de pagamento confirmada"
    )
