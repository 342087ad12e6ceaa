# comanda_digital/api/v1/endpoints/notifications.py
import uuid
from typing import Any

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital import crud, schemas
from comanda_digital.api import deps
from comanda_digital.db.models.notification import NotificationStatus
from comanda_digital.db.models.staff import Staff
from comanda_digital.services import notification_service

router = APIRouter()


def notification_schema(notification, table_number=None) -> schemas.Notification:
    return schemas.Notification.model_validate(notification).model_copy(update={"table_number": table_number})


@router.get("/", response_model=schemas.ApiResponse[schemas.NotificationList])
async def read_notifications(
    db: AsyncSession = Depends(deps.get_db),
    notification_status: NotificationStatus = Query(NotificationStatus.PENDING, alias="status"),
    limit: int = Query(50, ge=1, le=200),
    current_staff: Staff = Depends(deps.get_current_staff),
) -> Any:
    """
    Notificações da equipe, das mais novas para as mais antigas.
    """
    rows = await crud.notification.get_multi(db, status=notification_status, limit=limit)
    notifications = [notification_schema(n, number) for n, number in rows]
    return schemas.ApiResponse(data=schemas.NotificationList(notifications=notifications, count=len(notifications)))


@router.post("/", response_model=schemas.ApiResponse[schemas.Notification], status_code=status.HTTP_201_CREATED)
async def create_notification(notification_in: schemas.NotificationCreate, db: AsyncSession = Depends(deps.get_db)) -> Any:
    notification = await notification_service.create_from_client(db, obj_in=notification_in)
    return schemas.ApiResponse(data=notification_schema(notification), message="Notificação criada")


@router.post("/{notification_id}/acknowledge", response_model=schemas.ApiResponse[schemas.Notification])
async def acknowledge_notification(
    notification_id: uuid.UUID,
    action_in: schemas.NotificationAction,
    db: AsyncSession = Depends(deps.get_db),
    current_staff: Staff = Depends(deps.get_current_staff),
) -> Any:
    """
    Confirma (acknowledge) ou resolve (resolve) uma notificação. O status nunca volta atrás.
    """
    notification = await notification_service.acknowledge(
        db,
        notification_id=notification_id,
        action=action_in.action,
        staff_member=action_in.staff_member or current_staff.name,
    )
    message = "Notificação resolvida" if action_in.action == "resolve" else "Notificação confirmada"
    return schemas.ApiResponse(data=notification_schema(notification), message=message)
