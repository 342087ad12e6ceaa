# comanda_digital/crud/crud_notification.py
import uuid
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital.db.models.notification import (
    Notification,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
)
from comanda_digital.db.models.session import DiningSession
from comanda_digital.db.models.table import RestaurantTable


class CRUDNotification:
    async def get(self, db: AsyncSession, id: uuid.UUID) -> Optional[Notification]:
        return await db.get(Notification, id)

    async def get_multi(
        self,
        db: AsyncSession,
        *,
        status: Optional[NotificationStatus] = NotificationStatus.PENDING,
        session_ids: Optional[Sequence[uuid.UUID]] = None,
        limit: int = 50,
    ) -> List[Tuple[Notification, Optional[str]]]:
        query = (
            select(Notification, RestaurantTable.table_number)
            .join(DiningSession, DiningSession.id == Notification.session_id)
            .join(RestaurantTable, RestaurantTable.id == DiningSession.table_id)
        )
        if status is not None:
            query = query.where(Notification.status == status)
        if session_ids is not None:
            query = query.where(Notification.session_id.in_(list(session_ids)))
        result = await db.execute(query.order_by(Notification.created_at.desc()).limit(limit))
        return [(row[0], row[1]) for row in result.all()]

    async def create(
        self,
        db: AsyncSession,
        *,
        session_id: uuid.UUID,
        type: NotificationType,
        title: str,
        message: str,
        priority: NotificationPriority = NotificationPriority.MEDIUM,
        meta: Optional[Dict[str, Any]] = None,
    ) -> Notification:
        db_obj = Notification(
            session_id=session_id,
            type=type,
            title=title,
            message=message,
            priority=priority,
            status=NotificationStatus.PENDING,
            meta=meta or {},
        )
        db.add(db_obj)
        await db.flush()
        return db_obj


notification = CRUDNotification()
