# comanda_digital/crud/crud_payment_notification.py
import uuid
from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital.db.models.payment_notification import PaymentNotification, PaymentNotificationStatus, PaymentType


class CRUDPaymentNotification:
    async def get(self, db: AsyncSession, id: uuid.UUID) -> Optional[PaymentNotification]:
        return await db.get(PaymentNotification, id)

    async def get_pending(
        self, db: AsyncSession, *, session_ids: Optional[Sequence[uuid.UUID]] = None
    ) -> List[PaymentNotification]:
        query = select(PaymentNotification).where(PaymentNotification.status == PaymentNotificationStatus.PENDING)
        if session_ids is not None:
            query = query.where(PaymentNotification.session_id.in_(list(session_ids)))
        result = await db.execute(query.order_by(PaymentNotification.created_at.desc()))
        return list(result.scalars().all())

    async def create(self, db: AsyncSession, **fields) -> PaymentNotification:
        db_obj = PaymentNotification(status=PaymentNotificationStatus.PENDING, **fields)
        db.add(db_obj)
        await db.flush()
        return db_obj

    async def get_by_session(
        self, db: AsyncSession, *, session_id: uuid.UUID, payment_type: Optional[PaymentType] = None
    ) -> List[PaymentNotification]:
        query = select(PaymentNotification).where(PaymentNotification.session_id == session_id)
        if payment_type is not None:
            query = query.where(PaymentNotification.payment_type == payment_type)
        result = await db.execute(query.order_by(PaymentNotification.created_at.asc()))
        return list(result.scalars().all())

    async def get_for_diner(
        self, db: AsyncSession, *, session_id: uuid.UUID, diner_name: str
    ) -> Optional[PaymentNotification]:
        """Pedido individual mais recente do cliente."""
        result = await db.execute(
            select(PaymentNotification)
            .where(
                PaymentNotification.session_id == session_id,
                PaymentNotification.payment_type == PaymentType.INDIVIDUAL,
                PaymentNotification.diner_name == diner_name,
            )
            .order_by(PaymentNotification.created_at.desc())
        )
        return result.scalars().first()

    async def complete_for_session(self, db: AsyncSession, *, session_id: uuid.UUID, when: datetime) -> int:
        result = await db.execute(
            update(PaymentNotification)
            .where(
                PaymentNotification.session_id == session_id,
                PaymentNotification.status != PaymentNotificationStatus.COMPLETED,
            )
            .values(status=PaymentNotificationStatus.COMPLETED, updated_at=when)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0


payment_notification = CRUDPaymentNotification()
