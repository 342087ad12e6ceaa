# comanda_digital/crud/crud_waiter_request.py
import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital.db.models.waiter_request import WaiterRequest, WaiterRequestStatus, WaiterRequestType


class CRUDWaiterRequest:
    async def get_pending(self, db: AsyncSession, *, limit: int = 50) -> List[WaiterRequest]:
        result = await db.execute(
            select(WaiterRequest)
            .where(WaiterRequest.status == WaiterRequestStatus.PENDING)
            .order_by(WaiterRequest.created_at.asc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def create(
        self,
        db: AsyncSession,
        *,
        session_id: uuid.UUID,
        request_type: WaiterRequestType,
        table_number: Optional[str] = None,
        customer_name: Optional[str] = None,
    ) -> WaiterRequest:
        db_obj = WaiterRequest(
            session_id=session_id,
            request_type=request_type,
            status=WaiterRequestStatus.PENDING,
            table_number=table_number,
            customer_name=customer_name,
        )
        db.add(db_obj)
        await db.flush()
        return db_obj


waiter_request = CRUDWaiterRequest()
