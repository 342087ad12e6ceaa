# comanda_digital/crud/crud_audit_log.py
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital.db.models.audit_log import AuditAction, AuditLog


class CRUDAuditLog:
    async def get_multi(
        self, db: AsyncSession, *, action: Optional[AuditAction] = None, skip: int = 0, limit: int = 100
    ) -> List[AuditLog]:
        query = select(AuditLog)
        if action is not None:
            query = query.where(AuditLog.action == action)
        result = await db.execute(query.order_by(AuditLog.created_at.desc()).offset(skip).limit(limit))
        return list(result.scalars().all())

    async def create(self, db: AsyncSession, **fields) -> AuditLog:
        db_obj = AuditLog(**fields)
        db.add(db_obj)
        await db.flush()
        return db_obj


audit_log = CRUDAuditLog()
