# comanda_digital/crud/crud_discount.py
import uuid
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital.db.models.discount import Discount, DiscountType


class CRUDDiscount:
    async def get_by_session(self, db: AsyncSession, *, session_id: uuid.UUID) -> List[Discount]:
        result = await db.execute(
            select(Discount).where(Discount.session_id == session_id).order_by(Discount.created_at.asc())
        )
        return list(result.scalars().all())

    async def create(
        self,
        db: AsyncSession,
        *,
        session_id: uuid.UUID,
        type: DiscountType,
        amount: Decimal,
        applied_by: str,
        reason: Optional[str] = None,
    ) -> Discount:
        db_obj = Discount(session_id=session_id, type=type, amount=amount, applied_by=applied_by, reason=reason)
        db.add(db_obj)
        await db.flush()
        return db_obj


discount = CRUDDiscount()
