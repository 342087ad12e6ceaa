# comanda_digital/crud/crud_split_bill.py
import uuid
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital.db.models.split_bill import SplitBill, SplitBillStatus


class CRUDSplitBill:
    async def get(self, db: AsyncSession, id: uuid.UUID) -> Optional[SplitBill]:
        return await db.get(SplitBill, id)

    async def get_active_by_session(self, db: AsyncSession, *, session_id: uuid.UUID) -> Dict[uuid.UUID, SplitBill]:
        result = await db.execute(
            select(SplitBill).where(SplitBill.session_id == session_id, SplitBill.status == SplitBillStatus.ACTIVE)
        )
        return {split.id: split for split in result.scalars().all()}

    async def create(
        self,
        db: AsyncSession,
        *,
        session_id: uuid.UUID,
        menu_item_id: uuid.UUID,
        original_price: Decimal,
        split_price: Decimal,
        split_count: int,
        participants: List,
    ) -> SplitBill:
        db_obj = SplitBill(
            session_id=session_id,
            menu_item_id=menu_item_id,
            original_price=original_price,
            split_price=split_price,
            split_count=split_count,
            participants=list(participants),
            status=SplitBillStatus.ACTIVE,
        )
        db.add(db_obj)
        await db.flush()
        return db_obj


split_bill = CRUDSplitBill()
