# comanda_digital/crud/crud_session.py
import uuid
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital.db.models.session import DiningSession, SessionStatus
from comanda_digital.db.models.table import RestaurantTable


class CRUDSession:
    async def get(self, db: AsyncSession, id: uuid.UUID) -> Optional[DiningSession]:
        return await db.get(DiningSession, id)

    async def get_with_table_number(
        self, db: AsyncSession, id: uuid.UUID
    ) -> Tuple[Optional[DiningSession], Optional[str]]:
        result = await db.execute(
            select(DiningSession, RestaurantTable.table_number)
            .join(RestaurantTable, RestaurantTable.id == DiningSession.table_id)
            .where(DiningSession.id == id)
        )
        row = result.first()
        if row is None:
            return None, None
        return row[0], row[1]

    async def get_active_for_table(self, db: AsyncSession, *, table_id: uuid.UUID) -> Optional[DiningSession]:
        result = await db.execute(
            select(DiningSession)
            .where(DiningSession.table_id == table_id, DiningSession.status == SessionStatus.ACTIVE)
            .order_by(DiningSession.created_at.desc())
        )
        return result.scalars().first()

    async def get_multi_active(self, db: AsyncSession) -> List[Tuple[DiningSession, str]]:
        result = await db.execute(
            select(DiningSession, RestaurantTable.table_number)
            .join(RestaurantTable, RestaurantTable.id == DiningSession.table_id)
            .where(DiningSession.status == SessionStatus.ACTIVE)
            .order_by(RestaurantTable.table_number)
        )
        return [(row[0], row[1]) for row in result.all()]

    async def get_served_by(self, db: AsyncSession, *, staff_pk: uuid.UUID) -> List[Tuple[DiningSession, str]]:
        result = await db.execute(
            select(DiningSession, RestaurantTable.table_number)
            .join(RestaurantTable, RestaurantTable.id == DiningSession.table_id)
            .where(DiningSession.served_by == staff_pk, DiningSession.status == SessionStatus.ACTIVE)
            .order_by(RestaurantTable.table_number)
        )
        return [(row[0], row[1]) for row in result.all()]

    async def create(
        self,
        db: AsyncSession,
        *,
        table_id: uuid.UUID,
        started_by_name: Optional[str] = None,
        served_by: Optional[uuid.UUID] = None,
        diners: Optional[list] = None,
    ) -> DiningSession:
        db_obj = DiningSession(
            table_id=table_id,
            status=SessionStatus.ACTIVE,
            started_by_name=started_by_name,
            served_by=served_by,
            diners=diners or [],
        )
        db.add(db_obj)
        await db.flush()
        return db_obj


session = CRUDSession()
