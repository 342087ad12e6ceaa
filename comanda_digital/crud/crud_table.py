# comanda_digital/crud/crud_table.py
import uuid
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital.db.models.table import RestaurantTable
from comanda_digital.schemas.table import TableCreate


class CRUDTable:
    async def get(self, db: AsyncSession, id: uuid.UUID) -> Optional[RestaurantTable]:
        return await db.get(RestaurantTable, id)

    async def get_by_number(self, db: AsyncSession, *, table_number: str) -> Optional[RestaurantTable]:
        result = await db.execute(select(RestaurantTable).where(RestaurantTable.table_number == table_number))
        return result.scalars().first()

    async def get_active_by_reference(
        self, db: AsyncSession, *, reference: str, table_number: Optional[str] = None
    ) -> Optional[RestaurantTable]:
        """
        Procura uma mesa ativa pelo UUID e, se não achar, pelo número impresso na mesa.
        """
        table = None
        try:
            table_id = uuid.UUID(str(reference))
        except (TypeError, ValueError):
            table_id = None
        if table_id is not None:
            table = await self.get(db, table_id)
        if table is None:
            table = await self.get_by_number(db, table_number=table_number or str(reference))
        if table is None or not table.is_active:
            return None
        return table

    async def get_multi(self, db: AsyncSession, *, skip: int = 0, limit: int = 100) -> List[RestaurantTable]:
        result = await db.execute(
            select(RestaurantTable)
            .where(RestaurantTable.is_active.is_(True))
            .order_by(RestaurantTable.table_number)
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def create(self, db: AsyncSession, *, obj_in: TableCreate) -> RestaurantTable:
        if await self.get_by_number(db, table_number=obj_in.table_number):
            raise ValueError(f"Mesa com o número \"{obj_in.table_number}\" já existe.")
        db_obj = RestaurantTable(table_number=obj_in.table_number, capacity=obj_in.capacity)
        db.add(db_obj)
        await db.flush()
        return db_obj

    async def set_pin_if_empty(self, db: AsyncSession, *, table: RestaurantTable, pin: str) -> bool:
        """
        Grava o PIN somente se a mesa ainda não tiver um. Retorna False quando outro
        processo gravou primeiro; o objeto é recarregado nos dois casos.
        """
        result = await db.execute(
            update(RestaurantTable)
            .where(RestaurantTable.id == table.id, RestaurantTable.current_pin.is_(None))
            .values(current_pin=pin, version_id=RestaurantTable.version_id + 1)
            .execution_options(synchronize_session=False)
        )
        await db.refresh(table)
        return result.rowcount == 1


table = CRUDTable()
