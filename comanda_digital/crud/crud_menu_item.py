# comanda_digital/crud/crud_menu_item.py
import uuid
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital.db.models.menu_item import MenuItem
from comanda_digital.schemas.menu_item import MenuItemCreate, MenuItemUpdate


class CRUDMenuItem:
    async def get(self, db: AsyncSession, id: uuid.UUID) -> Optional[MenuItem]:
        return await db.get(MenuItem, id)

    async def get_multi(
        self, db: AsyncSession, *, category: Optional[str] = None, only_available: bool = True
    ) -> List[MenuItem]:
        query = select(MenuItem)
        if only_available:
            query = query.where(MenuItem.available.is_(True))
        if category:
            query = query.where(MenuItem.category == category)
        result = await db.execute(query.order_by(MenuItem.category, MenuItem.name))
        return list(result.scalars().all())

    async def create(self, db: AsyncSession, *, obj_in: MenuItemCreate) -> MenuItem:
        db_obj = MenuItem(**obj_in.model_dump())
        db.add(db_obj)
        await db.flush()
        return db_obj

    async def update(
        self, db: AsyncSession, *, db_obj: MenuItem, obj_in: Union[MenuItemUpdate, Dict[str, Any]]
    ) -> MenuItem:
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)
        for field in update_data:
            if hasattr(db_obj, field):
                setattr(db_obj, field, update_data[field])
        await db.flush()
        return db_obj


menu_item = CRUDMenuItem()
