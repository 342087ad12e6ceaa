# comanda_digital/crud/crud_order.py
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital.db.models.menu_item import MenuItem
from comanda_digital.db.models.order import KITCHEN_STATUSES, Order, OrderStatus
from comanda_digital.db.models.session import DiningSession, SessionStatus
from comanda_digital.db.models.table import RestaurantTable
from comanda_digital.schemas.order import CartAdd


class CRUDOrder:
    async def get(self, db: AsyncSession, id: uuid.UUID) -> Optional[Order]:
        return await db.get(Order, id)

    async def get_by_session(
        self,
        db: AsyncSession,
        *,
        session_id: uuid.UUID,
        statuses: Optional[Iterable[OrderStatus]] = None,
        diner_name: Optional[str] = None,
        newest_first: bool = False,
    ) -> List[Order]:
        query = select(Order).where(Order.session_id == session_id)
        if statuses is not None:
            query = query.where(Order.status.in_(list(statuses)))
        if diner_name:
            query = query.where(Order.diner_name == diner_name)
        order_by = Order.created_at.desc() if newest_first else Order.created_at.asc()
        result = await db.execute(query.order_by(order_by))
        return list(result.unique().scalars().all())

    async def get_priced_lines(
        self, db: AsyncSession, *, session_id: uuid.UUID, statuses: Iterable[OrderStatus]
    ) -> List[Tuple[Decimal, int]]:
        """(preço do cardápio, quantidade) de cada pedido da sessão nos status informados."""
        result = await db.execute(
            select(MenuItem.price, Order.quantity)
            .join(MenuItem, MenuItem.id == Order.menu_item_id)
            .where(Order.session_id == session_id, Order.status.in_(list(statuses)))
        )
        return [(row[0], row[1]) for row in result.all()]

    async def find_cart_line(self, db: AsyncSession, *, obj_in: CartAdd) -> Optional[Order]:
        query = select(Order).where(
            Order.session_id == obj_in.session_id,
            Order.menu_item_id == obj_in.menu_item_id,
            Order.status == OrderStatus.CART,
            Order.is_shared == obj_in.is_shared,
            Order.is_takeaway == obj_in.is_takeaway,
        )
        query = query.where(Order.notes.is_(None) if obj_in.notes is None else Order.notes == obj_in.notes)
        query = query.where(
            Order.diner_name.is_(None) if obj_in.diner_name is None else Order.diner_name == obj_in.diner_name
        )
        result = await db.execute(query)
        # Personalizações são JSON: compara no Python
        for line in result.unique().scalars().all():
            if (line.customizations or []) == obj_in.customizations:
                return line
        return None

    async def create_cart_line(self, db: AsyncSession, *, obj_in: CartAdd, menu_item: MenuItem) -> Order:
        db_obj = Order(
            session_id=obj_in.session_id,
            menu_item=menu_item,
            menu_item_id=obj_in.menu_item_id,
            quantity=obj_in.quantity,
            status=OrderStatus.CART,
            notes=obj_in.notes,
            is_shared=obj_in.is_shared,
            is_takeaway=obj_in.is_takeaway,
            customizations=list(obj_in.customizations),
            diner_name=obj_in.diner_name,
        )
        db.add(db_obj)
        await db.flush()
        return db_obj

    async def delete_cart_older_than(self, db: AsyncSession, *, session_id: uuid.UUID, cutoff: datetime) -> int:
        result = await db.execute(
            delete(Order)
            .where(
                Order.session_id == session_id,
                Order.status == OrderStatus.CART,
                Order.created_at < cutoff,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def delete_cart(self, db: AsyncSession, *, session_id: uuid.UUID, diner_name: Optional[str] = None) -> int:
        query = delete(Order).where(Order.session_id == session_id, Order.status == OrderStatus.CART)
        if diner_name:
            query = query.where(Order.diner_name == diner_name)
        result = await db.execute(query.execution_options(synchronize_session=False))
        return result.rowcount or 0

    async def set_split_bill(
        self, db: AsyncSession, *, session_id: uuid.UUID, order_ids: List[uuid.UUID], split_bill_id: uuid.UUID
    ) -> int:
        result = await db.execute(
            update(Order)
            .where(Order.session_id == session_id, Order.id.in_(order_ids))
            .values(split_bill_id=split_bill_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def void(
        self, db: AsyncSession, *, orders: Sequence[Order], when: datetime, reason: str
    ) -> int:
        for db_obj in orders:
            db_obj.status = OrderStatus.VOIDED
            db_obj.voided_at = when
            db_obj.void_reason = reason
        await db.flush()
        return len(orders)

    async def get_many(self, db: AsyncSession, *, session_id: uuid.UUID, ids: Iterable[uuid.UUID]) -> List[Order]:
        result = await db.execute(select(Order).where(Order.session_id == session_id, Order.id.in_(list(ids))))
        return list(result.unique().scalars().all())

    async def get_kitchen_queue(self, db: AsyncSession) -> List[Tuple[Order, str]]:
        result = await db.execute(
            select(Order, RestaurantTable.table_number)
            .join(DiningSession, DiningSession.id == Order.session_id)
            .join(RestaurantTable, RestaurantTable.id == DiningSession.table_id)
            .where(Order.status.in_(KITCHEN_STATUSES), DiningSession.status == SessionStatus.ACTIVE)
            .order_by(Order.created_at.asc())
        )
        return [(row[0], row[1]) for row in result.unique().all()]


order = CRUDOrder()
