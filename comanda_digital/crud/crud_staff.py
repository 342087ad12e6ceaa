# comanda_digital/crud/crud_staff.py
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital.core.security import get_password_hash
from comanda_digital.db.models.staff import Staff, StaffRole


class CRUDStaff:
    async def get(self, db: AsyncSession, id: uuid.UUID) -> Optional[Staff]:
        return await db.get(Staff, id)

    async def get_by_staff_id(self, db: AsyncSession, *, staff_id: str) -> Optional[Staff]:
        result = await db.execute(select(Staff).where(Staff.staff_id == staff_id))
        return result.scalars().first()

    async def get_active_by_staff_id(self, db: AsyncSession, *, staff_id: str) -> Optional[Staff]:
        staff = await self.get_by_staff_id(db, staff_id=staff_id)
        if staff is None or not staff.is_active:
            return None
        return staff

    async def create(
        self,
        db: AsyncSession,
        *,
        staff_id: str,
        name: str,
        role: StaffRole = StaffRole.WAITER,
        password: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Staff:
        db_obj = Staff(
            staff_id=staff_id,
            name=name,
            role=role,
            email=email,
            hashed_password=get_password_hash(password) if password else None,
        )
        db.add(db_obj)
        await db.flush()
        return db_obj

    def is_manager(self, staff: Staff) -> bool:
        return staff.role == StaffRole.MANAGER


staff = CRUDStaff()
