# comanda_digital/schemas/staff.py
import uuid
from typing import Optional

from comanda_digital.db.models.staff import StaffRole
from comanda_digital.schemas.common import CamelModel, ORMModel


class StaffLogin(CamelModel):
    staff_id: str
    password: Optional[str] = None


class Staff(ORMModel):
    id: uuid.UUID
    staff_id: str
    name: str
    email: Optional[str] = None
    role: StaffRole
    is_active: bool


class Token(CamelModel):
    access_token: str
    token_type: str = "bearer"
    staff: Staff
