# comanda_digital/db/models/staff.py
import enum

from sqlalchemy import Boolean, Column, String

from comanda_digital.db.base_class import Base, enum_column


class StaffRole(str, enum.Enum):
    WAITER = "waiter"
    SERVER = "server"
    MANAGER = "manager"


class Staff(Base):
    __tablename__ = "staff"

    staff_id = Column(String, nullable=False, unique=True, index=True)  # Código do crachá, ex: "WAITER01"
    name = Column(String, nullable=False)
    email = Column(String, nullable=True, unique=True)
    role = Column(enum_column(StaffRole), default=StaffRole.WAITER, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    hashed_password = Column(String, nullable=True)
