# comanda_digital/db/models/table.py
import enum

from sqlalchemy import Boolean, Column, Integer, String, Uuid

from comanda_digital.db.base_class import Base


class TableState(str, enum.Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"


class RestaurantTable(Base):
    __tablename__ = "tables"

    table_number = Column(String, nullable=False, unique=True, index=True)  # Ex: "A1", "12"
    capacity = Column(Integer, nullable=True)
    occupied = Column(Boolean, default=False, nullable=False)
    # Sessão que ocupa a mesa; occupied=True se e somente se estiver preenchido
    current_session_id = Column(Uuid(as_uuid=True), nullable=True, index=True)
    current_pin = Column(String(4), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    version_id = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}

    @property
    def state(self) -> TableState:
        return TableState.OCCUPIED if self.occupied else TableState.AVAILABLE
