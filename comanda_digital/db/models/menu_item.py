# comanda_digital/db/models/menu_item.py
from sqlalchemy import Boolean, Column, Numeric, String, Text

from comanda_digital.db.base_class import Base


class MenuItem(Base):
    __tablename__ = "menu_items"

    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    category = Column(String, nullable=True, index=True)
    available = Column(Boolean, default=True, nullable=False)
