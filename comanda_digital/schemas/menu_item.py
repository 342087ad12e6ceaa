# comanda_digital/schemas/menu_item.py
import uuid
from typing import Optional

from pydantic import Field

from comanda_digital.schemas.common import CamelModel, Money, ORMModel


class MenuItemBase(CamelModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    price: Money = Field(..., ge=0)
    category: Optional[str] = None
    available: bool = True


class MenuItemCreate(MenuItemBase):
    pass


class MenuItemUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Money] = Field(None, ge=0)
    category: Optional[str] = None
    available: Optional[bool] = None


class MenuItem(MenuItemBase, ORMModel):
    id: uuid.UUID
