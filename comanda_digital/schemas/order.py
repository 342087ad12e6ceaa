# comanda_digital/schemas/order.py
import uuid
from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field

from comanda_digital.db.models.order import OrderStatus
from comanda_digital.schemas.common import CamelModel, Money


class CartLineIn(CamelModel):
    menu_item_id: uuid.UUID
    quantity: int = Field(1, ge=1, le=99)
    notes: Optional[str] = Field(None, max_length=500)
    is_shared: bool = False
    is_takeaway: bool = False
    customizations: List[Any] = []
    diner_name: Optional[str] = None


class CartAdd(CartLineIn):
    session_id: uuid.UUID


class CartUpdate(CamelModel):
    order_id: uuid.UUID
    quantity: int = Field(..., ge=0, le=99)


class CartLoadRequest(CamelModel):
    session_id: uuid.UUID
    diner_name: Optional[str] = None


class CartClear(CamelModel):
    session_id: uuid.UUID
    diner_name: Optional[str] = None


class SessionRef(CamelModel):
    session_id: uuid.UUID


class CartItem(CamelModel):
    id: uuid.UUID
    menu_item_id: uuid.UUID
    name: str
    price: Money  # Sempre o preço unitário do cardápio
    quantity: int
    notes: Optional[str] = None
    is_shared: bool = False
    is_takeaway: bool = False
    customizations: List[Any] = []
    diner_name: Optional[str] = None
    created_at: Optional[datetime] = None
    is_split: bool = False
    split_price: Optional[Money] = None
    original_price: Optional[Money] = None
    split_count: Optional[int] = None
    participants: Optional[List[Any]] = None
    split_bill_id: Optional[uuid.UUID] = None


class CartLoadResult(CamelModel):
    items: List[CartItem]
    warnings: List[str] = []


class Order(CamelModel):
    id: uuid.UUID
    session_id: uuid.UUID
    table_number: Optional[str] = None
    menu_item_id: uuid.UUID
    name: str
    price: Money
    quantity: int
    status: OrderStatus
    notes: Optional[str] = None
    diner_name: Optional[str] = None
    split_bill_id: Optional[uuid.UUID] = None
    created_at: Optional[datetime] = None


class OrderStatusUpdate(CamelModel):
    order_id: uuid.UUID
    status: OrderStatus


class ConfirmResult(CamelModel):
    session_id: uuid.UUID
    confirmed_count: int
    orders: List[Order]


class CleanupResult(CamelModel):
    deleted_count: int
