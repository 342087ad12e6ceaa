# comanda_digital/schemas/split_bill.py
import uuid
from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field

from comanda_digital.db.models.split_bill import SplitBillStatus
from comanda_digital.schemas.common import CamelModel, Money, ORMModel


class SplitBillCreate(CamelModel):
    session_id: uuid.UUID
    menu_item_id: uuid.UUID
    original_price: Money = Field(..., gt=0)
    split_count: int = Field(..., ge=2, le=50)
    participants: List[Any] = []
    order_ids: List[uuid.UUID] = []


class SplitBill(ORMModel):
    id: uuid.UUID
    session_id: uuid.UUID
    menu_item_id: uuid.UUID
    original_price: Money
    split_price: Money
    split_count: int
    participants: List[Any] = []
    status: SplitBillStatus
    resolved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
