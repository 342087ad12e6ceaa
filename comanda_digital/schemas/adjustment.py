# comanda_digital/schemas/adjustment.py
import uuid
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, model_validator

from comanda_digital.db.models.discount import DiscountType
from comanda_digital.schemas.common import CamelModel, Money, SideEffects


class DiscountIn(CamelModel):
    type: DiscountType
    amount: Money = Field(..., gt=0)

    @model_validator(mode="after")
    def check_percentage(self) -> "DiscountIn":
        if self.type == DiscountType.PERCENTAGE and self.amount > 100:
            raise ValueError("percentual deve estar entre 0 e 100")
        return self


class BillAdjustmentRequest(CamelModel):
    session_id: uuid.UUID
    # Pedidos a estornar
    voids: List[uuid.UUID] = []
    discount: Optional[DiscountIn] = None
    reason: Optional[str] = None


class BillAdjustmentResult(CamelModel):
    session_id: uuid.UUID
    table_number: Optional[str] = None
    voided_order_ids: List[uuid.UUID]
    discount: Optional[DiscountIn] = None
    original_total: Money
    subtotal: Money
    discount_amount: Money = Decimal("0")
    vat_amount: Money
    new_total: Money
    side_effects: SideEffects
