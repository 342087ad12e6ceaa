# comanda_digital/schemas/session.py
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import Field

from comanda_digital.db.models.session import PaymentMethod, PaymentStatus, SessionStatus
from comanda_digital.schemas.common import CamelModel, Money, ORMModel, SideEffects
from comanda_digital.schemas.table import Table, TableWithPin


class DiningSession(ORMModel):
    id: uuid.UUID
    table_id: uuid.UUID
    table_number: Optional[str] = None
    status: SessionStatus
    started_by_name: Optional[str] = None
    served_by: Optional[uuid.UUID] = None
    diners: List[Dict[str, Any]] = []
    payment_status: PaymentStatus
    payment_method: Optional[PaymentMethod] = None
    tip_amount: Money = Decimal("0")
    final_total: Optional[Money] = None
    payment_completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def with_table(cls, session, table_number: Optional[str] = None) -> "DiningSession":
        return cls.model_validate(session).model_copy(update={"table_number": table_number})


class SessionStart(CamelModel):
    table_id: uuid.UUID
    pin: str = Field(..., min_length=1)
    started_by_name: Optional[str] = Field(None, max_length=80)


class SessionStartResult(CamelModel):
    session: DiningSession
    joined: bool


class JoinRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=80)


class AssignStaffRequest(CamelModel):
    session_id: uuid.UUID
    staff_id: str


class SessionTotal(CamelModel):
    session_id: uuid.UUID
    subtotal: Money
    tax: Money
    discount: Money = Decimal("0")
    total: Money
    vat_rate: Money
    item_count: int


class VerifyPinResult(CamelModel):
    table: Table
    session: Optional[DiningSession] = None
    # "join" quando já existe sessão ativa na mesa, "start" caso contrário
    action: str


class TransferResult(CamelModel):
    source_table: TableWithPin
    destination_table: TableWithPin
    session: DiningSession
    side_effects: SideEffects
