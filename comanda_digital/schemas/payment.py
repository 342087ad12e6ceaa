# comanda_digital/schemas/payment.py
import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from comanda_digital.db.models.payment_notification import PaymentNotificationStatus, PaymentType
from comanda_digital.db.models.session import PaymentMethod, PaymentStatus, SessionStatus
from comanda_digital.schemas.common import CamelModel, Money, ORMModel


class PaymentRequest(CamelModel):
    session_id: uuid.UUID
    tip_amount: Money = Field(Decimal("0"), ge=0)
    payment_type: PaymentType = PaymentType.TABLE
    # Obrigatório quando payment_type = individual
    diner_name: Optional[str] = None


class PaymentComplete(CamelModel):
    session_id: uuid.UUID
    payment_method: PaymentMethod
    completed_by: Optional[str] = None
    payment_type: PaymentType = PaymentType.TABLE
    diner_name: Optional[str] = None


class PaymentSummary(CamelModel):
    session_id: uuid.UUID
    table_number: Optional[str] = None
    payment_type: PaymentType = PaymentType.TABLE
    diner_name: Optional[str] = None
    subtotal: Money
    discount_amount: Money = Decimal("0")
    vat_amount: Money
    # Partes individuais já pagas, abatidas da conta da mesa
    already_paid: Money = Decimal("0")
    tip_amount: Money
    final_total: Money
    payment_status: PaymentStatus
    session_status: SessionStatus
    payment_method: Optional[PaymentMethod] = None
    payment_completed_at: Optional[datetime] = None
    already_completed: bool = False


class DinerPaymentStatus(CamelModel):
    diner_name: str
    subtotal: Money
    vat_amount: Money
    tip_amount: Money
    final_total: Money
    payment_status: PaymentStatus
    payment_method: Optional[PaymentMethod] = None
    paid_at: Optional[datetime] = None


class IndividualPaymentStatus(CamelModel):
    session_id: uuid.UUID
    table_number: Optional[str] = None
    total_diners: int
    paid_diners: int
    remaining_diners: int
    all_paid: bool
    individual_payments: List[DinerPaymentStatus]


class PaymentNotification(ORMModel):
    id: uuid.UUID
    session_id: uuid.UUID
    table_number: Optional[str] = None
    payment_type: PaymentType
    diner_name: Optional[str] = None
    subtotal: Money
    vat_amount: Money
    tip_amount: Money
    final_total: Money
    status: PaymentNotificationStatus
    acknowledged_by: Optional[str] = None
    acknowledged_at: Optional[datetime] = None
    payment_method: Optional[PaymentMethod] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class PaymentNotificationAck(CamelModel):
    notification_id: uuid.UUID
