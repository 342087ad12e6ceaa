# comanda_digital/db/models/payment_notification.py
import enum

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String

from comanda_digital.db.base_class import Base, enum_column
from comanda_digital.db.models.session import PaymentMethod


class PaymentNotificationStatus(str, enum.Enum):
    PENDING = "pending"
    ACKNOWLEDGED = "acknowledged"
    COMPLETED = "completed"


class PaymentType(str, enum.Enum):
    TABLE = "table"  # Conta inteira da mesa
    INDIVIDUAL = "individual"  # Parte de um único cliente


class PaymentNotification(Base):
    __tablename__ = "payment_notifications"

    session_id = Column(ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    table_number = Column(String, nullable=True)
    payment_type = Column(enum_column(PaymentType), nullable=False, default=PaymentType.TABLE)
    # Preenchido só nos pagamentos individuais
    diner_name = Column(String, nullable=True)
    subtotal = Column(Numeric(10, 2), nullable=False)
    vat_amount = Column(Numeric(10, 2), nullable=False)
    tip_amount = Column(Numeric(10, 2), nullable=False, default=0)
    final_total = Column(Numeric(10, 2), nullable=False)
    status = Column(enum_column(PaymentNotificationStatus), default=PaymentNotificationStatus.PENDING, nullable=False)
    acknowledged_by = Column(String, nullable=True)
    acknowledged_at = Column(DateTime(timezone=True), nullable=True)
    payment_method = Column(enum_column(PaymentMethod), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
