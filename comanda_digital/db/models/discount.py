# comanda_digital/db/models/discount.py
import enum

from sqlalchemy import Column, ForeignKey, Numeric, String

from comanda_digital.db.base_class import Base, enum_column


class DiscountType(str, enum.Enum):
    FIXED = "fixed"  # Valor em reais
    PERCENTAGE = "percentage"  # Percentual sobre o subtotal


class Discount(Base):
    """Desconto concedido pelo gerente sobre a conta da sessão."""

    __tablename__ = "discounts"

    session_id = Column(ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(enum_column(DiscountType), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    applied_by = Column(String, nullable=False)
    reason = Column(String, nullable=True)
