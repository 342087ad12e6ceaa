# comanda_digital/db/models/split_bill.py
import enum

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, Numeric

from comanda_digital.db.base_class import Base, enum_column


class SplitBillStatus(str, enum.Enum):
    ACTIVE = "active"
    RESOLVED = "resolved"


class SplitBill(Base):
    __tablename__ = "split_bills"

    session_id = Column(ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    menu_item_id = Column(ForeignKey("menu_items.id"), nullable=False)
    original_price = Column(Numeric(10, 2), nullable=False)
    split_price = Column(Numeric(10, 2), nullable=False)
    split_count = Column(Integer, nullable=False)
    participants = Column(JSON, default=list, nullable=False)
    status = Column(enum_column(SplitBillStatus), default=SplitBillStatus.ACTIVE, nullable=False)
    resolved_at = Column(DateTime(timezone=True), nullable=True)
