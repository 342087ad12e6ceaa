# comanda_digital/db/models/waiter_request.py
import enum

from sqlalchemy import Column, DateTime, ForeignKey, String

from comanda_digital.db.base_class import Base, enum_column


class WaiterRequestType(str, enum.Enum):
    BILL = "bill"
    HELP = "help"


class WaiterRequestStatus(str, enum.Enum):
    PENDING = "pending"
    RESOLVED = "resolved"


class WaiterRequest(Base):
    __tablename__ = "waiter_requests"

    session_id = Column(ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    request_type = Column(enum_column(WaiterRequestType), nullable=False)
    status = Column(enum_column(WaiterRequestStatus), default=WaiterRequestStatus.PENDING, nullable=False)
    table_number = Column(String, nullable=True)
    customer_name = Column(String, nullable=True)
    resolved_at = Column(DateTime(timezone=True), nullable=True)
