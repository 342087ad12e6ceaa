# comanda_digital/db/models/audit_log.py
import enum

from sqlalchemy import JSON, Column, String, Uuid

from comanda_digital.db.base_class import Base, enum_column


class AuditAction(str, enum.Enum):
    TABLE_TRANSFER = "table_transfer"
    PIN_GENERATION = "pin_generation"
    SESSION_CREATION = "session_creation"
    SESSION_COMPLETION = "session_completion"
    ORDER_STATUS_CHANGE = "order_status_change"
    PAYMENT_PROCESSING = "payment_processing"
    STAFF_LOGIN = "staff_login"
    STALE_USER_CLEANUP = "stale_user_cleanup"
    MANAGER_BILL_ADJUSTMENT = "manager_bill_adjustment"


class AuditLog(Base):
    __tablename__ = "audit_logs"

    # Sem FK: o registro de auditoria sobrevive à remoção da sessão
    session_id = Column(Uuid(as_uuid=True), nullable=True, index=True)
    action = Column(enum_column(AuditAction), nullable=False, index=True)
    details = Column(JSON, default=dict, nullable=False)
    performed_by = Column(String, nullable=False, default="system")
    ip_address = Column(String, nullable=True)
    user_agent = Column(String, nullable=True)
