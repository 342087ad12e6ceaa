# comanda_digital/db/models/notification.py
import enum

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Text

from comanda_digital.db.base_class import Base, enum_column


class NotificationType(str, enum.Enum):
    KITCHEN_READY = "kitchen_ready"
    PAYMENT_REQUEST = "payment_request"
    CUSTOMER_HELP = "customer_help"
    TABLE_TRANSFER = "table_transfer"
    PAYMENT_COMPLETE = "payment_complete"
    BILL_ADJUSTMENT = "bill_adjustment"


# Tipos que podem ser criados diretamente pela rota pública de notificações
CLIENT_NOTIFICATION_TYPES = (
    NotificationType.KITCHEN_READY,
    NotificationType.PAYMENT_REQUEST,
    NotificationType.CUSTOMER_HELP,
)


class NotificationPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class NotificationStatus(str, enum.Enum):
    PENDING = "pending"
    ACKNOWLEDGED = "acknowledged"
    RESOLVED = "resolved"


# Monotônico: pending -> acknowledged -> resolved
NOTIFICATION_TRANSITIONS = {
    NotificationStatus.PENDING: {NotificationStatus.ACKNOWLEDGED, NotificationStatus.RESOLVED},
    NotificationStatus.ACKNOWLEDGED: {NotificationStatus.RESOLVED},
    NotificationStatus.RESOLVED: set(),
}


class Notification(Base):
    __tablename__ = "notifications"

    session_id = Column(ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(enum_column(NotificationType), nullable=False, index=True)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    priority = Column(enum_column(NotificationPriority), default=NotificationPriority.MEDIUM, nullable=False)
    status = Column(enum_column(NotificationStatus), default=NotificationStatus.PENDING, nullable=False, index=True)
    # "metadata" é reservado no declarative, por isso o atributo tem outro nome
    meta = Column("metadata", JSON, default=dict, nullable=False)
    acknowledged_at = Column(DateTime(timezone=True), nullable=True)
    acknowledged_by = Column(String, nullable=True)
    resolved_at = Column(DateTime(timezone=True), nullable=True)
    resolved_by = Column(String, nullable=True)

    def can_transition_to(self, new_status: NotificationStatus) -> bool:
        return new_status in NOTIFICATION_TRANSITIONS[NotificationStatus(self.status)]
