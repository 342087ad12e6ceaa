# comanda_digital/db/models/session.py
import enum

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, Numeric, String

from comanda_digital.db.base_class import Base, enum_column


class SessionStatus(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, enum.Enum):
    UNPAID = "unpaid"
    PENDING = "pending"  # Conta solicitada, aguardando a equipe
    COMPLETED = "completed"


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    CARD = "card"
    QR_CODE = "qr_code"
    DIGITAL = "digital"


# Transições permitidas: só saem de "active", nunca voltam
SESSION_TRANSITIONS = {
    SessionStatus.ACTIVE: {SessionStatus.COMPLETED, SessionStatus.CANCELLED},
    SessionStatus.COMPLETED: set(),
    SessionStatus.CANCELLED: set(),
}


class DiningSession(Base):
    __tablename__ = "sessions"

    table_id = Column(ForeignKey("tables.id"), nullable=False, index=True)
    status = Column(enum_column(SessionStatus), default=SessionStatus.ACTIVE, nullable=False, index=True)
    started_by_name = Column(String, nullable=True)
    served_by = Column(ForeignKey("staff.id"), nullable=True, index=True)
    # Lista de participantes: {"name", "isActive", "joinedAt", "lastActive", "logoutTime"}
    diners = Column(JSON, default=list, nullable=False)

    payment_status = Column(enum_column(PaymentStatus), default=PaymentStatus.UNPAID, nullable=False)
    payment_method = Column(enum_column(PaymentMethod), nullable=True)
    tip_amount = Column(Numeric(10, 2), default=0, nullable=False)
    final_total = Column(Numeric(10, 2), nullable=True)  # Gravado apenas ao concluir o pagamento
    payment_requested_at = Column(DateTime(timezone=True), nullable=True)
    payment_completed_at = Column(DateTime(timezone=True), nullable=True)
    completed_by = Column(String, nullable=True)
    version_id = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}

    def can_transition_to(self, new_status: SessionStatus) -> bool:
        return new_status in SESSION_TRANSITIONS[SessionStatus(self.status)]
