# comanda_digital/db/models/order.py
import enum

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from comanda_digital.db.base_class import Base, enum_column


class OrderStatus(str, enum.Enum):
    CART = "cart"  # Ainda no carrinho, não enviado à cozinha
    PLACED = "placed"
    WAITING = "waiting"
    PREPARING = "preparing"
    READY = "ready"
    SERVED = "served"
    CANCELLED = "cancelled"
    VOIDED = "voided"  # Estornado pelo gerente no ajuste de conta


# Depois de sair do carrinho o pedido só avança
ORDER_TRANSITIONS = {
    OrderStatus.CART: {OrderStatus.PLACED, OrderStatus.CANCELLED},
    OrderStatus.PLACED: {OrderStatus.WAITING, OrderStatus.PREPARING, OrderStatus.CANCELLED},
    OrderStatus.WAITING: {OrderStatus.PREPARING, OrderStatus.CANCELLED},
    OrderStatus.PREPARING: {OrderStatus.READY, OrderStatus.CANCELLED},
    OrderStatus.READY: {OrderStatus.SERVED},
    OrderStatus.SERVED: set(),
    OrderStatus.CANCELLED: set(),
    OrderStatus.VOIDED: set(),
}

# Status que entram na conta da sessão
BILLABLE_STATUSES = (
    OrderStatus.PLACED,
    OrderStatus.WAITING,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.SERVED,
)

KITCHEN_STATUSES = (
    OrderStatus.PLACED,
    OrderStatus.WAITING,
    OrderStatus.PREPARING,
    OrderStatus.READY,
)

# Só o que está na conta pode ser estornado; o estorno não passa pelo fluxo da cozinha
VOIDABLE_STATUSES = BILLABLE_STATUSES


class Order(Base):
    __tablename__ = "orders"

    session_id = Column(ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    menu_item_id = Column(ForeignKey("menu_items.id"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    status = Column(enum_column(OrderStatus), default=OrderStatus.CART, nullable=False, index=True)
    notes = Column(Text, nullable=True)
    is_shared = Column(Boolean, default=False, nullable=False)
    is_takeaway = Column(Boolean, default=False, nullable=False)
    customizations = Column(JSON, default=list, nullable=False)
    diner_name = Column(String, nullable=True)
    split_bill_id = Column(ForeignKey("split_bills.id", ondelete="SET NULL"), nullable=True)
    voided_at = Column(DateTime(timezone=True), nullable=True)
    void_reason = Column(String, nullable=True)

    menu_item = relationship("MenuItem", lazy="joined")

    def can_transition_to(self, new_status: OrderStatus) -> bool:
        return new_status in ORDER_TRANSITIONS[OrderStatus(self.status)]
