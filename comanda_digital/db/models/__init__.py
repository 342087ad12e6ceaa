# Importa todos os modelos para que Base.metadata (create_all e Alembic) enxergue as tabelas
from comanda_digital.db.models.table import RestaurantTable, TableState
from comanda_digital.db.models.staff import Staff, StaffRole
from comanda_digital.db.models.session import (
    DiningSession,
    PaymentMethod,
    PaymentStatus,
    SessionStatus,
    SESSION_TRANSITIONS,
)
from comanda_digital.db.models.menu_item import MenuItem
from comanda_digital.db.models.split_bill import SplitBill, SplitBillStatus
from comanda_digital.db.models.order import (
    BILLABLE_STATUSES,
    KITCHEN_STATUSES,
    ORDER_TRANSITIONS,
    VOIDABLE_STATUSES,
    Order,
    OrderStatus,
)
from comanda_digital.db.models.discount import Discount, DiscountType
from comanda_digital.db.models.notification import (
    CLIENT_NOTIFICATION_TYPES,
    NOTIFICATION_TRANSITIONS,
    Notification,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
)
from comanda_digital.db.models.waiter_request import WaiterRequest, WaiterRequestStatus, WaiterRequestType
from comanda_digital.db.models.payment_notification import PaymentNotification, PaymentNotificationStatus, PaymentType
from comanda_digital.db.models.audit_log import AuditAction, AuditLog
from comanda_digital.db.models.maintenance_run import MaintenanceRun
