# comanda_digital/schemas/__init__.py
from .common import ApiResponse, CamelModel, ErrorResponse, Money, ORMModel, SideEffects
from .menu_item import MenuItem, MenuItemCreate, MenuItemUpdate
from .notification import (
    HelpRequest,
    Notification,
    NotificationAction,
    NotificationCreate,
    NotificationList,
    WaiterRequest,
    WaiterRequestCreate,
)
from .order import (
    CartAdd,
    CartLineIn,
    CartClear,
    CartItem,
    CartLoadRequest,
    CartLoadResult,
    CartUpdate,
    CleanupResult,
    ConfirmResult,
    Order,
    OrderStatusUpdate,
    SessionRef,
)
from .payment import (
    DinerPaymentStatus,
    IndividualPaymentStatus,
    PaymentComplete,
    PaymentNotification,
    PaymentNotificationAck,
    PaymentRequest,
    PaymentSummary,
)
from .adjustment import BillAdjustmentRequest, BillAdjustmentResult, DiscountIn
from .session import (
    AssignStaffRequest,
    DiningSession,
    JoinRequest,
    SessionStart,
    SessionStartResult,
    SessionTotal,
    TransferResult,
    VerifyPinResult,
)
from .split_bill import SplitBill, SplitBillCreate
from .staff import Staff, StaffLogin, Token
from .table import (
    AssignPinRequest,
    AssignPinResult,
    GeneratePinRequest,
    Table,
    TableCreate,
    TableWithPin,
    TransferRequest,
    VerifyPinRequest,
)
from .maintenance import AuditLog, AutoCleanupResult, StaleUser, StaleUserReport
