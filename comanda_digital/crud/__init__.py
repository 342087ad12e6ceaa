# comanda_digital/crud/__init__.py
from .crud_audit_log import audit_log
from .crud_discount import discount
from .crud_maintenance import maintenance
from .crud_menu_item import menu_item
from .crud_notification import notification
from .crud_order import order
from .crud_payment_notification import payment_notification
from .crud_session import session
from .crud_split_bill import split_bill
from .crud_staff import staff
from .crud_table import table
from .crud_waiter_request import waiter_request
