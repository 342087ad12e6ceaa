# comanda_digital/schemas/notification.py
import uuid
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from comanda_digital.db.models.notification import NotificationPriority, NotificationStatus, NotificationType
from comanda_digital.db.models.waiter_request import WaiterRequestStatus, WaiterRequestType
from comanda_digital.schemas.common import CamelModel, ORMModel


class NotificationCreate(CamelModel):
    session_id: uuid.UUID
    type: NotificationType
    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    priority: NotificationPriority = NotificationPriority.MEDIUM
    metadata: Dict[str, Any] = {}


class Notification(ORMModel):
    id: uuid.UUID
    session_id: uuid.UUID
    table_number: Optional[str] = None
    type: NotificationType
    title: str
    message: str
    priority: NotificationPriority
    status: NotificationStatus
    # O atributo do modelo se chama "meta"; no JSON continua "metadata"
    metadata: Dict[str, Any] = Field(default_factory=dict, validation_alias="meta", serialization_alias="metadata")
    acknowledged_at: Optional[datetime] = None
    acknowledged_by: Optional[str] = None
    resolved_at: Optional[datetime] = None
    resolved_by: Optional[str] = None
    created_at: Optional[datetime] = None


class NotificationAction(CamelModel):
    action: Literal["acknowledge", "resolve"] = "acknowledge"
    staff_member: Optional[str] = None


class HelpRequest(CamelModel):
    session_id: uuid.UUID
    help_type: str = "general"
    message: Optional[str] = Field(None, max_length=500)
    diner_name: Optional[str] = None


class WaiterRequestCreate(CamelModel):
    session_id: uuid.UUID
    request_type: WaiterRequestType
    customer_name: Optional[str] = None


class WaiterRequest(ORMModel):
    id: uuid.UUID
    session_id: uuid.UUID
    request_type: WaiterRequestType
    status: WaiterRequestStatus
    table_number: Optional[str] = None
    customer_name: Optional[str] = None
    created_at: Optional[datetime] = None


class NotificationList(CamelModel):
    notifications: List[Notification]
    count: int
