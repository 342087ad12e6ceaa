# comanda_digital/schemas/maintenance.py
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from comanda_digital.db.models.audit_log import AuditAction
from comanda_digital.schemas.common import CamelModel, ORMModel


class StaleUser(CamelModel):
    session_id: uuid.UUID
    name: str
    last_active: Optional[datetime] = None


class StaleUserReport(CamelModel):
    threshold_minutes: int
    checked_sessions: int
    stale_users: List[StaleUser]
    cleaned_count: int = 0
    dry_run: bool = True


class AutoCleanupResult(CamelModel):
    enabled: bool
    ran: bool
    last_run_at: Optional[datetime] = None
    report: Optional[StaleUserReport] = None


class AuditLog(ORMModel):
    id: uuid.UUID
    session_id: Optional[uuid.UUID] = None
    action: AuditAction
    details: Dict[str, Any] = {}
    performed_by: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: Optional[datetime] = None
