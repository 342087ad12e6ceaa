# comanda_digital/services/audit_service.py
import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital import crud
from comanda_digital.db.models.audit_log import AuditAction, AuditLog

logger = logging.getLogger(__name__)


def request_origin(request: Optional[Request]) -> Dict[str, Optional[str]]:
    """IP (atrás de proxy, se houver) e user agent de quem fez a requisição."""
    if request is None:
        return {"ip_address": None, "user_agent": None}
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        ip = forwarded.split(",")[0].strip()
    else:
        ip = request.headers.get("x-real-ip") or (request.client.host if request.client else None)
    return {"ip_address": ip, "user_agent": request.headers.get("user-agent")}


async def log_action(
    db: AsyncSession,
    *,
    action: AuditAction,
    session_id: Optional[uuid.UUID] = None,
    details: Optional[Dict[str, Any]] = None,
    performed_by: Optional[str] = None,
    request: Optional[Request] = None,
) -> AuditLog:
    entry = await crud.audit_log.create(
        db,
        action=action,
        session_id=session_id,
        details=details or {},
        performed_by=performed_by or "system",
        **request_origin(request),
    )
    logger.info(f"Auditoria: {action.value} por {entry.performed_by} (sessão {session_id})")
    return entry
