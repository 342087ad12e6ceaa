# comanda_digital/api/v1/endpoints/admin.py
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital import crud, schemas
from comanda_digital.api import deps
from comanda_digital.db.models.audit_log import AuditAction
from comanda_digital.db.models.staff import Staff

router = APIRouter()


@router.get("/audit-logs", response_model=schemas.ApiResponse[List[schemas.AuditLog]])
async def read_audit_logs(
    db: AsyncSession = Depends(deps.get_db),
    action: Optional[AuditAction] = None,
    skip: int = 0,
    limit: int = Query(100, ge=1, le=500),
    current_staff: Staff = Depends(deps.get_current_manager),
) -> Any:
    """
    Trilha de auditoria, da mais recente para a mais antiga.
    """
    logs = await crud.audit_log.get_multi(db, action=action, skip=skip, limit=limit)
    return schemas.ApiResponse(data=[schemas.AuditLog.model_validate(entry) for entry in logs])
