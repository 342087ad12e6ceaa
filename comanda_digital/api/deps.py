# comanda_digital/api/deps.py
from typing import Optional

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital import crud
from comanda_digital.core import security
from comanda_digital.core.config import settings
from comanda_digital.core.exceptions import AuthError, ForbiddenError
from comanda_digital.database import get_db
from comanda_digital.db.models.staff import Staff

# auto_error=False: sem token a resposta segue o envelope padrão (401) em vez do 403 do FastAPI
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_staff(
    db: AsyncSession = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Staff:
    if credentials is None:
        raise AuthError("Autenticação necessária")
    payload = security.decode_token(credentials.credentials)
    staff_code = payload.get("sub")
    if payload.get("type") != "access" or not staff_code:
        raise AuthError("Token inválido")
    staff = await crud.staff.get_active_by_staff_id(db, staff_id=staff_code)
    if staff is None:
        raise AuthError("Funcionário não encontrado ou inativo")
    return staff


async def get_current_manager(current_staff: Staff = Depends(get_current_staff)) -> Staff:
    if not crud.staff.is_manager(current_staff):
        raise ForbiddenError("Apenas gerentes podem realizar esta operação")
    return current_staff


def require_cron_secret(authorization: Optional[str] = Header(None)) -> None:
    security.check_bearer_secret(authorization, settings.CRON_SECRET, "CRON_SECRET")


def require_cleanup_key(authorization: Optional[str] = Header(None)) -> None:
    security.check_bearer_secret(authorization, settings.CLEANUP_API_KEY, "CLEANUP_API_KEY")
