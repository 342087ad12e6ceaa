# comanda_digital/api/v1/endpoints/maintenance.py
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital import schemas
from comanda_digital.api import deps
from comanda_digital.services import cleanup_service

router = APIRouter()


@router.get("/cleanup/stale-users", response_model=schemas.ApiResponse[schemas.StaleUserReport])
async def report_stale_users(db: AsyncSession = Depends(deps.get_db)) -> Any:
    """
    Relatório (sem alterações) dos clientes que seriam desativados por inatividade.
    """
    report = await cleanup_service.sweep_stale_users(db, dry_run=True)
    return schemas.ApiResponse(data=report)


@router.post(
    "/cleanup/stale-users",
    response_model=schemas.ApiResponse[schemas.StaleUserReport],
    dependencies=[Depends(deps.require_cleanup_key)],
)
async def cleanup_stale_users(db: AsyncSession = Depends(deps.get_db)) -> Any:
    report = await cleanup_service.sweep_stale_users(db, performed_by="admin")
    return schemas.ApiResponse(data=report, message=f"{report.cleaned_count} cliente(s) desativado(s)")


@router.post(
    "/cron/cleanup-stale-users",
    response_model=schemas.ApiResponse[schemas.StaleUserReport],
    dependencies=[Depends(deps.require_cron_secret)],
)
async def cron_cleanup_stale_users(db: AsyncSession = Depends(deps.get_db)) -> Any:
    """
    Disparado pelo agendador externo (cron) com o CRON_SECRET.
    """
    report = await cleanup_service.sweep_stale_users(db, performed_by="cron")
    await cleanup_service.mark_job_run(db, report)
    return schemas.ApiResponse(data=report, message=f"{report.cleaned_count} cliente(s) desativado(s)")


@router.post("/auto-cleanup", response_model=schemas.ApiResponse[schemas.AutoCleanupResult])
async def auto_cleanup(db: AsyncSession = Depends(deps.get_db)) -> Any:
    result = await cleanup_service.auto_cleanup(db)
    if not result.enabled:
        message = "Limpeza automática desativada"
    elif result.ran:
        message = "Limpeza automática executada"
    else:
        message = "Limpeza automática executada recentemente; nada a fazer"
    return schemas.ApiResponse(data=result, message=message)
