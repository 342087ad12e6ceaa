# comanda_digital/services/cleanup_service.py
import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital import crud
from comanda_digital.core.config import settings
from comanda_digital.core.utils import as_utc, parse_iso, utcnow
from comanda_digital.db.models.audit_log import AuditAction
from comanda_digital.db.models.session import DiningSession
from comanda_digital.schemas.maintenance import AutoCleanupResult, StaleUser, StaleUserReport
from comanda_digital.services import audit_service
from comanda_digital.services.side_effects import run_isolated

logger = logging.getLogger(__name__)

STALE_USERS_JOB = "stale_user_cleanup"


def find_stale_diners(session: DiningSession, cutoff: datetime) -> List[StaleUser]:
    """Clientes ativos cuja última atividade (ou, sem ela, o início da sessão) é anterior ao corte."""
    stale = []
    for diner in session.diners or []:
        if not diner.get("isActive"):
            continue
        last_active = parse_iso(diner.get("lastActive")) or as_utc(session.created_at)
        if last_active is not None and last_active < cutoff:
            stale.append(StaleUser(session_id=session.id, name=diner.get("name") or "", last_active=last_active))
    return stale


async def sweep_stale_users(
    db: AsyncSession,
    *,
    dry_run: bool = False,
    threshold_minutes: Optional[int] = None,
    performed_by: str = "system",
) -> StaleUserReport:
    """
    Marca como inativos os clientes parados há mais que o limite, em todas as sessões ativas.
    Com dry_run apenas relata quem seria desativado.
    """
    threshold = threshold_minutes or settings.STALE_USER_THRESHOLD_MINUTES
    now = utcnow()
    cutoff = now - timedelta(minutes=threshold)

    sessions = [session for session, _ in await crud.session.get_multi_active(db)]
    report = StaleUserReport(threshold_minutes=threshold, checked_sessions=len(sessions), stale_users=[], dry_run=dry_run)
    for session in sessions:
        stale = find_stale_diners(session, cutoff)
        if not stale:
            continue
        report.stale_users.extend(stale)
        if dry_run:
            continue
        stale_names = {user.name for user in stale}
        session.diners = [
            {**diner, "isActive": False, "logoutTime": now.isoformat()}
            if diner.get("isActive") and diner.get("name") in stale_names
            else dict(diner)
            for diner in session.diners
        ]
        report.cleaned_count += len(stale)

    if dry_run:
        return report

    await db.flush()
    await db.commit()
    logger.info(f"Limpeza de clientes inativos: {report.cleaned_count} desativados em {len(sessions)} sessões")
    if report.cleaned_count:
        await run_isolated(
            db,
            "auditoria stale_user_cleanup",
            lambda side_db: audit_service.log_action(
                side_db,
                action=AuditAction.STALE_USER_CLEANUP,
                details={"cleaned_count": report.cleaned_count, "threshold_minutes": threshold},
                performed_by=performed_by,
            ),
        )
    return report


async def auto_cleanup(db: AsyncSession) -> AutoCleanupResult:
    """
    Gatilho automático da limpeza. Desligado por padrão; quando ligado roda no máximo
    uma vez por intervalo, usando o registro durável da última execução.
    """
    last_run = as_utc(await crud.maintenance.get_last_run(db, job_name=STALE_USERS_JOB))
    if not settings.AUTO_CLEANUP_ENABLED:
        return AutoCleanupResult(enabled=False, ran=False, last_run_at=last_run)

    interval = timedelta(minutes=settings.AUTO_CLEANUP_INTERVAL_MINUTES)
    if last_run is not None and utcnow() - last_run < interval:
        return AutoCleanupResult(enabled=True, ran=False, last_run_at=last_run)

    report = await sweep_stale_users(db, performed_by="auto-cleanup")
    run = await crud.maintenance.mark_run(
        db, job_name=STALE_USERS_JOB, details={"cleaned_count": report.cleaned_count}
    )
    await db.commit()
    return AutoCleanupResult(enabled=True, ran=True, last_run_at=run.last_run_at, report=report)


async def mark_job_run(db: AsyncSession, report: StaleUserReport) -> None:
    await crud.maintenance.mark_run(db, job_name=STALE_USERS_JOB, details={"cleaned_count": report.cleaned_count})
    await db.commit()
