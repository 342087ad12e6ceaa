# comanda_digital/crud/crud_maintenance.py
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital.core.utils import utcnow
from comanda_digital.db.models.maintenance_run import MaintenanceRun


class CRUDMaintenance:
    async def get_last_run(self, db: AsyncSession, *, job_name: str) -> Optional[datetime]:
        """Sem registro significa que a rotina nunca rodou."""
        result = await db.execute(select(MaintenanceRun.last_run_at).where(MaintenanceRun.job_name == job_name))
        return result.scalar_one_or_none()

    async def mark_run(
        self, db: AsyncSession, *, job_name: str, details: Optional[Dict[str, Any]] = None
    ) -> MaintenanceRun:
        result = await db.execute(select(MaintenanceRun).where(MaintenanceRun.job_name == job_name))
        run = result.scalars().first()
        if run is None:
            run = MaintenanceRun(job_name=job_name)
            db.add(run)
        run.last_run_at = utcnow()
        run.details = details or {}
        await db.flush()
        return run


maintenance = CRUDMaintenance()
