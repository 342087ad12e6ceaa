# comanda_digital/db/models/maintenance_run.py
from sqlalchemy import JSON, Column, DateTime, String

from comanda_digital.db.base_class import Base


class MaintenanceRun(Base):
    """Última execução de cada rotina de manutenção (sobrevive a reinícios do processo)."""

    __tablename__ = "maintenance_runs"

    job_name = Column(String, nullable=False, unique=True, index=True)
    last_run_at = Column(DateTime(timezone=True), nullable=True)
    details = Column(JSON, default=dict, nullable=False)
