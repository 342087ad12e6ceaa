# comanda_digital/schemas/table.py
import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field

from comanda_digital.db.models.table import TableState
from comanda_digital.schemas.common import CamelModel, ORMModel


class TableCreate(CamelModel):
    table_number: str = Field(..., min_length=1, max_length=20)
    capacity: Optional[int] = Field(None, gt=0)


class Table(ORMModel):
    id: uuid.UUID
    table_number: str
    capacity: Optional[int] = None
    occupied: bool
    state: TableState
    current_session_id: Optional[uuid.UUID] = None
    is_active: bool
    created_at: Optional[datetime] = None


class TableWithPin(Table):
    """Visão da equipe: inclui o PIN atual da mesa."""

    current_pin: Optional[str] = None


class AssignPinRequest(CamelModel):
    table_id: uuid.UUID


class AssignPinResult(CamelModel):
    table_id: uuid.UUID
    table_number: str
    pin: str
    already_assigned: bool


class GeneratePinRequest(CamelModel):
    table_id: Optional[uuid.UUID] = None
    table_number: Optional[str] = None
    # Código do funcionário; se omitido, usa o funcionário autenticado
    staff_id: Optional[str] = None


class VerifyPinRequest(CamelModel):
    # Aceita o UUID da mesa ou o número impresso nela
    table_id: Optional[str] = None
    table_number: Optional[str] = None
    pin: str = Field(..., min_length=1)


class TransferRequest(CamelModel):
    source_table_id: uuid.UUID
    destination_table_id: uuid.UUID
    session_id: uuid.UUID
