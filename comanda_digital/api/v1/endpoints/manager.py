# comanda_digital/api/v1/endpoints/manager.py
from typing import Any

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital import schemas
from comanda_digital.api import deps
from comanda_digital.db.models.staff import Staff
from comanda_digital.services import adjustment_service

router = APIRouter()


@router.post("/adjust-bill", response_model=schemas.ApiResponse[schemas.BillAdjustmentResult])
async def adjust_bill(
    *,
    request: Request,
    db: AsyncSession = Depends(deps.get_db),
    adjustment_in: schemas.BillAdjustmentRequest,
    current_staff: Staff = Depends(deps.get_current_manager),
) -> Any:
    """
    Estorna pedidos e/ou aplica desconto na conta de uma sessão ativa.
    """
    result = await adjustment_service.adjust_bill(
        db,
        session_id=adjustment_in.session_id,
        voids=adjustment_in.voids,
        discount=adjustment_in.discount,
        reason=adjustment_in.reason,
        staff=current_staff,
        request=request,
    )
    return schemas.ApiResponse(data=result, message="Ajustes da conta salvos")
