# comanda_digital/api/v1/endpoints/payments.py
import uuid
from typing import Any

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital import schemas
from comanda_digital.api import deps
from comanda_digital.db.models.staff import Staff
from comanda_digital.services import payment_service

router = APIRouter()


@router.post("/request", response_model=schemas.ApiResponse[schemas.PaymentSummary])
async def request_payment(payment_in: schemas.PaymentRequest, db: AsyncSession = Depends(deps.get_db)) -> Any:
    """
    Cliente pede a conta; a equipe recebe uma notificação de pagamento.
    """
    summary = await payment_service.request_payment(
        db,
        session_id=payment_in.session_id,
        tip_amount=payment_in.tip_amount,
        payment_type=payment_in.payment_type,
        diner_name=payment_in.diner_name,
    )
    return schemas.ApiResponse(data=summary, message="Conta solicitada")


@router.post("/complete", response_model=schemas.ApiResponse[schemas.PaymentSummary])
async def complete_payment(
    *,
    request: Request,
    db: AsyncSession = Depends(deps.get_db),
    payment_in: schemas.PaymentComplete,
    current_staff: Staff = Depends(deps.get_current_staff),
) -> Any:
    """
    Registra o pagamento, encerra a sessão e libera a mesa.
    """
    summary = await payment_service.complete_payment(
        db,
        session_id=payment_in.session_id,
        payment_method=payment_in.payment_method,
        completed_by=payment_in.completed_by or current_staff.staff_id,
        payment_type=payment_in.payment_type,
        diner_name=payment_in.diner_name,
        request=request,
    )
    message = "Pagamento já havia sido concluído" if summary.already_completed else "Pagamento concluído"
    return schemas.ApiResponse(data=summary, message=message)


@router.get("/status", response_model=schemas.ApiResponse[schemas.PaymentSummary])
async def read_payment_status(
    session_id: uuid.UUID = Query(..., alias="sessionId"), db: AsyncSession = Depends(deps.get_db)
) -> Any:
    summary = await payment_service.payment_status(db, session_id=session_id)
    return schemas.ApiResponse(data=summary)


@router.get("/individual-status", response_model=schemas.ApiResponse[schemas.IndividualPaymentStatus])
async def read_individual_status(
    session_id: uuid.UUID = Query(..., alias="sessionId"), db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Quem já pagou a própria parte e quantos clientes ainda faltam.
    """
    status = await payment_service.individual_status(db, session_id=session_id)
    return schemas.ApiResponse(data=status)
