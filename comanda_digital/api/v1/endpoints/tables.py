# comanda_digital/api/v1/endpoints/tables.py
import io
import uuid
from typing import Any, List

import qrcode  # Para gerar a imagem do QR Code
from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital import crud, schemas
from comanda_digital.api import deps
from comanda_digital.core.config import settings
from comanda_digital.core.exceptions import NotFoundError, ValidationError
from comanda_digital.db.models.staff import Staff
from comanda_digital.services import pin_service, transfer_service

router = APIRouter()


@router.get("/", response_model=schemas.ApiResponse[List[schemas.Table]])
async def read_tables(db: AsyncSession = Depends(deps.get_db), skip: int = 0, limit: int = 100) -> Any:
    """
    Lista as mesas ativas, ordenadas pelo número.
    """
    tables = await crud.table.get_multi(db, skip=skip, limit=limit)
    return schemas.ApiResponse(data=[schemas.Table.model_validate(t) for t in tables])


@router.post("/", response_model=schemas.ApiResponse[schemas.Table], status_code=status.HTTP_201_CREATED)
async def create_table(
    *,
    db: AsyncSession = Depends(deps.get_db),
    table_in: schemas.TableCreate,
    current_staff: Staff = Depends(deps.get_current_manager),  # Apenas gerentes podem criar mesas
) -> Any:
    """
    Cria uma nova mesa.
    """
    try:
        table = await crud.table.create(db, obj_in=table_in)
    except ValueError as e:
        raise ValidationError(str(e))
    await db.commit()
    return schemas.ApiResponse(data=schemas.Table.model_validate(table), message="Mesa criada")


@router.post("/assign-pin", response_model=schemas.ApiResponse[schemas.AssignPinResult])
async def assign_pin(
    *,
    db: AsyncSession = Depends(deps.get_db),
    pin_in: schemas.AssignPinRequest,
    current_staff: Staff = Depends(deps.get_current_staff),
) -> Any:
    """
    Atribui um PIN de 4 dígitos à mesa. Se ela já tiver um, devolve o mesmo.
    """
    result = await pin_service.assign_pin(db, table_id=pin_in.table_id)
    return schemas.ApiResponse(
        data=schemas.AssignPinResult(
            table_id=result.table.id,
            table_number=result.table.table_number,
            pin=result.pin,
            already_assigned=result.already_assigned,
        ),
        message="PIN já atribuído" if result.already_assigned else "PIN gerado",
    )


@router.post("/generate-pin", response_model=schemas.ApiResponse[schemas.AssignPinResult])
async def generate_pin(
    *,
    request: Request,
    db: AsyncSession = Depends(deps.get_db),
    pin_in: schemas.GeneratePinRequest,
    current_staff: Staff = Depends(deps.get_current_staff),
) -> Any:
    """
    Abre uma mesa livre: gera o PIN, ocupa a mesa e inicia a sessão atendida pelo funcionário.
    """
    staff = current_staff
    if pin_in.staff_id and pin_in.staff_id != current_staff.staff_id:
        staff = await crud.staff.get_active_by_staff_id(db, staff_id=pin_in.staff_id)
        if staff is None:
            raise NotFoundError("Funcionário não encontrado ou inativo")
    result = await pin_service.open_table(
        db, staff=staff, table_id=pin_in.table_id, table_number=pin_in.table_number, request=request
    )
    return schemas.ApiResponse(
        data=schemas.AssignPinResult(
            table_id=result.table.id, table_number=result.table.table_number, pin=result.pin, already_assigned=False
        ),
        message=f"Mesa {result.table.table_number} aberta",
    )


@router.post("/verify-pin", response_model=schemas.ApiResponse[schemas.VerifyPinResult])
async def verify_pin(*, db: AsyncSession = Depends(deps.get_db), verify_in: schemas.VerifyPinRequest) -> Any:
    """
    Confere o PIN da mesa (pelo id ou pelo número) e informa se há sessão ativa para entrar.
    """
    result = await pin_service.verify_pin(
        db, table_ref=verify_in.table_id, table_number=verify_in.table_number, pin=verify_in.pin
    )
    session = schemas.DiningSession.with_table(result.session, result.table.table_number) if result.session else None
    message = (
        "PIN verificado. Você pode entrar na sessão existente."
        if result.action == "join"
        else "PIN verificado. Você pode iniciar uma nova sessão."
    )
    return schemas.ApiResponse(
        data=schemas.VerifyPinResult(table=schemas.Table.model_validate(result.table), session=session, action=result.action),
        message=message,
    )


@router.post("/transfer", response_model=schemas.ApiResponse[schemas.TransferResult])
async def transfer_table(
    *,
    request: Request,
    db: AsyncSession = Depends(deps.get_db),
    transfer_in: schemas.TransferRequest,
    current_staff: Staff = Depends(deps.get_current_staff),
) -> Any:
    """
    Transfere a sessão ativa da mesa de origem para uma mesa livre.
    """
    outcome = await transfer_service.transfer_table(
        db,
        source_table_id=transfer_in.source_table_id,
        destination_table_id=transfer_in.destination_table_id,
        session_id=transfer_in.session_id,
        transferred_by=current_staff.staff_id,
        request=request,
    )
    return schemas.ApiResponse(
        data=schemas.TransferResult(
            source_table=schemas.TableWithPin.model_validate(outcome.source),
            destination_table=schemas.TableWithPin.model_validate(outcome.destination),
            session=schemas.DiningSession.with_table(outcome.session, outcome.destination.table_number),
            side_effects=schemas.SideEffects(
                audit_logged=outcome.audit_logged, notification_created=outcome.notification_created
            ),
        ),
        message=outcome.message,
    )


@router.get("/{table_id}", response_model=schemas.ApiResponse[schemas.Table])
async def read_table(table_id: uuid.UUID, db: AsyncSession = Depends(deps.get_db)) -> Any:
    """
    Recupera uma mesa pelo seu ID.
    """
    table = await crud.table.get(db, table_id)
    if not table:
        raise NotFoundError("Mesa não encontrada")
    return schemas.ApiResponse(data=schemas.Table.model_validate(table))


@router.get("/{table_id}/qrcode", response_class=Response)
async def read_table_qrcode(table_id: uuid.UUID, db: AsyncSession = Depends(deps.get_db)) -> Response:
    """
    Gera o QR Code (PNG) que leva o cliente à página da mesa.
    """
    table = await crud.table.get(db, table_id)
    if not table:
        raise NotFoundError("Mesa não encontrada")

    img = qrcode.make(f"{settings.APP_BASE_URL.rstrip('/')}/scan/{table.id}")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return Response(content=buf.getvalue(), media_type="image/png")
