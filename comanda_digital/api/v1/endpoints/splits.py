# comanda_digital/api/v1/endpoints/splits.py
import uuid
from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital import schemas
from comanda_digital.api import deps
from comanda_digital.services import split_service

router = APIRouter()


@router.post("/create", response_model=schemas.ApiResponse[schemas.SplitBill], status_code=status.HTTP_201_CREATED)
async def create_split(split_in: schemas.SplitBillCreate, db: AsyncSession = Depends(deps.get_db)) -> Any:
    """
    Divide o preço de um item compartilhado entre os participantes.
    """
    split = await split_service.create_split(db, obj_in=split_in)
    return schemas.ApiResponse(
        data=schemas.SplitBill.model_validate(split), message=f"Item dividido em {split.split_count} partes"
    )


@router.get("/{split_id}", response_model=schemas.ApiResponse[schemas.SplitBill])
async def read_split(split_id: uuid.UUID, db: AsyncSession = Depends(deps.get_db)) -> Any:
    split = await split_service.get_split(db, split_id=split_id)
    return schemas.ApiResponse(data=schemas.SplitBill.model_validate(split))


@router.post("/{split_id}/resolve", response_model=schemas.ApiResponse[schemas.SplitBill])
async def resolve_split(split_id: uuid.UUID, db: AsyncSession = Depends(deps.get_db)) -> Any:
    split = await split_service.resolve_split(db, split_id=split_id)
    return schemas.ApiResponse(data=schemas.SplitBill.model_validate(split), message="Divisão resolvida")
