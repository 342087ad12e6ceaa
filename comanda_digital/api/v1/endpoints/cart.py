# comanda_digital/api/v1/endpoints/cart.py
import uuid
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital import schemas
from comanda_digital.api import deps
from comanda_digital.services import cart_service

router = APIRouter()


@router.get("/load", response_model=schemas.ApiResponse[schemas.CartLoadResult])
async def load_cart(
    session_id: uuid.UUID = Query(..., alias="sessionId"),
    diner_name: Optional[str] = Query(None, alias="dinerName"),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Carrega o carrinho da sessão, do mais recente para o mais antigo.
    Antes da leitura remove itens de carrinho com mais de 24h.
    """
    items, warnings = await cart_service.load_cart(db, session_id=session_id, diner_name=diner_name)
    return schemas.ApiResponse(data=schemas.CartLoadResult(items=items, warnings=warnings))


@router.post("/load", response_model=schemas.ApiResponse[schemas.CartLoadResult])
async def load_cart_post(load_in: schemas.CartLoadRequest, db: AsyncSession = Depends(deps.get_db)) -> Any:
    items, warnings = await cart_service.load_cart(db, session_id=load_in.session_id, diner_name=load_in.diner_name)
    return schemas.ApiResponse(data=schemas.CartLoadResult(items=items, warnings=warnings))


@router.post("/add", response_model=schemas.ApiResponse[schemas.CartItem], status_code=status.HTTP_201_CREATED)
async def add_to_cart(cart_in: schemas.CartAdd, db: AsyncSession = Depends(deps.get_db)) -> Any:
    item, merged = await cart_service.add_to_cart(db, obj_in=cart_in)
    return schemas.ApiResponse(data=item, message="Quantidade atualizada" if merged else "Item adicionado ao carrinho")


@router.post("/update", response_model=schemas.ApiResponse[Optional[schemas.CartItem]])
async def update_cart(update_in: schemas.CartUpdate, db: AsyncSession = Depends(deps.get_db)) -> Any:
    """
    Altera a quantidade de um item do carrinho; quantidade 0 remove o item.
    """
    item = await cart_service.update_cart_line(db, order_id=update_in.order_id, quantity=update_in.quantity)
    return schemas.ApiResponse(data=item, message="Item removido" if item is None else "Item atualizado")


@router.post("/clear", response_model=schemas.ApiResponse[schemas.CleanupResult])
async def clear_cart(clear_in: schemas.CartClear, db: AsyncSession = Depends(deps.get_db)) -> Any:
    deleted = await cart_service.clear_cart(db, session_id=clear_in.session_id, diner_name=clear_in.diner_name)
    return schemas.ApiResponse(data=schemas.CleanupResult(deleted_count=deleted), message="Carrinho limpo")


@router.post("/cleanup", response_model=schemas.ApiResponse[schemas.CleanupResult])
async def cleanup_cart(cleanup_in: schemas.SessionRef, db: AsyncSession = Depends(deps.get_db)) -> Any:
    """
    Limpeza manual: remove os itens de carrinho da sessão com mais de 24h.
    """
    deleted = await cart_service.cleanup_stale_cart(db, session_id=cleanup_in.session_id)
    return schemas.ApiResponse(
        data=schemas.CleanupResult(deleted_count=deleted), message=f"{deleted} item(ns) removidos do carrinho"
    )
