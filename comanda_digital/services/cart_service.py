# comanda_digital/services/cart_service.py
import logging
import uuid
from datetime import timedelta
from typing import Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital import crud
from comanda_digital.core.config import settings
from comanda_digital.core.exceptions import NotFoundError, ValidationError
from comanda_digital.core.utils import utcnow
from comanda_digital.db.models.order import Order, OrderStatus
from comanda_digital.db.models.session import SessionStatus
from comanda_digital.db.models.split_bill import SplitBill
from comanda_digital.schemas.order import CartAdd, CartItem

logger = logging.getLogger(__name__)


def to_cart_item(order: Order, split: Optional[SplitBill] = None) -> CartItem:
    menu_item = order.menu_item
    item = CartItem(
        id=order.id,
        menu_item_id=order.menu_item_id,
        name=menu_item.name if menu_item else "Item desconhecido",
        price=menu_item.price if menu_item else 0,
        quantity=order.quantity,
        notes=order.notes,
        is_shared=order.is_shared,
        is_takeaway=order.is_takeaway,
        customizations=order.customizations or [],
        diner_name=order.diner_name,
        created_at=order.created_at,
    )
    if split is not None:
        item.is_split = True
        item.split_price = split.split_price
        item.original_price = split.original_price
        item.split_count = split.split_count
        item.participants = split.participants or []
        item.split_bill_id = split.id
    return item


def overlay_splits(orders: List[Order], active_splits: Dict[uuid.UUID, SplitBill]) -> Tuple[List[CartItem], List[str]]:
    """
    Aplica o preço dividido a cada linha do carrinho, sem alterar os pedidos.
    Só pedidos com split_bill_id apontando para uma divisão ativa ficam divididos;
    se a divisão sumiu ou foi resolvida, a linha volta a ser individual e um aviso é gerado.
    """
    items, warnings = [], []
    for order in orders:
        split = None
        if order.split_bill_id is not None:
            split = active_splits.get(order.split_bill_id)
            if split is None:
                warnings.append(f"split_bill_missing:{order.id}")
        items.append(to_cart_item(order, split))
    return items, warnings


async def purge_stale_cart(db: AsyncSession, *, session_id: uuid.UUID) -> int:
    cutoff = utcnow() - timedelta(hours=settings.CART_MAX_AGE_HOURS)
    deleted = await crud.order.delete_cart_older_than(db, session_id=session_id, cutoff=cutoff)
    await db.commit()
    if deleted:
        logger.info(f"{deleted} item(ns) de carrinho com mais de {settings.CART_MAX_AGE_HOURS}h removidos da sessão {session_id}")
    return deleted


async def cleanup_stale_cart(db: AsyncSession, *, session_id: uuid.UUID) -> int:
    """Limpeza manual: mesma regra da carga do carrinho, só itens com mais de 24h."""
    if await crud.session.get(db, session_id) is None:
        raise NotFoundError("Sessão não encontrada")
    return await purge_stale_cart(db, session_id=session_id)


async def load_cart(
    db: AsyncSession, *, session_id: uuid.UUID, diner_name: Optional[str] = None
) -> Tuple[List[CartItem], List[str]]:
    session = await crud.session.get(db, session_id)
    if session is None:
        raise NotFoundError("Sessão não encontrada")
    if session.status != SessionStatus.ACTIVE:
        return [], []

    warnings: List[str] = []
    try:
        await purge_stale_cart(db, session_id=session_id)
    except SQLAlchemyError as e:
        # Limpeza é manutenção: a falha não impede a leitura do carrinho
        await db.rollback()
        logger.warning(f"Falha ao limpar carrinho antigo da sessão {session_id}: {e}")
        warnings.append("cleanup_failed")

    orders = await crud.order.get_by_session(
        db, session_id=session_id, statuses=[OrderStatus.CART], diner_name=diner_name, newest_first=True
    )
    active_splits = await crud.split_bill.get_active_by_session(db, session_id=session_id)
    items, split_warnings = overlay_splits(orders, active_splits)
    for warning in split_warnings:
        logger.warning(f"Sessão {session_id}: divisão de conta não encontrada ({warning}); item tratado como individual")
    return items, warnings + split_warnings


async def add_to_cart(db: AsyncSession, *, obj_in: CartAdd) -> Tuple[CartItem, bool]:
    """Adiciona ao carrinho; uma linha idêntica já existente só tem a quantidade somada."""
    session = await crud.session.get(db, obj_in.session_id)
    if session is None:
        raise NotFoundError("Sessão não encontrada")
    if session.status != SessionStatus.ACTIVE:
        raise ValidationError("Sessão não está ativa")
    menu_item = await crud.menu_item.get(db, obj_in.menu_item_id)
    if menu_item is None:
        raise NotFoundError("Item do cardápio não encontrado")
    if not menu_item.available:
        raise ValidationError(f"{menu_item.name} não está disponível no momento")

    line = await crud.order.find_cart_line(db, obj_in=obj_in)
    merged = line is not None
    if merged:
        line.quantity += obj_in.quantity
        await db.flush()
    else:
        line = await crud.order.create_cart_line(db, obj_in=obj_in, menu_item=menu_item)
    await db.commit()
    return to_cart_item(line), merged


async def update_cart_line(db: AsyncSession, *, order_id: uuid.UUID, quantity: int) -> Optional[CartItem]:
    """Quantidade 0 remove a linha. Pedidos já confirmados não podem ser alterados."""
    order = await crud.order.get(db, order_id)
    if order is None:
        raise NotFoundError("Item do carrinho não encontrado")
    if order.status != OrderStatus.CART:
        raise ValidationError("Somente itens no carrinho podem ser alterados")
    if quantity == 0:
        await db.delete(order)
        await db.commit()
        return None
    order.quantity = quantity
    await db.flush()
    await db.commit()
    return to_cart_item(order)


async def clear_cart(db: AsyncSession, *, session_id: uuid.UUID, diner_name: Optional[str] = None) -> int:
    if await crud.session.get(db, session_id) is None:
        raise NotFoundError("Sessão não encontrada")
    deleted = await crud.order.delete_cart(db, session_id=session_id, diner_name=diner_name)
    await db.commit()
    logger.info(f"Carrinho da sessão {session_id} limpo ({deleted} itens)")
    return deleted
