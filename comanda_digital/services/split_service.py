# comanda_digital/services/split_service.py
import logging
import uuid
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital import crud
from comanda_digital.core.exceptions import NotFoundError, ValidationError
from comanda_digital.core.utils import to_cents, utcnow
from comanda_digital.db.models.session import SessionStatus
from comanda_digital.db.models.split_bill import SplitBill, SplitBillStatus
from comanda_digital.schemas.split_bill import SplitBillCreate

logger = logging.getLogger(__name__)


def split_price(original_price: Decimal, split_count: int) -> Decimal:
    return to_cents(Decimal(original_price) / split_count)


async def create_split(db: AsyncSession, *, obj_in: SplitBillCreate) -> SplitBill:
    session = await crud.session.get(db, obj_in.session_id)
    if session is None:
        raise NotFoundError("Sessão não encontrada")
    if session.status != SessionStatus.ACTIVE:
        raise ValidationError("Sessão não está ativa")
    if await crud.menu_item.get(db, obj_in.menu_item_id) is None:
        raise NotFoundError("Item do cardápio não encontrado")

    split = await crud.split_bill.create(
        db,
        session_id=obj_in.session_id,
        menu_item_id=obj_in.menu_item_id,
        original_price=obj_in.original_price,
        split_price=split_price(obj_in.original_price, obj_in.split_count),
        split_count=obj_in.split_count,
        participants=obj_in.participants,
    )
    if obj_in.order_ids:
        linked = await crud.order.set_split_bill(
            db, session_id=obj_in.session_id, order_ids=obj_in.order_ids, split_bill_id=split.id
        )
        if linked != len(set(obj_in.order_ids)):
            raise ValidationError("Um ou mais pedidos não pertencem a esta sessão")
    await db.commit()
    logger.info(f"Divisão {split.id} criada: {split.original_price} em {split.split_count} partes")
    return split


async def get_split(db: AsyncSession, *, split_id: uuid.UUID) -> SplitBill:
    split = await crud.split_bill.get(db, split_id)
    if split is None:
        raise NotFoundError("Divisão de conta não encontrada")
    return split


async def resolve_split(db: AsyncSession, *, split_id: uuid.UUID) -> SplitBill:
    split = await get_split(db, split_id=split_id)
    if split.status != SplitBillStatus.ACTIVE:
        raise ValidationError("Divisão de conta já foi resolvida")
    split.status = SplitBillStatus.RESOLVED
    split.resolved_at = utcnow()
    await db.flush()
    await db.commit()
    return split
