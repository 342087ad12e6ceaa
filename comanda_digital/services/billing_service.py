# comanda_digital/services/billing_service.py
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from comanda_digital import crud
from comanda_digital.core.config import settings
from comanda_digital.core.exceptions import NotFoundError
from comanda_digital.core.utils import to_cents
from comanda_digital.db.models.discount import DiscountType
from comanda_digital.db.models.order import BILLABLE_STATUSES, Order
from comanda_digital.db.models.split_bill import SplitBill


@dataclass
class BillTotals:
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    item_count: int
    discount: Decimal = Decimal("0")


def discount_value(subtotal: Decimal, discounts: Iterable[Tuple[DiscountType, Decimal]]) -> Decimal:
    """Soma dos descontos (fixos e percentuais sobre o subtotal), nunca maior que o subtotal."""
    value = Decimal("0")
    for kind, amount in discounts:
        value += subtotal * Decimal(amount) / 100 if kind == DiscountType.PERCENTAGE else Decimal(amount)
    return min(to_cents(value), subtotal)


def compute_totals(
    lines: Iterable[Tuple[Decimal, int]],
    vat_rate: Decimal = settings.VAT_RATE,
    discounts: Iterable[Tuple[DiscountType, Decimal]] = (),
) -> BillTotals:
    """
    subtotal = soma(preço x quantidade); imposto = (subtotal - desconto) x IVA;
    total = subtotal - desconto + imposto. Sem desconto: total = subtotal + subtotal x IVA.
    """
    subtotal = Decimal("0")
    item_count = 0
    for price, quantity in lines:
        subtotal += Decimal(price) * quantity
        item_count += quantity
    subtotal = to_cents(subtotal)
    discount = discount_value(subtotal, discounts)
    tax = to_cents((subtotal - discount) * vat_rate)
    return BillTotals(subtotal=subtotal, tax=tax, total=subtotal - discount + tax, item_count=item_count, discount=discount)


def diner_lines(
    orders: Iterable[Order], active_splits: Dict[uuid.UUID, SplitBill], diner_name: str
) -> List[Tuple[Decimal, int]]:
    """
    Parte de um cliente: seus próprios pedidos pelo preço do cardápio e, nos pedidos
    com divisão ativa, o valor dividido quando ele está entre os participantes.
    """
    lines = []
    for order in orders:
        split = active_splits.get(order.split_bill_id) if order.split_bill_id is not None else None
        if split is not None:
            if diner_name in (split.participants or []):
                lines.append((split.split_price, order.quantity))
        elif order.diner_name == diner_name:
            lines.append((order.menu_item.price, order.quantity))
    return lines


async def get_session_totals(db: AsyncSession, *, session_id: uuid.UUID) -> BillTotals:
    """Recalcula a conta a cada chamada; pedidos no carrinho, cancelados ou estornados não entram."""
    if await crud.session.get(db, session_id) is None:
        raise NotFoundError("Sessão não encontrada")
    lines = await crud.order.get_priced_lines(db, session_id=session_id, statuses=BILLABLE_STATUSES)
    discounts = await crud.discount.get_by_session(db, session_id=session_id)
    return compute_totals(lines, discounts=[(d.type, d.amount) for d in discounts])


async def get_diner_totals(db: AsyncSession, *, session_id: uuid.UUID, diner_name: str) -> BillTotals:
    """Conta individual; descontos do gerente valem só para a conta da mesa."""
    orders = await crud.order.get_by_session(db, session_id=session_id, statuses=BILLABLE_STATUSES)
    active_splits = await crud.split_bill.get_active_by_session(db, session_id=session_id)
    return compute_totals(diner_lines(orders, active_splits, diner_name))
