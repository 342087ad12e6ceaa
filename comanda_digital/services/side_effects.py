# comanda_digital/services/side_effects.py
import logging
from typing import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


async def run_isolated(db: AsyncSession, label: str, action: Callable[[AsyncSession], Awaitable[object]]) -> bool:
    """
    Executa um efeito colateral (auditoria, notificação...) numa sessão e transação próprias,
    no mesmo banco da requisição. Uma falha é registrada em log e desfeita, mas nunca muda
    o resultado da operação principal.
    """
    async with AsyncSession(bind=db.bind, expire_on_commit=False, autoflush=False) as side_db:
        try:
            await action(side_db)
            await side_db.commit()
            return True
        except Exception as e:
            await side_db.rollback()
            logger.warning(f"Efeito colateral '{label}' falhou e foi ignorado: {e}")
            return False
