# comanda_digital/services/retry.py
import asyncio
import logging
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError

from comanda_digital.core.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_ERRORS: Tuple[Type[BaseException], ...] = (
    OperationalError,
    DisconnectionError,
    InterfaceError,
    ConnectionError,
    TimeoutError,
)


def backoff_delay(attempt: int, max_delay: float = settings.RETRY_MAX_DELAY_SECONDS) -> float:
    """1s, 2s, 4s... limitado a max_delay."""
    return min(2 ** (attempt - 1), max_delay)


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    operation_name: str,
    max_retries: Optional[int] = None,
    on_retry: Optional[Callable[[], Awaitable[None]]] = None,
) -> T:
    """
    Repete uma leitura idempotente em falhas transitórias de rede/banco.
    Qualquer outro erro é propagado na primeira tentativa.

    on_retry roda antes de cada nova tentativa; com uma AsyncSession deve ser
    o rollback, senão a sessão invalidada recusa a próxima consulta.
    """
    attempts = max(max_retries if max_retries is not None else settings.RETRY_MAX_ATTEMPTS, 1)
    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except TRANSIENT_ERRORS as e:
            if attempt == attempts:
                logger.error(f"{operation_name} falhou após {attempts} tentativas: {e}")
                raise
            delay = backoff_delay(attempt)
            logger.warning(f"{operation_name} falhou (tentativa {attempt}/{attempts}), nova tentativa em {delay}s: {e}")
            if on_retry is not None:
                await on_retry()
            await asyncio.sleep(delay)
    raise RuntimeError("unreachable")
