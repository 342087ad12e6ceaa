import logging

from comanda_digital.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logger = logging.getLogger("comanda_digital")


def setup_logging(level: str = settings.LOG_LEVEL) -> None:
    """Configuração básica de logging, chamada uma vez na criação da app."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
