# comanda_digital/services/redis_service.py
import json
import logging
from typing import Any, Dict, Optional

import redis.asyncio as redis  # Using asyncio version for FastAPI

from comanda_digital.core.config import settings

logger = logging.getLogger(__name__)

# Canais consumidos pelos painéis da equipe e da cozinha
CHANNEL_NOTIFICATIONS = "notificacoes"
CHANNEL_TABLES = "mesas_status"
CHANNEL_ORDERS = "pedidos_status"


class RedisClient:
    def __init__(self, host: str = settings.REDIS_HOST, port: int = settings.REDIS_PORT, enabled: bool = settings.REDIS_ENABLED):
        self.host = host
        self.port = port
        self.enabled = enabled
        self._client: Optional[redis.Redis] = None

    async def connect(self):
        if not self.enabled or self._client:
            return
        try:
            self._client = redis.Redis(host=self.host, port=self.port, decode_responses=True)
            # Test connection
            await self._client.ping()
            logger.info(f"Conectado ao Redis em {self.host}:{self.port}")
        except redis.RedisError as e:
            logger.warning(f"Falha ao conectar ao Redis: {e}")
            self._client = None  # Ensure client is None if connection failed

    async def disconnect(self):
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("Desconectado do Redis.")

    @property
    async def client(self) -> Optional[redis.Redis]:
        if not self._client:
            await self.connect()  # Attempt to connect if not already connected
        return self._client

    async def publish_message(self, channel: str, message: str) -> bool:
        if not self.enabled:
            return False
        r = await self.client
        if not r:
            logger.warning("Não foi possível publicar mensagem: cliente Redis não conectado.")
            return False
        try:
            await r.publish(channel, message)
        except redis.RedisError as e:
            logger.warning(f"Falha ao publicar no canal \"{channel}\": {e}")
            return False
        logger.debug(f"Mensagem publicada no canal \"{channel}\"")
        return True


# Instância global para ser usada na aplicação
redis_client = RedisClient()


async def publish_event(channel: str, event: str, payload: Dict[str, Any]) -> bool:
    """Publica um evento JSON; falhas nunca afetam a requisição."""
    message = json.dumps({"event": event, **payload}, default=str)
    return await redis_client.publish_message(channel, message)


# Funções para serem chamadas no startup e shutdown da aplicação FastAPI
async def startup_redis_client():
    await redis_client.connect()


async def shutdown_redis_client():
    await redis_client.disconnect()
