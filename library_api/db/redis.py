"""
Conexão com Redis, usada pelo rate limiting.

O cliente é criado no startup da aplicação. Sem Redis a API continua
funcionando: o rate limiter libera as requisições (fail-open).
"""

import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from library_api.core.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

# Cliente Redis (inicializado no startup)
redis_client: Optional[redis.Redis] = None


async def init_redis() -> redis.Redis:
    """Cria o cliente Redis a partir de REDIS_URL."""
    global redis_client
    redis_client = redis.from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
    )
    return redis_client


def get_redis_client() -> Optional[redis.Redis]:
    """Cliente atual ou None se Redis não foi inicializado."""
    return redis_client


async def close_redis() -> None:
    """Fecha a conexão com o Redis."""
    global redis_client
    if redis_client:
        await redis_client.aclose()
        redis_client = None


async def check_redis_connection() -> bool:
    """
    Verifica se a conexão com o Redis está funcionando.

    Returns:
        True se o PING respondeu, False caso contrário.
    """
    if redis_client is None:
        return False
    try:
        await redis_client.ping()
        return True
    except RedisError as e:
        logger.warning(f"Erro ao verificar conexão Redis: {e}")
        return False
