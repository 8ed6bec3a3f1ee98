"""
Rate limiting usando Redis (janela fixa por contador).

Limita por funcionário autenticado ou por IP. Configurável via:
    - RATE_LIMIT_ENABLED: Habilita/desabilita rate limiting
    - RATE_LIMIT_REQUESTS: Número de requests permitidos
    - RATE_LIMIT_WINDOW_SECONDS: Janela de tempo em segundos

Sem Redis (ou com erro no Redis) a requisição passa.

Uso:
    @router.post("/login", dependencies=[Depends(rate_limit_auth)])
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from redis.exceptions import RedisError

from library_api.core.config import get_settings
from library_api.core.security import decode_token
from library_api.db.redis import get_redis_client

settings = get_settings()
logger = logging.getLogger(__name__)
security = HTTPBearer(auto_error=False)


class RateLimiter:
    """
    Dependency para rate limiting usando Redis.

    Args:
        requests: Número máximo de requests na janela (default: config)
        window: Janela de tempo em segundos (default: config)
        key_prefix: Prefixo da chave no Redis
    """

    def __init__(
        self,
        requests: Optional[int] = None,
        window: Optional[int] = None,
        key_prefix: str = "rate_limit",
    ):
        self.requests = requests or settings.RATE_LIMIT_REQUESTS
        self.window = window or settings.RATE_LIMIT_WINDOW_SECONDS
        self.key_prefix = key_prefix

    async def __call__(
        self,
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    ) -> None:
        """
        Verifica rate limit.

        Raises:
            HTTPException 429: Rate limit excedido
        """
        if not settings.RATE_LIMIT_ENABLED:
            return

        client = get_redis_client()
        if client is None:
            return

        key = f"{self.key_prefix}:{self._get_identifier(request, credentials)}"

        try:
            current = await client.incr(key)
            if current == 1:
                await client.expire(key, self.window)
            if current > self.requests:
                ttl = await client.ttl(key)
                logger.warning(f"Rate limit excedido para {key}")
                raise HTTPException(
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    detail=f"Rate limit excedido. Tente novamente em {ttl} segundos.",
                    headers={"Retry-After": str(ttl)},
                )
        except RedisError as e:
            logger.warning(f"Redis indisponível, rate limit ignorado: {e}")

    @staticmethod
    def _get_identifier(
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials],
    ) -> str:
        """
        Identificador do rate limit.

        Prioridade:
            1. user_id do JWT (se autenticado)
            2. IP do cliente (considerando X-Forwarded-For)
        """
        if credentials:
            payload = decode_token(credentials.credentials)
            if payload and "sub" in payload:
                return f"user:{payload['sub']}"

        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return f"ip:{forwarded.split(',')[0].strip()}"
        return f"ip:{request.client.host if request.client else 'unknown'}"


rate_limit_default = RateLimiter()
rate_limit_auth = RateLimiter(requests=10, window=60)  # 10 req/min para login
