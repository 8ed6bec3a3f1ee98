"""
Ponto de entrada da aplicação FastAPI.

Este módulo configura a aplicação FastAPI, inclui rotas, registra os
handlers de erro e define o ciclo de vida (startup/shutdown).
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from library_api.api.errors import register_exception_handlers
from library_api.api.v1.router import api_router
from library_api.core.config import get_settings
from library_api.core.logging import setup_logging, get_logger
from library_api.db.session import check_database_connection, engine
from library_api.db.redis import init_redis, close_redis, check_redis_connection
from library_api.schemas.health import HealthResponse

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Gerencia o ciclo de vida da aplicação.

    Startup:
        - Configura logging
        - Conecta ao Redis (rate limiting)
        - Verifica conexão com PostgreSQL

    Shutdown:
        - Fecha conexão com Redis
        - Fecha pool de conexões do banco
    """
    setup_logging()
    logger.info(f"Iniciando {settings.APP_NAME} em ambiente {settings.ENVIRONMENT}")

    await init_redis()
    if await check_redis_connection():
        logger.info("Conexão com Redis estabelecida")
    else:
        logger.warning("Redis não disponível - rate limiting desabilitado")

    success, error = await check_database_connection()
    if success:
        logger.info("Conexão com PostgreSQL estabelecida")
    else:
        logger.warning(f"PostgreSQL não disponível: {error}")

    yield

    logger.info(f"Encerrando {settings.APP_NAME}")
    await close_redis()
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description="API REST de biblioteca: livros, cópias, clientes, empréstimos e multas",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

register_exception_handlers(app)
app.include_router(api_router)


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="Verifica status da aplicação",
    description="Retorna o status da aplicação e das dependências (PostgreSQL, Redis).",
)
async def health_check() -> HealthResponse:
    """
    Endpoint de healthcheck para monitoramento.

    "degraded" quando o PostgreSQL não responde. Redis fora do ar não
    degrada a aplicação: só desliga o rate limiting.
    """
    database_ok, _ = await check_database_connection()
    redis_ok = await check_redis_connection()
    return HealthResponse(
        status="healthy" if database_ok else "degraded",
        app_name=settings.APP_NAME,
        environment=settings.ENVIRONMENT,
        database="ok" if database_ok else "unavailable",
        redis="ok" if redis_ok else "unavailable",
    )
