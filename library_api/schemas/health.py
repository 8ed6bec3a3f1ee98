"""
Schemas Pydantic para o endpoint de healthcheck.
"""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """
    Resposta do endpoint de healthcheck.

    Attributes:
        status: Status da aplicação ("healthy" ou "degraded")
        app_name: Nome da aplicação
        environment: Ambiente atual (development, staging, production)
        database: "ok" ou "unavailable"
        redis: "ok" ou "unavailable" (rate limiting segue sem Redis)
    """

    status: str
    app_name: str
    environment: str
    database: str
    redis: str

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "status": "healthy",
                    "app_name": "Library API",
                    "environment": "development",
                    "database": "ok",
                    "redis": "ok",
                }
            ]
        }
    }
