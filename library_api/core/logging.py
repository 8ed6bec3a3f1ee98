"""
Configuração de logging da aplicação.

Nível controlado por LOG_LEVEL. Em DEBUG o formato inclui arquivo e linha
de origem, útil para acompanhar o fluxo dos empréstimos.
"""

import logging
import sys
from typing import Optional

from library_api.core.config import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers de terceiros que só interessam em WARNING
NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpx")


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configura o root logger com saída em stdout.

    Args:
        level: Nível de logging. Se não fornecido, usa LOG_LEVEL do .env
    """
    settings = get_settings()
    log_level = (level or settings.LOG_LEVEL).upper()

    log_format = DEBUG_LOG_FORMAT if log_level == "DEBUG" else LOG_FORMAT
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(log_format, datefmt=DATE_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove handlers existentes para evitar duplicação
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(f"Logging configurado com nível: {log_level}")


def get_logger(name: str) -> logging.Logger:
    """Retorna o logger do módulo (geralmente __name__)."""
    return logging.getLogger(name)
