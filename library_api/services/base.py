"""
Base dos services: uma operação de escrita = uma transação do banco.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.core.exceptions import (
    ConflictError,
    LibraryError,
    PersistenceError,
)

logger = logging.getLogger(__name__)


class BaseService:
    """Service com acesso à sessão e ao controle de transação."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def unit_of_work(
        self,
        failure_message: str = "Falha ao gravar no banco de dados",
        conflict_message: str = "Registro alterado por outra requisição",
    ) -> AsyncIterator[None]:
        """
        Executa o bloco e faz um único commit no final.

        Qualquer exceção desfaz tudo o que foi gravado no bloco. Violações
        de constraint viram ConflictError; demais erros do banco viram
        PersistenceError.
        """
        try:
            yield
            await self.db.commit()
        except LibraryError:
            await self.db.rollback()
            raise
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"Violação de constraint, transação desfeita: {e.orig}")
            raise ConflictError(conflict_message) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Erro de banco, transação desfeita: {e}")
            raise PersistenceError(failure_message) from e
