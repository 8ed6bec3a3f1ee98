"""
Service para cópias físicas (BookStock).

O status Borrowed pertence ao ciclo de empréstimo: aqui uma cópia só
transita entre Available, Damaged e Lost, e apenas quando não há
empréstimo ativo para ela.
"""

import logging
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from library_api.core.exceptions import (
    ConflictError,
    InvalidFilterError,
    NotFoundError,
    PreconditionFailedError,
)
from library_api.core.filters import FilterParam, validate_filter_fields
from library_api.core.query_builder import filterable_columns
from library_api.models.book import BookStock
from library_api.models.enums import StockStatus
from library_api.repositories.book import BookRepository
from library_api.repositories.stock import BookStockRepository
from library_api.repositories.transaction import BookTransactionRepository
from library_api.schemas.book import StockCreate, StockUpdate
from library_api.services.base import BaseService

logger = logging.getLogger(__name__)


class BookStockService(BaseService):
    """Service para operações de BookStock."""

    def __init__(self, db: AsyncSession):
        super().__init__(db)
        self.stock_repo = BookStockRepository(db)
        self.book_repo = BookRepository(db)
        self.transaction_repo = BookTransactionRepository(db)

    async def _ensure_book(self, book_id: UUID) -> None:
        if not await self.book_repo.get_by_id(book_id):
            raise NotFoundError("Livro não encontrado")

    async def _ensure_not_borrowed(self, code: str) -> None:
        if await self.transaction_repo.get_active_by_stock_code(code):
            raise PreconditionFailedError("Cópia está emprestada")

    @staticmethod
    def _ensure_manual_status(status: Optional[StockStatus]) -> None:
        if status == StockStatus.BORROWED:
            raise PreconditionFailedError("Status Borrowed é definido apenas por empréstimos")

    async def get_by_code(self, code: str) -> BookStock:
        """
        Busca cópia pelo código.

        Raises:
            NotFoundError: Cópia não encontrada
        """
        stock = await self.stock_repo.get_by_code(code)
        if not stock:
            raise NotFoundError("Cópia não encontrada")
        return stock

    async def list_stocks(
        self,
        page: int = 1,
        per_page: int = 10,
        search: Optional[str] = None,
        filters: Iterable[FilterParam] = (),
    ) -> tuple[list[BookStock], int]:
        """
        Lista cópias com busca (código, status, título) e filtro.

        Raises:
            InvalidFilterError: Campo inexistente ou valor inválido no filtro
        """
        filters = list(filters)
        errors = validate_filter_fields(filters, filterable_columns(BookStock))
        if errors:
            raise InvalidFilterError("Filtro inválido", errors=errors)
        return await self.stock_repo.find_all(page, per_page, search, filters)

    async def get_by_book_id(self, book_id: UUID) -> list[BookStock]:
        """Lista cópias de um livro."""
        await self._ensure_book(book_id)
        return await self.stock_repo.get_by_book_id(book_id)

    async def get_available_by_book_id(self, book_id: UUID) -> list[BookStock]:
        """Lista cópias disponíveis de um livro."""
        await self._ensure_book(book_id)
        return await self.stock_repo.get_available_by_book_id(book_id)

    async def create(self, data: StockCreate) -> BookStock:
        """
        Cria cópia.

        Raises:
            NotFoundError: Livro não encontrado
            PreconditionFailedError: Código já cadastrado ou status Borrowed
        """
        self._ensure_manual_status(data.status)
        async with self.unit_of_work(conflict_message="Código de cópia já cadastrado"):
            await self._ensure_book(data.book_id)
            if await self.stock_repo.get_by_code(data.code):
                raise PreconditionFailedError("Código de cópia já cadastrado")
            stock = await self.stock_repo.create_stock(
                code=data.code,
                book_id=data.book_id,
                status=data.status,
            )
        logger.info(f"Cópia {stock.code} criada para o livro {stock.book_id}")
        return stock

    async def update(self, code: str, data: StockUpdate) -> BookStock:
        """
        Atualiza livro e/ou status da cópia.

        O status é gravado com UPDATE condicional sobre o status lido; se
        um empréstimo prendeu a cópia no meio tempo, nada é gravado.

        Raises:
            NotFoundError: Cópia ou livro não encontrado
            PreconditionFailedError: Cópia emprestada ou status Borrowed
            ConflictError: Status alterado por outra requisição
        """
        self._ensure_manual_status(data.status)
        async with self.unit_of_work():
            stock = await self.get_by_code(code)
            await self._ensure_not_borrowed(code)
            if data.book_id and data.book_id != stock.book_id:
                await self._ensure_book(data.book_id)
            if data.status is not None and data.status != stock.status:
                if not await self.stock_repo.update_status(
                    code, data.status, expected=stock.status
                ):
                    logger.warning(f"Status da cópia {code} alterado durante a atualização")
                    raise ConflictError("Cópia alterada por outra requisição")
            stock = await self.stock_repo.update(stock, book_id=data.book_id)
        return stock

    async def update_status(self, code: str, status: StockStatus) -> BookStock:
        """Troca administrativa de status (Available, Damaged, Lost)."""
        return await self.update(code, StockUpdate(status=status))

    async def delete(self, code: str) -> None:
        """
        Remove cópia.

        Raises:
            NotFoundError: Cópia não encontrada
            PreconditionFailedError: Cópia emprestada ou com histórico
        """
        async with self.unit_of_work():
            stock = await self.get_by_code(code)
            await self._ensure_not_borrowed(code)
            if await self.transaction_repo.get_by_stock_code(code):
                raise PreconditionFailedError("Cópia possui histórico de empréstimos")
            await self.stock_repo.delete(stock)
        logger.info(f"Cópia {code} removida")
