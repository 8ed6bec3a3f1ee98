"""
Service para lógica de negócio de Book.
"""

import logging
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from library_api.core.exceptions import NotFoundError, PreconditionFailedError
from library_api.core.filters import FilterParam
from library_api.models.book import Book, BookStock
from library_api.models.enums import StockStatus
from library_api.repositories.book import BookRepository
from library_api.repositories.stock import BookStockRepository
from library_api.repositories.transaction import BookTransactionRepository
from library_api.schemas.book import BookCreate, BookDetail, BookRead, BookUpdate
from library_api.services.base import BaseService

logger = logging.getLogger(__name__)


class BookService(BaseService):
    """Service para operações de Book."""

    def __init__(self, db: AsyncSession):
        super().__init__(db)
        self.book_repo = BookRepository(db)
        self.stock_repo = BookStockRepository(db)
        self.transaction_repo = BookTransactionRepository(db)

    async def get_by_id(self, book_id: UUID) -> Book:
        """
        Busca livro por ID.

        Raises:
            NotFoundError: Livro não encontrado
        """
        book = await self.book_repo.get_by_id(book_id)
        if not book:
            raise NotFoundError("Livro não encontrado")
        return book

    async def get_detail(self, book_id: UUID) -> BookDetail:
        """Livro com contagem de cópias."""
        book = await self.get_by_id(book_id)
        counts = await self.book_repo.count_stocks_by_status(book_id)
        return BookDetail(
            **BookRead.model_validate(book).model_dump(),
            total_stocks=sum(counts.values()),
            available_stocks=counts[StockStatus.AVAILABLE.value],
        )

    async def list_books(
        self,
        page: int = 1,
        per_page: int = 10,
        search: Optional[str] = None,
        filters: Iterable[FilterParam] = (),
    ) -> tuple[list[Book], int]:
        """Lista livros com busca (título, descrição) e filtro."""
        return await self.book_repo.find_all(page, per_page, search, filters)

    async def create(self, data: BookCreate) -> Book:
        """Cria livro."""
        async with self.unit_of_work():
            book = await self.book_repo.create(
                title=data.title,
                description=data.description,
                cover_url=data.cover_url,
            )
        logger.info(f"Livro {book.id} criado: {book.title}")
        return book

    async def update(self, book_id: UUID, data: BookUpdate) -> Book:
        """
        Atualiza livro.

        Raises:
            NotFoundError: Livro não encontrado
        """
        async with self.unit_of_work():
            book = await self.get_by_id(book_id)
            book = await self.book_repo.update(
                book,
                title=data.title,
                description=data.description,
                cover_url=data.cover_url,
            )
        return book

    async def delete(self, book_id: UUID) -> None:
        """
        Remove livro e suas cópias.

        Raises:
            NotFoundError: Livro não encontrado
            PreconditionFailedError: Existem cópias emprestadas ou histórico
        """
        async with self.unit_of_work():
            book = await self.get_by_id(book_id)

            borrowed = await self.stock_repo.count_borrowed_by_book_id(book_id)
            if borrowed:
                raise PreconditionFailedError(
                    f"Não é possível remover livro com {borrowed} cópia(s) emprestada(s)"
                )
            if await self.transaction_repo.get_by_book_id(book_id):
                raise PreconditionFailedError("Livro possui histórico de empréstimos")

            for stock in await self.stock_repo.get_by_book_id(book_id):
                await self.stock_repo.delete(stock)
            await self.book_repo.delete(book)

        logger.info(f"Livro {book_id} removido")

    async def list_stocks(self, book_id: UUID) -> list[BookStock]:
        """Lista todas as cópias de um livro."""
        await self.get_by_id(book_id)
        return await self.stock_repo.get_by_book_id(book_id)

    async def list_available_stocks(self, book_id: UUID) -> list[BookStock]:
        """Lista cópias disponíveis de um livro."""
        await self.get_by_id(book_id)
        return await self.stock_repo.get_available_by_book_id(book_id)
