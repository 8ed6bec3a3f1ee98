"""
Repository para operações de BookStock (cópias físicas).

A troca de status de uma cópia é feita com UPDATE condicional
(compare-and-swap): a escrita só acontece se o status atual for o
esperado, e o número de linhas afetadas diz se a requisição ganhou a
disputa pela cópia.
"""

from uuid import UUID

from sqlalchemy import Select, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.models.book import Book, BookStock
from library_api.models.enums import StockStatus
from library_api.repositories.base import BaseRepository


class BookStockRepository(BaseRepository[BookStock]):
    """Repository para operações CRUD de BookStock."""

    search_columns = (BookStock.code, BookStock.status, Book.title)

    def __init__(self, db: AsyncSession):
        super().__init__(BookStock, db)

    def _list_query(self) -> Select:
        return select(BookStock).join(Book, BookStock.book_id == Book.id)

    def _ordering(self) -> tuple:
        return (BookStock.code,)

    async def get_by_code(self, code: str) -> BookStock | None:
        """Busca cópia pelo código."""
        result = await self.db.execute(
            select(BookStock)
            .where(BookStock.code == code)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_book_id(self, book_id: UUID) -> list[BookStock]:
        """Lista todas as cópias de um livro."""
        result = await self.db.execute(
            select(BookStock)
            .where(BookStock.book_id == book_id)
            .order_by(BookStock.code)
        )
        return list(result.scalars().all())

    async def get_available_by_book_id(self, book_id: UUID) -> list[BookStock]:
        """Lista cópias disponíveis de um livro."""
        result = await self.db.execute(
            select(BookStock)
            .where(
                BookStock.book_id == book_id,
                BookStock.status == StockStatus.AVAILABLE,
            )
            .order_by(BookStock.code)
        )
        return list(result.scalars().all())

    async def count_borrowed_by_book_id(self, book_id: UUID) -> int:
        """Conta cópias emprestadas de um livro."""
        result = await self.db.execute(
            select(func.count(BookStock.code)).where(
                BookStock.book_id == book_id,
                BookStock.status == StockStatus.BORROWED,
            )
        )
        return result.scalar_one()

    async def create_stock(
        self,
        code: str,
        book_id: UUID,
        status: StockStatus = StockStatus.AVAILABLE,
    ) -> BookStock:
        """Cria nova cópia."""
        return await self.create(code=code, book_id=book_id, status=status)

    async def update_status(
        self,
        code: str,
        status: StockStatus,
        expected: StockStatus | None = None,
    ) -> bool:
        """
        Atualiza o status de uma cópia.

        Args:
            code: Código da cópia
            status: Novo status
            expected: Se informado, só grava quando o status atual é este

        Returns:
            True se uma linha foi alterada
        """
        statement = (
            update(BookStock)
            .where(BookStock.code == code)
            .values(status=status)
        )
        if expected is not None:
            statement = statement.where(BookStock.status == expected)

        result = await self.db.execute(
            statement.execution_options(synchronize_session="fetch")
        )
        return result.rowcount == 1

    async def claim(self, code: str) -> bool:
        """Available -> Borrowed, somente se a cópia ainda estiver livre."""
        return await self.update_status(
            code,
            StockStatus.BORROWED,
            expected=StockStatus.AVAILABLE,
        )

    async def release(self, code: str) -> bool:
        """Borrowed -> Available, somente se a cópia ainda estiver emprestada."""
        return await self.update_status(
            code,
            StockStatus.AVAILABLE,
            expected=StockStatus.BORROWED,
        )
