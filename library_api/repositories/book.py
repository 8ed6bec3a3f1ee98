"""
Repository para operações de Book no banco de dados.
"""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.models.book import Book, BookStock
from library_api.models.enums import StockStatus
from library_api.repositories.base import BaseRepository


class BookRepository(BaseRepository[Book]):
    """Repository para operações CRUD de Book."""

    search_columns = (Book.title, Book.description)

    def __init__(self, db: AsyncSession):
        super().__init__(Book, db)

    def _ordering(self) -> tuple:
        return (Book.title,)

    async def count_stocks_by_status(self, book_id: UUID) -> dict[str, int]:
        """
        Conta cópias por status para um livro.

        Returns:
            Dict {status: quantidade} com todos os status (zero incluso)
        """
        result = await self.db.execute(
            select(BookStock.status, func.count(BookStock.code))
            .where(BookStock.book_id == book_id)
            .group_by(BookStock.status)
        )
        counts = {stock_status.value: 0 for stock_status in StockStatus}
        for stock_status, count in result.all():
            counts[stock_status.value] = count
        return counts
