"""
Repository para operações de BookTransaction (empréstimos).
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Select, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from library_api.models.book import Book, BookStock
from library_api.models.customer import Customer
from library_api.models.enums import ACTIVE_TRANSACTION_STATUSES, TransactionStatus
from library_api.models.transaction import BookTransaction
from library_api.repositories.base import BaseRepository


class BookTransactionRepository(BaseRepository[BookTransaction]):
    """Repository para operações CRUD de BookTransaction."""

    search_columns = (
        BookTransaction.status,
        Book.title,
        BookStock.code,
        Customer.name,
    )

    def __init__(self, db: AsyncSession):
        super().__init__(BookTransaction, db)

    def _list_query(self) -> Select:
        return (
            select(BookTransaction)
            .outerjoin(Book, BookTransaction.book_id == Book.id)
            .outerjoin(BookStock, BookTransaction.stock_code == BookStock.code)
            .outerjoin(Customer, BookTransaction.customer_id == Customer.id)
        )

    def _ordering(self) -> tuple:
        return (BookTransaction.borrowed_at.desc(),)

    async def get_with_relations(self, transaction_id: UUID) -> BookTransaction | None:
        """
        Busca empréstimo com livro, cópia, cliente e cobranças.

        Sempre relê do banco (populate_existing), mesmo que o objeto já
        esteja na sessão.
        """
        result = await self.db.execute(
            select(BookTransaction)
            .where(BookTransaction.id == transaction_id)
            .options(
                selectinload(BookTransaction.book),
                selectinload(BookTransaction.stock),
                selectinload(BookTransaction.customer),
                selectinload(BookTransaction.charges),
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_for_update(self, transaction_id: UUID) -> BookTransaction | None:
        """
        Busca empréstimo travando a linha (SELECT ... FOR UPDATE).

        Uma segunda requisição sobre o mesmo empréstimo espera o commit
        da primeira e lê o estado já gravado.
        """
        result = await self.db.execute(
            select(BookTransaction)
            .where(BookTransaction.id == transaction_id)
            .with_for_update(of=BookTransaction)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_customer_id(self, customer_id: UUID) -> list[BookTransaction]:
        """Lista empréstimos de um cliente."""
        result = await self.db.execute(
            select(BookTransaction)
            .where(BookTransaction.customer_id == customer_id)
            .order_by(BookTransaction.borrowed_at.desc())
        )
        return list(result.scalars().all())

    async def get_by_book_id(self, book_id: UUID) -> list[BookTransaction]:
        """Lista empréstimos de um livro."""
        result = await self.db.execute(
            select(BookTransaction)
            .where(BookTransaction.book_id == book_id)
            .order_by(BookTransaction.borrowed_at.desc())
        )
        return list(result.scalars().all())

    async def get_by_stock_code(self, stock_code: str) -> list[BookTransaction]:
        """Lista empréstimos de uma cópia."""
        result = await self.db.execute(
            select(BookTransaction)
            .where(BookTransaction.stock_code == stock_code)
            .order_by(BookTransaction.borrowed_at.desc())
        )
        return list(result.scalars().all())

    async def get_active_by_stock_code(self, stock_code: str) -> BookTransaction | None:
        """Busca o empréstimo ativo (Borrowed/Overdue) de uma cópia."""
        result = await self.db.execute(
            select(BookTransaction)
            .where(
                BookTransaction.stock_code == stock_code,
                BookTransaction.status.in_(ACTIVE_TRANSACTION_STATUSES),
            )
        )
        return result.scalar_one_or_none()

    async def count_by_customer(self, customer_id: UUID) -> int:
        """Conta empréstimos (de qualquer status) de um cliente."""
        result = await self.db.execute(
            select(func.count(BookTransaction.id))
            .where(BookTransaction.customer_id == customer_id)
        )
        return result.scalar_one()

    async def update_status(
        self,
        transaction: BookTransaction,
        status: TransactionStatus,
    ) -> BookTransaction:
        """Atualiza o status do empréstimo."""
        transaction.status = status
        await self.db.flush()
        return transaction

    async def return_book(
        self,
        transaction: BookTransaction,
        return_at: datetime,
    ) -> BookTransaction:
        """Marca o empréstimo como devolvido em `return_at`."""
        transaction.status = TransactionStatus.RETURNED
        transaction.return_at = return_at
        await self.db.flush()
        return transaction

    async def get_overdue(self, now: datetime) -> list[BookTransaction]:
        """Lista empréstimos ativos com due_date anterior a `now`."""
        result = await self.db.execute(
            select(BookTransaction)
            .where(
                BookTransaction.status.in_(ACTIVE_TRANSACTION_STATUSES),
                BookTransaction.due_date < now,
            )
            .order_by(BookTransaction.due_date)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def mark_overdue(self, transaction_ids: list[UUID]) -> int:
        """
        Borrowed -> Overdue para os IDs informados.

        Linhas que já estão Overdue (ou foram devolvidas no meio tempo)
        não são tocadas.

        Returns:
            Quantidade de linhas alteradas
        """
        if not transaction_ids:
            return 0
        result = await self.db.execute(
            update(BookTransaction)
            .where(
                BookTransaction.id.in_(transaction_ids),
                BookTransaction.status == TransactionStatus.BORROWED,
            )
            .values(status=TransactionStatus.OVERDUE)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount
