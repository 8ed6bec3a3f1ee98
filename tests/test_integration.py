"""
Testes de integração do ciclo de empréstimo contra o PostgreSQL.

Usam o banco de DATABASE_URL (as tabelas são criadas com create_all) e
são ignorados quando o banco não está acessível. Cada teste cria livro,
cópia e cliente com códigos únicos, então podem rodar sobre um banco
com dados.

Cada service recebe sua própria sessão, como duas requisições HTTP.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import anyio
import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, InvalidRequestError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from library_api.core.config import get_settings
from library_api.core.exceptions import ConflictError, PreconditionFailedError
from library_api.core.filters import parse_filter_string
from library_api.db.session import Base
from library_api.models import Book, BookStock, BookTransaction, Customer
from library_api.models.enums import (
    ACTIVE_TRANSACTION_STATUSES,
    StockStatus,
    TransactionStatus,
)
from library_api.repositories.stock import BookStockRepository
from library_api.repositories.transaction import BookTransactionRepository
from library_api.schemas.transaction import TransactionCreate
from library_api.services.transaction import BookTransactionService

settings = get_settings()


# ==========================================
# Fixtures
# ==========================================

@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    Engine com NullPool apontando para DATABASE_URL.

    Ignora o teste se o banco não responder.
    """
    engine = create_async_engine(settings.DATABASE_URL, echo=False, poolclass=NullPool)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except (OSError, SQLAlchemyError) as e:
        await engine.dispose()
        pytest.skip(f"Banco de dados indisponível: {e}")

    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def loanable(session_factory) -> dict:
    """Livro com uma cópia Available e um cliente, todos com códigos únicos."""
    suffix = uuid.uuid4().hex[:10]
    async with session_factory() as session:
        book = Book(title=f"Livro de integração {suffix}", description="")
        session.add(book)
        await session.flush()

        stock = BookStock(code=f"IT-{suffix}", book_id=book.id, status=StockStatus.AVAILABLE)
        customer = Customer(code=f"C-{suffix}", name=f"Cliente {suffix}")
        session.add_all([stock, customer])
        await session.commit()

        return {
            "book_id": book.id,
            "title": book.title,
            "stock_code": stock.code,
            "customer_id": customer.id,
        }


# ==========================================
# Helpers
# ==========================================

async def stock_status(session_factory, code: str) -> StockStatus:
    async with session_factory() as session:
        stock = await BookStockRepository(session).get_by_code(code)
        return stock.status


async def count_active(session_factory, code: str) -> int:
    async with session_factory() as session:
        result = await session.execute(
            select(func.count(BookTransaction.id)).where(
                BookTransaction.stock_code == code,
                BookTransaction.status.in_(ACTIVE_TRANSACTION_STATUSES),
            )
        )
        return result.scalar_one()


async def borrow(session_factory, loanable: dict) -> BookTransaction:
    async with session_factory() as session:
        return await BookTransactionService(session).create(
            TransactionCreate(
                stock_code=loanable["stock_code"],
                customer_id=loanable["customer_id"],
            )
        )


# ==========================================
# Create / Return
# ==========================================

class TestLoanLifecycle:

    @pytest.mark.anyio
    async def test_create_then_return(self, session_factory, loanable):
        created = await borrow(session_factory, loanable)

        assert created.status == TransactionStatus.BORROWED
        assert created.due_date - created.borrowed_at == timedelta(days=settings.LOAN_PERIOD_DAYS)
        assert await stock_status(session_factory, loanable["stock_code"]) == StockStatus.BORROWED

        async with session_factory() as session:
            returned = await BookTransactionService(session).return_book(created.id)

        assert returned.status == TransactionStatus.RETURNED
        assert returned.return_at is not None
        assert await stock_status(session_factory, loanable["stock_code"]) == StockStatus.AVAILABLE
        assert await count_active(session_factory, loanable["stock_code"]) == 0

    @pytest.mark.anyio
    async def test_concurrent_creates_single_winner(self, session_factory, loanable):
        outcomes = []

        async def attempt():
            try:
                outcomes.append(await borrow(session_factory, loanable))
            except (ConflictError, PreconditionFailedError) as e:
                outcomes.append(e)

        async with anyio.create_task_group() as tg:
            tg.start_soon(attempt)
            tg.start_soon(attempt)

        successes = [o for o in outcomes if isinstance(o, BookTransaction)]
        assert len(successes) == 1
        assert len(outcomes) == 2
        assert await count_active(session_factory, loanable["stock_code"]) == 1
        assert await stock_status(session_factory, loanable["stock_code"]) == StockStatus.BORROWED

    @pytest.mark.anyio
    async def test_concurrent_returns_then_new_loan(self, session_factory, loanable):
        """A devolução perdedora vê o empréstimo já devolvido e não toca a cópia."""
        created = await borrow(session_factory, loanable)
        outcomes = []

        async def attempt():
            async with session_factory() as session:
                try:
                    outcomes.append(await BookTransactionService(session).return_book(created.id))
                except (ConflictError, PreconditionFailedError) as e:
                    outcomes.append(e)

        async with anyio.create_task_group() as tg:
            tg.start_soon(attempt)
            tg.start_soon(attempt)

        successes = [o for o in outcomes if isinstance(o, BookTransaction)]
        failures = [o for o in outcomes if isinstance(o, PreconditionFailedError)]
        assert len(successes) == 1
        assert len(failures) == 1

        new_loan = await borrow(session_factory, loanable)

        assert new_loan.status == TransactionStatus.BORROWED
        assert await stock_status(session_factory, loanable["stock_code"]) == StockStatus.BORROWED
        assert await count_active(session_factory, loanable["stock_code"]) == 1


# ==========================================
# Overdue sweep
# ==========================================

class TestOverdueSweep:

    @pytest.mark.anyio
    async def test_sweep_twice_writes_once(self, session_factory, loanable):
        now = datetime.now(timezone.utc)
        async with session_factory() as session:
            assert await BookStockRepository(session).claim(loanable["stock_code"])
            transaction = BookTransaction(
                book_id=loanable["book_id"],
                stock_code=loanable["stock_code"],
                customer_id=loanable["customer_id"],
                status=TransactionStatus.BORROWED,
                borrowed_at=now - timedelta(days=10),
                due_date=now - timedelta(days=3),
            )
            session.add(transaction)
            await session.commit()
            transaction_id = transaction.id

        async with session_factory() as session:
            first = await BookTransactionService(session).get_overdue_transactions()
        assert transaction_id in [t.id for t in first]

        async with session_factory() as session:
            swept = await session.get(BookTransaction, transaction_id)
            assert swept.status == TransactionStatus.OVERDUE
            updated_at = swept.updated_at

        async with session_factory() as session:
            assert await BookTransactionRepository(session).mark_overdue([transaction_id]) == 0
            second = await BookTransactionService(session).get_overdue_transactions()
        assert transaction_id in [t.id for t in second]

        async with session_factory() as session:
            again = await session.get(BookTransaction, transaction_id)
            assert again.status == TransactionStatus.OVERDUE
            assert again.updated_at == updated_at


# ==========================================
# Listagem
# ==========================================

class TestListTransactions:

    @pytest.mark.anyio
    async def test_search_and_filter(self, session_factory, loanable):
        created = await borrow(session_factory, loanable)

        async with session_factory() as session:
            items, total = await BookTransactionService(session).list_transactions(
                search=loanable["title"],
                filters=parse_filter_string("status:Borrowed:equals"),
            )

        assert total == 1
        assert [t.id for t in items] == [created.id]

        async with session_factory() as session:
            items, total = await BookTransactionService(session).list_transactions(
                search=loanable["title"],
                filters=parse_filter_string("status:Returned:equals"),
            )

        assert total == 0
        assert items == []


# ==========================================
# Garantias do banco
# ==========================================

class TestDatabaseGuarantees:

    @pytest.mark.anyio
    async def test_claim_only_once(self, session_factory, loanable):
        async with session_factory() as session:
            repo = BookStockRepository(session)

            assert await repo.claim(loanable["stock_code"]) is True
            assert await repo.claim(loanable["stock_code"]) is False
            await session.rollback()

    @pytest.mark.anyio
    async def test_release_requires_borrowed(self, session_factory, loanable):
        async with session_factory() as session:
            assert await BookStockRepository(session).release(loanable["stock_code"]) is False
            await session.rollback()

    @pytest.mark.anyio
    async def test_unique_active_transaction_per_stock(self, session_factory, loanable):
        now = datetime.now(timezone.utc)
        async with session_factory() as session:
            for _ in range(2):
                session.add(
                    BookTransaction(
                        book_id=loanable["book_id"],
                        stock_code=loanable["stock_code"],
                        customer_id=loanable["customer_id"],
                        status=TransactionStatus.BORROWED,
                        borrowed_at=now,
                        due_date=now + timedelta(days=7),
                    )
                )
            with pytest.raises(IntegrityError):
                await session.flush()
            await session.rollback()

    @pytest.mark.anyio
    async def test_unloaded_collection_raises(self, session_factory, loanable):
        async with session_factory() as session:
            book = await session.get(Book, loanable["book_id"])

            with pytest.raises(InvalidRequestError):
                book.stocks
