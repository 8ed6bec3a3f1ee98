"""
Fixtures compartilhadas para testes.

Os testes não dependem de PostgreSQL nem de Redis: services recebem uma
sessão mockada e os endpoints rodam com as dependencies sobrescritas.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient, ASGITransport

from library_api.core.deps import get_current_user
from library_api.core.security import create_access_token
from library_api.db.session import get_db
from library_api.main import app
from library_api.models.book import Book, BookStock
from library_api.models.customer import Customer
from library_api.models.enums import StockStatus, TransactionStatus, UserRole
from library_api.models.transaction import BookTransaction
from library_api.models.user import User


# ==========================================
# Event loop configuration
# ==========================================

@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


# ==========================================
# Database fixtures
# ==========================================

@pytest.fixture
def mock_db():
    """Mock da sessão do banco (add é síncrono na AsyncSession)."""
    db = AsyncMock()
    db.add = MagicMock()
    return db


# ==========================================
# Model fixtures
# ==========================================

def _now() -> datetime:
    return datetime.now(timezone.utc)


@pytest.fixture
def admin_user() -> User:
    return User(
        id=uuid.uuid4(),
        name="Admin",
        email="admin@biblioteca.com.br",
        password_hash="hashed_password",
        role=UserRole.ADMIN,
        created_at=_now(),
        updated_at=_now(),
    )


@pytest.fixture
def staff_user() -> User:
    return User(
        id=uuid.uuid4(),
        name="Atendente",
        email="atendente@biblioteca.com.br",
        password_hash="hashed_password",
        role=UserRole.USER,
        created_at=_now(),
        updated_at=_now(),
    )


@pytest.fixture
def sample_book() -> Book:
    return Book(
        id=uuid.uuid4(),
        title="Dom Casmurro",
        description="Romance",
        cover_url=None,
        created_at=_now(),
        updated_at=_now(),
    )


@pytest.fixture
def sample_stock(sample_book) -> BookStock:
    return BookStock(
        code="BK-001",
        book_id=sample_book.id,
        status=StockStatus.AVAILABLE,
        created_at=_now(),
        updated_at=_now(),
    )


@pytest.fixture
def sample_customer() -> Customer:
    return Customer(
        id=uuid.uuid4(),
        code="C1-0001",
        name="Maria Souza",
        created_at=_now(),
        updated_at=_now(),
    )


@pytest.fixture
def sample_transaction(sample_book, sample_stock, sample_customer) -> BookTransaction:
    now = _now()
    transaction = BookTransaction(
        id=uuid.uuid4(),
        book_id=sample_book.id,
        stock_code=sample_stock.code,
        customer_id=sample_customer.id,
        status=TransactionStatus.BORROWED,
        borrowed_at=now,
        due_date=now + timedelta(days=7),
        return_at=None,
        created_at=now,
        updated_at=now,
    )
    transaction.book = sample_book
    transaction.customer = sample_customer
    transaction.charges = []
    return transaction


# ==========================================
# HTTP Client fixtures
# ==========================================

@pytest.fixture
async def client(mock_db) -> AsyncGenerator[AsyncClient, None]:
    """
    Cliente HTTP assíncrono para testes.

    get_db devolve a sessão mockada; autenticação real (JWT) continua
    ativa a menos que o teste use `admin_client`/`staff_client`.
    """
    async def override_get_db():
        yield mock_db

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def admin_client(client, admin_user) -> AsyncClient:
    """Cliente autenticado como ADMIN."""
    app.dependency_overrides[get_current_user] = lambda: admin_user
    return client


@pytest.fixture
async def staff_client(client, staff_user) -> AsyncClient:
    """Cliente autenticado como funcionário comum."""
    app.dependency_overrides[get_current_user] = lambda: staff_user
    return client


# ==========================================
# Auth fixtures
# ==========================================

@pytest.fixture
def admin_token(admin_user) -> str:
    """Token JWT de admin."""
    return create_access_token(
        subject=str(admin_user.id),
        extra_data={"role": UserRole.ADMIN.value},
    )
