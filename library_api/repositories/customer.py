"""
Repository para operações de Customer no banco de dados.
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from library_api.models.customer import Customer
from library_api.repositories.base import BaseRepository


class CustomerRepository(BaseRepository[Customer]):
    """Repository para operações CRUD de Customer."""

    search_columns = (Customer.code, Customer.name)

    def __init__(self, db: AsyncSession):
        super().__init__(Customer, db)

    def _ordering(self) -> tuple:
        return (Customer.name,)

    async def get_by_code(self, code: str) -> Customer | None:
        """Busca cliente pelo código."""
        result = await self.db.execute(
            select(Customer).where(Customer.code == code)
        )
        return result.scalar_one_or_none()

    async def code_exists(self, code: str, exclude_id: UUID | None = None) -> bool:
        """Verifica se o código já pertence a outro cliente."""
        query = select(Customer.id).where(Customer.code == code)
        if exclude_id is not None:
            query = query.where(Customer.id != exclude_id)
        result = await self.db.execute(query)
        return result.first() is not None

    async def get_with_transactions(self, customer_id: UUID) -> Customer | None:
        """Busca cliente com o histórico de empréstimos."""
        result = await self.db.execute(
            select(Customer)
            .where(Customer.id == customer_id)
            .options(selectinload(Customer.transactions))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()
