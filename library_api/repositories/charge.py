"""
Repository para operações de Charge no banco de dados.
"""

from uuid import UUID

from sqlalchemy import Select, String, cast, select
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.models.charge import Charge
from library_api.models.user import User
from library_api.repositories.base import BaseRepository


class ChargeRepository(BaseRepository[Charge]):
    """Repository para operações CRUD de Charge."""

    search_columns = (User.name, cast(Charge.book_transaction_id, String))

    def __init__(self, db: AsyncSession):
        super().__init__(Charge, db)

    def _list_query(self) -> Select:
        return select(Charge).join(User, Charge.user_id == User.id)

    async def get_by_transaction_id(self, transaction_id: UUID) -> list[Charge]:
        """Lista cobranças de um empréstimo."""
        result = await self.db.execute(
            select(Charge)
            .where(Charge.book_transaction_id == transaction_id)
            .order_by(Charge.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_by_user_id(self, user_id: UUID) -> list[Charge]:
        """Lista cobranças registradas por um funcionário."""
        result = await self.db.execute(
            select(Charge)
            .where(Charge.user_id == user_id)
            .order_by(Charge.created_at.desc())
        )
        return list(result.scalars().all())
