"""
Service para clientes (Customer).
"""

import logging
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from library_api.core.exceptions import NotFoundError, PreconditionFailedError
from library_api.core.filters import FilterParam
from library_api.models.customer import Customer
from library_api.repositories.customer import CustomerRepository
from library_api.repositories.transaction import BookTransactionRepository
from library_api.schemas.customer import CustomerCreate, CustomerUpdate
from library_api.services.base import BaseService

logger = logging.getLogger(__name__)


class CustomerService(BaseService):
    """Service para operações de Customer."""

    def __init__(self, db: AsyncSession):
        super().__init__(db)
        self.customer_repo = CustomerRepository(db)
        self.transaction_repo = BookTransactionRepository(db)

    async def get_by_id(self, customer_id: UUID) -> Customer:
        """
        Busca cliente por ID.

        Raises:
            NotFoundError: Cliente não encontrado
        """
        customer = await self.customer_repo.get_by_id(customer_id)
        if not customer:
            raise NotFoundError("Cliente não encontrado")
        return customer

    async def get_with_transactions(self, customer_id: UUID) -> Customer:
        """Cliente com histórico de empréstimos."""
        customer = await self.customer_repo.get_with_transactions(customer_id)
        if not customer:
            raise NotFoundError("Cliente não encontrado")
        return customer

    async def get_by_code(self, code: str) -> Customer:
        """Busca cliente pelo código."""
        customer = await self.customer_repo.get_by_code(code)
        if not customer:
            raise NotFoundError("Cliente não encontrado")
        return customer

    async def list_customers(
        self,
        page: int = 1,
        per_page: int = 10,
        search: Optional[str] = None,
        filters: Iterable[FilterParam] = (),
    ) -> tuple[list[Customer], int]:
        """Lista clientes com busca (código, nome) e filtro."""
        return await self.customer_repo.find_all(page, per_page, search, filters)

    async def create(self, data: CustomerCreate) -> Customer:
        """
        Cria cliente.

        Raises:
            PreconditionFailedError: Código já cadastrado
        """
        async with self.unit_of_work(conflict_message="Código de cliente já cadastrado"):
            if await self.customer_repo.code_exists(data.code):
                raise PreconditionFailedError("Código de cliente já cadastrado")
            customer = await self.customer_repo.create(code=data.code, name=data.name)
        logger.info(f"Cliente {customer.code} criado")
        return customer

    async def update(self, customer_id: UUID, data: CustomerUpdate) -> Customer:
        """
        Atualiza cliente.

        Raises:
            NotFoundError: Cliente não encontrado
            PreconditionFailedError: Código pertence a outro cliente
        """
        async with self.unit_of_work(conflict_message="Código de cliente já cadastrado"):
            customer = await self.get_by_id(customer_id)
            if data.code and await self.customer_repo.code_exists(
                data.code, exclude_id=customer_id
            ):
                raise PreconditionFailedError("Código de cliente já cadastrado")
            customer = await self.customer_repo.update(
                customer,
                code=data.code,
                name=data.name,
            )
        return customer

    async def delete(self, customer_id: UUID) -> None:
        """
        Remove cliente.

        Raises:
            NotFoundError: Cliente não encontrado
            PreconditionFailedError: Cliente possui empréstimos
        """
        async with self.unit_of_work():
            customer = await self.get_by_id(customer_id)
            if await self.transaction_repo.count_by_customer(customer_id):
                raise PreconditionFailedError("Cliente possui empréstimos registrados")
            await self.customer_repo.delete(customer)
        logger.info(f"Cliente {customer_id} removido")
