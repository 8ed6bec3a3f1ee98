"""
Endpoints de clientes.

Contratos:
    - GET /customers: Lista clientes (search em código e nome)
    - GET /customers/{id}: Busca cliente
    - GET /customers/{id}/transactions: Cliente com histórico de empréstimos
    - GET /customers/code/{code}: Busca cliente pelo código
    - POST /customers: Cria cliente
    - PUT /customers/{id}: Atualiza cliente
    - DELETE /customers/{id}: Remove cliente sem empréstimos (somente ADMIN)
"""

from uuid import UUID

from fastapi import APIRouter, status

from library_api.core.deps import AdminUser, CurrentUser, DbSession, ListQuery
from library_api.schemas.base import DataResponse, MessageResponse, PaginatedResponse
from library_api.schemas.customer import (
    CustomerCreate,
    CustomerRead,
    CustomerUpdate,
    CustomerWithTransactions,
)
from library_api.services.customer import CustomerService

router = APIRouter(prefix="/customers", tags=["Customers"])


@router.get(
    "",
    response_model=PaginatedResponse[CustomerRead],
    summary="Listar clientes",
)
async def list_customers(
    db: DbSession,
    current_user: CurrentUser,
    params: ListQuery,
) -> PaginatedResponse[CustomerRead]:
    customers, total = await CustomerService(db).list_customers(
        page=params.page,
        per_page=params.per_page,
        search=params.search,
        filters=params.filters,
    )
    return PaginatedResponse.create(
        items=[CustomerRead.model_validate(customer) for customer in customers],
        total=total,
        page=params.page,
        per_page=params.per_page,
    )


@router.get(
    "/code/{code}",
    response_model=DataResponse[CustomerRead],
    summary="Buscar cliente pelo código",
)
async def get_customer_by_code(
    code: str,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[CustomerRead]:
    customer = await CustomerService(db).get_by_code(code)
    return DataResponse(message="Success", data=CustomerRead.model_validate(customer))


@router.get(
    "/{customer_id}",
    response_model=DataResponse[CustomerRead],
    summary="Buscar cliente",
)
async def get_customer(
    customer_id: UUID,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[CustomerRead]:
    customer = await CustomerService(db).get_by_id(customer_id)
    return DataResponse(message="Success", data=CustomerRead.model_validate(customer))


@router.get(
    "/{customer_id}/transactions",
    response_model=DataResponse[CustomerWithTransactions],
    summary="Cliente com histórico de empréstimos",
)
async def get_customer_with_transactions(
    customer_id: UUID,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[CustomerWithTransactions]:
    customer = await CustomerService(db).get_with_transactions(customer_id)
    return DataResponse(
        message="Success",
        data=CustomerWithTransactions.model_validate(customer),
    )


@router.post(
    "",
    response_model=DataResponse[CustomerRead],
    status_code=status.HTTP_201_CREATED,
    summary="Criar cliente",
)
async def create_customer(
    data: CustomerCreate,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[CustomerRead]:
    customer = await CustomerService(db).create(data)
    return DataResponse(
        status=status.HTTP_201_CREATED,
        message="Cliente criado",
        data=CustomerRead.model_validate(customer),
    )


@router.put(
    "/{customer_id}",
    response_model=DataResponse[CustomerRead],
    summary="Atualizar cliente",
)
async def update_customer(
    customer_id: UUID,
    data: CustomerUpdate,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[CustomerRead]:
    customer = await CustomerService(db).update(customer_id, data)
    return DataResponse(message="Cliente atualizado", data=CustomerRead.model_validate(customer))


@router.delete(
    "/{customer_id}",
    response_model=MessageResponse,
    summary="Remover cliente",
    description="Rejeitado se o cliente tiver empréstimos. **Requer ADMIN.**",
)
async def delete_customer(
    customer_id: UUID,
    db: DbSession,
    admin: AdminUser,
) -> MessageResponse:
    await CustomerService(db).delete(customer_id)
    return MessageResponse(message="Cliente removido")
