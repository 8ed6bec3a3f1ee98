"""
Endpoints de empréstimos (BookTransaction).

Contratos:
    - GET /transactions: Lista empréstimos (search em status, título,
      cópia e cliente; filter com validação de campos)
    - GET /transactions/overdue: Empréstimos atrasados
    - GET /transactions/{id}: Detalhes do empréstimo
    - GET /transactions/customer/{customer_id}: Empréstimos de um cliente
    - GET /transactions/book/{book_id}: Empréstimos de um livro
    - GET /transactions/stock/{stock_code}: Empréstimos de uma cópia
    - POST /transactions: Cria empréstimo
    - PUT /transactions/{id}: Atualiza empréstimo
    - PATCH /transactions/{id}/status: Troca status (Borrowed, Returned)
    - POST /transactions/{id}/return: Devolve o livro
    - DELETE /transactions/{id}: Remove empréstimo (somente ADMIN)

Efeito colateral documentado:
    GET /transactions/overdue grava o status Overdue nos empréstimos
    vencidos que ainda estavam Borrowed.

Status codes:
    - 400: Cópia indisponível, livro já devolvido, transição inválida
    - 404: Empréstimo, cópia ou cliente não encontrado
    - 409: Cópia emprestada por outra requisição
    - 500: Falha ao atualizar status da cópia
"""

from uuid import UUID

from fastapi import APIRouter, Body, status

from library_api.core.deps import AdminUser, CurrentUser, DbSession, ListQuery
from library_api.schemas.base import DataResponse, MessageResponse, PaginatedResponse
from library_api.schemas.transaction import (
    TransactionCreate,
    TransactionDetail,
    TransactionRead,
    TransactionReturn,
    TransactionStatusUpdate,
    TransactionUpdate,
)
from library_api.services.transaction import BookTransactionService

router = APIRouter(prefix="/transactions", tags=["Transactions"])


def _read_list(transactions) -> list[TransactionRead]:
    return [TransactionRead.model_validate(t) for t in transactions]


@router.get(
    "",
    response_model=PaginatedResponse[TransactionRead],
    summary="Listar empréstimos",
)
async def list_transactions(
    db: DbSession,
    current_user: CurrentUser,
    params: ListQuery,
) -> PaginatedResponse[TransactionRead]:
    transactions, total = await BookTransactionService(db).list_transactions(
        page=params.page,
        per_page=params.per_page,
        search=params.search,
        filters=params.filters,
    )
    return PaginatedResponse.create(
        items=_read_list(transactions),
        total=total,
        page=params.page,
        per_page=params.per_page,
    )


@router.get(
    "/overdue",
    response_model=DataResponse[list[TransactionRead]],
    summary="Empréstimos atrasados",
    description="Marca como Overdue os empréstimos vencidos e retorna todos os atrasados.",
)
async def list_overdue_transactions(
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[list[TransactionRead]]:
    overdue = await BookTransactionService(db).get_overdue_transactions()
    return DataResponse(message="Success", data=_read_list(overdue))


@router.get(
    "/customer/{customer_id}",
    response_model=DataResponse[list[TransactionRead]],
    summary="Empréstimos de um cliente",
)
async def list_transactions_by_customer(
    customer_id: UUID,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[list[TransactionRead]]:
    transactions = await BookTransactionService(db).get_by_customer_id(customer_id)
    return DataResponse(message="Success", data=_read_list(transactions))


@router.get(
    "/book/{book_id}",
    response_model=DataResponse[list[TransactionRead]],
    summary="Empréstimos de um livro",
)
async def list_transactions_by_book(
    book_id: UUID,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[list[TransactionRead]]:
    transactions = await BookTransactionService(db).get_by_book_id(book_id)
    return DataResponse(message="Success", data=_read_list(transactions))


@router.get(
    "/stock/{stock_code}",
    response_model=DataResponse[list[TransactionRead]],
    summary="Empréstimos de uma cópia",
)
async def list_transactions_by_stock(
    stock_code: str,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[list[TransactionRead]]:
    transactions = await BookTransactionService(db).get_by_stock_code(stock_code)
    return DataResponse(message="Success", data=_read_list(transactions))


@router.get(
    "/{transaction_id}",
    response_model=DataResponse[TransactionDetail],
    summary="Detalhes do empréstimo",
)
async def get_transaction(
    transaction_id: UUID,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[TransactionDetail]:
    transaction = await BookTransactionService(db).get(transaction_id)
    return DataResponse(message="Success", data=TransactionDetail.model_validate(transaction))


@router.post(
    "",
    response_model=DataResponse[TransactionDetail],
    status_code=status.HTTP_201_CREATED,
    summary="Criar empréstimo",
    description="A cópia precisa estar Available. Prazo de devolução: 7 dias.",
)
async def create_transaction(
    data: TransactionCreate,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[TransactionDetail]:
    transaction = await BookTransactionService(db).create(data)
    return DataResponse(
        status=status.HTTP_201_CREATED,
        message="Empréstimo criado",
        data=TransactionDetail.model_validate(transaction),
    )


@router.put(
    "/{transaction_id}",
    response_model=DataResponse[TransactionDetail],
    summary="Atualizar empréstimo",
)
async def update_transaction(
    transaction_id: UUID,
    data: TransactionUpdate,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[TransactionDetail]:
    transaction = await BookTransactionService(db).update(transaction_id, data)
    return DataResponse(
        message="Empréstimo atualizado",
        data=TransactionDetail.model_validate(transaction),
    )


@router.patch(
    "/{transaction_id}/status",
    response_model=DataResponse[TransactionDetail],
    summary="Trocar status do empréstimo",
)
async def update_transaction_status(
    transaction_id: UUID,
    data: TransactionStatusUpdate,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[TransactionDetail]:
    transaction = await BookTransactionService(db).update_status(transaction_id, data.status)
    return DataResponse(
        message="Status atualizado",
        data=TransactionDetail.model_validate(transaction),
    )


@router.post(
    "/{transaction_id}/return",
    response_model=DataResponse[TransactionDetail],
    summary="Devolver livro",
)
async def return_book(
    transaction_id: UUID,
    db: DbSession,
    current_user: CurrentUser,
    data: TransactionReturn | None = Body(None),
) -> DataResponse[TransactionDetail]:
    return_at = data.return_at if data else None
    transaction = await BookTransactionService(db).return_book(transaction_id, return_at)
    return DataResponse(
        message="Livro devolvido",
        data=TransactionDetail.model_validate(transaction),
    )


@router.delete(
    "/{transaction_id}",
    response_model=MessageResponse,
    summary="Remover empréstimo",
    description="Libera a cópia se o empréstimo estiver ativo. **Requer ADMIN.**",
)
async def delete_transaction(
    transaction_id: UUID,
    db: DbSession,
    admin: AdminUser,
) -> MessageResponse:
    await BookTransactionService(db).delete(transaction_id)
    return MessageResponse(message="Empréstimo removido")
