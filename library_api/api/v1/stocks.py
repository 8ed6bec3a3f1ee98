"""
Endpoints de cópias físicas (BookStock).

Contratos:
    - GET /stocks: Lista cópias (search em código, status e título)
    - GET /stocks/{code}: Busca cópia pelo código
    - GET /stocks/book/{book_id}: Cópias de um livro
    - GET /stocks/book/{book_id}/available: Cópias disponíveis de um livro
    - POST /stocks: Cria cópia
    - PUT /stocks/{code}: Atualiza livro/status da cópia
    - PATCH /stocks/{code}/status: Troca status (Available, Damaged, Lost)
    - DELETE /stocks/{code}: Remove cópia (somente ADMIN)

O status Borrowed só é definido pelo ciclo de empréstimo.
"""

from uuid import UUID

from fastapi import APIRouter, status

from library_api.core.deps import AdminUser, CurrentUser, DbSession, ListQuery
from library_api.schemas.base import DataResponse, MessageResponse, PaginatedResponse
from library_api.schemas.book import (
    StockCreate,
    StockRead,
    StockStatusUpdate,
    StockUpdate,
    StockWithBook,
)
from library_api.services.stock import BookStockService

router = APIRouter(prefix="/stocks", tags=["Stocks"])


@router.get(
    "",
    response_model=PaginatedResponse[StockWithBook],
    summary="Listar cópias",
)
async def list_stocks(
    db: DbSession,
    current_user: CurrentUser,
    params: ListQuery,
) -> PaginatedResponse[StockWithBook]:
    stocks, total = await BookStockService(db).list_stocks(
        page=params.page,
        per_page=params.per_page,
        search=params.search,
        filters=params.filters,
    )
    return PaginatedResponse.create(
        items=[StockWithBook.model_validate(stock) for stock in stocks],
        total=total,
        page=params.page,
        per_page=params.per_page,
    )


@router.get(
    "/book/{book_id}",
    response_model=DataResponse[list[StockRead]],
    summary="Cópias de um livro",
)
async def list_stocks_by_book(
    book_id: UUID,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[list[StockRead]]:
    stocks = await BookStockService(db).get_by_book_id(book_id)
    return DataResponse(
        message="Success",
        data=[StockRead.model_validate(stock) for stock in stocks],
    )


@router.get(
    "/book/{book_id}/available",
    response_model=DataResponse[list[StockRead]],
    summary="Cópias disponíveis de um livro",
)
async def list_available_stocks_by_book(
    book_id: UUID,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[list[StockRead]]:
    stocks = await BookStockService(db).get_available_by_book_id(book_id)
    return DataResponse(
        message="Success",
        data=[StockRead.model_validate(stock) for stock in stocks],
    )


@router.get(
    "/{code}",
    response_model=DataResponse[StockWithBook],
    summary="Buscar cópia pelo código",
)
async def get_stock(
    code: str,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[StockWithBook]:
    stock = await BookStockService(db).get_by_code(code)
    return DataResponse(message="Success", data=StockWithBook.model_validate(stock))


@router.post(
    "",
    response_model=DataResponse[StockRead],
    status_code=status.HTTP_201_CREATED,
    summary="Criar cópia",
)
async def create_stock(
    data: StockCreate,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[StockRead]:
    stock = await BookStockService(db).create(data)
    return DataResponse(
        status=status.HTTP_201_CREATED,
        message="Cópia criada",
        data=StockRead.model_validate(stock),
    )


@router.put(
    "/{code}",
    response_model=DataResponse[StockRead],
    summary="Atualizar cópia",
    description="Rejeitado enquanto houver empréstimo ativo para a cópia.",
)
async def update_stock(
    code: str,
    data: StockUpdate,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[StockRead]:
    stock = await BookStockService(db).update(code, data)
    return DataResponse(message="Cópia atualizada", data=StockRead.model_validate(stock))


@router.patch(
    "/{code}/status",
    response_model=DataResponse[StockRead],
    summary="Trocar status da cópia",
)
async def update_stock_status(
    code: str,
    data: StockStatusUpdate,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[StockRead]:
    stock = await BookStockService(db).update_status(code, data.status)
    return DataResponse(message="Status atualizado", data=StockRead.model_validate(stock))


@router.delete(
    "/{code}",
    response_model=MessageResponse,
    summary="Remover cópia",
    description="Rejeitado se a cópia estiver emprestada. **Requer ADMIN.**",
)
async def delete_stock(
    code: str,
    db: DbSession,
    admin: AdminUser,
) -> MessageResponse:
    await BookStockService(db).delete(code)
    return MessageResponse(message="Cópia removida")
