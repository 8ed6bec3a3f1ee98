"""
Endpoints de Livros.

Contratos:
    - GET /books: Lista livros (search, filter, paginação)
    - GET /books/{id}: Detalhes com contagem de cópias
    - POST /books: Cria livro
    - PUT /books/{id}: Atualiza livro
    - DELETE /books/{id}: Remove livro e cópias (somente ADMIN)
    - GET /books/{id}/stocks: Lista cópias do livro
    - GET /books/{id}/stocks/available: Lista cópias disponíveis

Status codes:
    - 200: Sucesso
    - 201: Criado com sucesso
    - 400: Regra de negócio ou filtro inválido
    - 401: Não autenticado
    - 403: Sem permissão (não é admin)
    - 404: Livro não encontrado
"""

from uuid import UUID

from fastapi import APIRouter, status

from library_api.core.deps import AdminUser, CurrentUser, DbSession, ListQuery
from library_api.schemas.base import DataResponse, MessageResponse, PaginatedResponse
from library_api.schemas.book import (
    BookCreate,
    BookDetail,
    BookRead,
    BookUpdate,
    StockRead,
)
from library_api.services.book import BookService

router = APIRouter(prefix="/books", tags=["Books"])


@router.get(
    "",
    response_model=PaginatedResponse[BookRead],
    summary="Listar livros",
    description="Busca em título e descrição. Filtro: `campo:valor:operador|...`",
)
async def list_books(
    db: DbSession,
    current_user: CurrentUser,
    params: ListQuery,
) -> PaginatedResponse[BookRead]:
    books, total = await BookService(db).list_books(
        page=params.page,
        per_page=params.per_page,
        search=params.search,
        filters=params.filters,
    )
    return PaginatedResponse.create(
        items=[BookRead.model_validate(book) for book in books],
        total=total,
        page=params.page,
        per_page=params.per_page,
    )


@router.get(
    "/{book_id}",
    response_model=DataResponse[BookDetail],
    summary="Detalhes do livro",
)
async def get_book(
    book_id: UUID,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[BookDetail]:
    detail = await BookService(db).get_detail(book_id)
    return DataResponse(message="Success", data=detail)


@router.post(
    "",
    response_model=DataResponse[BookRead],
    status_code=status.HTTP_201_CREATED,
    summary="Criar livro",
)
async def create_book(
    data: BookCreate,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[BookRead]:
    book = await BookService(db).create(data)
    return DataResponse(
        status=status.HTTP_201_CREATED,
        message="Livro criado",
        data=BookRead.model_validate(book),
    )


@router.put(
    "/{book_id}",
    response_model=DataResponse[BookRead],
    summary="Atualizar livro",
)
async def update_book(
    book_id: UUID,
    data: BookUpdate,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[BookRead]:
    book = await BookService(db).update(book_id, data)
    return DataResponse(message="Livro atualizado", data=BookRead.model_validate(book))


@router.delete(
    "/{book_id}",
    response_model=MessageResponse,
    summary="Remover livro",
    description="Remove livro e cópias. Rejeitado se houver cópia emprestada. **Requer ADMIN.**",
)
async def delete_book(
    book_id: UUID,
    db: DbSession,
    admin: AdminUser,
) -> MessageResponse:
    await BookService(db).delete(book_id)
    return MessageResponse(message="Livro removido")


@router.get(
    "/{book_id}/stocks",
    response_model=DataResponse[list[StockRead]],
    summary="Listar cópias do livro",
)
async def list_book_stocks(
    book_id: UUID,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[list[StockRead]]:
    stocks = await BookService(db).list_stocks(book_id)
    return DataResponse(
        message="Success",
        data=[StockRead.model_validate(stock) for stock in stocks],
    )


@router.get(
    "/{book_id}/stocks/available",
    response_model=DataResponse[list[StockRead]],
    summary="Listar cópias disponíveis do livro",
)
async def list_available_book_stocks(
    book_id: UUID,
    db: DbSession,
    current_user: CurrentUser,
) -> DataResponse[list[StockRead]]:
    stocks = await BookService(db).list_available_stocks(book_id)
    return DataResponse(
        message="Success",
        data=[StockRead.model_validate(stock) for stock in stocks],
    )
