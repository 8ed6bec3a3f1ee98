"""
Schemas base reutilizáveis em toda a aplicação.

Todas as respostas seguem o mesmo envelope:
    {status, message, data}              - DataResponse
    {status, message, data, meta}        - PaginatedResponse
    {status, message, errors}            - ErrorResponse
"""

from datetime import datetime
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

from library_api.core.query_builder import total_pages

T = TypeVar("T")


class BaseSchema(BaseModel):
    """Schema base com configurações padrão."""
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
    )


class TimestampSchema(BaseSchema):
    """Schema com timestamps."""
    created_at: datetime
    updated_at: datetime


class PaginationMeta(BaseModel):
    """Metadados de paginação."""
    page: int
    per_page: int
    total_items: int
    total_pages: int
    items_on_page: int


class PaginatedResponse(BaseModel, Generic[T]):
    """
    Resposta paginada genérica.

    Uso nos endpoints:
        @router.get("", response_model=PaginatedResponse[BookRead])
        async def list_books(...) -> PaginatedResponse[BookRead]:
            ...
    """
    status: int = 200
    message: str
    data: List[T]
    meta: PaginationMeta

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def create(
        cls,
        items: List[Any],
        total: int,
        page: int,
        per_page: int,
        message: str = "Success",
    ) -> "PaginatedResponse[T]":
        """Factory method para criar resposta paginada."""
        return cls(
            message=message,
            data=items,
            meta=PaginationMeta(
                page=page,
                per_page=per_page,
                total_items=total,
                total_pages=total_pages(total, per_page),
                items_on_page=len(items),
            ),
        )


class DataResponse(BaseModel, Generic[T]):
    """Resposta com um único objeto."""
    status: int = 200
    message: str
    data: T


class ErrorResponse(BaseModel):
    """
    Resposta de erro padrão.

    `errors` traz detalhes por campo quando existirem (validação do
    payload ou filtro inválido).
    """
    status: int
    message: str
    errors: Optional[dict[str, Any]] = None


class MessageResponse(BaseModel):
    """Resposta simples com mensagem."""
    status: int = 200
    message: str
