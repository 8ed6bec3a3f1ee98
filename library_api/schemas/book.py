"""
Schemas Pydantic para Book e BookStock.
"""

from uuid import UUID

from pydantic import Field, field_validator

from library_api.models.enums import StockStatus
from library_api.schemas.base import BaseSchema, TimestampSchema


# ============================================
# Book Schemas
# ============================================

class BookCreate(BaseSchema):
    """Schema para criação de livro."""
    title: str = Field(..., min_length=3, max_length=255, examples=["Dom Casmurro"])
    description: str = Field("", max_length=5000)
    cover_url: str | None = Field(None, max_length=500)


class BookRead(TimestampSchema):
    """Schema para leitura de livro."""
    id: UUID
    title: str
    description: str
    cover_url: str | None


class BookUpdate(BaseSchema):
    """Schema para atualização de livro."""
    title: str | None = Field(None, min_length=3, max_length=255)
    description: str | None = Field(None, max_length=5000)
    cover_url: str | None = Field(None, max_length=500)


class BookDetail(BookRead):
    """Livro com contagem de cópias por status."""
    total_stocks: int
    available_stocks: int


# ============================================
# BookStock Schemas
# ============================================

def _reject_borrowed(v: StockStatus | None) -> StockStatus | None:
    if v == StockStatus.BORROWED:
        raise ValueError("Status Borrowed é definido apenas por empréstimos")
    return v


class StockCreate(BaseSchema):
    """
    Schema para criação de cópia.

    Status Borrowed não é aceito: só o ciclo de empréstimo prende uma cópia.
    """
    code: str = Field(..., min_length=3, max_length=50, examples=["BK-001"])
    book_id: UUID
    status: StockStatus = StockStatus.AVAILABLE

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: StockStatus) -> StockStatus:
        return _reject_borrowed(v)


class StockUpdate(BaseSchema):
    """Schema para atualização de cópia."""
    book_id: UUID | None = None
    status: StockStatus | None = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: StockStatus | None) -> StockStatus | None:
        return _reject_borrowed(v)


class StockStatusUpdate(BaseSchema):
    """Schema para troca administrativa de status."""
    status: StockStatus

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: StockStatus) -> StockStatus:
        return _reject_borrowed(v)


class StockRead(TimestampSchema):
    """Schema para leitura de cópia."""
    code: str
    book_id: UUID
    status: StockStatus


class StockWithBook(StockRead):
    """Cópia com dados do livro."""
    book: BookRead
