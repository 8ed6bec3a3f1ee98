"""
Schemas Pydantic para BookTransaction.

O cliente só pode informar os status Borrowed e Returned; Overdue é
definido pela varredura de atrasos.
"""

from datetime import datetime
from decimal import Decimal
from typing import List
from uuid import UUID

from pydantic import Field, field_validator

from library_api.models.enums import TransactionStatus
from library_api.schemas.base import BaseSchema, TimestampSchema


def _reject_overdue(v: TransactionStatus | None) -> TransactionStatus | None:
    if v == TransactionStatus.OVERDUE:
        raise ValueError("Status Overdue é definido pela varredura de atrasos")
    return v


class TransactionCreate(BaseSchema):
    """Schema para criação de empréstimo."""
    stock_code: str = Field(..., min_length=3, max_length=50, examples=["BK-001"])
    customer_id: UUID
    status: TransactionStatus = TransactionStatus.BORROWED

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: TransactionStatus) -> TransactionStatus:
        if v != TransactionStatus.BORROWED:
            raise ValueError("Empréstimo só pode ser criado com status Borrowed")
        return v


class TransactionUpdate(BaseSchema):
    """
    Schema para atualização de empréstimo.

    Todos os campos são opcionais; return_at só é aceito junto com o
    status Returned.
    """
    stock_code: str | None = Field(None, min_length=3, max_length=50)
    customer_id: UUID | None = None
    due_date: datetime | None = None
    status: TransactionStatus | None = None
    return_at: datetime | None = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: TransactionStatus | None) -> TransactionStatus | None:
        return _reject_overdue(v)


class TransactionStatusUpdate(BaseSchema):
    """Schema para troca de status."""
    status: TransactionStatus

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: TransactionStatus) -> TransactionStatus:
        return _reject_overdue(v)


class TransactionReturn(BaseSchema):
    """Schema opcional da devolução."""
    return_at: datetime | None = None


class TransactionChargeRead(TimestampSchema):
    """Cobrança resumida dentro do empréstimo."""
    id: UUID
    days_late: int
    daily_late_fee: Decimal
    total: Decimal
    user_id: UUID


class TransactionRead(TimestampSchema):
    """Schema para leitura de empréstimo."""
    id: UUID
    book_id: UUID
    stock_code: str
    customer_id: UUID
    due_date: datetime
    status: TransactionStatus
    borrowed_at: datetime | None
    return_at: datetime | None


class TransactionBookRead(BaseSchema):
    id: UUID
    title: str


class TransactionCustomerRead(BaseSchema):
    id: UUID
    code: str
    name: str


class TransactionDetail(TransactionRead):
    """Empréstimo com livro, cliente e cobranças."""
    book: TransactionBookRead
    customer: TransactionCustomerRead
    charges: List[TransactionChargeRead] = []
