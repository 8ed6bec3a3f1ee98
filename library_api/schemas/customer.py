"""
Schemas Pydantic para Customer.
"""

from typing import List
from uuid import UUID

from pydantic import Field

from library_api.schemas.base import BaseSchema, TimestampSchema
from library_api.schemas.transaction import TransactionRead


class CustomerCreate(BaseSchema):
    """Schema para criação de cliente."""
    code: str = Field(..., min_length=3, max_length=50, examples=["C-0001"])
    name: str = Field(..., min_length=3, max_length=255, examples=["Maria Souza"])


class CustomerUpdate(BaseSchema):
    """Schema para atualização de cliente."""
    code: str | None = Field(None, min_length=3, max_length=50)
    name: str | None = Field(None, min_length=3, max_length=255)


class CustomerRead(TimestampSchema):
    """Schema para leitura de cliente."""
    id: UUID
    code: str
    name: str


class CustomerWithTransactions(CustomerRead):
    """Cliente com histórico de empréstimos."""
    transactions: List[TransactionRead] = []
