"""
Schemas Pydantic para Charge.
"""

from decimal import Decimal
from uuid import UUID

from pydantic import Field

from library_api.schemas.base import BaseSchema, TimestampSchema

# Limites que mantêm total = days_late * daily_late_fee dentro de Numeric(12, 2)
MAX_DAYS_LATE = 36500
MAX_DAILY_LATE_FEE = Decimal("99999.99")


class ChargeCreate(BaseSchema):
    """
    Schema para criação de cobrança.

    Se days_late não for informado, é calculado a partir do empréstimo.
    O total nunca vem do cliente.
    """
    book_transaction_id: UUID
    days_late: int | None = Field(None, ge=0, le=MAX_DAYS_LATE, examples=[3])
    daily_late_fee: Decimal = Field(
        ..., ge=0, le=MAX_DAILY_LATE_FEE, max_digits=10, decimal_places=2, examples=["2.50"]
    )


class ChargeUpdate(BaseSchema):
    """Schema para atualização parcial; o total é recalculado."""
    days_late: int | None = Field(None, ge=0, le=MAX_DAYS_LATE)
    daily_late_fee: Decimal | None = Field(
        None, ge=0, le=MAX_DAILY_LATE_FEE, max_digits=10, decimal_places=2
    )


class ChargeRead(TimestampSchema):
    """Schema para leitura de cobrança."""
    id: UUID
    book_transaction_id: UUID
    days_late: int
    daily_late_fee: Decimal
    total: Decimal
    user_id: UUID
