"""
Model de cobrança de multa por atraso.
"""

import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, Numeric, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.db.session import Base
from library_api.models.base import UUIDMixin, TimestampMixin

if TYPE_CHECKING:
    from library_api.models.transaction import BookTransaction
    from library_api.models.user import User


class Charge(Base, UUIDMixin, TimestampMixin):
    """
    Multa registrada por um funcionário sobre um empréstimo.

    `total` é sempre days_late * daily_late_fee, recalculado pelo
    ChargeService a cada criação ou alteração.

    Attributes:
        id: UUID único da cobrança
        book_transaction_id: FK para o empréstimo
        days_late: Dias de atraso (>= 0)
        daily_late_fee: Valor da multa por dia (>= 0)
        total: Valor total da cobrança
        user_id: Funcionário que registrou a cobrança
    """
    __tablename__ = "charges"

    book_transaction_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("book_transactions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    days_late: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    daily_late_fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    transaction: Mapped["BookTransaction"] = relationship(
        "BookTransaction",
        back_populates="charges",
        lazy="raise",
    )
    user: Mapped["User"] = relationship(
        "User",
        back_populates="charges",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("days_late >= 0", name="days_late_non_negative"),
        CheckConstraint("daily_late_fee >= 0", name="daily_late_fee_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Charge {self.id} - {self.total}>"
