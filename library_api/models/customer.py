"""
Model de cliente (leitor) da biblioteca.
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.db.session import Base
from library_api.models.base import UUIDMixin, TimestampMixin

if TYPE_CHECKING:
    from library_api.models.transaction import BookTransaction


class Customer(Base, UUIDMixin, TimestampMixin):
    """
    Cliente que pega livros emprestados.

    Attributes:
        id: UUID único do cliente
        code: Código único (carteirinha)
        name: Nome do cliente
        transactions: Histórico de empréstimos
    """
    __tablename__ = "customers"

    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    transactions: Mapped[List["BookTransaction"]] = relationship(
        "BookTransaction",
        back_populates="customer",
        lazy="raise",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Customer {self.code}>"
