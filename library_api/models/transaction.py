"""
Model de empréstimo (BookTransaction).
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, ForeignKey, Index, String, text
from sqlalchemy.dialects.postgresql import UUID, ENUM
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.db.session import Base
from library_api.models.base import UUIDMixin, TimestampMixin, utcnow
from library_api.models.enums import (
    ACTIVE_TRANSACTION_STATUSES,
    TransactionStatus,
    enum_values,
)

if TYPE_CHECKING:
    from library_api.models.book import Book, BookStock
    from library_api.models.charge import Charge
    from library_api.models.customer import Customer


class BookTransaction(Base, UUIDMixin, TimestampMixin):
    """
    Empréstimo de uma cópia física para um cliente.

    Invariantes:
        - status RETURNED <=> return_at preenchido
        - status BORROWED/OVERDUE <=> cópia com status Borrowed
        - no máximo um empréstimo ativo por cópia (índice parcial único)

    Attributes:
        id: UUID único do empréstimo
        book_id: FK para o livro (derivado da cópia)
        stock_code: FK para a cópia emprestada
        customer_id: FK para o cliente
        due_date: Data prevista de devolução
        status: Borrowed, Returned ou Overdue
        borrowed_at: Data/hora do empréstimo
        return_at: Data/hora da devolução (null enquanto ativo)
        charges: Cobranças de multa deste empréstimo
    """
    __tablename__ = "book_transactions"

    book_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("books.id", ondelete="RESTRICT"),
        nullable=False,
    )
    stock_code: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("book_stocks.code", ondelete="RESTRICT", onupdate="CASCADE"),
        nullable=False,
    )
    customer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=False,
    )
    due_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[TransactionStatus] = mapped_column(
        ENUM(
            TransactionStatus,
            name="transaction_status",
            create_type=True,
            values_callable=enum_values,
        ),
        nullable=False,
        default=TransactionStatus.BORROWED,
    )
    borrowed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=utcnow,
    )
    return_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # Relationships
    book: Mapped["Book"] = relationship("Book", lazy="selectin")
    stock: Mapped["BookStock"] = relationship(
        "BookStock",
        back_populates="transactions",
        lazy="selectin",
    )
    customer: Mapped["Customer"] = relationship(
        "Customer",
        back_populates="transactions",
        lazy="selectin",
    )
    charges: Mapped[List["Charge"]] = relationship(
        "Charge",
        back_populates="transaction",
        lazy="selectin",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_book_transactions_customer_id", "customer_id"),
        Index("ix_book_transactions_book_id", "book_id"),
        Index("ix_book_transactions_stock_code", "stock_code"),
        # Varredura de atrasos: status + due_date
        Index("ix_book_transactions_overdue", "status", "due_date"),
        # Uma cópia só pode ter um empréstimo ativo
        Index(
            "uq_book_transactions_active_stock_code",
            "stock_code",
            unique=True,
            postgresql_where=text("status IN ('Borrowed', 'Overdue')"),
        ),
    )

    def __repr__(self) -> str:
        return f"<BookTransaction {self.id} - {self.status.value}>"

    @property
    def is_active(self) -> bool:
        """True enquanto a cópia não foi devolvida."""
        return self.status in ACTIVE_TRANSACTION_STATUSES
