"""
Models de livros: Book (obra) e BookStock (cópia física).
"""

import uuid
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID, ENUM
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.db.session import Base
from library_api.models.base import UUIDMixin, TimestampMixin
from library_api.models.enums import StockStatus, enum_values

if TYPE_CHECKING:
    from library_api.models.transaction import BookTransaction


class Book(Base, UUIDMixin, TimestampMixin):
    """
    Obra do acervo.

    Attributes:
        id: UUID único do livro
        title: Título
        description: Descrição livre
        cover_url: URL da capa (upload feito fora desta API)
        stocks: Cópias físicas do livro
    """
    __tablename__ = "books"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    cover_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    stocks: Mapped[List["BookStock"]] = relationship(
        "BookStock",
        back_populates="book",
        lazy="raise",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Book {self.title}>"


class BookStock(Base, TimestampMixin):
    """
    Cópia física de um livro, identificada por um código legível.

    Attributes:
        code: Código único da cópia (primary key), ex.: BK-001
        book_id: FK para o livro
        status: Available, Borrowed, Damaged ou Lost
    """
    __tablename__ = "book_stocks"

    code: Mapped[str] = mapped_column(String(50), primary_key=True)
    book_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("books.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    status: Mapped[StockStatus] = mapped_column(
        ENUM(
            StockStatus,
            name="stock_status",
            create_type=True,
            values_callable=enum_values,
        ),
        nullable=False,
        default=StockStatus.AVAILABLE,
        index=True,
    )

    book: Mapped["Book"] = relationship(
        "Book",
        back_populates="stocks",
        lazy="selectin",
    )
    transactions: Mapped[List["BookTransaction"]] = relationship(
        "BookTransaction",
        back_populates="stock",
        lazy="raise",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<BookStock {self.code} - {self.status.value}>"
