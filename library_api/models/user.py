"""
Model de usuário (staff) do sistema.
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import String
from sqlalchemy.dialects.postgresql import ENUM
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.db.session import Base
from library_api.models.base import UUIDMixin, TimestampMixin
from library_api.models.enums import UserRole

if TYPE_CHECKING:
    from library_api.models.charge import Charge


class User(Base, UUIDMixin, TimestampMixin):
    """
    Funcionário da biblioteca.

    Attributes:
        id: UUID único do usuário
        name: Nome completo
        email: Email único (usado como login)
        password_hash: Hash bcrypt da senha
        role: ADMIN ou USER
        charges: Cobranças registradas por este usuário
    """
    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        index=True,
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        ENUM(UserRole, name="user_role", create_type=True),
        nullable=False,
        default=UserRole.USER,
    )

    charges: Mapped[List["Charge"]] = relationship(
        "Charge",
        back_populates="user",
        lazy="raise",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<User {self.email}>"
