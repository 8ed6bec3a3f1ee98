"""
Enums utilizados nos models da aplicação.

Os valores de StockStatus e TransactionStatus são gravados no banco
exatamente como aparecem aqui ("Available", "Borrowed", ...).
"""

import enum


class UserRole(str, enum.Enum):
    """Roles de usuário (staff) no sistema."""
    ADMIN = "ADMIN"
    USER = "USER"


class StockStatus(str, enum.Enum):
    """Status de uma cópia física do livro."""
    AVAILABLE = "Available"
    BORROWED = "Borrowed"
    DAMAGED = "Damaged"
    LOST = "Lost"


class TransactionStatus(str, enum.Enum):
    """
    Status de um empréstimo.

    Fluxo:
        BORROWED -> RETURNED
        BORROWED -> OVERDUE -> RETURNED

    RETURNED é terminal. OVERDUE é derivado pela varredura de atrasos.
    """
    BORROWED = "Borrowed"
    RETURNED = "Returned"
    OVERDUE = "Overdue"


# Empréstimos que ainda prendem a cópia
ACTIVE_TRANSACTION_STATUSES = (TransactionStatus.BORROWED, TransactionStatus.OVERDUE)


def enum_values(enum_class: type[enum.Enum]) -> list[str]:
    """values_callable para gravar o value (e não o name) no banco."""
    return [member.value for member in enum_class]
