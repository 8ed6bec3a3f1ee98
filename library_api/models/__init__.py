"""
Models SQLAlchemy da aplicação.

Importar todos os models aqui para que Base.metadata conheça todas as
tabelas (create_all no seed).
"""

from library_api.models.enums import UserRole, StockStatus, TransactionStatus
from library_api.models.user import User
from library_api.models.book import Book, BookStock
from library_api.models.customer import Customer
from library_api.models.transaction import BookTransaction
from library_api.models.charge import Charge

__all__ = [
    "UserRole",
    "StockStatus",
    "TransactionStatus",
    "User",
    "Book",
    "BookStock",
    "Customer",
    "BookTransaction",
    "Charge",
]
