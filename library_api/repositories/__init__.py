"""
Módulo de repositórios - acesso a dados.
"""

from library_api.repositories.base import BaseRepository
from library_api.repositories.user import UserRepository
from library_api.repositories.book import BookRepository
from library_api.repositories.stock import BookStockRepository
from library_api.repositories.customer import CustomerRepository
from library_api.repositories.transaction import BookTransactionRepository
from library_api.repositories.charge import ChargeRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "BookRepository",
    "BookStockRepository",
    "CustomerRepository",
    "BookTransactionRepository",
    "ChargeRepository",
]
