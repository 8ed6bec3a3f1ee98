"""
Módulo de serviços - lógica de negócio.
"""

from library_api.services.auth import AuthService
from library_api.services.book import BookService
from library_api.services.stock import BookStockService
from library_api.services.customer import CustomerService
from library_api.services.transaction import BookTransactionService
from library_api.services.charge import ChargeService

__all__ = [
    "AuthService",
    "BookService",
    "BookStockService",
    "CustomerService",
    "BookTransactionService",
    "ChargeService",
]
