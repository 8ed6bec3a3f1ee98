"""
Router principal da API v1.

Inclui todos os routers de endpoints e aplica o rate limit padrão.
"""

from fastapi import APIRouter, Depends

from library_api.api.v1.auth import router as auth_router
from library_api.api.v1.books import router as books_router
from library_api.api.v1.charges import router as charges_router
from library_api.api.v1.customers import router as customers_router
from library_api.api.v1.stocks import router as stocks_router
from library_api.api.v1.system import router as system_router
from library_api.api.v1.transactions import router as transactions_router
from library_api.core.rate_limit import rate_limit_default

api_router = APIRouter(prefix="/api/v1", dependencies=[Depends(rate_limit_default)])

api_router.include_router(auth_router)
api_router.include_router(books_router)
api_router.include_router(stocks_router)
api_router.include_router(customers_router)
api_router.include_router(transactions_router)
api_router.include_router(charges_router)
api_router.include_router(system_router)
