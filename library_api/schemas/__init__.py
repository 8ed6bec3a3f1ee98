"""
Schemas Pydantic da aplicação.
"""

from library_api.schemas.base import (
    BaseSchema,
    DataResponse,
    ErrorResponse,
    MessageResponse,
    PaginatedResponse,
    PaginationMeta,
    TimestampSchema,
)
from library_api.schemas.health import HealthResponse
from library_api.schemas.user import (
    TokenResponse,
    UserCreate,
    UserLogin,
    UserRead,
    UserWithToken,
)
from library_api.schemas.book import (
    BookCreate,
    BookDetail,
    BookRead,
    BookUpdate,
    StockCreate,
    StockRead,
    StockStatusUpdate,
    StockUpdate,
    StockWithBook,
)
from library_api.schemas.transaction import (
    TransactionCreate,
    TransactionDetail,
    TransactionRead,
    TransactionReturn,
    TransactionStatusUpdate,
    TransactionUpdate,
)
from library_api.schemas.customer import (
    CustomerCreate,
    CustomerRead,
    CustomerUpdate,
    CustomerWithTransactions,
)
from library_api.schemas.charge import ChargeCreate, ChargeRead, ChargeUpdate

__all__ = [
    # Base
    "BaseSchema",
    "DataResponse",
    "ErrorResponse",
    "MessageResponse",
    "PaginatedResponse",
    "PaginationMeta",
    "TimestampSchema",
    # Health
    "HealthResponse",
    # User
    "TokenResponse",
    "UserCreate",
    "UserLogin",
    "UserRead",
    "UserWithToken",
    # Book / Stock
    "BookCreate",
    "BookDetail",
    "BookRead",
    "BookUpdate",
    "StockCreate",
    "StockRead",
    "StockStatusUpdate",
    "StockUpdate",
    "StockWithBook",
    # Transaction
    "TransactionCreate",
    "TransactionDetail",
    "TransactionRead",
    "TransactionReturn",
    "TransactionStatusUpdate",
    "TransactionUpdate",
    # Customer
    "CustomerCreate",
    "CustomerRead",
    "CustomerUpdate",
    "CustomerWithTransactions",
    # Charge
    "ChargeCreate",
    "ChargeRead",
    "ChargeUpdate",
]
