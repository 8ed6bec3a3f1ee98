"""
Endpoints de Sistema (Admin).

Contratos:
    - POST /system/sweep-overdue: Varredura de empréstimos atrasados

Autorização:
    - Todos os endpoints requerem ADMIN
"""

from fastapi import APIRouter
from pydantic import BaseModel

from library_api.core.deps import AdminUser, DbSession
from library_api.schemas.transaction import TransactionRead
from library_api.services.transaction import BookTransactionService

router = APIRouter(prefix="/system", tags=["System (Admin)"])


class SweepOverdueResponse(BaseModel):
    """Resposta da varredura de atrasos."""

    status: int = 200
    message: str
    data: list[TransactionRead]
    total_overdue: int


@router.post(
    "/sweep-overdue",
    response_model=SweepOverdueResponse,
    summary="Varredura de atrasos",
    description="Marca como Overdue os empréstimos vencidos. Idempotente. **Requer ADMIN.**",
)
async def sweep_overdue(db: DbSession, admin: AdminUser) -> SweepOverdueResponse:
    """
    Para cada empréstimo ativo com due_date no passado:
        - Borrowed vira Overdue
        - Overdue permanece como está

    Returns:
        Todos os empréstimos atrasados
    """
    overdue = await BookTransactionService(db).get_overdue_transactions()
    return SweepOverdueResponse(
        message=f"{len(overdue)} empréstimo(s) atrasado(s)",
        data=[TransactionRead.model_validate(t) for t in overdue],
        total_overdue=len(overdue),
    )
