"""
Service para multas por atraso (Charge).

Regra única: total = days_late * daily_late_fee, com duas casas decimais.
O total é sempre recalculado aqui e nunca aceito do cliente.
"""

import logging
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from library_api.core.exceptions import NotFoundError, PreconditionFailedError
from library_api.core.filters import FilterParam
from library_api.models.base import utcnow
from library_api.models.charge import Charge
from library_api.models.transaction import BookTransaction
from library_api.models.user import User
from library_api.repositories.charge import ChargeRepository
from library_api.repositories.transaction import BookTransactionRepository
from library_api.schemas.charge import (
    MAX_DAILY_LATE_FEE,
    MAX_DAYS_LATE,
    ChargeCreate,
    ChargeUpdate,
)
from library_api.services.base import BaseService

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


class ChargeService(BaseService):
    """Service para operações de cobrança."""

    def __init__(self, db: AsyncSession):
        super().__init__(db)
        self.charge_repo = ChargeRepository(db)
        self.transaction_repo = BookTransactionRepository(db)

    # ==========================================
    # Cálculo
    # ==========================================

    @staticmethod
    def calculate_total(days_late: Any, daily_late_fee: Any) -> Decimal:
        """
        Calcula o total da multa.

        Args:
            days_late: Dias de atraso (inteiro entre 0 e MAX_DAYS_LATE)
            daily_late_fee: Multa diária (entre 0 e MAX_DAILY_LATE_FEE)

        Returns:
            days_late * daily_late_fee arredondado para centavos

        Raises:
            PreconditionFailedError: Algum dos valores é inválido
        """
        if (
            isinstance(days_late, bool)
            or not isinstance(days_late, int)
            or not 0 <= days_late <= MAX_DAYS_LATE
        ):
            raise PreconditionFailedError(
                "Dias de atraso inválido",
                errors={"days_late": f"Deve ser um inteiro entre 0 e {MAX_DAYS_LATE}"},
            )

        try:
            fee = daily_late_fee if isinstance(daily_late_fee, Decimal) else Decimal(str(daily_late_fee))
        except (InvalidOperation, ValueError):
            fee = None
        if fee is None or not fee.is_finite() or not 0 <= fee <= MAX_DAILY_LATE_FEE:
            raise PreconditionFailedError(
                "Multa diária inválida",
                errors={"daily_late_fee": f"Deve ser um valor entre 0 e {MAX_DAILY_LATE_FEE}"},
            )

        return (Decimal(days_late) * fee).quantize(CENTS, rounding=ROUND_HALF_UP)

    @staticmethod
    def days_late_for(
        transaction: BookTransaction,
        at: Optional[datetime] = None,
    ) -> int:
        """
        Dias inteiros entre due_date e a devolução (ou `at`/agora).

        Returns:
            Dias de atraso, nunca negativo
        """
        end = transaction.return_at or at or utcnow()
        return max(0, (end - transaction.due_date).days)

    # ==========================================
    # CRUD
    # ==========================================

    async def get(self, charge_id: UUID) -> Charge:
        """
        Busca cobrança por ID.

        Raises:
            NotFoundError: Cobrança não encontrada
        """
        charge = await self.charge_repo.get_by_id(charge_id)
        if not charge:
            raise NotFoundError("Cobrança não encontrada")
        return charge

    async def create(self, user: User, data: ChargeCreate) -> Charge:
        """
        Registra uma cobrança para um empréstimo.

        Se days_late não vier no payload, é calculado a partir do
        empréstimo (due_date até return_at ou agora).

        Raises:
            NotFoundError: Empréstimo não encontrado
            PreconditionFailedError: Valores inválidos
        """
        async with self.unit_of_work():
            transaction = await self.transaction_repo.get_by_id(data.book_transaction_id)
            if not transaction:
                raise NotFoundError("Empréstimo não encontrado")

            days_late = data.days_late
            if days_late is None:
                days_late = self.days_late_for(transaction)

            charge = await self.charge_repo.create(
                book_transaction_id=transaction.id,
                days_late=days_late,
                daily_late_fee=data.daily_late_fee,
                total=self.calculate_total(days_late, data.daily_late_fee),
                user_id=user.id,
            )

        logger.info(
            f"Cobrança {charge.id} registrada por {user.email}: "
            f"empréstimo {transaction.id}, total {charge.total}"
        )
        return charge

    async def update(self, charge_id: UUID, data: ChargeUpdate) -> Charge:
        """
        Atualização parcial; o total é recalculado com o valor mantido.

        Raises:
            NotFoundError: Cobrança não encontrada
            PreconditionFailedError: Valores inválidos
        """
        async with self.unit_of_work():
            charge = await self.get(charge_id)

            days_late = data.days_late if data.days_late is not None else charge.days_late
            daily_late_fee = (
                data.daily_late_fee if data.daily_late_fee is not None else charge.daily_late_fee
            )

            charge = await self.charge_repo.update(
                charge,
                days_late=days_late,
                daily_late_fee=daily_late_fee,
                total=self.calculate_total(days_late, daily_late_fee),
            )
        return charge

    async def delete(self, charge_id: UUID) -> None:
        """Remove cobrança."""
        async with self.unit_of_work():
            charge = await self.get(charge_id)
            await self.charge_repo.delete(charge)
        logger.info(f"Cobrança {charge_id} removida")

    async def list_charges(
        self,
        page: int = 1,
        per_page: int = 10,
        search: Optional[str] = None,
        filters: Iterable[FilterParam] = (),
    ) -> tuple[list[Charge], int]:
        """Lista cobranças com busca (funcionário, empréstimo) e filtro."""
        return await self.charge_repo.find_all(page, per_page, search, filters)

    async def get_by_transaction_id(self, transaction_id: UUID) -> list[Charge]:
        """Lista cobranças de um empréstimo."""
        return await self.charge_repo.get_by_transaction_id(transaction_id)

    async def get_by_user_id(self, user_id: UUID) -> list[Charge]:
        """Lista cobranças registradas por um funcionário."""
        return await self.charge_repo.get_by_user_id(user_id)
