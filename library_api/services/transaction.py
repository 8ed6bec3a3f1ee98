"""
Service para o ciclo de vida dos empréstimos (BookTransaction).

Regras de negócio:
    - Uma cópia só pode estar em um empréstimo ativo (Borrowed/Overdue)
    - Empréstimo ativo <=> cópia com status Borrowed
    - Status Returned <=> return_at preenchido; Returned é terminal
    - Prazo padrão: LOAN_PERIOD_DAYS (7 dias)
    - Overdue é derivado pela varredura de atrasos

Toda operação relê o estado atual do banco e grava tudo em uma única
transação. Devolução, atualização e remoção travam a linha do
empréstimo (SELECT ... FOR UPDATE) antes de decidir. A cópia só troca
de status por UPDATE condicional (Available -> Borrowed na reserva,
Borrowed -> Available na liberação); se outra requisição chegou antes,
a operação falha com ConflictError e nada é gravado.
"""

import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from library_api.core.config import get_settings
from library_api.core.exceptions import (
    ConflictError,
    InvalidFilterError,
    NotFoundError,
    PersistenceError,
    PreconditionFailedError,
)
from library_api.core.filters import FilterParam, validate_filter_fields
from library_api.core.query_builder import filterable_columns
from library_api.models.base import utcnow
from library_api.models.book import BookStock
from library_api.models.enums import (
    ACTIVE_TRANSACTION_STATUSES,
    StockStatus,
    TransactionStatus,
)
from library_api.models.transaction import BookTransaction
from library_api.repositories.customer import CustomerRepository
from library_api.repositories.stock import BookStockRepository
from library_api.repositories.transaction import BookTransactionRepository
from library_api.schemas.transaction import TransactionCreate, TransactionUpdate
from library_api.services.base import BaseService

settings = get_settings()
logger = logging.getLogger(__name__)

STOCK_UPDATE_FAILED = "Falha ao atualizar status da cópia"


class BookTransactionService(BaseService):
    """Service para operações de empréstimo."""

    def __init__(self, db: AsyncSession):
        super().__init__(db)
        self.transaction_repo = BookTransactionRepository(db)
        self.stock_repo = BookStockRepository(db)
        self.customer_repo = CustomerRepository(db)

    # ==========================================
    # Helpers
    # ==========================================

    async def _get_stock(self, code: str) -> BookStock:
        stock = await self.stock_repo.get_by_code(code)
        if not stock:
            raise NotFoundError("Cópia não encontrada")
        return stock

    async def _ensure_customer(self, customer_id: UUID) -> None:
        customer = await self.customer_repo.get_by_id(customer_id)
        if not customer:
            raise NotFoundError("Cliente não encontrado")

    async def _claim_stock(self, stock: BookStock) -> None:
        """
        Prende a cópia para um empréstimo.

        Raises:
            PreconditionFailedError: Cópia não está Available
            ConflictError: Outra requisição prendeu a cópia primeiro
        """
        if stock.status != StockStatus.AVAILABLE:
            raise PreconditionFailedError("Cópia não disponível para empréstimo")
        if not await self.stock_repo.claim(stock.code):
            logger.warning(f"Disputa pela cópia {stock.code} perdida")
            raise ConflictError("Cópia não disponível: emprestada por outra requisição")

    async def _release_stock(self, code: str) -> None:
        """
        Devolve a cópia para Available.

        Raises:
            ConflictError: Cópia não estava Borrowed
        """
        if not await self.stock_repo.release(code):
            logger.warning(f"Cópia {code} não estava emprestada ao ser liberada")
            raise ConflictError("Cópia não está emprestada: status alterado por outra requisição")

    async def _get_for_update(self, transaction_id: UUID) -> BookTransaction:
        transaction = await self.transaction_repo.get_for_update(transaction_id)
        if not transaction:
            raise NotFoundError("Empréstimo não encontrado")
        return transaction

    # ==========================================
    # Create
    # ==========================================

    async def create(self, data: TransactionCreate) -> BookTransaction:
        """
        Cria um novo empréstimo.

        Fluxo:
            1. Verifica se a cópia existe e está Available
            2. Verifica se o cliente existe
            3. Prende a cópia (Available -> Borrowed, condicional)
            4. Cria o empréstimo com due_date = now + LOAN_PERIOD_DAYS

        Raises:
            NotFoundError: Cópia ou cliente não encontrado
            PreconditionFailedError: Cópia não disponível
            ConflictError: Cópia emprestada por outra requisição
        """
        async with self.unit_of_work(
            failure_message=STOCK_UPDATE_FAILED,
            conflict_message="Cópia não disponível: emprestada por outra requisição",
        ):
            stock = await self._get_stock(data.stock_code)
            if stock.status != StockStatus.AVAILABLE:
                raise PreconditionFailedError("Cópia não disponível para empréstimo")
            await self._ensure_customer(data.customer_id)
            await self._claim_stock(stock)

            now = utcnow()
            transaction = await self.transaction_repo.create(
                book_id=stock.book_id,
                stock_code=stock.code,
                customer_id=data.customer_id,
                status=TransactionStatus.BORROWED,
                borrowed_at=now,
                due_date=now + timedelta(days=settings.LOAN_PERIOD_DAYS),
            )

        logger.info(
            f"Empréstimo {transaction.id} criado: cópia {stock.code} "
            f"para cliente {data.customer_id}"
        )
        return await self.get(transaction.id)

    # ==========================================
    # Update
    # ==========================================

    async def update(
        self,
        transaction_id: UUID,
        data: TransactionUpdate,
    ) -> BookTransaction:
        """
        Atualiza um empréstimo.

        Regras:
            - Returned é terminal: não volta para Borrowed
            - return_at só com status final Returned
            - Troca de cópia em empréstimo ativo libera a antiga e prende a nova
            - Status Returned libera a cópia e grava return_at (ou now)

        Raises:
            NotFoundError: Empréstimo, cópia ou cliente não encontrado
            PreconditionFailedError: Transição inválida ou cópia indisponível
            ConflictError: Nova cópia emprestada por outra requisição
        """
        async with self.unit_of_work(failure_message=STOCK_UPDATE_FAILED):
            transaction = await self._get_for_update(transaction_id)

            current_status = transaction.status
            new_status = data.status or current_status

            if (
                current_status == TransactionStatus.RETURNED
                and new_status != TransactionStatus.RETURNED
            ):
                raise PreconditionFailedError("Empréstimo já devolvido não pode ser reaberto")
            if data.return_at is not None and new_status != TransactionStatus.RETURNED:
                raise PreconditionFailedError("return_at exige status Returned")

            if data.customer_id and data.customer_id != transaction.customer_id:
                await self._ensure_customer(data.customer_id)
                transaction.customer_id = data.customer_id

            if data.due_date is not None:
                transaction.due_date = data.due_date

            was_active = current_status in ACTIVE_TRANSACTION_STATUSES
            stays_active = new_status in ACTIVE_TRANSACTION_STATUSES

            if data.stock_code and data.stock_code != transaction.stock_code:
                new_stock = await self._get_stock(data.stock_code)
                if was_active:
                    await self._release_stock(transaction.stock_code)
                if stays_active:
                    await self._claim_stock(new_stock)
                logger.info(
                    f"Empréstimo {transaction.id}: cópia {transaction.stock_code} "
                    f"trocada por {new_stock.code}"
                )
                transaction.stock_code = new_stock.code
                transaction.book_id = new_stock.book_id
            elif was_active and not stays_active:
                await self._release_stock(transaction.stock_code)
            elif stays_active and data.status == TransactionStatus.BORROWED:
                if not await self.stock_repo.update_status(
                    transaction.stock_code, StockStatus.BORROWED
                ):
                    raise PersistenceError(STOCK_UPDATE_FAILED)

            if new_status == TransactionStatus.RETURNED:
                if current_status != TransactionStatus.RETURNED:
                    await self.transaction_repo.return_book(
                        transaction, data.return_at or utcnow()
                    )
                    logger.info(f"Empréstimo {transaction.id} devolvido")
                elif data.return_at is not None:
                    transaction.return_at = data.return_at
            elif new_status != current_status:
                await self.transaction_repo.update_status(transaction, new_status)

            await self.db.flush()

        return await self.get(transaction_id)

    async def update_status(
        self,
        transaction_id: UUID,
        status: TransactionStatus,
    ) -> BookTransaction:
        """
        Troca o status do empréstimo.

        Borrowed força a cópia para Borrowed; Returned libera a cópia e
        grava return_at = now.
        """
        return await self.update(transaction_id, TransactionUpdate(status=status))

    # ==========================================
    # Return
    # ==========================================

    async def return_book(
        self,
        transaction_id: UUID,
        return_at: Optional[datetime] = None,
    ) -> BookTransaction:
        """
        Processa a devolução.

        Fluxo:
            1. Busca o empréstimo
            2. Verifica se não foi devolvido
            3. Marca Returned + return_at
            4. Libera a cópia (Available)

        Returns:
            Empréstimo relido do banco após a devolução

        Raises:
            NotFoundError: Empréstimo não encontrado
            PreconditionFailedError: Livro já devolvido
            ConflictError: Cópia não estava mais Borrowed
        """
        async with self.unit_of_work(failure_message=STOCK_UPDATE_FAILED):
            transaction = await self._get_for_update(transaction_id)
            if transaction.status == TransactionStatus.RETURNED:
                raise PreconditionFailedError("Livro já foi devolvido")

            await self.transaction_repo.return_book(transaction, return_at or utcnow())
            await self._release_stock(transaction.stock_code)

        logger.info(f"Empréstimo {transaction_id} devolvido: cópia {transaction.stock_code}")
        return await self.get(transaction_id)

    # ==========================================
    # Delete
    # ==========================================

    async def delete(self, transaction_id: UUID) -> None:
        """
        Remove o empréstimo (e suas cobranças).

        Se ainda estiver ativo, a cópia volta para Available antes.
        """
        async with self.unit_of_work(failure_message=STOCK_UPDATE_FAILED):
            transaction = await self._get_for_update(transaction_id)
            if transaction.is_active:
                await self._release_stock(transaction.stock_code)
            await self.transaction_repo.delete(transaction)

        logger.info(f"Empréstimo {transaction_id} removido")

    # ==========================================
    # Overdue sweep
    # ==========================================

    async def get_overdue_transactions(
        self,
        now: Optional[datetime] = None,
    ) -> list[BookTransaction]:
        """
        Varredura de atrasos.

        Seleciona empréstimos ativos com due_date < now, grava Overdue
        apenas nos que ainda estão Borrowed e devolve o conjunto inteiro.
        Chamadas repetidas não gravam nada e devolvem o mesmo conjunto.
        """
        now = now or utcnow()
        async with self.unit_of_work(failure_message="Falha ao marcar empréstimos atrasados"):
            overdue = await self.transaction_repo.get_overdue(now)
            pending = [t.id for t in overdue if t.status == TransactionStatus.BORROWED]
            updated = await self.transaction_repo.mark_overdue(pending)

        if updated:
            logger.info(f"Varredura de atrasos: {updated} empréstimo(s) marcado(s) como Overdue")
        return overdue

    # ==========================================
    # Reads
    # ==========================================

    async def get(self, transaction_id: UUID) -> BookTransaction:
        """
        Busca empréstimo por ID com relacionamentos.

        Raises:
            NotFoundError: Empréstimo não encontrado
        """
        transaction = await self.transaction_repo.get_with_relations(transaction_id)
        if not transaction:
            raise NotFoundError("Empréstimo não encontrado")
        return transaction

    async def list_transactions(
        self,
        page: int = 1,
        per_page: int = 10,
        search: Optional[str] = None,
        filters: Iterable[FilterParam] = (),
    ) -> tuple[list[BookTransaction], int]:
        """
        Lista empréstimos com busca (status, título, cópia, cliente) e filtro.

        Raises:
            InvalidFilterError: Campo inexistente ou valor inválido no filtro
        """
        filters = list(filters)
        errors = validate_filter_fields(filters, filterable_columns(BookTransaction))
        if errors:
            raise InvalidFilterError("Filtro inválido", errors=errors)
        return await self.transaction_repo.find_all(page, per_page, search, filters)

    async def get_by_customer_id(self, customer_id: UUID) -> list[BookTransaction]:
        """Lista empréstimos de um cliente."""
        await self._ensure_customer(customer_id)
        return await self.transaction_repo.get_by_customer_id(customer_id)

    async def get_by_book_id(self, book_id: UUID) -> list[BookTransaction]:
        """Lista empréstimos de um livro."""
        return await self.transaction_repo.get_by_book_id(book_id)

    async def get_by_stock_code(self, stock_code: str) -> list[BookTransaction]:
        """Lista empréstimos de uma cópia."""
        await self._get_stock(stock_code)
        return await self.transaction_repo.get_by_stock_code(stock_code)
