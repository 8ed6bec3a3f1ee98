"""
Testes dos endpoints HTTP: envelope de resposta, tradução de erros e
autorização. Os services são substituídos por mocks.
"""

import uuid
from unittest.mock import patch

import pytest
from httpx import AsyncClient

from library_api.core.exceptions import (
    ConflictError,
    InvalidFilterError,
    NotFoundError,
    PersistenceError,
    PreconditionFailedError,
)
from library_api.core.filters import FilterOperator
from library_api.core.security import hash_password
from library_api.models.enums import TransactionStatus
from library_api.repositories.user import UserRepository
from library_api.services.transaction import BookTransactionService

TRANSACTIONS = "/api/v1/transactions"


class TestTransactionEndpoints:
    """Testes para /api/v1/transactions."""

    @pytest.mark.anyio
    async def test_create_transaction(self, staff_client: AsyncClient, sample_transaction):
        with patch.object(
            BookTransactionService, "create", return_value=sample_transaction
        ) as create:
            response = await staff_client.post(
                TRANSACTIONS,
                json={"stock_code": "BK-001", "customer_id": str(sample_transaction.customer_id)},
            )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == 201
        assert body["data"]["stock_code"] == "BK-001"
        assert body["data"]["status"] == "Borrowed"
        assert body["data"]["book"]["title"] == "Dom Casmurro"
        assert create.await_args.args[0].stock_code == "BK-001"

    @pytest.mark.anyio
    async def test_create_with_overdue_status_rejected(self, staff_client: AsyncClient):
        response = await staff_client.post(
            TRANSACTIONS,
            json={"stock_code": "BK-001", "customer_id": str(uuid.uuid4()), "status": "Overdue"},
        )

        assert response.status_code == 422
        assert response.json()["message"] == "Dados inválidos"

    @pytest.mark.anyio
    async def test_patch_status_overdue_rejected(self, staff_client: AsyncClient):
        response = await staff_client.patch(
            f"{TRANSACTIONS}/{uuid.uuid4()}/status",
            json={"status": "Overdue"},
        )

        assert response.status_code == 422

    @pytest.mark.anyio
    @pytest.mark.parametrize(
        "error, status_code",
        [
            (PreconditionFailedError("Cópia não disponível para empréstimo"), 400),
            (ConflictError("Cópia não disponível: emprestada por outra requisição"), 409),
            (NotFoundError("Cópia não encontrada"), 404),
            (PersistenceError("Falha ao atualizar status da cópia"), 500),
        ],
    )
    async def test_domain_errors_are_translated(
        self, staff_client: AsyncClient, error, status_code
    ):
        with patch.object(BookTransactionService, "create", side_effect=error):
            response = await staff_client.post(
                TRANSACTIONS,
                json={"stock_code": "BK-001", "customer_id": str(uuid.uuid4())},
            )

        assert response.status_code == status_code
        assert response.json() == {"status": status_code, "message": error.message}

    @pytest.mark.anyio
    async def test_return_book(self, staff_client: AsyncClient, sample_transaction):
        sample_transaction.status = TransactionStatus.RETURNED
        sample_transaction.return_at = sample_transaction.borrowed_at

        with patch.object(
            BookTransactionService, "return_book", return_value=sample_transaction
        ) as return_book:
            response = await staff_client.post(f"{TRANSACTIONS}/{sample_transaction.id}/return")

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "Returned"
        return_book.assert_awaited_once_with(sample_transaction.id, None)

    @pytest.mark.anyio
    async def test_double_return(self, staff_client: AsyncClient):
        with patch.object(
            BookTransactionService,
            "return_book",
            side_effect=PreconditionFailedError("Livro já foi devolvido"),
        ):
            response = await staff_client.post(f"{TRANSACTIONS}/{uuid.uuid4()}/return")

        assert response.status_code == 400
        assert response.json()["message"] == "Livro já foi devolvido"

    @pytest.mark.anyio
    async def test_list_pagination_envelope(self, staff_client: AsyncClient, sample_transaction):
        with patch.object(
            BookTransactionService,
            "list_transactions",
            return_value=([sample_transaction], 25),
        ) as list_transactions:
            response = await staff_client.get(
                TRANSACTIONS,
                params={"page": 2, "per_page": 10, "filter": "status:Borrowed:equals"},
            )

        assert response.status_code == 200
        body = response.json()
        assert body["meta"] == {
            "page": 2,
            "per_page": 10,
            "total_items": 25,
            "total_pages": 3,
            "items_on_page": 1,
        }
        filters = list_transactions.await_args.kwargs["filters"]
        assert filters[0].field == "status"
        assert filters[0].operator == FilterOperator.EQUALS

    @pytest.mark.anyio
    async def test_list_invalid_filter(self, staff_client: AsyncClient):
        with patch.object(
            BookTransactionService,
            "list_transactions",
            side_effect=InvalidFilterError(
                "Filtro inválido", errors={"secret": "Campo não encontrado na entidade"}
            ),
        ):
            response = await staff_client.get(TRANSACTIONS, params={"filter": "secret:x:equals"})

        assert response.status_code == 400
        assert response.json()["errors"] == {"secret": "Campo não encontrado na entidade"}

    @pytest.mark.anyio
    async def test_per_page_above_limit(self, staff_client: AsyncClient):
        response = await staff_client.get(TRANSACTIONS, params={"per_page": 1000})

        assert response.status_code == 422

    @pytest.mark.anyio
    async def test_delete_requires_admin(self, staff_client: AsyncClient):
        with patch.object(BookTransactionService, "delete") as delete:
            response = await staff_client.delete(f"{TRANSACTIONS}/{uuid.uuid4()}")

        assert response.status_code == 403
        delete.assert_not_awaited()

    @pytest.mark.anyio
    async def test_admin_can_delete(self, admin_client: AsyncClient):
        transaction_id = uuid.uuid4()

        with patch.object(BookTransactionService, "delete", return_value=None) as delete:
            response = await admin_client.delete(f"{TRANSACTIONS}/{transaction_id}")

        assert response.status_code == 200
        delete.assert_awaited_once_with(transaction_id)

    @pytest.mark.anyio
    async def test_sweep_overdue(self, admin_client: AsyncClient, sample_transaction):
        sample_transaction.status = TransactionStatus.OVERDUE

        with patch.object(
            BookTransactionService,
            "get_overdue_transactions",
            return_value=[sample_transaction],
        ):
            response = await admin_client.post("/api/v1/system/sweep-overdue")

        assert response.status_code == 200
        body = response.json()
        assert body["total_overdue"] == 1
        assert body["data"][0]["status"] == "Overdue"


class TestAuthEndpoints:
    """Testes para /api/v1/auth e para a autenticação Bearer."""

    @pytest.mark.anyio
    async def test_invalid_token(self, client: AsyncClient):
        response = await client.get(
            TRANSACTIONS,
            headers={"Authorization": "Bearer token-invalido"},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Token inválido ou expirado"

    @pytest.mark.anyio
    async def test_valid_token_resolves_user(self, client: AsyncClient, admin_user, admin_token):
        with patch.object(UserRepository, "get_by_id", return_value=admin_user):
            response = await client.get(
                "/api/v1/auth/me",
                headers={"Authorization": f"Bearer {admin_token}"},
            )

        assert response.status_code == 200
        assert response.json()["data"]["email"] == admin_user.email

    @pytest.mark.anyio
    async def test_login(self, client: AsyncClient, admin_user):
        admin_user.password_hash = hash_password("Senha@123")

        with patch.object(UserRepository, "get_by_email", return_value=admin_user):
            response = await client.post(
                "/api/v1/auth/login",
                json={"email": admin_user.email, "password": "Senha@123"},
            )

        assert response.status_code == 200
        token = response.json()["data"]["token"]
        assert token["token_type"] == "bearer"
        assert token["access_token"]

    @pytest.mark.anyio
    async def test_login_wrong_password(self, client: AsyncClient, admin_user):
        admin_user.password_hash = hash_password("Senha@123")

        with patch.object(UserRepository, "get_by_email", return_value=admin_user):
            response = await client.post(
                "/api/v1/auth/login",
                json={"email": admin_user.email, "password": "Errada@123"},
            )

        assert response.status_code == 401
        assert response.json()["message"] == "Email ou senha incorretos"
