"""
Testes para o cálculo e o registro de multas por atraso.
"""

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from library_api.core.exceptions import NotFoundError, PreconditionFailedError
from library_api.models.charge import Charge
from library_api.schemas.charge import (
    MAX_DAILY_LATE_FEE,
    MAX_DAYS_LATE,
    ChargeCreate,
    ChargeUpdate,
)
from library_api.services.charge import ChargeService


class TestCalculateTotal:
    """Testes para ChargeService.calculate_total."""

    @pytest.mark.parametrize(
        "days_late, fee, expected",
        [
            (3, Decimal("2.50"), Decimal("7.50")),
            (0, Decimal("5.00"), Decimal("0.00")),
            (10, Decimal("0"), Decimal("0.00")),
            (2, 0.1, Decimal("0.20")),
            (1, "1.005", Decimal("1.01")),
            (7, 3, Decimal("21.00")),
        ],
    )
    def test_total(self, days_late, fee, expected):
        assert ChargeService.calculate_total(days_late, fee) == expected

    def test_total_has_two_decimal_places(self):
        total = ChargeService.calculate_total(4, Decimal("1.5"))

        assert total.as_tuple().exponent == -2
        assert str(total) == "6.00"

    def test_total_is_product_for_many_values(self):
        for days in range(0, 40, 3):
            for cents in (0, 1, 99, 250, 1000):
                fee = Decimal(cents) / 100
                assert ChargeService.calculate_total(days, fee) == (days * fee).quantize(
                    Decimal("0.01")
                )

    @pytest.mark.parametrize("days_late", [-1, True, 1.5, "3", None])
    def test_invalid_days_late(self, days_late):
        with pytest.raises(PreconditionFailedError) as exc_info:
            ChargeService.calculate_total(days_late, Decimal("1.00"))

        assert "days_late" in exc_info.value.errors

    @pytest.mark.parametrize("fee", [Decimal("-0.01"), -1, "abc", Decimal("NaN"), float("inf")])
    def test_invalid_daily_late_fee(self, fee):
        with pytest.raises(PreconditionFailedError) as exc_info:
            ChargeService.calculate_total(1, fee)

        assert "daily_late_fee" in exc_info.value.errors

    def test_largest_accepted_total_fits_column(self):
        total = ChargeService.calculate_total(MAX_DAYS_LATE, MAX_DAILY_LATE_FEE)

        assert total == Decimal("3649999635.00")
        assert len(total.as_tuple().digits) <= 12

    def test_days_late_above_limit(self):
        with pytest.raises(PreconditionFailedError) as exc_info:
            ChargeService.calculate_total(MAX_DAYS_LATE + 1, Decimal("1.00"))

        assert "days_late" in exc_info.value.errors

    def test_daily_late_fee_above_limit(self):
        with pytest.raises(PreconditionFailedError) as exc_info:
            ChargeService.calculate_total(1, MAX_DAILY_LATE_FEE + Decimal("0.01"))

        assert "daily_late_fee" in exc_info.value.errors


class TestChargeSchemas:
    """Limites de entrada das multas."""

    def test_create_rejects_huge_days_late(self):
        with pytest.raises(ValidationError):
            ChargeCreate(
                book_transaction_id=uuid.uuid4(),
                days_late=10**12,
                daily_late_fee=Decimal("2.50"),
            )

    def test_create_rejects_fee_above_limit(self):
        with pytest.raises(ValidationError):
            ChargeCreate(
                book_transaction_id=uuid.uuid4(),
                days_late=1,
                daily_late_fee=Decimal("100000.00"),
            )

    def test_update_rejects_huge_days_late(self):
        with pytest.raises(ValidationError):
            ChargeUpdate(days_late=MAX_DAYS_LATE + 1)

    def test_create_accepts_limits(self):
        data = ChargeCreate(
            book_transaction_id=uuid.uuid4(),
            days_late=MAX_DAYS_LATE,
            daily_late_fee=MAX_DAILY_LATE_FEE,
        )

        assert data.days_late == MAX_DAYS_LATE


class TestDaysLate:
    """Testes para ChargeService.days_late_for."""

    def test_active_transaction_counts_until_given_moment(self, sample_transaction):
        now = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)
        sample_transaction.due_date = now - timedelta(days=3, hours=5)

        assert ChargeService.days_late_for(sample_transaction, at=now) == 3

    def test_returned_transaction_uses_return_at(self, sample_transaction):
        due = datetime(2024, 3, 1, tzinfo=timezone.utc)
        sample_transaction.due_date = due
        sample_transaction.return_at = due + timedelta(days=2)

        assert ChargeService.days_late_for(sample_transaction, at=due + timedelta(days=30)) == 2

    def test_returned_on_time_is_zero(self, sample_transaction):
        due = datetime(2024, 3, 1, tzinfo=timezone.utc)
        sample_transaction.due_date = due
        sample_transaction.return_at = due - timedelta(days=1)

        assert ChargeService.days_late_for(sample_transaction) == 0


class TestChargeCrud:
    """Testes para create/update/get de ChargeService."""

    @pytest.mark.anyio
    async def test_create_computes_total(self, mock_db, admin_user, sample_transaction):
        service = ChargeService(mock_db)
        data = ChargeCreate(
            book_transaction_id=sample_transaction.id,
            days_late=3,
            daily_late_fee=Decimal("2.50"),
        )
        created = Charge(id=uuid.uuid4(), total=Decimal("7.50"))

        with patch.object(
            service.transaction_repo, "get_by_id", return_value=sample_transaction
        ), patch.object(service.charge_repo, "create", return_value=created) as create:
            result = await service.create(admin_user, data)

        assert result is created
        create.assert_awaited_once_with(
            book_transaction_id=sample_transaction.id,
            days_late=3,
            daily_late_fee=Decimal("2.50"),
            total=Decimal("7.50"),
            user_id=admin_user.id,
        )
        mock_db.commit.assert_awaited_once()

    @pytest.mark.anyio
    async def test_create_derives_days_late(self, mock_db, admin_user, sample_transaction):
        service = ChargeService(mock_db)
        sample_transaction.due_date = datetime.now(timezone.utc) - timedelta(days=4)
        data = ChargeCreate(
            book_transaction_id=sample_transaction.id,
            daily_late_fee=Decimal("1.00"),
        )

        with patch.object(
            service.transaction_repo, "get_by_id", return_value=sample_transaction
        ), patch.object(
            service.charge_repo, "create", return_value=Charge(id=uuid.uuid4())
        ) as create:
            await service.create(admin_user, data)

        kwargs = create.await_args.kwargs
        assert kwargs["days_late"] == 4
        assert kwargs["total"] == Decimal("4.00")

    @pytest.mark.anyio
    async def test_create_missing_transaction(self, mock_db, admin_user):
        service = ChargeService(mock_db)
        data = ChargeCreate(book_transaction_id=uuid.uuid4(), daily_late_fee=Decimal("1.00"))

        with patch.object(service.transaction_repo, "get_by_id", return_value=None):
            with pytest.raises(NotFoundError, match="Empréstimo"):
                await service.create(admin_user, data)

        mock_db.rollback.assert_awaited_once()

    @pytest.mark.anyio
    async def test_partial_update_recomputes_total(self, mock_db):
        service = ChargeService(mock_db)
        charge = Charge(
            id=uuid.uuid4(),
            days_late=2,
            daily_late_fee=Decimal("1.50"),
            total=Decimal("3.00"),
        )

        with patch.object(service.charge_repo, "get_by_id", return_value=charge), patch.object(
            service.charge_repo, "update", return_value=charge
        ) as update:
            await service.update(charge.id, ChargeUpdate(days_late=5))

        update.assert_awaited_once_with(
            charge,
            days_late=5,
            daily_late_fee=Decimal("1.50"),
            total=Decimal("7.50"),
        )

    @pytest.mark.anyio
    async def test_get_not_found(self, mock_db):
        service = ChargeService(mock_db)

        with patch.object(service.charge_repo, "get_by_id", return_value=None):
            with pytest.raises(NotFoundError, match="Cobrança"):
                await service.get(uuid.uuid4())
