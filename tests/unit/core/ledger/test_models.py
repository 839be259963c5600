"""
core/ledger/models.py 테스트

거래 입력 태그 변형, build_input, 직렬화
"""

from dataclasses import FrozenInstanceError
from datetime import datetime
from decimal import Decimal

import pytest

from core.ledger.models import (
    Account,
    BalanceDrift,
    CashTransaction,
    ExpenseInput,
    IncomeInput,
    TransferInput,
    build_input,
)
from core.types import AccountType, TransactionType
from core.utils.timezone import LOCAL_TZ

DAY = datetime(2026, 10, 19, 9, 30, tzinfo=LOCAL_TZ)


class TestTransactionInput:
    """유형별 입력 테스트"""

    def test_type_tag(self) -> None:
        assert IncomeInput.transaction_type == TransactionType.INCOME
        assert ExpenseInput.transaction_type == TransactionType.EXPENSE
        assert TransferInput.transaction_type == TransactionType.TRANSFER

    def test_non_transfer_has_no_destination(self) -> None:
        details = IncomeInput(name="A", amount=Decimal("1"), account_id="drawer", transaction_date=DAY)

        assert details.transfer_to_account_id is None
        assert details.account_ids() == ("drawer",)

    def test_transfer_destination(self) -> None:
        details = TransferInput(
            name="Move",
            amount=Decimal("1"),
            account_id="drawer",
            to_account_id="business",
            transaction_date=DAY,
        )

        assert details.transfer_to_account_id == "business"
        assert details.account_ids() == ("drawer", "business")

    def test_frozen(self) -> None:
        details = ExpenseInput(name="A", amount=Decimal("1"), account_id="drawer", transaction_date=DAY)

        with pytest.raises(FrozenInstanceError):
            details.amount = Decimal("2")  # type: ignore[misc]


class TestBuildInput:
    """build_input 테스트"""

    def test_build_each_type(self) -> None:
        common = {"name": "A", "amount": Decimal("5"), "account_id": "drawer", "transaction_date": DAY}

        assert isinstance(build_input("income", **common), IncomeInput)
        assert isinstance(build_input(TransactionType.EXPENSE, **common), ExpenseInput)
        transfer = build_input("transfer", transfer_to_account_id="business", **common)
        assert isinstance(transfer, TransferInput)
        assert transfer.to_account_id == "business"

    def test_transfer_requires_destination(self) -> None:
        with pytest.raises(ValueError, match="transfer requires"):
            build_input("transfer", name="A", amount=Decimal("5"), account_id="drawer", transaction_date=DAY)

    def test_destination_only_for_transfer(self) -> None:
        with pytest.raises(ValueError, match="only allowed for transfers"):
            build_input(
                "income",
                name="A",
                amount=Decimal("5"),
                account_id="drawer",
                transaction_date=DAY,
                transfer_to_account_id="business",
            )

    def test_unknown_type(self) -> None:
        with pytest.raises(ValueError):
            build_input("refund", name="A", amount=Decimal("5"), account_id="drawer", transaction_date=DAY)


class TestSerialization:
    """to_dict 테스트"""

    def test_account_to_dict(self) -> None:
        account = Account("drawer", "Cash Drawer", AccountType.DRAWER, Decimal("10.50"))

        assert account.to_dict() == {
            "account_id": "drawer",
            "name": "Cash Drawer",
            "account_type": "drawer",
            "balance": "10.50",
            "updated_at": None,
        }

    def test_transaction_to_dict(self) -> None:
        tx = CashTransaction(
            transaction_id="t-1",
            transaction_number="TXN-000001",
            details=TransferInput(
                name="Deposit",
                amount=Decimal("400.00"),
                account_id="drawer",
                to_account_id="business",
                transaction_date=DAY,
                category="Bank Deposit",
            ),
            created_at=DAY,
        )

        data = tx.to_dict()

        assert data["id"] == "t-1"
        assert data["type"] == "transfer"
        assert data["amount"] == "400.00"
        assert data["transfer_to_account_id"] == "business"
        assert data["transaction_date"] == "2026-10-19T09:30:00.000+05:30"
        assert data["updated_at"] is None


class TestBalanceDrift:
    """BalanceDrift 테스트"""

    def test_difference(self) -> None:
        drift = BalanceDrift("drawer", stored=Decimal("100"), expected=Decimal("80"))

        assert drift.difference == Decimal("20")
