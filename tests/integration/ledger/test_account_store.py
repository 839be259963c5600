"""AccountStore 통합 테스트"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import AccountSeed
from core.ledger.account_store import AccountStore
from core.ledger.errors import AccountNotFoundError
from core.ledger.models import EntryRef
from core.types import AccountType, EntryKind, LedgerOperation

REF = EntryRef(
    operation=LedgerOperation.CREATE,
    kind=EntryKind.APPLY,
    ts=datetime(2026, 10, 19, tzinfo=timezone.utc),
    transaction_id="tx-1",
    transaction_number="TXN-000001",
)


class TestEnsureAccounts:
    """ensure_accounts 테스트"""

    @pytest.mark.asyncio
    async def test_creates_accounts_in_order(self, account_store: AccountStore) -> None:
        """초기 계정 생성 (잔액 0)"""
        accounts = await account_store.list_accounts()

        assert [a.account_id for a in accounts] == ["drawer", "cash-in-hand", "business"]
        assert all(a.balance == 0 for a in accounts)
        assert accounts[1].account_type == AccountType.CASH_IN_HAND

    @pytest.mark.asyncio
    async def test_idempotent(self, account_store: AccountStore) -> None:
        """이미 있는 계정은 무시"""
        created = await account_store.ensure_accounts(
            [AccountSeed("drawer", "Renamed", AccountType.OTHER, Decimal("999"))]
        )

        assert created == []
        account = await account_store.get_account("drawer")
        assert account.name == "Cash Drawer"
        assert account.balance == 0

    @pytest.mark.asyncio
    async def test_opening_balance_journaled(self, account_store: AccountStore) -> None:
        """기초 잔액은 OPENING 분개로 기록"""
        created = await account_store.ensure_accounts(
            [AccountSeed("safe", "Safe", AccountType.OTHER, Decimal("500.00"))]
        )

        assert created == ["safe"]
        assert await account_store.get_balance("safe") == Decimal("500.00")

        entries = await account_store.get_entries("safe")
        assert len(entries) == 1
        assert entries[0].operation == LedgerOperation.OPENING
        assert entries[0].kind == EntryKind.OPENING
        assert entries[0].transaction_id is None
        assert await account_store.find_drift() == []


class TestApplyDelta:
    """apply_delta 테스트"""

    @pytest.mark.asyncio
    async def test_requires_transaction(self, account_store: AccountStore) -> None:
        """트랜잭션 밖 호출 금지"""
        with pytest.raises(RuntimeError):
            await account_store.apply_delta("drawer", Decimal("1"), ref=REF)

    @pytest.mark.asyncio
    async def test_updates_balance_and_journal(
        self,
        db: SQLiteAdapter,
        account_store: AccountStore,
    ) -> None:
        """잔액 변경 + 분개 기록"""
        async with db.transaction():
            first = await account_store.apply_delta("drawer", Decimal("100.25"), ref=REF)
            second = await account_store.apply_delta("drawer", Decimal("-0.25"), ref=REF)

        assert first == Decimal("100.25")
        assert second == Decimal("100.00")
        assert await account_store.get_balance("drawer") == Decimal("100.00")

        entries = await account_store.get_entries("drawer")
        assert [e.delta for e in entries] == [Decimal("100.25"), Decimal("-0.25")]
        assert entries[0].transaction_number == "TXN-000001"
        assert entries[0].seq < entries[1].seq

    @pytest.mark.asyncio
    async def test_unknown_account(self, db: SQLiteAdapter, account_store: AccountStore) -> None:
        """없는 계정 → AccountNotFoundError, 같은 트랜잭션의 변경도 롤백"""
        with pytest.raises(AccountNotFoundError) as exc_info:
            async with db.transaction():
                await account_store.apply_delta("drawer", Decimal("50"), ref=REF)
                await account_store.apply_delta("ghost", Decimal("50"), ref=REF)

        assert exc_info.value.account_id == "ghost"
        assert await account_store.get_balance("drawer") == 0
        assert await account_store.get_entries("drawer") == []


class TestQueries:
    """조회 테스트"""

    @pytest.mark.asyncio
    async def test_get_balance_unknown(self, account_store: AccountStore) -> None:
        with pytest.raises(AccountNotFoundError):
            await account_store.get_balance("ghost")

    @pytest.mark.asyncio
    async def test_get_account_unknown(self, account_store: AccountStore) -> None:
        with pytest.raises(AccountNotFoundError):
            await account_store.get_account("ghost")

    @pytest.mark.asyncio
    async def test_total_balance(self, db: SQLiteAdapter, account_store: AccountStore) -> None:
        async with db.transaction():
            await account_store.apply_delta("drawer", Decimal("10"), ref=REF)
            await account_store.apply_delta("business", Decimal("5.5"), ref=REF)

        assert await account_store.total_balance() == Decimal("15.5")


class TestDrift:
    """find_drift 테스트"""

    @pytest.mark.asyncio
    async def test_no_drift_after_deltas(
        self,
        db: SQLiteAdapter,
        account_store: AccountStore,
    ) -> None:
        async with db.transaction():
            await account_store.apply_delta("drawer", Decimal("10"), ref=REF)

        assert await account_store.fold_journal() == {"drawer": Decimal("10")}
        assert await account_store.find_drift() == []

    @pytest.mark.asyncio
    async def test_detects_tampered_balance(
        self,
        db: SQLiteAdapter,
        account_store: AccountStore,
    ) -> None:
        """분개 없이 잔액을 직접 바꾸면 불일치"""
        await db.execute("UPDATE account SET balance = '42' WHERE account_id = 'business'")
        await db.commit()

        drifts = await account_store.find_drift()

        assert len(drifts) == 1
        assert drifts[0].account_id == "business"
        assert drifts[0].stored == Decimal("42")
        assert drifts[0].expected == Decimal("0")
