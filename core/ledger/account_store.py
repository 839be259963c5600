"""
계정 저장소

계정 잔액의 유일한 소유자. 잔액 변경 경로는 apply_delta 하나뿐이며
모든 변경은 ledger_entry에 분개로 함께 기록된다.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import Decimal
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from core.ledger.errors import AccountNotFoundError
from core.ledger.models import Account, BalanceDrift, EntryRef, LedgerEntry
from core.types import AccountType, EntryKind, LedgerOperation
from core.utils.timezone import format_iso, now_utc

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter
    from core.config.loader import AccountSeed

logger = logging.getLogger(__name__)


def _row_to_account(row: tuple[Any, ...]) -> Account:
    return Account(
        account_id=row[0],
        name=row[1],
        account_type=AccountType(row[2]),
        balance=Decimal(row[3]),
        updated_at=row[4],
    )


def row_to_entry(row: tuple[Any, ...]) -> LedgerEntry:
    return LedgerEntry(
        seq=row[0],
        entry_id=row[1],
        transaction_id=row[2],
        transaction_number=row[3],
        operation=LedgerOperation(row[4]),
        kind=EntryKind(row[5]),
        account_id=row[6],
        delta=Decimal(row[7]),
        ts=row[8],
    )


ENTRY_COLUMNS = """
    seq, entry_id, transaction_id, transaction_number,
    operation, kind, account_id, delta, ts
"""


class AccountStore:
    """계정 저장소

    공개 조회 메서드는 어댑터의 읽기 락을 잡는다.
    `_`로 시작하는 메서드와 apply_delta는 호출자의 트랜잭션 안에서만 호출한다.

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    # =====================================
    # 변경
    # =====================================

    async def apply_delta(
        self,
        account_id: str,
        delta: Decimal,
        *,
        ref: EntryRef,
    ) -> Decimal:
        """계정 잔액에 delta 적용 + 분개 기록

        Args:
            account_id: 계정 ID
            delta: 부호 있는 잔액 변화
            ref: 분개 출처 정보

        Returns:
            적용 후 잔액

        Raises:
            AccountNotFoundError: 계정이 없음 (호출자의 트랜잭션은 롤백되어야 함)
            RuntimeError: 트랜잭션 밖에서 호출
        """
        if not self.db.in_transaction:
            raise RuntimeError("apply_delta must run inside a ledger transaction")

        current = await self._fetch_balance(account_id)
        new_balance = current + delta
        ts = format_iso(ref.ts)

        await self.db.execute(
            """
            UPDATE account SET balance = ?, updated_at = ?
            WHERE account_id = ?
            """,
            (str(new_balance), ts, account_id),
        )

        await self.db.execute(
            """
            INSERT INTO ledger_entry (
                entry_id, transaction_id, transaction_number,
                operation, kind, account_id, delta, ts
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                str(uuid4()),
                ref.transaction_id,
                ref.transaction_number,
                ref.operation.value,
                ref.kind.value,
                account_id,
                str(delta),
                ts,
            ),
        )

        logger.debug(
            f"잔액 변경: {account_id} {current} → {new_balance} "
            f"({ref.operation.value}/{ref.kind.value} {ref.transaction_number or '-'})"
        )
        return new_balance

    async def ensure_accounts(self, seeds: Iterable[AccountSeed]) -> list[str]:
        """초기 계정 생성 (멱등)

        이미 있는 계정은 건드리지 않는다. 새 계정의 기초 잔액은
        OPENING 분개로 기록한다.

        Returns:
            새로 생성된 account_id 목록
        """
        created: list[str] = []
        now = now_utc()
        ts = format_iso(now)

        async with self.db.transaction():
            for seed in seeds:
                cursor = await self.db.execute(
                    """
                    INSERT OR IGNORE INTO account (
                        account_id, name, account_type, balance, created_at, updated_at
                    ) VALUES (?, ?, ?, '0', ?, ?)
                    """,
                    (seed.account_id, seed.name, seed.account_type.value, ts, ts),
                )
                if cursor.rowcount != 1:
                    continue

                created.append(seed.account_id)
                if seed.opening_balance != 0:
                    await self.apply_delta(
                        seed.account_id,
                        seed.opening_balance,
                        ref=EntryRef(
                            operation=LedgerOperation.OPENING,
                            kind=EntryKind.OPENING,
                            ts=now,
                        ),
                    )

        if created:
            logger.info(f"계정 생성: {', '.join(created)}")
        return created

    # =====================================
    # 조회 (락 보유 상태에서 사용)
    # =====================================

    async def _fetch_balance(self, account_id: str) -> Decimal:
        row = await self.db.fetchone(
            "SELECT balance FROM account WHERE account_id = ?",
            (account_id,),
        )
        if row is None:
            raise AccountNotFoundError(account_id)
        return Decimal(row[0])

    async def _fetch_account(self, account_id: str) -> Account | None:
        row = await self.db.fetchone(
            """
            SELECT account_id, name, account_type, balance, updated_at
            FROM account WHERE account_id = ?
            """,
            (account_id,),
        )
        return _row_to_account(row) if row else None

    async def _fetch_accounts(self) -> list[Account]:
        rows = await self.db.fetchall(
            """
            SELECT account_id, name, account_type, balance, updated_at
            FROM account
            ORDER BY created_at, rowid
            """
        )
        return [_row_to_account(row) for row in rows]

    async def _existing_ids(self, account_ids: Iterable[str]) -> set[str]:
        """주어진 ID 중 존재하는 계정 ID"""
        ids = list(dict.fromkeys(account_ids))
        if not ids:
            return set()
        placeholders = ", ".join("?" for _ in ids)
        rows = await self.db.fetchall(
            f"SELECT account_id FROM account WHERE account_id IN ({placeholders})",
            tuple(ids),
        )
        return {row[0] for row in rows}

    async def _fold_journal(self) -> dict[str, Decimal]:
        """분개 합계로 계정별 잔액 재계산"""
        rows = await self.db.fetchall("SELECT account_id, delta FROM ledger_entry")
        totals: dict[str, Decimal] = {}
        for account_id, delta in rows:
            totals[account_id] = totals.get(account_id, Decimal("0")) + Decimal(delta)
        return totals

    # =====================================
    # 공개 조회
    # =====================================

    async def get_balance(self, account_id: str) -> Decimal:
        """계정 잔액 조회

        Raises:
            AccountNotFoundError: 계정이 없음
        """
        async with self.db.reading():
            return await self._fetch_balance(account_id)

    async def get_account(self, account_id: str) -> Account:
        """계정 조회

        Raises:
            AccountNotFoundError: 계정이 없음
        """
        async with self.db.reading():
            account = await self._fetch_account(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    async def list_accounts(self) -> list[Account]:
        """계정 목록 (생성 순)"""
        async with self.db.reading():
            return await self._fetch_accounts()

    async def total_balance(self) -> Decimal:
        """전체 계정 잔액 합계"""
        accounts = await self.list_accounts()
        return sum((a.balance for a in accounts), Decimal("0"))

    async def get_entries(self, account_id: str) -> list[LedgerEntry]:
        """계정별 분개 (기록 순)

        Raises:
            AccountNotFoundError: 계정이 없음
        """
        async with self.db.reading():
            if await self._fetch_account(account_id) is None:
                raise AccountNotFoundError(account_id)
            rows = await self.db.fetchall(
                f"""
                SELECT {ENTRY_COLUMNS}
                FROM ledger_entry
                WHERE account_id = ?
                ORDER BY seq
                """,
                (account_id,),
            )
        return [row_to_entry(row) for row in rows]

    async def fold_journal(self) -> dict[str, Decimal]:
        """분개 합계 기준 계정별 잔액"""
        async with self.db.reading():
            return await self._fold_journal()

    async def find_drift(self) -> list[BalanceDrift]:
        """저장된 잔액과 분개 합계 비교

        Returns:
            불일치 계정 목록 (일치하면 빈 목록)
        """
        async with self.db.reading():
            accounts = await self._fetch_accounts()
            folded = await self._fold_journal()

        drifts = []
        for account in accounts:
            expected = folded.get(account.account_id, Decimal("0"))
            if account.balance != expected:
                drifts.append(
                    BalanceDrift(
                        account_id=account.account_id,
                        stored=account.balance,
                        expected=expected,
                    )
                )

        if drifts:
            logger.warning(f"잔액 불일치 {len(drifts)}건: {[d.account_id for d in drifts]}")
        return drifts
