"""
원장 서비스

거래 생성/수정/삭제. 잔액 변경은 AccountStore.apply_delta로만 한다.

각 작업은 하나의 SQLite 트랜잭션(어댑터 락 보유) 안에서 실행되므로
호출자는 작업 전 또는 작업 후 상태만 관찰한다.
도중에 예외가 나면 잔액, 거래 기록, 분개, 번호 카운터 모두 롤백된다.

사용 예시:
```python
db = SQLiteAdapter(":memory:")
await db.connect()
await init_schema(db)

ledger = LedgerService(db)
await ledger.accounts.ensure_accounts(settings.accounts)

tx = await ledger.create(IncomeInput(
    name="Daily sales",
    amount=Decimal("1000"),
    account_id="drawer",
    transaction_date=datetime(2026, 10, 19),
))
await ledger.edit(tx.transaction_id, ...)
await ledger.delete(tx.transaction_id)
```
"""

import dataclasses
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any
from uuid import uuid4

from adapters.db.sqlite_adapter import LockTimeoutError, SQLiteAdapter
from core.ledger.account_store import ENTRY_COLUMNS, AccountStore, row_to_entry
from core.ledger.effects import compute_effects, reverse_effects
from core.ledger.errors import (
    AccountNotFoundError,
    LedgerBusyError,
    TransactionNotFoundError,
    ValidationError,
)
from core.ledger.models import (
    BalanceDrift,
    CashTransaction,
    Effect,
    EntryRef,
    ExpenseInput,
    IncomeInput,
    LedgerEntry,
    LedgerSnapshot,
    TransactionInput,
    TransferInput,
    build_input,
)
from core.ledger.schema import TRANSACTION_NUMBER_COUNTER
from core.types import EntryKind, LedgerOperation
from core.utils.numbering import format_transaction_number
from core.utils.timezone import LOCAL_TZ, format_iso, now_utc, parse_datetime

logger = logging.getLogger(__name__)


TRANSACTION_COLUMNS = """
    seq, transaction_id, transaction_number, name, description, category,
    transaction_type, amount, account_id, transfer_to_account_id,
    transaction_date, created_at, updated_at
"""


def _row_to_transaction(row: tuple[Any, ...]) -> CashTransaction:
    details = build_input(
        row[6],
        name=row[3],
        description=row[4],
        category=row[5],
        amount=Decimal(row[7]),
        account_id=row[8],
        transfer_to_account_id=row[9],
        transaction_date=datetime.fromisoformat(row[10]),
    )
    return CashTransaction(
        transaction_id=row[1],
        transaction_number=row[2],
        details=details,
        created_at=datetime.fromisoformat(row[11]),
        updated_at=datetime.fromisoformat(row[12]) if row[12] else None,
        seq=row[0],
    )


def _clean_text(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class LedgerService:
    """원장 서비스

    Args:
        db: 연결된 SQLite 어댑터 (스키마 초기화 완료)
        accounts: 계정 저장소 (None이면 같은 db로 생성)
        minor_unit: 통화 최소 단위 (예: Decimal("0.01"))
        clock: 현재 시각 함수 (테스트 주입용)
        tz: 로컬 타임존 (naive 날짜 해석용)
    """

    def __init__(
        self,
        db: SQLiteAdapter,
        accounts: AccountStore | None = None,
        *,
        minor_unit: Decimal = Decimal("0.01"),
        clock: Callable[[], datetime] = now_utc,
        tz: timezone = LOCAL_TZ,
    ):
        self.db = db
        self.accounts = accounts or AccountStore(db)
        self.minor_unit = minor_unit
        self.clock = clock
        self.tz = tz

    # =====================================
    # 쓰기 작업
    # =====================================

    async def create(self, draft: TransactionInput) -> CashTransaction:
        """거래 생성

        검증 → 번호 발번 → 효과 적용 → 기록 저장.

        Args:
            draft: 거래 입력

        Returns:
            저장된 거래

        Raises:
            ValidationError: 입력 오류 (변경 없음)
            AccountNotFoundError: 적용 중 계정 누락 (롤백)
            LedgerBusyError: 락 대기 시간 초과
        """
        now = self.clock()
        transaction_id = str(uuid4())

        async with self._write("create"):
            details = self._normalize(draft)
            await self._check_accounts(details)
            transaction_number = await self._next_transaction_number()

            ref = EntryRef(
                operation=LedgerOperation.CREATE,
                kind=EntryKind.APPLY,
                ts=now,
                transaction_id=transaction_id,
                transaction_number=transaction_number,
            )
            await self._apply(compute_effects(details), ref)

            cursor = await self.db.execute(
                """
                INSERT INTO cash_transaction (
                    transaction_id, transaction_number, name, description, category,
                    transaction_type, amount, account_id, transfer_to_account_id,
                    transaction_date, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    transaction_id,
                    transaction_number,
                    *self._detail_params(details),
                    format_iso(now),
                ),
            )
            seq = cursor.lastrowid or 0

        transaction = CashTransaction(
            transaction_id=transaction_id,
            transaction_number=transaction_number,
            details=details,
            created_at=now,
            seq=seq,
        )
        logger.info(
            f"거래 생성: {transaction_number} {details.transaction_type.value} "
            f"{details.amount} ({', '.join(details.account_ids())})"
        )
        return transaction

    async def edit(self, transaction_id: str, draft: TransactionInput) -> CashTransaction:
        """거래 수정 (전체 교체)

        기존 기록의 효과를 기존 계정에서 취소한 뒤 새 입력의 효과를
        새 계정에 적용한다. 유형과 계정이 바뀌어도 같은 절차를 따른다.
        id, 거래 번호, 생성 시각은 유지된다.

        Raises:
            TransactionNotFoundError: 거래 없음
            ValidationError: 입력 오류 (변경 없음)
            AccountNotFoundError: 적용 중 계정 누락 (롤백)
            LedgerBusyError: 락 대기 시간 초과
        """
        now = self.clock()

        async with self._write("edit"):
            old = await self._fetch_transaction(transaction_id)
            details = self._normalize(draft)
            await self._check_accounts(details)

            await self._apply(
                reverse_effects(compute_effects(old.details)),
                EntryRef(
                    operation=LedgerOperation.EDIT,
                    kind=EntryKind.REVERSE,
                    ts=now,
                    transaction_id=old.transaction_id,
                    transaction_number=old.transaction_number,
                ),
            )
            await self._apply(
                compute_effects(details),
                EntryRef(
                    operation=LedgerOperation.EDIT,
                    kind=EntryKind.APPLY,
                    ts=now,
                    transaction_id=old.transaction_id,
                    transaction_number=old.transaction_number,
                ),
            )

            await self.db.execute(
                """
                UPDATE cash_transaction SET
                    name = ?, description = ?, category = ?,
                    transaction_type = ?, amount = ?,
                    account_id = ?, transfer_to_account_id = ?,
                    transaction_date = ?, updated_at = ?
                WHERE transaction_id = ?
                """,
                (*self._detail_params(details), format_iso(now), transaction_id),
            )

        transaction = dataclasses.replace(old, details=details, updated_at=now)
        logger.info(
            f"거래 수정: {old.transaction_number} "
            f"{old.transaction_type.value} {old.amount} → "
            f"{details.transaction_type.value} {details.amount}"
        )
        return transaction

    async def delete(self, transaction_id: str) -> CashTransaction:
        """거래 삭제

        효과를 취소하고 기록을 제거한다. 거래 번호는 재사용되지 않는다.

        Returns:
            삭제된 거래

        Raises:
            TransactionNotFoundError: 거래 없음
            AccountNotFoundError: 취소 중 계정 누락 (롤백)
            LedgerBusyError: 락 대기 시간 초과
        """
        now = self.clock()

        async with self._write("delete"):
            old = await self._fetch_transaction(transaction_id)

            await self._apply(
                reverse_effects(compute_effects(old.details)),
                EntryRef(
                    operation=LedgerOperation.DELETE,
                    kind=EntryKind.REVERSE,
                    ts=now,
                    transaction_id=old.transaction_id,
                    transaction_number=old.transaction_number,
                ),
            )
            await self.db.execute(
                "DELETE FROM cash_transaction WHERE transaction_id = ?",
                (transaction_id,),
            )

        logger.info(f"거래 삭제: {old.transaction_number}")
        return old

    # =====================================
    # 조회
    # =====================================

    async def get(self, transaction_id: str) -> CashTransaction:
        """거래 조회

        Raises:
            TransactionNotFoundError: 거래 없음
        """
        async with self.db.reading():
            return await self._fetch_transaction(transaction_id)

    async def list_transactions(self) -> list[CashTransaction]:
        """전체 거래 (입력 순)"""
        async with self.db.reading():
            return await self._fetch_transactions()

    async def history(self, transaction_id: str) -> list[LedgerEntry]:
        """거래 하나의 분개 이력

        삭제된 거래도 분개는 남아 있으므로 조회 가능.

        Raises:
            TransactionNotFoundError: 분개가 하나도 없음
        """
        async with self.db.reading():
            rows = await self.db.fetchall(
                f"""
                SELECT {ENTRY_COLUMNS}
                FROM ledger_entry
                WHERE transaction_id = ?
                ORDER BY seq
                """,
                (transaction_id,),
            )

        if not rows:
            raise TransactionNotFoundError(transaction_id)
        return [row_to_entry(row) for row in rows]

    async def snapshot(self) -> LedgerSnapshot:
        """계정 + 거래 일관 스냅샷 (하나의 락 구간)"""
        async with self.db.reading():
            accounts = await self.accounts._fetch_accounts()
            transactions = await self._fetch_transactions()
        return LedgerSnapshot(accounts=accounts, transactions=transactions)

    async def verify(self) -> list[BalanceDrift]:
        """잔액 ↔ 분개 합계 검증"""
        return await self.accounts.find_drift()

    # =====================================
    # 내부
    # =====================================

    @asynccontextmanager
    async def _write(self, operation: str) -> AsyncIterator[None]:
        """쓰기 트랜잭션

        락 대기 초과는 LedgerBusyError로 변환. 실패 시 어댑터가 롤백한다.
        """
        try:
            async with self.db.transaction():
                yield
        except LockTimeoutError as e:
            logger.error(f"{operation} 실패 (락 대기 초과): {e}")
            raise LedgerBusyError(str(e)) from e
        except (ValidationError, TransactionNotFoundError) as e:
            logger.warning(f"{operation} 거부: {e}")
            raise
        except AccountNotFoundError as e:
            logger.error(f"{operation} 롤백: {e}")
            raise
        except Exception as e:
            logger.error(f"{operation} 롤백: {type(e).__name__}: {e}")
            raise

    def _normalize(self, draft: TransactionInput) -> TransactionInput:
        """입력 검증 + 정규화 (DB 접근 없음)

        Raises:
            ValidationError: 입력 오류
        """
        if not isinstance(draft, (IncomeInput, ExpenseInput, TransferInput)):
            raise ValidationError(f"Unsupported transaction input: {type(draft).__name__}")

        name = _clean_text(draft.name)
        if not name:
            raise ValidationError("Transaction name is required")

        if not draft.account_id:
            raise ValidationError("account_id is required")

        amount = self._validate_amount(draft.amount)

        if isinstance(draft, TransferInput) and draft.to_account_id == draft.account_id:
            raise ValidationError("Transfer source and destination must differ")

        try:
            transaction_date = parse_datetime(draft.transaction_date, self.tz)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid transaction_date: {draft.transaction_date!r}") from e

        # 밀리초 정밀도로 저장
        transaction_date = transaction_date.replace(
            microsecond=transaction_date.microsecond // 1000 * 1000
        )

        return dataclasses.replace(
            draft,
            name=name,
            description=_clean_text(draft.description),
            category=_clean_text(draft.category),
            amount=amount,
            transaction_date=transaction_date,
        )

    def _validate_amount(self, value: Any) -> Decimal:
        try:
            amount = value if isinstance(value, Decimal) else Decimal(str(value))
        except InvalidOperation as e:
            raise ValidationError(f"Invalid amount: {value!r}") from e

        if not amount.is_finite() or amount <= 0:
            raise ValidationError(f"Amount must be positive: {value}")

        try:
            exact = amount == amount.quantize(self.minor_unit)
        except InvalidOperation as e:
            raise ValidationError(f"Invalid amount: {value}") from e
        if not exact:
            raise ValidationError(f"Amount {amount} has more precision than {self.minor_unit}")

        # 지수 표기 제거, 최소 단위 자릿수로 고정 ("1E+3" → "1000.00")
        return amount.quantize(self.minor_unit)

    async def _check_accounts(self, details: TransactionInput) -> None:
        """참조 계정 존재 확인 (락 보유 상태)"""
        referenced = details.account_ids()
        existing = await self.accounts._existing_ids(referenced)
        missing = [a for a in referenced if a not in existing]
        if missing:
            raise ValidationError(f"Unknown account: {', '.join(missing)}")

    async def _apply(self, effects: list[Effect], ref: EntryRef) -> None:
        for e in effects:
            await self.accounts.apply_delta(e.account_id, e.delta, ref=ref)

    async def _next_transaction_number(self) -> str:
        await self.db.execute(
            "UPDATE ledger_counter SET value = value + 1 WHERE name = ?",
            (TRANSACTION_NUMBER_COUNTER,),
        )
        row = await self.db.fetchone(
            "SELECT value FROM ledger_counter WHERE name = ?",
            (TRANSACTION_NUMBER_COUNTER,),
        )
        if row is None:
            raise RuntimeError("Transaction number counter missing (schema not initialized)")
        return format_transaction_number(row[0])

    @staticmethod
    def _detail_params(details: TransactionInput) -> tuple[Any, ...]:
        return (
            details.name,
            details.description,
            details.category,
            details.transaction_type.value,
            str(details.amount),
            details.account_id,
            details.transfer_to_account_id,
            format_iso(details.transaction_date),
        )

    async def _fetch_transaction(self, transaction_id: str) -> CashTransaction:
        row = await self.db.fetchone(
            f"SELECT {TRANSACTION_COLUMNS} FROM cash_transaction WHERE transaction_id = ?",
            (transaction_id,),
        )
        if row is None:
            raise TransactionNotFoundError(transaction_id)
        return _row_to_transaction(row)

    async def _fetch_transactions(self) -> list[CashTransaction]:
        rows = await self.db.fetchall(
            f"SELECT {TRANSACTION_COLUMNS} FROM cash_transaction ORDER BY seq"
        )
        return [_row_to_transaction(row) for row in rows]
